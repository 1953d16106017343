"""
Editor configuration.

Defaults mirror the behaviour users expect from the web version of the
annotator; any of them can be overridden from ``config.json`` in the
per-user config directory.
"""
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from inkstamp.utils.resource_loader import get_config_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


@dataclass
class EditorConfig:
    """Tunable constants for the editor session, compositor and UI."""

    # Intake
    max_upload_bytes: int = 10 * 1024 * 1024

    # Zoom
    default_scale: float = 1.5
    min_scale: float = 0.5
    max_scale: float = 3.0
    scale_step: float = 0.1

    # Text annotations
    default_text: str = "Double-click to edit"
    default_font_size: float = 16.0
    default_color: str = "#000000"
    font_name: str = "helv"
    text_baseline_ratio: float = 0.8  # share of the font size above the baseline

    # Signatures
    signature_width: int = 400
    signature_height: int = 200
    signature_line_width: float = 2.0
    signature_image_scale: float = 0.5
    signature_format: str = "paths"  # "paths" or "image"

    # Export
    export_filename: str = "annotated.pdf"

    # History; None keeps every snapshot for the session
    history_limit: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration to a JSON-serialisable dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """
        Create a configuration from a dictionary of overrides.

        Unknown keys are ignored with a warning so an old config file never
        prevents the application from starting.
        """
        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in data.items():
            if key in known:
                overrides[key] = value
            else:
                logger.warning(f"Ignoring unknown config key: {key}")
        return cls(**overrides)

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "EditorConfig":
        """
        Load configuration overrides from a JSON file.

        Args:
            path: Optional explicit path; defaults to ``config.json`` in the
                user's config directory

        Returns:
            The loaded configuration, or defaults if no file exists
        """
        if path is None:
            path = get_config_dir() / CONFIG_FILE_NAME
        path = Path(path)

        if not path.exists():
            return cls()

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read config {path}, using defaults: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Config {path} is not a JSON object, using defaults")
            return cls()

        return cls.from_dict(data)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the configuration to ``path`` (or the default location)."""
        if path is None:
            path = get_config_dir() / CONFIG_FILE_NAME
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        return path
