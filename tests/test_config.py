from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("fitz")

from inkstamp.core.config import EditorConfig


def test_defaults() -> None:
    config = EditorConfig()
    assert config.max_upload_bytes == 10 * 1024 * 1024
    assert (config.default_scale, config.min_scale, config.max_scale) == (1.5, 0.5, 3.0)
    assert (config.signature_width, config.signature_height) == (400, 200)
    assert config.export_filename == "annotated.pdf"
    assert config.history_limit is None


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    assert EditorConfig.load(tmp_path / "nope.json") == EditorConfig()


def test_save_and_load(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    EditorConfig(default_scale=1.0, history_limit=50).save(path)

    loaded = EditorConfig.load(path)
    assert loaded.default_scale == 1.0
    assert loaded.history_limit == 50
    assert loaded.max_scale == 3.0


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"default_font_size": 20, "theme": "neon"}))
    config = EditorConfig.load(path)
    assert config.default_font_size == 20
    assert not hasattr(config, "theme")


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_unreadable_file_gives_defaults(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(content)
    assert EditorConfig.load(path) == EditorConfig()
