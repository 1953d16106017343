"""
Resource loading utilities for handling bundled and development resources.
"""
import os
import sys
from pathlib import Path

APP_NAME = "Inkstamp"


def get_resource_path(relative_path: str) -> str:
    """
    Get the absolute path to a resource file.

    Works both from a source checkout and from a PyInstaller bundle.

    Args:
        relative_path: Relative path to the resource from the package root

    Returns:
        Absolute path to the resource
    """
    if hasattr(sys, '_MEIPASS'):
        base_path = Path(sys._MEIPASS)
    else:
        base_path = Path(__file__).resolve().parent.parent

    return str(base_path / relative_path)


def get_icon_path(icon_name: str) -> str:
    """Get the path to a bundled icon file."""
    return get_resource_path(f"resources/icons/{icon_name}")


def resource_exists(relative_path: str) -> bool:
    """Check if a bundled resource exists."""
    return os.path.exists(get_resource_path(relative_path))


def get_app_data_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the application data directory for storing user data.

    Args:
        app_name: Name of the application

    Returns:
        Path to the app data directory
    """
    if os.name == 'nt':  # Windows
        base_dir = os.environ.get('APPDATA', os.path.expanduser('~'))
    elif sys.platform == 'darwin':  # macOS
        base_dir = os.path.expanduser('~/Library/Application Support')
    else:  # Linux and others
        base_dir = os.path.expanduser('~/.local/share')

    app_dir = Path(base_dir) / app_name
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the configuration directory for storing settings.

    Args:
        app_name: Name of the application

    Returns:
        Path to the config directory
    """
    if os.name == 'nt':  # Windows
        config_dir = get_app_data_dir(app_name) / "config"
    elif sys.platform == 'darwin':  # macOS
        config_dir = Path.home() / "Library" / "Preferences" / app_name
    else:  # Linux
        config_dir = Path.home() / ".config" / app_name

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir
