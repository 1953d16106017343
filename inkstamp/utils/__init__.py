"""
Utility functions and helpers.
"""
from .resource_loader import (
    get_resource_path,
    get_icon_path,
    resource_exists,
    get_app_data_dir,
    get_config_dir,
)

__all__ = [
    'get_resource_path',
    'get_icon_path',
    'resource_exists',
    'get_app_data_dir',
    'get_config_dir',
]
