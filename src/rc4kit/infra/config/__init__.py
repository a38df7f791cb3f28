"""
Unified interface for loading and adapting configuration files.
"""

__all__ = [
    "copy_default_config",
    "find_config_file",
    "load_config",
    "read_config_file",
    "ConfigAdapter",
]

from .adapter import ConfigAdapter
from .file_io import (
    copy_default_config,
    find_config_file,
    load_config,
    read_config_file,
)
