"""
Configuration for the Arc Folder Archiver.
"""

from .pydantic_config import (
    ArchiverConfig,
    ConfigurationManager,
    NetworkConfig,
    OutputConfig,
    ShareConfig,
    StorageConfig,
    format_config_error,
)

__all__ = [
    "ArchiverConfig",
    "ConfigurationManager",
    "NetworkConfig",
    "OutputConfig",
    "ShareConfig",
    "StorageConfig",
    "format_config_error",
]
