"""
Input validation utilities for the Arc Folder Archiver.

This module provides validation functions for command-line arguments
and other user inputs.
"""

import os
from pathlib import Path
from typing import Optional, Union

from arc_archiver.core.archive_service import UUID_PATTERN
from arc_archiver.core.exporters import EXPORTERS
from arc_archiver.core.share_client import DEFAULT_SHARE_ORIGIN, parse_share_url


class ValidationError(Exception):
    """Custom exception for validation errors."""

    pass


def validate_share_id(value: str, origin: str = DEFAULT_SHARE_ORIGIN) -> str:
    """
    Validate a folder share id or share link.

    Args:
        value: Bare share id or ``https://arc.net/folder/<id>`` link
        origin: Share service origin links must belong to

    Returns:
        The share identifier

    Raises:
        ValidationError: If the value is not a usable share id
    """
    if not value or not value.strip():
        raise ValidationError("Share id is required")

    try:
        return parse_share_url(value, origin)
    except ValueError as e:
        raise ValidationError(str(e))


def validate_record_id(value: str) -> str:
    """
    Validate an archived folder record id (UUID).

    Raises:
        ValidationError: If the id is blank or not a UUID
    """
    if not value or not value.strip():
        raise ValidationError("Record id is required")

    value = value.strip()
    if not UUID_PATTERN.match(value):
        raise ValidationError(f"Record id must be a UUID, got: {value}")
    return value


def validate_delete_in_days(value: Optional[int]) -> Optional[int]:
    """
    Validate the retention period of a new archive.

    Raises:
        ValidationError: If the value is not a positive integer
    """
    if value is None:
        return None

    if not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Delete-in-days must be a positive integer, got: {value}")
    if value > 3650:
        raise ValidationError(f"Delete-in-days must be at most 3650, got: {value}")
    return value


def validate_export_format(value: Optional[str]) -> Optional[str]:
    """
    Validate an export format name.

    Raises:
        ValidationError: If the format is not supported
    """
    if value is None:
        return None

    format_lower = value.lower()
    if format_lower == "md":
        format_lower = "markdown"
    if format_lower not in EXPORTERS:
        supported = ", ".join(sorted(set(EXPORTERS.keys()) - {"md"}))
        raise ValidationError(f"Unsupported format: {value}. Supported formats: {supported}")
    return format_lower


def validate_output_file(file_path: Union[str, Path, None]) -> Optional[Path]:
    """
    Validate that output file path is writable.

    Args:
        file_path: Path to the output file, or None for stdout

    Returns:
        Validated Path object, or None

    Raises:
        ValidationError: If path isn't writable or parent can't be created
    """
    if file_path is None:
        return None

    path = Path(file_path)

    parent = path.parent
    if not parent.exists():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValidationError(f"Cannot create output directory: {parent}: {e}")

    if not os.access(parent, os.W_OK):
        raise ValidationError(f"Output directory is not writable: {parent}")

    if path.exists() and not os.access(path, os.W_OK):
        raise ValidationError(f"Output file exists and is not writable: {file_path}")

    return path.absolute()


def validate_config_file(file_path: Union[str, Path, None]) -> Optional[Path]:
    """
    Validate that a configuration file exists and has a supported format.

    Raises:
        ValidationError: If the file is missing or not TOML/JSON
    """
    if file_path is None:
        return None

    path = Path(file_path)

    if not path.exists():
        raise ValidationError(f"Configuration file does not exist: {file_path}")

    if not path.is_file():
        raise ValidationError(f"Configuration path is not a file: {file_path}")

    if path.suffix.lower() not in (".toml", ".json"):
        raise ValidationError(
            f"Configuration file must be TOML or JSON, got: {path.suffix}"
        )

    return path.absolute()
