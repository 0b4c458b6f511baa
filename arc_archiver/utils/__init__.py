"""
Utility modules for the Arc Folder Archiver.

This package contains logging setup and input validation helpers.
"""

from .logging_setup import setup_logging
from .validation import ValidationError

__all__ = [
    "setup_logging",
    "ValidationError",
]
