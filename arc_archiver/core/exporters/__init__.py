"""
Archived folder exporters.

This module provides exporters that re-render an archived folder as
JSON, Netscape bookmark HTML or Markdown.
"""

from .base import FolderExporter, ExportResult, ExportError
from .html_exporter import HTMLExporter
from .json_exporter import JSONExporter
from .markdown_exporter import MarkdownExporter

__all__ = [
    "FolderExporter",
    "ExportResult",
    "ExportError",
    "HTMLExporter",
    "JSONExporter",
    "MarkdownExporter",
    "EXPORTERS",
    "get_exporter",
]


# Format registry for easy access
EXPORTERS = {
    "json": JSONExporter,
    "html": HTMLExporter,
    "markdown": MarkdownExporter,
    "md": MarkdownExporter,
}


def get_exporter(format_name: str) -> type:
    """
    Get an exporter class by format name.

    Args:
        format_name: Name of the format (json, html, markdown)

    Returns:
        Exporter class for the specified format

    Raises:
        ValueError: If format is not supported
    """
    format_lower = format_name.lower()
    if format_lower not in EXPORTERS:
        supported = ", ".join(sorted(set(EXPORTERS.keys()) - {"md"}))
        raise ValueError(
            f"Unsupported export format: {format_name}. "
            f"Supported formats: {supported}"
        )
    return EXPORTERS[format_lower]
