"""
JSON folder exporter.

Exports the presentation tree of an archived folder as JSON.
"""

import json
from typing import Any, Optional

from .base import FolderExporter
from ..models import PresentationFolder


class JSONExporter(FolderExporter):
    """
    Export a folder to JSON.

    Output is deterministic for a given folder, so repeated renders of the
    same archive are byte-identical.

    Example:
        >>> exporter = JSONExporter(indent=2)
        >>> result = exporter.export(folder, Path("folder.json"))
    """

    def __init__(
        self,
        indent: Optional[int] = 2,
        sort_keys: bool = False,
        compact: bool = False
    ):
        """
        Initialize the JSON exporter.

        Args:
            indent: Number of spaces for indentation (None for no formatting)
            sort_keys: Whether to sort dictionary keys
            compact: If True, use minimal formatting (overrides indent)
        """
        super().__init__()
        self.indent = None if compact else indent
        self.sort_keys = sort_keys
        self.compact = compact

    @property
    def format_name(self) -> str:
        return "JSON"

    @property
    def file_extension(self) -> str:
        return "json"

    def render(self, folder: PresentationFolder) -> str:
        return self.dumps(folder.to_dict())

    def dumps(self, data: Any) -> str:
        """Serialize any JSON-compatible data with this exporter's settings."""
        separators = (",", ":") if self.compact else None
        return json.dumps(
            data,
            indent=self.indent,
            ensure_ascii=False,
            sort_keys=self.sort_keys,
            separators=separators,
        )
