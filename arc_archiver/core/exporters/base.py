"""
Base classes for folder exporters.

This module provides the abstract base class and common utilities
for all archived folder export formats.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

from ..models import ItemKind, PresentationFolder


@dataclass
class ExportResult:
    """
    Result of an export operation.

    Attributes:
        path: Path to the exported file
        count: Number of tabs exported
        format_name: Name of the export format used
        exported_at: Timestamp of the export
        additional_info: Any format-specific additional information
        warnings: List of non-fatal warnings during export
    """

    path: Path
    count: int
    format_name: str
    exported_at: datetime = field(default_factory=datetime.now)
    additional_info: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"ExportResult(format={self.format_name}, "
            f"count={self.count}, path={self.path})"
        )


class ExportError(Exception):
    """
    Exception raised when export fails.

    Attributes:
        message: Error description
        format_name: Name of the export format
        path: Target path if available
        original_error: Underlying exception if any
    """

    def __init__(
        self,
        message: str,
        format_name: Optional[str] = None,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.format_name = format_name
        self.path = path
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []
        if self.format_name:
            parts.append(f"[{self.format_name}]")
        parts.append(self.message)
        if self.path:
            parts.append(f"(path: {self.path})")
        if self.original_error:
            parts.append(f"Caused by: {type(self.original_error).__name__}: {self.original_error}")
        return " ".join(parts)


class FolderExporter(ABC):
    """
    Abstract base class for archived folder exporters.

    Subclasses implement render() and define format_name and
    file_extension; export() writes the rendered text to disk.

    Example:
        >>> exporter = JSONExporter()
        >>> result = exporter.export(folder, Path("output.json"))
        >>> print(f"Exported {result.count} tabs to {result.path}")
    """

    def __init__(self):
        """Initialize the exporter."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def render(self, folder: PresentationFolder) -> str:
        """
        Render a folder to text in this exporter's format.

        Args:
            folder: Folder to render

        Returns:
            Rendered document
        """
        pass

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Human-readable name of the export format (e.g., "JSON")."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Default file extension without leading dot (e.g., "json")."""
        pass

    def export(
        self,
        folder: PresentationFolder,
        output_path: Union[str, Path]
    ) -> ExportResult:
        """
        Export a folder to the specified path.

        Args:
            folder: Folder to export
            output_path: Target path for the export

        Returns:
            ExportResult with details about the export

        Raises:
            ExportError: If export fails
        """
        warnings = self.validate_folder(folder)
        path = self.prepare_output_path(output_path)

        if path.suffix.lower() != f".{self.file_extension}":
            path = path.with_suffix(f".{self.file_extension}")

        try:
            content = self.render(folder)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)

        except PermissionError as e:
            raise ExportError(
                f"Permission denied writing to {path}",
                format_name=self.format_name,
                path=path,
                original_error=e
            )
        except OSError as e:
            raise ExportError(
                f"Failed to export {self.format_name}: {e}",
                format_name=self.format_name,
                path=path,
                original_error=e
            )

        count = folder.count_tabs()
        self.logger.info(f"Exported {count} tabs to {path}")

        return ExportResult(
            path=path,
            count=count,
            format_name=self.format_name,
            additional_info={"file_size": path.stat().st_size},
            warnings=warnings,
        )

    def validate_folder(self, folder: PresentationFolder) -> List[str]:
        """
        Validate a folder before export.

        Returns:
            List of warning messages for any issues found
        """
        warnings = []

        if not folder.children:
            warnings.append("Folder has no items to export")
            return warnings

        no_url_count = sum(
            1 for node in folder.iter_nodes()
            if node.kind is ItemKind.TAB and not node.url
        )
        if no_url_count > 0:
            warnings.append(f"{no_url_count} tab(s) have no URL")

        return warnings

    def prepare_output_path(self, output_path: Union[str, Path]) -> Path:
        """
        Prepare and validate the output path.

        Raises:
            ExportError: If the parent directory cannot be created
        """
        path = Path(output_path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise ExportError(
                f"Permission denied creating path: {path}",
                format_name=self.format_name,
                path=path,
                original_error=e
            )
        except OSError as e:
            raise ExportError(
                f"Failed to prepare output path: {path}",
                format_name=self.format_name,
                path=path,
                original_error=e
            )

        return path
