"""
Markdown folder exporter.

Exports an archived folder as a nested Markdown bullet list.
"""

from typing import List

from .base import FolderExporter
from ..models import ItemKind, PresentationFolder, PresentationNode


class MarkdownExporter(FolderExporter):
    """
    Export a folder to Markdown.

    Example:
        >>> exporter = MarkdownExporter(include_header=True)
        >>> result = exporter.export(folder, Path("folder.md"))
    """

    def __init__(self, include_header: bool = True, indent_width: int = 2):
        """
        Initialize the Markdown exporter.

        Args:
            include_header: Whether to include owner and share link lines
            indent_width: Spaces per nesting level (2-4)
        """
        super().__init__()
        self.include_header = include_header
        self.indent_width = max(2, min(4, indent_width))

    @property
    def format_name(self) -> str:
        return "Markdown"

    @property
    def file_extension(self) -> str:
        return "md"

    def render(self, folder: PresentationFolder) -> str:
        lines = [f"# {self._escape_text(folder.title)}", ""]

        if self.include_header:
            lines.append(f"Shared by **{self._escape_text(folder.owner)}**")
            if folder.share_url:
                lines.append(f"Original: <{folder.share_url}>")
            lines.append("")

        for node in folder.children:
            lines.extend(self._render_node(node, depth=0))

        return "\n".join(lines).rstrip("\n") + "\n"

    def _render_node(self, node: PresentationNode, depth: int) -> List[str]:
        prefix = " " * (self.indent_width * depth) + "- "
        name = self._escape_text(node.name)

        if node.kind is ItemKind.TAB:
            if node.url:
                return [f"{prefix}[{name}]({self._escape_url(node.url)})"]
            return [f"{prefix}{name}"]

        label = f"**{name}**"
        if node.kind is ItemKind.SPLIT:
            label += " (split view)"

        lines = [prefix + label]
        for child in node.children or []:
            lines.extend(self._render_node(child, depth + 1))
        return lines

    def _escape_text(self, text: str) -> str:
        """Escape characters that would break link text or emphasis."""
        for char in ("\\", "[", "]", "*", "_"):
            text = text.replace(char, f"\\{char}")
        return text

    def _escape_url(self, url: str) -> str:
        return url.replace(" ", "%20").replace("(", "%28").replace(")", "%29")
