"""
Netscape bookmark HTML exporter.

Writes an archived folder as a Netscape-Bookmark-file-1 document so it can
be imported back into Chrome, Firefox, Zen or Arc itself.
"""

from typing import List

from .base import FolderExporter
from ..models import ItemKind, PresentationFolder, PresentationNode


class HTMLExporter(FolderExporter):
    """
    Export a folder to the Netscape bookmark file format.

    Folders and split views become <H3> headings with a nested <DL>;
    tabs become <A HREF> links. Tabs without a URL cannot be imported
    and are skipped.
    """

    INDENT = "    "

    @property
    def format_name(self) -> str:
        return "HTML"

    @property
    def file_extension(self) -> str:
        return "html"

    def render(self, folder: PresentationFolder) -> str:
        title = self._escape_html(folder.title)
        html_parts = [
            "<!DOCTYPE NETSCAPE-Bookmark-file-1>",
            "<!-- This is an automatically generated file.",
            "     It will be read and overwritten.",
            "     DO NOT EDIT! -->",
            '<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">',
            f"<TITLE>{title}</TITLE>",
            f"<H1>{title}</H1>",
            "<DL><p>",
        ]

        for node in folder.children:
            html_parts.extend(self._generate_node_html(node, depth=1))

        html_parts.append("</DL><p>")
        return "\n".join(html_parts) + "\n"

    def _generate_node_html(self, node: PresentationNode, depth: int) -> List[str]:
        """
        Generate HTML lines for a node and its descendants.

        Args:
            node: Node to render
            depth: Nesting depth used for indentation

        Returns:
            List of HTML lines
        """
        indent = self.INDENT * depth

        if node.kind is ItemKind.TAB:
            if not node.url:
                self.logger.warning(f"Skipping tab without URL: {node.name}")
                return []
            href = self._escape_html(node.url)
            return [f'{indent}<DT><A HREF="{href}">{self._escape_html(node.name)}</A>']

        html_lines = [f"{indent}<DT><H3>{self._escape_html(node.name)}</H3>"]
        html_lines.append(f"{indent}<DL><p>")
        for child in node.children or []:
            html_lines.extend(self._generate_node_html(child, depth + 1))
        html_lines.append(f"{indent}</DL><p>")
        return html_lines

    def _escape_html(self, text: str) -> str:
        """
        Escape HTML special characters.

        Args:
            text: Text to escape

        Returns:
            HTML-escaped text
        """
        if not text:
            return ""

        text = text.replace("&", "&amp;")
        text = text.replace("<", "&lt;")
        text = text.replace(">", "&gt;")
        text = text.replace('"', "&quot;")
        text = text.replace("'", "&#x27;")

        return text
