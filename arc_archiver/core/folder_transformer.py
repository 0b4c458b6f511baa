"""
Arc folder tree transformation.

Turns the flat, id-linked item list of an ArcFolder into a nested
PresentationFolder. Transformation is a pure function of its input:
dangling references and reference cycles are dropped, never raised.
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from .models import (
    ArcFolder,
    ArcItem,
    FolderData,
    ItemKind,
    PresentationFolder,
    PresentationNode,
)
from .share_client import DEFAULT_SHARE_ORIGIN, build_share_url

DEFAULT_FOLDER_TITLE = "Archived Folder"
UNTITLED_TAB = "Untitled Tab"
UNTITLED_FOLDER = "Untitled Folder"
UNTITLED_SPLIT = "Split View"

logger = logging.getLogger(__name__)


def transform_arc_folder(
    arc_folder: ArcFolder, share_origin: str = DEFAULT_SHARE_ORIGIN
) -> PresentationFolder:
    """
    Transform an ArcFolder into a PresentationFolder.

    Args:
        arc_folder: Validated folder payload
        share_origin: Share service origin used for the canonical link

    Returns:
        PresentationFolder with resolved children
    """
    return FolderTransformer(arc_folder.data).transform(
        owner=arc_folder.author,
        share_url=build_share_url(arc_folder.share_id, share_origin),
    )


def collect_root_ids(data: FolderData) -> List[str]:
    """
    Merge the root pointers of a payload into one ordered id list.

    ``root`` wins over ``rootID``; ``rootItems`` are appended after.
    Duplicates keep their first position.
    """
    candidates: List[str] = []
    if isinstance(data.root, list):
        candidates.extend(data.root)
    elif data.root:
        candidates.append(data.root)
    elif data.root_id:
        candidates.append(data.root_id)

    if data.root_items:
        candidates.extend(data.root_items)

    return list(dict.fromkeys(candidates))


def order_split_children(item: ArcItem) -> List[str]:
    """
    Derive the visual child order of a split view.

    String width factors that name a child come first, in factor order;
    the remaining children follow in their original order. With no
    ``childrenIds`` the string factors themselves are the order.
    """
    split = item.data.split_view
    factor_ids = [f for f in split.item_width_factors if isinstance(f, str)]

    if not item.children_ids:
        return list(dict.fromkeys(factor_ids))

    candidates = set(item.children_ids)
    leading = list(dict.fromkeys(f for f in factor_ids if f in candidates))
    placed = set(leading)
    return leading + [c for c in item.children_ids if c not in placed]


class FolderTransformer:
    """Resolves one folder's item table into presentation nodes."""

    def __init__(self, data: FolderData):
        self.data = data
        self.items: Dict[str, ArcItem] = {}
        for item in data.items:
            self.items[item.id] = item

    def transform(self, owner: str, share_url: str) -> PresentationFolder:
        root_ids = collect_root_ids(self.data)

        resolved_roots = []
        for root_id in root_ids:
            node = self.resolve(root_id)
            if node is not None:
                resolved_roots.append((root_id, node))

        title = self._derive_title(resolved_roots[0][0] if resolved_roots else None)
        children = [node for _, node in resolved_roots]

        if (
            len(children) == 1
            and children[0].kind is ItemKind.FOLDER
            and children[0].name == title
            and children[0].children
        ):
            logger.debug(f"Flattening wrapper folder {children[0].id!r}")
            children = children[0].children

        return PresentationFolder(
            title=title, owner=owner, children=children, share_url=share_url
        )

    def resolve(
        self, item_id: str, path: FrozenSet[str] = frozenset()
    ) -> Optional[PresentationNode]:
        """
        Resolve an item id into a PresentationNode with all its descendants.

        Traversal uses an explicit stack of (item_id, path, siblings) frames,
        so nesting depth is limited only by the payload.

        Args:
            item_id: Id to resolve
            path: Ids already on the current branch

        Returns:
            PresentationNode, or None if the id is missing or cyclic
        """
        resolved: List[PresentationNode] = []
        containers: List[PresentationNode] = []
        stack: List[Tuple[str, FrozenSet[str], List[PresentationNode]]] = [
            (item_id, path, resolved)
        ]

        while stack:
            current_id, current_path, siblings = stack.pop()
            node, child_ids = self._resolve_item(current_id, current_path)
            if node is None:
                continue

            siblings.append(node)
            if child_ids is None:
                continue

            containers.append(node)
            child_path = current_path | {current_id}
            # Reversed so the first child is popped first
            for child_id in reversed(child_ids):
                stack.append((child_id, child_path, node.children))

        for node in containers:
            if not node.children:
                node.children = None

        return resolved[0] if resolved else None

    def _resolve_item(
        self, item_id: str, path: FrozenSet[str]
    ) -> Tuple[Optional[PresentationNode], Optional[List[str]]]:
        """Build one node without its children; tabs have no child ids."""
        if item_id in path:
            logger.debug(f"Skipping cyclic reference to {item_id!r}")
            return None, None

        item = self.items.get(item_id)
        if item is None:
            logger.debug(f"Item {item_id!r} not found")
            return None, None

        kind = item.kind
        if kind is ItemKind.TAB:
            tab = item.data.tab
            node = PresentationNode(
                id=item.id,
                name=tab.saved_title or UNTITLED_TAB,
                kind=kind,
                url=tab.saved_url or None,
            )
            return node, None

        if kind is ItemKind.SPLIT:
            name = item.title or UNTITLED_SPLIT
            child_ids = order_split_children(item)
        else:
            name = item.title or UNTITLED_FOLDER
            child_ids = item.children_ids

        return PresentationNode(id=item.id, name=name, kind=kind, children=[]), child_ids

    def _derive_title(self, first_root_id: Optional[str]) -> str:
        """Title from the first resolved root's own display text."""
        if first_root_id is None:
            return DEFAULT_FOLDER_TITLE

        item = self.items[first_root_id]
        if item.data.tab is not None:
            text = item.data.tab.saved_title or item.title
        else:
            text = item.title
        return text or DEFAULT_FOLDER_TITLE
