"""
Data models for the Arc Folder Archiver.

This module defines the raw structures scraped from an Arc share page
(validated with pydantic at the extraction boundary) and the presentation
structures the folder transformer derives from them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

# Share payloads use UUIDs, but ids are treated as opaque strings.
Identifier = Annotated[StrictStr, Field(min_length=1)]

# Epoch timestamps arrive as JSON numbers; numeric strings are rejected.
Timestamp = Union[StrictInt, StrictFloat]

_URL_ADAPTER = TypeAdapter(AnyUrl)


class ItemKind(str, Enum):
    """Kind of a node in an Arc folder tree."""

    TAB = "tab"
    FOLDER = "folder"
    SPLIT = "split"


class ArcModel(BaseModel):
    """Base model for Arc payload objects (wire names are camelCase aliases)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TabData(ArcModel):
    """Data for a single saved tab."""

    saved_url: StrictStr = Field(alias="savedURL")
    saved_title: StrictStr = Field(alias="savedTitle")
    time_last_active_at: Optional[Timestamp] = Field(default=None, alias="timeLastActiveAt")
    saved_mute_status: Optional[StrictStr] = Field(default=None, alias="savedMuteStatus")
    active_tab_before_creation_id: Optional[StrictStr] = Field(
        default=None, alias="activeTabBeforeCreationID"
    )
    referrer_id: Optional[StrictStr] = Field(default=None, alias="referrerID")

    @field_validator("saved_url")
    @classmethod
    def validate_saved_url(cls, v: str) -> str:
        """Accept a well-formed URL or an empty string, keeping the original text."""
        if v == "":
            return v
        try:
            _URL_ADAPTER.validate_python(v)
        except ValidationError:
            raise ValueError("savedURL must be a valid URL or an empty string")
        return v


class ListData(ArcModel):
    """Marker for a list (folder). Its properties live on the item itself."""


class SplitViewData(ArcModel):
    """Data for a split view showing several panes side by side."""

    focus_item_id: Identifier = Field(alias="focusItemID")
    layout_orientation: Literal["horizontal", "vertical"] = Field(
        alias="layoutOrientation"
    )
    item_width_factors: List[Union[StrictStr, StrictInt, StrictFloat]] = Field(
        default_factory=list, alias="itemWidthFactors"
    )
    time_last_active_at: Optional[Timestamp] = Field(default=None, alias="timeLastActiveAt")
    custom_info: Optional[Any] = Field(default=None, alias="customInfo")


class ItemData(ArcModel):
    """
    Tagged union over the three item shapes.

    Exactly one of ``tab``, ``list`` or ``splitView`` must be present.
    """

    tab: Optional[TabData] = None
    folder: Optional[ListData] = Field(default=None, alias="list")
    split_view: Optional[SplitViewData] = Field(default=None, alias="splitView")

    @model_validator(mode="after")
    def validate_single_tag(self):
        """Reject items carrying none or several kind tags."""
        tags = [
            name
            for name, value in (
                ("tab", self.tab),
                ("list", self.folder),
                ("splitView", self.split_view),
            )
            if value is not None
        ]
        if len(tags) != 1:
            raise ValueError(
                "item data must contain exactly one of 'tab', 'list' or "
                f"'splitView' (got: {tags or 'none'})"
            )
        return self

    @property
    def kind(self) -> ItemKind:
        if self.tab is not None:
            return ItemKind.TAB
        if self.split_view is not None:
            return ItemKind.SPLIT
        return ItemKind.FOLDER


class ArcItem(ArcModel):
    """
    A single tab, folder or split view as scraped, before tree resolution.

    Items reference each other only by id; ``childrenIds`` order is the
    sibling order of the final tree.
    """

    id: Identifier
    parent_id: Optional[Identifier] = Field(default=None, alias="parentID")
    children_ids: List[Identifier] = Field(default_factory=list, alias="childrenIds")
    title: Optional[StrictStr] = None
    created_at: Timestamp = Field(alias="createdAt")
    data: ItemData

    @property
    def kind(self) -> ItemKind:
        return self.data.kind


class FolderData(ArcModel):
    """
    The item list and root pointers of a shared folder.

    A single shared folder carries ``root`` and ``rootID``; a shared
    collection carries ``root`` and ``rootItems`` as lists.
    """

    items: List[ArcItem] = Field(default_factory=list)
    root_id: Optional[Identifier] = Field(
        default=None,
        validation_alias=AliasChoices("rootID", "rootId"),
        serialization_alias="rootID",
    )
    root: Union[Identifier, List[Identifier], None] = None
    root_items: Optional[List[Identifier]] = Field(default=None, alias="rootItems")


class ArcFolder(ArcModel):
    """A shared Arc folder: all items plus share metadata."""

    data: FolderData
    share_id: Identifier = Field(alias="shareID")
    author: StrictStr

    def to_payload(self) -> Dict[str, Any]:
        """Dump the folder back to its wire field names."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ArcFolder":
        """Validate a stored or scraped payload."""
        return cls.model_validate(payload)


@dataclass
class PresentationNode:
    """A resolved node ready for display."""

    id: str
    name: str
    kind: ItemKind
    url: Optional[str] = None
    children: Optional[List["PresentationNode"]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting absent url and children."""
        result = self._fields_dict()
        stack = [(self, result)]
        while stack:
            node, data = stack.pop()
            if node.children:
                data["children"] = []
                for child in node.children:
                    child_data = child._fields_dict()
                    data["children"].append(child_data)
                    stack.append((child, child_data))
        return result

    def _fields_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
        }
        if self.url:
            result["url"] = self.url
        return result


@dataclass
class PresentationFolder:
    """The final, presentation-ready archived folder."""

    title: str
    owner: str
    children: List[PresentationNode] = field(default_factory=list)
    share_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "owner": self.owner,
            "children": [child.to_dict() for child in self.children],
            "share_url": self.share_url,
        }

    def iter_nodes(self) -> Iterator[PresentationNode]:
        """Walk every node depth-first in display order."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def count_tabs(self) -> int:
        return sum(1 for node in self.iter_nodes() if node.kind is ItemKind.TAB)
