"""
Pytest configuration and shared fixtures for Arc Folder Archiver tests.

Payload builders produce dictionaries in the wire format found in the
``__NEXT_DATA__`` island of an Arc share page.
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from arc_archiver.core.models import ArcFolder

SHARE_ID = "9b2c6f1e-4d7a-4c3b-8e1f-2a5d6c7b8e9f"
ROOT_ID = "0f5e7d6c-1a2b-4c3d-9e8f-7a6b5c4d3e2f"
TAB_A_ID = "1a1a1a1a-0000-4000-8000-000000000001"
TAB_B_ID = "1a1a1a1a-0000-4000-8000-000000000002"
TAB_C_ID = "1a1a1a1a-0000-4000-8000-000000000003"
SUBFOLDER_ID = "2b2b2b2b-0000-4000-8000-000000000001"
SPLIT_ID = "3c3c3c3c-0000-4000-8000-000000000001"


def build_item(
    item_id: str,
    kind: str = "tab",
    title: Optional[str] = None,
    children: Optional[List[str]] = None,
    url: str = "https://example.com",
    saved_title: str = "Example",
    factors: Optional[List[Any]] = None,
    parent: Optional[str] = ROOT_ID,
) -> Dict[str, Any]:
    """Build one raw item dictionary."""
    if kind == "tab":
        data: Dict[str, Any] = {"tab": {"savedURL": url, "savedTitle": saved_title}}
    elif kind == "list":
        data = {"list": {}}
    elif kind == "split":
        data = {
            "splitView": {
                "focusItemID": (children or [item_id])[0],
                "layoutOrientation": "horizontal",
                "timeLastActiveAt": 1717175221.5,
                "itemWidthFactors": factors if factors is not None else [],
                "customInfo": None,
            }
        }
    else:
        raise ValueError(f"Unknown kind: {kind}")

    item: Dict[str, Any] = {
        "id": item_id,
        "childrenIds": children or [],
        "title": title,
        "createdAt": 1717175221000,
        "data": data,
        "isUnread": False,
        "originatingDevice": "5d5d5d5d-0000-4000-8000-000000000001",
    }
    if parent is not None:
        item["parentID"] = parent
    return item


def build_payload(
    items: List[Dict[str, Any]],
    root: Any = ROOT_ID,
    root_id: Optional[str] = None,
    root_items: Optional[List[str]] = None,
    share_id: str = SHARE_ID,
    author: str = "Alice",
) -> Dict[str, Any]:
    """Build a ``props.pageProps`` folder payload."""
    data: Dict[str, Any] = {"items": items, "root": root}
    if root_id is not None:
        data["rootID"] = root_id
    if root_items is not None:
        data["rootItems"] = root_items
    return {"data": data, "shareID": share_id, "author": author}


def build_share_page(page_props: Any, element_id: str = "__NEXT_DATA__") -> str:
    """Wrap page properties in a minimal Next.js share page."""
    next_data = json.dumps({"props": {"pageProps": page_props}, "page": "/folder/[id]"})
    return (
        "<!DOCTYPE html><html><head><title>Arc</title></head><body>"
        '<div id="__next"></div>'
        f'<script id="{element_id}" type="application/json">{next_data}</script>'
        "</body></html>"
    )


def mock_response(status_code: int = 200, text: str = "") -> Mock:
    """Create a mock requests response."""
    response = Mock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def make_item():
    """Factory for raw item dictionaries."""
    return build_item


@pytest.fixture
def make_payload():
    """Factory for raw folder payload dictionaries."""
    return build_payload


@pytest.fixture
def make_folder():
    """Factory for validated ArcFolder models."""

    def _make_folder(items, **kwargs) -> ArcFolder:
        return ArcFolder.model_validate(build_payload(items, **kwargs))

    return _make_folder


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """A realistic shared folder: tabs, a subfolder and a split view."""
    items = [
        build_item(
            ROOT_ID,
            kind="list",
            title="Research",
            children=[TAB_A_ID, SUBFOLDER_ID, SPLIT_ID],
            parent=None,
        ),
        build_item(TAB_A_ID, url="https://arxiv.org/", saved_title="arXiv"),
        build_item(
            SUBFOLDER_ID, kind="list", title="Reading", children=[TAB_B_ID]
        ),
        build_item(
            TAB_B_ID,
            url="https://example.com/paper",
            saved_title="A Paper",
            parent=SUBFOLDER_ID,
        ),
        build_item(
            SPLIT_ID,
            kind="split",
            children=[TAB_C_ID],
            factors=[TAB_C_ID, 0.5],
        ),
        build_item(TAB_C_ID, url="", saved_title="", parent=SPLIT_ID),
    ]
    return build_payload(items, root=ROOT_ID, root_id=ROOT_ID)


@pytest.fixture
def sample_folder(sample_payload) -> ArcFolder:
    return ArcFolder.model_validate(sample_payload)


@pytest.fixture
def sample_share_page(sample_payload) -> str:
    return build_share_page(sample_payload)


@pytest.fixture
def make_share_page():
    """Factory for share page HTML."""
    return build_share_page


@pytest.fixture
def make_response():
    """Factory for mock requests responses."""
    return mock_response
