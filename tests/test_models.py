"""
Tests for Arc payload and presentation models.
"""

import pytest
from pydantic import ValidationError

from arc_archiver.core.models import (
    ArcFolder,
    ArcItem,
    ItemKind,
    PresentationFolder,
    PresentationNode,
)


class TestArcItem:
    """Test cases for raw item validation."""

    def test_tab_item(self, make_item):
        item = ArcItem.model_validate(make_item("t1", url="https://example.com/a"))

        assert item.kind is ItemKind.TAB
        assert item.data.tab.saved_url == "https://example.com/a"
        assert item.data.tab.saved_title == "Example"

    def test_list_item(self, make_item):
        item = ArcItem.model_validate(make_item("f1", kind="list", title="Docs"))

        assert item.kind is ItemKind.FOLDER
        assert item.title == "Docs"

    def test_split_view_item(self, make_item):
        item = ArcItem.model_validate(
            make_item("s1", kind="split", children=["a", "b"], factors=["b", 0.5, 1])
        )

        assert item.kind is ItemKind.SPLIT
        assert item.data.split_view.layout_orientation == "horizontal"
        assert item.data.split_view.item_width_factors == ["b", 0.5, 1]

    def test_unknown_fields_are_ignored(self, make_item):
        raw = make_item("t1")
        raw["someFutureField"] = {"nested": True}

        item = ArcItem.model_validate(raw)
        assert item.id == "t1"

    def test_parent_id_is_optional(self, make_item):
        item = ArcItem.model_validate(make_item("r1", kind="list", parent=None))
        assert item.parent_id is None

    def test_empty_saved_url_is_allowed(self, make_item):
        item = ArcItem.model_validate(make_item("t1", url=""))
        assert item.data.tab.saved_url == ""

    def test_saved_url_keeps_original_text(self, make_item):
        item = ArcItem.model_validate(make_item("t1", url="https://example.com"))
        # No normalization (e.g. trailing slash) is applied
        assert item.data.tab.saved_url == "https://example.com"

    def test_invalid_saved_url_rejected(self, make_item):
        with pytest.raises(ValidationError) as exc_info:
            ArcItem.model_validate(make_item("t1", url="not a url"))

        assert "savedURL" in str(exc_info.value)

    def test_invalid_layout_orientation_rejected(self, make_item):
        raw = make_item("s1", kind="split", children=["a"])
        raw["data"]["splitView"]["layoutOrientation"] = "diagonal"

        with pytest.raises(ValidationError):
            ArcItem.model_validate(raw)

    def test_no_kind_tag_rejected(self, make_item):
        raw = make_item("t1")
        raw["data"] = {}

        with pytest.raises(ValidationError, match="exactly one"):
            ArcItem.model_validate(raw)

    def test_multiple_kind_tags_rejected(self, make_item):
        raw = make_item("t1")
        raw["data"]["list"] = {}

        with pytest.raises(ValidationError, match="exactly one"):
            ArcItem.model_validate(raw)

    def test_missing_id_rejected(self, make_item):
        raw = make_item("t1")
        del raw["id"]

        with pytest.raises(ValidationError):
            ArcItem.model_validate(raw)

    def test_null_title_allowed(self, make_item):
        item = ArcItem.model_validate(make_item("t1", title=None))
        assert item.title is None

    def test_numeric_string_created_at_rejected(self, make_item):
        raw = make_item("t1")
        raw["createdAt"] = "123"

        with pytest.raises(ValidationError) as exc_info:
            ArcItem.model_validate(raw)

        assert "createdAt" in str(exc_info.value)

    def test_float_created_at_accepted(self, make_item):
        raw = make_item("t1")
        raw["createdAt"] = 1717175221000.5

        assert ArcItem.model_validate(raw).created_at == 1717175221000.5

    def test_string_time_last_active_rejected(self, make_item):
        raw = make_item("s1", kind="split", children=["a"])
        raw["data"]["splitView"]["timeLastActiveAt"] = "1717175221"

        with pytest.raises(ValidationError):
            ArcItem.model_validate(raw)

    def test_bool_width_factor_rejected(self, make_item):
        raw = make_item("s1", kind="split", children=["a"], factors=["a", True])

        with pytest.raises(ValidationError):
            ArcItem.model_validate(raw)

    def test_numeric_title_rejected(self, make_item):
        with pytest.raises(ValidationError):
            ArcItem.model_validate(make_item("t1", title=42))


class TestArcFolder:
    """Test cases for whole folder payload validation."""

    def test_sample_payload(self, sample_payload):
        folder = ArcFolder.model_validate(sample_payload)

        assert folder.author == "Alice"
        assert len(folder.data.items) == 6
        assert folder.data.root == folder.data.root_id

    def test_items_default_empty(self):
        folder = ArcFolder.model_validate(
            {"data": {"root": None}, "shareID": "s1", "author": "Bob"}
        )

        assert folder.data.items == []
        assert folder.data.root is None

    def test_root_as_list(self, make_payload):
        folder = ArcFolder.model_validate(make_payload([], root=["a", "b"], root_items=["c"]))

        assert folder.data.root == ["a", "b"]
        assert folder.data.root_items == ["c"]

    def test_root_id_spellings(self):
        for key in ("rootID", "rootId"):
            folder = ArcFolder.model_validate(
                {"data": {key: "r1"}, "shareID": "s1", "author": "Bob"}
            )
            assert folder.data.root_id == "r1"
            assert folder.to_payload()["data"]["rootID"] == "r1"

    def test_missing_data_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ArcFolder.model_validate({"shareID": "s1", "author": "Bob"})

        assert "data" in str(exc_info.value)

    def test_missing_author_rejected(self, make_payload):
        payload = make_payload([])
        del payload["author"]

        with pytest.raises(ValidationError):
            ArcFolder.model_validate(payload)

    def test_numeric_author_rejected(self, make_payload):
        payload = make_payload([])
        payload["author"] = 7

        with pytest.raises(ValidationError):
            ArcFolder.model_validate(payload)

    def test_to_payload_uses_wire_names(self, sample_folder):
        payload = sample_folder.to_payload()

        assert payload["shareID"] == sample_folder.share_id
        assert payload["data"]["rootID"] == sample_folder.data.root_id
        first = payload["data"]["items"][0]
        assert "childrenIds" in first
        assert "list" in first["data"]

    def test_payload_revalidates(self, sample_folder):
        again = ArcFolder.from_payload(sample_folder.to_payload())
        assert again == sample_folder


class TestPresentationModels:
    """Test cases for presentation dataclasses."""

    def test_tab_dict_omits_children(self):
        node = PresentationNode(id="t1", name="Tab", kind=ItemKind.TAB, url="https://a.com")

        assert node.to_dict() == {
            "id": "t1",
            "name": "Tab",
            "kind": "tab",
            "url": "https://a.com",
        }

    def test_folder_dict_omits_empty_children_and_url(self):
        node = PresentationNode(id="f1", name="Folder", kind=ItemKind.FOLDER)
        assert node.to_dict() == {"id": "f1", "name": "Folder", "kind": "folder"}

    def test_folder_to_dict(self):
        tab = PresentationNode(id="t1", name="Tab", kind=ItemKind.TAB, url="https://a.com")
        folder = PresentationFolder(
            title="T", owner="O", children=[tab], share_url="https://arc.net/folder/s"
        )

        assert folder.to_dict() == {
            "title": "T",
            "owner": "O",
            "children": [tab.to_dict()],
            "share_url": "https://arc.net/folder/s",
        }

    def test_iter_nodes_and_count_tabs(self):
        inner = PresentationNode(id="t2", name="B", kind=ItemKind.TAB)
        sub = PresentationNode(id="f1", name="Sub", kind=ItemKind.FOLDER, children=[inner])
        first = PresentationNode(id="t1", name="A", kind=ItemKind.TAB)
        folder = PresentationFolder(title="T", owner="O", children=[first, sub])

        assert [n.id for n in folder.iter_nodes()] == ["t1", "f1", "t2"]
        assert folder.count_tabs() == 2
