"""Tests for models module."""

import json
import pytest
from pathlib import Path

from src.folderhook.models import (
    Category,
    EventKind,
    NotificationEmbed,
    NotificationField,
    NotificationPayload,
    RawEvent,
)


class TestEventKind:
    """Tests for EventKind enum."""

    def test_event_kind_values(self):
        assert EventKind.CREATE.value == "create"
        assert EventKind.REMOVE.value == "remove"
        assert EventKind.RENAME.value == "rename"
        assert EventKind.MOVE.value == "move"
        assert EventKind.OTHER.value == "other"


class TestCategory:
    """Tests for Category enum."""

    def test_titles_and_colors(self):
        assert Category.NEW_FILES.title == "New files"
        assert Category.NEW_FILES.color == 2667354
        assert Category.DELETED_FILES.title == "Deleted files"
        assert Category.DELETED_FILES.color == 14701138
        assert Category.CHANGES.title == "Changes"
        assert Category.CHANGES.color == 8750469

    def test_order(self):
        assert list(Category) == [Category.NEW_FILES, Category.DELETED_FILES, Category.CHANGES]


class TestRawEvent:
    """Tests for RawEvent dataclass."""

    def test_name_defaults_to_base_name(self):
        event = RawEvent(kind=EventKind.CREATE, path=Path("/data/sub/a.txt"))
        assert event.name == "a.txt"
        assert event.prior_path is None
        assert event.is_directory is False

    def test_explicit_name(self):
        event = RawEvent(kind=EventKind.CREATE, path=Path("/data/a.txt"), name="other")
        assert event.name == "other"

    def test_prior_path_for_move(self):
        event = RawEvent(
            kind=EventKind.MOVE,
            path=Path("/data/new/a.txt"),
            prior_path=Path("/data/old/a.txt"),
        )
        assert event.prior_path == Path("/data/old/a.txt")

    def test_rename_name_is_prior_base_name(self):
        event = RawEvent(
            kind=EventKind.RENAME,
            path=Path("/data/new.txt"),
            prior_path=Path("/data/old.txt"),
        )
        assert event.name == "old.txt"

    def test_prior_path_rejected_for_create(self):
        with pytest.raises(ValueError, match="prior_path"):
            RawEvent(
                kind=EventKind.CREATE,
                path=Path("/data/a.txt"),
                prior_path=Path("/data/b.txt"),
            )

    def test_frozen(self):
        event = RawEvent(kind=EventKind.REMOVE, path=Path("/data/a.txt"))
        with pytest.raises(AttributeError):
            event.path = Path("/data/b.txt")

    def test_to_dict_from_dict(self):
        event = RawEvent(
            kind=EventKind.RENAME,
            path=Path("/data/b.txt"),
            prior_path=Path("/data/a.txt"),
            timestamp=1234.5,
        )
        data = event.to_dict()

        assert data["kind"] == "rename"
        assert data["prior_path"] == "/data/a.txt"
        assert RawEvent.from_dict(data) == event


class TestNotificationEmbed:
    """Tests for NotificationEmbed dataclass."""

    def test_fields_omitted_when_empty(self):
        embed = NotificationEmbed.for_category(Category.CHANGES)
        assert embed.to_dict() == {"title": "Changes", "color": 8750469}

    def test_fields_serialized(self):
        embed = NotificationEmbed.for_category(Category.DELETED_FILES)
        embed.add_field("b.txt", "`b.txt`")

        assert embed.to_dict() == {
            "title": "Deleted files",
            "color": 14701138,
            "fields": [{"name": "b.txt", "value": "`b.txt`"}],
        }

    def test_description_included_when_set(self):
        embed = NotificationEmbed(title="t", color=1, description="details")
        assert embed.to_dict()["description"] == "details"


class TestNotificationPayload:
    """Tests for NotificationPayload dataclass."""

    def test_empty_payload(self):
        payload = NotificationPayload()
        assert payload.is_empty()
        assert len(payload) == 0
        assert payload.to_dict() == {"content": "", "embeds": []}

    def test_to_json(self):
        embed = NotificationEmbed.for_category(Category.NEW_FILES)
        embed.fields.append(NotificationField("a.txt", "`a.txt`"))
        embed.add_field("b.txt", "`b.txt`")
        payload = NotificationPayload(content="hello", embeds=[embed])

        data = json.loads(payload.to_json())

        assert data["content"] == "hello"
        assert data["embeds"][0]["title"] == "New files"
        assert len(data["embeds"][0]["fields"]) == 2
        assert payload.field_count() == 2
