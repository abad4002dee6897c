"""Tests for notification building."""

import pytest
from pathlib import Path
from urllib.parse import unquote_plus

from src.folderhook.models import Category, EventKind, RawEvent
from src.folderhook.notification import (
    RELATIVE_PATH_PLACEHOLDER,
    build_payload,
    relative_path,
    web_link,
)

BASE = Path("/data")


def create(path, **kwargs):
    return RawEvent(kind=EventKind.CREATE, path=Path(path), **kwargs)


def remove(path, **kwargs):
    return RawEvent(kind=EventKind.REMOVE, path=Path(path), **kwargs)


def move(old, new, **kwargs):
    return RawEvent(kind=EventKind.MOVE, path=Path(new), prior_path=Path(old), **kwargs)


def rename(old, new, **kwargs):
    return RawEvent(kind=EventKind.RENAME, path=Path(new), prior_path=Path(old), **kwargs)


class TestRelativePath:
    """Tests for relative_path."""

    def test_path_under_base(self):
        assert relative_path(Path("/data/a.txt"), BASE) == "a.txt"
        assert relative_path(Path("/data/sub/dir/a.txt"), BASE) == "sub/dir/a.txt"

    def test_base_itself(self):
        assert relative_path(Path("/data"), BASE) == "."

    def test_path_outside_base(self):
        assert relative_path(Path("/elsewhere/a.txt"), BASE) == RELATIVE_PATH_PLACEHOLDER

    def test_malformed_path(self):
        assert relative_path(None, BASE) == RELATIVE_PATH_PLACEHOLDER

    def test_placeholder_value(self):
        assert RELATIVE_PATH_PLACEHOLDER == "..."


class TestWebLink:
    """Tests for web_link."""

    def test_prefix_and_escaped_path(self):
        link = web_link("https://files.example.com/?p=", Path("/data/a b.txt"))
        assert link == "https://files.example.com/?p=%2Fdata%2Fa+b.txt"

    @pytest.mark.parametrize("name", ["a b.txt", "what?.txt", "x&y.txt", "plus+sign.txt"])
    def test_escaping_round_trips(self, name):
        prefix = "https://files.example.com/?p="
        path = Path("/data/sub dir") / name

        link = web_link(prefix, path)

        assert link.startswith(prefix)
        escaped = link[len(prefix):]
        for reserved in (" ", "?", "&", "/"):
            assert reserved not in escaped
        assert unquote_plus(escaped) == str(path)


class TestBuildPayload:
    """Tests for build_payload."""

    def test_no_events(self):
        assert build_payload([], BASE) is None

    def test_create_without_web_link(self):
        payload = build_payload([create("/data/a.txt")], BASE)

        assert payload.to_dict()["embeds"] == [
            {
                "title": "New files",
                "color": 2667354,
                "fields": [{"name": "a.txt", "value": "`a.txt`"}],
            }
        ]

    def test_many_creates_without_web_link(self):
        events = [create(f"/data/dir/file{i}.txt") for i in range(5)]

        payload = build_payload(events, BASE)

        fields = payload.embeds[0].fields
        assert len(fields) == 5
        for i, f in enumerate(fields):
            assert f.name == f"file{i}.txt"
            assert f.value == f"`dir/file{i}.txt`"
            assert "web link" not in f.value

    def test_create_with_web_link(self):
        prefix = "https://files.example.com/?p="
        payload = build_payload([create("/data/sub/a b.txt")], BASE, web_link_prefix=prefix)

        value = payload.embeds[0].fields[0].value
        assert value == "`sub/a b.txt`\n[web link](https://files.example.com/?p=%2Fdata%2Fsub%2Fa+b.txt)"

    def test_remove(self):
        payload = build_payload([remove("/data/b.txt")], BASE)

        assert payload.to_dict()["embeds"] == [
            {
                "title": "Deleted files",
                "color": 14701138,
                "fields": [{"name": "b.txt", "value": "`b.txt`"}],
            }
        ]

    def test_move(self):
        payload = build_payload([move("/data/c.txt", "/data/d.txt")], BASE)

        embed = payload.embeds[0]
        assert embed.title == "Changes"
        assert embed.color == 8750469
        assert embed.fields[0].name == "c.txt"
        assert embed.fields[0].value == "Move from `c.txt` to `d.txt`"

    def test_rename_closes_inline_code(self):
        payload = build_payload([rename("/data/x/old.txt", "/data/x/new.txt")], BASE)

        assert payload.embeds[0].fields[0].name == "old.txt"
        assert payload.embeds[0].fields[0].value == "Rename to `new.txt`"

    def test_move_outside_base_uses_placeholder(self):
        payload = build_payload([move("/elsewhere/c.txt", "/data/d.txt")], BASE)

        assert payload.embeds[0].fields[0].value == "Move from `...` to `d.txt`"

    @pytest.mark.parametrize("event", [
        create("/data/dir", is_directory=True),
        remove("/data/dir", is_directory=True),
        move("/data/a", "/data/b/a", is_directory=True),
        rename("/data/a", "/data/b", is_directory=True),
    ])
    def test_directory_events_skipped(self, event):
        assert build_payload([event], BASE) is None

    def test_other_events_skipped(self):
        event = RawEvent(kind=EventKind.OTHER, path=Path("/data/a.txt"))
        assert build_payload([event], BASE) is None

    def test_category_order_and_omission(self):
        events = [
            rename("/data/a.txt", "/data/b.txt"),
            remove("/data/c.txt"),
            create("/data/dir", is_directory=True),
            create("/data/d.txt"),
        ]

        payload = build_payload(events, BASE)

        assert [e.title for e in payload.embeds] == [
            Category.NEW_FILES.title,
            Category.DELETED_FILES.title,
            Category.CHANGES.title,
        ]

    def test_empty_category_omitted(self):
        events = [remove("/data/c.txt"), move("/data/a.txt", "/data/x/a.txt")]

        payload = build_payload(events, BASE)

        assert [e.title for e in payload.embeds] == ["Deleted files", "Changes"]

    def test_arrival_order_within_category(self):
        events = [create("/data/z.txt"), create("/data/a.txt"), create("/data/m.txt")]

        payload = build_payload(events, BASE)

        assert [f.name for f in payload.embeds[0].fields] == ["z.txt", "a.txt", "m.txt"]

    def test_content(self):
        payload = build_payload([create("/data/a.txt")], BASE, content="Changes detected")
        assert payload.to_dict()["content"] == "Changes detected"
