"""Classification of buffered events into a webhook notification."""

import logging
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import quote_plus

from .models import (
    Category,
    EventKind,
    NotificationEmbed,
    NotificationPayload,
    RawEvent,
)

logger = logging.getLogger(__name__)

# Rendered in place of a path that cannot be expressed relative to the base folder
RELATIVE_PATH_PLACEHOLDER = "..."


def relative_path(path: Path, base: Path) -> str:
    """
    Render a path relative to the watched base folder.

    Args:
        path: Absolute path of the entry
        base: Configured base folder

    Returns:
        The relative path, or the placeholder if it cannot be computed
    """
    try:
        return str(Path(path).relative_to(base))
    except (TypeError, ValueError) as e:
        logger.warning(f"Cannot make {path} relative to {base}: {e}")
        return RELATIVE_PATH_PLACEHOLDER


def web_link(prefix: str, path: Path) -> str:
    """Build the link to a file by appending its query-escaped absolute path to the prefix."""
    return prefix + quote_plus(str(path), safe="")


def inline_code(text: str) -> str:
    return f"`{text}`"


def build_payload(
    events: Iterable[RawEvent],
    base: Path,
    web_link_prefix: str = "",
    content: str = "",
) -> Optional[NotificationPayload]:
    """
    Group drained events into a single notification.

    Directory events and events of kind OTHER are skipped. Categories are
    emitted in the order NEW_FILES, DELETED_FILES, CHANGES and only when they
    hold at least one field.

    Args:
        events: Events in arrival order
        base: Base folder for relative path rendering
        web_link_prefix: Optional URL prefix for links to new files
        content: Free text for the payload body

    Returns:
        The payload, or None if no event produced a field
    """
    embeds = {category: NotificationEmbed.for_category(category) for category in Category}

    for event in events:
        if event.is_directory:
            continue

        if event.kind == EventKind.REMOVE:
            embeds[Category.DELETED_FILES].add_field(
                event.name,
                inline_code(relative_path(event.path, base)),
            )
        elif event.kind == EventKind.CREATE:
            value = inline_code(relative_path(event.path, base))
            if web_link_prefix:
                value += f"\n[web link]({web_link(web_link_prefix, event.path)})"
            embeds[Category.NEW_FILES].add_field(event.name, value)
        elif event.kind == EventKind.MOVE:
            old = relative_path(event.prior_path, base) if event.prior_path else RELATIVE_PATH_PLACEHOLDER
            new = relative_path(event.path, base)
            embeds[Category.CHANGES].add_field(
                event.name,
                f"Move from {inline_code(old)} to {inline_code(new)}",
            )
        elif event.kind == EventKind.RENAME:
            embeds[Category.CHANGES].add_field(
                event.name,
                f"Rename to {inline_code(event.path.name)}",
            )

    payload = NotificationPayload(
        content=content,
        embeds=[embed for embed in embeds.values() if embed.fields],
    )
    if payload.is_empty():
        return None
    return payload
