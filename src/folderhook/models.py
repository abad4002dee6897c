"""Data models for the folderhook package."""

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class EventKind(Enum):
    """Types of filesystem events reported by the observer."""
    CREATE = "create"
    REMOVE = "remove"
    RENAME = "rename"
    MOVE = "move"
    OTHER = "other"


class Category(Enum):
    """Notification groupings, in the order they appear in a payload."""
    NEW_FILES = ("New files", 2667354)
    DELETED_FILES = ("Deleted files", 14701138)
    CHANGES = ("Changes", 8750469)

    @property
    def title(self) -> str:
        return self.value[0]

    @property
    def color(self) -> int:
        return self.value[1]


@dataclass(frozen=True)
class RawEvent:
    """
    A filesystem change as reported by the observer.

    Attributes:
        kind: The type of change
        path: Absolute path of the entry after the operation
        prior_path: Absolute path before the operation (MOVE and RENAME only)
        name: Base name of the entry (before the operation for MOVE and RENAME)
        is_directory: Whether the entry is a directory
        timestamp: Unix timestamp when the event was observed
    """
    kind: EventKind
    path: Path
    prior_path: Optional[Path] = None
    name: str = ""
    is_directory: bool = False
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if self.prior_path is not None and self.kind not in (EventKind.MOVE, EventKind.RENAME):
            raise ValueError(f"prior_path is only valid for move and rename events: {self.kind.value}")
        if not self.name:
            source = self.prior_path if self.prior_path is not None else self.path
            object.__setattr__(self, "name", source.name)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "path": str(self.path),
            "prior_path": str(self.prior_path) if self.prior_path else None,
            "name": self.name,
            "is_directory": self.is_directory,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RawEvent":
        """Create from dictionary."""
        return cls(
            kind=EventKind(data["kind"]),
            path=Path(data["path"]),
            prior_path=Path(data["prior_path"]) if data.get("prior_path") else None,
            name=data.get("name", ""),
            is_directory=data.get("is_directory", False),
            timestamp=data.get("timestamp", time.time()),
        )


@dataclass(frozen=True)
class NotificationField:
    """A single (label, detail) line inside an embed."""
    name: str
    value: str

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


@dataclass
class NotificationEmbed:
    """
    One rendered category of a notification.

    Attributes:
        title: Embed title
        color: Embed colour as an integer
        description: Optional free text, omitted from JSON when empty
        fields: Entries of the category, omitted from JSON when empty
    """
    title: str
    color: int
    description: Optional[str] = None
    fields: List[NotificationField] = field(default_factory=list)

    @classmethod
    def for_category(cls, category: Category) -> "NotificationEmbed":
        return cls(title=category.title, color=category.color)

    def add_field(self, name: str, value: str) -> None:
        self.fields.append(NotificationField(name=name, value=value))

    def to_dict(self) -> dict:
        """Convert to the webhook embed object."""
        data = {"title": self.title}
        if self.description:
            data["description"] = self.description
        data["color"] = self.color
        if self.fields:
            data["fields"] = [f.to_dict() for f in self.fields]
        return data


@dataclass
class NotificationPayload:
    """
    The message body posted to the webhook.

    Attributes:
        content: Optional free-text body
        embeds: Rendered, non-empty categories
    """
    content: str = ""
    embeds: List[NotificationEmbed] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.embeds)

    def is_empty(self) -> bool:
        return not self.embeds

    def field_count(self) -> int:
        return sum(len(embed.fields) for embed in self.embeds)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "content": self.content,
            "embeds": [embed.to_dict() for embed in self.embeds],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
