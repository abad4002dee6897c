"""
Folder Webhook Notifier

Watches a folder tree for file changes and periodically posts a single
summary notification to a webhook.

Features:
- Create, remove, rename and move events via watchdog
- Coalescing of all changes since the last check into one message
- New files, deleted files and changes rendered as webhook embeds
- Optional web links for newly created files
"""

from .models import (
    EventKind,
    Category,
    RawEvent,
    NotificationField,
    NotificationEmbed,
    NotificationPayload,
)

from .config import NotifierConfig, load_config

from .exceptions import (
    NotifierError,
    ConfigError,
    ObserverError,
    DeliveryError,
    NotifierAlreadyRunningError,
)

from .notification import build_payload, relative_path, web_link
from .webhook import WebhookClient
from .fs_watcher import FolderObserver, FSEventHandler, CLOSED
from .event_processor import EventBuffer, EventCollector, EventDispatcher
from .process import NotifierProcess


__all__ = [
    # Models
    "EventKind",
    "Category",
    "RawEvent",
    "NotificationField",
    "NotificationEmbed",
    "NotificationPayload",
    # Config
    "NotifierConfig",
    "load_config",
    # Exceptions
    "NotifierError",
    "ConfigError",
    "ObserverError",
    "DeliveryError",
    "NotifierAlreadyRunningError",
    # Components
    "build_payload",
    "relative_path",
    "web_link",
    "WebhookClient",
    "FolderObserver",
    "FSEventHandler",
    "CLOSED",
    "EventBuffer",
    "EventCollector",
    "EventDispatcher",
    # Main Process
    "NotifierProcess",
]

__version__ = "0.1.0"
