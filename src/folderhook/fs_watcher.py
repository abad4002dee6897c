"""File system observer using watchdog library."""

import logging
import os
import queue
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Union

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .config import NotifierConfig
from .exceptions import ObserverError
from .models import EventKind, RawEvent

logger = logging.getLogger(__name__)


class _Closed:
    """Marker put on the event channel once the observer has stopped."""

    def __repr__(self) -> str:
        return "CLOSED"


CLOSED = _Closed()

ChannelItem = Union[RawEvent, ObserverError, _Closed]


def _to_path(raw) -> Path:
    return Path(os.fsdecode(raw))


class FSEventHandler(FileSystemEventHandler):
    """Handler that converts watchdog events to RawEvent."""

    def __init__(
        self,
        callback: Callable[[ChannelItem], None],
        config: NotifierConfig,
    ):
        super().__init__()
        self.callback = callback
        self.config = config

    def _should_ignore(self, path: Path) -> bool:
        return self.config.should_ignore(path)

    def on_any_event(self, event: FileSystemEvent) -> None:
        try:
            raw_event = self.convert(event)
        except Exception as e:
            self.callback(ObserverError(f"Cannot convert {event!r}: {e}"))
            return

        if raw_event is None:
            return
        self.callback(raw_event)

    def convert(self, event: FileSystemEvent):
        """
        Convert a watchdog event into a RawEvent.

        A move within the same directory is a rename; a move to another
        directory is a move.

        Args:
            event: The watchdog event

        Returns:
            The RawEvent, or None if the path is ignored
        """
        src_path = _to_path(event.src_path)

        if event.event_type == EVENT_TYPE_MOVED:
            dest_path = _to_path(event.dest_path)
            if self._should_ignore(src_path) or self._should_ignore(dest_path):
                return None
            kind = EventKind.RENAME if src_path.parent == dest_path.parent else EventKind.MOVE
            return RawEvent(
                kind=kind,
                path=dest_path,
                prior_path=src_path,
                name=src_path.name,
                is_directory=event.is_directory,
                timestamp=time.time(),
            )

        if self._should_ignore(src_path):
            return None

        if event.event_type == EVENT_TYPE_CREATED:
            kind = EventKind.CREATE
        elif event.event_type == EVENT_TYPE_DELETED:
            kind = EventKind.REMOVE
        else:
            kind = EventKind.OTHER

        return RawEvent(
            kind=kind,
            path=src_path,
            is_directory=event.is_directory,
            timestamp=time.time(),
        )


class FolderObserver:
    """
    Watches directory trees and publishes RawEvents on a channel.

    The channel (``events``) carries RawEvent items, an ObserverError when
    the underlying watchdog threads fail, and the CLOSED marker once the
    observer has been closed.
    """

    def __init__(self, config: NotifierConfig):
        """
        Initialize the observer.

        Args:
            config: Notifier configuration (interval, backend, ignore patterns)
        """
        self.config = config
        self.interval = config.interval
        self.events: "queue.Queue[ChannelItem]" = queue.Queue()

        if config.backend == "native":
            self._observer = Observer(timeout=self.interval)
        else:
            self._observer = PollingObserver(timeout=self.interval)

        self._handler = FSEventHandler(self.events.put, config)
        self._roots: List[Path] = []
        self._stop_event = threading.Event()
        # close() can run from a signal handler on the thread holding this lock
        self._lock = threading.RLock()
        self._started = False
        self._closed = False

    def add_recursive(self, path: Path) -> None:
        """
        Register a directory and everything below it for watching.

        Args:
            path: Directory to watch

        Raises:
            ObserverError: If the directory does not exist or cannot be watched
        """
        path = Path(path).resolve()
        if not path.is_dir():
            raise ObserverError(f"Cannot watch {path}: not an existing directory")

        with self._lock:
            if path in self._roots:
                return
            try:
                self._observer.schedule(self._handler, str(path), recursive=True)
            except OSError as e:
                raise ObserverError(f"Cannot watch {path}: {e}") from e
            self._roots.append(path)

        logger.info(f"Watching {path} recursively")

    def get_roots(self) -> List[Path]:
        with self._lock:
            return list(self._roots)

    def watched_files(self) -> Dict[Path, str]:
        """
        List every entry under the registered directories.

        Returns:
            Mapping of path to base name, roots included
        """
        files: Dict[Path, str] = {}
        for root in self.get_roots():
            files[root] = root.name
            for path in sorted(root.rglob("*")):
                if self.config.should_ignore(path):
                    continue
                files[path] = path.name
        return files

    def start(self) -> None:
        """
        Start observing and block until close() is called.

        Raises:
            ObserverError: If the observer cannot be started
        """
        with self._lock:
            if self._started:
                raise ObserverError("Observer already started")
            if self._closed:
                raise ObserverError("Observer is closed")
            if not self._roots:
                raise ObserverError("No directories registered")
            self._started = True

        try:
            self._observer.start()
        except Exception as e:
            raise ObserverError(f"Failed to start observer: {e}") from e

        logger.info(
            "Observer started (%s backend, interval=%.3fs)",
            self.config.backend, self.interval,
        )

        reported = False
        while not self._stop_event.wait(timeout=self.interval):
            if not reported and not self.is_healthy():
                reported = True
                self.events.put(ObserverError("watchdog observer thread stopped unexpectedly"))

        # close() may have run before the watchdog thread was alive
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=5.0)

    def is_healthy(self) -> bool:
        """Check that the watchdog observer and all its emitters are alive."""
        if not self._observer.is_alive():
            return False
        return all(emitter.is_alive() for emitter in self._observer.emitters)

    def close(self) -> None:
        """Stop observing and signal closure on the channel."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            started = self._started

        self._stop_event.set()
        if started and self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=5.0)

        self.events.put(CLOSED)
        logger.debug("Observer closed")

    @property
    def is_closed(self) -> bool:
        return self._closed
