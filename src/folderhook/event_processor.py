"""Event collection, buffering and periodic dispatch."""

import logging
import queue
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .exceptions import ObserverError
from .fs_watcher import CLOSED
from .models import NotificationPayload, RawEvent
from .notification import build_payload

logger = logging.getLogger(__name__)


class EventBuffer:
    """
    Ordered buffer shared between the collector and the dispatcher.

    Append and drain are serialized by a lock; drain swaps out the whole
    list so every event is returned by exactly one drain.
    """

    def __init__(self):
        self._events: List[RawEvent] = []
        self._lock = threading.Lock()

    def append(self, event: RawEvent) -> None:
        with self._lock:
            self._events.append(event)

    def extend(self, events: Iterable[RawEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def drain(self) -> List[RawEvent]:
        """
        Remove and return all buffered events.

        Returns:
            Events in arrival order (empty list if nothing was buffered)
        """
        with self._lock:
            events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __bool__(self) -> bool:
        return len(self) > 0


class EventCollector:
    """Moves events from the observer channel into the buffer."""

    def __init__(self, source: "queue.Queue", buffer: EventBuffer):
        """
        Initialize the collector.

        Args:
            source: Observer channel carrying RawEvent, ObserverError or CLOSED
            buffer: Buffer to append events to
        """
        self.source = source
        self.buffer = buffer
        self.collected = 0

    def run(self) -> int:
        """
        Collect events until the observer channel is closed.

        Returns:
            Number of events collected

        Raises:
            ObserverError: If the observer reported a failure
        """
        logger.debug("Collector started")
        while True:
            item = self.source.get()

            if item is CLOSED:
                logger.debug(f"Collector stopped after {self.collected} events")
                return self.collected

            if isinstance(item, ObserverError):
                raise item

            self.buffer.append(item)
            self.collected += 1


class EventDispatcher:
    """
    Periodically turns buffered events into one webhook notification.
    """

    def __init__(
        self,
        buffer: EventBuffer,
        base: Path,
        send: Callable[[NotificationPayload], bool],
        interval: float = 1.0,
        web_link: str = "",
        content: str = "",
    ):
        """
        Initialize the dispatcher.

        Args:
            buffer: Buffer shared with the collector
            base: Base folder for relative path rendering
            send: Transport callable, returns True on successful delivery
            interval: Seconds between dispatch checks
            web_link: Optional URL prefix for links to new files
            content: Free text for the payload body
        """
        self.buffer = buffer
        self.base = base
        self.send = send
        self.interval = interval
        self.web_link = web_link
        self.content = content
        self.cycles = 0
        self.sent = 0

    def dispatch_once(self) -> Optional[NotificationPayload]:
        """
        Run a single dispatch cycle.

        Returns:
            The payload that was sent, or None if there was nothing to send
        """
        events = self.buffer.drain()
        if not events:
            return None

        self.cycles += 1
        for event in events:
            logger.debug(
                "%s %s%s",
                event.kind.value,
                event.path,
                f" (from {event.prior_path})" if event.prior_path else "",
            )

        payload = build_payload(events, self.base, self.web_link, self.content)
        if payload is None:
            logger.debug(f"No notifiable changes in {len(events)} event(s)")
            return None

        if self.send(payload):
            self.sent += 1
        return payload

    def run(self, stop_event: threading.Event) -> None:
        """
        Dispatch every interval until the stop event is set.

        Events still buffered when the stop event is set are dispatched once
        more before returning.

        Args:
            stop_event: Cancellation signal
        """
        logger.debug(f"Dispatcher started, interval={self.interval}s")

        while not stop_event.is_set():
            self._safe_dispatch()
            stop_event.wait(timeout=self.interval)

        self._safe_dispatch()
        logger.debug(f"Dispatcher stopped after {self.cycles} cycles, {self.sent} sent")

    def _safe_dispatch(self) -> None:
        try:
            self.dispatch_once()
        except Exception as e:
            logger.exception(f"Dispatch cycle failed: {e}")
