"""Main notifier process orchestrator."""

import logging
import threading
from typing import List, Optional

from .config import NotifierConfig
from .event_processor import EventBuffer, EventCollector, EventDispatcher
from .exceptions import NotifierAlreadyRunningError, ObserverError
from .fs_watcher import FolderObserver
from .webhook import WebhookClient

logger = logging.getLogger(__name__)


class NotifierProcess:
    """
    Main orchestrator for the folder notifier.

    Wires the observer, collector, dispatcher and webhook client together
    around one shared event buffer.
    """

    JOIN_TIMEOUT = 5.0

    def __init__(
        self,
        config: NotifierConfig,
        webhook: Optional[WebhookClient] = None,
    ):
        """
        Initialize the notifier process.

        Args:
            config: Notifier configuration
            webhook: Webhook client (built from config if not given)
        """
        self.config = config
        self.buffer = EventBuffer()
        self.observer = FolderObserver(config)
        self.webhook = webhook or WebhookClient(config.webhook, timeout=config.timeout)

        self._collector = EventCollector(self.observer.events, self.buffer)
        self._dispatcher = EventDispatcher(
            self.buffer,
            config.folder.resolve(),
            self.webhook.send,
            interval=config.interval,
            web_link=config.web_link,
            content=config.content,
        )

        self._running = False
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []
        # stop() can run from a signal handler on the thread holding this lock
        self._lock = threading.RLock()
        self._fatal_error: Optional[ObserverError] = None

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def is_running(self) -> bool:
        """Check if the notifier is running."""
        return self._running

    @property
    def fatal_error(self) -> Optional[ObserverError]:
        """The observer failure that stopped the notifier, if any."""
        return self._fatal_error

    def _begin(self) -> None:
        with self._lock:
            if self._running:
                raise NotifierAlreadyRunningError("Notifier is already running")
            if self._stop_event.is_set():
                raise NotifierAlreadyRunningError("Notifier has already been stopped")
            self._running = True

        try:
            self.observer.add_recursive(self.config.folder)
        except ObserverError:
            with self._lock:
                self._running = False
            raise

        self._threads = [
            threading.Thread(target=self._collector_loop, name="Collector"),
            threading.Thread(target=self._dispatcher_loop, name="Dispatcher"),
        ]
        for thread in self._threads:
            thread.daemon = True
            thread.start()

    def start(self) -> None:
        """
        Start the notifier (blocking).

        Blocks inside the observer until stop() is called or the observer
        fails.

        Raises:
            NotifierAlreadyRunningError: If already running
            ObserverError: If the folder cannot be watched or the observer fails
        """
        self._begin()
        logger.info(f"Notifier started for {self.config.folder}")

        try:
            self.observer.start()
        except KeyboardInterrupt:
            logger.info("Notifier interrupted by user")
        except ObserverError as e:
            # stop() may close the observer before it gets to start
            if self._fatal_error is None and self._running:
                self._fatal_error = e
        finally:
            self._shutdown()

        if self._fatal_error is not None:
            raise self._fatal_error

    def start_async(self) -> None:
        """
        Start the notifier in the background.

        Returns immediately while the observer runs in its own thread.

        Raises:
            NotifierAlreadyRunningError: If already running
            ObserverError: If the folder cannot be watched
        """
        self._begin()
        observer_thread = threading.Thread(target=self._observer_loop, name="Observer")
        observer_thread.daemon = True
        observer_thread.start()
        self._threads.append(observer_thread)
        logger.info(f"Notifier started in background for {self.config.folder}")

    def stop(self) -> None:
        """
        Stop the notifier gracefully.

        Signals all threads to stop, flushes buffered events and waits for
        the threads to finish.
        """
        self._shutdown()

    def _shutdown(self) -> None:
        """Internal shutdown procedure."""
        with self._lock:
            if not self._running:
                return
            self._running = False

        # The collector drains the channel up to CLOSED before the dispatcher's final flush
        self.observer.close()
        for thread in self._threads:
            if thread.name != "Dispatcher":
                self._join(thread, self.JOIN_TIMEOUT)

        # The final flush is bounded by the webhook timeout, not by JOIN_TIMEOUT
        self._stop_event.set()
        for thread in self._threads:
            if thread.name == "Dispatcher":
                self._join(thread, None)
        self._threads.clear()

        logger.info("Notifier stopped")

    @staticmethod
    def _join(thread: threading.Thread, timeout: Optional[float]) -> None:
        if thread is not threading.current_thread() and thread.is_alive():
            thread.join(timeout=timeout)

    def _collector_loop(self) -> None:
        try:
            self._collector.run()
        except ObserverError as e:
            logger.critical(f"Observer failed: {e}")
            self._fatal_error = e
            self._stop_event.set()
            self.observer.close()

    def _dispatcher_loop(self) -> None:
        self._dispatcher.run(self._stop_event)

    def _observer_loop(self) -> None:
        try:
            self.observer.start()
        except ObserverError as e:
            if self._fatal_error is None and self._running:
                logger.critical(f"Observer failed: {e}")
                self._fatal_error = e
            self._stop_event.set()
            self.observer.close()

    def close(self) -> None:
        """Stop the notifier and release all resources."""
        self.stop()
        self.webhook.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
