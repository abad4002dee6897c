#!/usr/bin/env python3
"""
CLI for the folder webhook notifier.

Usage:
    python -m src.cli run --config config.yaml
    python -m src.cli list-watched --config config.yaml
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Callable, Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.folderhook import (
    ConfigError,
    FolderObserver,
    NotifierProcess,
    ObserverError,
    load_config,
)


logger = logging.getLogger("cli")

EXIT_FATAL = 1
EXIT_CONFIG = 2


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Suppress httpx logging
    logging.getLogger("httpx").setLevel(logging.WARNING)


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""

    def __init__(self, on_exit: Optional[Callable[[], None]] = None):
        self.should_exit = False
        self.on_exit = on_exit
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.should_exit = True
        if self.on_exit:
            self.on_exit()


def _load(args):
    try:
        return load_config(Path(args.config))
    except ConfigError as e:
        logger.critical(f"Cannot load configuration: {e}")
        sys.exit(EXIT_CONFIG)


def print_watched(observer: FolderObserver) -> None:
    for path, name in observer.watched_files().items():
        print(f"{path}: {name}")
    print()


def cmd_run(args):
    """Run the notifier until interrupted."""
    config = _load(args)

    notifier = NotifierProcess(config)
    GracefulShutdown(on_exit=notifier.stop)

    if args.list_watched:
        try:
            notifier.observer.add_recursive(config.folder)
        except ObserverError as e:
            logger.critical(f"Cannot watch folder: {e}")
            sys.exit(EXIT_FATAL)
        print_watched(notifier.observer)

    logger.info(f"Watching {config.folder}, notifying every {config.polling_ms}ms")
    logger.info("Press Ctrl+C to stop")

    try:
        notifier.start()
    except ObserverError as e:
        logger.critical(f"Notifier stopped: {e}")
        sys.exit(EXIT_FATAL)
    finally:
        notifier.close()


def cmd_list_watched(args):
    """Print every entry the notifier would watch, then exit."""
    config = _load(args)

    observer = FolderObserver(config)
    try:
        observer.add_recursive(config.folder)
    except ObserverError as e:
        logger.critical(f"Cannot watch folder: {e}")
        sys.exit(EXIT_FATAL)

    print_watched(observer)
    observer.close()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Post a webhook notification when files in a folder change",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Watch the folder from config.yaml and post changes
  python -m src.cli run

  # Use another configuration file
  python -m src.cli run --config /etc/folderhook.yaml

  # Show what would be watched
  python -m src.cli list-watched
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Run command
    run_parser = subparsers.add_parser("run", help="Watch the folder and post notifications")
    run_parser.add_argument("--config", default="config.yaml", help="YAML configuration file (default: config.yaml)")
    run_parser.add_argument("--list-watched", action="store_true", help="Print watched entries before starting")
    run_parser.set_defaults(func=cmd_run)

    # List watched command
    list_parser = subparsers.add_parser("list-watched", help="Print watched entries and exit")
    list_parser.add_argument("--config", default="config.yaml", help="YAML configuration file (default: config.yaml)")
    list_parser.set_defaults(func=cmd_list_watched)

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    args.func(args)


if __name__ == "__main__":
    main()
