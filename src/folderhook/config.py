"""Configuration for the folderhook package."""

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

BACKENDS = ("polling", "native")


@dataclass
class NotifierConfig:
    """
    Configuration options for the folder notifier.

    Attributes:
        folder: Base directory watched recursively, also the root for relative paths
        webhook: Destination URL for notifications
        polling_ms: Milliseconds between dispatch checks (and observer polls)
        web_link: Optional URL prefix for links to newly created files
        content: Free text placed in the payload's content field
        ignore_patterns: Glob patterns for paths to drop at the observer
        backend: watchdog observer type, "polling" or "native"
        timeout: HTTP timeout in seconds for webhook calls
    """
    folder: Path
    webhook: str
    polling_ms: int = 1000
    web_link: str = ""
    content: str = ""
    ignore_patterns: List[str] = field(default_factory=list)
    backend: str = "polling"
    timeout: float = 10.0

    def __post_init__(self):
        if isinstance(self.folder, str):
            self.folder = Path(self.folder)

    @property
    def interval(self) -> float:
        """Polling interval in seconds."""
        return self.polling_ms / 1000.0

    def should_ignore(self, path: Path) -> bool:
        """
        Check if a path should be ignored based on ignore patterns.

        Args:
            path: Path to check

        Returns:
            True if the path should be ignored
        """
        path_str = str(path)
        name = path.name

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(name, pattern):
                return True
            if fnmatch.fnmatch(path_str, f"*/{pattern}"):
                return True
            if fnmatch.fnmatch(path_str, pattern):
                return True

        return False


def load_config(path: Path) -> NotifierConfig:
    """
    Load and validate the YAML configuration file.

    Args:
        path: Path to the configuration file

    Returns:
        The parsed configuration

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    polling = _parse_polling(data.get("polling"))

    webhook = data.get("webhook")
    if not isinstance(webhook, str) or not webhook.strip():
        raise ConfigError("webhook must be a non-empty string")

    folder_raw = data.get("folder")
    if not isinstance(folder_raw, str) or not folder_raw.strip():
        raise ConfigError("folder must be a non-empty string")
    folder = Path(folder_raw).expanduser()
    if not folder.is_absolute():
        folder = (path.parent / folder).resolve()

    web_link = _optional_str(data.get("webLink"), "webLink")
    content = _optional_str(data.get("content"), "content")
    ignore_patterns = _ensure_str_list(data.get("ignore"), "ignore")

    backend = data.get("backend", "polling")
    if backend not in BACKENDS:
        raise ConfigError(f"backend must be one of: {', '.join(BACKENDS)}")

    timeout = data.get("timeout", 10.0)
    if isinstance(timeout, bool):
        raise ConfigError("timeout must be numeric")
    try:
        timeout_val = float(timeout)
    except (TypeError, ValueError) as exc:
        raise ConfigError("timeout must be numeric") from exc
    if timeout_val <= 0:
        raise ConfigError("timeout must be positive")

    config = NotifierConfig(
        folder=folder,
        webhook=webhook.strip(),
        polling_ms=polling,
        web_link=web_link,
        content=content,
        ignore_patterns=ignore_patterns,
        backend=backend,
        timeout=timeout_val,
    )
    logger.info(
        "Loaded configuration from %s (folder=%s, polling=%dms, backend=%s)",
        path, config.folder, config.polling_ms, config.backend,
    )
    return config


def _parse_polling(value: Any) -> int:
    if value is None:
        raise ConfigError("polling is required (milliseconds)")
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError("polling must be an integer number of milliseconds")
    if value <= 0:
        raise ConfigError("polling must be positive")
    return value


def _optional_str(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"{field_name} must be a string if provided")
    return value


def _ensure_str_list(value: Any, field_name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list of strings")
    items: List[str] = []
    for elem in value:
        if not isinstance(elem, str):
            raise ConfigError(f"{field_name} must contain only strings")
        items.append(elem)
    return items
