"""Custom exceptions for the folderhook package."""


class NotifierError(Exception):
    """Base exception for all notifier errors."""
    pass


class ConfigError(NotifierError):
    """Configuration file is missing or invalid."""
    pass


class ObserverError(NotifierError):
    """The filesystem observer failed and cannot continue."""
    pass


class DeliveryError(NotifierError):
    """A notification could not be delivered to the webhook."""
    pass


class NotifierAlreadyRunningError(NotifierError):
    """Notifier process is already running."""
    pass
