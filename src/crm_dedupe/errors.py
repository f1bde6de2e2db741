class DedupError(Exception):
    """Base class for errors raised by the dedupe package."""


class StoreError(DedupError):
    """Raised when the persistence layer cannot complete a read or write."""


class ConfigError(DedupError):
    """Raised when a settings file cannot be read or does not validate."""
