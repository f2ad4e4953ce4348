"""
Exception types raised by the notes client.

Validation and authentication problems are reported as values
(ValidationResult, Error) and never appear here.
"""


class NoteSyncError(Exception):
    """Base class for notes client errors."""


class StorageFault(NoteSyncError):
    """The note cache rejected a write or its storage is unavailable."""


class NotFound(StorageFault):
    """No note row exists with the requested identifier."""


class SynchronizationFault(NoteSyncError):
    """Remote notes could not be fetched or applied to the cache."""
