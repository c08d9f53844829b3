"""Typed failures raised by the persistence and interchange layer."""


class TrackerError(Exception):
    """Base class for every failure the core reports to its callers."""


class InitializationError(TrackerError):
    """The database could not be created or is not ready for use."""


class ValidationError(TrackerError, ValueError):
    """Input rejected on create, update or import."""


class SnapshotIOError(TrackerError, OSError):
    """Reading or writing a snapshot file failed."""


class NotFoundError(TrackerError, LookupError):
    """An operation referenced a book id that does not exist."""


class OperationCancelledError(TrackerError):
    """A long-running export or import was cancelled before completion."""
