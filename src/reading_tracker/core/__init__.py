"""Domain layer - Pure entities representing the reading library."""

from .book import Book, BookDraft, BookStatus, Statistics
from .errors import (
    InitializationError,
    NotFoundError,
    OperationCancelledError,
    SnapshotIOError,
    TrackerError,
    ValidationError,
)
from .import_records import CoverPayload, RawImportRecord, ValidatedBook

__all__ = [
    "Book",
    "BookDraft",
    "BookStatus",
    "Statistics",
    "ValidatedBook",
    "CoverPayload",
    "RawImportRecord",
    "TrackerError",
    "InitializationError",
    "ValidationError",
    "SnapshotIOError",
    "NotFoundError",
    "OperationCancelledError",
]
