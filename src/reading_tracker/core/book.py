"""Domain entities for book records and library statistics."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict

# SQLite INTEGER is a signed 64-bit value
MIN_STORED_INTEGER = -(2 ** 63)
MAX_STORED_INTEGER = 2 ** 63 - 1


class BookStatus(str, Enum):
    """Reading state of a book as stored in the ``status`` column."""

    TO_READ = "to-read"
    READING = "reading"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> tuple:
        return tuple(member.value for member in cls)

    @classmethod
    def for_progress(cls, pages_read: int, total_pages: int) -> "BookStatus":
        """Return the status consistent with the given progress.

        The store never derives status on its own; callers use this helper
        when they want ``status`` to follow ``pages_read``.
        """
        if pages_read <= 0:
            return cls.TO_READ
        if pages_read >= total_pages:
            return cls.COMPLETED
        return cls.READING


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp to the fixed-width UTC form stored on disk.

    Fixed width (microseconds always present) keeps lexical order equal to
    chronological order inside SQLite.
    """
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class BookDraft:
    """Caller-supplied fields of a new book (no id, no timestamps).

    Attributes:
        title: Display title, must not be blank.
        cover: Path to a local cover image or any other reference string.
        total_pages: Page count of the book, must be positive.
        pages_read: Progress, between 0 and total_pages inclusive.
        status: Reading state; the caller keeps it consistent with progress.
        rating: 0 (unrated) to 5.
    """

    title: str
    cover: str
    total_pages: int
    pages_read: int = 0
    status: BookStatus = BookStatus.TO_READ
    rating: int = 0


@dataclass(frozen=True)
class Book:
    """A persisted reading-progress record.

    Attributes:
        id: Unique identifier assigned by the repository.
        title: Display title.
        cover: Cover reference (usually a path inside the managed covers dir).
        total_pages: Page count of the book.
        pages_read: Pages read so far.
        status: Reading state.
        rating: 0 (unrated) to 5.
        created_at: UTC timestamp of creation.
        updated_at: UTC timestamp of the last mutation.
    """

    id: int
    title: str
    cover: str
    total_pages: int
    pages_read: int
    status: BookStatus
    rating: int
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> Dict[str, object]:
        """Return the camelCase mapping used in portable snapshots."""
        return {
            "id": self.id,
            "title": self.title,
            "cover": self.cover,
            "totalPages": self.total_pages,
            "pagesRead": self.pages_read,
            "status": self.status.value,
            "rating": self.rating,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }


@dataclass(frozen=True)
class Statistics:
    """Aggregate counters over the whole library."""

    total_books: int = 0
    completed_books: int = 0
    currently_reading: int = 0
    total_pages_read: int = 0
    total_pages_goal: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalBooks": self.total_books,
            "completedBooks": self.completed_books,
            "currentlyReading": self.currently_reading,
            "totalPagesRead": self.total_pages_read,
            "totalPagesGoal": self.total_pages_goal,
        }
