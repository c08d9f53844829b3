"""Data access layer for book record persistence."""

import sqlite3
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Union

from loguru import logger

from reading_tracker.core import (
    Book,
    BookDraft,
    BookStatus,
    NotFoundError,
    OperationCancelledError,
    TrackerError,
    ValidationError,
)
from reading_tracker.core.book import (
    MAX_STORED_INTEGER,
    MIN_STORED_INTEGER,
    format_timestamp,
    parse_timestamp,
    utc_now,
)
from reading_tracker.io.database_manager import DatabaseManager

_SELECT_COLUMNS = (
    "id, title, cover, total_pages, pages_read, status, rating, created_at, updated_at"
)


class BookRepository:
    """Manages persistence of book records in the database.

    This repository follows the failing-fast philosophy: invalid input raises
    ValidationError, unknown ids raise NotFoundError (except for deletes,
    which are no-ops), and SQLite failures surface as TrackerError. Every
    statement runs under the database lock.

    The status/progress invariant is the caller's responsibility; the
    repository stores whatever status it is given.
    """

    def __init__(
        self,
        database: DatabaseManager,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize repository with the database it operates on.

        Args:
            database: Manager owning the connection; it must be initialized
                before any operation is issued.
            clock: Source of "now" for created_at/updated_at.

        Raises:
            RuntimeError: If database is None.
        """
        if database is None:
            raise RuntimeError("DatabaseManager required")
        self.database = database
        self._clock = clock

    def add_book(self, draft: BookDraft) -> int:
        """Store a new book and return its id.

        Raises:
            ValidationError: If the draft breaks a field constraint.
        """
        status = self._check_draft(draft)
        try:
            with self.database.transaction() as cur:
                book_id = self._insert(cur, draft, status, self._now())
        except (sqlite3.Error, OverflowError) as e:
            raise TrackerError(f"Failed to add book: {e}") from e
        return book_id

    def get_books(self) -> List[Book]:
        """Retrieve all books, most recently updated first.

        Books sharing an updated_at are ordered by id descending.
        """
        try:
            with self.database.lock:
                cur = self.database.connection.cursor()
                cur.execute(
                    f"""
                    SELECT {_SELECT_COLUMNS}
                    FROM books
                    ORDER BY updated_at DESC, id DESC
                    """
                )
                rows = cur.fetchall()
        except sqlite3.Error as e:
            raise TrackerError(f"Failed to retrieve books: {e}") from e
        return [self._row_to_book(row) for row in rows]

    def get_book(self, book_id: int) -> Book:
        """Retrieve one book by id.

        Raises:
            NotFoundError: If no book has this id.
        """
        try:
            with self.database.lock:
                cur = self.database.connection.cursor()
                cur.execute(
                    f"SELECT {_SELECT_COLUMNS} FROM books WHERE id = ?",
                    (book_id,),
                )
                row = cur.fetchone()
        except (sqlite3.Error, OverflowError) as e:
            raise TrackerError(f"Failed to retrieve book: {e}") from e
        if row is None:
            raise NotFoundError(f"Book not found: {book_id}")
        return self._row_to_book(row)

    def update_progress(
        self,
        book_id: int,
        pages_read: int,
        status: Optional[Union[BookStatus, str]] = None,
    ) -> Book:
        """Record reading progress and refresh updated_at.

        Args:
            book_id: Book to update.
            pages_read: New progress, between 0 and the book's total_pages.
            status: New status; when None the stored status is kept.

        Returns:
            Book: The updated book.

        Raises:
            NotFoundError: If no book has this id.
            ValidationError: If pages_read is out of range or status unknown.
        """
        new_status = None if status is None else _coerce_status(status)
        _require_int(pages_read, "pages_read")
        try:
            with self.database.transaction() as cur:
                cur.execute("SELECT total_pages FROM books WHERE id = ?", (book_id,))
                row = cur.fetchone()
                if row is None:
                    raise NotFoundError(f"Book not found: {book_id}")
                if not 0 <= pages_read <= row["total_pages"]:
                    raise ValidationError(
                        f"pages_read must be between 0 and {row['total_pages']}"
                    )
                now = format_timestamp(self._now())
                if new_status is None:
                    cur.execute(
                        "UPDATE books SET pages_read = ?, updated_at = ? WHERE id = ?",
                        (pages_read, now, book_id),
                    )
                else:
                    cur.execute(
                        """
                        UPDATE books
                        SET pages_read = ?, status = ?, updated_at = ?
                        WHERE id = ?
                        """,
                        (pages_read, new_status.value, now, book_id),
                    )
        except (sqlite3.Error, OverflowError) as e:
            raise TrackerError(f"Failed to update progress: {e}") from e
        return self.get_book(book_id)

    def update_details(
        self,
        book_id: int,
        title: str,
        total_pages: int,
        status: Union[BookStatus, str],
        cover: str,
        rating: int,
    ) -> Book:
        """Overwrite the editable details of a book and refresh updated_at.

        A total_pages below the stored pages_read is rejected; callers lower
        progress first.

        Raises:
            NotFoundError: If no book has this id.
            ValidationError: If any field breaks its constraint.
        """
        new_status = _coerce_status(status)
        _check_title(title)
        _check_total_pages(total_pages)
        _check_rating(rating)
        _check_cover(cover)
        try:
            with self.database.transaction() as cur:
                cur.execute("SELECT pages_read FROM books WHERE id = ?", (book_id,))
                row = cur.fetchone()
                if row is None:
                    raise NotFoundError(f"Book not found: {book_id}")
                if total_pages < row["pages_read"]:
                    raise ValidationError(
                        f"total_pages cannot be lower than pages_read ({row['pages_read']})"
                    )
                cur.execute(
                    """
                    UPDATE books
                    SET title = ?, total_pages = ?, status = ?, cover = ?,
                        rating = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        title,
                        total_pages,
                        new_status.value,
                        cover,
                        rating,
                        format_timestamp(self._now()),
                        book_id,
                    ),
                )
        except (sqlite3.Error, OverflowError) as e:
            raise TrackerError(f"Failed to update book details: {e}") from e
        return self.get_book(book_id)

    def delete_book(self, book_id: int) -> bool:
        """Permanently remove a book. Unknown ids are a no-op.

        Returns:
            bool: True if a row was removed.
        """
        try:
            with self.database.transaction() as cur:
                cur.execute("DELETE FROM books WHERE id = ?", (book_id,))
                deleted = cur.rowcount > 0
        except (sqlite3.Error, OverflowError) as e:
            raise TrackerError(f"Failed to delete book: {e}") from e
        if not deleted:
            logger.debug("Delete ignored, no book with id {}", book_id)
        return deleted

    def reset_all(self) -> int:
        """Remove every book. Returns the number of removed rows."""
        try:
            with self.database.transaction() as cur:
                cur.execute("DELETE FROM books")
                removed = cur.rowcount
        except sqlite3.Error as e:
            raise TrackerError(f"Failed to reset library: {e}") from e
        logger.info("Library reset, {} book(s) removed", removed)
        return removed

    def replace_all(
        self,
        drafts: Iterable[BookDraft],
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> List[int]:
        """Replace the whole collection with new books in one transaction.

        All drafts are checked before anything is touched. If a draft fails
        to insert or should_cancel returns True, the transaction is rolled
        back and the previous collection is left as it was.

        Returns:
            List[int]: Ids of the inserted books, in draft order.

        Raises:
            ValidationError: If any draft breaks a field constraint.
            OperationCancelledError: If cancelled before commit.
        """
        checked = [(draft, self._check_draft(draft)) for draft in drafts]
        now = self._now()
        ids: List[int] = []
        try:
            with self.database.transaction() as cur:
                cur.execute("DELETE FROM books")
                for draft, status in checked:
                    if should_cancel is not None and should_cancel():
                        raise OperationCancelledError("Import cancelled")
                    ids.append(self._insert(cur, draft, status, now))
        except (sqlite3.Error, OverflowError) as e:
            raise TrackerError(f"Failed to replace library contents: {e}") from e
        return ids

    def _now(self) -> datetime:
        return self._clock()

    @staticmethod
    def _check_draft(draft: BookDraft) -> BookStatus:
        if draft is None:
            raise ValidationError("Book draft required")
        status = _coerce_status(draft.status)
        _check_title(draft.title)
        _check_total_pages(draft.total_pages)
        _require_int(draft.pages_read, "pages_read")
        if not 0 <= draft.pages_read <= draft.total_pages:
            raise ValidationError(
                f"pages_read must be between 0 and {draft.total_pages}"
            )
        _check_rating(draft.rating)
        _check_cover(draft.cover)
        return status

    @staticmethod
    def _insert(
        cur: sqlite3.Cursor, draft: BookDraft, status: BookStatus, now: datetime
    ) -> int:
        timestamp = format_timestamp(now)
        cur.execute(
            """
            INSERT INTO books (
                title, cover, total_pages, pages_read, status, rating,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                draft.title,
                draft.cover,
                draft.total_pages,
                draft.pages_read,
                status.value,
                draft.rating,
                timestamp,
                timestamp,
            ),
        )
        return cur.lastrowid

    @staticmethod
    def _row_to_book(row: sqlite3.Row) -> Book:
        """Convert database row to Book entity."""
        return Book(
            id=row["id"],
            title=row["title"],
            cover=row["cover"],
            total_pages=row["total_pages"],
            pages_read=row["pages_read"],
            status=BookStatus(row["status"]),
            rating=row["rating"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )


def _require_int(value, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if not MIN_STORED_INTEGER <= value <= MAX_STORED_INTEGER:
        raise ValidationError(f"{field} is out of range")


def _coerce_status(status: Union[BookStatus, str]) -> BookStatus:
    try:
        return BookStatus(status)
    except ValueError as e:
        raise ValidationError(
            f"status must be one of {', '.join(BookStatus.values())}"
        ) from e


def _check_title(title: str) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Book title cannot be empty")


def _check_cover(cover: str) -> None:
    if not isinstance(cover, str) or not cover.strip():
        raise ValidationError("Book cover cannot be empty")


def _check_total_pages(total_pages: int) -> None:
    _require_int(total_pages, "total_pages")
    if total_pages <= 0:
        raise ValidationError("total_pages must be greater than 0")


def _check_rating(rating: int) -> None:
    _require_int(rating, "rating")
    if not 0 <= rating <= 5:
        raise ValidationError("rating must be between 0 and 5")
