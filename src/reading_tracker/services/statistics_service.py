"""Aggregate counters over the book library."""

import sqlite3

from reading_tracker.core import BookStatus, Statistics, TrackerError
from reading_tracker.io import DatabaseManager


class StatisticsService:
    """Computes library-wide totals with a single aggregate query."""

    def __init__(self, database: DatabaseManager) -> None:
        if database is None:
            raise RuntimeError("DatabaseManager required")
        self.database = database

    def get_statistics(self) -> Statistics:
        """Return book counts and page sums; all zero on an empty library."""
        try:
            with self.database.lock:
                cur = self.database.connection.cursor()
                cur.execute(
                    """
                    SELECT
                        COUNT(*) AS total_books,
                        COALESCE(SUM(CASE WHEN status = ? THEN 1 ELSE 0 END), 0)
                            AS completed_books,
                        COALESCE(SUM(CASE WHEN status = ? THEN 1 ELSE 0 END), 0)
                            AS currently_reading,
                        COALESCE(SUM(pages_read), 0) AS total_pages_read,
                        COALESCE(SUM(total_pages), 0) AS total_pages_goal
                    FROM books
                    """,
                    (BookStatus.COMPLETED.value, BookStatus.READING.value),
                )
                row = cur.fetchone()
        except sqlite3.Error as e:
            raise TrackerError(f"Failed to compute statistics: {e}") from e
        return Statistics(
            total_books=int(row["total_books"]),
            completed_books=int(row["completed_books"]),
            currently_reading=int(row["currently_reading"]),
            total_pages_read=int(row["total_pages_read"]),
            total_pages_goal=int(row["total_pages_goal"]),
        )
