"""SQLite-backed storage for book records."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from reading_tracker.core import BookStatus, InitializationError

SCHEMA_VERSION = 1


class DatabaseManager:
    """Owns the SQLite connection, the schema, and the lock serializing access to it.

    Nothing touches the disk until ``initialize()`` succeeds. Until then, and
    after ``close()``, every access to ``connection`` raises
    InitializationError so no operation can run against a missing schema.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.lock = threading.RLock()
        self._connection: Optional[sqlite3.Connection] = None

    @property
    def is_initialized(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise InitializationError(
                f"Database is not initialized: {self.db_path}"
            )
        return self._connection

    def initialize(self) -> None:
        """Open the database and create tables and indexes if they do not exist.

        Safe to call repeatedly, including across process restarts.

        Raises:
            InitializationError: If the file or schema cannot be created.
        """
        with self.lock:
            connection = self._connection
            try:
                if connection is None:
                    if str(self.db_path) != ":memory:":
                        self.db_path.parent.mkdir(parents=True, exist_ok=True)
                    connection = sqlite3.connect(
                        str(self.db_path), check_same_thread=False
                    )
                    connection.row_factory = sqlite3.Row
                self._ensure_schema(connection)
            except (sqlite3.Error, OSError) as e:
                if connection is not None and self._connection is None:
                    connection.close()
                raise InitializationError(
                    f"Failed to initialize database at {self.db_path}: {e}"
                ) from e
            self._connection = connection
        logger.debug("Database ready at {}", self.db_path)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Hold the connection lock and commit on success, roll back on any error."""
        with self.lock:
            connection = self.connection
            cur = connection.cursor()
            try:
                yield cur
            except BaseException:
                connection.rollback()
                raise
            else:
                connection.commit()

    def close(self) -> None:
        with self.lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    @staticmethod
    def _ensure_schema(connection: sqlite3.Connection) -> None:
        statuses = ", ".join(f"'{value}'" for value in BookStatus.values())
        cur = connection.cursor()
        cur.execute(
            f"""
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL CHECK (length(trim(title)) > 0),
                cover TEXT NOT NULL,
                total_pages INTEGER NOT NULL CHECK (total_pages > 0),
                pages_read INTEGER NOT NULL DEFAULT 0
                    CHECK (pages_read >= 0 AND pages_read <= total_pages),
                status TEXT NOT NULL DEFAULT 'to-read'
                    CHECK (status IN ({statuses})),
                rating INTEGER NOT NULL DEFAULT 0
                    CHECK (rating BETWEEN 0 AND 5),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        cur.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_books_updated_at
            ON books(updated_at);
            """
        )
        cur.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        connection.commit()
