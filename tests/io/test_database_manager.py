from pathlib import Path

import pytest

from reading_tracker.core import InitializationError
from reading_tracker.io import BookRepository, DatabaseManager


@pytest.fixture
def manager(tmp_path):
    db_path = tmp_path / "library.db"
    db_manager = DatabaseManager(db_path)
    db_manager.initialize()
    yield db_manager
    db_manager.close()


def test_schema_created(manager):
    cur = manager.connection.cursor()
    cur.execute("SELECT name FROM sqlite_master WHERE type='table'")
    table_names = {row["name"] for row in cur.fetchall()}
    assert "books" in table_names


def test_initialize_is_idempotent(manager):
    manager.initialize()
    manager.initialize()
    cur = manager.connection.cursor()
    cur.execute("SELECT COUNT(*) FROM sqlite_master WHERE name = 'books'")
    assert cur.fetchone()[0] == 1


def test_initialize_survives_restart(tmp_path):
    db_path = tmp_path / "nested" / "library.db"
    first = DatabaseManager(db_path)
    first.initialize()
    first.connection.execute(
        """
        INSERT INTO books (title, cover, total_pages, pages_read, status, rating,
                           created_at, updated_at)
        VALUES ('Dune', 'x', 400, 0, 'to-read', 0, 't', 't')
        """
    )
    first.connection.commit()
    first.close()

    second = DatabaseManager(db_path)
    second.initialize()
    count = second.connection.execute("SELECT COUNT(*) FROM books").fetchone()[0]
    second.close()
    assert count == 1


def test_initialize_failure_raises_initialization_error(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way")

    db_manager = DatabaseManager(blocker / "library.db")
    with pytest.raises(InitializationError, match="Failed to initialize"):
        db_manager.initialize()
    assert not db_manager.is_initialized


def test_uninitialized_manager_refuses_operations(tmp_path):
    db_manager = DatabaseManager(tmp_path / "library.db")
    repo = BookRepository(db_manager)

    with pytest.raises(InitializationError, match="not initialized"):
        repo.get_books()
    assert not (tmp_path / "library.db").exists()


def test_closed_manager_refuses_operations(manager):
    manager.close()
    with pytest.raises(InitializationError):
        _ = manager.connection


def test_transaction_rolls_back_on_error(manager):
    with pytest.raises(RuntimeError):
        with manager.transaction() as cur:
            cur.execute(
                """
                INSERT INTO books (title, cover, total_pages, pages_read, status,
                                   rating, created_at, updated_at)
                VALUES ('Dune', 'x', 400, 0, 'to-read', 0, 't', 't')
                """
            )
            raise RuntimeError("boom")

    count = manager.connection.execute("SELECT COUNT(*) FROM books").fetchone()[0]
    assert count == 0


def test_schema_rejects_pages_read_above_total(manager):
    import sqlite3

    with pytest.raises(sqlite3.IntegrityError):
        manager.connection.execute(
            """
            INSERT INTO books (title, cover, total_pages, pages_read, status,
                               rating, created_at, updated_at)
            VALUES ('Dune', 'x', 10, 11, 'reading', 0, 't', 't')
            """
        )
