#!/usr/bin/env python3
"""
Tests for BookRepository - validates book record persistence.
"""

from datetime import datetime, timedelta, timezone

import pytest

from reading_tracker.core import (
    BookDraft,
    BookStatus,
    NotFoundError,
    OperationCancelledError,
    TrackerError,
    ValidationError,
)
from reading_tracker.io import BookRepository, DatabaseManager


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self):
        self.current = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def database():
    """Create an in-memory database for testing."""
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def repo(database):
    return BookRepository(database, clock=StepClock())


def make_draft(**overrides):
    values = dict(
        title="Dune",
        cover="/covers/dune.jpg",
        total_pages=412,
        pages_read=0,
        status=BookStatus.TO_READ,
        rating=0,
    )
    values.update(overrides)
    return BookDraft(**values)


def test_add_book_assigns_id_and_timestamps(repo):
    draft = make_draft(pages_read=12, status=BookStatus.READING, rating=4)

    book_id = repo.add_book(draft)
    books = repo.get_books()

    assert book_id > 0
    assert len(books) == 1
    book = books[0]
    assert book.id == book_id
    assert book.created_at == book.updated_at
    assert book.title == draft.title
    assert book.cover == draft.cover
    assert book.total_pages == draft.total_pages
    assert book.pages_read == draft.pages_read
    assert book.status == draft.status
    assert book.rating == draft.rating


def test_add_book_accepts_status_string(repo):
    book_id = repo.add_book(make_draft(status="completed", pages_read=412))
    assert repo.get_book(book_id).status is BookStatus.COMPLETED


def test_add_book_ids_are_unique(repo):
    ids = {repo.add_book(make_draft(title=f"Book {i}")) for i in range(5)}
    assert len(ids) == 5


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"title": ""}, "title cannot be empty"),
        ({"title": "   "}, "title cannot be empty"),
        ({"cover": ""}, "cover cannot be empty"),
        ({"total_pages": 0}, "total_pages must be greater than 0"),
        ({"total_pages": -5}, "total_pages must be greater than 0"),
        ({"pages_read": -1}, "pages_read must be between"),
        ({"pages_read": 413}, "pages_read must be between"),
        ({"rating": 6}, "rating must be between"),
        ({"status": "abandoned"}, "status must be one of"),
        ({"total_pages": True}, "total_pages must be an integer"),
        ({"total_pages": 2 ** 64}, "total_pages is out of range"),
        ({"rating": -(2 ** 64)}, "rating is out of range"),
    ],
)
def test_add_book_rejects_invalid_draft(repo, overrides, message):
    with pytest.raises(ValidationError, match=message):
        repo.add_book(make_draft(**overrides))
    assert repo.get_books() == []


def test_get_books_empty(repo):
    assert repo.get_books() == []


def test_get_books_orders_by_updated_at_desc(repo):
    first = repo.add_book(make_draft(title="First"))
    second = repo.add_book(make_draft(title="Second"))
    third = repo.add_book(make_draft(title="Third"))

    assert [b.id for b in repo.get_books()] == [third, second, first]

    repo.update_progress(first, 10, BookStatus.READING)
    assert [b.id for b in repo.get_books()] == [first, third, second]


def test_get_books_breaks_ties_by_id_desc(database):
    fixed = datetime(2026, 5, 1, tzinfo=timezone.utc)
    repo = BookRepository(database, clock=lambda: fixed)

    first = repo.add_book(make_draft(title="First"))
    second = repo.add_book(make_draft(title="Second"))

    assert [b.id for b in repo.get_books()] == [second, first]


def test_title_is_stored_as_given(repo):
    book_id = repo.add_book(make_draft(title="  Dune  "))
    assert repo.get_books()[0].title == "  Dune  "

    repo.update_details(book_id, " Dune Messiah ", 256, "to-read", "c", 0)
    assert repo.get_book(book_id).title == " Dune Messiah "


def test_oversized_id_is_a_typed_error(repo):
    with pytest.raises(TrackerError):
        repo.get_book(2 ** 64)
    with pytest.raises(TrackerError):
        repo.delete_book(2 ** 64)


def test_get_book_not_found(repo):
    with pytest.raises(NotFoundError, match="Book not found"):
        repo.get_book(999)


def test_update_progress_to_total_and_back(repo):
    book_id = repo.add_book(make_draft(total_pages=100))

    done = repo.update_progress(book_id, 100, BookStatus.COMPLETED)
    assert done.pages_read == 100
    assert done.status is BookStatus.COMPLETED

    reset = repo.update_progress(book_id, 0, BookStatus.TO_READ)
    assert reset.pages_read == 0
    assert reset.status is BookStatus.TO_READ


def test_update_progress_without_status_keeps_status(repo):
    book_id = repo.add_book(make_draft(total_pages=100))

    updated = repo.update_progress(book_id, 50)

    assert updated.pages_read == 50
    assert updated.status is BookStatus.TO_READ


def test_update_progress_refreshes_updated_at(repo):
    book_id = repo.add_book(make_draft())
    before = repo.get_book(book_id)

    after = repo.update_progress(book_id, 1, BookStatus.READING)

    assert after.updated_at > before.updated_at
    assert after.created_at == before.created_at


def test_update_progress_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.update_progress(42, 1)


def test_update_progress_rejects_out_of_range(repo):
    book_id = repo.add_book(make_draft(total_pages=100))
    with pytest.raises(ValidationError, match="between 0 and 100"):
        repo.update_progress(book_id, 101)
    assert repo.get_book(book_id).pages_read == 0


def test_update_details_overwrites_fields(repo):
    book_id = repo.add_book(make_draft())

    updated = repo.update_details(
        book_id,
        title="Dune Messiah",
        total_pages=256,
        status=BookStatus.READING,
        cover="/covers/messiah.png",
        rating=5,
    )

    assert updated.title == "Dune Messiah"
    assert updated.total_pages == 256
    assert updated.status is BookStatus.READING
    assert updated.cover == "/covers/messiah.png"
    assert updated.rating == 5
    assert updated.updated_at > updated.created_at


def test_update_details_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.update_details(7, "T", 10, "to-read", "c", 0)


def test_update_details_rejects_total_below_progress(repo):
    book_id = repo.add_book(make_draft(total_pages=100, pages_read=80, status="reading"))
    with pytest.raises(ValidationError, match="lower than pages_read"):
        repo.update_details(book_id, "Dune", 50, "reading", "c", 0)
    assert repo.get_book(book_id).total_pages == 100


def test_delete_book(repo):
    book_id = repo.add_book(make_draft())

    assert repo.delete_book(book_id) is True
    assert repo.get_books() == []


def test_delete_book_unknown_id_is_noop(repo):
    repo.add_book(make_draft())
    assert repo.delete_book(999) is False
    assert len(repo.get_books()) == 1


def test_reset_all_is_idempotent(repo):
    repo.add_book(make_draft(title="A"))
    repo.add_book(make_draft(title="B"))

    assert repo.reset_all() == 2
    assert repo.get_books() == []
    assert repo.reset_all() == 0
    assert repo.get_books() == []


def test_replace_all_swaps_collection(repo):
    old_id = repo.add_book(make_draft(title="Old"))

    ids = repo.replace_all([make_draft(title="New 1"), make_draft(title="New 2")])

    titles = {b.title for b in repo.get_books()}
    assert titles == {"New 1", "New 2"}
    assert old_id not in ids


def test_replace_all_validates_before_clearing(repo):
    repo.add_book(make_draft(title="Keep me"))

    with pytest.raises(ValidationError):
        repo.replace_all([make_draft(title="Fine"), make_draft(total_pages=0)])

    assert [b.title for b in repo.get_books()] == ["Keep me"]


def test_replace_all_cancelled_keeps_previous_collection(repo):
    repo.add_book(make_draft(title="Keep me"))
    calls = []

    def should_cancel():
        calls.append(1)
        return len(calls) > 1

    with pytest.raises(OperationCancelledError):
        repo.replace_all([make_draft(title="New 1"), make_draft(title="New 2")], should_cancel)

    assert [b.title for b in repo.get_books()] == ["Keep me"]


def test_replace_all_rejects_oversized_integers(repo):
    repo.add_book(make_draft(title="Keep me"))

    with pytest.raises(ValidationError, match="out of range"):
        repo.replace_all([make_draft(title="New"), make_draft(total_pages=2 ** 64)])

    assert [b.title for b in repo.get_books()] == ["Keep me"]


def test_repository_fails_fast_on_missing_database():
    with pytest.raises(RuntimeError, match="DatabaseManager required"):
        BookRepository(None)
