"""Tests for StatisticsService - library aggregates."""

import pytest

from reading_tracker.core import BookDraft, BookStatus, Statistics
from reading_tracker.io import BookRepository, DatabaseManager
from reading_tracker.services import StatisticsService


@pytest.fixture
def database():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


def test_empty_library_returns_all_zeros(database):
    stats = StatisticsService(database).get_statistics()

    assert stats == Statistics(0, 0, 0, 0, 0)
    assert stats.to_dict() == {
        "totalBooks": 0,
        "completedBooks": 0,
        "currentlyReading": 0,
        "totalPagesRead": 0,
        "totalPagesGoal": 0,
    }
    assert all(isinstance(value, int) for value in stats.to_dict().values())


def test_statistics_count_and_sum(database):
    repo = BookRepository(database)
    repo.add_book(BookDraft("A", "c", 100, 100, BookStatus.COMPLETED))
    repo.add_book(BookDraft("B", "c", 200, 50, BookStatus.READING))
    repo.add_book(BookDraft("C", "c", 300, 0, BookStatus.TO_READ))

    stats = StatisticsService(database).get_statistics()

    assert stats.total_books == 3
    assert stats.completed_books == 1
    assert stats.currently_reading == 1
    assert stats.total_pages_read == 150
    assert stats.total_pages_goal == 600


def test_statistics_back_to_zero_after_reset(database):
    repo = BookRepository(database)
    repo.add_book(BookDraft("A", "c", 100, 10, BookStatus.READING))
    repo.reset_all()
    repo.reset_all()

    assert StatisticsService(database).get_statistics() == Statistics()


def test_statistics_service_fails_fast_on_missing_database():
    with pytest.raises(RuntimeError, match="DatabaseManager required"):
        StatisticsService(None)
