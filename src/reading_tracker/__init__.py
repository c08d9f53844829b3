"""
Reading Tracker - a personal library of books and reading progress.

This package provides the persistence and interchange core of the tracker:
- SQLite storage of book records
- Library statistics
- Portable JSON snapshots with embedded cover images
"""

__version__ = "0.1.0"

# Make key components available at package level
from reading_tracker.core import Book, BookDraft, BookStatus, Statistics
from reading_tracker.io import BookRepository, DatabaseManager

__all__ = [
    "Book",
    "BookDraft",
    "BookStatus",
    "Statistics",
    "BookRepository",
    "DatabaseManager",
]
