"""I/O layer - Data access for persistence and file operations."""

from .book_repository import BookRepository
from .cover_storage import CoverStorage
from .database_manager import DatabaseManager

__all__ = ["DatabaseManager", "BookRepository", "CoverStorage"]
