"""Tracker Coordinator - the operation surface consumed by the presentation layer."""

from pathlib import Path
from typing import Callable, List, Optional, Union

from PySide6.QtCore import QThreadPool

from reading_tracker.core import Book, BookDraft, BookStatus, Statistics
from reading_tracker.io import BookRepository
from reading_tracker.services import (
    ExportWorker,
    ImportResult,
    ImportWorker,
    SnapshotExporter,
    SnapshotImporter,
    StatisticsService,
)


class TrackerCoordinator:
    """Single entry point to the reading library.

    Responsibilities:
    - Everyday CRUD on books (delegated to BookRepository)
    - Library statistics
    - Snapshot export/import, either blocking or on the Qt thread pool

    Constructed once by the composition root and handed to every caller.
    """

    def __init__(
        self,
        repository: BookRepository,
        statistics: StatisticsService,
        exporter: SnapshotExporter,
        importer: SnapshotImporter,
        thread_pool: Optional[QThreadPool] = None,
    ):
        if repository is None:
            raise ValueError("BookRepository must not be None")
        if statistics is None:
            raise ValueError("StatisticsService must not be None")
        if exporter is None:
            raise ValueError("SnapshotExporter must not be None")
        if importer is None:
            raise ValueError("SnapshotImporter must not be None")

        self.repository = repository
        self.statistics = statistics
        self.exporter = exporter
        self.importer = importer
        self.thread_pool = thread_pool

    def add_book(
        self,
        title: str,
        cover: str,
        total_pages: int,
        pages_read: int = 0,
        status: Union[BookStatus, str] = BookStatus.TO_READ,
        rating: int = 0,
    ) -> int:
        draft = BookDraft(
            title=title,
            cover=cover,
            total_pages=total_pages,
            pages_read=pages_read,
            status=status,
            rating=rating,
        )
        return self.repository.add_book(draft)

    def get_books(self) -> List[Book]:
        return self.repository.get_books()

    def update_progress(
        self,
        book_id: int,
        pages_read: int,
        status: Optional[Union[BookStatus, str]] = None,
    ) -> Book:
        return self.repository.update_progress(book_id, pages_read, status)

    def update_details(
        self,
        book_id: int,
        title: str,
        total_pages: int,
        status: Union[BookStatus, str],
        cover: str,
        rating: int,
    ) -> Book:
        return self.repository.update_details(
            book_id, title, total_pages, status, cover, rating
        )

    def delete_book(self, book_id: int) -> bool:
        return self.repository.delete_book(book_id)

    def reset_all(self) -> int:
        return self.repository.reset_all()

    def get_statistics(self) -> Statistics:
        return self.statistics.get_statistics()

    def export_data(self, target_dir: Optional[Path] = None) -> Path:
        """Write a snapshot file and return its path (blocking)."""
        return self.exporter.export_to_file(target_dir=target_dir)

    def import_data(self, snapshot_path: Path) -> ImportResult:
        """Replace the library with a snapshot file's contents (blocking)."""
        return self.importer.import_file(snapshot_path)

    def export_async(
        self,
        target_dir: Optional[Path] = None,
        on_result: Optional[Callable[[Path], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        on_cancelled: Optional[Callable[[], None]] = None,
    ) -> ExportWorker:
        """Start an export on the thread pool and return the cancellable worker."""
        worker = ExportWorker(self.exporter, target_dir=target_dir)
        if on_result is not None:
            worker.signals.export_result.connect(on_result)
        self._start(worker, on_error, on_cancelled)
        return worker

    def import_async(
        self,
        snapshot_path: Path,
        on_result: Optional[Callable[[ImportResult], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        on_cancelled: Optional[Callable[[], None]] = None,
    ) -> ImportWorker:
        """Start an import on the thread pool and return the cancellable worker."""
        worker = ImportWorker(self.importer, snapshot_path)
        if on_result is not None:
            worker.signals.import_result.connect(on_result)
        self._start(worker, on_error, on_cancelled)
        return worker

    def _start(self, worker, on_error, on_cancelled) -> None:
        # Signals are wired before start so no emission is missed
        if on_error is not None:
            worker.signals.error.connect(on_error)
        if on_cancelled is not None:
            worker.signals.cancelled.connect(on_cancelled)
        self._pool().start(worker)

    def _pool(self) -> QThreadPool:
        if self.thread_pool is None:
            self.thread_pool = QThreadPool.globalInstance()
        return self.thread_pool
