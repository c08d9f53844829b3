"""Snapshot exporter - writes the library to a portable JSON document."""

import json
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional

from loguru import logger

from reading_tracker.core import OperationCancelledError, SnapshotIOError
from reading_tracker.core.book import format_timestamp, utc_now
from reading_tracker.io import BookRepository, CoverStorage
from reading_tracker.services.statistics_service import StatisticsService

FORMAT_VERSION = "1.1"


class SnapshotExporter:
    """Builds self-contained snapshots of the library.

    Document format:
    {
        "version": "1.1",
        "exportedAt": "<ISO-8601>",
        "books": [
            {
                "id": 1, "title": "...", "cover": "...", "totalPages": 320,
                "pagesRead": 12, "status": "reading", "rating": 4,
                "createdAt": "...", "updatedAt": "...",
                "coverData": {"base64": "...", "ext": "jpg"} | null
            }
        ],
        "statistics": {"totalBooks": 1, ...}
    }

    Covers inside the managed storage area are embedded; a cover that cannot
    be read is exported without payload and never fails the export.
    """

    def __init__(
        self,
        repository: BookRepository,
        statistics: StatisticsService,
        cover_storage: CoverStorage,
        export_dir: Path,
        file_prefix: str = "reading_backup",
    ) -> None:
        if repository is None:
            raise RuntimeError("BookRepository required")
        if statistics is None:
            raise RuntimeError("StatisticsService required")
        if cover_storage is None:
            raise RuntimeError("CoverStorage required")
        self.repository = repository
        self.statistics = statistics
        self.cover_storage = cover_storage
        self.export_dir = Path(export_dir)
        self.file_prefix = file_prefix

    def build_document(
        self, should_cancel: Optional[Callable[[], bool]] = None
    ) -> Dict[str, object]:
        """Snapshot books and statistics into a JSON-ready mapping.

        Raises:
            OperationCancelledError: If should_cancel returns True.
        """
        # books and totals come from the same state of the library
        with self.repository.database.lock:
            library = self.repository.get_books()
            statistics = self.statistics.get_statistics()

        books = []
        for book in library:
            if should_cancel is not None and should_cancel():
                raise OperationCancelledError("Export cancelled")
            entry = book.to_document()
            entry["coverData"] = None
            try:
                payload = self.cover_storage.read_payload(book.cover)
            except (OSError, ValueError) as e:
                logger.warning("Exporting book {} without cover: {}", book.id, e)
                payload = None
            if payload is not None:
                entry["coverData"] = {"base64": payload.base64, "ext": payload.ext}
            books.append(entry)

        return {
            "version": FORMAT_VERSION,
            "exportedAt": format_timestamp(utc_now()),
            "books": books,
            "statistics": statistics.to_dict(),
        }

    def export_to_file(
        self,
        target_dir: Optional[Path] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Path:
        """Write a snapshot file and return its path.

        The file is named ``<prefix>_<DD>-<MM>-<YYYY>_<hh>-<mm>-<ss>.json``
        in local time; a ``-<n>`` counter is appended when that name exists.

        Raises:
            SnapshotIOError: If the file cannot be written.
            OperationCancelledError: If cancelled before the write.
        """
        document = self.build_document(should_cancel=should_cancel)
        content = json.dumps(document, indent=2, ensure_ascii=False)
        if should_cancel is not None and should_cancel():
            raise OperationCancelledError("Export cancelled")

        directory = Path(target_dir) if target_dir is not None else self.export_dir
        stem = self.file_name_stem(datetime.now())
        try:
            directory.mkdir(parents=True, exist_ok=True)
            out_path = self._write_exclusive(directory, stem, content)
        except OSError as e:
            raise SnapshotIOError(f"Failed to write export to {directory}: {e}") from e

        logger.info(
            "Exported {} book(s) to {}", len(document["books"]), out_path
        )
        return out_path

    def file_name_stem(self, moment: datetime) -> str:
        return f"{self.file_prefix}_{moment.strftime('%d-%m-%Y_%H-%M-%S')}"

    @staticmethod
    def _write_exclusive(directory: Path, stem: str, content: str) -> Path:
        counter = 0
        while True:
            name = f"{stem}.json" if counter == 0 else f"{stem}-{counter}.json"
            out_path = directory / name
            try:
                with open(out_path, "x", encoding="utf-8") as f:
                    f.write(content)
                return out_path
            except FileExistsError:
                counter += 1
