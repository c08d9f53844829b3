"""Snapshot importer - restores the library from a portable JSON document."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional

from loguru import logger

from reading_tracker.core import (
    OperationCancelledError,
    SnapshotIOError,
    ValidationError,
)
from reading_tracker.io import BookRepository, CoverStorage
from reading_tracker.services.book_validator import BookValidator

SUPPORTED_VERSIONS = ("1.0", "1.1")


@dataclass
class ImportResult:
    """Summary of a completed import.

    Attributes:
        book_ids: Ids assigned to the imported books, in document order.
        restored_covers: Number of embedded covers written to disk.
        warnings: Covers that could not be restored; those books keep the
            cover string found in the document.
    """

    book_ids: List[int] = field(default_factory=list)
    restored_covers: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.book_ids)


class SnapshotImporter:
    """Replaces the library with the contents of a snapshot.

    Validation is all-or-nothing and happens before anything is written.
    Cover restoration is lenient: a payload that cannot be decoded or
    written is reported in ImportResult.warnings and the book keeps its
    original cover string. The replace itself runs in one transaction, so a
    failure or cancellation leaves the previous library in place. Cover files
    written before such an abort are left on disk unreferenced.
    """

    def __init__(
        self,
        repository: BookRepository,
        validator: BookValidator,
        cover_storage: CoverStorage,
    ) -> None:
        if repository is None:
            raise RuntimeError("BookRepository required")
        if validator is None:
            raise RuntimeError("BookValidator required")
        if cover_storage is None:
            raise RuntimeError("CoverStorage required")
        self.repository = repository
        self.validator = validator
        self.cover_storage = cover_storage

    def parse_document(self, text: str) -> List[Any]:
        """Parse snapshot text and return its raw ``books`` array.

        Raises:
            ValidationError: If the text is not a recognizable snapshot.
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise ValidationError(f"Snapshot is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError("Snapshot must be a JSON object")
        version = data.get("version")
        if version not in SUPPORTED_VERSIONS:
            raise ValidationError(f"Unsupported snapshot version: {version!r}")
        books = data.get("books")
        if not isinstance(books, list):
            raise ValidationError("Snapshot has no books array")
        return books

    def import_file(
        self, path: Path, should_cancel: Optional[Callable[[], bool]] = None
    ) -> ImportResult:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotIOError(f"Failed to read snapshot {path}: {e}") from e
        return self.import_document(text, should_cancel=should_cancel)

    def import_document(
        self, text: str, should_cancel: Optional[Callable[[], bool]] = None
    ) -> ImportResult:
        """Validate a snapshot and replace the library with its books.

        Ids in the document are ignored; every book gets a fresh id and fresh
        timestamps.

        Raises:
            ValidationError: If the document or any book is invalid. The
                library is untouched.
            OperationCancelledError: If cancelled; the library is untouched.
        """
        raw_books = self.parse_document(text)
        validation = self.validator.validate(raw_books)
        if not validation.valid:
            raise ValidationError(validation.error)

        result = ImportResult()
        drafts = []
        for index, record in enumerate(validation.records):
            if should_cancel is not None and should_cancel():
                raise OperationCancelledError("Import cancelled")
            cover = None
            if record.cover_payload is not None:
                try:
                    cover = str(self.cover_storage.restore_payload(record.cover_payload))
                    result.restored_covers += 1
                except SnapshotIOError as e:
                    message = f"Book {index} ({record.book.title}): {e}"
                    logger.warning("Cover not restored, keeping original reference. {}", message)
                    result.warnings.append(message)
            drafts.append(record.book.to_draft(cover=cover))

        # Books inserted together share updated_at and list by id descending;
        # insert last to first to keep the document order.
        ids = self.repository.replace_all(reversed(drafts), should_cancel=should_cancel)
        result.book_ids = list(reversed(ids))

        logger.info(
            "Imported {} book(s), {} cover(s) restored, {} warning(s)",
            result.imported_count,
            result.restored_covers,
            len(result.warnings),
        )
        return result
