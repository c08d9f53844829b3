"""Validation of book records read from a portable snapshot."""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from reading_tracker.core import (
    BookStatus,
    CoverPayload,
    RawImportRecord,
    ValidatedBook,
    ValidationError,
)
from reading_tracker.core.book import MAX_STORED_INTEGER, MIN_STORED_INTEGER


@dataclass
class ValidationResult:
    """Outcome of validating a batch of snapshot records.

    ``records`` is only populated when ``valid`` is True; a rejected batch
    carries the first error and nothing else.
    """

    valid: bool
    records: List[RawImportRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def books(self) -> List[ValidatedBook]:
        return [record.book for record in self.records]


class BookValidator:
    """Checks raw snapshot records against the book contract.

    The batch is all-or-nothing: one bad record rejects every record, so a
    corrupt snapshot can never partially overwrite the library.
    """

    def validate(self, records: Sequence[Any]) -> ValidationResult:
        if not isinstance(records, (list, tuple)):
            return ValidationResult(valid=False, error="books must be an array")

        parsed: List[RawImportRecord] = []
        for index, raw in enumerate(records):
            try:
                parsed.append(self.validate_record(raw))
            except ValidationError as e:
                return ValidationResult(
                    valid=False, error=f"Invalid book at index {index}: {e}"
                )
        return ValidationResult(valid=True, records=parsed)

    def validate_record(self, raw: Any) -> RawImportRecord:
        """Validate one record and convert it to its typed form.

        Raises:
            ValidationError: Naming the first field that fails.
        """
        if not isinstance(raw, dict):
            raise ValidationError("record must be an object")

        title = _non_empty_string(raw, "title")
        cover = _non_empty_string(raw, "cover")
        total_pages = _integer(raw, "totalPages")
        if total_pages <= 0:
            raise ValidationError("totalPages must be greater than 0")
        pages_read = _integer(raw, "pagesRead")
        if not 0 <= pages_read <= total_pages:
            raise ValidationError(f"pagesRead must be between 0 and {total_pages}")

        status_value = raw.get("status")
        if status_value not in BookStatus.values():
            raise ValidationError(
                f"status must be one of {', '.join(BookStatus.values())}"
            )

        rating = 0
        if raw.get("rating") is not None:
            rating = _integer(raw, "rating")
            if not 0 <= rating <= 5:
                raise ValidationError("rating must be between 0 and 5")

        for key in ("createdAt", "updatedAt"):
            if not isinstance(raw.get(key), str):
                raise ValidationError(f"{key} must be a string")

        book = ValidatedBook(
            title=title,
            cover=cover,
            total_pages=total_pages,
            pages_read=pages_read,
            status=BookStatus(status_value),
            rating=rating,
            created_at=raw["createdAt"],
            updated_at=raw["updatedAt"],
        )
        return RawImportRecord(book=book, cover_payload=_cover_payload(raw.get("coverData")))


def _non_empty_string(raw: dict, key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be a non-empty string")
    return value


def _integer(raw: dict, key: str) -> int:
    """Read a whole number that fits an SQLite INTEGER.

    JSON numbers such as 3.0 are accepted; 3.5 and booleans are not.
    """
    value = raw.get(key)
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    if not MIN_STORED_INTEGER <= value <= MAX_STORED_INTEGER:
        raise ValidationError(f"{key} is out of range")
    return value


def _cover_payload(value: Any) -> Optional[CoverPayload]:
    if value is None:
        return None
    if not isinstance(value, dict) or not isinstance(value.get("base64"), str):
        raise ValidationError("coverData must be an object with a base64 string")
    ext = value.get("ext")
    if ext is not None and not isinstance(ext, str):
        raise ValidationError("coverData.ext must be a string")
    if not value["base64"]:
        return None
    return CoverPayload(base64=value["base64"], ext=ext or "")
