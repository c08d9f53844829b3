"""Typed records produced while reading a portable snapshot."""

from dataclasses import dataclass
from typing import Optional

from .book import BookDraft, BookStatus


@dataclass(frozen=True)
class ValidatedBook:
    """One snapshot book that passed validation.

    Timestamps stay as the strings found in the document; the repository
    assigns fresh ones when the book is stored again.
    """

    title: str
    cover: str
    total_pages: int
    pages_read: int
    status: BookStatus
    rating: int
    created_at: str
    updated_at: str

    def to_draft(self, cover: Optional[str] = None) -> BookDraft:
        return BookDraft(
            title=self.title,
            cover=cover if cover is not None else self.cover,
            total_pages=self.total_pages,
            pages_read=self.pages_read,
            status=self.status,
            rating=self.rating,
        )


@dataclass(frozen=True)
class CoverPayload:
    """Embedded cover image: base64 content plus a file extension hint."""

    base64: str
    ext: str = ""


@dataclass(frozen=True)
class RawImportRecord:
    book: ValidatedBook
    cover_payload: Optional[CoverPayload] = None
