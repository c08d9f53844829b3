"""Managed storage area for cover images.

Covers the application owns live under ``<data_dir>/covers/``. Only files
inside ``data_dir`` are embedded into snapshots; anything else (remote URLs,
files elsewhere on disk) is exported as a plain reference.
"""

import base64
import binascii
import re
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from reading_tracker.core import CoverPayload, SnapshotIOError

DEFAULT_EXTENSION = "jpg"


class CoverStorage:
    """Reads and writes cover binaries inside the managed storage area."""

    def __init__(self, data_dir: Path, covers_subdir: str = "covers") -> None:
        self.data_dir = Path(data_dir).resolve()
        self.covers_dir = self.data_dir / covers_subdir

    def resolve_managed(self, cover: str) -> Optional[Path]:
        """Return the local file a cover reference points to, if it is managed.

        Accepts plain paths and ``file://`` URIs. Returns None for remote
        references, blank strings, and paths outside the data directory.
        """
        if not cover or not cover.strip():
            return None
        parsed = urlparse(cover)
        if parsed.scheme == "file":
            path = Path(unquote(parsed.path))
        elif parsed.scheme and len(parsed.scheme) > 1:
            return None
        else:
            path = Path(cover)
        try:
            resolved = path.expanduser().resolve()
        except (OSError, RuntimeError, ValueError):
            return None
        if resolved == self.data_dir or self.data_dir not in resolved.parents:
            return None
        return resolved

    def is_managed(self, cover: str) -> bool:
        return self.resolve_managed(cover) is not None

    def read_payload(self, cover: str) -> Optional[CoverPayload]:
        """Encode a managed cover file for embedding.

        Returns:
            CoverPayload, or None when the cover is not a managed reference.

        Raises:
            SnapshotIOError: If the file is missing or cannot be read.
        """
        path = self.resolve_managed(cover)
        if path is None:
            return None
        if not path.is_file():
            raise SnapshotIOError(f"Cover file not found: {path}")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise SnapshotIOError(f"Failed to read cover {path}: {e}") from e
        ext = path.suffix.lstrip(".") or DEFAULT_EXTENSION
        return CoverPayload(base64=base64.b64encode(data).decode("ascii"), ext=ext)

    def restore_payload(self, payload: CoverPayload) -> Path:
        """Decode an embedded cover and write it under a fresh file name.

        Returns:
            Path of the written file.

        Raises:
            SnapshotIOError: If the payload is not valid base64 or the
                file cannot be written.
        """
        try:
            data = base64.b64decode(payload.base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SnapshotIOError(f"Embedded cover is not valid base64: {e}") from e
        if not data:
            raise SnapshotIOError("Embedded cover is empty")

        out_path = self.covers_dir / f"cover_{uuid.uuid4().hex}.{sanitize_extension(payload.ext)}"
        try:
            self.covers_dir.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(data)
        except OSError as e:
            raise SnapshotIOError(f"Failed to write cover {out_path}: {e}") from e
        return out_path


def sanitize_extension(ext: Optional[str]) -> str:
    """Strip characters unsafe for a file name; fall back to jpg."""
    cleaned = re.sub(r"[^a-zA-Z0-9]", "", ext or "")
    return cleaned or DEFAULT_EXTENSION
