"""Document loading from the watch folder and from uploaded payloads."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, computed_field

from watchfolder_rag.errors import DocumentValidationError

logger = logging.getLogger(__name__)


class Document(BaseModel):
    """Raw text content awaiting ingestion."""

    source_id: str
    text: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size(self) -> int:
        """Length of the content in characters."""
        return len(self.text)


def decode_text(payload: bytes) -> str:
    """Decode *payload* as UTF-8, dropping a BOM and replacing bad bytes."""
    return payload.decode("utf-8-sig", errors="replace")


def read_file_bytes(path: str | Path) -> bytes:
    """Read a file without taking any lock, so writers still holding it are never blocked."""
    with open(path, "rb") as fh:
        return fh.read()


def load_text_file(path: str | Path) -> Document:
    """Load a single text file as a :class:`Document` named after the file.

    Raises
    ------
    DocumentValidationError
        When the file has no text yet, e.g. its writer has not flushed.
    """
    path = Path(path)
    text = decode_text(read_file_bytes(path))
    if not text:
        raise DocumentValidationError(f"{path.name} is empty.")
    logger.debug("Loaded %s (%d chars)", path.name, len(text))
    return Document(source_id=path.name, text=text)


def document_from_upload(filename: str | None, payload: bytes | None) -> Document:
    """Build a :class:`Document` from an uploaded file.

    Raises
    ------
    DocumentValidationError
        When no file was sent or the file is empty.
    """
    text = decode_text(payload) if payload else ""
    if not filename or not text:
        raise DocumentValidationError("No file uploaded.")
    return Document(source_id=Path(filename).name, text=text)
