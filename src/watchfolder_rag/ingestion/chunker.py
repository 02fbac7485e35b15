"""Fixed-size sliding-window text chunking."""

from __future__ import annotations

from pydantic import BaseModel

from watchfolder_rag.errors import ConfigurationError


class Chunk(BaseModel):
    """A contiguous window of a source document.

    Attributes
    ----------
    chunk_index:
        Ordinal position of the chunk within its document.
    start_offset:
        Character offset of the first character of ``text``.
    text:
        The chunk content, never empty.
    source_id:
        Identifier of the parent document (its filename).
    """

    chunk_index: int
    start_offset: int
    text: str
    source_id: str


def validate_chunk_params(chunk_size: int, chunk_overlap: int) -> None:
    """Raise :class:`ConfigurationError` unless ``0 <= overlap < size``.

    A window that does not advance (``size - overlap <= 0``) would never
    terminate, so this check runs before any chunking starts.
    """
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size ({chunk_size}) must be > 0")
    if chunk_overlap < 0:
        raise ConfigurationError(f"chunk_overlap ({chunk_overlap}) must be >= 0")
    if chunk_overlap >= chunk_size:
        raise ConfigurationError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )


def chunk_text(
    text: str,
    chunk_size: int = 1000,
    chunk_overlap: int = 100,
    *,
    source_id: str = "",
) -> list[Chunk]:
    """Split *text* into windows of *chunk_size* characters.

    Consecutive windows share *chunk_overlap* characters.  Every window is
    exactly *chunk_size* long except possibly the last one.  Empty input
    yields an empty list.

    Parameters
    ----------
    text:
        Raw document content.
    chunk_size:
        Number of characters per chunk.
    chunk_overlap:
        Number of characters repeated at the start of the next chunk.
    source_id:
        Echoed onto every chunk.

    Returns
    -------
    list[Chunk]
        Chunks in document order.
    """
    validate_chunk_params(chunk_size, chunk_overlap)

    step = chunk_size - chunk_overlap
    chunks: list[Chunk] = []
    offset = 0
    while offset < len(text):
        end = min(offset + chunk_size, len(text))
        chunks.append(
            Chunk(
                chunk_index=len(chunks),
                start_offset=offset,
                text=text[offset:end],
                source_id=source_id,
            )
        )
        # Later windows would lie entirely inside this one.
        if end == len(text):
            break
        offset += step
    return chunks
