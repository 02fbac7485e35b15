"""Domain models for stored records and retrieval results."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class StoredRecord(BaseModel):
    """One chunk as written to the vector store.

    Records are created once per chunk at ingestion time and never
    modified afterwards.

    Attributes
    ----------
    id:
        Collision-free identifier (UUID4).
    embedding:
        Vector produced by the embedder; its length is fixed by the model.
    document:
        The chunk text, stored alongside the vector for inspection and
        for building prompt context.
    metadata:
        Flat metadata — at least ``source``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    embedding: list[float]
    document: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class Citation(BaseModel):
    """Provenance of a retrieved chunk."""

    document_id: str | None = None
    source: str = "unknown"
    chunk_index: int | None = None
    score: float | None = None

    def short_ref(self) -> str:
        """Return a compact ``[source§chunk]`` reference string."""
        chunk = self.chunk_index if self.chunk_index is not None else "?"
        return f"[{self.source}§{chunk}]"


class RetrievalResult(BaseModel):
    """A single retrieved passage together with its citation."""

    content: str
    citation: Citation

    def __str__(self) -> str:  # noqa: D105
        return f"{self.citation.short_ref()} {self.content[:120]}…"
