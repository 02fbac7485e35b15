"""Ingestion coordinator — chunk, embed and store one document.

Every chunk is an independent unit of work: its embed + add pair either
succeeds or is recorded as a :class:`ChunkFailure`, and processing moves
on to the next chunk.  The caller decides what a partial result means;
the watcher only treats a document as processed when
:attr:`IngestionReport.ok` is true.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, computed_field

from watchfolder_rag.ingestion.chunker import Chunk, chunk_text, validate_chunk_params
from watchfolder_rag.ingestion.embedder import Embedder
from watchfolder_rag.ingestion.loader import Document
from watchfolder_rag.retrieval.base import VectorStoreBase
from watchfolder_rag.retrieval.models import StoredRecord

logger = logging.getLogger(__name__)


class ChunkFailure(BaseModel):
    """A chunk that could not be embedded or stored."""

    chunk_index: int
    error: str


class IngestionReport(BaseModel):
    """Outcome of ingesting one document."""

    source: str
    total_chunks: int = 0
    chunks_indexed: int = 0
    failures: list[ChunkFailure] = Field(default_factory=list)
    record_ids: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ok(self) -> bool:
        """``True`` only when every chunk was indexed."""
        return self.chunks_indexed == self.total_chunks


class IngestionCoordinator:
    """Drives a :class:`Document` through chunking, embedding and storage.

    Parameters
    ----------
    embedder:
        Produces one vector per chunk.
    store:
        Destination collection.
    chunk_size / chunk_overlap:
        Sliding-window parameters; validated here so a bad configuration
        fails at construction, not on the first upload.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStoreBase,
        *,
        chunk_size: int = 1000,
        chunk_overlap: int = 100,
    ) -> None:
        validate_chunk_params(chunk_size, chunk_overlap)
        self._embedder = embedder
        self._store = store
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    @property
    def store(self) -> VectorStoreBase:
        return self._store

    def ingest(self, document: Document) -> IngestionReport:
        """Index every chunk of *document*, continuing past failures."""
        chunks = chunk_text(
            document.text,
            self.chunk_size,
            self.chunk_overlap,
            source_id=document.source_id,
        )
        report = IngestionReport(source=document.source_id, total_chunks=len(chunks))

        for chunk in chunks:
            try:
                record = self._index_chunk(chunk)
            except Exception as exc:
                logger.warning(
                    "Chunk %d of %s failed: %s", chunk.chunk_index, document.source_id, exc, exc_info=True
                )
                report.failures.append(ChunkFailure(chunk_index=chunk.chunk_index, error=str(exc)))
                continue
            report.chunks_indexed += 1
            report.record_ids.append(record.id)

        logger.info(
            "Indexed %d/%d chunks of %s into %r",
            report.chunks_indexed,
            report.total_chunks,
            document.source_id,
            self._store.collection_name,
        )
        return report

    def _index_chunk(self, chunk: Chunk) -> StoredRecord:
        record = StoredRecord(
            embedding=self._embedder.embed(chunk.text),
            document=chunk.text,
            metadata={
                "source": chunk.source_id,
                "chunk_index": chunk.chunk_index,
                "start_offset": chunk.start_offset,
            },
        )
        self._store.add(record)
        return record
