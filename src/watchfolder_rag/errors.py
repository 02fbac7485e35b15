"""Error kinds raised across the ingestion and query paths."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from watchfolder_rag.ingestion.coordinator import IngestionReport


class RagError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(RagError):
    """Invalid settings detected at startup, e.g. ``chunk_overlap >= chunk_size``."""


class TransportError(RagError):
    """A call to the provider, the vector store or the upload endpoint failed."""


class DocumentValidationError(RagError):
    """An uploaded document is missing or empty."""


class PartialIngestionFailure(RagError):
    """Some chunks of a document could not be embedded or stored."""

    def __init__(self, report: IngestionReport) -> None:
        self.report = report
        super().__init__(
            f"{report.source}: indexed {report.chunks_indexed}/{report.total_chunks} chunks "
            f"({len(report.failures)} failed)"
        )
