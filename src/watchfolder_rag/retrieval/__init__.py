"""
Retrieval — vector store access and nearest-chunk search.

The store sits behind :class:`VectorStoreBase` so ingestion and query
code never need to know which database backs the collection.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend.
- :class:`ChromaVectorStore` — default Chroma backend (lazy import).
- :class:`SemanticRetriever` — prompt → k nearest chunks.
- :class:`StoredRecord`, :class:`Citation`, :class:`RetrievalResult` — data models.
"""

from watchfolder_rag.retrieval.base import VectorStoreBase
from watchfolder_rag.retrieval.models import Citation, RetrievalResult, StoredRecord
from watchfolder_rag.retrieval.retriever import SemanticRetriever

__all__ = [
    "ChromaVectorStore",
    "Citation",
    "RetrievalResult",
    "SemanticRetriever",
    "StoredRecord",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from watchfolder_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
