"""Abstract base class for vector-store backends.

Adding a backend only requires subclassing :class:`VectorStoreBase` and
implementing the abstract methods.  Ingestion and retrieval are
backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from watchfolder_rag.retrieval.models import StoredRecord


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface bound to one collection.

    Parameters
    ----------
    collection_name:
        Logical name of the collection.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    @abstractmethod
    def add(self, record: StoredRecord) -> None:
        """Add *record* to the collection.

        Implementations raise :class:`~watchfolder_rag.errors.TransportError`
        when the store cannot be reached.
        """
        ...

    @abstractmethod
    def similarity_search(self, query_embedding: list[float], *, k: int = 3) -> list[dict[str, Any]]:
        """Return the *k* records nearest to *query_embedding*.

        Each result dict **must** contain at least:

        * ``"id"`` – record identifier
        * ``"content"`` – the chunk text
        * ``"score"`` – similarity score (higher = more similar)
        * ``"metadata"`` – associated metadata dict
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
