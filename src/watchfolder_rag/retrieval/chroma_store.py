"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from watchfolder_rag.config import settings
from watchfolder_rag.errors import TransportError
from watchfolder_rag.retrieval.base import VectorStoreBase
from watchfolder_rag.retrieval.models import StoredRecord

logger = logging.getLogger(__name__)


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    The collection is fetched with ``get_or_create_collection`` so the
    first ingestion against a fresh server creates it.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built Chroma client; when given, *host* and *port* are ignored.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        client: Any = None,
    ) -> None:
        super().__init__(collection_name)
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(collection_name)
        logger.info("Using Chroma collection %r", collection_name)

    # -- VectorStoreBase overrides --------------------------------------------

    def add(self, record: StoredRecord) -> None:
        try:
            self._collection.add(
                ids=[record.id],
                embeddings=[record.embedding],
                documents=[record.document],
                metadatas=[record.metadata],
            )
        except Exception as exc:
            raise TransportError(f"Chroma add failed for {record.id}: {exc}") from exc

    def similarity_search(self, query_embedding: list[float], *, k: int = 3) -> list[dict[str, Any]]:
        try:
            results = self._collection.query(
                query_embeddings=[query_embedding],
                n_results=k,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            raise TransportError(f"Chroma query failed: {exc}") from exc

        hits: list[dict[str, Any]] = []
        ids = results.get("ids", [[]])[0]
        docs = (results.get("documents") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]

        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            # Chroma returns L2 distances; convert to a 0-1 similarity score.
            score = 1.0 / (1.0 + dist)
            hits.append(
                {
                    "id": doc_id,
                    "content": content or "",
                    "score": score,
                    "metadata": meta or {},
                }
            )
        return hits

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
