"""Semantic retriever — embeds a prompt and fetches the nearest chunks."""

from __future__ import annotations

import logging
from typing import Any

from watchfolder_rag.ingestion.embedder import Embedder
from watchfolder_rag.retrieval.base import VectorStoreBase
from watchfolder_rag.retrieval.models import Citation, RetrievalResult

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever over any :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.
    embedder:
        Embeds the prompt into the same space as the stored chunks.
    default_k:
        Default number of results returned by :meth:`search`.
    score_threshold:
        Minimum similarity score; results below this are discarded.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: Embedder,
        *,
        default_k: int = 3,
        score_threshold: float = 0.0,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self.default_k = default_k
        self.score_threshold = score_threshold

    def search(self, query: str, *, k: int | None = None) -> list[RetrievalResult]:
        """Return the *k* chunks nearest to *query*, best first."""
        embedding = self._embedder.embed_query(query)
        return self.search_by_embedding(embedding, k=k)

    def search_by_embedding(self, embedding: list[float], *, k: int | None = None) -> list[RetrievalResult]:
        """Same as :meth:`search` but accepts a pre-computed embedding."""
        k = k or self.default_k
        raw_hits = self._store.similarity_search(embedding, k=k)
        results = self._to_results(raw_hits)
        logger.debug("Retrieved %d/%d hits from %r", len(results), len(raw_hits), self._store.collection_name)
        return results

    def _to_results(self, raw_hits: list[dict[str, Any]]) -> list[RetrievalResult]:
        results: list[RetrievalResult] = []
        for hit in raw_hits:
            score = hit.get("score")
            if score is not None and score < self.score_threshold:
                continue

            meta = hit.get("metadata", {})
            citation = Citation(
                document_id=hit.get("id"),
                source=meta.get("source", "unknown"),
                chunk_index=meta.get("chunk_index"),
                score=score,
            )
            results.append(RetrievalResult(content=hit.get("content", ""), citation=citation))
        return results
