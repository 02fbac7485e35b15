"""Embedding capability and its LangChain-backed adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from watchfolder_rag.config import settings
from watchfolder_rag.errors import ConfigurationError, TransportError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Turns text into a fixed-length vector."""

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Return the embedding of *text*."""
        ...

    def embed_query(self, text: str) -> list[float]:
        """Embed a search prompt.  Defaults to :meth:`embed`."""
        return self.embed(text)


class LangChainEmbedder(Embedder):
    """Adapter over any LangChain :class:`~langchain_core.embeddings.Embeddings`.

    Chunks are embedded with ``embed_documents`` and prompts with
    ``embed_query`` so models with asymmetric query/document encoders
    behave correctly.
    """

    def __init__(self, embeddings: Embeddings) -> None:
        self._embeddings = embeddings

    def embed(self, text: str) -> list[float]:
        try:
            return self._embeddings.embed_documents([text])[0]
        except Exception as exc:
            raise TransportError(f"Embedding request failed: {exc}") from exc

    def embed_query(self, text: str) -> list[float]:
        try:
            return self._embeddings.embed_query(text)
        except Exception as exc:
            raise TransportError(f"Embedding request failed: {exc}") from exc


def get_embeddings(backend: str | None = None) -> Embeddings:
    """Return the configured LangChain embeddings object.

    ``openai`` talks to the provider's OpenAI-compatible ``/v1/embeddings``
    route (Ollama serves it); ``huggingface`` runs a sentence-transformer
    in-process.
    """
    backend = backend or settings.embedding_backend
    if backend == "openai":
        from langchain_openai import OpenAIEmbeddings

        logger.info(
            "Embedding via %s with model %s", settings.provider_base_url, settings.embedding_model
        )
        return OpenAIEmbeddings(
            model=settings.embedding_model,
            base_url=settings.provider_base_url,
            api_key=settings.api_key or "EMPTY",
            timeout=settings.request_timeout,
            # Non-OpenAI servers expect raw strings, not tiktoken ids.
            check_embedding_ctx_length=False,
        )
    if backend == "huggingface":
        from langchain_huggingface import HuggingFaceEmbeddings

        logger.info("Embedding locally with %s", settings.hf_embedding_model)
        return HuggingFaceEmbeddings(model_name=settings.hf_embedding_model)
    raise ConfigurationError(f"Unsupported embedding_backend={backend!r}")


def get_embedder(backend: str | None = None) -> LangChainEmbedder:
    """Return the configured :class:`Embedder`."""
    return LangChainEmbedder(get_embeddings(backend))
