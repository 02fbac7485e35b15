"""Shared pytest configuration and fixtures.

The fakes below stand in for the embedding provider, the vector store
and the chat model so no test needs a live service.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from watchfolder_rag.errors import TransportError
from watchfolder_rag.generation.llm import Generator
from watchfolder_rag.ingestion.embedder import Embedder
from watchfolder_rag.retrieval.base import VectorStoreBase
from watchfolder_rag.retrieval.models import StoredRecord


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class FakeEmbedder(Embedder):
    """Deterministic 3-dim embeddings; texts in *fail_on* raise."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.fail_on:
            raise TransportError(f"embedding provider unavailable for {text!r}")
        return [float(len(text)), float(sum(map(ord, text)) % 97), 1.0]


class FakeVectorStore(VectorStoreBase):
    """In-memory collection; returns canned *hits* from searches when given."""

    def __init__(self, hits: list[dict[str, Any]] | None = None, collection_name: str = "knowledge_base") -> None:
        super().__init__(collection_name)
        self.records: list[StoredRecord] = []
        self.hits = hits
        self.fail_adds = 0
        self.last_query: list[float] | None = None
        self.healthy = True

    def add(self, record: StoredRecord) -> None:
        if self.fail_adds:
            self.fail_adds -= 1
            raise TransportError("vector store unavailable")
        self.records.append(record)

    def similarity_search(self, query_embedding: list[float], *, k: int = 3) -> list[dict[str, Any]]:
        self.last_query = query_embedding
        if self.hits is not None:
            return self.hits[:k]
        return [
            {"id": r.id, "content": r.document, "score": 1.0, "metadata": r.metadata}
            for r in self.records[:k]
        ]

    def health_check(self) -> bool:
        return self.healthy

    def documents(self) -> list[str]:
        return [r.document for r in self.records]


class FakeGenerator(Generator):
    """Returns a canned answer or replays *fragments*, recording prompts."""

    model_name = "fake-model"

    def __init__(self, answer: str = "", fragments: list[str] | None = None) -> None:
        self.answer = answer
        self.fragments = fragments or []
        self.produced: list[str] = []
        self.received: list[list[Any]] = []

    def generate(self, messages: list[Any]) -> str:
        self.received.append(messages)
        return self.answer

    def generate_streaming(self, messages: list[Any]) -> Iterator[str]:
        self.received.append(messages)
        for fragment in self.fragments:
            self.produced.append(fragment)
            yield fragment


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def fake_generator() -> FakeGenerator:
    return FakeGenerator(answer="4", fragments=["p", "o", "ng"])
