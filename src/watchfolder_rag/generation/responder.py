"""Query responder — retrieval-augmented whole or streamed answers."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from pydantic import BaseModel

from watchfolder_rag.generation.prompts import build_plain_prompt, build_rag_prompt

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from watchfolder_rag.generation.llm import Generator
    from watchfolder_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)


class Answer(BaseModel):
    """A complete answer and the model that produced it."""

    answer: str
    model: str


class QueryResponder:
    """Answers prompts, optionally grounded in the vector store.

    Parameters
    ----------
    generator:
        Chat model adapter.
    retriever:
        When given, the *k* nearest chunks are prepended to every prompt.
    k:
        Number of chunks to retrieve; ``None`` uses the retriever default.

    The responder holds no per-request state, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        generator: Generator,
        retriever: SemanticRetriever | None = None,
        *,
        k: int | None = None,
    ) -> None:
        self._generator = generator
        self._retriever = retriever
        self.k = k

    @property
    def model_name(self) -> str:
        return self._generator.model_name

    def build_messages(self, prompt: str) -> list[BaseMessage]:
        """Return the messages sent to the model for *prompt*."""
        if self._retriever is None:
            return build_plain_prompt(prompt)
        results = self._retriever.search(prompt, k=self.k)
        logger.info("Grounding prompt in %d retrieved chunks", len(results))
        return build_rag_prompt(prompt, results)

    def respond(self, prompt: str) -> Answer:
        """Block until the full answer is available."""
        text = self._generator.generate(self.build_messages(prompt))
        return Answer(answer=text, model=self.model_name)

    def respond_streaming(self, prompt: str) -> Iterator[str]:
        """Yield answer fragments in arrival order.

        Retrieval and the first fragment are fetched eagerly so a failed
        lookup or an unreachable provider raises here, before any response
        is started.  The returned iterator can be consumed only once.
        """
        fragments = self._generator.generate_streaming(self.build_messages(prompt))
        try:
            first = next(fragments)
        except StopIteration:
            return iter(())
        return itertools.chain([first], fragments)
