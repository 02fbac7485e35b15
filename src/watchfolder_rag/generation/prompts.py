"""Prompt templates for answering questions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from watchfolder_rag.retrieval.models import RetrievalResult

SYSTEM_PROMPT = """\
You are a helpful assistant answering questions about the documents in a
knowledge base. When context passages are supplied, ground your answer in
them and say so when they do not contain the answer.
"""


def build_plain_prompt(prompt: str) -> list[BaseMessage]:
    """Messages for a question asked without retrieved context."""
    return [HumanMessage(content=prompt)]


def build_rag_prompt(prompt: str, results: list[RetrievalResult]) -> list[BaseMessage]:
    """Prepend retrieved chunks to *prompt*.

    Falls back to :func:`build_plain_prompt` when nothing was retrieved.
    """
    if not results:
        return build_plain_prompt(prompt)
    user_msg = (
        f"Context:\n{format_context(results)}\n\n"
        f"Question: {prompt}\n\n"
        "Answer the question using the context above."
    )
    return [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(content=user_msg),
    ]


def format_context(results: list[RetrievalResult]) -> str:
    """Listing of retrieved chunks with their source references."""
    return "\n\n---\n\n".join(f"{r.citation.short_ref()}\n{r.content}" for r in results)
