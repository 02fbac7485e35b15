"""LLM initialisation — single place to swap providers.

The provider at ``AI_ENDPOINT`` (Ollama by default) exposes an
OpenAI-compatible ``/v1/chat/completions`` route, so ``ChatOpenAI`` works
unchanged against it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

from langchain_openai import ChatOpenAI

from watchfolder_rag.config import settings
from watchfolder_rag.errors import TransportError

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)


class Generator(ABC):
    """Produces text completions for a list of chat messages."""

    model_name: str = "unknown"

    @abstractmethod
    def generate(self, messages: list[BaseMessage]) -> str:
        """Return the full completion."""
        ...

    @abstractmethod
    def generate_streaming(self, messages: list[BaseMessage]) -> Iterator[str]:
        """Yield completion fragments as the provider produces them."""
        ...


class ChatGenerator(Generator):
    """Adapter over a LangChain chat model."""

    def __init__(self, llm: BaseChatModel, model_name: str) -> None:
        self._llm = llm
        self.model_name = model_name

    def generate(self, messages: list[BaseMessage]) -> str:
        try:
            return _as_text(self._llm.invoke(messages).content)
        except Exception as exc:
            raise TransportError(f"Chat completion with {self.model_name} failed: {exc}") from exc

    def generate_streaming(self, messages: list[BaseMessage]) -> Iterator[str]:
        try:
            for chunk in self._llm.stream(messages):
                text = _as_text(chunk.content)
                if text:
                    yield text
        except Exception as exc:
            raise TransportError(f"Streaming completion with {self.model_name} failed: {exc}") from exc


def _as_text(content: str | list) -> str:
    if isinstance(content, str):
        return content
    return "".join(part if isinstance(part, str) else part.get("text", "") for part in content)


def get_llm(temperature: float = 0.0) -> ChatOpenAI:
    """Return the configured chat model.

    A dummy API key (``"EMPTY"``) is used because Ollama does not require
    authentication while LangChain requires a non-empty value.
    """
    logger.info("Using chat endpoint %s (model %s)", settings.provider_base_url, settings.chat_model)
    return ChatOpenAI(
        model=settings.chat_model,
        temperature=temperature,
        base_url=settings.provider_base_url,
        api_key=settings.api_key or "EMPTY",
        timeout=settings.request_timeout,
    )


def get_generator(temperature: float = 0.0) -> ChatGenerator:
    """Return the configured :class:`Generator`."""
    return ChatGenerator(get_llm(temperature), settings.chat_model)
