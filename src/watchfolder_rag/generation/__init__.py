"""
Generation — chat model access and the query responder.

The responder optionally grounds the prompt in retrieved chunks before
asking the chat model for a whole or streamed answer.
"""

from watchfolder_rag.generation.llm import ChatGenerator, Generator, get_generator
from watchfolder_rag.generation.responder import Answer, QueryResponder

__all__ = [
    "Answer",
    "ChatGenerator",
    "Generator",
    "QueryResponder",
    "get_generator",
]
