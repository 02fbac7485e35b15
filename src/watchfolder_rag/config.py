"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Chat / embedding provider
    ai_endpoint: str = Field(
        default="http://ollama_service:11434",
        description=(
            "Base URL of the model provider. The provider must expose an "
            "OpenAI-compatible API under '/v1' (Ollama, vLLM, ...)."
        ),
    )
    api_key: str = Field(default="EMPTY", description="API key for the provider (dummy for Ollama)")
    chat_model: str = "llama3.2"
    embedding_model: str = "nomic-embed-text:latest"
    embedding_backend: str = Field(
        default="openai",
        description="'openai' embeds through the provider endpoint, 'huggingface' embeds locally.",
    )
    hf_embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    request_timeout: float = Field(default=60.0, description="Seconds before a provider/upload call is abandoned")

    # Vector store
    chroma_host: str = "chromadb"
    chroma_port: int = 8000
    chroma_collection: str = "knowledge_base"

    # Chunking
    chunk_size: int = 1000
    chunk_overlap: int = 100

    # Retrieval
    retrieval_enabled: bool = True
    retrieval_k: int = 3
    score_threshold: float = 0.0

    # Watcher
    watch_folder: str = "/watch_folder"
    watch_pattern: str = "*.txt"
    poll_interval: float = 2.0
    settle_delay: float = 0.5
    ai_upload_url: str = Field(
        default="http://localhost:8080/upload",
        description="Upload endpoint the watcher posts new files to. Empty = ingest in-process.",
    )
    tracker_file: str = Field(
        default="",
        description="JSON file persisting the tracked-file set across restarts. Empty = in-memory only.",
    )

    # Serving
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def provider_base_url(self) -> str:
        """OpenAI-compatible base URL derived from ``ai_endpoint``."""
        base = self.ai_endpoint.rstrip("/")
        return base if base.endswith("/v1") else f"{base}/v1"


# Singleton — import `settings` wherever needed.
settings = Settings()
