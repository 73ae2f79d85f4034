"""Configuration loaded from environment variables and an optional .env file.

Every field can be overridden with a ``DOCRAG_`` prefixed variable, e.g.
``DOCRAG_OLLAMA_URL=http://gpu-box:11434``.
"""

from datetime import timedelta
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Answer accurately and helpfully "
    "based on the provided document excerpts."
)


class Settings(BaseSettings):
    """Runtime settings for ingestion, retrieval and the Ollama backend."""

    model_config = SettingsConfigDict(
        env_prefix="DOCRAG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    docs_dir: Path = Path("docs")
    data_dir: Path = Path("data")

    # Ollama backend
    ollama_url: str = "http://localhost:11434"
    request_timeout: float = 60.0

    # Embeddings
    embedding_backend: Literal["ollama", "sentence-transformers"] = "ollama"
    embedding_model: str = "nomic-embed-text:latest"
    local_model: str = "all-MiniLM-L6-v2"

    # Chat
    chat_model: str = "llama3.2:latest"
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Chunking
    max_chunk_size: int = 1000
    overlap_size: int = 100

    # Retrieval
    top_k: int = 5
    context_top_k: int = 3
    freshness_hours: float = 24.0

    log_level: str = "INFO"

    @field_validator("max_chunk_size")
    @classmethod
    def _chunk_size_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_chunk_size must be positive, got {v}")
        return v

    @field_validator("overlap_size")
    @classmethod
    def _overlap_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"overlap_size must be >= 0, got {v}")
        return v

    @model_validator(mode="after")
    def _overlap_below_chunk_size(self) -> "Settings":
        if self.overlap_size >= self.max_chunk_size:
            raise ValueError(
                f"overlap_size ({self.overlap_size}) must be smaller than "
                f"max_chunk_size ({self.max_chunk_size})"
            )
        return self

    @property
    def vector_store_path(self) -> Path:
        return self.data_dir / "vector_store.json"

    @property
    def history_path(self) -> Path:
        return self.data_dir / "embedding_history.json"

    @property
    def freshness_window(self) -> timedelta:
        return timedelta(hours=self.freshness_hours)
