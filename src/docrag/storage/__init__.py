"""Durable storage for chunks and the embedding history marker."""

from docrag.storage.history import (
    EmbeddingHistory,
    FreshnessPolicy,
    HistoryFile,
    is_stale,
    utcnow,
)
from docrag.storage.store import VectorStore

__all__ = [
    "EmbeddingHistory",
    "FreshnessPolicy",
    "HistoryFile",
    "VectorStore",
    "is_stale",
    "utcnow",
]
