"""Protocol definitions for swappable components."""

from docrag.protocols.chunker import ChunkingStrategy
from docrag.protocols.embedder import EmbeddingProvider
from docrag.protocols.ingester import Ingester

__all__ = ["Ingester", "EmbeddingProvider", "ChunkingStrategy"]
