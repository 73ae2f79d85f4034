"""Data models for docrag."""

from docrag.models.document import (
    Block,
    Chunk,
    ChunkMetadata,
    ChunkText,
    CodeBlock,
    Document,
    HeadingBlock,
    ListBlock,
    ParagraphBlock,
    ScoredChunk,
    StoreStats,
)
from docrag.models.embedding import EmbeddingResult
from docrag.models.response import Answer, ContextualResponse

__all__ = [
    "Answer",
    "Block",
    "Chunk",
    "ChunkMetadata",
    "ChunkText",
    "CodeBlock",
    "ContextualResponse",
    "Document",
    "EmbeddingResult",
    "HeadingBlock",
    "ListBlock",
    "ParagraphBlock",
    "ScoredChunk",
    "StoreStats",
]
