"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable

from docrag.models import Chunk, Document


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for text chunking strategies."""

    def chunk_document(self, document: Document) -> list[Chunk]:
        """Split a document into chunks with ids and provenance."""
        ...
