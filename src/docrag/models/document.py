"""Core data models for documents, blocks and chunks."""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class Document:
    """A source document read from the docs folder."""

    filename: str
    path: str
    content: str


# Blocks are produced by the markdown parser and consumed immediately by the
# chunker; they carry no identity.


@dataclass(frozen=True)
class HeadingBlock:
    depth: int
    text: str


@dataclass(frozen=True)
class ParagraphBlock:
    text: str


@dataclass(frozen=True)
class ListBlock:
    items: tuple[str, ...]


@dataclass(frozen=True)
class CodeBlock:
    lang: str
    text: str


Block = Union[HeadingBlock, ParagraphBlock, ListBlock, CodeBlock]


@dataclass(frozen=True)
class ChunkText:
    """Chunk content paired with the heading active when it was closed."""

    content: str
    heading: str


@dataclass
class ChunkMetadata:
    """Denormalized provenance for consumers that skip the full record."""

    filename: str
    path: str
    chunk_index: int
    heading: str

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "path": self.path,
            "chunkIndex": self.chunk_index,
            "heading": self.heading,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChunkMetadata":
        return cls(
            filename=data.get("filename", ""),
            path=data.get("path", ""),
            chunk_index=int(data.get("chunkIndex", 0)),
            heading=data.get("heading", ""),
        )


@dataclass
class Chunk:
    """A bounded span of document text, the unit of retrieval."""

    id: str
    filename: str
    chunk_index: int
    heading: str
    content: str
    metadata: ChunkMetadata
    embedding: Optional[list[float]] = None

    @staticmethod
    def make_id(filename: str, chunk_index: int) -> str:
        return f"{filename}_chunk_{chunk_index}"

    def to_dict(self) -> dict:
        """Serialize using the snapshot file's key names."""
        return {
            "id": self.id,
            "filename": self.filename,
            "chunkIndex": self.chunk_index,
            "heading": self.heading,
            "content": self.content,
            "embedding": self.embedding,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Chunk":
        """Build a chunk from a snapshot entry.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field has the wrong type
        """
        filename = data["filename"]
        chunk_index = int(data["chunkIndex"])
        heading = data.get("heading") or ""
        content = data["content"]
        if not isinstance(filename, str) or not isinstance(heading, str) or not isinstance(content, str):
            raise ValueError(f"Chunk {filename!r} has non-text fields")
        embedding = data.get("embedding")
        if embedding is not None:
            embedding = [float(x) for x in embedding]

        raw_meta = data.get("metadata")
        if raw_meta is not None and not isinstance(raw_meta, dict):
            raise ValueError(f"Chunk {filename!r} has metadata of type {type(raw_meta).__name__}")
        if raw_meta:
            metadata = ChunkMetadata.from_dict(raw_meta)
        else:
            metadata = ChunkMetadata(filename, "", chunk_index, heading)

        return cls(
            id=data.get("id") or cls.make_id(filename, chunk_index),
            filename=filename,
            chunk_index=chunk_index,
            heading=heading,
            content=content,
            metadata=metadata,
            embedding=embedding,
        )


@dataclass
class ScoredChunk:
    """A chunk paired with its similarity to a query."""

    chunk: Chunk
    similarity: float

    @property
    def filename(self) -> str:
        return self.chunk.filename

    @property
    def heading(self) -> str:
        return self.chunk.heading

    @property
    def content(self) -> str:
        return self.chunk.content

    def to_dict(self) -> dict:
        return {
            "content": self.chunk.content,
            "filename": self.chunk.filename,
            "heading": self.chunk.heading,
            "similarity": self.similarity,
        }

    def summary(self, max_chars: int = 200) -> dict:
        """Redacted view for citation display."""
        content = self.chunk.content[:max_chars]
        if len(self.chunk.content) > max_chars:
            content += "..."
        return {
            "filename": self.chunk.filename,
            "heading": self.chunk.heading,
            "similarity": self.similarity,
            "content": content,
        }


@dataclass
class StoreStats:
    """Chunk counts for observability."""

    total_documents: int = 0
    file_stats: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalDocuments": self.total_documents,
            "fileStats": dict(self.file_stats),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoreStats":
        return cls(
            total_documents=int(data.get("totalDocuments", 0)),
            file_stats={k: int(v) for k, v in (data.get("fileStats") or {}).items()},
        )
