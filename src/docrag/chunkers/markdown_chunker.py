"""Heading-aware chunking with sentence-aligned overlap."""

from docrag.chunkers.markdown_parser import parse, render_block
from docrag.models import Chunk, ChunkMetadata, ChunkText, Document, HeadingBlock

SENTENCE_BOUNDARIES = (".", "!", "?", "\n")


def overlap_tail(text: str, overlap_size: int) -> str:
    """Return the tail of a closed chunk to repeat at the start of the next.

    Texts no longer than overlap_size are returned whole. Otherwise the last
    overlap_size characters are searched for the last sentence boundary and
    the tail starts right after it; without a boundary the whole window is
    used, even if that splits a word.
    """
    if len(text) <= overlap_size:
        return text
    if overlap_size <= 0:
        return ""

    window = text[-overlap_size:]
    boundary = max(window.rfind(mark) for mark in SENTENCE_BOUNDARIES)
    if boundary >= 0:
        return window[boundary + 1:].lstrip()
    return window


class MarkdownChunker:
    """Split markdown into overlapping chunks tagged with their heading.

    - A heading always starts a new chunk, seeded with the heading line
    - Other blocks are appended until the chunk would exceed max_chunk_size,
      then a new chunk starts with the previous chunk's overlap tail
    - A single block larger than max_chunk_size becomes one oversize chunk
    """

    MAX_CHUNK_SIZE = 1000
    OVERLAP_SIZE = 100

    def __init__(self, max_chunk_size: int | None = None, overlap_size: int | None = None):
        self.max_chunk_size = max_chunk_size if max_chunk_size is not None else self.MAX_CHUNK_SIZE
        self.overlap_size = overlap_size if overlap_size is not None else self.OVERLAP_SIZE

    def chunk(self, text: str) -> list[ChunkText]:
        """Split text into (content, heading) pairs in document order."""
        chunks: list[ChunkText] = []
        current = ""
        heading = ""

        for block in parse(text):
            if isinstance(block, HeadingBlock):
                if current.strip():
                    chunks.append(ChunkText(content=current.strip(), heading=heading))
                heading = block.text
                current = render_block(block) + "\n\n"
                continue

            rendered = render_block(block)
            if len(current) + len(rendered) > self.max_chunk_size and current.strip():
                closed = current.strip()
                chunks.append(ChunkText(content=closed, heading=heading))
                tail = overlap_tail(closed, self.overlap_size)
                current = f"{tail}\n\n" if tail else ""
                current += rendered + "\n\n"
            else:
                current += rendered + "\n\n"

        if current.strip():
            chunks.append(ChunkText(content=current.strip(), heading=heading))

        return chunks

    def chunk_document(self, document: Document) -> list[Chunk]:
        """Chunk a document into full records with ids and provenance."""
        chunks = []
        for index, piece in enumerate(self.chunk(document.content)):
            chunks.append(
                Chunk(
                    id=Chunk.make_id(document.filename, index),
                    filename=document.filename,
                    chunk_index=index,
                    heading=piece.heading,
                    content=piece.content,
                    metadata=ChunkMetadata(
                        filename=document.filename,
                        path=document.path,
                        chunk_index=index,
                        heading=piece.heading,
                    ),
                )
            )
        return chunks


def chunk_markdown(
    text: str,
    max_chunk_size: int = MarkdownChunker.MAX_CHUNK_SIZE,
    overlap_size: int = MarkdownChunker.OVERLAP_SIZE,
) -> list[ChunkText]:
    """Functional shortcut for MarkdownChunker(...).chunk(text)."""
    return MarkdownChunker(max_chunk_size, overlap_size).chunk(text)
