"""Document parsing and chunking strategies."""

from docrag.chunkers.markdown_chunker import MarkdownChunker, chunk_markdown, overlap_tail
from docrag.chunkers.markdown_parser import parse, render_block

__all__ = ["MarkdownChunker", "chunk_markdown", "overlap_tail", "parse", "render_block"]
