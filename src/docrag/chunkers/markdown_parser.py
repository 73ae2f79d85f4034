"""Line-oriented parser turning lightweight markdown into typed blocks."""

import logging
import re

from docrag.errors import ParseError
from docrag.models import Block, CodeBlock, HeadingBlock, ListBlock, ParagraphBlock

logger = logging.getLogger(__name__)

FENCE = "```"
_HEADING_RE = re.compile(r"^(#+)\s*(.*)$")
_LIST_MARKER_RE = re.compile(r"^[-*]\s*")


def parse_heading(line: str, line_number: int | None = None) -> HeadingBlock:
    """Parse a stripped line starting with '#'.

    Raises:
        ParseError: If the line carries no heading text
    """
    match = _HEADING_RE.match(line)
    if match is None or not match.group(2).strip():
        raise ParseError(f"Heading without text: {line!r}", line_number)
    return HeadingBlock(depth=len(match.group(1)), text=match.group(2).strip())


def parse(text: str) -> list[Block]:
    """Parse markdown text into a flat list of blocks.

    Single pass over the lines:
    - '#' lines become headings (depth = number of '#')
    - fenced code is consumed verbatim up to the closing fence
    - '-' / '*' lines become single-item lists
    - blank lines end the current paragraph
    - anything else accumulates into a paragraph

    Malformed blocks are logged and skipped; the rest of the text is kept.
    """
    lines = text.splitlines()
    blocks: list[Block] = []
    paragraph = ""

    def flush_paragraph() -> None:
        nonlocal paragraph
        if paragraph.strip():
            blocks.append(ParagraphBlock(text=paragraph.strip()))
        paragraph = ""

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        if stripped.startswith("#"):
            flush_paragraph()
            try:
                blocks.append(parse_heading(stripped, i + 1))
            except ParseError as e:
                logger.warning(f"Skipping block at line {e.line_number}: {e}")

        elif stripped.startswith(FENCE):
            flush_paragraph()
            lang = stripped[len(FENCE):].strip()
            body: list[str] = []
            i += 1
            while i < len(lines) and not lines[i].strip().startswith(FENCE):
                body.append(lines[i])
                i += 1
            blocks.append(CodeBlock(lang=lang, text="\n".join(body).strip()))

        elif stripped.startswith(("-", "*")):
            flush_paragraph()
            blocks.append(ListBlock(items=(_LIST_MARKER_RE.sub("", stripped, count=1),)))

        elif not stripped:
            flush_paragraph()

        else:
            paragraph += line + " "

        i += 1

    flush_paragraph()
    return blocks


def render_block(block: Block) -> str:
    """Render a non-heading block back to flat markdown text."""
    if isinstance(block, ParagraphBlock):
        return block.text
    if isinstance(block, ListBlock):
        return "\n".join(f"- {item}" for item in block.items)
    if isinstance(block, CodeBlock):
        return f"{FENCE}{block.lang}\n{block.text}\n{FENCE}"
    if isinstance(block, HeadingBlock):
        return f"{'#' * block.depth} {block.text}"
    raise TypeError(f"Unknown block type: {type(block).__name__}")
