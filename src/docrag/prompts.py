"""Prompt assembly from retrieved chunks."""

from docrag.config import DEFAULT_SYSTEM_PROMPT
from docrag.models import ScoredChunk

CONTEXT_HEADER = "The following are relevant document excerpts:\n\n"
CONTEXT_FOOTER = "Answer the question using the documents above.\n\n"


def render_context(results: list[ScoredChunk]) -> str:
    """Render retrieved chunks as one context block, one paragraph each."""
    if not results:
        return ""

    parts = [CONTEXT_HEADER]
    for i, result in enumerate(results, 1):
        parts.append(f"Document {i} ({result.filename}):\n")
        if result.heading:
            parts.append(f"Title: {result.heading}\n")
        parts.append(f"Content: {result.content}\n\n")
    parts.append(CONTEXT_FOOTER)
    return "".join(parts)


def build_messages(
    query: str,
    results: list[ScoredChunk],
    system_prompt: str | None = None,
) -> list[dict[str, str]]:
    """Build the system + user message pair sent to the chat model."""
    return [
        {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
        {"role": "user", "content": render_context(results) + f"Question: {query}"},
    ]
