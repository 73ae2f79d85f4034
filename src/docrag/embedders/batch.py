"""Best-effort sequential batch embedding."""

import logging
from typing import Callable

from docrag.errors import EmbeddingUnavailable
from docrag.models import EmbeddingResult

logger = logging.getLogger(__name__)


def embed_sequentially(embed: Callable[[str], list[float]], texts: list[str]) -> list[EmbeddingResult]:
    """Embed texts one at a time, isolating failures per item."""
    results = []
    for text in texts:
        try:
            results.append(EmbeddingResult.success(embed(text)))
        except EmbeddingUnavailable as e:
            logger.error(f"Error generating embedding for text: {text[:50]!r}... ({e})")
            results.append(EmbeddingResult.failure(e))
    return results
