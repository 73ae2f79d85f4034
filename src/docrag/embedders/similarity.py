"""Vector similarity and top-K ranking."""

import logging
from typing import Optional, Sequence

import numpy as np

from docrag.models import Chunk, ScoredChunk

logger = logging.getLogger(__name__)


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """Compute cosine similarity between two vectors.

    Returns 0.0 when either vector is absent or empty, when the dimensions
    differ, or when either has zero magnitude. The result is clamped to
    [-1, 1] to absorb floating point drift.
    """
    if a is None or b is None or len(a) == 0 or len(a) != len(b):
        return 0.0

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / (norm_a * norm_b), -1.0, 1.0))


def top_k(query_vector: Sequence[float], chunks: Sequence[Chunk], k: int) -> list[ScoredChunk]:
    """Rank chunks by similarity to query_vector and keep the first k.

    Chunks without an embedding score 0 but stay in the ranking. Equal
    scores keep their collection order.
    """
    if k <= 0:
        return []

    mismatched = 0
    scored = []
    for chunk in chunks:
        if chunk.embedding is not None and len(chunk.embedding) != len(query_vector):
            mismatched += 1
        scored.append(ScoredChunk(chunk=chunk, similarity=cosine_similarity(query_vector, chunk.embedding)))

    if mismatched:
        logger.warning(
            f"{mismatched} stored chunk(s) have a different embedding dimension than the "
            f"query ({len(query_vector)}); they score 0. Re-ingest after changing embedding models."
        )

    # sorted() is stable, so ties keep collection order
    scored = sorted(scored, key=lambda s: s.similarity, reverse=True)
    return scored[:k]
