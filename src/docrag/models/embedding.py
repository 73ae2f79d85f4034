"""Per-item result of an embedding call."""

from dataclasses import dataclass
from typing import Optional

from docrag.errors import EmbeddingUnavailable


@dataclass(frozen=True)
class EmbeddingResult:
    """Either a vector or the error that prevented producing one."""

    vector: Optional[list[float]] = None
    error: Optional[EmbeddingUnavailable] = None

    @classmethod
    def success(cls, vector: list[float]) -> "EmbeddingResult":
        return cls(vector=vector)

    @classmethod
    def failure(cls, error: EmbeddingUnavailable) -> "EmbeddingResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None and self.vector is not None

    def unwrap(self) -> list[float]:
        """Return the vector, or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.vector is None:
            raise EmbeddingUnavailable("Embedding result holds no vector")
        return self.vector
