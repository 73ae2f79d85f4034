"""Protocol for embedding model providers."""

from typing import Protocol, runtime_checkable

from docrag.models import EmbeddingResult


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding model providers.

    Allows swapping between a remote model (Ollama), a local model
    (sentence-transformers), or a fake in tests.
    """

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        ...

    def embed(self, text: str) -> list[float]:
        """Embed one text.

        Raises: EmbeddingUnavailable if no vector can be produced.
        """
        ...

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed many texts; a failure only affects its own slot."""
        ...
