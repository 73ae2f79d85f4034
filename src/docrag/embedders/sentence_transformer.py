"""SentenceTransformer-based embedding provider."""

from sentence_transformers import SentenceTransformer

from docrag.embedders.batch import embed_sequentially
from docrag.errors import EmbeddingUnavailable
from docrag.models import EmbeddingResult


class SentenceTransformerEmbedder:
    """Embedding provider using sentence-transformers library.

    Uses all-MiniLM-L6-v2 by default - a fast, lightweight model that runs
    without an Ollama server.
    """

    DEFAULT_MODEL = "all-MiniLM-L6-v2"

    def __init__(self, model_name: str | None = None):
        """Initialize the embedder.

        Args:
            model_name: Name of the sentence-transformers model to use.
                       Defaults to all-MiniLM-L6-v2.
        """
        self._model_name = model_name or self.DEFAULT_MODEL
        self._model: SentenceTransformer | None = None

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the model on first access."""
        if self._model is None:
            self._model = SentenceTransformer(self._model_name)
        return self._model

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        return self._model_name

    def embed(self, text: str) -> list[float]:
        try:
            vector = self.model.encode(text, convert_to_numpy=True, normalize_embeddings=True)
        except (OSError, RuntimeError, ValueError) as e:
            raise EmbeddingUnavailable(f"Local model {self._model_name} failed: {e}") from e
        return [float(x) for x in vector]

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Encode all texts in one call, falling back to one-by-one on failure."""
        if not texts:
            return []
        try:
            vectors = self.model.encode(texts, convert_to_numpy=True, normalize_embeddings=True)
        except (OSError, RuntimeError, ValueError):
            return embed_sequentially(self.embed, texts)
        return [EmbeddingResult.success([float(x) for x in v]) for v in vectors]
