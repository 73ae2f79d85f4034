"""Embedding provider backed by a remote Ollama server."""

from docrag.clients import OllamaClient
from docrag.embedders.batch import embed_sequentially
from docrag.models import EmbeddingResult


class OllamaEmbedder:
    """Embedding provider calling Ollama's /api/embeddings endpoint.

    Uses nomic-embed-text by default. Texts are embedded one request at a
    time, which bounds load on the server and keeps failures per item.
    """

    DEFAULT_MODEL = "nomic-embed-text:latest"

    def __init__(self, client: OllamaClient, model_name: str | None = None):
        self.client = client
        self._model_name = model_name or self.DEFAULT_MODEL

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        return self._model_name

    def embed(self, text: str) -> list[float]:
        return self.client.embeddings(self._model_name, text)

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        return embed_sequentially(self.embed, texts)
