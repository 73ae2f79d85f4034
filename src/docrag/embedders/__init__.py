"""Embedding providers and vector similarity."""

from docrag.clients import OllamaClient
from docrag.config import Settings
from docrag.embedders.ollama import OllamaEmbedder
from docrag.embedders.similarity import cosine_similarity, top_k
from docrag.protocols import EmbeddingProvider


def create_embedder(settings: Settings, client: OllamaClient | None = None) -> EmbeddingProvider:
    """Build the embedding provider selected by settings.embedding_backend.

    An existing OllamaClient can be shared with the chat side via `client`.
    """
    if settings.embedding_backend == "sentence-transformers":
        # Imported here so torch is only loaded when the local backend is used
        from docrag.embedders.sentence_transformer import SentenceTransformerEmbedder

        return SentenceTransformerEmbedder(settings.local_model)

    if client is None:
        client = OllamaClient(settings.ollama_url, timeout=settings.request_timeout)
    return OllamaEmbedder(client, settings.embedding_model)


__all__ = ["OllamaEmbedder", "cosine_similarity", "create_embedder", "top_k"]
