"""Retrieval orchestrator: ingestion, freshness caching, search and prompts."""

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, Optional

from docrag.chunkers import MarkdownChunker
from docrag.clients import OllamaClient
from docrag.config import DEFAULT_SYSTEM_PROMPT, Settings
from docrag.embedders import create_embedder, similarity
from docrag.errors import EmbeddingUnavailable, InitializationError, LLMUnavailable
from docrag.ingesters import FolderIngester
from docrag.models import Answer, ContextualResponse, ScoredChunk, StoreStats
from docrag.prompts import build_messages
from docrag.protocols import ChunkingStrategy, EmbeddingProvider, Ingester
from docrag.storage import EmbeddingHistory, FreshnessPolicy, HistoryFile, VectorStore, utcnow

logger = logging.getLogger(__name__)


class RetrievalService:
    """Owns the store and embedder and serves the retrieval call surface.

    Cold start (no history marker, or one older than the freshness window):
    initialize() reads every document, embeds each chunk and flushes the
    store once. Warm start: initialize() is a no-op and the snapshot loaded
    by the store is used as-is.

    Ingestion and refresh are serialized by a lock. Queries take no lock and
    may see a partially rebuilt store while a rebuild runs.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        store: VectorStore,
        history: HistoryFile,
        source_dir: Path | str,
        ingester: Optional[Ingester] = None,
        chunker: Optional[ChunkingStrategy] = None,
        freshness: Optional[FreshnessPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
        chat_client: Optional[OllamaClient] = None,
        default_model: str = "",
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        context_top_k: int = 3,
    ):
        self.embedder = embedder
        self.store = store
        self.history = history
        self.source_dir = Path(source_dir)
        self.ingester = ingester or FolderIngester()
        self.chunker = chunker or MarkdownChunker()
        self.freshness = freshness or FreshnessPolicy()
        self.clock = clock
        self.chat_client = chat_client
        self.default_model = default_model
        self.system_prompt = system_prompt
        self.context_top_k = context_top_k
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetrievalService":
        """Build the default object graph from configuration."""
        client = OllamaClient(settings.ollama_url, timeout=settings.request_timeout)
        return cls(
            embedder=create_embedder(settings, client=client),
            store=VectorStore(settings.vector_store_path),
            history=HistoryFile(settings.history_path),
            source_dir=settings.docs_dir,
            chunker=MarkdownChunker(settings.max_chunk_size, settings.overlap_size),
            freshness=FreshnessPolicy(settings.freshness_window),
            chat_client=client,
            default_model=settings.chat_model,
            system_prompt=settings.system_prompt,
            context_top_k=settings.context_top_k,
        )

    def close(self) -> None:
        if self.chat_client is not None:
            self.chat_client.close()

    def __enter__(self) -> "RetrievalService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Ingestion

    def initialize(self, force: bool = False) -> StoreStats:
        """Build the store unless the history marker is still fresh.

        Args:
            force: Rebuild even if the marker is fresh

        Returns:
            Store statistics after the call

        Raises:
            InitializationError: If chunks were found but none could be embedded
        """
        with self._lock:
            if not force and not self.freshness.is_stale(self.history.load(), self.clock()):
                logger.info("Embedding history found - skipping initialization")
                return self.store.stats()
            return self._build()

    def warm_up(self) -> StoreStats:
        """Startup entry point: initialize, but keep serving if it fails."""
        try:
            return self.initialize()
        except InitializationError as e:
            logger.error(f"Embedding initialization failed, serving {len(self.store)} stored chunks: {e}")
            return self.store.stats()

    def refresh(self) -> StoreStats:
        """Clear the store and rebuild it, ignoring the freshness marker."""
        with self._lock:
            logger.info("Refreshing document store...")
            self.store.clear()
            self.history.delete()
            return self._build()

    def _build(self) -> StoreStats:
        """Cold initialization. Caller must hold the lock."""
        documents = list(self.ingester.ingest(self.source_dir))
        if not documents:
            logger.warning(f"No documents found in {self.source_dir}")

        planned = [(doc, self.chunker.chunk_document(doc)) for doc in documents]
        total = sum(len(chunks) for _, chunks in planned)
        logger.info(f"Processing {total} document chunks from {len(documents)} files...")

        embedded = 0
        last_error: Optional[EmbeddingUnavailable] = None
        for doc, chunks in planned:
            if not chunks:
                continue
            logger.info(f"Embedding {doc.filename} ({len(chunks)} chunks)")
            results = self.embedder.embed_batch([c.content for c in chunks])

            ready = []
            for chunk, result in zip(chunks, results):
                if result.ok:
                    chunk.embedding = result.unwrap()
                    ready.append(chunk)
                else:
                    logger.error(f"Failed to process chunk {chunk.id}: {result.error}")
                    last_error = result.error

            if not ready:
                logger.warning(f"No chunk of {doc.filename} could be embedded; keeping its previous entries")
                continue

            # Drop every old chunk of the file so a shorter document leaves no orphans
            self.store.remove_by_filename(doc.filename)
            for chunk in ready:
                self.store.upsert(chunk)
            embedded += len(ready)

        if total and not embedded:
            raise InitializationError(f"None of {total} chunks could be embedded") from last_error

        self.store.save()
        stats = self.store.stats()
        self.history.save(EmbeddingHistory(last_initialized=self.clock(), stats=stats))
        logger.info(f"Document initialization complete: {embedded}/{total} chunks embedded, {stats.total_documents} stored")
        return stats

    def _populate_if_empty(self) -> None:
        with self._lock:
            if len(self.store) != 0:
                return
            marker = self.history.load()
            if (
                marker is not None
                and marker.stats.total_documents == 0
                and not self.freshness.is_stale(marker, self.clock())
            ):
                logger.debug("Document folder was empty at the last build, not rebuilding")
                return
            self._build()

    # Queries

    def search(self, query: str, top_k: int = 5) -> list[ScoredChunk]:
        """Return the top_k chunks most similar to query.

        An empty store triggers a full rebuild before scoring.

        Raises:
            EmbeddingUnavailable: If the query itself cannot be embedded
            InitializationError: If the rebuild of an empty store fails
        """
        query_vector = self.embedder.embed(query)

        if len(self.store) == 0:
            logger.info("No documents in vector store, initializing...")
            self._populate_if_empty()

        return similarity.top_k(query_vector, self.store.all(), top_k)

    def generate_contextual_response(
        self,
        query: str,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> ContextualResponse:
        """Retrieve context for query and build the prompt for the chat model."""
        results = self.search(query, self.context_top_k)
        return ContextualResponse(
            messages=build_messages(query, results, system_prompt or self.system_prompt),
            relevant_docs=[r.summary() for r in results],
            model=model or self.default_model,
        )

    def answer(
        self,
        query: str,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> Answer:
        """Answer query with the chat model, grounded in retrieved chunks."""
        client = self._require_chat_client()
        response = self.generate_contextual_response(query, model, system_prompt)
        content = client.chat(response.model, response.messages)
        return Answer(content=content, model=response.model, relevant_docs=response.relevant_docs)

    def answer_stream(
        self,
        query: str,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> Iterator[str]:
        """Like answer(), but yield the reply as it is generated."""
        client = self._require_chat_client()
        response = self.generate_contextual_response(query, model, system_prompt)
        yield from client.chat_stream(response.model, response.messages)

    def _require_chat_client(self) -> OllamaClient:
        if self.chat_client is None:
            raise LLMUnavailable("No chat backend configured")
        return self.chat_client

    def get_stats(self) -> StoreStats:
        return self.store.stats()
