"""In-memory chunk collection mirrored to a JSON snapshot."""

import json
import logging
from pathlib import Path
from typing import Iterator, Optional

from docrag.errors import StoreIOError
from docrag.models import Chunk, StoreStats
from docrag.storage._files import write_json_atomic

logger = logging.getLogger(__name__)


class VectorStore:
    """Ordered collection of chunks keyed by id, persisted as one file.

    The snapshot is loaded on construction. Mutations only touch memory;
    call save() after a batch to flush.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._chunks: list[Chunk] = []
        self.load()

    def load(self) -> None:
        """Replace the in-memory collection with the snapshot contents.

        A missing snapshot yields an empty store. An unreadable one is
        logged and also yields an empty store.
        """
        self._chunks = []
        if not self.path.exists():
            logger.info(f"No vector store at {self.path}, starting empty")
            return

        try:
            self._chunks = self._read_snapshot()
        except StoreIOError as e:
            logger.error(f"Error loading vector store: {e}")
            self._chunks = []
            return
        logger.info(f"Loaded {len(self._chunks)} chunks from vector store")

    def _read_snapshot(self) -> list[Chunk]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreIOError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(raw, list):
            raise StoreIOError(f"{self.path} does not hold a JSON array")
        try:
            return [Chunk.from_dict(item) for item in raw]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreIOError(f"Invalid chunk record in {self.path}: {e!r}") from e

    def save(self) -> bool:
        """Write the whole collection to the snapshot.

        Returns:
            True on success; failures are logged and return False
        """
        try:
            self._write_snapshot()
        except StoreIOError as e:
            logger.error(f"Error saving vector store: {e}")
            return False
        logger.info(f"Saved {len(self._chunks)} chunks to vector store")
        return True

    def _write_snapshot(self) -> None:
        try:
            write_json_atomic(self.path, [c.to_dict() for c in self._chunks])
        except OSError as e:
            raise StoreIOError(f"Cannot write {self.path}: {e}") from e

    def upsert(self, chunk: Chunk) -> None:
        """Replace the chunk with the same id, or append it."""
        for i, existing in enumerate(self._chunks):
            if existing.id == chunk.id:
                self._chunks[i] = chunk
                return
        self._chunks.append(chunk)

    def remove_by_id(self, chunk_id: str) -> int:
        before = len(self._chunks)
        self._chunks = [c for c in self._chunks if c.id != chunk_id]
        return before - len(self._chunks)

    def remove_by_filename(self, filename: str) -> int:
        before = len(self._chunks)
        self._chunks = [c for c in self._chunks if c.filename != filename]
        return before - len(self._chunks)

    def clear(self) -> None:
        """Empty the collection and persist the empty state."""
        self._chunks = []
        self.save()

    def all(self) -> list[Chunk]:
        """Return a snapshot list of the chunks in collection order."""
        return list(self._chunks)

    def get(self, chunk_id: str) -> Optional[Chunk]:
        return next((c for c in self._chunks if c.id == chunk_id), None)

    def by_filename(self, filename: str) -> list[Chunk]:
        return [c for c in self._chunks if c.filename == filename]

    def stats(self) -> StoreStats:
        stats = StoreStats(total_documents=len(self._chunks))
        for chunk in self._chunks:
            name = chunk.filename or "unknown"
            stats.file_stats[name] = stats.file_stats.get(name, 0) + 1
        return stats

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[Chunk]:
        return iter(list(self._chunks))
