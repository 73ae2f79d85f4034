"""Ingester for a local folder of markdown documents."""

import logging
import os
from pathlib import Path
from typing import Iterator

from docrag.models import Document

logger = logging.getLogger(__name__)

SKIP_DIRS = {
    "__pycache__",
    "node_modules",
    "venv",
    "env",
    "dist",
    "build",
}


class FolderIngester:
    """Reads text documents from a folder, recursively."""

    DEFAULT_SUFFIXES = (".md", ".markdown")

    def __init__(self, suffixes: tuple[str, ...] | None = None):
        self.suffixes = tuple(s.lower() for s in (suffixes or self.DEFAULT_SUFFIXES))

    def ingest(self, source: Path) -> Iterator[Document]:
        """Yield documents from a folder in a stable order.

        Args:
            source: Path to the folder

        Yields:
            Document objects; ``filename`` is the posix path relative to source
        """
        source = Path(source)
        if not source.is_dir():
            logger.warning(f"Document folder not found: {source}")
            return

        for root, dirs, files in os.walk(source):
            dirs[:] = sorted(d for d in dirs if not self._should_skip(d))
            for name in sorted(files):
                if self._should_skip(name) or not name.lower().endswith(self.suffixes):
                    continue

                full_path = Path(root) / name
                try:
                    raw_content = full_path.read_bytes()
                except OSError as e:
                    logger.error(f"Error reading {full_path}: {e}")
                    continue

                yield Document(
                    filename=full_path.relative_to(source).as_posix(),
                    path=str(full_path),
                    content=raw_content.decode("utf-8", errors="replace"),
                )

    def _should_skip(self, name: str) -> bool:
        """Skip hidden entries and common build artifacts."""
        return name.startswith(".") or name in SKIP_DIRS or name.endswith(".egg-info")
