"""Protocol for document sources."""

from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from docrag.models import Document


@runtime_checkable
class Ingester(Protocol):
    """Protocol for document sources.

    Uses structural subtyping - no inheritance required.
    """

    def ingest(self, source: Path) -> Iterator[Document]:
        """Yield documents from the source."""
        ...
