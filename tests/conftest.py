"""Shared fixtures: a deterministic fake embedder, a fake clock, sample docs."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from docrag.chunkers import MarkdownChunker
from docrag.embedders.batch import embed_sequentially
from docrag.errors import EmbeddingUnavailable
from docrag.storage import FreshnessPolicy, HistoryFile, VectorStore
from docrag.service import RetrievalService


class FakeEmbedder:
    """Embeds text as word counts over a small vocabulary.

    Texts listed in `vectors` get that exact vector instead. Texts containing
    any word in `fail_on` fail, and everything fails when `available` is False.
    """

    model_name = "fake-embedder"

    def __init__(self, vectors=None, vocabulary=("alpha", "beta", "gamma"), fail_on=(), available=True):
        self.vectors = dict(vectors or {})
        self.vocabulary = vocabulary
        self.fail_on = fail_on
        self.available = available
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if not self.available:
            raise EmbeddingUnavailable("backend down")
        if any(word in text for word in self.fail_on):
            raise EmbeddingUnavailable(f"cannot embed {text[:20]!r}")
        if text in self.vectors:
            return list(self.vectors[text])
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.vocabulary]

    def embed_batch(self, texts):
        return embed_sequentially(self.embed, texts)


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def docs_dir(tmp_path) -> Path:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text(
        "# Alpha\nalpha alpha text.\n\n# Beta\nbeta content here.\n",
        encoding="utf-8",
    )
    (docs / "b.md").write_text("gamma notes.\n", encoding="utf-8")
    return docs


@pytest.fixture
def make_service(tmp_path, docs_dir, clock):
    """Factory building a RetrievalService over tmp_path/data."""

    def _factory(embedder=None, chat_client=None, **kwargs):
        data = tmp_path / "data"
        return RetrievalService(
            embedder=embedder or FakeEmbedder(),
            store=VectorStore(data / "vector_store.json"),
            history=HistoryFile(data / "embedding_history.json"),
            source_dir=kwargs.pop("source_dir", docs_dir),
            chunker=kwargs.pop("chunker", MarkdownChunker()),
            freshness=FreshnessPolicy(timedelta(hours=24)),
            clock=clock,
            chat_client=chat_client,
            default_model="test-model",
            **kwargs,
        )

    return _factory
