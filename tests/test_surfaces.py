"""Tests for the CLI and the MCP server formatting."""

import pytest
from mcp.server.fastmcp import FastMCP

from conftest import FakeEmbedder
from docrag import cli
from docrag.models import Chunk, ChunkMetadata, ScoredChunk, StoreStats
from docrag.server import create_mcp_server
from docrag.server.mcp_server import format_results, format_stats
from docrag.service import RetrievalService


def scored(heading: str, content: str, similarity: float) -> ScoredChunk:
    chunk = Chunk(
        id="a.md_chunk_0",
        filename="a.md",
        chunk_index=0,
        heading=heading,
        content=content,
        metadata=ChunkMetadata("a.md", "a.md", 0, heading),
    )
    return ScoredChunk(chunk=chunk, similarity=similarity)


class TestMcpFormatting:
    def test_no_results(self):
        assert format_results("where", []) == "No results found for: where"

    def test_results_are_ranked_and_truncated(self):
        out = format_results("q", [scored("Intro", "x" * 250, 0.9), scored("", "short\ntext", 0.5)])
        lines = out.splitlines()

        assert lines[0] == "1. [0.900] a.md > Intro"
        assert lines[1] == "   " + "x" * 200 + "..."
        assert lines[3] == "2. [0.500] a.md"
        assert lines[4] == "   short text"

    def test_stats(self):
        out = format_stats(StoreStats(3, {"b.md": 1, "a.md": 2}))
        assert out.splitlines() == ["Total chunks: 3", "  a.md: 2", "  b.md: 1"]

    def test_server_is_created(self, make_service):
        assert isinstance(create_mcp_server(make_service()), FastMCP)


class TestCli:
    @pytest.fixture
    def patched_service(self, make_service, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        service = make_service()
        monkeypatch.setattr(RetrievalService, "from_settings", classmethod(lambda cls, settings: service))
        return service

    def test_ingest_then_search(self, patched_service, capsys):
        assert cli.main(["ingest"]) == 0
        assert patched_service.get_stats().total_documents == 3

        assert cli.main(["search", "gamma", "-k", "1"]) == 0
        out = capsys.readouterr().out
        assert "1. [1.000] b.md" in out
        assert "gamma notes." in out

    def test_search_with_zero_limit_prints_nothing(self, patched_service, capsys):
        assert cli.main(["ingest"]) == 0
        capsys.readouterr()

        assert cli.main(["search", "gamma", "-k", "0"]) == 0
        out = capsys.readouterr().out
        assert "No results found for: gamma" in out
        assert "b.md" not in out

    def test_stats_before_ingest(self, patched_service, capsys):
        assert cli.main(["stats"]) == 0
        out = capsys.readouterr().out
        assert "Total chunks: 0" in out
        assert "Last initialized: Never" in out

    def test_errors_exit_nonzero(self, patched_service):
        patched_service.embedder = FakeEmbedder(available=False)
        assert cli.main(["search", "anything"]) == 1

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            cli.main([])
