"""Tests for the embedding history marker and freshness policy."""

import json
from datetime import datetime, timedelta, timezone

from docrag.models import StoreStats
from docrag.storage import EmbeddingHistory, FreshnessPolicy, HistoryFile, is_stale

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
DAY = timedelta(hours=24)


class TestIsStale:
    def test_no_marker_is_stale(self):
        assert is_stale(None, NOW, DAY)

    def test_recent_marker_is_fresh(self):
        marker = EmbeddingHistory(last_initialized=NOW - timedelta(hours=1))
        assert not is_stale(marker, NOW, DAY)

    def test_old_marker_is_stale(self):
        marker = EmbeddingHistory(last_initialized=NOW - timedelta(hours=25))
        assert is_stale(marker, NOW, DAY)

    def test_marker_exactly_one_window_old_is_stale(self):
        marker = EmbeddingHistory(last_initialized=NOW - DAY)
        assert is_stale(marker, NOW, DAY)

    def test_policy_uses_its_window(self):
        marker = EmbeddingHistory(last_initialized=NOW - timedelta(minutes=30))
        assert FreshnessPolicy(timedelta(minutes=10)).is_stale(marker, NOW)
        assert not FreshnessPolicy().is_stale(marker, NOW)


class TestHistoryFile:
    def test_missing_file_loads_none(self, tmp_path):
        assert HistoryFile(tmp_path / "history.json").load() is None

    def test_invalid_file_loads_none(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text('{"stats": {}}', encoding="utf-8")
        assert HistoryFile(path).load() is None

    def test_save_then_load(self, tmp_path):
        history = HistoryFile(tmp_path / "data" / "history.json")
        marker = EmbeddingHistory(NOW, StoreStats(2, {"a.md": 2}))

        assert history.save(marker) is True
        assert history.load() == marker

    def test_file_layout(self, tmp_path):
        path = tmp_path / "history.json"
        HistoryFile(path).save(EmbeddingHistory(NOW, StoreStats(1, {"a.md": 1})))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["lastInitialized"].startswith("2024-05-01T12:00:00")
        assert data["stats"] == {"totalDocuments": 1, "fileStats": {"a.md": 1}}

    def test_reads_javascript_timestamp(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(
            json.dumps({"lastInitialized": "2024-05-01T10:30:00.000Z", "stats": {"totalDocuments": 4, "fileStats": {}}}),
            encoding="utf-8",
        )
        marker = HistoryFile(path).load()

        assert marker.last_initialized == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)
        assert marker.stats.total_documents == 4

    def test_delete(self, tmp_path):
        history = HistoryFile(tmp_path / "history.json")
        history.delete()
        history.save(EmbeddingHistory(NOW))
        history.delete()
        assert history.load() is None
