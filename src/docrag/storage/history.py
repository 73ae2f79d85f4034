"""Embedding history marker and the freshness policy built on it."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from docrag.models import StoreStats
from docrag.storage._files import write_json_atomic

logger = logging.getLogger(__name__)

DEFAULT_FRESHNESS_WINDOW = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EmbeddingHistory:
    """When the store was last built, and what it held afterwards."""

    last_initialized: datetime
    stats: StoreStats = field(default_factory=StoreStats)

    def to_dict(self) -> dict:
        return {
            "lastInitialized": self.last_initialized.isoformat(),
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EmbeddingHistory":
        # JavaScript writes a trailing "Z" that older fromisoformat() rejects
        stamp = datetime.fromisoformat(data["lastInitialized"].replace("Z", "+00:00"))
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        return cls(last_initialized=stamp, stats=StoreStats.from_dict(data.get("stats") or {}))


def is_stale(marker: Optional[EmbeddingHistory], now: datetime, window: timedelta) -> bool:
    """True if there is no marker or it is at least `window` old."""
    if marker is None:
        return True
    return now - marker.last_initialized >= window


@dataclass(frozen=True)
class FreshnessPolicy:
    """Decides whether the store must be rebuilt before use."""

    window: timedelta = DEFAULT_FRESHNESS_WINDOW

    def is_stale(self, marker: Optional[EmbeddingHistory], now: datetime) -> bool:
        return is_stale(marker, now, self.window)


class HistoryFile:
    """The single JSON file holding the embedding history marker."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> Optional[EmbeddingHistory]:
        """Return the stored marker, or None if missing or invalid."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return EmbeddingHistory.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"No valid embedding history found at {self.path}: {e}")
            return None

    def save(self, history: EmbeddingHistory) -> bool:
        try:
            write_json_atomic(self.path, history.to_dict())
        except OSError as e:
            logger.error(f"Failed to save embedding history to {self.path}: {e}")
            return False
        logger.info("Embedding history saved")
        return True

    def delete(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
