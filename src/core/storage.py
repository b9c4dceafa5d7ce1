from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .state import DEFAULT_MAX_ATTEMPTS, Difficulty
from .stats import StatisticsRecord, deserialize, record_game_end, serialize

logger = logging.getLogger(__name__)

STATS_KEY = "wordleStats"


class StatisticsStore(Protocol):
    """Key-value blob storage for the serialized statistics record."""

    def load(self) -> Optional[bytes]:
        """Return the stored blob, or None when nothing has been saved."""
        ...

    def save(self, data: bytes) -> bool:
        """Store the blob; return False if it could not be written."""
        ...


class MemoryStatisticsStore:
    """Dict-backed store, mostly for tests and throwaway sessions."""

    def __init__(self, initial: Optional[bytes] = None, key: str = STATS_KEY) -> None:
        self.key = key
        self.blobs: Dict[str, bytes] = {}
        if initial is not None:
            self.blobs[key] = initial

    def load(self) -> Optional[bytes]:
        return self.blobs.get(self.key)

    def save(self, data: bytes) -> bool:
        self.blobs[self.key] = data
        return True


class FileStatisticsStore:
    """
    Stores each key as `<directory>/<key>.json`.

    Writes go to a temporary file in the same directory and are moved into
    place with `os.replace`, so a failed save leaves the previous blob intact.
    """

    def __init__(self, directory: Path | str, key: str = STATS_KEY) -> None:
        self.directory = Path(directory)
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def load(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Could not read statistics from %s: %s", self.path, exc)
            return None

    def save(self, data: bytes) -> bool:
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{self.key}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, self.path)
            return True
        except OSError as exc:
            logger.warning("Could not save statistics to %s: %s", self.path, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False


class StatisticsTracker:
    """
    Owns the in-memory StatisticsRecord for one session and keeps it persisted.

    The in-memory record is authoritative: a failed save is logged and
    reported through `persisted`, but never rolls the record back.
    """

    def __init__(self, store: StatisticsStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self.store = store
        self.max_attempts = max_attempts
        self.record: StatisticsRecord = deserialize(None, max_attempts)
        self.persisted = True

    def load(self) -> StatisticsRecord:
        """(Re)load the record from the store, falling back to all zeros."""
        self.record = deserialize(self.store.load(), self.max_attempts)
        return self.record

    def record_game_end(self, difficulty: Difficulty, won: bool, guesses_used: int) -> StatisticsRecord:
        """Apply one finished game, then try to persist the new record."""
        self.record = record_game_end(self.record, difficulty, won, guesses_used, self.max_attempts)
        self.persisted = self.store.save(serialize(self.record))
        if not self.persisted:
            logger.warning("Statistics kept in memory only; save failed")
        return self.record
