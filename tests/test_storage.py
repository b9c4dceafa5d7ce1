import logging

from src.core.stats import default_record, serialize
from src.core.storage import FileStatisticsStore, MemoryStatisticsStore, StatisticsTracker


class BrokenStore:
    def __init__(self):
        self.attempts = 0

    def load(self):
        return None

    def save(self, data):
        self.attempts += 1
        return False


def test_memory_store_round_trip():
    store = MemoryStatisticsStore()
    assert store.load() is None
    assert store.save(b"{}")
    assert store.load() == b"{}"
    assert store.blobs == {"wordleStats": b"{}"}


def test_file_store_writes_under_key(tmp_path):
    store = FileStatisticsStore(tmp_path / "nested")
    assert store.load() is None
    assert store.save(b'{"gamesPlayed": 0}')
    assert store.path == tmp_path / "nested" / "wordleStats.json"
    assert store.load() == b'{"gamesPlayed": 0}'
    assert [p.name for p in store.directory.iterdir()] == ["wordleStats.json"]


def test_file_store_reports_failed_save(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = FileStatisticsStore(blocker / "stats")
    with caplog.at_level(logging.WARNING):
        assert store.save(b"{}") is False
    assert "Could not save statistics" in caplog.text


def test_tracker_starts_from_default_without_saved_data():
    tracker = StatisticsTracker(MemoryStatisticsStore())
    assert tracker.load() == default_record()


def test_tracker_persists_each_game(tmp_path):
    store = FileStatisticsStore(tmp_path)
    tracker = StatisticsTracker(store)
    tracker.load()
    tracker.record_game_end("medium", True, 3)
    tracker.record_game_end("medium", False, 6)
    assert tracker.persisted

    reloaded = StatisticsTracker(FileStatisticsStore(tmp_path)).load()
    assert reloaded == tracker.record
    assert reloaded.games_played == 2
    assert reloaded.current_streak == 0


def test_tracker_keeps_memory_record_when_save_fails():
    store = BrokenStore()
    tracker = StatisticsTracker(store)
    tracker.load()
    rec = tracker.record_game_end("easy", True, 2)
    assert store.attempts == 1
    assert tracker.persisted is False
    assert tracker.record is rec
    assert rec.games_won == 1

    tracker.record_game_end("easy", True, 4)
    assert tracker.record.current_streak == 2


def test_tracker_recovers_from_corrupted_file(tmp_path):
    store = FileStatisticsStore(tmp_path)
    store.path.write_bytes(b"{broken")
    tracker = StatisticsTracker(store)
    assert tracker.load() == default_record()
    tracker.record_game_end("hard", True, 5)
    assert StatisticsTracker(store).load() == tracker.record


def test_tracker_loads_existing_blob():
    existing = serialize(default_record())
    tracker = StatisticsTracker(MemoryStatisticsStore(initial=existing))
    assert tracker.load() == default_record()
