from pathlib import Path

from src.config import load_settings

_VARS = ("WORDLE_DATA_DIR", "WORDLE_STATS_DIR", "WORDLE_MAX_ATTEMPTS", "OFFLINE_MODE",
         "OPENAI_API_KEY", "MODEL_NAME")


def _clear(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    s = load_settings(dotenv=False)
    assert s.data_dir == Path("data/wordlists")
    assert s.stats_dir == Path(".wordle")
    assert s.max_attempts == 6
    assert s.offline is True
    assert s.llm_enabled is False


def test_environment_overrides(monkeypatch, tmp_path):
    _clear(monkeypatch)
    monkeypatch.setenv("WORDLE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WORDLE_MAX_ATTEMPTS", "8")
    monkeypatch.setenv("OFFLINE_MODE", "false")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    s = load_settings(dotenv=False)
    assert s.data_dir == tmp_path
    assert s.max_attempts == 8
    assert s.llm_enabled is True


def test_bad_max_attempts_falls_back(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("WORDLE_MAX_ATTEMPTS", "lots")
    assert load_settings(dotenv=False).max_attempts == 6
    monkeypatch.setenv("WORDLE_MAX_ATTEMPTS", "0")
    assert load_settings(dotenv=False).max_attempts == 6
