from pathlib import Path
from types import SimpleNamespace

import pytest

from src.config import Settings


@pytest.fixture
def offline_settings(tmp_path):
    return Settings(
        data_dir=tmp_path / "wordlists",
        stats_dir=tmp_path / "stats",
        max_attempts=6,
        offline=True,
        api_key="",
        model_name="test-model",
    )


@pytest.fixture
def online_settings(offline_settings):
    return Settings(
        data_dir=offline_settings.data_dir,
        stats_dir=offline_settings.stats_dir,
        max_attempts=6,
        offline=False,
        api_key="sk-test",
        model_name="test-model",
    )


@pytest.fixture
def shipped_data_dir():
    return Path(__file__).resolve().parents[1] / "data" / "wordlists"


@pytest.fixture
def fake_openai():
    """Factory for stand-ins of `openai.OpenAI` that return `reply` or raise `error`."""
    return _fake_openai


def _fake_openai(reply=None, error=None):
    calls = []

    class FakeClient:
        def __init__(self, api_key=None):
            self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

        def _create(self, **kwargs):
            calls.append(kwargs)
            if error is not None:
                raise error
            message = SimpleNamespace(content=reply)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    FakeClient.calls = calls
    return FakeClient
