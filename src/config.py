from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)


def _int(env_value: str | None, default: int) -> int:
    """Convert an environment variable to int, falling back to `default`."""
    try:
        return int(env_value) if env_value else default
    except ValueError:
        log.warning("Ignoring non-integer value %r; using %d", env_value, default)
        return default


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    stats_dir: Path
    max_attempts: int
    offline: bool
    api_key: str
    model_name: str

    @property
    def llm_enabled(self) -> bool:
        return not self.offline and bool(self.api_key)


def load_settings(dotenv: bool = True) -> Settings:
    """
    Read settings from the environment (and `.env`, unless `dotenv=False`).

    Variables
    ---------
    WORDLE_DATA_DIR      word-list root (default: data/wordlists)
    WORDLE_STATS_DIR     where the statistics blob is saved (default: .wordle)
    WORDLE_MAX_ATTEMPTS  guesses per game (default: 6)
    OFFLINE_MODE         "true" disables every LLM call (default: true)
    OPENAI_API_KEY       key for the optional LLM helpers
    MODEL_NAME           chat model for the helpers (default: gpt-4o-mini)
    """
    if dotenv:
        load_dotenv(override=False)
    max_attempts = _int(os.getenv("WORDLE_MAX_ATTEMPTS"), 6)
    if max_attempts < 1:
        log.warning("WORDLE_MAX_ATTEMPTS must be >= 1; using 6")
        max_attempts = 6
    return Settings(
        data_dir=Path(os.getenv("WORDLE_DATA_DIR", "data/wordlists")),
        stats_dir=Path(os.getenv("WORDLE_STATS_DIR", ".wordle")),
        max_attempts=max_attempts,
        offline=os.getenv("OFFLINE_MODE", "true").lower() == "true",
        api_key=os.getenv("OPENAI_API_KEY", ""),
        model_name=os.getenv("MODEL_NAME", "gpt-4o-mini"),
    )
