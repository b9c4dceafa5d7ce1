from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Tuple


Difficulty = Literal["easy", "medium", "hard"]
GameStatus = Literal["playing", "won", "lost"]

DIFFICULTIES: Tuple[str, ...] = ("easy", "medium", "hard")
DEFAULT_MAX_ATTEMPTS = 6

# Strict validator: only lowercase a–z
_LOWER_AZ = re.compile(r"[a-z]+")


def is_word(text: str) -> bool:
    """True for a non-empty string of lowercase a–z letters only."""
    return isinstance(text, str) and _LOWER_AZ.fullmatch(text) is not None


@dataclass(frozen=True)
class GameState:
    """
    Immutable container for one Wordle session.

    Notes
    -----
    - The engine never mutates a state; every key press or submission
      returns a new GameState, which is what the Streamlit session stores.
    - Rule transitions (guess validation, win/loss) live in `core.engine`;
      this file only defines the data structure and basic
      normalization/validation.
    """

    # Core fields
    difficulty: Difficulty
    target: str
    guesses: Tuple[str, ...] = ()
    current: str = ""
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    status: GameStatus = "playing"

    def __post_init__(self) -> None:
        """
        Normalize and validate fields.

        Normalization
        -------------
        - `target`, `current` and every guess are lowercased.
        - `guesses` is stored as a tuple.

        Validation
        ----------
        - `difficulty` must be one of {"easy", "medium", "hard"}.
        - `target` must be non-empty and use letters a–z only.
        - `current` must use letters a–z only and fit in one row.
        - `max_attempts` must be >= 1 and not smaller than the guesses made.
        - `status` must be one of {"playing", "won", "lost"}.
        """
        # Because dataclass is frozen, use object.__setattr__ for normalization.
        target = (self.target or "").strip().lower()
        if not is_word(target):
            raise ValueError("`target` must be non-empty and contain letters only (a–z).")
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "guesses", tuple(g.lower() for g in self.guesses))
        object.__setattr__(self, "current", (self.current or "").lower())
        if self.current and not is_word(self.current):
            raise ValueError("`current` may contain letters a–z only.")
        if len(self.current) > len(target):
            raise ValueError("`current` is longer than the target.")

        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"`difficulty` must be one of {DIFFICULTIES}.")
        if self.max_attempts < 1:
            raise ValueError("`max_attempts` must be >= 1.")
        if len(self.guesses) > self.max_attempts:
            raise ValueError("more guesses recorded than `max_attempts` allows.")
        if self.status not in ("playing", "won", "lost"):
            raise ValueError("`status` must be one of {'playing', 'won', 'lost'}.")

    @property
    def word_length(self) -> int:
        return len(self.target)

    @property
    def attempts_used(self) -> int:
        return len(self.guesses)

    @property
    def is_over(self) -> bool:
        return self.status != "playing"
