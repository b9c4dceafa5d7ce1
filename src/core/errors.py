from __future__ import annotations


class WordleError(Exception):
    """Base class for game errors."""


class InvalidGuessLength(WordleError, ValueError):
    """Guess length does not match the target length."""

    def __init__(self, guess: str, expected: int) -> None:
        super().__init__(f"Word must be {expected} letters long (got {len(guess)}).")
        self.guess = guess
        self.expected = expected


class GuessNotInDictionary(WordleError, ValueError):
    """Well-formed guess that is not in the active word list."""

    def __init__(self, guess: str) -> None:
        super().__init__(f"'{guess}' is not in the word list.")
        self.guess = guess


class OutOfRangeGuessCount(WordleError, AssertionError):
    """A won game reported a guess count outside 1..max_attempts."""

    def __init__(self, guesses_used: int, max_attempts: int) -> None:
        super().__init__(f"guesses_used must be in [1, {max_attempts}], got {guesses_used}.")
        self.guesses_used = guesses_used
        self.max_attempts = max_attempts


class WordListUnavailable(WordleError, LookupError):
    """No usable word list exists for a difficulty/length pair."""
