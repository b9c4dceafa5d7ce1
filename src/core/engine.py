from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Collection, List, Optional

from .errors import GuessNotInDictionary, InvalidGuessLength
from .evaluator import Feedback, KeyboardStatus, aggregate_keyboard_status, evaluate, feedback_emoji
from .state import DEFAULT_MAX_ATTEMPTS, Difficulty, GameState, is_word
from .wordlist import pick_random_target

logger = logging.getLogger(__name__)


def new_game(
    difficulty: Difficulty,
    word_list: Collection[str],
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> GameState:
    """
    Start a new game with a target drawn from `word_list`.

    Parameters
    ----------
    difficulty : Difficulty
        Tier the word list belongs to ("easy" | "medium" | "hard").
    word_list : Collection[str]
        Candidates for one word length, e.g. from `load_word_list`.
    rng : random.Random | None
        Injected randomness source; pass a seeded instance in tests.
    max_attempts : int, optional
        Number of guesses allowed before the game is lost (default: 6).

    Returns
    -------
    GameState
        A fresh, immutable game state in "playing" status.
    """
    target = pick_random_target(word_list, rng)
    logger.info("New %s game with a %d-letter word", difficulty, len(target))
    return GameState(difficulty=difficulty, target=target, max_attempts=max_attempts)


def type_letter(state: GameState, ch: str) -> GameState:
    """
    Append a letter to the current (unsubmitted) row.

    Ignored when the game is over, the row is already full, or `ch` is not a
    single letter a–z.
    """
    if state.is_over:
        return state
    if not isinstance(ch, str) or len(ch) != 1 or not is_word(ch.lower()):
        return state
    if len(state.current) >= state.word_length:
        return state
    return replace(state, current=state.current + ch.lower())


def backspace(state: GameState) -> GameState:
    """Remove the last letter of the current row (no-op when empty or over)."""
    if state.is_over or not state.current:
        return state
    return replace(state, current=state.current[:-1])


def submit_guess(state: GameState, dictionary: Collection[str], guess: Optional[str] = None) -> GameState:
    """
    Submit `guess` (or the current row when omitted) and return a new GameState.

    Behavior
    --------
    - Ignores the submission if the game is already over.
    - Accepted guesses are appended, the current row is cleared, and the
      status becomes "won" on an exact match or "lost" once every attempt
      has been used.

    Raises
    ------
    InvalidGuessLength
        The guess does not have the target's length.
    GuessNotInDictionary
        The guess is not in `dictionary`.

    A rejected submission consumes no attempt; the caller keeps the old state.
    """
    if state.is_over:
        return state

    attempt = (state.current if guess is None else guess).strip().lower()
    if len(attempt) != state.word_length:
        raise InvalidGuessLength(attempt, state.word_length)
    if attempt not in dictionary:
        raise GuessNotInDictionary(attempt)

    guesses = state.guesses + (attempt,)
    if attempt == state.target:
        status = "won"
    elif len(guesses) >= state.max_attempts:
        status = "lost"
    else:
        status = "playing"

    if status != "playing":
        logger.info("Game %s after %d/%d guesses", status, len(guesses), state.max_attempts)
    return replace(state, guesses=guesses, current="", status=status)


def press_key(state: GameState, key: str, dictionary: Collection[str]) -> GameState:
    """
    Apply one on-screen keyboard press: "enter" submits the current row,
    "backspace" deletes a letter, anything else is typed.

    Raises the same errors as `submit_guess` when "enter" is rejected.
    """
    key = (key or "").lower()
    if key == "enter":
        return submit_guess(state, dictionary)
    if key == "backspace":
        return backspace(state)
    return type_letter(state, key)


def feedback_rows(state: GameState) -> List[List[Feedback]]:
    """Feedback for every submitted guess, in order."""
    return [evaluate(g, state.target) for g in state.guesses]


def keyboard_status(state: GameState) -> KeyboardStatus:
    """Best feedback seen so far for each guessed letter."""
    return aggregate_keyboard_status(state.guesses, state.target)


def share_text(state: GameState) -> str:
    """
    Spoiler-free summary of a finished game, e.g.

        Wordle (medium) 3/6
        ⬛🟨⬛⬛⬛
        🟩⬛🟩🟨⬛
        🟩🟩🟩🟩🟩
    """
    score = str(state.attempts_used) if state.status == "won" else "X"
    lines = [f"Wordle ({state.difficulty}) {score}/{state.max_attempts}"]
    lines.extend(feedback_emoji(row) for row in feedback_rows(state))
    return "\n".join(lines)
