from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Literal, Mapping, Optional

from .errors import InvalidGuessLength

Feedback = Literal["correct", "present", "absent"]
KeyboardStatus = Dict[str, Feedback]

# Higher rank wins when folding feedback into the keyboard status.
_RANK = {"absent": 1, "present": 2, "correct": 3}

_EMOJI = {"correct": "🟩", "present": "🟨", "absent": "⬛"}


def evaluate(guess: str, target: str) -> List[Feedback]:
    """
    Return per-letter feedback for `guess` relative to `target`.

    Algorithm
    ---------
    1) Count the letters of the target.
    2) Exact-position matches are marked "correct" and use up one count.
    3) Remaining positions are "present" while that letter still has a
       positive count (using it up), otherwise "absent".

    Exact matches are consumed first, so a letter is never reported more
    often than it occurs in the target: guessing "eerie" against "speed"
    marks two E's as present and the third as absent.

    Raises
    ------
    InvalidGuessLength
        If the two words differ in length.
    """
    if len(guess) != len(target):
        raise InvalidGuessLength(guess, len(target))

    remaining = Counter(target)
    result: List[Feedback] = ["absent"] * len(target)

    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            result[i] = "correct"
            remaining[g] -= 1

    for i, g in enumerate(guess):
        if result[i] == "correct":
            continue
        if remaining[g] > 0:
            result[i] = "present"
            remaining[g] -= 1

    return result


def aggregate_keyboard_status(
    guesses: Iterable[str],
    target: str,
    initial: Optional[Mapping[str, Feedback]] = None,
) -> KeyboardStatus:
    """
    Fold `evaluate` over `guesses` (in submission order) into a keyboard map.

    Each letter keeps the best feedback it has ever received
    (correct > present > absent); letters never guessed are not in the map.
    `initial` lets a caller continue from a previously aggregated prefix.
    """
    status: KeyboardStatus = dict(initial or {})
    for guess in guesses:
        for letter, fb in zip(guess, evaluate(guess, target)):
            if _RANK[fb] > _RANK.get(status.get(letter, ""), 0):
                status[letter] = fb
    return status


def feedback_emoji(feedback: Iterable[Feedback]) -> str:
    """Render one feedback row as squares, e.g. '🟩⬛🟨⬛⬛'."""
    return "".join(_EMOJI[fb] for fb in feedback)
