from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from openai import OpenAI, OpenAIError

from src.config import Settings, load_settings
from src.core.evaluator import evaluate, feedback_emoji

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoachSuggestion:
    """Container for a coach suggestion."""
    word: str                   # recommended next guess (lowercase a–z)
    text: str                   # one-sentence rationale
    used_llm: bool              # whether rationale came from the LLM
    candidates_considered: int  # candidate word count after filtering


def _filter_candidates(history: Sequence[str], target: str, candidates: Iterable[str]) -> List[str]:
    """
    Keep the candidates that could still be the target.

    A candidate survives when every past guess would have produced exactly
    the feedback the player actually saw. Length is checked first since
    `evaluate` rejects mismatched words.
    """
    seen = [(g, evaluate(g, target)) for g in history]
    filtered: List[str] = []
    for w in candidates:
        if len(w) != len(target):
            continue
        if all(evaluate(g, w) == fb for g, fb in seen):
            filtered.append(w)
    return sorted(filtered)


def _score_letters(remaining: List[str]) -> Counter:
    """
    Count in how many remaining words each letter appears.

    Note
    ----
    We count *presence* per word (not raw multiplicity) to prefer informative letters.
    """
    scores: Counter = Counter()
    for w in remaining:
        scores.update(set(w))
    return scores


def _best_word(remaining: List[str], scores: Counter, history: Sequence[str]) -> Optional[str]:
    """Pick the unguessed word whose distinct letters cover the most candidates; ties go alphabetically."""
    options = [w for w in remaining if w not in history]
    if not options:
        return None
    return max(options, key=lambda w: (sum(scores[ch] for ch in set(w)), [-ord(c) for c in w]))


def _local_reason(history: Sequence[str], remaining: List[str], word: str) -> str:
    """A deterministic, non-LLM explanation sentence."""
    n = len(remaining)
    if not history:
        return f"Open with **{word.upper()}**: its letters are the most common among the {n} words in play."
    return (
        f"Try **{word.upper()}**: it fits all {len(history)} feedback "
        f"{'row' if len(history) == 1 else 'rows'} so far and is one of {n} words still possible."
    )


def _llm_reason(rows: List[str], word: str, remaining_count: int, settings: Settings) -> str | None:
    """
    Ask the LLM to phrase a short human-friendly rationale for the chosen guess.

    We do NOT disclose the target word; we only pass the feedback squares and counts.
    """
    if not settings.llm_enabled:
        return None

    client = OpenAI(api_key=settings.api_key)
    board = "\n".join(rows) or "(no guesses yet)"
    user = (
        "You are coaching a Wordle player. "
        f"Their feedback so far (green=correct, yellow=present, black=absent):\n{board}\n"
        f"About {remaining_count} words are still possible. "
        f"Recommend guessing '{word.upper()}' and give ONE short sentence explaining why."
    )
    try:
        r = client.chat.completions.create(
            model=settings.model_name,
            messages=[{"role": "user", "content": user}],
            temperature=0.7,
            max_tokens=60,
        )
    except OpenAIError as exc:
        logger.warning("Coach request failed, using local rationale: %s", exc)
        return None
    text = (r.choices[0].message.content or "").strip()
    return text or None


def suggest_next_guess(
    history: Sequence[str],
    target: str,
    candidates: Iterable[str],
    settings: Optional[Settings] = None,
) -> Optional[CoachSuggestion]:
    """
    Compute the next-guess suggestion from the remaining candidates.

    Steps
    -----
    1) Filter the dictionary down to words consistent with all feedback so far.
    2) Score letters by cross-word presence; pick the best-covering unguessed word.
    3) Produce a one-sentence rationale using the LLM; fallback to a local sentence.

    Returns None if no unguessed word is left to suggest.
    """
    settings = settings or load_settings()
    remaining = _filter_candidates(history, target, candidates)
    word = _best_word(remaining, _score_letters(remaining), history)
    if word is None:
        return None

    rows = [feedback_emoji(evaluate(g, target)) for g in history]
    llm_text = _llm_reason(rows, word, len(remaining), settings)
    if llm_text:
        return CoachSuggestion(word=word, text=llm_text, used_llm=True, candidates_considered=len(remaining))

    local_text = _local_reason(history, remaining, word)
    return CoachSuggestion(word=word, text=local_text, used_llm=False, candidates_considered=len(remaining))
