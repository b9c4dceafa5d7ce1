from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from openai import OpenAI, OpenAIError

from src.config import Settings, load_settings
from src.core.evaluator import evaluate, feedback_emoji

logger = logging.getLogger(__name__)


def _local_fallback_review(
    history: Sequence[str],
    target: str,
    won: bool,
    difficulty: str,
) -> str:
    """
    Deterministic local review when LLM is unavailable or fails.
    Produces 3 short bullet points.
    """
    rows = [evaluate(g, target) for g in history]
    greens = [row.count("correct") for row in rows]
    first_green = next((i for i, n in enumerate(greens, start=1) if n), None)
    wasted = sum(1 for row in rows if all(fb == "absent" for fb in row))

    verdict = (
        f"You won in {len(history)} {'guess' if len(history) == 1 else 'guesses'}."
        if won else f"You lost; the word was '{target}'."
    )
    went_well = (
        f"Your first green letter came on guess {first_green}."
        if first_green else "No letter landed in the right spot this time."
    )
    return (
        f"**Outcome:** {verdict}\n\n"
        f"- **What went well:** {went_well}\n"
        f"- **What to improve:** {wasted} {'guess' if wasted == 1 else 'guesses'} found no letters at all; "
        "open with common vowels and consonants.\n"
        f"- **Next time:** On *{difficulty}* difficulty, reuse yellow letters in new positions early."
    )


def _format_history_compact(history: Sequence[str], target: str) -> str:
    """
    Compress history into a concise, LLM-friendly string.
    Example item: "1) crane 🟩⬛🟨⬛⬛"
    """
    lines: List[str] = []
    for i, guess in enumerate(history, start=1):
        lines.append(f"{i}) {guess} {feedback_emoji(evaluate(guess, target))}")
    return "\n".join(lines)


def generate_review(
    history: Sequence[str],
    target: str,
    won: bool,
    difficulty: str = "medium",
    temperature: float = 0.4,
    settings: Optional[Settings] = None,
) -> str:
    """
    Generate a short post-game review.

    Behavior
    --------
    - If OFFLINE_MODE=true or key missing -> returns a local, deterministic review.
    - Otherwise, asks an LLM for ~3 short paragraphs:
        1) Key turning points (which guesses narrowed things down)
        2) Missed opportunities / better guesses to try earlier
        3) Concrete next-game tips
    - The target is named in the prompt; the game is over and already revealed.
    """
    settings = settings or load_settings()
    if not settings.llm_enabled:
        return _local_fallback_review(history, target, won, difficulty)

    client = OpenAI(api_key=settings.api_key)

    outcome = "won" if won else "lost"
    sys = "You are a concise strategy coach for Wordle. Provide clear, actionable feedback."
    user = (
        f"Game outcome: {outcome}\n"
        f"Difficulty: {difficulty}\n"
        f"Target word: {target}\n"
        f"Guesses (green=correct, yellow=present, black=absent):\n"
        f"{_format_history_compact(history, target)}\n\n"
        "Write a post-game review in ~3 short paragraphs:\n"
        "1) Key turning points that helped or hurt progress (why)\n"
        "2) Missed opportunities or better guesses to try earlier\n"
        "3) Concrete next-game tips\n"
        "Keep it under 140 words total. Avoid bullet lists; use compact prose."
    )

    try:
        resp = client.chat.completions.create(
            model=settings.model_name,
            messages=[{"role": "system", "content": sys}, {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=300,
        )
    except OpenAIError as exc:
        logger.warning("Review request failed, using local review: %s", exc)
        return _local_fallback_review(history, target, won, difficulty)

    text = (resp.choices[0].message.content or "").strip()
    if not text:
        return _local_fallback_review(history, target, won, difficulty)
    # Soft cap for verbosity
    if len(text.split()) > 160:
        text = " ".join(text.split()[:160])
    return text
