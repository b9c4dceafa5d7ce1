from __future__ import annotations

import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from src.config import Settings, load_settings

logger = logging.getLogger(__name__)


# Reject only if the hint literally contains the target word (case-insensitive).
def _contains_answer(text: str, target: str) -> bool:
    return target.lower() in (text or "").lower()

def _local_fallback_hint(word: str) -> str:
    """Always-available local hint (simple and safe)."""
    return f"The word has {len(word)} letters and starts with '{word[0].upper()}'."

def llm_hint(
    word: str,
    model: Optional[str] = None,
    temperature: float = 0.8,
    settings: Optional[Settings] = None,
) -> str:
    """
    Return ONE hint for `word` using an LLM; fallback locally on failure.

    Very permissive rule:
    - Accept any text as long as it does NOT contain the target word itself.
    - On an API error or rule violation, return a deterministic local hint.
    """
    settings = settings or load_settings()
    if not settings.llm_enabled:
        return _local_fallback_hint(word)

    client = OpenAI(api_key=settings.api_key)
    mdl = model or settings.model_name

    system = "You are a helpful Wordle clue-giver."
    user = (
        f"The secret word is '{word}' ({len(word)} letters). "
        "Give exactly ONE short, natural-sounding hint about its meaning. "
        "Do NOT include the word itself or spell out its letters. Reply with the hint only."
    )

    try:
        resp = client.chat.completions.create(
            model=mdl,
            messages=[{"role": "system", "content": system},
                      {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=80,
        )
    except OpenAIError as exc:
        logger.warning("Hint request failed, using local hint: %s", exc)
        return _local_fallback_hint(word)

    text = (resp.choices[0].message.content or "").strip()
    if not text or _contains_answer(text, word):
        return _local_fallback_hint(word)
    # Trim extreme verbosity (soft cap ~25 words)
    words = text.split()
    if len(words) > 25:
        text = " ".join(words[:25])
    return text

__all__ = ["llm_hint"]
