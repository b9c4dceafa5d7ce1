from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Collection, FrozenSet, List, Optional

from .errors import WordListUnavailable
from .state import DIFFICULTIES, is_word

logger = logging.getLogger(__name__)

# Project-local wordlists live here, one file per length:
#   data/wordlists/<difficulty>/<length>.txt
_DATA_DIR = Path("data/wordlists")


def _resolve(data_dir: Optional[Path]) -> Path:
    return Path(data_dir) if data_dir is not None else _DATA_DIR


def _read_lines(path: Path) -> List[str]:
    """
    Read a text file (UTF-8) and return non-empty, stripped, lowercase lines.

    Notes
    -----
    - Returns an empty list if the file is missing; callers decide whether
      that is an error.
    """
    if not path.exists() or not path.is_file():
        return []
    raw = path.read_text(encoding="utf-8", errors="ignore").splitlines()
    return [ln.strip().lower() for ln in raw if ln.strip()]


def allowed_lengths(difficulty: str, data_dir: Optional[Path] = None) -> List[int]:
    """
    Word lengths available for `difficulty`, discovered from the data directory.

    The shipped data gives easy 3–5, medium 5–7 and hard 7–9 letters.
    """
    if difficulty not in DIFFICULTIES:
        raise WordListUnavailable(f"Unknown difficulty {difficulty!r}.")
    tier_dir = _resolve(data_dir) / difficulty
    if not tier_dir.is_dir():
        return []
    return sorted(int(p.stem) for p in tier_dir.glob("*.txt") if p.stem.isdigit())


def load_word_list(difficulty: str, length: int, data_dir: Optional[Path] = None) -> FrozenSet[str]:
    """
    Load the words of `length` letters for `difficulty`.

    The same set serves as target candidates and as the guess dictionary.
    Lines that use characters outside a–z or have the wrong length are skipped.

    Raises
    ------
    WordListUnavailable
        Unknown difficulty, or no usable words for that length.
    """
    if difficulty not in DIFFICULTIES:
        raise WordListUnavailable(f"Unknown difficulty {difficulty!r}.")
    path = _resolve(data_dir) / difficulty / f"{length}.txt"
    lines = _read_lines(path)
    words = frozenset(w for w in lines if is_word(w) and len(w) == length)
    skipped = len(lines) - len(words)
    if skipped:
        logger.debug("Skipped %d unusable or duplicate lines in %s", skipped, path)
    if not words:
        raise WordListUnavailable(f"No {length}-letter words for {difficulty!r} in {path}.")
    return words


def pick_word_length(
    difficulty: str,
    rng: Optional[random.Random] = None,
    data_dir: Optional[Path] = None,
) -> int:
    """Pick one of the difficulty's word lengths uniformly at random."""
    lengths = allowed_lengths(difficulty, data_dir)
    if not lengths:
        raise WordListUnavailable(f"No word lists configured for {difficulty!r}.")
    return (rng or random).choice(lengths)


def pick_random_target(candidates: Collection[str], rng: Optional[random.Random] = None) -> str:
    """
    Pick the target word uniformly from `candidates`.

    Parameters
    ----------
    candidates : Collection[str]
        Target candidates, usually the set from `load_word_list`.
    rng : random.Random | None
        Injected randomness source. Pass `random.Random(seed)` (or any object
        with a `choice` method) for reproducible picks during tests or demos.
        Candidates are sorted first so a seeded source is deterministic.
    """
    if not candidates:
        raise WordListUnavailable("Cannot pick a target from an empty word list.")
    return (rng or random).choice(sorted(candidates))
