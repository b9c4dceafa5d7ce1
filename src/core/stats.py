from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .errors import OutOfRangeGuessCount
from .state import DIFFICULTIES, DEFAULT_MAX_ATTEMPTS, Difficulty

logger = logging.getLogger(__name__)

# Bucket for games saved before per-difficulty stats existed.
UNATTRIBUTED = "unattributed"


@dataclass(frozen=True)
class DifficultyTally:
    """Wins and games played at one difficulty."""
    wins: int = 0
    total: int = 0


def _zero_distribution(max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Dict[int, int]:
    return {n: 0 for n in range(1, max_attempts + 1)}


def _zero_difficulty_stats() -> Dict[str, DifficultyTally]:
    return {d: DifficultyTally() for d in DIFFICULTIES}


@dataclass(frozen=True)
class StatisticsRecord:
    """
    Persisted aggregate of every completed game.

    Invariants
    ----------
    - games_won <= games_played
    - sum(guess_distribution.values()) == games_won
    - sum of difficulty_stats totals == games_played
    - current_streak <= max_streak

    Instances are never mutated; `record_game_end` returns a new record.
    """

    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0
    guess_distribution: Dict[int, int] = field(default_factory=_zero_distribution)
    difficulty_stats: Dict[str, DifficultyTally] = field(default_factory=_zero_difficulty_stats)

    def check_invariants(self) -> None:
        """Raise ValueError if the aggregate is internally inconsistent."""
        counts = (self.games_played, self.games_won, self.current_streak, self.max_streak)
        if any(c < 0 for c in counts):
            raise ValueError("counters must be non-negative")
        if any(v < 0 for v in self.guess_distribution.values()):
            raise ValueError("guess distribution counts must be non-negative")
        if self.games_won > self.games_played:
            raise ValueError("games_won exceeds games_played")
        if sum(self.guess_distribution.values()) != self.games_won:
            raise ValueError("guess distribution does not add up to games_won")
        if sum(t.total for t in self.difficulty_stats.values()) != self.games_played:
            raise ValueError("difficulty totals do not add up to games_played")
        if any(t.wins > t.total or t.wins < 0 for t in self.difficulty_stats.values()):
            raise ValueError("difficulty wins exceed totals")
        if self.current_streak > self.max_streak:
            raise ValueError("current_streak exceeds max_streak")


def default_record(max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> StatisticsRecord:
    """All-zero record used on first load and when persisted data is unusable."""
    return StatisticsRecord(guess_distribution=_zero_distribution(max_attempts))


def record_game_end(
    record: StatisticsRecord,
    difficulty: Difficulty,
    won: bool,
    guesses_used: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> StatisticsRecord:
    """
    Apply one finished game to `record` and return the updated record.

    Rules
    -----
    - Every game: games_played += 1 and the difficulty's total += 1.
    - Win : games_won, current_streak and the difficulty's wins go up by one,
            guess_distribution[guesses_used] += 1, max_streak follows the streak.
    - Loss: current_streak resets to 0; the distribution is untouched.

    Raises
    ------
    OutOfRangeGuessCount
        On a win with `guesses_used` outside [1, max_attempts].
    ValueError
        If `difficulty` is not one of the known tiers.
    """
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty {difficulty!r}.")
    if won and not 1 <= guesses_used <= max_attempts:
        raise OutOfRangeGuessCount(guesses_used, max_attempts)

    tallies = dict(record.difficulty_stats)
    tally = tallies.get(difficulty, DifficultyTally())

    if not won:
        tallies[difficulty] = replace(tally, total=tally.total + 1)
        return replace(
            record,
            games_played=record.games_played + 1,
            current_streak=0,
            difficulty_stats=tallies,
        )

    tallies[difficulty] = DifficultyTally(wins=tally.wins + 1, total=tally.total + 1)
    distribution = dict(record.guess_distribution)
    distribution[guesses_used] = distribution.get(guesses_used, 0) + 1
    streak = record.current_streak + 1
    return replace(
        record,
        games_played=record.games_played + 1,
        games_won=record.games_won + 1,
        current_streak=streak,
        max_streak=max(record.max_streak, streak),
        guess_distribution=distribution,
        difficulty_stats=tallies,
    )


def win_percentage(record: StatisticsRecord) -> int:
    """Rounded win rate in percent (0 when no games have been played)."""
    if not record.games_played:
        return 0
    return round(record.games_won / record.games_played * 100)


# -----------------------------
# Persisted blob (JSON object)
# -----------------------------

def serialize(record: StatisticsRecord) -> bytes:
    """Encode `record` as a UTF-8 JSON object using the browser game's field names."""
    payload = {
        "gamesPlayed": record.games_played,
        "gamesWon": record.games_won,
        "currentStreak": record.current_streak,
        "maxStreak": record.max_streak,
        "guessDistribution": {str(k): v for k, v in sorted(record.guess_distribution.items())},
        "difficultyStats": {
            d: {"wins": t.wins, "total": t.total} for d, t in record.difficulty_stats.items()
        },
    }
    return json.dumps(payload, sort_keys=True).encode("utf-8")


def _as_count(value: Any) -> int:
    # bool is an int subclass; reject it along with floats and strings.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer count, got {value!r}")
    return value


def _parse(obj: Any, max_attempts: int) -> StatisticsRecord:
    if not isinstance(obj, dict):
        raise TypeError("statistics blob must be a JSON object")

    distribution = _zero_distribution(max_attempts)
    for key, value in (obj.get("guessDistribution") or {}).items():
        n = int(key)
        if not 1 <= n <= max_attempts:
            raise ValueError(f"guess distribution bucket {key!r} outside 1..{max_attempts}")
        distribution[n] = _as_count(value)

    tallies = _zero_difficulty_stats()
    for name, tally in (obj.get("difficultyStats") or {}).items():
        if name not in DIFFICULTIES and name != UNATTRIBUTED:
            raise ValueError(f"unknown difficulty {name!r}")
        if not isinstance(tally, dict):
            raise TypeError(f"difficulty entry {name!r} must be an object")
        tallies[name] = DifficultyTally(
            wins=_as_count(tally.get("wins", 0)),
            total=_as_count(tally.get("total", 0)),
        )

    games_played = _as_count(obj.get("gamesPlayed", 0))
    games_won = _as_count(obj.get("gamesWon", 0))

    # Older saves have no difficultyStats, or only count games played after
    # it was introduced. Keep the remainder under its own bucket.
    missing_total = games_played - sum(t.total for t in tallies.values())
    missing_wins = games_won - sum(t.wins for t in tallies.values())
    if missing_total > 0 or missing_wins > 0:
        earlier = tallies.get(UNATTRIBUTED, DifficultyTally())
        tallies[UNATTRIBUTED] = DifficultyTally(
            wins=earlier.wins + missing_wins,
            total=earlier.total + missing_total,
        )

    record = StatisticsRecord(
        games_played=games_played,
        games_won=games_won,
        current_streak=_as_count(obj.get("currentStreak", 0)),
        max_streak=_as_count(obj.get("maxStreak", 0)),
        guess_distribution=distribution,
        difficulty_stats=tallies,
    )
    record.check_invariants()
    return record


def deserialize(data: Optional[bytes], max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> StatisticsRecord:
    """
    Decode a persisted blob back into a StatisticsRecord.

    Missing data yields the default record. Malformed data (bad UTF-8, bad
    JSON, JSON nested too deeply, wrong types, unknown buckets, or counts that
    break the record invariants) is treated the same way and logged, never
    raised. Games a legacy save never attributed to a difficulty are kept
    under the "unattributed" bucket.
    """
    if not data:
        return default_record(max_attempts)
    try:
        return _parse(json.loads(data.decode("utf-8")), max_attempts)
    except (UnicodeDecodeError, ValueError, TypeError, AttributeError, RecursionError) as exc:
        logger.warning("Discarding corrupted statistics blob: %s", exc)
        return default_record(max_attempts)
