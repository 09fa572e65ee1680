"""
Score Statistics

Derives the score card from stored history alone: no counters are kept
anywhere else, so the numbers can always be recomputed.
"""

import math
from typing import Dict, Iterable, List

from ..config.game_settings import MAX_ATTEMPTS
from ..models.game import ScoreRecord, ScoreSummary


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def win_percentage(history: List[ScoreRecord]) -> int:
    """Rounded share of won games, 0 for an empty history."""
    if not history:
        return 0
    wins = sum(1 for record in history if record.won)
    return _round_half_up(wins / len(history) * 100)


def current_streak(history: List[ScoreRecord]) -> int:
    """Consecutive wins counted back from the most recent game."""
    streak = 0
    for record in reversed(sorted(history, key=lambda r: r.timestamp)):
        if not record.won:
            break
        streak += 1
    return streak


def max_streak(history: List[ScoreRecord]) -> int:
    """Longest run of consecutive wins anywhere in the history."""
    best = run = 0
    for record in sorted(history, key=lambda r: r.timestamp):
        run = run + 1 if record.won else 0
        best = max(best, run)
    return best


def guess_distribution(history: Iterable[ScoreRecord]) -> Dict[int, int]:
    """Games per guess count 1..MAX_ATTEMPTS. Losses count under MAX_ATTEMPTS."""
    distribution = {guess_count: 0 for guess_count in range(1, MAX_ATTEMPTS + 1)}
    for record in history:
        if record.guess_count in distribution:
            distribution[record.guess_count] += 1
    return distribution


def compute_stats(history: Iterable[ScoreRecord]) -> ScoreSummary:
    """
    Build the full score card.

    The tallest distribution bar is reported as highest_guess_count; on a tie
    the larger guess count wins. bar_widths scales each bar against it.
    """
    records = list(history)
    distribution = guess_distribution(records)

    tallest = max(distribution.values())
    highest = None
    if tallest:
        highest = max(guess_count for guess_count, count in distribution.items() if count == tallest)

    bar_widths = {
        guess_count: _round_half_up(count / tallest * 100) if tallest else 0
        for guess_count, count in distribution.items()
    }

    return ScoreSummary(
        played=len(records),
        win_percentage=win_percentage(records),
        current_streak=current_streak(records),
        max_streak=max_streak(records),
        distribution=distribution,
        highest_guess_count=highest,
        bar_widths=bar_widths,
    )
