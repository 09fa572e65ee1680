from wordle_engine.models.game import ScoreRecord
from wordle_engine.services.stats_service import (
    compute_stats, current_streak, guess_distribution, max_streak, win_percentage,
)


def history(*results):
    """results: (won, guess_count) tuples in play order."""
    return [
        ScoreRecord(won=won, timestamp=1000 + index, guess_count=guess_count)
        for index, (won, guess_count) in enumerate(results)
    ]


def test_empty_history():
    summary = compute_stats([])
    assert summary.played == 0
    assert summary.win_percentage == 0
    assert summary.current_streak == 0
    assert summary.max_streak == 0
    assert summary.distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0}
    assert summary.highest_guess_count is None
    assert set(summary.bar_widths.values()) == {0}


def test_win_percentage_two_of_three():
    assert win_percentage(history((True, 3), (False, 6), (True, 4))) == 67


def test_win_percentage_rounds_half_up():
    records = history((True, 2), *[(False, 6)] * 7)
    assert win_percentage(records) == 13


def test_current_streak_counts_back_from_latest():
    records = history((True, 2), (True, 3), (False, 6), (True, 4), (True, 4), (True, 5))
    assert current_streak(records) == 3
    assert max_streak(records) == 3


def test_streaks_when_latest_game_lost():
    records = history((True, 2), (True, 3), (True, 1), (True, 2), (False, 6))
    assert current_streak(records) == 0
    assert max_streak(records) == 4


def test_streaks_follow_timestamps_not_list_order():
    records = history((True, 2), (False, 6), (True, 3))
    shuffled = [records[2], records[0], records[1]]
    assert current_streak(shuffled) == 1
    assert max_streak(shuffled) == 1


def test_distribution_counts_losses_under_six():
    records = history((True, 1), (True, 3), (True, 3), (False, 6))
    assert guess_distribution(records) == {1: 1, 2: 0, 3: 2, 4: 0, 5: 0, 6: 1}


def test_highest_bar_and_widths():
    summary = compute_stats(history((True, 3), (True, 4), (True, 4), (True, 2)))
    assert summary.highest_guess_count == 4
    assert summary.bar_widths == {1: 0, 2: 50, 3: 50, 4: 100, 5: 0, 6: 0}


def test_highest_bar_tie_goes_to_larger_guess_count():
    summary = compute_stats(history((True, 3), (True, 3), (True, 5), (True, 5)))
    assert summary.highest_guess_count == 5


def test_summary_is_recomputable():
    records = history((True, 3), (False, 6), (True, 4))
    assert compute_stats(records) == compute_stats(list(records))
    summary = compute_stats(records)
    assert summary.played == 3
    assert summary.win_percentage == 67
    assert summary.current_streak == 1
    assert summary.max_streak == 1
