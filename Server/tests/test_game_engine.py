import pytest

from wordle_engine.models.game import GamePhase, GameState, LetterVerdict, ScoreRecord
from wordle_engine.services.game_engine import GameEngine, record_result

from conftest import StubDictionary, type_word


def test_keys_ignored_before_a_game_starts(timers):
    dictionary = StubDictionary()
    engine = GameEngine(dictionary.is_valid_word, dictionary.pick_target_word, timer_factory=timers)
    assert engine.state.phase == GamePhase.NOT_STARTED
    assert engine.submit_key('a') is False
    assert engine.state.guesses[0] == []


def test_start_game_picks_and_normalizes_word(timers):
    engine = GameEngine(lambda w: True, lambda: 'CRANE', timer_factory=timers)
    engine.start_game()
    assert engine.state.target_word == 'crane'
    assert engine.state.phase == GamePhase.IN_PROGRESS
    assert engine.state.guesses == {i: [] for i in range(6)}


@pytest.mark.parametrize('word', ['cran', 'cranes', 'cr4ne', ''])
def test_start_game_rejects_malformed_word(engine, word):
    with pytest.raises(ValueError):
        engine.start_game(word)


def test_letters_append_lowercased(engine):
    assert engine.submit_key('C') is True
    assert engine.submit_key('r') is True
    assert engine.state.current_buffer == ['c', 'r']


def test_letter_ignored_when_buffer_full(engine):
    type_word(engine, 'slate', enter=False)
    assert engine.submit_key('x') is False
    assert engine.state.current_buffer == list('slate')


@pytest.mark.parametrize('key', ['1', 'Shift', ' ', 'é', 'ab', None])
def test_non_letter_keys_ignored(engine, key):
    assert engine.submit_key(key) is False
    assert engine.state.current_buffer == []


def test_backspace_on_empty_buffer_is_noop(engine):
    assert engine.submit_key('Backspace') is False
    assert engine.state.current_buffer == []


def test_backspace_removes_last_letter(engine):
    type_word(engine, 'sla', enter=False)
    assert engine.submit_key('Backspace') is True
    assert engine.state.current_buffer == ['s', 'l']


def test_enter_with_short_buffer_is_noop(engine):
    type_word(engine, 'slat', enter=False)
    assert engine.submit_key('Enter') is False
    assert engine.state.current_attempt == 0
    assert engine.state.invalid_attempt is None
    assert engine.state.current_buffer == list('slat')


def test_key_names_are_case_insensitive(engine):
    type_word(engine, 'slate', enter=False)
    assert engine.submit_key('ENTER') is True
    assert engine.state.current_attempt == 1


def test_valid_wrong_guess_advances_attempt(engine):
    type_word(engine, 'slate')
    assert engine.state.current_attempt == 1
    assert engine.state.guesses[0] == list('slate')
    assert engine.state.history == []


def test_submitted_rows_are_not_editable(engine):
    type_word(engine, 'slate')
    engine.submit_key('Backspace')
    engine.submit_key('t')
    assert engine.state.guesses[0] == list('slate')
    assert engine.state.guesses[1] == ['t']


def test_invalid_word_sets_flag_without_advancing(engine, timers):
    type_word(engine, 'zzzzz')
    state = engine.state
    assert state.invalid_attempt == 0
    assert state.current_attempt == 0
    assert state.current_buffer == list('zzzzz')
    assert len(timers.created) == 1
    assert timers.created[0].interval == pytest.approx(0.51)
    assert timers.created[0].started


def test_invalid_flag_clears_after_timeout_and_nothing_else(engine, timers):
    type_word(engine, 'slate')
    type_word(engine, 'zzzzz')
    before = (engine.state.current_attempt, {k: list(v) for k, v in engine.state.guesses.items()},
              engine.state.won, engine.state.over)

    timers.created[-1].fire()

    state = engine.state
    assert state.invalid_attempt is None
    after = (state.current_attempt, {k: list(v) for k, v in state.guesses.items()}, state.won, state.over)
    assert after == before


def test_repeated_invalid_enter_replaces_timer(engine, timers):
    type_word(engine, 'zzzzz')
    engine.submit_key('Enter')
    assert len(timers.created) == 2
    assert timers.created[0].cancelled
    timers.created[0].fire()
    assert engine.state.invalid_attempt == 0
    timers.created[1].fire()
    assert engine.state.invalid_attempt is None


def test_stale_flag_clear_after_new_game_is_noop(engine, timers):
    type_word(engine, 'zzzzz')
    stale = timers.created[0]
    engine.start_game('slate')

    assert stale.cancelled
    # Even if the callback runs anyway it must not touch the new round
    stale.function(*stale.args)
    assert engine.state.invalid_attempt is None
    assert engine.clear_invalid_attempt(0) is False
    assert engine.state.target_word == 'slate'


def test_clear_invalid_attempt_checks_attempt_index(engine):
    type_word(engine, 'zzzzz')
    assert engine.clear_invalid_attempt(3) is False
    assert engine.state.invalid_attempt == 0
    assert engine.clear_invalid_attempt(0) is True


def test_win_on_first_attempt(engine, clock):
    type_word(engine, 'crane')
    state = engine.state
    assert state.phase == GamePhase.WON
    assert state.won and state.over
    assert state.history == [ScoreRecord(won=True, timestamp=clock.now - clock.step, guess_count=1)]
    assert engine.last_result == state.history[0]


def test_win_on_third_attempt_counts_guesses(engine):
    type_word(engine, 'slate')
    type_word(engine, 'ghost')
    type_word(engine, 'CRANE')
    assert engine.state.phase == GamePhase.WON
    assert engine.state.current_attempt == 2
    assert engine.state.history[-1].guess_count == 3


def test_sixth_wrong_guess_loses(engine):
    for word in ['slate', 'ghost', 'lumpy', 'fizzy', 'pound']:
        type_word(engine, word)
    assert engine.state.current_attempt == 5
    assert engine.state.phase == GamePhase.IN_PROGRESS

    type_word(engine, 'brick')
    state = engine.state
    assert state.phase == GamePhase.LOST
    assert state.over and not state.won
    assert state.current_attempt == 5
    assert len(state.history) == 1
    assert state.history[0].won is False
    assert state.history[0].guess_count == 6


def test_no_input_accepted_after_game_over(engine):
    type_word(engine, 'crane')
    assert engine.submit_key('Backspace') is False
    assert engine.submit_key('a') is False
    assert engine.submit_key('Enter') is False
    assert engine.state.guesses[0] == list('crane')
    assert len(engine.state.history) == 1


def test_new_game_resets_board_and_keeps_history(engine):
    type_word(engine, 'crane')
    history_before = engine.state.history[:]
    engine.start_game('slate')
    state = engine.state
    assert state.target_word == 'slate'
    assert state.guesses == {i: [] for i in range(6)}
    assert state.current_attempt == 0
    assert not state.won and not state.over
    assert state.invalid_attempt is None
    assert state.history == history_before
    assert engine.last_result is None


def test_new_game_allowed_mid_round(engine):
    type_word(engine, 'slate')
    engine.new_game()
    assert engine.state.current_attempt == 0
    assert engine.state.history == []


def test_result_timestamps_stay_unique_with_frozen_clock(timers):
    dictionary = StubDictionary()
    engine = GameEngine(dictionary.is_valid_word, dictionary.pick_target_word,
                        timer_factory=timers, clock=lambda: 5000)
    for _ in range(3):
        engine.start_game('crane')
        type_word(engine, 'crane')
    assert [record.timestamp for record in engine.history] == [5000, 5001, 5002]


def test_subscribers_notified_on_each_change(engine, timers):
    seen = []
    unsubscribe = engine.subscribe(lambda e: seen.append(e.state.invalid_attempt))

    engine.submit_key('Backspace')  # no change, no event
    type_word(engine, 'zzzzz')
    timers.created[-1].fire()
    assert seen == [None] * 5 + [0, None]

    unsubscribe()
    engine.submit_key('Backspace')
    assert len(seen) == 7


def test_failing_subscriber_does_not_break_engine(engine):
    def broken(_):
        raise RuntimeError("boom")

    calls = []
    engine.subscribe(broken)
    engine.subscribe(lambda e: calls.append(1))
    assert engine.submit_key('a') is True
    assert calls == [1]
    assert engine.state.current_buffer == ['a']


def test_record_result_is_none_while_playing():
    state = GameState.fresh('crane')
    assert record_result(state, timestamp=1) is None


def test_record_result_for_finished_round():
    state = GameState.fresh('crane')
    state.current_attempt = 3
    state.won = True
    state.over = True
    assert record_result(state, timestamp=42) == ScoreRecord(won=True, timestamp=42, guess_count=4)


def test_row_verdicts_and_keyboard_cover_completed_rows(engine):
    type_word(engine, 'trace')
    type_word(engine, 'gho', enter=False)

    assert engine.row_verdicts() == [[
        LetterVerdict.ABSENT, LetterVerdict.CORRECT, LetterVerdict.CORRECT,
        LetterVerdict.PRESENT, LetterVerdict.CORRECT,
    ]]
    keyboard = engine.keyboard()
    assert keyboard['t'] == LetterVerdict.ABSENT
    assert keyboard['c'] == LetterVerdict.PRESENT
    assert keyboard['r'] == LetterVerdict.CORRECT
    # Letters in the unsubmitted row are not coloured yet
    assert keyboard['g'] == LetterVerdict.UNUSED


def test_final_row_is_scored_once_over(engine):
    type_word(engine, 'crane')
    assert len(engine.row_verdicts()) == 1
    assert engine.keyboard()['n'] == LetterVerdict.CORRECT


def test_snapshot_hides_answer_until_over(engine):
    type_word(engine, 'slate')
    snapshot = engine.snapshot()
    assert snapshot['target_word'] is None
    assert snapshot['phase'] == 'IN_PROGRESS'
    assert snapshot['guesses'][0] == 'slate'
    assert snapshot['evaluations'][0][0] == 'ABSENT'
    assert snapshot['current_attempt'] == 1

    type_word(engine, 'crane')
    snapshot = engine.snapshot()
    assert snapshot['target_word'] == 'crane'
    assert snapshot['phase'] == 'WON'
    assert snapshot['history'][0]['guessCount'] == 2
