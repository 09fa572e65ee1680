"""
Guess Engine

The state machine behind one player's board. It owns a GameState, applies
one input event at a time and tells its subscribers after every change.

The only deferred work is clearing the invalid-word flag: it runs on a
cancellable timer whose token is kept on the engine, so a clear that fires
after a new round has started is ignored.
"""

import string
import threading
from typing import Callable, Dict, List, Optional

from ..config.game_settings import INVALID_WORD_CLEAR_MS, MAX_ATTEMPTS, WORD_LENGTH
from ..models.game import GameState, LetterVerdict, ScoreRecord
from ..utils.game_logger import game_logger
from ..utils.helpers import now_millis
from .evaluation import ScoringPolicy, evaluate_guess, keyboard_statuses

KEY_ENTER = "enter"
KEY_BACKSPACE = "backspace"

Observer = Callable[["GameEngine"], None]


def record_result(state: GameState, timestamp: Optional[int] = None) -> Optional[ScoreRecord]:
    """
    Build the score entry for a finished round.

    Args:
        state: Game state to score
        timestamp: Epoch millis, defaults to now

    Returns:
        ScoreRecord, or None while the round is still being played
    """
    if not state.over:
        return None

    return ScoreRecord(
        won=state.won,
        timestamp=now_millis() if timestamp is None else timestamp,
        guess_count=state.current_attempt + 1,
    )


class GameEngine:
    """
    Single-board Wordle state machine.

    Collaborators are injected:
    - is_valid_word: dictionary predicate, called with the lowercase guess
    - pick_target_word: returns a word for a new round
    - timer_factory: threading.Timer compatible factory for the flag clear
    - clock: returns epoch millis for score timestamps
    """

    def __init__(self,
                 is_valid_word: Callable[[str], bool],
                 pick_target_word: Callable[[], str],
                 scoring_policy: ScoringPolicy = ScoringPolicy.CLASSIC,
                 invalid_clear_delay: float = INVALID_WORD_CLEAR_MS / 1000,
                 timer_factory=threading.Timer,
                 clock: Callable[[], int] = now_millis,
                 history: Optional[List[ScoreRecord]] = None):
        self._is_valid_word = is_valid_word
        self._pick_target_word = pick_target_word
        self.scoring_policy = ScoringPolicy.parse(scoring_policy)
        self.invalid_clear_delay = invalid_clear_delay
        self._timer_factory = timer_factory
        self._clock = clock

        self._lock = threading.RLock()
        self._state = GameState(history=list(history or []))
        self._observers: List[Observer] = []
        self._invalid_timer = None
        self._invalid_token: Optional[object] = None
        self.last_result: Optional[ScoreRecord] = None

    @property
    def state(self) -> GameState:
        """Live state. Treat as read-only; mutate through the engine."""
        return self._state

    @property
    def history(self) -> List[ScoreRecord]:
        with self._lock:
            return list(self._state.history)

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """
        Register a callback invoked with this engine after every change.

        Returns:
            A function that removes the callback again
        """
        with self._lock:
            self._observers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._observers):
            try:
                callback(self)
            except Exception as e:
                game_logger.logger.error(f"Game state observer {callback!r} failed: {e}")

    def start_game(self, word: Optional[str] = None) -> GameState:
        """
        Begin a new round, keeping the score history.

        Args:
            word: Target word; a random one is picked when omitted

        Raises:
            ValueError: If the target is not a WORD_LENGTH alphabetic word
        """
        target = word if word is not None else self._pick_target_word()
        target = target.strip().lower()
        if len(target) != WORD_LENGTH or not all(c in string.ascii_lowercase for c in target):
            raise ValueError(f"Target word must be {WORD_LENGTH} letters a-z, got '{target}'")

        with self._lock:
            self._cancel_invalid_timer()
            self._state = GameState.fresh(target, self._state.history)
            self.last_result = None
            self._notify()
            return self._state

    def new_game(self) -> GameState:
        return self.start_game()

    def submit_key(self, key: str) -> bool:
        """
        Process one input event: a letter, "Backspace" or "Enter".

        Returns:
            True if the state changed
        """
        with self._lock:
            changed = self._apply_key(key)
            if changed:
                self._notify()
            return changed

    def _apply_key(self, key: str) -> bool:
        state = self._state
        if not state.target_word or state.over or not isinstance(key, str):
            return False

        name = key.lower()
        if name == KEY_BACKSPACE:
            if not state.current_buffer:
                return False
            state.current_buffer.pop()
            return True

        if name == KEY_ENTER:
            return self._submit_guess()

        if len(key) == 1 and key in string.ascii_letters:
            if state.buffer_full:
                return False
            state.current_buffer.append(name)
            return True

        return False

    def _submit_guess(self) -> bool:
        state = self._state
        if not state.buffer_full:
            return False

        word = ''.join(state.current_buffer)
        if not self._is_valid_word(word):
            state.invalid_attempt = state.current_attempt
            self._schedule_invalid_clear(state.current_attempt)
            return True

        if word == state.target_word:
            state.won = True
            state.over = True
            self._append_result()
        elif state.current_attempt == MAX_ATTEMPTS - 1:
            state.over = True
            self._append_result()
        else:
            state.current_attempt += 1
        return True

    def _append_result(self):
        history = self._state.history
        timestamp = self._clock()
        if history:
            # Timestamps identify records, keep them unique
            timestamp = max(timestamp, max(record.timestamp for record in history) + 1)

        record = record_result(self._state, timestamp)
        history.append(record)
        self.last_result = record

    def _schedule_invalid_clear(self, attempt: int):
        self._cancel_invalid_timer()
        token = object()
        timer = self._timer_factory(self.invalid_clear_delay, self._expire_invalid_flag, args=(token, attempt))
        timer.daemon = True
        self._invalid_token = token
        self._invalid_timer = timer
        timer.start()

    def _cancel_invalid_timer(self):
        if self._invalid_timer is not None:
            self._invalid_timer.cancel()
        self._invalid_timer = None
        self._invalid_token = None

    def _expire_invalid_flag(self, token: object, attempt: int):
        with self._lock:
            if token is not self._invalid_token:
                return
            self._invalid_timer = None
            self._invalid_token = None
            self.clear_invalid_attempt(attempt)

    def clear_invalid_attempt(self, attempt: int) -> bool:
        """
        Clear the invalid-word flag if it still marks the given attempt.

        Returns:
            True if the flag was cleared
        """
        with self._lock:
            if self._state.invalid_attempt is None or self._state.invalid_attempt != attempt:
                return False
            self._state.invalid_attempt = None
            self._notify()
            return True

    def replace_history(self, records: List[ScoreRecord]):
        """Adopt a merged score history. Does not notify subscribers."""
        with self._lock:
            self._state.history = list(records)

    def row_verdicts(self) -> List[List[LetterVerdict]]:
        with self._lock:
            state = self._state
            return [
                evaluate_guess(state.guesses[attempt], state.target_word, self.scoring_policy)
                for attempt in state.completed_attempts
            ]

    def keyboard(self) -> Dict[str, LetterVerdict]:
        with self._lock:
            return keyboard_statuses(self._state.completed_guesses(), self._state.target_word)

    def snapshot(self) -> Dict:
        """JSON-ready view of the board. The answer is only included once the round is over."""
        with self._lock:
            state = self._state
            return {
                'phase': state.phase.value,
                'word_length': WORD_LENGTH,
                'max_attempts': MAX_ATTEMPTS,
                'current_attempt': state.current_attempt,
                'guesses': [''.join(state.guesses[attempt]) for attempt in range(MAX_ATTEMPTS)],
                'evaluations': [[verdict.value for verdict in row] for row in self.row_verdicts()],
                'keyboard': {letter: verdict.value for letter, verdict in self.keyboard().items()},
                'won': state.won,
                'over': state.over,
                'invalid_attempt': state.invalid_attempt,
                'history': [record.to_dict() for record in state.history],
                'target_word': state.target_word if state.over else None,
                'scoring_policy': self.scoring_policy.value,
            }
