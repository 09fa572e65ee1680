"""
Game Service

Keeps one GameEngine per game session and keeps each engine's score
history in step with the persistent history store.
"""

import threading
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..config.game_settings import INVALID_WORD_CLEAR_MS
from ..models.game import ScoreSummary
from ..utils.game_logger import game_logger
from ..utils.helpers import now_millis
from .dictionary import WordDictionary
from .evaluation import ScoringPolicy
from .game_engine import GameEngine
from .history_store import HistoryStore, InMemoryHistoryStore, build_history_store, merge_history
from .stats_service import compute_stats

Listener = Callable[[str, GameEngine], None]


class GameService:
    """
    Core game service managing multiple game sessions.

    This class handles:
    - Session management with unique game IDs
    - Word selection through the dictionary
    - Merging finished rounds into the persistent score history
    - Fanning engine changes out to listeners (the websocket layer)
    """

    def __init__(self,
                 dictionary: Optional[WordDictionary] = None,
                 history_store: Optional[HistoryStore] = None,
                 scoring_policy: ScoringPolicy = ScoringPolicy.CLASSIC,
                 invalid_clear_delay: float = INVALID_WORD_CLEAR_MS / 1000,
                 timer_factory=threading.Timer,
                 clock: Callable[[], int] = now_millis):
        self.dictionary = dictionary or WordDictionary()
        self.history_store = history_store or InMemoryHistoryStore()
        self.scoring_policy = ScoringPolicy.parse(scoring_policy)
        self.invalid_clear_delay = invalid_clear_delay
        self._timer_factory = timer_factory
        self._clock = clock

        self.games: Dict[str, GameEngine] = {}
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def add_listener(self, listener: Listener):
        self._listeners.append(listener)

    def create_game(self) -> str:
        """
        Creates a new game session seeded with the stored score history.

        Returns:
            str: Unique game ID for this session
        """
        game_id = str(uuid.uuid4())
        engine = GameEngine(
            is_valid_word=self.dictionary.is_valid_word,
            pick_target_word=self.dictionary.pick_target_word,
            scoring_policy=self.scoring_policy,
            invalid_clear_delay=self.invalid_clear_delay,
            timer_factory=self._timer_factory,
            clock=self._clock,
            history=self.history_store.load_history(),
        )

        with self._lock:
            self.games[game_id] = engine

        engine.subscribe(lambda changed: self._on_engine_change(game_id, changed))
        engine.start_game()
        return game_id

    def get_engine(self, game_id: str) -> Optional[GameEngine]:
        with self._lock:
            return self.games.get(game_id)

    def get_game_state(self, game_id: str) -> Optional[Dict[str, Any]]:
        engine = self.get_engine(game_id)
        return engine.snapshot() if engine else None

    def submit_key(self, game_id: str, key: str) -> Optional[bool]:
        """
        Apply one key to a session.

        Returns:
            Whether the board changed, or None if the game does not exist
        """
        engine = self.get_engine(game_id)
        if engine is None:
            return None

        attempt = engine.state.current_attempt
        changed = engine.submit_key(key)
        if not changed:
            return changed

        state = engine.state
        if (isinstance(key, str) and key.lower() == 'enter'
                and state.invalid_attempt == attempt and state.current_attempt == attempt):
            game_logger.log_game_event(
                game_id, 'invalid_word', attempt=attempt,
                guess=''.join(state.guesses[attempt])
            )

        # Storage I/O runs here, outside the engine lock
        if state.over and engine.last_result is not None:
            before = engine.history
            self._merge_into_store(engine)
            if engine.history != before:
                self._fan_out(game_id, engine)
        return changed

    def new_round(self, game_id: str) -> bool:
        """Start the next round of a session, picking up history saved by other sessions."""
        engine = self.get_engine(game_id)
        if engine is None:
            return False
        self._merge_into_store(engine)
        engine.new_game()
        return True

    def get_stats(self, game_id: str) -> Optional[ScoreSummary]:
        engine = self.get_engine(game_id)
        if engine is None:
            return None
        return compute_stats(engine.history)

    def sync_history(self, game_id: str) -> bool:
        """
        Merge a session's history with the store and adopt the result.

        Safe to call any number of times: records are keyed by timestamp.

        Returns:
            True if the store was written
        """
        engine = self.get_engine(game_id)
        if engine is None:
            return False
        return self._merge_into_store(engine)

    def _merge_into_store(self, engine: GameEngine) -> bool:
        stored = self.history_store.load_history()
        merged = merge_history(stored, engine.history)

        written = False
        if merged != stored:
            written = self.history_store.save_history(merged)
        engine.replace_history(merged)
        return written

    def _on_engine_change(self, game_id: str, engine: GameEngine):
        self._fan_out(game_id, engine)

    def _fan_out(self, game_id: str, engine: GameEngine):
        for listener in list(self._listeners):
            try:
                listener(game_id, engine)
            except Exception as e:
                game_logger.logger.error(f"Game listener failed for game {game_id}: {e}")

    def delete_game(self, game_id: str) -> bool:
        with self._lock:
            engine = self.games.pop(game_id, None)
        if engine is None:
            return False
        self._merge_into_store(engine)
        return True


# Global game service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(settings: Mapping[str, Any]) -> GameService:
    """Initialize the global game service instance from configuration."""
    global _game_service
    min_zipf = settings.get('DICTIONARY_MIN_ZIPF', 1.0)
    _game_service = GameService(
        dictionary=WordDictionary(min_zipf=min_zipf),
        history_store=build_history_store(settings),
        scoring_policy=ScoringPolicy.parse(settings.get('SCORING_POLICY', 'classic')),
        invalid_clear_delay=settings.get('INVALID_WORD_CLEAR_MS', INVALID_WORD_CLEAR_MS) / 1000,
    )
    return _game_service
