"""
Services Package

Contains all business logic and service classes.
"""

from .dictionary import WordDictionary
from .evaluation import ScoringPolicy, evaluate_guess, keyboard_statuses
from .game_engine import GameEngine, record_result
from .game_service import GameService, get_game_service, initialize_game_service
from .history_store import (
    HistoryStore, InMemoryHistoryStore, JsonFileHistoryStore, MongoHistoryStore,
    build_history_store, merge_history,
)
from .stats_service import compute_stats

__all__ = [
    'GameEngine', 'record_result',
    'ScoringPolicy', 'evaluate_guess', 'keyboard_statuses',
    'GameService', 'get_game_service', 'initialize_game_service',
    'HistoryStore', 'InMemoryHistoryStore', 'JsonFileHistoryStore', 'MongoHistoryStore',
    'build_history_store', 'merge_history',
    'WordDictionary', 'compute_stats',
]
