"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config, get_config
from .game_settings import (
    HISTORY_NAMESPACE, INVALID_WORD_CLEAR_MS, MAX_ATTEMPTS, WORD_LENGTH, WORD_LIST,
    validate_word_list_integrity,
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config', 'get_config',
    # Game rules
    'WORD_LIST', 'WORD_LENGTH', 'MAX_ATTEMPTS', 'HISTORY_NAMESPACE', 'INVALID_WORD_CLEAR_MS',
    'validate_word_list_integrity',
]
