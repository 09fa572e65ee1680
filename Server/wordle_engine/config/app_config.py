"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

from .game_settings import HISTORY_NAMESPACE, INVALID_WORD_CLEAR_MS

# Load environment variables from config.env
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # History Storage Settings
    HISTORY_BACKEND = os.getenv('HISTORY_BACKEND', 'file')  # "file", "mongo" or "memory"
    HISTORY_PATH = os.getenv('HISTORY_PATH', 'data/score_history.json')
    HISTORY_NAMESPACE = os.getenv('HISTORY_NAMESPACE', HISTORY_NAMESPACE)
    MONGO_URI = os.getenv('MONGO_URI')

    # Game Settings
    SCORING_POLICY = os.getenv('SCORING_POLICY', 'classic')  # "classic" or "canonical"
    INVALID_WORD_CLEAR_MS = int(os.getenv('INVALID_WORD_CLEAR_MS', INVALID_WORD_CLEAR_MS))
    DICTIONARY_MIN_ZIPF = float(os.getenv('DICTIONARY_MIN_ZIPF', 1.0))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    HISTORY_BACKEND = 'memory'


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}


def get_config(name=None):
    """Pick a configuration class by name, falling back to APP_ENV and then the base Config."""
    name = (name or os.getenv('APP_ENV') or 'default').lower()
    if name not in config:
        raise ValueError(f"Unknown configuration '{name}', expected one of {sorted(config)}")
    return config[name]
