"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GamePhase, GameState, LetterVerdict, ScoreRecord, ScoreSummary

__all__ = ['GamePhase', 'GameState', 'LetterVerdict', 'ScoreRecord', 'ScoreSummary']
