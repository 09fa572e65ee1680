"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.game_settings import MAX_ATTEMPTS, WORD_LENGTH


class LetterVerdict(Enum):
    """Per-letter feedback for a submitted guess."""
    CORRECT = "CORRECT"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    UNUSED = "UNUSED"  # Keyboard only: letter never guessed


class GamePhase(Enum):
    """Lifecycle phase derived from a GameState."""
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    WON = "WON"
    LOST = "LOST"


@dataclass(frozen=True)
class ScoreRecord:
    """Result of one completed round. The timestamp is its identity."""
    won: bool
    timestamp: int  # epoch millis
    guess_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "won": self.won,
            "timestamp": self.timestamp,
            "guessCount": self.guess_count,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ScoreRecord":
        """
        Parse a persisted score entry.

        Raises:
            ValueError: If the entry does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Score entry must be an object, got {type(data).__name__}")

        won = data.get("won")
        timestamp = data.get("timestamp")
        guess_count = data.get("guessCount")

        if not isinstance(won, bool):
            raise ValueError("Score entry 'won' must be a boolean")
        # bool is a subclass of int, reject it explicitly
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise ValueError("Score entry 'timestamp' must be an integer")
        if not isinstance(guess_count, int) or isinstance(guess_count, bool):
            raise ValueError("Score entry 'guessCount' must be an integer")
        if not 1 <= guess_count <= MAX_ATTEMPTS:
            raise ValueError(f"Score entry 'guessCount' out of range: {guess_count}")

        return cls(won=won, timestamp=timestamp, guess_count=guess_count)


def empty_guesses() -> Dict[int, List[str]]:
    return {attempt: [] for attempt in range(MAX_ATTEMPTS)}


@dataclass
class GameState:
    """In-memory state of one player's board."""
    target_word: str = ""
    guesses: Dict[int, List[str]] = field(default_factory=empty_guesses)
    current_attempt: int = 0
    won: bool = False
    over: bool = False
    invalid_attempt: Optional[int] = None  # Attempt index just rejected as not-a-word
    history: List[ScoreRecord] = field(default_factory=list)

    @classmethod
    def fresh(cls, target_word: str, history: Optional[List[ScoreRecord]] = None) -> "GameState":
        """Start-of-round state; history carries over between rounds."""
        return cls(target_word=target_word, history=list(history or []))

    @property
    def phase(self) -> GamePhase:
        if not self.target_word:
            return GamePhase.NOT_STARTED
        if self.won:
            return GamePhase.WON
        if self.over:
            return GamePhase.LOST
        return GamePhase.IN_PROGRESS

    @property
    def current_buffer(self) -> List[str]:
        return self.guesses[self.current_attempt]

    @property
    def buffer_full(self) -> bool:
        return len(self.current_buffer) == WORD_LENGTH

    @property
    def completed_attempts(self) -> List[int]:
        """Attempt indices whose guesses have been submitted and scored."""
        last = self.current_attempt + 1 if self.over else self.current_attempt
        return list(range(last))

    def completed_guesses(self) -> List[List[str]]:
        return [list(self.guesses[attempt]) for attempt in self.completed_attempts]


@dataclass
class ScoreSummary:
    """Aggregated statistics for the score card."""
    played: int
    win_percentage: int
    current_streak: int
    max_streak: int
    distribution: Dict[int, int]
    highest_guess_count: Optional[int]
    bar_widths: Dict[int, int]
