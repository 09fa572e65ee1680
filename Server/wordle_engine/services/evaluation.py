"""
Guess Evaluation

Pure functions that turn a guess and a target word into per-letter verdicts,
for both the board rows and the on-screen keyboard.
"""

import string
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from ..models.game import LetterVerdict

Guess = Union[str, Sequence[str]]


class ScoringPolicy(Enum):
    """
    How repeated letters are credited.

    CLASSIC marks a letter PRESENT whenever it occurs anywhere in the target,
    which is what the browser board has always shown. CANONICAL is the
    multiplicity-aware algorithm used by the reference game.
    """
    CLASSIC = "classic"
    CANONICAL = "canonical"

    @classmethod
    def parse(cls, name: Union[str, "ScoringPolicy"]) -> "ScoringPolicy":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ', '.join(policy.value for policy in cls)
            raise ValueError(f"Unknown scoring policy '{name}'. Must be one of: {valid}")


def _normalize(guess: Guess) -> List[str]:
    return [letter.lower() for letter in guess]


def evaluate_guess(guess: Guess,
                   target: str,
                   policy: ScoringPolicy = ScoringPolicy.CLASSIC) -> List[LetterVerdict]:
    """
    Evaluate a guess against the target word.

    Args:
        guess: The guessed word, as a string or a sequence of letters
        target: The target word
        policy: Duplicate-letter policy

    Returns:
        One verdict per letter position

    Raises:
        ValueError: If guess and target differ in length
    """
    guess_chars = _normalize(guess)
    target = target.lower()

    if len(guess_chars) != len(target):
        raise ValueError(
            f"Guess length {len(guess_chars)} does not match target length {len(target)}"
        )

    if policy is ScoringPolicy.CANONICAL:
        return _evaluate_canonical(guess_chars, target)
    return _evaluate_classic(guess_chars, target)


def _evaluate_classic(guess_chars: List[str], target: str) -> List[LetterVerdict]:
    verdicts = []
    for index, letter in enumerate(guess_chars):
        if target[index] == letter:
            verdicts.append(LetterVerdict.CORRECT)
        elif letter in target:
            verdicts.append(LetterVerdict.PRESENT)
        else:
            verdicts.append(LetterVerdict.ABSENT)
    return verdicts


def _evaluate_canonical(guess_chars: List[str], target: str) -> List[LetterVerdict]:
    result: List[Optional[LetterVerdict]] = []
    remaining: List[Optional[str]] = list(target)

    # First pass: exact matches consume their target letter
    for index, letter in enumerate(guess_chars):
        if remaining[index] == letter:
            result.append(LetterVerdict.CORRECT)
            remaining[index] = None
        else:
            result.append(None)

    # Second pass: present letters consume the first unconsumed copy
    for index, letter in enumerate(guess_chars):
        if result[index] is not None:
            continue
        if letter in remaining:
            result[index] = LetterVerdict.PRESENT
            remaining[remaining.index(letter)] = None
        else:
            result[index] = LetterVerdict.ABSENT

    return [verdict for verdict in result if verdict is not None]


def keyboard_statuses(completed_guesses: Sequence[Guess], target: str) -> Dict[str, LetterVerdict]:
    """
    Colour every key a..z from all completed guesses.

    A key is CORRECT once it has been placed where the target holds that same
    letter in any guess, PRESENT if guessed and somewhere in the target,
    ABSENT if guessed and not in the target, UNUSED otherwise.
    """
    target = target.lower()
    rows = [_normalize(guess) for guess in completed_guesses]
    guessed = {letter for row in rows for letter in row}
    placed = {
        letter
        for row in rows
        for index, letter in enumerate(row)
        if index < len(target) and target[index] == letter
    }

    statuses = {}
    for letter in string.ascii_lowercase:
        if letter in placed:
            statuses[letter] = LetterVerdict.CORRECT
        elif letter in guessed and letter in target:
            statuses[letter] = LetterVerdict.PRESENT
        elif letter in guessed:
            statuses[letter] = LetterVerdict.ABSENT
        else:
            statuses[letter] = LetterVerdict.UNUSED
    return statuses
