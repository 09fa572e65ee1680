"""
Game Configuration Constants Module

Board dimensions, the persistence namespace and the curated word list.
The word list is loaded from words.json next to this module and validated
on import so a broken list fails fast at startup.
"""

import json
import os
from typing import Final, List

WORD_LENGTH: Final[int] = 5
"""Letters per word."""

MAX_ATTEMPTS: Final[int] = 6
"""
Maximum number of guess attempts allowed per round (indices 0..5).
Type: Final[int] - Immutable to prevent accidental modification
"""

HISTORY_NAMESPACE: Final[str] = "lit-wordle-score"
"""Key under which score history is persisted."""

INVALID_WORD_CLEAR_MS: Final[int] = 510
"""Delay before the invalid-word flag clears itself (matches the shake animation)."""


def _load_word_list() -> List[str]:
    """
    Load word list from words.json file.

    Returns:
        List[str]: List of lowercase 5-letter words

    Raises:
        FileNotFoundError: If words.json file is not found
        ValueError: If JSON is malformed, the list is empty or contains invalid words
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'words.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in words.json: {e}")

    if not isinstance(word_list, list):
        raise ValueError("JSON file must contain an array of words")

    lowercase_words = [str(word).lower() for word in word_list]
    validate_word_list_integrity(lowercase_words)
    return lowercase_words


def validate_word_list_integrity(words: List[str]) -> bool:
    """
    Validates the integrity and consistency of a word database.

    This function performs validation to ensure:
    1. Length validation: All words must be exactly WORD_LENGTH characters
    2. Character validation: Only alphabetic characters allowed
    3. Uniqueness validation: No duplicate entries

    Returns:
        bool: True if word list passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not words:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(words):
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word at index {index} '{word}' is not {WORD_LENGTH} characters long")

        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

    if len(words) != len(set(words)):
        seen = set()
        duplicates = sorted({word for word in words if word in seen or seen.add(word)})
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True


# Curated Word Database loaded from JSON file
WORD_LIST: Final[List[str]] = _load_word_list()
