"""
Word Dictionary

Target word source and the "is this a real word" predicate used when a
guess is submitted.
"""

import functools
import random
import string
from typing import Iterable, Optional

from wordfreq import zipf_frequency

from ..config.game_settings import WORD_LENGTH, WORD_LIST


@functools.lru_cache(maxsize=4096)
def cached_zipf_frequency(word: str, lang: str = "en") -> float:
    """Cached wrapper for zipf_frequency to avoid repeated lookups."""
    return zipf_frequency(word, lang)


class WordDictionary:
    """
    Curated target words plus a wider English vocabulary for guesses.

    Any word in the curated list is valid. Other words are accepted when
    wordfreq knows them with a Zipf frequency of at least min_zipf;
    pass min_zipf=None to accept curated words only.
    """

    def __init__(self,
                 words: Iterable[str] = WORD_LIST,
                 min_zipf: Optional[float] = 1.0,
                 rng: Optional[random.Random] = None):
        self.words = [word.lower() for word in words]
        if not self.words:
            raise ValueError("Word list cannot be empty")
        self._word_set = frozenset(self.words)
        self.min_zipf = min_zipf
        self._rng = rng or random.Random()

    def pick_target_word(self) -> str:
        return self._rng.choice(self.words)

    def is_valid_word(self, word: str) -> bool:
        candidate = word.strip().lower()
        if len(candidate) != WORD_LENGTH or not all(c in string.ascii_lowercase for c in candidate):
            return False
        if candidate in self._word_set:
            return True
        if self.min_zipf is None:
            return False
        return cached_zipf_frequency(candidate) >= self.min_zipf
