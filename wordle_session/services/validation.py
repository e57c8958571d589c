"""
Word Validation

Shape checks for submitted guesses and the word list collaborator that
supplies target words and dictionary membership.
"""

import random
from typing import Iterable, Optional

from ..config.game_settings import WORD_LENGTH, WORD_LIST


def normalize_word(text: str) -> str:
    """Strips surrounding whitespace and uppercases a word."""
    return text.strip().upper()


def has_valid_shape(text) -> bool:
    """True when ``text`` is a string of exactly WORD_LENGTH letters."""
    if not text or not isinstance(text, str):
        return False
    return len(text) == WORD_LENGTH and text.isalpha()


class WordList:
    """
    Static word list used to pick target words and to accept guesses.

    Words are stored uppercased so membership is case-insensitive.
    """

    def __init__(self, words: Iterable[str] = WORD_LIST, rng: Optional[random.Random] = None):
        self.words = [normalize_word(word) for word in words]
        if not self.words:
            raise ValueError("Word list cannot be empty")
        self._lookup = frozenset(self.words)
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word) -> bool:
        return isinstance(word, str) and self.is_acceptable_word(word)

    def select_start_word(self) -> str:
        """Uniform random pick of a target word."""
        return self._rng.choice(self.words)

    def is_acceptable_word(self, word: str) -> bool:
        return normalize_word(word) in self._lookup
