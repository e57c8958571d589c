"""
Game Rules Module

Centralizes the rules of a single-player session: word length, the attempt
cap and the curated word database used both to pick target words and to
accept guesses.
"""

import json
import os
from collections import Counter
from typing import List, Final

WORD_LENGTH: Final[int] = 5
"""Number of letters in every target word and every guess."""

MAX_ATTEMPTS: Final[int] = 6
"""
Maximum number of guesses accepted per session. A session whose ledger
reaches this size without an all-correct guess is lost.
"""


def _load_word_list() -> List[str]:
    """
    Load word list from wordles.json file.

    Returns:
        List[str]: List of uppercase 5-letter words

    Raises:
        FileNotFoundError: If wordles.json file is not found
        ValueError: If the file is malformed, the list is empty or
            contains invalid words
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'wordles.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in wordles.json: {e}") from e

    if not isinstance(word_list, list):
        raise ValueError("JSON file must contain an array of words")

    if not word_list:
        raise ValueError("Word list cannot be empty")

    uppercase_words = [word.strip().upper() for word in word_list]

    for word in uppercase_words:
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word '{word}' is not {WORD_LENGTH} characters long")
        if not word.isalpha():
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")

    return uppercase_words


# Curated Word Database loaded from JSON file
WORD_LIST: Final[List[str]] = _load_word_list()


def validate_word_list_integrity(words: List[str] = WORD_LIST) -> bool:
    """
    Validates the integrity and consistency of a word database.

    Checks that every word is exactly WORD_LENGTH alphabetic uppercase
    characters and that there are no duplicate entries.

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

        if not word.isupper():
            raise ValueError(f"Word at index {index} '{word}' is not in uppercase format")

    if len(words) != len(set(words)):
        duplicates = sorted(word for word, count in Counter(words).items() if count > 1)
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True
