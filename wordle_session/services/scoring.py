"""
Guess Scoring

Implements the authentic Wordle letter evaluation algorithm and the
keyboard letter status aggregation built on top of it.
"""

from collections import Counter
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..config.game_settings import WORD_LENGTH
from ..models.game import LetterTag

# Higher rank wins when aggregating statuses for the keyboard
_TAG_RANK = {
    LetterTag.ABSENT: 0,
    LetterTag.PRESENT: 1,
    LetterTag.CORRECT: 2,
}


def score(target: str, guess: str) -> Tuple[LetterTag, ...]:
    """
    Scores a guess against the target word.

    Exact matches are resolved for the whole word before any placement
    match, so a letter is never credited (CORRECT or PRESENT) more times
    than it occurs in the target.

    Args:
        target: The hidden word
        guess: The submitted word

    Returns:
        Tuple of WORD_LENGTH letter tags, one per guess position

    Raises:
        ValueError: If either word is not WORD_LENGTH characters long
    """
    if len(target) != WORD_LENGTH or len(guess) != WORD_LENGTH:
        raise ValueError(
            f"Both words must be {WORD_LENGTH} characters long "
            f"(target={len(target)}, guess={len(guess)})"
        )

    target = target.upper()
    guess = guess.upper()

    tags: list = [None] * WORD_LENGTH
    remaining = Counter(target)

    # First pass: exact position matches consume their pool entry
    for i in range(WORD_LENGTH):
        if guess[i] == target[i]:
            tags[i] = LetterTag.CORRECT
            remaining[guess[i]] -= 1

    # Second pass: placement matches draw on what is left
    for i in range(WORD_LENGTH):
        if tags[i] is not None:
            continue
        letter = guess[i]
        if remaining[letter] > 0:
            tags[i] = LetterTag.PRESENT
            remaining[letter] -= 1
        else:
            tags[i] = LetterTag.ABSENT

    return tuple(tags)


def is_all_correct(tags: Sequence[LetterTag]) -> bool:
    return len(tags) == WORD_LENGTH and all(tag is LetterTag.CORRECT for tag in tags)


def tags_to_symbols(tags: Iterable[LetterTag]) -> str:
    return ''.join(tag.symbol for tag in tags)


def tags_from_symbols(symbols: str) -> Tuple[LetterTag, ...]:
    """Parses a stored tag string such as "XX~XC"."""
    return tuple(LetterTag.from_symbol(symbol) for symbol in symbols)


def merge_letter_status(letter_status: Dict[str, str], text: str, tags: Sequence[LetterTag]) -> None:
    """
    Updates keyboard letter status tracking based on one scored guess.

    A letter's status can only progress in priority order
    ABSENT -> PRESENT -> CORRECT.
    """
    for letter, new_tag in zip(text, tags):
        current: Optional[str] = letter_status.get(letter)
        if current is None or _TAG_RANK[new_tag] > _TAG_RANK[LetterTag(current)]:
            letter_status[letter] = new_tag.value
