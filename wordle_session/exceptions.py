"""
Game Exceptions

Expected guess rejections are returned as values (see models.GuessOutcome).
The exceptions below cover lookups of unknown sessions and conditions that
indicate a broken invariant or a storage conflict.
"""


class GameError(Exception):
    """Base class for all game errors."""


class SessionNotFoundError(GameError):
    """No session exists with the requested id."""

    def __init__(self, session_id: str):
        super().__init__(f"Game not found: {session_id}")
        self.session_id = session_id


class CorruptRecordError(GameError):
    """A persisted session or guess violates the five-letter invariant."""


class IllegalTransitionError(GameError):
    """An attempt was made to move a session out of a terminal status."""


class ConcurrentGuessError(GameError):
    """Another writer appended a guess to the same session first."""
