"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    GameState, GuessOutcome, GuessRecord, LetterTag, RejectionReason, Session, SessionStatus
)

__all__ = [
    'GameState', 'GuessOutcome', 'GuessRecord', 'LetterTag',
    'RejectionReason', 'Session', 'SessionStatus'
]
