"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..exceptions import IllegalTransitionError


class LetterTag(Enum):
    """Per-position scoring outcome for one guessed letter."""
    CORRECT = "CORRECT"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"

    @property
    def symbol(self) -> str:
        """Single character used when a tag sequence is stored as text."""
        return _TAG_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> "LetterTag":
        for tag, tag_symbol in _TAG_SYMBOLS.items():
            if tag_symbol == symbol:
                return tag
        raise ValueError(f"Unknown letter tag symbol: {symbol!r}")


_TAG_SYMBOLS = {
    LetterTag.CORRECT: "C",
    LetterTag.PRESENT: "~",
    LetterTag.ABSENT: "X",
}


class SessionStatus(Enum):
    """Lifecycle status of a session. WON and LOST are terminal."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.IN_PROGRESS


class RejectionReason(Enum):
    """Why a submitted guess was not recorded."""
    SESSION_TERMINAL = "session_terminal"
    INVALID_SHAPE = "invalid_shape"
    NOT_AN_ACCEPTABLE_WORD = "not_an_acceptable_word"
    SESSION_NOT_FOUND = "session_not_found"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.SESSION_TERMINAL: "Game is already over",
    RejectionReason.INVALID_SHAPE: "Guess must be exactly 5 letters",
    RejectionReason.NOT_AN_ACCEPTABLE_WORD: "Word not in word list",
    RejectionReason.SESSION_NOT_FOUND: "Game not found",
}


@dataclass(frozen=True)
class Session:
    """One game: a fixed target word and its lifecycle status."""
    id: str
    target_word: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    def with_status(self, status: SessionStatus, now: datetime) -> "Session":
        """
        Returns a copy carrying the new status and a refreshed updated_at.

        Raises:
            IllegalTransitionError: If this session is already terminal and
                the new status differs from the current one
        """
        if self.status.is_terminal and status is not self.status:
            raise IllegalTransitionError(
                f"Session {self.id} cannot move from {self.status.value} to {status.value}"
            )
        return replace(self, status=status, updated_at=now)


@dataclass(frozen=True)
class GuessRecord:
    """A scored guess. Owned by exactly one session."""
    id: str
    session_id: str
    text: str
    tags: Tuple[LetterTag, ...]
    created_at: datetime
    attempt: int

    @property
    def result(self) -> str:
        """Compact tag string, e.g. "XX~XC"."""
        return ''.join(tag.symbol for tag in self.tags)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'text': self.text,
            'tags': [tag.value for tag in self.tags],
            'result': self.result,
            'attempt': self.attempt,
            'created_at': self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class GuessOutcome:
    """
    Typed result of submitting a guess.

    Exactly one of ``record`` or ``rejection`` is set. On success ``session``
    carries the post-submit status; on rejection it is the unchanged session
    (or None when the session does not exist).
    """
    record: Optional[GuessRecord] = None
    session: Optional[Session] = None
    rejection: Optional[RejectionReason] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @property
    def status(self) -> Optional[SessionStatus]:
        return self.session.status if self.session else None

    @classmethod
    def rejected(cls, reason: RejectionReason, session: Optional[Session] = None) -> "GuessOutcome":
        return cls(session=session, rejection=reason)


@dataclass
class GameState:
    """Guesser-facing session view (the answer is only included once the game is over)."""
    game_id: str
    status: str
    attempts: int
    max_attempts: int
    game_over: bool
    won: bool
    guesses: List[Dict] = field(default_factory=list)
    letter_status: Dict[str, str] = field(default_factory=dict)  # Letter -> tag value, for JSON serialization
    answer: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
