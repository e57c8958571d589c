"""
Session State Machine

Decides whether a guess is accepted and how the session status moves
afterwards. Pure computation over in-memory state; persistence is the
caller's concern.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from ..config.game_settings import MAX_ATTEMPTS
from ..models.game import GuessOutcome, GuessRecord, LetterTag, RejectionReason, Session, SessionStatus
from .ledger import GuessLedger
from .scoring import is_all_correct, score
from .validation import has_valid_shape, normalize_word


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def decide_status(tags: Sequence[LetterTag], attempts: int, max_attempts: int = MAX_ATTEMPTS) -> SessionStatus:
    """
    Status after a guess has been recorded.

    A win is checked before the attempt cap, so an all-correct final guess
    is a win.
    """
    if is_all_correct(tags):
        return SessionStatus.WON
    elif attempts >= max_attempts:
        return SessionStatus.LOST
    else:
        return SessionStatus.IN_PROGRESS


def ledger_status(ledger: GuessLedger, max_attempts: int = MAX_ATTEMPTS) -> SessionStatus:
    """Status implied by the recorded guesses alone."""
    latest = ledger.latest()
    if latest is None:
        return SessionStatus.IN_PROGRESS
    return decide_status(latest.tags, ledger.count(), max_attempts)


class SessionStateMachine:
    """
    Applies one guess to a session and its ledger.

    Args:
        is_acceptable_word: Dictionary membership predicate. When None every
            well-shaped word is accepted.
        max_attempts: Attempt cap after which an unsolved session is lost
        clock: Returns the current time; injectable for tests
    """

    def __init__(self,
                 is_acceptable_word: Optional[Callable[[str], bool]] = None,
                 max_attempts: int = MAX_ATTEMPTS,
                 clock: Callable[[], datetime] = _utcnow):
        self.is_acceptable_word = is_acceptable_word
        self.max_attempts = max_attempts
        self.clock = clock

    def validate(self, session: Session, ledger: GuessLedger, guess_text) -> Optional[RejectionReason]:
        """Returns the rejection reason for a guess, or None if it may be scored."""
        if session.status.is_terminal or ledger_status(ledger, self.max_attempts).is_terminal:
            return RejectionReason.SESSION_TERMINAL

        if not isinstance(guess_text, str) or not has_valid_shape(normalize_word(guess_text)):
            return RejectionReason.INVALID_SHAPE

        if self.is_acceptable_word is not None and not self.is_acceptable_word(normalize_word(guess_text)):
            return RejectionReason.NOT_AN_ACCEPTABLE_WORD

        return None

    def submit_guess(self, session: Session, ledger: GuessLedger, guess_text) -> GuessOutcome:
        """
        Scores a guess, appends it to the ledger and recomputes the status.

        Rejected guesses leave the ledger untouched and are reported through
        the returned outcome.
        """
        rejection = self.validate(session, ledger, guess_text)
        if rejection is not None:
            return GuessOutcome.rejected(rejection, session)

        text = normalize_word(guess_text)
        tags = score(session.target_word, text)
        now = self.clock()

        record = GuessRecord(
            id=uuid.uuid4().hex,
            session_id=session.id,
            text=text,
            tags=tags,
            created_at=now,
            attempt=ledger.count() + 1,
        )
        ledger.append(record)

        status = decide_status(tags, ledger.count(), self.max_attempts)
        return GuessOutcome(record=record, session=session.with_status(status, now))
