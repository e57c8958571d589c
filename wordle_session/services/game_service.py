"""
Game Service

Creates sessions, applies guesses through the session state machine and
exposes read access to sessions and their ledgers.
"""

import threading
import uuid
import zlib
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from ..config.game_settings import MAX_ATTEMPTS
from ..exceptions import CorruptRecordError, SessionNotFoundError
from ..models.game import GameState, GuessOutcome, GuessRecord, RejectionReason, Session, SessionStatus
from ..utils.game_logger import game_logger
from .ledger import GuessLedger
from .repository import InMemorySessionRepository, SessionRepository, check_integrity
from .scoring import merge_letter_status
from .state_machine import SessionStateMachine, ledger_status
from .validation import WordList, normalize_word


LOCK_STRIPES = 64


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameService:
    """
    Core game service managing single-player sessions.

    This class handles:
    - Session creation with a target word from ``select_start_word``
    - Guess submission, serialized per session
    - Read access to sessions, ledgers and guesser-facing game state
      (the target word stays hidden until the session is over)

    Args:
        repository: Session storage; defaults to an in-memory store
        select_start_word: Supplies the target word of a new session
        is_acceptable_word: Dictionary membership predicate for guesses
        max_attempts: Attempt cap per session
        clock: Returns the current time
        lock_stripes: Size of the lock pool serializing submissions per session
    """

    def __init__(self,
                 repository: Optional[SessionRepository] = None,
                 select_start_word: Optional[Callable[[], str]] = None,
                 is_acceptable_word: Optional[Callable[[str], bool]] = None,
                 max_attempts: int = MAX_ATTEMPTS,
                 clock: Callable[[], datetime] = _utcnow,
                 lock_stripes: int = LOCK_STRIPES):
        if select_start_word is None or is_acceptable_word is None:
            word_list = WordList()
            select_start_word = select_start_word or word_list.select_start_word
            is_acceptable_word = is_acceptable_word or word_list.is_acceptable_word

        self.repository = repository if repository is not None else InMemorySessionRepository()
        self.select_start_word = select_start_word
        self.max_attempts = max_attempts
        self.clock = clock
        self.state_machine = SessionStateMachine(is_acceptable_word, max_attempts, clock)

        # Fixed pool of locks; a session always maps to the same stripe
        self._locks: Tuple[threading.Lock, ...] = tuple(threading.Lock() for _ in range(lock_stripes))

    def _session_lock(self, session_id: str) -> threading.Lock:
        return self._locks[zlib.crc32(session_id.encode('utf-8')) % len(self._locks)]

    def create_session(self) -> Session:
        """
        Creates a new in-progress session with an empty ledger.

        Returns:
            The stored Session
        """
        now = self.clock()
        session = Session(
            id=str(uuid.uuid4()),
            target_word=normalize_word(self.select_start_word()),
            status=SessionStatus.IN_PROGRESS,
            created_at=now,
            updated_at=now,
        )
        check_integrity(session)
        self.repository.add_session(session)
        return session

    def get_session(self, session_id: str) -> Session:
        """
        Raises:
            SessionNotFoundError: If no session has this id
            CorruptRecordError: If the stored session is malformed
        """
        session = self.repository.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        self._check(session)
        return session

    def list_guesses(self, session_id: str) -> Tuple[GuessRecord, ...]:
        """Guesses of a session in attempt order."""
        session = self.get_session(session_id)
        records = self.repository.list_guesses(session_id)
        self._check(session, records)
        return records

    def submit_guess(self, session_id: str, text) -> GuessOutcome:
        """
        Submits a guess for a session.

        At most one submission per session runs at a time; the status
        decision and the append happen under the session's lock.

        Returns:
            GuessOutcome with the new record and session, or a rejection
        """
        with self._session_lock(session_id):
            session = self.repository.get_session(session_id)
            if session is None:
                return GuessOutcome.rejected(RejectionReason.SESSION_NOT_FOUND)

            records = self.repository.list_guesses(session_id)
            self._check(session, records)
            ledger = GuessLedger(session_id, records)

            # Another writer may have recorded the final guess without saving its status yet
            recorded_status = ledger_status(ledger, self.max_attempts)
            if recorded_status.is_terminal and not session.status.is_terminal:
                session = session.with_status(recorded_status, self.clock())
                self.repository.save_session(session)

            outcome = self.state_machine.submit_guess(session, ledger, text)
            if not outcome.accepted:
                return outcome

            self.repository.append_guess(outcome.record)
            # updated_at moves on every accepted guess, not only on status changes
            self.repository.save_session(outcome.session)
            return outcome

    def get_game_state(self, session_id: str) -> GameState:
        """
        Builds the guesser-facing view of a session.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        session = self.get_session(session_id)
        records = self.list_guesses(session_id)
        return self.build_game_state(session, records)

    def build_game_state(self, session: Session, records: Tuple[GuessRecord, ...]) -> GameState:
        letter_status: Dict[str, str] = {}
        for record in records:
            merge_letter_status(letter_status, record.text, record.tags)

        return GameState(
            game_id=session.id,
            status=session.status.value,
            attempts=len(records),
            max_attempts=self.max_attempts,
            game_over=session.status.is_terminal,
            won=session.status is SessionStatus.WON,
            guesses=[record.to_dict() for record in records],
            letter_status=letter_status,
            answer=session.target_word if session.status.is_terminal else None,
            created_at=session.created_at.isoformat(),
            updated_at=session.updated_at.isoformat(),
        )

    def count_sessions(self) -> int:
        return self.repository.count_sessions()

    def _check(self, session: Session, records: Tuple[GuessRecord, ...] = ()) -> None:
        try:
            check_integrity(session, records)
        except CorruptRecordError as e:
            game_logger.log_error(None, e, 'load_session', session.id)
            raise


# Global service instance
_game_service: Optional[GameService] = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(**kwargs) -> GameService:
    """
    Initialize the global game service instance.

    Keyword arguments are passed to GameService.
    """
    global _game_service
    _game_service = GameService(**kwargs)
    return _game_service
