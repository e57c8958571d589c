"""
Session Repositories

Persistence boundary for sessions and their guess ledgers. The in-memory
store keeps everything in process; the MongoDB store survives restarts and
can be shared by several server processes.
"""

from datetime import timezone
from typing import Dict, List, Optional, Tuple

from pymongo import ASCENDING, MongoClient
from pymongo.errors import DuplicateKeyError
from pymongo.server_api import ServerApi

from ..config.game_settings import WORD_LENGTH
from ..exceptions import ConcurrentGuessError, CorruptRecordError
from ..models.game import GuessRecord, Session, SessionStatus
from .scoring import tags_from_symbols, tags_to_symbols


def check_integrity(session: Session, records: Tuple[GuessRecord, ...] = ()) -> None:
    """
    Verifies the five-letter invariant on reconstructed data.

    Raises:
        CorruptRecordError: If the target word, a guess or its tags have the
            wrong length
    """
    if len(session.target_word) != WORD_LENGTH:
        raise CorruptRecordError(f"Session {session.id} has a malformed target word")
    for record in records:
        if len(record.text) != WORD_LENGTH or len(record.tags) != WORD_LENGTH:
            raise CorruptRecordError(f"Guess {record.id} of session {session.id} is malformed")


class SessionRepository:
    """Storage interface used by the game service."""

    def add_session(self, session: Session) -> None:
        raise NotImplementedError

    def get_session(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def save_session(self, session: Session) -> bool:
        """Stores a new status and updated_at. A stored terminal session is never overwritten."""
        raise NotImplementedError

    def append_guess(self, record: GuessRecord) -> None:
        raise NotImplementedError

    def list_guesses(self, session_id: str) -> Tuple[GuessRecord, ...]:
        raise NotImplementedError

    def count_sessions(self) -> int:
        raise NotImplementedError

    def close(self) -> None:
        """Releases storage resources."""


class InMemorySessionRepository(SessionRepository):
    """Stores sessions in process memory, keyed by session id."""

    def __init__(self):
        self.sessions: Dict[str, Session] = {}
        self.guesses: Dict[str, List[GuessRecord]] = {}

    def add_session(self, session: Session) -> None:
        self.sessions[session.id] = session
        self.guesses[session.id] = []

    def get_session(self, session_id: str) -> Optional[Session]:
        return self.sessions.get(session_id)

    def save_session(self, session: Session) -> bool:
        stored = self.sessions[session.id]
        if stored.status.is_terminal:
            return False
        self.sessions[session.id] = session
        return True

    def append_guess(self, record: GuessRecord) -> None:
        ledger = self.guesses[record.session_id]
        if len(ledger) + 1 != record.attempt:
            raise ConcurrentGuessError(
                f"Attempt {record.attempt} already recorded for session {record.session_id}"
            )
        ledger.append(record)

    def list_guesses(self, session_id: str) -> Tuple[GuessRecord, ...]:
        return tuple(self.guesses.get(session_id, ()))

    def count_sessions(self) -> int:
        return len(self.sessions)


class MongoSessionRepository(SessionRepository):
    """
    MongoDB-backed store.

    Sessions live in the ``sessions`` collection; guesses live in ``guesses``
    with a unique (session_id, attempt) index, so two processes can never
    record the same attempt of one session.
    """

    def __init__(self, mongo_uri: str, db_name: str = 'wordle_game', client: Optional[MongoClient] = None):
        self.client = client if client is not None else MongoClient(mongo_uri, server_api=ServerApi('1'), tz_aware=True)
        self.db = self.client[db_name]
        self.sessions_collection = self.db.sessions
        self.guesses_collection = self.db.guesses

        self.guesses_collection.create_index(
            [("session_id", ASCENDING), ("attempt", ASCENDING)], unique=True
        )

    def add_session(self, session: Session) -> None:
        self.sessions_collection.insert_one(self._session_to_document(session))

    def get_session(self, session_id: str) -> Optional[Session]:
        document = self.sessions_collection.find_one({"_id": session_id})
        if document is None:
            return None
        return self._document_to_session(document)

    def save_session(self, session: Session) -> bool:
        document = self._session_to_document(session)
        document.pop("_id")
        document.pop("target_word")
        document.pop("created_at")
        result = self.sessions_collection.update_one(
            {"_id": session.id, "status": SessionStatus.IN_PROGRESS.value}, {"$set": document}
        )
        return result.matched_count == 1

    def append_guess(self, record: GuessRecord) -> None:
        try:
            self.guesses_collection.insert_one({
                "_id": record.id,
                "session_id": record.session_id,
                "text": record.text,
                "result": tags_to_symbols(record.tags),
                "attempt": record.attempt,
                "created_at": record.created_at,
            })
        except DuplicateKeyError as e:
            raise ConcurrentGuessError(
                f"Attempt {record.attempt} already recorded for session {record.session_id}"
            ) from e

    def list_guesses(self, session_id: str) -> Tuple[GuessRecord, ...]:
        cursor = self.guesses_collection.find({"session_id": session_id}).sort("attempt", ASCENDING)
        return tuple(self._document_to_record(document) for document in cursor)

    def count_sessions(self) -> int:
        return self.sessions_collection.count_documents({})

    def close(self) -> None:
        self.client.close()

    @staticmethod
    def _session_to_document(session: Session) -> Dict:
        return {
            "_id": session.id,
            "target_word": session.target_word,
            "status": session.status.value,
            "created_at": session.created_at,
            "updated_at": session.updated_at,
        }

    @staticmethod
    def _document_to_session(document: Dict) -> Session:
        try:
            return Session(
                id=document["_id"],
                target_word=document["target_word"],
                status=SessionStatus(document["status"]),
                created_at=_as_utc(document["created_at"]),
                updated_at=_as_utc(document["updated_at"]),
            )
        except (KeyError, ValueError) as e:
            raise CorruptRecordError(f"Malformed session document {document.get('_id')}: {e}") from e

    @staticmethod
    def _document_to_record(document: Dict) -> GuessRecord:
        try:
            return GuessRecord(
                id=document["_id"],
                session_id=document["session_id"],
                text=document["text"],
                tags=tags_from_symbols(document["result"]),
                created_at=_as_utc(document["created_at"]),
                attempt=document["attempt"],
            )
        except (KeyError, ValueError) as e:
            raise CorruptRecordError(f"Malformed guess document {document.get('_id')}: {e}") from e


def _as_utc(value):
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
