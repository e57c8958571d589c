from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from wordle_session.exceptions import ConcurrentGuessError
from wordle_session.models.game import GuessRecord, LetterTag, Session, SessionStatus
from wordle_session.services.game_service import GameService
from wordle_session.services.repository import MongoSessionRepository

START = datetime(2024, 1, 1, tzinfo=timezone.utc)
LATER = START + timedelta(minutes=5)
ABSENT = (LetterTag.ABSENT,) * 5


def make_session(session_id="game-1", status=SessionStatus.IN_PROGRESS):
    return Session(id=session_id, target_word="CRANE", status=status, created_at=START, updated_at=START)


def make_record(attempt, session_id="game-1", text="SLATE"):
    return GuessRecord(
        id=f"{session_id}-{attempt}",
        session_id=session_id,
        text=text,
        tags=ABSENT,
        created_at=START + timedelta(seconds=attempt),
        attempt=attempt,
    )


@pytest.fixture
def mongo_repository():
    repository = MongoSessionRepository(None, 'wordle_test', client=mongomock.MongoClient(tz_aware=True))
    yield repository
    repository.close()


def test_add_and_get_session(mongo_repository):
    session = make_session()
    mongo_repository.add_session(session)

    assert mongo_repository.get_session("game-1") == session
    assert mongo_repository.get_session("missing") is None
    assert mongo_repository.count_sessions() == 1


def test_duplicate_attempt_raises_concurrent_guess_error(mongo_repository):
    mongo_repository.add_session(make_session())
    mongo_repository.append_guess(make_record(1))

    with pytest.raises(ConcurrentGuessError):
        mongo_repository.append_guess(GuessRecord(
            id="other-writer",
            session_id="game-1",
            text="TRACE",
            tags=ABSENT,
            created_at=LATER,
            attempt=1,
        ))

    assert [record.text for record in mongo_repository.list_guesses("game-1")] == ["SLATE"]


def test_same_attempt_in_different_sessions_is_allowed(mongo_repository):
    mongo_repository.add_session(make_session("game-1"))
    mongo_repository.add_session(make_session("game-2"))

    mongo_repository.append_guess(make_record(1, "game-1"))
    mongo_repository.append_guess(make_record(1, "game-2"))

    assert len(mongo_repository.list_guesses("game-1")) == 1
    assert len(mongo_repository.list_guesses("game-2")) == 1


def test_list_guesses_sorted_by_attempt(mongo_repository):
    mongo_repository.add_session(make_session())
    mongo_repository.append_guess(make_record(2, text="TRACE"))
    mongo_repository.append_guess(make_record(1, text="SLATE"))

    records = mongo_repository.list_guesses("game-1")

    assert [record.attempt for record in records] == [1, 2]
    assert [record.text for record in records] == ["SLATE", "TRACE"]
    assert records[0].tags == ABSENT
    assert mongo_repository.list_guesses("missing") == ()


def test_save_session_updates_only_status_and_timestamp(mongo_repository):
    session = make_session()
    mongo_repository.add_session(session)

    saved = mongo_repository.save_session(Session(
        id="game-1", target_word="XXXXX", status=SessionStatus.WON, created_at=LATER, updated_at=LATER
    ))

    assert saved is True
    stored = mongo_repository.get_session("game-1")
    assert stored.target_word == "CRANE"
    assert stored.created_at == START
    assert stored.status is SessionStatus.WON
    assert stored.updated_at == LATER


def test_save_session_never_overwrites_terminal_status(mongo_repository):
    session = make_session()
    mongo_repository.add_session(session)
    assert mongo_repository.save_session(session.with_status(SessionStatus.LOST, LATER)) is True

    assert mongo_repository.save_session(session) is False
    assert mongo_repository.get_session("game-1").status is SessionStatus.LOST


def test_game_service_over_mongo(mongo_repository):
    ticks = iter(START + timedelta(seconds=n) for n in range(100))
    service = GameService(
        repository=mongo_repository,
        select_start_word=lambda: "CRANE",
        clock=lambda: next(ticks),
    )
    session = service.create_session()

    statuses = [service.submit_guess(session.id, guess).status for guess in ["SLATE", "TRACE", "CRANE"]]

    assert statuses == [SessionStatus.IN_PROGRESS, SessionStatus.IN_PROGRESS, SessionStatus.WON]
    assert [record.result for record in service.list_guesses(session.id)] == ["XXCXC", "XCC~C", "CCCCC"]
    assert service.get_session(session.id).status is SessionStatus.WON
    assert service.submit_guess(session.id, "CRANE").status is SessionStatus.WON
    assert len(service.list_guesses(session.id)) == 3


def test_two_services_share_one_mongo_store(mongo_repository):
    first = GameService(repository=mongo_repository, select_start_word=lambda: "CRANE")
    second = GameService(repository=mongo_repository, select_start_word=lambda: "CRANE")
    session = first.create_session()

    first.submit_guess(session.id, "CRANE")
    outcome = second.submit_guess(session.id, "SLATE")

    assert not outcome.accepted
    assert len(second.list_guesses(session.id)) == 1
