from datetime import datetime, timedelta, timezone

import pytest

from wordle_session import create_app
from wordle_session.config import TestingConfig
from wordle_session.services.game_service import GameService, initialize_game_service
from wordle_session.services.repository import InMemorySessionRepository
from wordle_session.services.validation import WordList

TEST_WORDS = [
    "crane", "slate", "trace", "react", "cater", "caret", "recap",
    "alley", "jelly", "level", "erupt", "about", "other", "water",
]


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def word_list():
    return WordList(TEST_WORDS)


@pytest.fixture
def repository():
    return InMemorySessionRepository()


@pytest.fixture
def service(repository, word_list):
    return GameService(
        repository=repository,
        select_start_word=lambda: "crane",
        is_acceptable_word=word_list.is_acceptable_word,
        clock=TickingClock(),
    )


@pytest.fixture
def app(repository, word_list):
    initialize_game_service(
        repository=repository,
        select_start_word=lambda: "CRANE",
        is_acceptable_word=word_list.is_acceptable_word,
    )
    app, socketio = create_app(TestingConfig)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app):
    return app.socketio.test_client(app)
