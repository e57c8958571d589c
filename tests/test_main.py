import importlib

import pytest

from wordle_session.config import TestingConfig
from wordle_session.services.repository import InMemorySessionRepository

main_module = importlib.import_module('wordle_session.main')


class ClosingRepository(InMemorySessionRepository):
    def __init__(self):
        super().__init__()
        self.closed = False

    def close(self):
        self.closed = True


class FakeSocketIO:
    def __init__(self, error=None):
        self.error = error
        self.runs = []

    def run(self, app, **kwargs):
        self.runs.append(kwargs)
        if self.error is not None:
            raise self.error


@pytest.fixture
def server(monkeypatch):
    repository = ClosingRepository()
    socketio = FakeSocketIO()
    monkeypatch.setattr(main_module, 'build_repository', lambda config_class: repository)
    monkeypatch.setattr(main_module, 'initialize_game_service', lambda **kwargs: None)
    monkeypatch.setattr(main_module, 'create_app', lambda config_class: (object(), socketio))
    return repository, socketio


def test_repository_closed_after_server_stops(server):
    repository, socketio = server

    main_module.main('testing')

    assert socketio.runs == [{'host': TestingConfig.HOST, 'port': TestingConfig.PORT, 'debug': TestingConfig.DEBUG}]
    assert repository.closed


def test_repository_closed_on_keyboard_interrupt(server):
    repository, socketio = server
    socketio.error = KeyboardInterrupt()

    main_module.main('testing')

    assert repository.closed


def test_repository_closed_when_server_fails(server):
    repository, socketio = server
    socketio.error = RuntimeError('address in use')

    with pytest.raises(RuntimeError):
        main_module.main('testing')

    assert repository.closed


def test_build_repository_defaults_to_memory():
    assert isinstance(main_module.build_repository(TestingConfig), InMemorySessionRepository)
