import importlib
import json
import logging
from datetime import datetime, timedelta

import pytest

from wordle_session.utils.game_logger import GameLogger

game_logger_module = importlib.import_module('wordle_session.utils.game_logger')


class NextDay(datetime):
    @classmethod
    def now(cls, tz=None):
        return datetime.now(tz) + timedelta(days=1)


@pytest.fixture
def logger(tmp_path):
    game_logger = GameLogger(log_dir=str(tmp_path), name='wordle_session.tests')
    yield game_logger
    for handler in game_logger.logger.handlers:
        handler.close()
    game_logger.logger.handlers.clear()


def test_game_events_are_written_as_json(logger):
    logger.log_game_event('game-1', 'game_won', '127.0.0.1', rounds_used=3)

    line = logger.log_file.read_text(encoding='utf-8').strip().split(' | ', 2)[2]
    entry = json.loads(line)
    assert entry['event_type'] == 'GAME_EVENT'
    assert entry['action'] == 'game_won'
    assert entry['details'] == {'game_id': 'game-1', 'rounds_used': 3}


def test_stats_read_the_file_being_written_after_midnight(logger, monkeypatch):
    log_file = logger.log_file
    logger.log_game_event('game-1', 'game_won', '127.0.0.1')

    monkeypatch.setattr(game_logger_module, 'datetime', NextDay)
    logger.log_game_event('game-1', 'game_lost', '127.0.0.1')
    stats = logger.get_log_stats()

    assert logger.log_file == log_file
    assert stats['log_file'] == str(log_file)
    assert stats['total_entries'] == 2
    assert stats['game_events'] == 2


def test_stats_without_log_file(logger):
    logger.log_file.unlink(missing_ok=True)
    assert logger.get_log_stats() == {'error': 'No log file found'}


def test_unknown_level_falls_back_to_info(tmp_path):
    game_logger = GameLogger(log_dir=str(tmp_path), level='chatty', name='wordle_session.tests.level')
    try:
        assert game_logger.logger.level == logging.INFO
    finally:
        for handler in game_logger.logger.handlers:
            handler.close()
        game_logger.logger.handlers.clear()