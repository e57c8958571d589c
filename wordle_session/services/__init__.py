"""
Services Package

Contains all business logic and service classes.
"""

from .game_service import GameService, get_game_service, initialize_game_service
from .ledger import GuessLedger
from .repository import InMemorySessionRepository, MongoSessionRepository, SessionRepository
from .scoring import score
from .state_machine import SessionStateMachine, decide_status
from .validation import WordList

__all__ = [
    'GameService', 'get_game_service', 'initialize_game_service',
    'GuessLedger', 'SessionStateMachine', 'decide_status', 'score', 'WordList',
    'SessionRepository', 'InMemorySessionRepository', 'MongoSessionRepository'
]
