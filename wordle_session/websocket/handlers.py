"""
WebSocket Event Handlers

Real-time surface for game sessions: clients join a game room to receive
guess results and the end of the game as they happen.
"""

from dataclasses import asdict
from flask import request
from flask_socketio import emit, join_room, leave_room
from ..exceptions import ConcurrentGuessError, SessionNotFoundError
from ..utils.decorators import websocket_game_service_required
from ..utils.game_logger import game_logger


def game_room(game_id: str) -> str:
    return f"game_{game_id}"


def broadcast_guess_outcome(socketio, outcome, state):
    """Notify everyone watching a game about an accepted guess."""
    game_id = outcome.session.id
    socketio.emit('guess_accepted', {
        'game_id': game_id,
        'guess': outcome.record.to_dict(),
        'state': asdict(state)
    }, room=game_room(game_id))

    if state.game_over:
        socketio.emit('game_over', {
            'game_id': game_id,
            'status': state.status,
            'won': state.won,
            'answer': state.answer,
            'attempts': state.attempts
        }, room=game_room(game_id))


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('join_game')
    @websocket_game_service_required
    def handle_join_game(data=None, game_service=None):
        """Join a game room and receive its current state."""
        game_id = data.get('game_id') if isinstance(data, dict) else None
        if not game_id:
            emit('error', {'error': 'Game ID is required'})
            return

        try:
            state = game_service.get_game_state(game_id)
        except SessionNotFoundError:
            emit('error', {'error': 'Game not found', 'game_id': game_id})
            return

        join_room(game_room(game_id))
        game_logger.logger.info(f"Socket {request.sid} joined game {game_id}")
        emit('game_state', asdict(state))

    @socketio.on('leave_game')
    def handle_leave_game(data=None):
        """Leave a game room."""
        game_id = data.get('game_id') if isinstance(data, dict) else None
        if game_id:
            leave_room(game_room(game_id))

    @socketio.on('submit_guess')
    @websocket_game_service_required
    def handle_submit_guess(data=None, game_service=None):
        """Submit a guess; the result is broadcast to the game room."""
        if not isinstance(data, dict):
            data = {}
        game_id = data.get('game_id')
        guess = data.get('guess')
        if not game_id or guess is None:
            emit('error', {'error': 'Game ID and guess are required'})
            return

        try:
            outcome = game_service.submit_guess(game_id, guess)
        except ConcurrentGuessError as e:
            game_logger.log_error(request, e, 'submit_guess', game_id)
            emit('error', {'error': 'Another guess for this game was recorded first', 'game_id': game_id})
            return

        if not outcome.accepted:
            emit('guess_rejected', {
                'game_id': game_id,
                'guess': guess,
                'reason': outcome.rejection.value,
                'error': outcome.rejection.message
            })
            return

        state = game_service.get_game_state(game_id)
        join_room(game_room(game_id))
        broadcast_guess_outcome(socketio, outcome, state)

        if state.game_over:
            game_logger.log_game_event(
                game_id, 'game_won' if state.won else 'game_lost', request.remote_addr or 'unknown',
                rounds_used=state.attempts, target_word=state.answer,
                final_guess=outcome.record.text
            )
