"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, current_app, request, jsonify
from ..exceptions import ConcurrentGuessError, SessionNotFoundError
from ..models.game import RejectionReason, SessionStatus
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger
from ..websocket.handlers import broadcast_guess_outcome

game_bp = Blueprint('game', __name__)

REJECTION_STATUS_CODES = {
    RejectionReason.INVALID_SHAPE: 400,
    RejectionReason.NOT_AN_ACCEPTABLE_WORD: 400,
    RejectionReason.SESSION_NOT_FOUND: 404,
    RejectionReason.SESSION_TERMINAL: 409,
}


def _not_found(action, game_id):
    error_response = {
        'success': False,
        'error': RejectionReason.SESSION_NOT_FOUND.message,
        'reason': RejectionReason.SESSION_NOT_FOUND.value
    }
    game_logger.log_server_response(request, action, False, error_response, game_id)
    return jsonify(error_response), 404


def _server_error(action, error, game_id=None):
    game_logger.log_error(request, error, action, game_id)
    error_response = {
        'success': False,
        'error': str(error)
    }
    game_logger.log_server_response(request, action, False, error_response, game_id)
    return jsonify(error_response), 500


@game_bp.route('/games', methods=['POST'])
@require_game_service
def new_game(game_service):
    """Create a new game session."""
    try:
        game_logger.log_user_action(request, 'new_game')

        session = game_service.create_session()
        state = game_service.get_game_state(session.id)

        response_data = {
            'success': True,
            'game_id': session.id,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'new_game', True, response_data, session.id,
            max_attempts=state.max_attempts
        )

        return jsonify(response_data), 201

    except Exception as e:
        return _server_error('new_game', e)


@game_bp.route('/games/<game_id>', methods=['GET'])
@require_game_service
def get_state(game_id, game_service):
    """Get current game state."""
    try:
        game_logger.log_user_action(request, 'get_state', game_id)

        try:
            state = game_service.get_game_state(game_id)
        except SessionNotFoundError:
            return _not_found('get_state', game_id)

        response_data = {
            'success': True,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'get_state', True, response_data, game_id,
            attempts=state.attempts, game_over=state.game_over
        )

        return jsonify(response_data)

    except Exception as e:
        return _server_error('get_state', e, game_id)


@game_bp.route('/games/<game_id>/guesses', methods=['GET'])
@require_game_service
def list_guesses(game_id, game_service):
    """List the guesses of a game in attempt order."""
    try:
        game_logger.log_user_action(request, 'list_guesses', game_id)

        try:
            records = game_service.list_guesses(game_id)
        except SessionNotFoundError:
            return _not_found('list_guesses', game_id)

        response_data = {
            'success': True,
            'guesses': [record.to_dict() for record in records]
        }

        game_logger.log_server_response(
            request, 'list_guesses', True, response_data, game_id,
            guesses_count=len(records)
        )

        return jsonify(response_data)

    except Exception as e:
        return _server_error('list_guesses', e, game_id)


@game_bp.route('/games/<game_id>/guesses', methods=['POST'])
@require_game_service
def make_guess(game_id, game_service):
    """Submit a guess for validation and evaluation."""
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or 'guess' not in data:
            error_response = {
                'success': False,
                'error': 'Guess is required'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
            return jsonify(error_response), 400

        guess = data['guess']

        game_logger.log_user_action(request, 'submit_guess', game_id, guess=guess)

        try:
            outcome = game_service.submit_guess(game_id, guess)
        except ConcurrentGuessError as e:
            game_logger.log_error(request, e, 'submit_guess', game_id)
            error_response = {
                'success': False,
                'error': 'Another guess for this game was recorded first'
            }
            game_logger.log_server_response(request, 'submit_guess', False, error_response, game_id)
            return jsonify(error_response), 409

        if not outcome.accepted:
            reason = outcome.rejection
            error_response = {
                'success': False,
                'error': reason.message,
                'reason': reason.value
            }
            game_logger.log_server_response(
                request, 'submit_guess', False, error_response, game_id,
                validation_error=reason.value, attempted_guess=guess
            )
            return jsonify(error_response), REJECTION_STATUS_CODES[reason]

        state = game_service.get_game_state(game_id)
        response_data = {
            'success': True,
            'guess': outcome.record.to_dict(),
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, game_id,
            guess=outcome.record.text, attempt=outcome.record.attempt, game_over=state.game_over
        )

        if outcome.status is SessionStatus.WON:
            game_logger.log_game_event(
                game_id, 'game_won', request.remote_addr,
                rounds_used=state.attempts, target_word=state.answer,
                winning_guess=outcome.record.text
            )
        elif outcome.status is SessionStatus.LOST:
            game_logger.log_game_event(
                game_id, 'game_lost', request.remote_addr,
                rounds_used=state.attempts, target_word=state.answer,
                final_guess=outcome.record.text
            )

        socketio = getattr(current_app, 'socketio', None)
        if socketio is not None:
            broadcast_guess_outcome(socketio, outcome, state)

        return jsonify(response_data)

    except Exception as e:
        return _server_error('submit_guess', e, game_id)


@game_bp.route('/health', methods=['GET'])
@require_game_service
def health_check(game_service):
    """Health check endpoint."""
    try:
        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'sessions': game_service.count_sessions(),
            'storage': type(game_service.repository).__name__,
            'log_stats': game_logger.get_log_stats()
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
