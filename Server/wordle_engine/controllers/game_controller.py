"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, request, jsonify
from ..services.game_service import get_game_service
from ..utils.decorators import require_game
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _log_round_end(game_id, engine, final_key):
    """Log a win or loss the first time the finished board is returned."""
    state = engine.state
    record = engine.last_result
    if not state.over or record is None:
        return
    game_logger.log_game_event(
        game_id, 'game_won' if state.won else 'game_lost', request.remote_addr,
        guess_count=record.guess_count, target_word=state.target_word,
        final_guess=''.join(state.guesses[state.current_attempt]), final_key=final_key
    )


@game_bp.route('/new_game', methods=['POST'])
def new_game():
    """Create a new game session."""
    try:
        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        game_logger.log_user_action(request, 'new_game')

        game_id = game_service.create_game()
        response_data = {
            'success': True,
            'game_id': game_id,
            'state': game_service.get_game_state(game_id)
        }

        game_logger.log_server_response(request, 'new_game', True, response_data, game_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'new_game')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'new_game', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>/state', methods=['GET'])
@require_game
def get_state(game_id, engine):
    """Get current game state."""
    game_logger.log_user_action(request, 'get_state', game_id)

    response_data = {
        'success': True,
        'state': engine.snapshot()
    }

    game_logger.log_server_response(request, 'get_state', True, response_data, game_id)
    return jsonify(response_data)


@game_bp.route('/game/<game_id>/key', methods=['POST'])
@require_game
def submit_key(game_id, engine):
    """Apply one key press: a letter, Backspace or Enter."""
    try:
        data = request.get_json(silent=True)
        if not data or not isinstance(data.get('key'), str):
            error_response = {
                'success': False,
                'error': 'Key is required'
            }
            game_logger.log_server_response(request, 'key', False, error_response, game_id)
            return jsonify(error_response), 400

        key = data['key']
        game_logger.log_user_action(request, 'key', game_id, key=key)

        was_over = engine.state.over
        changed = get_game_service().submit_key(game_id, key)

        if changed and not was_over:
            _log_round_end(game_id, engine, key)

        response_data = {
            'success': True,
            'changed': changed,
            'state': engine.snapshot()
        }

        game_logger.log_server_response(request, 'key', True, response_data, game_id, changed=changed)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'key', game_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'key', False, error_response, game_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>/new_round', methods=['POST'])
@require_game
def new_round(game_id, engine):
    """Start the next round; the score history is kept."""
    try:
        game_logger.log_user_action(request, 'new_round', game_id)

        get_game_service().new_round(game_id)
        response_data = {
            'success': True,
            'state': engine.snapshot()
        }

        game_logger.log_server_response(request, 'new_round', True, response_data, game_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'new_round', game_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'new_round', False, error_response, game_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<game_id>/stats', methods=['GET'])
@require_game
def get_stats(game_id, engine):
    """Score card for the session's history."""
    game_logger.log_user_action(request, 'get_stats', game_id)

    summary = get_game_service().get_stats(game_id)
    response_data = {
        'success': True,
        'stats': asdict(summary)
    }

    game_logger.log_server_response(request, 'get_stats', True, response_data, game_id, played=summary.played)
    return jsonify(response_data)


@game_bp.route('/game/<game_id>', methods=['DELETE'])
@require_game
def delete_game(game_id, engine):
    """Delete a game session."""
    game_logger.log_user_action(request, 'delete_game', game_id)

    success = get_game_service().delete_game(game_id)
    response_data = {
        'success': success
    }

    game_logger.log_server_response(request, 'delete_game', success, response_data, game_id)
    if success:
        game_logger.log_game_event(game_id, 'game_deleted', request.remote_addr)

    return jsonify(response_data)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    game_service = get_game_service()

    game_logger.log_user_action(request, 'health_check')

    response_data = {
        'status': 'healthy',
        'active_games': len(game_service.games) if game_service else 0,
        'history_backend': game_service.history_store.backend if game_service else None,
        'scoring_policy': game_service.scoring_policy.value if game_service else None,
        'log_stats': game_logger.get_log_stats()
    }

    game_logger.log_server_response(request, 'health_check', True, response_data)
    return jsonify(response_data)
