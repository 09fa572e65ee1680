"""
Game Session Decorators

Resolve a game id to its engine for HTTP and WebSocket handlers.
"""

from functools import wraps
from flask import jsonify
from flask_socketio import emit


def require_game(f):
    """
    Decorator for HTTP endpoints taking a game_id route argument.
    Passes the engine as the `engine` keyword argument.
    """
    @wraps(f)
    def decorated_function(game_id, *args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        engine = game_service.get_engine(game_id)
        if engine is None:
            return jsonify({
                'success': False,
                'error': 'Game not found'
            }), 404

        kwargs['engine'] = engine
        return f(game_id, *args, **kwargs)

    return decorated_function


def websocket_game_required(f):
    """Decorator for WebSocket events whose payload carries a game_id."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        data = args[0] if args else None
        if not game_service or not isinstance(data, dict) or 'game_id' not in data:
            emit('error', {'error': 'game_id required'})
            return

        engine = game_service.get_engine(data['game_id'])
        if engine is None:
            emit('error', {'error': 'Game not found', 'game_id': data['game_id']})
            return

        kwargs['engine'] = engine
        return f(*args, **kwargs)

    return decorated_function
