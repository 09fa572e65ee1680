"""
WebSocket Event Handlers

Pushes board updates to the browser widget. Each game session has its own
room; every engine change, including the timed invalid-word clear, is
broadcast to it as a `game_state` event.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..services.game_service import get_game_service
from ..utils.decorators import websocket_game_required
from ..utils.game_logger import game_logger


def game_room(game_id):
    return f"game_{game_id}"


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def broadcast_game_state(game_id, engine):
        socketio.emit('game_state', {
            'game_id': game_id,
            'state': engine.snapshot()
        }, to=game_room(game_id))

    game_service = get_game_service()
    if game_service:
        game_service.add_listener(broadcast_game_state)

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        emit('connected', {'sid': request.sid})

    @socketio.on('join_game')
    @websocket_game_required
    def handle_join_game(data, engine):
        """Subscribe this socket to a game's updates."""
        game_id = data['game_id']
        join_room(game_room(game_id))
        game_logger.log_game_event(game_id, 'socket_joined', request.remote_addr, sid=request.sid)
        emit('game_state', {
            'game_id': game_id,
            'state': engine.snapshot()
        })

    @socketio.on('leave_game')
    def handle_leave_game(data):
        if isinstance(data, dict) and 'game_id' in data:
            leave_room(game_room(data['game_id']))

    @socketio.on('key')
    @websocket_game_required
    def handle_key(data, engine):
        """Apply a key press; the resulting state arrives through the room broadcast."""
        key = data.get('key')
        if not isinstance(key, str):
            emit('error', {'error': 'Key is required', 'game_id': data['game_id']})
            return {'changed': False}

        changed = get_game_service().submit_key(data['game_id'], key)
        return {'changed': changed}

    @socketio.on('new_round')
    @websocket_game_required
    def handle_new_round(data, engine):
        get_game_service().new_round(data['game_id'])
        game_logger.log_game_event(data['game_id'], 'new_round', request.remote_addr)
