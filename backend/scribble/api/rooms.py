from flask import Blueprint, jsonify, current_app
from datetime import datetime, timezone
import resource
import time


rooms = Blueprint('rooms', __name__)

_started_at = time.time()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _memory_usage() -> dict:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is reported in kilobytes on Linux
    return {'maxRssKb': usage.ru_maxrss}


@rooms.route('/test', methods=['GET'])
def test_endpoint():
    return jsonify({
        'message': 'Backend is running!',
        'status': 'OK',
        'timestamp': _timestamp(),
    })


@rooms.route('/room-info', methods=['GET'])
def room_info():
    """
    Read-only view of every live room.
    """
    registry = current_app.extensions['room_registry']
    active_rooms = registry.snapshot()
    return jsonify({
        'totalRooms': len(active_rooms),
        'activeRooms': active_rooms,
    })


@rooms.route('/server-status', methods=['GET'])
def server_status():
    registry = current_app.extensions['room_registry']
    return jsonify({
        'status': 'healthy',
        'uptime': round(time.time() - _started_at, 3),
        'memory': _memory_usage(),
        'timestamp': _timestamp(),
        'environment': current_app.config.get('ENVIRONMENT'),
        'maxPlayers': registry.max_players,
        'totalRooms': registry.room_count(),
    })
