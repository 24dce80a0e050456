from flask import current_app, request
from flask_socketio import emit, disconnect
from typing import Any, Dict, Optional

from scribble.services.rooms import JoinError


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    _registry().disconnect(sid)


def handle_join_room(data=None):
    payload = _as_dict(data)
    room_id = _room_id(payload)
    if room_id is None:
        _reject('roomId is required')
        return
    try:
        _registry().join(_get_sid(), room_id, bool(payload.get('isAdmin')))
    except JoinError as exc:
        _reject(exc.message)


def handle_draw(data=None):
    # Canvas payloads carry no room id; relay to every room the sender plays in
    registry = _registry()
    sid = _get_sid()
    for room_id in registry.rooms_of(sid):
        registry.relay_draw(sid, room_id, data)


def handle_set_timer(data=None):
    payload = _as_dict(data)
    room_id = _room_id(payload)
    if room_id is None:
        return
    _registry().set_timer(_get_sid(), room_id, payload.get('duration'))


def handle_stop_game(data=None):
    room_id = _room_id(_as_dict(data))
    if room_id is None:
        return
    _registry().stop_game(_get_sid(), room_id)


def handle_clear_canvas(data=None):
    room_id = _room_id(_as_dict(data))
    if room_id is None:
        return
    _registry().clear_canvas(_get_sid(), room_id)

# ---- helpers ----

def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _registry():
    return current_app.extensions['room_registry']

def _as_dict(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}

def _room_id(payload: Dict[str, Any]) -> Optional[str]:
    room_id = payload.get('roomId')
    if isinstance(room_id, bool) or not isinstance(room_id, (str, int)):
        return None
    room_id = str(room_id)
    return room_id or None

def _reject(message: str) -> None:
    """Tell the caller why its join failed, then drop the connection."""
    current_app.logger.info(f"[reject] sid={_get_sid()} message={message!r}")
    emit('error', {'message': message})
    disconnect()


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    from scribble import socketio

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('draw', handle_draw, namespace=namespace)
    socketio.on_event('setTimer', handle_set_timer, namespace=namespace)
    socketio.on_event('stopGame', handle_stop_game, namespace=namespace)
    socketio.on_event('clearCanvas', handle_clear_canvas, namespace=namespace)
