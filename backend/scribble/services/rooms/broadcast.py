from typing import Any, Optional


class SocketIOBroadcaster:
    """Deliver registry events to single connections over Socket.IO.

    ``socketio.emit`` works both inside request handlers and from
    background tasks, so countdown expiry can use the same path.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, sid: str, event: str, payload: Optional[Any] = None) -> None:
        if payload is None:
            self.socketio.emit(event, to=sid, namespace=self.namespace)
        else:
            self.socketio.emit(event, payload, to=sid, namespace=self.namespace)
