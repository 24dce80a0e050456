import os
import sys
import pytest

# Ensure the backend root (containing the `scribble` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scribble import create_app, socketio
from scribble.services.rooms import RoomRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MAX_PLAYERS = 2
    CORS_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    PORT = 5000
    ENVIRONMENT = 'testing'


class ManualScheduler:
    """Clock-driven stand-in for SocketIOScheduler; time moves only on advance()."""

    class Handle:
        def __init__(self, due, callback):
            self.due = due
            self.callback = callback
            self.cancelled = False

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def schedule(self, delay, callback):
        handle = self.Handle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds):
        self.now += seconds
        due = sorted((h for h in self.pending() if h.due <= self.now), key=lambda h: h.due)
        self.handles = [h for h in self.handles if h not in due]
        for h in due:
            h.callback()


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []

    def send(self, sid, event, payload=None):
        self.sent.append((sid, event, payload))

    def events(self, name):
        return [(sid, payload) for sid, event, payload in self.sent if event == name]

    def recipients(self, name):
        return sorted(sid for sid, _ in self.events(name))

    def clear(self):
        self.sent = []


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def registry(broadcaster, scheduler):
    return RoomRegistry(broadcaster=broadcaster, scheduler=scheduler, max_players=2)


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
