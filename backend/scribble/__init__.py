from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, scheduler=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS', [])
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # One registry per app instance; handlers and routes look it up here
    from scribble.services.rooms import RoomRegistry, SocketIOBroadcaster, SocketIOScheduler
    registry = RoomRegistry(
        broadcaster=SocketIOBroadcaster(socketio, namespace=namespace),
        scheduler=scheduler or SocketIOScheduler(
            socketio, logger=flask_app.logger, tick=flask_app.config.get('TIMER_TICK_SEC', 0.25)
        ),
        max_players=flask_app.config.get('MAX_PLAYERS', 8),
        logger=flask_app.logger,
    )
    flask_app.extensions['room_registry'] = registry

    from scribble.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api')

    # Register Socket.IO event handlers on the shared socketio instance
    from scribble.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    flask_app.logger.info(f"[startup] max_players={registry.max_players} namespace={namespace}")
    return flask_app
