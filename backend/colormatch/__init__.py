from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import logging
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    if isinstance(value, str):
        return [o.strip() for o in value.split(',') if o.strip()]
    return list(value)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One set of rooms and players per application
    from colormatch.services import Lobby
    flask_app.extensions['colormatch'] = Lobby.from_config(flask_app.config)

    from colormatch.main import main
    flask_app.register_blueprint(main)

    from colormatch.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from colormatch.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    return flask_app
