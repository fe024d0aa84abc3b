from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__, static_folder=None)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if allowed_origins == ['*']:
        allowed_origins = '*'
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One match service per process: owns the waiting queue and every session
    from chessduel.services.match import ChessOracle, MatchService
    from chessduel.transport import SocketIOTransport
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    service = MatchService(
        oracle=ChessOracle(),
        transport=SocketIOTransport(socketio, namespace=namespace),
        logger=flask_app.logger,
        default_promotion=flask_app.config.get('DEFAULT_PROMOTION', 'q'),
    )
    flask_app.extensions['match_service'] = service

    # Import and register blueprints here
    from chessduel.main import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers bound to this app's service
    from chessduel.socketio_events import register_socketio_handlers
    register_socketio_handlers(service, namespace=namespace)

    return flask_app
