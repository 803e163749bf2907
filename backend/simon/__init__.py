from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

allowed_origins = [
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]
# async_handlers=False keeps each connection's frames in receipt order;
# always_connect acks the connection before the handler queues the player;
# the match core blocks on queue.Queue and threading.Lock, so threads only
socketio = SocketIO(
    cors_allowed_origins=allowed_origins, async_mode='threading', async_handlers=False, always_connect=True
)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app, cors_allowed_origins=allowed_origins, async_handlers=False, always_connect=True
    )

    # One arena per app: owns the matchmaking queue and the running matches
    from simon.services.game.arena import Arena
    arena = Arena(
        socketio.start_background_task,
        first_press_timeout=flask_app.config['FIRST_PRESS_TIMEOUT_SEC'],
        press_timeout=flask_app.config['PRESS_TIMEOUT_SEC'],
        queue_size=flask_app.config['MATCHMAKING_QUEUE_SIZE'],
        logger=flask_app.logger,
    )
    flask_app.extensions['arena'] = arena

    from simon.main import main
    flask_app.register_blueprint(main)

    from simon.api.lobby import lobby
    flask_app.register_blueprint(lobby, url_prefix='/api/lobby')

    # Register Socket.IO event handlers
    from simon.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    if flask_app.config.get('START_MATCHMAKER', True):
        arena.start()

    return flask_app
