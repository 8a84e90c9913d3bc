from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from fiveinrow.main import main
    flask_app.register_blueprint(main)

    # One registry and gateway per app, so test apps never share rooms
    from fiveinrow.gateway import SessionGateway
    from fiveinrow.services.game import RoomRegistry
    from fiveinrow.services.events import EventLog
    from fiveinrow.services.liveness import LivenessSweeper
    from fiveinrow.socketio_events import SocketIOTransport, register_socketio_handlers

    registry = RoomRegistry(
        board_size=flask_app.config['BOARD_SIZE'],
        win_length=flask_app.config['WIN_LENGTH'],
        code_length=flask_app.config['ROOM_CODE_LENGTH'],
    )
    gateway = SessionGateway(
        registry,
        SocketIOTransport(socketio),
        event_log=EventLog(flask_app),
        idle_timeout=flask_app.config['IDLE_TIMEOUT_SEC'],
    )
    sweeper = LivenessSweeper(
        gateway.sweep,
        flask_app.config['LIVENESS_SWEEP_SEC'],
        start_task=socketio.start_background_task,
        sleep=socketio.sleep,
    )
    flask_app.extensions['fiveinrow'] = {
        'registry': registry,
        'gateway': gateway,
        'sweeper': sweeper,
    }

    register_socketio_handlers()

    if not flask_app.config.get('TESTING'):
        sweeper.start()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the event log tables."""
        import fiveinrow.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
