import os
import sys
import pytest

# Ensure the backend root (containing the `fiveinrow` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from fiveinrow import create_app, db, socketio
from fiveinrow.socketio_events import NAMESPACE


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    API_KEY = 'test-api-key'
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'
    PORT = 3000
    BOARD_SIZE = 13
    WIN_LENGTH = 5
    ROOM_CODE_LENGTH = 6
    IDLE_TIMEOUT_SEC = 300
    LIVENESS_SWEEP_SEC = 60
    EVENT_LOG_ENABLED = True


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import fiveinrow.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    """Factory for Socket.IO test clients connected to /ws; all are closed afterwards."""
    created = []

    def _connect(**kwargs):
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace=NAMESPACE,
            **kwargs
        )
        test_client.get_received(NAMESPACE)  # flush 'connected'
        created.append(test_client)
        return test_client

    yield _connect
    for test_client in created:
        try:
            if test_client.is_connected(NAMESPACE):
                test_client.disconnect(namespace=NAMESPACE)
        except Exception:
            pass


@pytest.fixture()
def gateway(flask_app):
    return flask_app.extensions['fiveinrow']['gateway']


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['fiveinrow']['registry']
