import os
import sys
import pytest

# Ensure the backend root (containing the `chessduel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from chessduel import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['*']
    SOCKETIO_NAMESPACE = '/'
    STATIC_FOLDER = os.path.join(CURRENT_DIR, 'static')
    LOG_LEVEL = 'DEBUG'
    DEFAULT_PROMOTION = 'q'


class RecordingTransport:
    """Collects outbound events instead of delivering them."""

    def __init__(self):
        self.sent = []

    def send(self, conn_id, event, payload=None):
        self.sent.append((conn_id, event, payload))

    def broadcast(self, conn_ids, event, payload=None):
        for conn_id in conn_ids:
            self.send(conn_id, event, payload)

    def events_for(self, conn_id):
        return [(event, payload) for sid, event, payload in self.sent if sid == conn_id]

    def names_for(self, conn_id):
        return [event for event, _ in self.events_for(conn_id)]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Create Socket.IO test clients; all are disconnected at teardown."""
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def transport():
    return RecordingTransport()
