import os
import sys
import time
import pytest

# Ensure the backend root (containing the `simon` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from simon import create_app, socketio
from simon.socketio_events import NAMESPACE


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    FIRST_PRESS_TIMEOUT_SEC = 5.0
    PRESS_TIMEOUT_SEC = 3.0
    MATCHMAKING_QUEUE_SIZE = 1
    START_MATCHMAKER = True


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application
    application.extensions['arena'].shutdown()


@pytest.fixture()
def arena(flask_app):
    return flask_app.extensions['arena']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


class Inbox:
    """Accumulates 'message' frames received by one Socket.IO test client."""

    def __init__(self, sio_client):
        self.sio_client = sio_client
        self.messages = []

    def poll(self):
        for pkt in self.sio_client.get_received(NAMESPACE):
            if pkt['name'] == 'message':
                self.messages.append(pkt['args'])
        return self.messages

    def wait_for(self, message, timeout=3.0):
        deadline = time.time() + timeout
        while time.time() < deadline:
            if message in self.poll():
                return True
            time.sleep(0.02)
        return False

    def send(self, message):
        self.sio_client.send(message, namespace=NAMESPACE)

    def disconnect(self):
        self.sio_client.disconnect(namespace=NAMESPACE)


@pytest.fixture()
def connect(flask_app):
    """Factory that opens Socket.IO test clients on the /ws namespace."""
    opened = []

    def _connect():
        sio_client = socketio.test_client(flask_app, namespace=NAMESPACE)
        opened.append(sio_client)
        return Inbox(sio_client)

    yield _connect
    for sio_client in opened:
        try:
            if sio_client.is_connected(NAMESPACE):
                sio_client.disconnect(namespace=NAMESPACE)
        except Exception:
            pass


@pytest.fixture()
def wait_until():
    def _wait(predicate, timeout=3.0):
        deadline = time.time() + timeout
        while time.time() < deadline:
            if predicate():
                return True
            time.sleep(0.02)
        return False
    return _wait
