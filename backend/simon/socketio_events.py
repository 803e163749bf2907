from flask import current_app, request
from simon import socketio


NAMESPACE = '/ws'


def _arena():
    return current_app.extensions['arena']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _sender(sid: str):
    def send(message: str) -> None:
        socketio.send(message, to=sid, namespace=NAMESPACE)
    return send


def handle_connect(auth=None):
    # New connections go straight into the matchmaking queue
    sid = _get_sid()
    _arena().connect(sid, _sender(sid))


def handle_message(data):
    _arena().receive(_get_sid(), data)


def handle_disconnect(reason=None):
    _arena().disconnect(_get_sid())


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('message', handle_message, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
