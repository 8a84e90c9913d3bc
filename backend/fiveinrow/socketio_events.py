from flask import current_app, request
from flask_socketio import emit

from fiveinrow import socketio

NAMESPACE = '/ws'


class SocketIOTransport:
    """Adapts the gateway's transport calls onto the Flask-SocketIO server.

    Goes through ``socketio.server`` directly so it also works from the
    liveness sweep, which runs outside any request context.
    """

    def __init__(self, sio, namespace=NAMESPACE):
        self.sio = sio
        self.namespace = namespace

    def emit(self, event, payload=None, to=None, skip_sid=None):
        args = () if payload is None else (payload,)
        self.sio.emit(event, *args, to=to, skip_sid=skip_sid, namespace=self.namespace)

    def join(self, sid, room_code):
        self.sio.server.enter_room(sid, room_code, namespace=self.namespace)

    def leave(self, sid, room_code):
        self.sio.server.leave_room(sid, room_code, namespace=self.namespace)

    def disconnect(self, sid):
        self.sio.server.disconnect(sid, namespace=self.namespace)


def client_ip() -> str:
    """Best guess at the client address behind CDNs and proxies."""
    headers = request.headers
    for name in ('CF-Connecting-IP', 'Fastly-Client-IP'):
        if headers.get(name):
            return headers[name]
    forwarded_for = headers.get('X-Forwarded-For')
    if forwarded_for:
        return forwarded_for.split(',')[0].strip()
    forwarded = headers.get('Forwarded')
    if forwarded:
        for directive in forwarded.split(',')[0].split(';'):
            directive = directive.strip()
            if directive.lower().startswith('for='):
                return directive[4:].replace('"', '').replace('[', '').replace(']', '')
    return request.remote_addr


def _gateway():
    return current_app.extensions['fiveinrow']['gateway']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _gateway().connect(_get_sid(), client_ip(), request.headers.get('User-Agent'))
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(*args):
    _gateway().disconnect(_get_sid())


def handle_create_room(data=None):
    return _gateway().create_room(_get_sid())


def handle_join_room(data=None):
    return _gateway().join_room(_get_sid(), data)


def handle_make_move(data=None):
    _gateway().make_move(_get_sid(), data)


def handle_ready_for_rematch(data=None):
    _gateway().signal_ready(_get_sid(), data)


def handle_leave_room(data=None):
    return _gateway().leave_room(_get_sid(), data)


def handle_heartbeat(data=None):
    return _gateway().heartbeat(_get_sid(), data)


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Handler return values become the acknowledgement sent to the requester.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('makeMove', handle_make_move, namespace=namespace)
    socketio.on_event('signalReadyForRematch', handle_ready_for_rematch, namespace=namespace)
    socketio.on_event('leaveRoom', handle_leave_room, namespace=namespace)
    socketio.on_event('heartbeat', handle_heartbeat, namespace=namespace)
