import threading
from typing import Callable, Dict

from flask import current_app, request
from flask_socketio import emit

from chessduel import socketio
from chessduel.services.match import MatchService

# Every inbound event runs to completion, emits included, before the next
# one starts. Handlers run on separate threads in threading mode; under
# eventlet or gevent this holds only when the threading module is monkey-patched.
_event_lock = threading.Lock()


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _dispatch_table(service: MatchService) -> Dict[str, Callable]:
    return {
        'move': lambda sid, data: service.submit_move(sid, data),
        'resign': lambda sid, data: service.resign(sid),
        'get:state': lambda sid, data: service.query_state(sid),
    }


def register_socketio_handlers(service: MatchService, namespace: str = '/') -> None:
    """Register Socket.IO event handlers for `service` on `namespace`."""

    def handle_connect(auth=None):
        sid = _get_sid()
        current_app.logger.info(f"[connect] sid={sid}")
        emit('connected', {'sid': sid})
        with _event_lock:
            service.handle_connect(sid)

    def handle_disconnect(reason=None):
        sid = _get_sid()
        current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
        with _event_lock:
            service.handle_disconnect(sid)

    def make_handler(event: str, operation: Callable):
        def handler(data=None):
            with _event_lock:
                operation(_get_sid(), data)
        handler.__name__ = f"handle_{event.replace(':', '_')}"
        return handler

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for event, operation in _dispatch_table(service).items():
        socketio.on_event(event, make_handler(event, operation), namespace=namespace)
