"""Delivery of outbound game events to connections.

The match service only needs `send` and `broadcast`; `SocketIOTransport`
maps them onto Flask-SocketIO emits addressed by sid.
"""

from typing import Any, Iterable, Optional, Protocol


class Transport(Protocol):
    def send(self, conn_id: str, event: str, payload: Optional[dict] = None) -> None: ...

    def broadcast(self, conn_ids: Iterable[str], event: str, payload: Optional[dict] = None) -> None: ...


class SocketIOTransport:
    def __init__(self, socketio: Any, namespace: str = '/') -> None:
        self.socketio = socketio
        self.namespace = namespace

    def send(self, conn_id: str, event: str, payload: Optional[dict] = None) -> None:
        args = () if payload is None else (payload,)
        # Use socketio.emit so this works outside the sender's request context
        self.socketio.emit(event, *args, to=conn_id, namespace=self.namespace)

    def broadcast(self, conn_ids: Iterable[str], event: str, payload: Optional[dict] = None) -> None:
        # One emit per participant, in order, so both see the same sequence
        for conn_id in conn_ids:
            self.send(conn_id, event, payload)
