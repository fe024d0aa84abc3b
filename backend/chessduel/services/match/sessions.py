"""Session entity and the in-memory store of active sessions.

The store indexes sessions both by id and by participant connection, so
every inbound event resolves its session in constant time.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from chessduel.exceptions import DuplicateParticipant, SessionStateError
from chessduel.shared_types import Outcome, SessionStatus, Side


def make_session_id(a: str, b: str) -> str:
    """Deterministic id for an unordered pair of connections."""
    return '#'.join(sorted((a, b)))


@dataclass
class Session:
    id: str
    position: Any
    players: Dict[Side, str]
    created_at: float = field(default_factory=time.time)
    status: SessionStatus = SessionStatus.ACTIVE
    outcome: Optional[Outcome] = None

    def __post_init__(self) -> None:
        if set(self.players) != {Side.WHITE, Side.BLACK}:
            raise ValueError('A session needs exactly one white and one black participant')
        if self.players[Side.WHITE] == self.players[Side.BLACK]:
            raise ValueError('Session participants must be distinct')

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    def side_of(self, conn_id: str) -> Optional[Side]:
        for side, sid in self.players.items():
            if sid == conn_id:
                return side
        return None

    def opponent_of(self, conn_id: str) -> Optional[str]:
        side = self.side_of(conn_id)
        if side is None:
            return None
        return self.players[side.opponent]

    def participants(self) -> list[str]:
        return [self.players[Side.WHITE], self.players[Side.BLACK]]

    def terminate(self, outcome: Outcome) -> None:
        if not self.is_active:
            raise SessionStateError(f'Session {self.id} already ended ({self.outcome})')
        self.status = SessionStatus.TERMINATED
        self.outcome = outcome


class SessionStore:
    """Active sessions keyed by id, with a connection -> session id index."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._by_conn: Dict[str, str] = {}

    def add(self, session: Session) -> Session:
        if session.id in self._sessions:
            raise DuplicateParticipant(f'Session {session.id} already exists')
        for conn_id in session.participants():
            if conn_id in self._by_conn:
                raise DuplicateParticipant(f'{conn_id} is already in session {self._by_conn[conn_id]}')
        self._sessions[session.id] = session
        for conn_id in session.participants():
            self._by_conn[conn_id] = session.id
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def find_by_connection(self, conn_id: str) -> Optional[Session]:
        session_id = self._by_conn.get(conn_id)
        if session_id is None:
            return None
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        """Drop a session and its index entries. Unknown ids are a no-op."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None
        for conn_id in session.participants():
            if self._by_conn.get(conn_id) == session_id:
                del self._by_conn[conn_id]
        return session

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))
