"""Match domain services: queue, sessions, rules oracle and the authority.

This package holds the matchmaking and session logic. Socket handlers and
HTTP routes import from here, keeping transport concerns separated from
turn enforcement and session lifecycle.
"""

from .authority import MatchService, MoveRequest
from .oracle import ChessOracle, RulesOracle
from .queue import MatchQueue
from .sessions import Session, SessionStore, make_session_id

__all__ = [
    'ChessOracle',
    'MatchQueue',
    'MatchService',
    'MoveRequest',
    'RulesOracle',
    'Session',
    'SessionStore',
    'make_session_id',
]
