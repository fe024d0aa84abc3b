"""Session authority: pairing, turn enforcement and session lifecycle.

`MatchService` owns the waiting queue and the session store for the whole
process. It is the only code that mutates a session's position or removes a
session. Callers are expected to serialize calls into it (see
`chessduel.socketio_events`), so no operation here takes a lock.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from chessduel.exceptions import IllegalMove, NoActiveSession, NotAParticipant, NotYourTurn, SessionError
from chessduel.shared_types import Outcome, Side
from chessduel.transport import Transport
from .oracle import RulesOracle
from .queue import MatchQueue
from .sessions import Session, SessionStore, make_session_id


@dataclass
class MoveRequest:
    from_square: Optional[str]
    to_square: Optional[str]
    promotion: Optional[str] = None

    @classmethod
    def from_payload(cls, payload, default_promotion: Optional[str] = 'q') -> 'MoveRequest':
        # Structural validation is the oracle's job; just lift the fields
        data = payload if isinstance(payload, dict) else {}
        return cls(
            from_square=data.get('from'),
            to_square=data.get('to'),
            promotion=data.get('promotion') or default_promotion,
        )


class MatchService:

    def __init__(
        self,
        oracle: RulesOracle,
        transport: Transport,
        logger: Optional[logging.Logger] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        default_promotion: Optional[str] = 'q',
    ) -> None:
        self.oracle = oracle
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self.rng = rng or random.Random()
        self.clock = clock
        self.default_promotion = default_promotion
        self.queue = MatchQueue()
        self.sessions = SessionStore()

    # -- connection lifecycle --
    def handle_connect(self, conn_id: str) -> list[Session]:
        """Queue a new connection and start every session that can be paired."""
        if self.sessions.find_by_connection(conn_id) is not None:
            self.logger.warning(f"[connect] sid={conn_id} already in a session, not queued")
            return []
        if self.queue.enqueue(conn_id):
            self.logger.info(f"[queue] sid={conn_id} waiting={len(self.queue)}")
        return self.pair_waiting()

    def pair_waiting(self) -> list[Session]:
        started = []
        while True:
            pair = self.queue.dequeue_pair()
            if pair is None:
                break
            started.append(self._start_session(*pair))
        return started

    def handle_disconnect(self, conn_id: str) -> None:
        """Drop a connection from the queue, or abandon its session.

        The opponent is told with `opponent:disconnect`; the leaving side has
        no transport left and gets nothing.
        """
        if self.queue.remove(conn_id):
            self.logger.info(f"[queue] sid={conn_id} left while waiting, waiting={len(self.queue)}")
            return
        session = self.sessions.find_by_connection(conn_id)
        if session is None:
            return
        opponent = session.opponent_of(conn_id)
        session.terminate(Outcome.ABANDONMENT)
        if opponent is not None:
            self.transport.send(opponent, 'opponent:disconnect')
        self.sessions.remove(session.id)
        self.logger.info(f"[session-end] id={session.id} outcome={Outcome.ABANDONMENT} by={conn_id}")

    # -- inbound game events --
    def submit_move(self, conn_id: str, payload) -> bool:
        """Apply a move for `conn_id`. Rejections go to the requester only."""
        try:
            self._apply_move(conn_id, payload)
        except SessionError as exc:
            self._reject(conn_id, exc)
            return False
        return True

    def resign(self, conn_id: str) -> None:
        session = self.sessions.find_by_connection(conn_id)
        if session is None:
            # Resigning outside a game is ignored
            return
        side = session.side_of(conn_id)
        if side is None:
            self.logger.warning(f"[resign] sid={conn_id} indexed to {session.id} but not seated")
            return
        self._finish(session, Outcome.RESIGNATION, f"{side.opponent.value.capitalize()} wins by resignation")

    def query_state(self, conn_id: str) -> None:
        session = self.sessions.find_by_connection(conn_id)
        if session is None:
            # Bare signal, no payload
            self.logger.info(f"[reject] sid={conn_id} event=no:game reason='state requested outside a game'")
            self.transport.send(conn_id, 'no:game')
            return
        self.transport.send(conn_id, 'game:update', self._snapshot(session))

    def stats(self) -> dict:
        return {'waiting': len(self.queue), 'active_sessions': len(self.sessions)}

    # -- internal helpers --
    def _start_session(self, a: str, b: str) -> Session:
        # Coin flip for colours, independent of queue order
        if self.rng.random() < 0.5:
            players = {Side.WHITE: a, Side.BLACK: b}
        else:
            players = {Side.WHITE: b, Side.BLACK: a}
        session = Session(
            id=make_session_id(a, b),
            position=self.oracle.initial_position(),
            players=players,
            created_at=self.clock(),
        )
        self.sessions.add(session)

        position = self.oracle.serialize(session.position)
        to_move = self.oracle.turn_of(session.position).value
        for side, conn_id in players.items():
            self.transport.send(conn_id, 'game:start', {
                'side': side.value,
                'opponentId': players[side.opponent],
                'position': position,
                'sideToMove': to_move,
                'sessionId': session.id,
            })
        self.logger.info(
            f"[session-start] id={session.id} white={players[Side.WHITE]} black={players[Side.BLACK]}"
        )
        return session

    def _require_session(self, conn_id: str) -> Session:
        session = self.sessions.find_by_connection(conn_id)
        if session is None:
            raise NoActiveSession()
        return session

    def _apply_move(self, conn_id: str, payload) -> None:
        session = self._require_session(conn_id)
        side = session.side_of(conn_id)
        if side is None:
            raise NotAParticipant()
        if self.oracle.turn_of(session.position) != side:
            raise NotYourTurn()

        request = MoveRequest.from_payload(payload, self.default_promotion)
        new_position = self.oracle.move(session.position, request)
        if new_position is None:
            raise IllegalMove()

        session.position = new_position
        update = self._snapshot(session)
        update['lastMove'] = self.oracle.last_move(new_position)
        self.transport.broadcast(session.participants(), 'game:update', update)
        self.logger.info(
            f"[move] id={session.id} side={side} from={request.from_square} to={request.to_square}"
        )

        if update['inCheckmate']:
            self._finish(session, Outcome.CHECKMATE, f"{side.value.capitalize()} wins by checkmate")
        elif update['inDraw']:
            self._finish(session, Outcome.DRAW, 'Draw')

    def _snapshot(self, session: Session) -> dict:
        # Always recomputed from the position, never cached
        position = session.position
        return {
            'position': self.oracle.serialize(position),
            'sideToMove': self.oracle.turn_of(position).value,
            'inCheck': self.oracle.is_in_check(position),
            'inCheckmate': self.oracle.is_checkmate(position),
            'inDraw': self.oracle.is_draw(position),
            'pgn': self.oracle.history(position),
        }

    def _finish(self, session: Session, outcome: Outcome, result: str) -> None:
        session.terminate(outcome)
        self.transport.broadcast(session.participants(), 'game:over', {'result': result})
        self.sessions.remove(session.id)
        self.logger.info(f"[session-end] id={session.id} outcome={outcome} result={result!r}")

    def _reject(self, conn_id: str, exc: SessionError) -> None:
        self.logger.info(f"[reject] sid={conn_id} event={exc.event} reason={exc.message!r}")
        self.transport.send(conn_id, exc.event, exc.payload())
