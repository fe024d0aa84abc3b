"""Errors raised while handling an inbound game event.

Each carries the event name it is reported under, so the authority can turn
any of them into a rejection addressed to the requester only.
"""


class SessionError(Exception):
    event = 'error'
    default_message = 'Request rejected'

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def payload(self) -> dict:
        return {'message': self.message}


class NoActiveSession(SessionError):
    event = 'no:game'
    default_message = 'Not found in an active game'


class NotAParticipant(SessionError):
    event = 'no:game'
    default_message = 'You are not a player in this game'


class NotYourTurn(SessionError):
    event = 'invalid:turn'
    default_message = 'Not your turn'


class IllegalMove(SessionError):
    event = 'invalid:move'
    default_message = 'Illegal move'


class SessionStateError(Exception):
    """A session was asked to leave a state it cannot leave."""


class DuplicateParticipant(SessionStateError):
    """A connection is already bound to another active session."""
