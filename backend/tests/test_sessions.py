import pytest

from chessduel.exceptions import DuplicateParticipant, SessionStateError
from chessduel.services.match import Session, SessionStore, make_session_id
from chessduel.shared_types import Outcome, SessionStatus, Side


def _session(white='a', black='b'):
    return Session(id=make_session_id(white, black), position='start',
                   players={Side.WHITE: white, Side.BLACK: black})


def test_session_id_is_order_independent():
    assert make_session_id('a', 'b') == make_session_id('b', 'a')
    assert make_session_id('a', 'b') != make_session_id('a', 'c')


def test_session_requires_two_distinct_participants():
    with pytest.raises(ValueError):
        Session(id='x', position=None, players={Side.WHITE: 'a', Side.BLACK: 'a'})
    with pytest.raises(ValueError):
        Session(id='x', position=None, players={Side.WHITE: 'a'})


def test_side_and_opponent_lookup():
    session = _session()
    assert session.side_of('a') is Side.WHITE
    assert session.side_of('b') is Side.BLACK
    assert session.side_of('z') is None
    assert session.opponent_of('a') == 'b'
    assert session.opponent_of('z') is None


def test_terminate_only_once():
    session = _session()
    session.terminate(Outcome.RESIGNATION)
    assert session.status is SessionStatus.TERMINATED
    assert session.outcome is Outcome.RESIGNATION
    with pytest.raises(SessionStateError):
        session.terminate(Outcome.ABANDONMENT)
    assert session.outcome is Outcome.RESIGNATION


def test_store_indexes_by_connection():
    store = SessionStore()
    session = store.add(_session())
    assert store.get(session.id) is session
    assert store.find_by_connection('a') is session
    assert store.find_by_connection('b') is session
    assert store.find_by_connection('c') is None
    assert len(store) == 1


def test_store_rejects_connection_in_two_sessions():
    store = SessionStore()
    store.add(_session('a', 'b'))
    with pytest.raises(DuplicateParticipant):
        store.add(_session('a', 'c'))
    assert store.find_by_connection('c') is None


def test_store_remove_clears_index_and_is_idempotent():
    store = SessionStore()
    session = store.add(_session())
    assert store.remove(session.id) is session
    assert session.id not in store
    assert store.find_by_connection('a') is None
    assert store.remove(session.id) is None
    # both connections are free for a new pairing
    store.add(_session('b', 'a'))
    assert len(store) == 1
