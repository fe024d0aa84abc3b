from chessduel.services.match import MatchQueue


def test_dequeue_pair_is_fifo():
    queue = MatchQueue()
    for sid in ('a', 'b', 'c'):
        queue.enqueue(sid)
    assert queue.dequeue_pair() == ('a', 'b')
    assert queue.snapshot() == ['c']


def test_dequeue_pair_needs_two_entries():
    queue = MatchQueue()
    assert queue.dequeue_pair() is None
    queue.enqueue('a')
    assert queue.dequeue_pair() is None
    # nothing consumed by the failed attempt
    assert 'a' in queue
    assert len(queue) == 1


def test_duplicate_enqueue_keeps_single_slot():
    queue = MatchQueue()
    assert queue.enqueue('a') is True
    assert queue.enqueue('a') is False
    assert len(queue) == 1
    assert queue.dequeue_pair() is None


def test_remove_is_idempotent():
    queue = MatchQueue()
    queue.enqueue('a')
    queue.enqueue('b')
    assert queue.remove('a') is True
    assert queue.remove('a') is False
    assert queue.remove('never-seen') is False
    assert queue.snapshot() == ['b']


def test_removed_id_can_enqueue_again():
    queue = MatchQueue()
    queue.enqueue('a')
    queue.remove('a')
    queue.enqueue('b')
    queue.enqueue('a')
    assert queue.dequeue_pair() == ('b', 'a')
    assert len(queue) == 0
