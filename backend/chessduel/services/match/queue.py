from collections import deque
from typing import Deque, Optional, Set, Tuple


class MatchQueue:
    """FIFO of connection ids waiting for an opponent.

    An id holds at most one slot; enqueuing it again is a no-op.
    """

    def __init__(self) -> None:
        self._order: Deque[str] = deque()
        self._members: Set[str] = set()

    def enqueue(self, conn_id: str) -> bool:
        """Append to the tail. Returns False when already waiting."""
        if conn_id in self._members:
            return False
        self._order.append(conn_id)
        self._members.add(conn_id)
        return True

    def dequeue_pair(self) -> Optional[Tuple[str, str]]:
        """Remove and return the two oldest entries, or None if fewer than two wait."""
        if len(self._order) < 2:
            return None
        first = self._order.popleft()
        second = self._order.popleft()
        self._members.discard(first)
        self._members.discard(second)
        return first, second

    def remove(self, conn_id: str) -> bool:
        if conn_id not in self._members:
            return False
        self._members.discard(conn_id)
        self._order.remove(conn_id)
        return True

    def __contains__(self, conn_id: str) -> bool:
        return conn_id in self._members

    def __len__(self) -> int:
        return len(self._order)

    def snapshot(self) -> list[str]:
        return list(self._order)
