"""Per-investment serialization of mutations and snapshot reads."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class InvestmentLocks:
    """One re-entrant lock per investment identifier.

    Components that mutate or snapshot the same investments must share one
    instance. An operation that needs several investments at once takes
    their locks in ascending id order.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[int, threading.RLock] = {}

    def _lock_for(self, investment_id: int) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(investment_id)
            if lock is None:
                lock = self._locks[investment_id] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, investment_id: int) -> Iterator[None]:
        """Hold the investment's lock for the duration of the block."""
        lock = self._lock_for(investment_id)
        with lock:
            yield
