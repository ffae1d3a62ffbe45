"""Per-pool critical section."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from cpamm.errors import Reentrancy

logger = structlog.get_logger()


class PoolLock:
    """Exclusive lock held for the full duration of a mutating operation.

    Callers on other threads queue on the lock. A call from the thread that
    already holds it (an untrusted ledger re-entering the pool mid-operation)
    is rejected with Reentrancy instead of deadlocking.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._lock = threading.Lock()
        self._owner: int | None = None
        self._operation: str | None = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        me = threading.get_ident()
        if self._owner == me:
            logger.warning(
                "reentrancy_blocked",
                pool=self._name,
                operation=operation,
                active_operation=self._operation,
            )
            raise Reentrancy(f"{operation} re-entered {self._name} during {self._operation}")
        with self._lock:
            self._owner = me
            self._operation = operation
            try:
                yield
            finally:
                self._owner = None
                self._operation = None
