"""Access control and reentrancy exclusion for pool entry points."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from cpamm.errors import ReentrancyDetected, Unauthorized
from cpamm.models.state import PoolState
from cpamm.models.types import normalize_address

logger = structlog.get_logger()


def check_owner(state: PoolState, caller: str) -> None:
    """Raise Unauthorized unless caller is the pool owner."""
    caller = normalize_address(caller) if isinstance(caller, str) else repr(caller)
    if caller != state.owner:
        logger.warning("unauthorized_caller", caller=caller, owner=state.owner)
        raise Unauthorized(caller, state.owner)


class ReentrancyLock:
    """Non-blocking mutual exclusion around a pool's mutating calls.

    A second ``hold()`` while the lock is taken (re-entered from a ledger
    callback, or from another thread) fails with ReentrancyDetected rather
    than waiting. The lock is released on every exit path.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    def acquire(self, operation: str = "") -> None:
        if not self._lock.acquire(blocking=False):
            logger.warning("reentrancy_detected", operation=operation)
            raise ReentrancyDetected(f"Pool is busy; {operation or 'call'} rejected")

    def release(self) -> None:
        self._lock.release()

    @contextmanager
    def hold(self, operation: str = "") -> Iterator[None]:
        self.acquire(operation)
        try:
            yield
        finally:
            self.release()
