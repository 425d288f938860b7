"""Per-key mutual exclusion for read-modify-write sections.

The ledger serializes every update of a single StockRecord behind
``lock(f"stock_record:{id}")``. Different keys never contend, so updates to
independent records proceed in parallel.

The default backend keeps one mutex per key inside the process. A backend
backed by shared storage (e.g. PostgreSQL advisory locks) can be passed in or
installed with ``set_default_backend`` when several processes write to the
same store.
"""

import threading
import time
from contextlib import contextmanager
from typing import Iterator, Protocol

import structlog

logger = structlog.get_logger(__name__)


class LockError(Exception):
    """Base exception for locking failures."""

    code: str = "lock_error"

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            message = "An unspecified locking error occurred."
        super().__init__(message)


class LockAcquireTimeout(LockError):
    """Raised when a lock cannot be acquired within the timeout.

    Usually another request is updating the same record.
    """

    code: str = "lock_acquire_timeout"


class LockBackend(Protocol):
    """Minimal interface a lock backend must provide."""

    def acquire(self, key: str, timeout: float | None) -> bool: ...
    def release(self, key: str) -> None: ...


class ThreadLockBackend:
    """In-process backend holding one ``threading.Lock`` per key.

    Entries are reference counted and dropped once no thread holds or waits
    for the key, so the table does not grow with the number of records ever
    touched.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._refs: dict[str, int] = {}

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            mutex = self._locks.get(key)
            if mutex is None:
                mutex = self._locks[key] = threading.Lock()
                self._refs[key] = 0
            self._refs[key] += 1
            return mutex

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._refs[key] -= 1
            if self._refs[key] == 0:
                del self._refs[key]
                del self._locks[key]

    def acquire(self, key: str, timeout: float | None) -> bool:
        mutex = self._checkout(key)
        acquired = mutex.acquire() if timeout is None else mutex.acquire(timeout=timeout)
        if not acquired:
            self._checkin(key)
        return acquired

    def release(self, key: str) -> None:
        with self._guard:
            mutex = self._locks.get(key)
        if mutex is None:
            return
        mutex.release()
        self._checkin(key)

    def held_keys(self) -> list[str]:
        with self._guard:
            return sorted(self._locks)


_default_backend: LockBackend = ThreadLockBackend()


def get_default_backend() -> LockBackend:
    return _default_backend


def set_default_backend(backend: LockBackend) -> None:
    """Install the backend used when ``lock`` is called without one."""
    global _default_backend
    _default_backend = backend


@contextmanager
def lock(
    key: str,
    timeout: float | None = 5.0,
    backend: LockBackend | None = None,
) -> Iterator[None]:
    """Hold the lock for ``key`` for the duration of the block.

    Args:
        key: Lock identifier derived from business context, e.g. "stock_record:<id>".
        timeout: Seconds to wait for acquisition. None waits forever.
        backend: Optional backend override.

    Raises:
        LockAcquireTimeout: The lock was not acquired within ``timeout``.
    """
    be = backend or _default_backend

    started = time.monotonic()
    acquired = be.acquire(key, timeout)

    if not acquired:
        logger.warning("Lock acquisition timed out", key=key, timeout=timeout)
        raise LockAcquireTimeout(f"Failed to acquire lock for key='{key}' within timeout={timeout}s")

    waited = time.monotonic() - started
    if waited > 0.1:
        logger.debug("Lock acquired after waiting", key=key, waited=round(waited, 3))

    try:
        yield
    finally:
        be.release(key)
