"""Mutex, condition variable and scoped lock helpers."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager


class Mutex:
    """A non-recursive lock; unlocking an unheld mutex raises RuntimeError."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def lock(self) -> None:
        self._lock.acquire()

    def try_lock(self) -> bool:
        """Take the lock without blocking; return whether it was taken."""
        return self._lock.acquire(blocking=False)

    def unlock(self) -> None:
        self._lock.release()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    def __enter__(self) -> Mutex:
        self.lock()
        return self

    def __exit__(self, *args: object) -> None:
        self.unlock()


class Condition:
    """A condition variable that is waited on together with any Mutex."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._waiters: deque[threading.Lock] = deque()

    def _register(self) -> threading.Lock:
        waiter = threading.Lock()
        waiter.acquire()
        with self._guard:
            self._waiters.append(waiter)
        return waiter

    def wait(self, mutex: Mutex) -> None:
        """Release ``mutex``, block until signalled, then take ``mutex`` again."""
        waiter = self._register()
        mutex.unlock()
        try:
            waiter.acquire()
        finally:
            mutex.lock()

    def timed_wait(self, mutex: Mutex, usecs: int) -> bool:
        """Like wait, but give up after ``usecs`` microseconds; True on timeout."""
        waiter = self._register()
        mutex.unlock()
        try:
            signalled = waiter.acquire(timeout=usecs / 1_000_000)
            if not signalled:
                with self._guard:
                    try:
                        self._waiters.remove(waiter)
                    except ValueError:
                        # Signalled just as the timeout expired.
                        signalled = True
        finally:
            mutex.lock()
        return not signalled

    def signal(self) -> None:
        """Wake one waiter, if any."""
        with self._guard:
            if self._waiters:
                self._waiters.popleft().release()

    def broadcast(self) -> None:
        """Wake every waiter."""
        with self._guard:
            while self._waiters:
                self._waiters.popleft().release()


@contextmanager
def auto_lock(mutex: Mutex, cond: Condition | None = None) -> Iterator[Mutex]:
    """Hold ``mutex`` for the block; signal ``cond`` before releasing it."""
    mutex.lock()
    try:
        yield mutex
    finally:
        if cond is not None:
            cond.signal()
        mutex.unlock()


@contextmanager
def auto_unlock(mutex: Mutex, cond: Condition | None = None) -> Iterator[Mutex]:
    """Release a held ``mutex`` for the block and take it back afterwards."""
    if cond is not None:
        cond.signal()
    mutex.unlock()
    try:
        yield mutex
    finally:
        mutex.lock()