"""Keyed, typed message queues carrying Command messages between tasks."""

from __future__ import annotations

import threading
import time
from collections.abc import Sequence

from streamd.command import Command

IPC_PRIVATE = 0


class QueueClosedError(RuntimeError):
    """Raised when a queue is used that is not open or has been removed."""


class _SharedQueue:
    def __init__(self) -> None:
        self.cond = threading.Condition()
        self.messages: list[tuple[int, bytes]] = []
        self.removed = False


_registry: dict[int, _SharedQueue] = {}
_registry_lock = threading.Lock()


def _select(messages: Sequence[tuple[int, bytes]], wanted: int) -> int | None:
    """Index of the message a reader of type ``wanted`` receives, if any.

    0 takes the first message, a positive type the first of that type, and a
    negative type the first of the lowest type not above its absolute value.
    """
    if wanted == 0:
        return 0 if messages else None
    if wanted > 0:
        return next(
            (index for index, (kind, _) in enumerate(messages) if kind == wanted),
            None,
        )
    candidates = [
        (kind, index) for index, (kind, _) in enumerate(messages) if kind <= -wanted
    ]
    return min(candidates)[1] if candidates else None


class MessageQueue:
    """A handle on a queue shared by every handle opened with the same key."""

    def __init__(self, key: int | None = None) -> None:
        self.key: int | None = None
        self._queue: _SharedQueue | None = None
        if key is not None:
            self.open(key)

    def open(self, key: int) -> None:
        """Attach to the queue for ``key``, creating it when needed."""
        if self.valid():
            raise RuntimeError("message queue is already open")
        with _registry_lock:
            if key == IPC_PRIVATE:
                queue = _SharedQueue()
            else:
                queue = _registry.get(key)
                if queue is None or queue.removed:
                    queue = _registry[key] = _SharedQueue()
        self._queue = queue
        self.key = key

    def _active(self) -> _SharedQueue:
        queue = self._queue
        if queue is None or queue.removed:
            raise QueueClosedError("message queue is not open")
        return queue

    def send(self, msg_type: int, command: Command) -> None:
        """Queue a copy of ``command`` under ``msg_type``, which must be positive."""
        if msg_type < 1:
            raise ValueError("message type must be positive")
        queue = self._active()
        command.type = msg_type
        data = command.to_bytes()
        with queue.cond:
            if queue.removed:
                raise QueueClosedError("message queue was removed")
            queue.messages.append((msg_type, data))
            queue.cond.notify_all()

    def read(self, msg_type: int, timeout: int = 0) -> Command | None:
        """Receive a message of ``msg_type``.

        With ``timeout`` in milliseconds above zero, return None if nothing
        arrives in time; otherwise block until a message arrives.
        """
        queue = self._active()
        deadline = time.monotonic() + timeout / 1000 if timeout > 0 else None
        with queue.cond:
            while True:
                if queue.removed:
                    raise QueueClosedError("message queue was removed")
                index = _select(queue.messages, msg_type)
                if index is not None:
                    _, data = queue.messages.pop(index)
                    return Command.from_bytes(data)
                if deadline is None:
                    queue.cond.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return None
                    queue.cond.wait(remaining)

    def peek(self, msg_type: int) -> bool:
        """Whether a message of ``msg_type`` is waiting."""
        queue = self._active()
        with queue.cond:
            return _select(queue.messages, msg_type) is not None

    def peek_read(self, msg_type: int) -> Command | None:
        """Receive a waiting message of ``msg_type`` without blocking."""
        queue = self._active()
        with queue.cond:
            index = _select(queue.messages, msg_type)
            if index is None:
                return None
            _, data = queue.messages.pop(index)
            return Command.from_bytes(data)

    def close(self) -> None:
        """Remove the queue for every handle and detach this one."""
        queue, key = self._queue, self.key
        self._queue = None
        self.key = None
        if queue is None or queue.removed:
            return
        with _registry_lock:
            if key is not None and _registry.get(key) is queue:
                del _registry[key]
        with queue.cond:
            queue.removed = True
            queue.messages.clear()
            queue.cond.notify_all()

    def valid(self) -> bool:
        return self._queue is not None and not self._queue.removed

    def display(self, command: Command) -> str:
        """Print the command's bytes in hex and return the printed text."""
        text = command.hexdump()
        print(text, end="")
        return text