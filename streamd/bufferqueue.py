"""Bounded, thread-safe queues of buffer frames."""

from __future__ import annotations

import threading
from collections import deque

from streamd.bufferframe import BufferFrame

MAX_NET_QUEUE_SIZE = 16


class BufferQueue:
    """A FIFO of frame copies holding at most ``max_count`` frames.

    Adding to a full queue either drops the oldest frame or, with ``wait``,
    blocks until another thread makes room.
    """

    def __init__(self, max_count: int = 0, name: str = "") -> None:
        self.name = name
        self.max_count = max_count
        self._frames: deque[BufferFrame] = deque()
        self._cond = threading.Condition()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._frames):
            raise IndexError("frame index out of range")

    def get(self, index: int) -> BufferFrame:
        """Remove and return the frame at ``index``."""
        with self._cond:
            self._check_index(index)
            frame = self._frames[index]
            del self._frames[index]
            self._cond.notify_all()
            return frame

    def peek(self, index: int) -> BufferFrame:
        """Return a copy of the frame at ``index`` without removing it."""
        with self._cond:
            self._check_index(index)
            return self._frames[index].copy()

    def delete(self, index: int) -> None:
        with self._cond:
            self._check_index(index)
            del self._frames[index]
            self._cond.notify_all()

    def add(self, frame: BufferFrame, wait: bool = False) -> int:
        """Append a copy of ``frame`` and return its index."""
        with self._cond:
            if wait:
                while len(self._frames) >= self.max_count:
                    self._cond.wait()
            elif len(self._frames) >= self.max_count and self._frames:
                self._frames.popleft()
            self._frames.append(frame.copy())
            return len(self._frames) - 1

    def clear(self) -> None:
        with self._cond:
            self._frames.clear()
            self._cond.notify_all()

    def __len__(self) -> int:
        with self._cond:
            return len(self._frames)

    def is_full(self) -> bool:
        return len(self) >= self.max_count

    def is_empty(self) -> bool:
        return len(self) == 0

    def pop_first(self) -> BufferFrame:
        """Remove and return the oldest frame; IndexError when empty."""
        with self._cond:
            if not self._frames:
                raise IndexError("pop from an empty buffer queue")
            frame = self._frames.popleft()
            self._cond.notify_all()
            return frame

    def pop_last(self) -> BufferFrame:
        """Remove and return the newest frame; IndexError when empty."""
        with self._cond:
            if not self._frames:
                raise IndexError("pop from an empty buffer queue")
            frame = self._frames.pop()
            self._cond.notify_all()
            return frame

    def peek_first(self) -> BufferFrame:
        with self._cond:
            if not self._frames:
                raise IndexError("peek into an empty buffer queue")
            return self._frames[0].copy()

    def peek_last(self) -> BufferFrame:
        with self._cond:
            if not self._frames:
                raise IndexError("peek into an empty buffer queue")
            return self._frames[-1].copy()

    def delete_first(self) -> None:
        """Drop the oldest frame, if any."""
        with self._cond:
            if self._frames:
                self._frames.popleft()
                self._cond.notify_all()

    def delete_last(self) -> None:
        """Drop the newest frame, if any."""
        with self._cond:
            if self._frames:
                self._frames.pop()
                self._cond.notify_all()

    def set_max_count(self, size: int) -> None:
        """Change the capacity, dropping the oldest frames beyond it."""
        if size < 0:
            raise ValueError("capacity must not be negative")
        with self._cond:
            self.max_count = size
            while len(self._frames) > size:
                self._frames.popleft()
            self._cond.notify_all()


_control_queue = BufferQueue(name="CtrlPrmQueue")
_network_queues = tuple(
    BufferQueue(name="NetDataQueue") for _ in range(MAX_NET_QUEUE_SIZE)
)


def control_queue() -> BufferQueue:
    """The process-wide queue for control parameters."""
    return _control_queue


def network_queue(index: int) -> BufferQueue:
    """One of the process-wide network data queues."""
    if not 0 <= index < MAX_NET_QUEUE_SIZE:
        raise IndexError(f"network queue index must be below {MAX_NET_QUEUE_SIZE}")
    return _network_queues[index]