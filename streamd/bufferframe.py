"""Timestamped video frame buffers."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering

MAX_FRAME_BUFFER_SIZE = 16 * 1024 * 1024
_MAX_DIMENSION = 0xFFFF


class FrameType(IntEnum):
    """Pixel layout of a frame."""

    NONE = 0
    RAW = 1
    UYVY = 2
    RGB = 3


def _timeval(value: tuple[int, int]) -> tuple[int, int]:
    """Normalise a (seconds, microseconds) pair so microseconds lie in 0..999999."""
    sec, usec = value
    carry, usec = divmod(int(usec), 1_000_000)
    return int(sec) + carry, usec


@total_ordering
@dataclass(eq=False)
class BufferFrame:
    """A frame's bytes with its capture time, size, channel and type.

    Frames compare by capture time only.
    """

    date: tuple[int, int] = (0, 0)
    width: int = 0
    height: int = 0
    channel: int = 0
    type: int = FrameType.NONE
    flag: int = 0
    data: bytes = b""

    def __post_init__(self) -> None:
        self.date = _timeval(self.date)
        self.set_resolution(self.width, self.height)
        data = bytes(self.data)
        self.data = b""
        if data:
            self.set_frame(data, self.flag)

    def set_frame(self, data: bytes, flag: int) -> None:
        """Store a copy of ``data``, cut to the buffer limit, with ``flag``.

        Empty data leaves the frame unchanged.
        """
        if not data:
            return
        self.data = bytes(data[:MAX_FRAME_BUFFER_SIZE])
        self.flag = flag

    def set_resolution(self, width: int, height: int) -> None:
        for name, value in (("width", width), ("height", height)):
            if not 0 <= value <= _MAX_DIMENSION:
                raise ValueError(f"{name} must be between 0 and {_MAX_DIMENSION}")
        self.width = width
        self.height = height

    def reset(self) -> None:
        """Return every field to its empty state."""
        self.date = (0, 0)
        self.width = 0
        self.height = 0
        self.channel = 0
        self.type = FrameType.NONE
        self.flag = 0
        self.data = b""

    def copy(self) -> BufferFrame:
        return dataclasses.replace(self)

    def size(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BufferFrame):
            return NotImplemented
        return self.date == other.date

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BufferFrame):
            return NotImplemented
        return self.date < other.date