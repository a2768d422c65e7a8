"""Fixed-layout command messages exchanged between tasks."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

MAX_CMD_PARAM = 4
MAX_TEXT_SIZE = 64

# type (long), id (int), param[4] (int), sub (64-byte union); packed, little-endian.
_LAYOUT = struct.Struct(f"<qi{MAX_CMD_PARAM}i{MAX_TEXT_SIZE}s")
_PAYLOAD_LAYOUT = struct.Struct(f"<i{MAX_CMD_PARAM}i{MAX_TEXT_SIZE}s")

COMMAND_SIZE = _LAYOUT.size
PAYLOAD_SIZE = _PAYLOAD_LAYOUT.size


@dataclass
class Command:
    """A command: an id, four integer parameters and a 64-byte text/size area."""

    id: int = 0
    params: list[int] = field(default_factory=lambda: [0] * MAX_CMD_PARAM)
    type: int = 0
    text: bytes = bytes(MAX_TEXT_SIZE)

    def __post_init__(self) -> None:
        params = list(self.params)
        if len(params) > MAX_CMD_PARAM:
            raise ValueError(f"at most {MAX_CMD_PARAM} parameters are allowed")
        self.params = params + [0] * (MAX_CMD_PARAM - len(params))
        text = bytes(self.text)
        if len(text) > MAX_TEXT_SIZE:
            raise ValueError(f"text is limited to {MAX_TEXT_SIZE} bytes")
        self.text = text.ljust(MAX_TEXT_SIZE, b"\x00")

    @property
    def max_data_count(self) -> int:
        return MAX_CMD_PARAM

    @property
    def size(self) -> int:
        """The integer view of the start of the text area."""
        return int.from_bytes(self.text[:4], "little", signed=True)

    @size.setter
    def size(self, value: int) -> None:
        self.text = value.to_bytes(4, "little", signed=True) + self.text[4:]

    def get_data(self, num: int) -> int:
        """Return parameter ``num``; an index past the last one reads parameter 0."""
        if num < 0:
            raise IndexError("parameter index must not be negative")
        if num >= MAX_CMD_PARAM:
            num = 0
        return self.params[num]

    def set_data(self, data: int, num: int) -> None:
        """Set parameter ``num``; an index past the last one is ignored."""
        if num < 0:
            raise IndexError("parameter index must not be negative")
        if num >= MAX_CMD_PARAM:
            return
        self.params[num] = data

    def set_params(self, p0: int, p1: int, p2: int, p3: int) -> None:
        self.params = [p0, p1, p2, p3]

    def set_all(self, id: int, p0: int, p1: int, p2: int, p3: int) -> None:
        self.id = id
        self.set_params(p0, p1, p2, p3)

    def copy(self) -> Command:
        return Command(self.id, list(self.params), self.type, self.text)

    def to_bytes(self) -> bytes:
        """Encode the whole command, type included."""
        try:
            return _LAYOUT.pack(self.type, self.id, *self.params, self.text)
        except struct.error as exc:
            raise ValueError(f"command field out of range: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> Command:
        """Decode a full command, or a payload that lacks the leading type."""
        if len(data) == COMMAND_SIZE:
            msg_type, ident, *rest = _LAYOUT.unpack(data)
        elif len(data) == PAYLOAD_SIZE:
            msg_type = 0
            ident, *rest = _PAYLOAD_LAYOUT.unpack(data)
        else:
            raise ValueError(
                f"expected {COMMAND_SIZE} or {PAYLOAD_SIZE} bytes, got {len(data)}"
            )
        *params, text = rest
        return cls(ident, params, msg_type, text)

    def hexdump(self) -> str:
        """Return the encoded bytes as space-separated hex pairs and a newline."""
        return "".join(f"{byte:02x} " for byte in self.to_bytes()) + "\n"