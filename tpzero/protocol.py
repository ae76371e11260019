"""Wire format shared by the client and the server.

Every frame is an operation code followed by a size-prefixed payload.
Integers are 4-byte signed little-endian values. A package payload is a
sequence of size-prefixed values.
"""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")


class OpCode(IntEnum):
    """Kind of frame sent over the wire."""

    MESSAGE = 0
    PACKAGE = 1


def _to_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8") + b"\0"
    return bytes(value)


@dataclass
class Packet:
    """An operation code and the payload that goes with it."""

    op_code: OpCode = OpCode.PACKAGE
    payload: bytearray = field(default_factory=bytearray)

    def add(self, value: str | bytes) -> None:
        """Append a size-prefixed value; text is sent NUL-terminated."""
        data = _as_bytes(value)
        self.payload += _INT.pack(len(data))
        self.payload += data

    def serialize(self) -> bytes:
        """Return the frame as it goes on the wire."""
        return _INT.pack(int(self.op_code)) + _INT.pack(len(self.payload)) + bytes(self.payload)


def encode_message(message: str) -> bytes:
    """Return the frame carrying a single NUL-terminated text message."""
    return Packet(OpCode.MESSAGE, bytearray(_as_bytes(message))).serialize()


def decode_values(payload: bytes) -> list[str]:
    """Split a package payload into its values."""
    values: list[str] = []
    offset = 0
    end = len(payload)
    while offset < end:
        if offset + _INT.size > end:
            raise ValueError("payload ends inside a size prefix")
        (size,) = _INT.unpack_from(payload, offset)
        offset += _INT.size
        if size < 0 or offset + size > end:
            raise ValueError(f"value of size {size} does not fit in the payload")
        values.append(_to_text(payload[offset:offset + size]))
        offset += size
    return values


def recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read exactly ``size`` bytes, raising ConnectionError if the peer closes first."""
    chunks = bytearray()
    while len(chunks) < size:
        chunk = sock.recv(size - len(chunks))
        if not chunk:
            raise ConnectionError(f"connection closed after {len(chunks)} of {size} bytes")
        chunks += chunk
    return bytes(chunks)


def receive_operation(sock: socket.socket) -> OpCode | int | None:
    """Read the next operation code.

    Returns None and closes the socket when the peer has disconnected.
    Codes that are not known are returned as plain integers.
    """
    try:
        raw = recv_exact(sock, _INT.size)
    except OSError:
        sock.close()
        return None
    (code,) = _INT.unpack(raw)
    try:
        return OpCode(code)
    except ValueError:
        return code


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    (size,) = _INT.unpack(recv_exact(sock, _INT.size))
    if size < 0:
        raise ValueError(f"negative payload size {size}")
    return recv_exact(sock, size)