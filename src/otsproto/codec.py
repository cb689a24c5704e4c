"""
Byte Codec

Append-only writer and cursor-based reader over in-memory buffers.

Varint format: unsigned, 7 payload bits per byte, least-significant group
first; the high bit is set on every byte except the last.

    0   -> 00
    127 -> 7f
    128 -> 80 01
    300 -> ac 02

Only the shortest encoding of a value is accepted, so every value has
exactly one wire form.

Varbytes format: varint(len) ‖ raw bytes.

Neither role ever touches I/O. Give each concurrent caller its own
instance.
"""

from __future__ import annotations
from typing import Tuple

from .errors import (
    TruncatedStream,
    MalformedVarint,
    PayloadTooLarge,
    TrailingGarbage,
)
from .params import DEFAULT_PARAMS


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a varint."""
    if value < 0:
        raise ValueError(f"varint must be non-negative, got {value}")
    out = bytearray()
    while True:
        b = value & 0x7F
        value >>= 7
        if value:
            out.append(b | 0x80)
        else:
            out.append(b)
            return bytes(out)


def decode_varint(buf: bytes, offset: int = 0,
                  max_bits: int = DEFAULT_PARAMS.varint_max_bits) -> Tuple[int, int]:
    """
    Decode one varint from buf starting at offset.

    Returns:
        (value, new_offset)

    Raises:
        MalformedVarint: If the buffer ends before a terminating byte, the
            value does not fit in max_bits, or the encoding is longer than
            necessary.
    """
    value = 0
    shift = 0
    i = offset
    while True:
        if i >= len(buf):
            raise MalformedVarint(
                f"Varint at offset {offset} has no terminating byte"
            )
        b = buf[i]
        i += 1
        value |= (b & 0x7F) << shift
        if value >> max_bits:
            raise MalformedVarint(
                f"Varint at offset {offset} exceeds {max_bits} bits"
            )
        if not b & 0x80:
            # Minimal form only: a zero final group adds nothing
            if b == 0 and shift > 0:
                raise MalformedVarint(
                    f"Varint at offset {offset} is not minimally encoded"
                )
            return value, i
        shift += 7


class StreamWriter:
    """
    Append-only byte accumulator.

    No bounds are enforced on write; producing a valid proof is the
    caller's job.
    """

    def __init__(self):
        self._buf = bytearray()

    def write_bytes(self, data: bytes) -> None:
        self._buf += data

    def write_uint8(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"uint8 out of range: {value}")
        self._buf.append(value)

    def write_varint(self, value: int) -> None:
        self._buf += encode_varint(value)

    def write_varbytes(self, data: bytes) -> None:
        self.write_varint(len(data))
        self._buf += data

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)


class StreamReader:
    """
    Cursor over an input buffer.

    Every read either returns exactly what was asked for or raises; the
    cursor is not advanced past a failed read.
    """

    def __init__(self, data: bytes, params=DEFAULT_PARAMS):
        self._data = bytes(data)
        self._pos = 0
        self._max_bits = params.varint_max_bits

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes."""
        if n < 0:
            raise ValueError(f"Cannot read a negative byte count: {n}")
        if self.remaining < n:
            raise TruncatedStream(n, self.remaining)
        out = self._data[self._pos:self._pos + n]
        self._pos += n
        return out

    def read_uint8(self) -> int:
        return self.read_bytes(1)[0]

    def read_varint(self) -> int:
        value, self._pos = decode_varint(self._data, self._pos, self._max_bits)
        return value

    def read_varbytes(self, max_len: int) -> bytes:
        """
        Read a length-prefixed byte string.

        Args:
            max_len: Largest length the caller accepts. Always supplied by
                the caller; the codec has no global limit.

        Raises:
            PayloadTooLarge: If the declared length exceeds max_len.
            TruncatedStream: If fewer bytes follow than declared.
        """
        start = self._pos
        length = self.read_varint()
        if length > max_len:
            self._pos = start
            raise PayloadTooLarge(length, max_len)
        if self.remaining < length:
            self._pos = start
            raise TruncatedStream(length, self.remaining)
        return self.read_bytes(length)

    def assert_eof(self) -> None:
        """Raise TrailingGarbage unless every byte has been consumed."""
        if not self.at_end():
            raise TrailingGarbage(self.remaining)
