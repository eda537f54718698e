"""A growable byte buffer with number, bool and time formatters, and a pool to reuse buffers."""

from __future__ import annotations

import math
import struct
import threading
from datetime import datetime
from decimal import Decimal

__all__ = ["Buffer", "BufferPool"]


def _to_float32(value: float) -> float:
    """Round a float to the nearest single-precision value."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _shortest_digits(value: float, bit_size: int) -> str:
    """Shortest decimal text that reads back as the same value at the given size."""
    if bit_size == 64:
        return repr(value)
    single = _to_float32(value)
    for precision in range(1, 10):
        text = format(single, f".{precision}g")
        if _to_float32(float(text)) == single:
            return text
    return repr(single)


def _format_float(value: float, bit_size: int) -> str:
    """Format a float in plain decimal notation, never with an exponent."""
    if bit_size not in (32, 64):
        raise ValueError(f"bit size must be 32 or 64, not {bit_size}")
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(_shortest_digits(value, bit_size)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class Buffer:
    """A growable byte sequence meant to be taken from and returned to a BufferPool."""

    __slots__ = ("_bs", "_pool")

    def __init__(self, *, pool: BufferPool | None = None) -> None:
        self._bs = bytearray()
        self._pool = pool

    def append_byte(self, v: int) -> None:
        """Append a single byte given as an integer from 0 to 255."""
        self._bs.append(v)

    def append_bytes(self, v: bytes) -> None:
        """Append a sequence of bytes."""
        self._bs.extend(v)

    def append_string(self, s: str) -> None:
        """Append a string, encoded as UTF-8."""
        self._bs.extend(s.encode("utf-8"))

    def append_int(self, i: int) -> None:
        """Append an integer in base 10."""
        self._bs.extend(str(int(i)).encode("ascii"))

    def append_uint(self, i: int) -> None:
        """Append a non-negative integer in base 10."""
        if i < 0:
            raise ValueError(f"unsigned integer cannot be negative: {i}")
        self._bs.extend(str(int(i)).encode("ascii"))

    def append_bool(self, v: bool) -> None:
        """Append ``true`` or ``false``."""
        self._bs.extend(b"true" if v else b"false")

    def append_float(self, f: float, bit_size: int) -> None:
        """Append the shortest plain-decimal form of a 32- or 64-bit float.

        NaN and infinities are written as ``NaN``, ``+Inf`` and ``-Inf``, unquoted.
        """
        self._bs.extend(_format_float(float(f), bit_size).encode("ascii"))

    def append_time(self, t: datetime, layout: str) -> None:
        """Append a datetime formatted with a strftime layout."""
        self._bs.extend(t.strftime(layout).encode("utf-8"))

    def __len__(self) -> int:
        return len(self._bs)

    def to_bytes(self) -> bytes:
        """Return a copy of the buffer's contents."""
        return bytes(self._bs)

    def __str__(self) -> str:
        return self._bs.decode("utf-8", errors="replace")

    def reset(self) -> None:
        """Empty the buffer."""
        self._bs.clear()

    def write(self, bs: bytes) -> int:
        """Append bytes and return how many were written."""
        self._bs.extend(bs)
        return len(bs)

    def write_byte(self, v: int) -> None:
        """Append a single byte."""
        self.append_byte(v)

    def write_string(self, s: str) -> int:
        """Append a string and return the number of bytes written."""
        encoded = s.encode("utf-8")
        self._bs.extend(encoded)
        return len(encoded)

    def trim_newline(self) -> None:
        """Remove one trailing newline, if there is one."""
        if self._bs.endswith(b"\n"):
            del self._bs[-1]

    def free(self) -> None:
        """Return the buffer to its pool. It must not be used afterwards."""
        if self._pool is None:
            raise RuntimeError("buffer does not belong to a pool")
        self._pool._put(self)


class BufferPool:
    """A thread-safe store of reusable buffers."""

    def __init__(self) -> None:
        self._free: list[Buffer] = []
        self._lock = threading.Lock()

    def get(self) -> Buffer:
        """Take an empty buffer from the pool, creating one if none is free."""
        with self._lock:
            buf = self._free.pop() if self._free else None
        if buf is None:
            buf = Buffer(pool=self)
        buf.reset()
        buf._pool = self
        return buf

    def _put(self, buf: Buffer) -> None:
        with self._lock:
            self._free.append(buf)