"""Typed key-value fields and the constructors that build them."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

__all__ = [
    "FieldType",
    "Field",
    "skip",
    "binary",
    "boolean",
    "byte_string",
    "complex128",
    "complex64",
    "float64",
    "float32",
    "int_",
    "int64",
    "int32",
    "int16",
    "int8",
    "string",
    "uint",
    "uint64",
    "uint32",
    "uint16",
    "uint8",
    "uintptr",
    "reflect",
    "namespace",
    "stringer",
    "timestamp",
    "duration",
    "object_",
    "inline",
    "dict_",
    "dict_object",
]

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class FieldType(enum.Enum):
    """How a field's value is stored and should be encoded."""

    UNKNOWN = enum.auto()
    ARRAY_MARSHALER = enum.auto()
    OBJECT_MARSHALER = enum.auto()
    BINARY = enum.auto()
    BOOL = enum.auto()
    BYTE_STRING = enum.auto()
    COMPLEX128 = enum.auto()
    COMPLEX64 = enum.auto()
    DURATION = enum.auto()
    FLOAT64 = enum.auto()
    FLOAT32 = enum.auto()
    INT64 = enum.auto()
    INT32 = enum.auto()
    INT16 = enum.auto()
    INT8 = enum.auto()
    STRING = enum.auto()
    TIME = enum.auto()
    TIME_FULL = enum.auto()
    UINT64 = enum.auto()
    UINT32 = enum.auto()
    UINT16 = enum.auto()
    UINT8 = enum.auto()
    UINTPTR = enum.auto()
    REFLECT = enum.auto()
    NAMESPACE = enum.auto()
    STRINGER = enum.auto()
    ERROR = enum.auto()
    SKIP = enum.auto()
    INLINE_MARSHALER = enum.auto()


@dataclass
class Field:
    """A key with a typed value: numbers in ``integer``, text in ``string``, anything else in ``interface``."""

    key: str = ""
    type: FieldType = FieldType.UNKNOWN
    integer: int = 0
    string: str = ""
    interface: Any = None


@dataclass(frozen=True)
class _DictObject:
    """An object made of a fixed list of fields."""

    fields: tuple[Field, ...] = ()

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


def _in_range(val: int, low: int, high: int, kind: str) -> int:
    if not low <= val <= high:
        raise ValueError(f"{kind} value out of range: {val}")
    return val


def _signed(val: int, bits: int, kind: str) -> int:
    return _in_range(val, -(2 ** (bits - 1)), 2 ** (bits - 1) - 1, kind)


def _unsigned(val: int, bits: int, kind: str) -> int:
    return _in_range(val, 0, 2**bits - 1, kind)


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return float("inf") if value > 0 else float("-inf")


def _nil_field(key: str) -> Field:
    return reflect(key, None)


def skip() -> Field:
    """A field that adds nothing."""
    return Field(type=FieldType.SKIP)


def binary(key: str, val: bytes | None) -> Field:
    """An opaque binary blob."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.BINARY, interface=bytes(val))


def boolean(key: str, val: bool | None) -> Field:
    """A boolean, stored as 1 or 0."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.BOOL, integer=1 if val else 0)


def byte_string(key: str, val: bytes | None) -> Field:
    """UTF-8 text given as bytes."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.BYTE_STRING, interface=bytes(val))


def complex128(key: str, val: complex | None) -> Field:
    """A double-precision complex number."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.COMPLEX128, interface=complex(val))


def complex64(key: str, val: complex | None) -> Field:
    """A complex number whose parts are rounded to single precision."""
    if val is None:
        return _nil_field(key)
    val = complex(val)
    rounded = complex(_to_float32(val.real), _to_float32(val.imag))
    return Field(key=key, type=FieldType.COMPLEX64, interface=rounded)


def float64(key: str, val: float | None) -> Field:
    """A double-precision float, stored as its IEEE 754 bit pattern."""
    if val is None:
        return _nil_field(key)
    bits = struct.unpack("<q", struct.pack("<d", float(val)))[0]
    return Field(key=key, type=FieldType.FLOAT64, integer=bits)


def float32(key: str, val: float | None) -> Field:
    """A single-precision float, stored as its IEEE 754 bit pattern."""
    if val is None:
        return _nil_field(key)
    bits = struct.unpack("<I", struct.pack("<f", _to_float32(float(val))))[0]
    return Field(key=key, type=FieldType.FLOAT32, integer=bits)


def int_(key: str, val: int | None) -> Field:
    """A platform integer, stored as a 64-bit integer."""
    return int64(key, val)


def int64(key: str, val: int | None) -> Field:
    """A 64-bit signed integer."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.INT64, integer=_signed(val, 64, "int64"))


def int32(key: str, val: int | None) -> Field:
    """A 32-bit signed integer."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.INT32, integer=_signed(val, 32, "int32"))


def int16(key: str, val: int | None) -> Field:
    """A 16-bit signed integer."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.INT16, integer=_signed(val, 16, "int16"))


def int8(key: str, val: int | None) -> Field:
    """An 8-bit signed integer."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.INT8, integer=_signed(val, 8, "int8"))


def string(key: str, val: str | None) -> Field:
    """A text value."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.STRING, string=val)


def uint(key: str, val: int | None) -> Field:
    """A platform unsigned integer, stored as a 64-bit unsigned integer."""
    return uint64(key, val)


def _as_int64(val: int) -> int:
    return val - 2**64 if val > _INT64_MAX else val


def uint64(key: str, val: int | None) -> Field:
    """A 64-bit unsigned integer; values above the signed range wrap into ``integer``."""
    if val is None:
        return _nil_field(key)
    val = _unsigned(val, 64, "uint64")
    return Field(key=key, type=FieldType.UINT64, integer=_as_int64(val))


def uint32(key: str, val: int | None) -> Field:
    """A 32-bit unsigned integer."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.UINT32, integer=_unsigned(val, 32, "uint32"))


def uint16(key: str, val: int | None) -> Field:
    """A 16-bit unsigned integer."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.UINT16, integer=_unsigned(val, 16, "uint16"))


def uint8(key: str, val: int | None) -> Field:
    """An 8-bit unsigned integer."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.UINT8, integer=_unsigned(val, 8, "uint8"))


def uintptr(key: str, val: int | None) -> Field:
    """A pointer-sized address."""
    if val is None:
        return _nil_field(key)
    val = _unsigned(val, 64, "uintptr")
    return Field(key=key, type=FieldType.UINTPTR, integer=_as_int64(val))


def reflect(key: str, val: Any) -> Field:
    """An arbitrary object, serialized generically by the encoder."""
    return Field(key=key, type=FieldType.REFLECT, interface=val)


def namespace(key: str) -> Field:
    """Open a named scope; later fields are nested inside it."""
    return Field(key=key, type=FieldType.NAMESPACE)


def stringer(key: str, val: Any) -> Field:
    """An object logged through its ``str()`` form, computed lazily."""
    return Field(key=key, type=FieldType.STRINGER, interface=val)


def _unix_nanos(val: datetime) -> int:
    aware = val if val.tzinfo is not None else val.replace(tzinfo=timezone.utc)
    delta = aware - _EPOCH
    return (delta.days * 86400 + delta.seconds) * 10**9 + delta.microseconds * 1000


def timestamp(key: str, val: datetime | None) -> Field:
    """A point in time.

    Times that fit in 64 bits of Unix nanoseconds are stored as that number with
    their tzinfo; others keep the whole datetime. Naive datetimes count as UTC.
    """
    if val is None:
        return _nil_field(key)
    nanos = _unix_nanos(val)
    if nanos < _INT64_MIN or nanos > _INT64_MAX:
        return Field(key=key, type=FieldType.TIME_FULL, interface=val)
    return Field(key=key, type=FieldType.TIME, integer=nanos, interface=val.tzinfo)


def duration(key: str, val: timedelta | int | None) -> Field:
    """A span of time, given as a timedelta or a number of nanoseconds."""
    if val is None:
        return _nil_field(key)
    if isinstance(val, timedelta):
        nanos = (val.days * 86400 + val.seconds) * 10**9 + val.microseconds * 1000
    else:
        nanos = val
    return Field(key=key, type=FieldType.DURATION, integer=_signed(nanos, 64, "duration"))


def object_(key: str, val: Any) -> Field:
    """A structured object that knows how to log itself."""
    if val is None:
        return _nil_field(key)
    return Field(key=key, type=FieldType.OBJECT_MARSHALER, interface=val)


def inline(val: Any) -> Field:
    """Like object_, but adds the object's entries to the current scope."""
    return Field(type=FieldType.INLINE_MARSHALER, interface=val)


def dict_(key: str, *args: Field) -> Field:
    """An object built from the given fields."""
    return object_(key, _DictObject(tuple(args)))


def dict_object(*args: Field) -> _DictObject:
    """An object made of the given fields, usable wherever an object is expected."""
    return _DictObject(tuple(args))