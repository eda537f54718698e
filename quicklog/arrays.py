"""Field constructors for sequences of values, marshaled lazily element by element."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Iterator

from quicklog.field import Field, FieldType

__all__ = [
    "array",
    "bools",
    "byte_strings",
    "complex128s",
    "complex64s",
    "durations",
    "float64s",
    "float32s",
    "ints",
    "int64s",
    "int32s",
    "int16s",
    "int8s",
    "objects",
    "object_values",
    "strings",
    "stringers",
    "times",
    "uints",
    "uint64s",
    "uint32s",
    "uint16s",
    "uint8s",
    "uintptrs",
]


@dataclass(frozen=True)
class _TypedArray:
    """A sequence of values appended one by one with a single encoder method."""

    values: tuple[Any, ...]
    appender: str

    def marshal_log_array(self, arr: Any) -> None:
        append = getattr(arr, self.appender)
        for value in self.values:
            append(value)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class _ObjectArray:
    """A sequence of objects that know how to log themselves."""

    values: tuple[Any, ...]

    def marshal_log_array(self, arr: Any) -> None:
        for obj in self.values:
            arr.append_object(obj)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class _StringerArray:
    """A sequence of objects logged through their ``str()`` form."""

    values: tuple[Any, ...]

    def marshal_log_array(self, arr: Any) -> None:
        for obj in self.values:
            arr.append_string(str(obj))

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


def _items(values: Iterable[Any] | None) -> tuple[Any, ...]:
    return tuple(values) if values is not None else ()


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return float("inf") if value > 0 else float("-inf")


def _ranged(values: Iterable[int] | None, bits: int, signed: bool, kind: str) -> tuple[int, ...]:
    if signed:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        low, high = 0, 2**bits - 1
    checked = []
    for value in _items(values):
        if not low <= value <= high:
            raise ValueError(f"{kind} value out of range: {value}")
        checked.append(int(value))
    return tuple(checked)


def _nanoseconds(value: timedelta | int) -> int:
    if isinstance(value, timedelta):
        nanos = (value.days * 86400 + value.seconds) * 10**9 + value.microseconds * 1000
    else:
        nanos = int(value)
    if not -(2**63) <= nanos <= 2**63 - 1:
        raise ValueError(f"duration value out of range: {value}")
    return nanos


def array(key: str, val: Any) -> Field:
    """A field holding an object with a ``marshal_log_array`` method, called lazily."""
    return Field(key=key, type=FieldType.ARRAY_MARSHALER, interface=val)


def bools(key: str, values: Iterable[bool] | None) -> Field:
    """A sequence of booleans."""
    return array(key, _TypedArray(tuple(bool(v) for v in _items(values)), "append_bool"))


def byte_strings(key: str, values: Iterable[bytes] | None) -> Field:
    """A sequence of UTF-8 texts given as bytes."""
    return array(key, _TypedArray(tuple(bytes(v) for v in _items(values)), "append_byte_string"))


def complex128s(key: str, values: Iterable[complex] | None) -> Field:
    """A sequence of double-precision complex numbers."""
    return array(key, _TypedArray(tuple(complex(v) for v in _items(values)), "append_complex128"))


def complex64s(key: str, values: Iterable[complex] | None) -> Field:
    """A sequence of complex numbers whose parts are rounded to single precision."""
    rounded = tuple(
        complex(_to_float32(complex(v).real), _to_float32(complex(v).imag)) for v in _items(values)
    )
    return array(key, _TypedArray(rounded, "append_complex64"))


def durations(key: str, values: Iterable[timedelta | int] | None) -> Field:
    """A sequence of durations, given as timedeltas or nanoseconds, appended as nanoseconds."""
    return array(key, _TypedArray(tuple(_nanoseconds(v) for v in _items(values)), "append_duration"))


def float64s(key: str, values: Iterable[float] | None) -> Field:
    """A sequence of double-precision floats."""
    return array(key, _TypedArray(tuple(float(v) for v in _items(values)), "append_float64"))


def float32s(key: str, values: Iterable[float] | None) -> Field:
    """A sequence of floats rounded to single precision."""
    return array(
        key, _TypedArray(tuple(_to_float32(float(v)) for v in _items(values)), "append_float32")
    )


def ints(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of platform integers."""
    return array(key, _TypedArray(_ranged(values, 64, True, "int"), "append_int"))


def int64s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 64-bit signed integers."""
    return array(key, _TypedArray(_ranged(values, 64, True, "int64"), "append_int64"))


def int32s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 32-bit signed integers."""
    return array(key, _TypedArray(_ranged(values, 32, True, "int32"), "append_int32"))


def int16s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 16-bit signed integers."""
    return array(key, _TypedArray(_ranged(values, 16, True, "int16"), "append_int16"))


def int8s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 8-bit signed integers."""
    return array(key, _TypedArray(_ranged(values, 8, True, "int8"), "append_int8"))


def objects(key: str, values: Iterable[Any] | None) -> Field:
    """A sequence of objects with a ``marshal_log_object`` method.

    Marshaling stops at the first object that raises, and the error propagates.
    """
    return array(key, _ObjectArray(_items(values)))


def object_values(key: str, values: Iterable[Any] | None) -> Field:
    """A sequence of loggable objects; the same as ``objects``."""
    return array(key, _ObjectArray(_items(values)))


def strings(key: str, values: Iterable[str] | None) -> Field:
    """A sequence of texts."""
    return array(key, _TypedArray(_items(values), "append_string"))


def stringers(key: str, values: Iterable[Any] | None) -> Field:
    """A sequence of objects logged as their ``str()`` output."""
    return array(key, _StringerArray(_items(values)))


def times(key: str, values: Iterable[datetime] | None) -> Field:
    """A sequence of datetimes."""
    return array(key, _TypedArray(_items(values), "append_time"))


def uints(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of platform unsigned integers."""
    return array(key, _TypedArray(_ranged(values, 64, False, "uint"), "append_uint"))


def uint64s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 64-bit unsigned integers."""
    return array(key, _TypedArray(_ranged(values, 64, False, "uint64"), "append_uint64"))


def uint32s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 32-bit unsigned integers."""
    return array(key, _TypedArray(_ranged(values, 32, False, "uint32"), "append_uint32"))


def uint16s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 16-bit unsigned integers."""
    return array(key, _TypedArray(_ranged(values, 16, False, "uint16"), "append_uint16"))


def uint8s(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of 8-bit unsigned integers."""
    return array(key, _TypedArray(_ranged(values, 8, False, "uint8"), "append_uint8"))


def uintptrs(key: str, values: Iterable[int] | None) -> Field:
    """A sequence of pointer-sized addresses."""
    return array(key, _TypedArray(_ranged(values, 64, False, "uintptr"), "append_uintptr"))