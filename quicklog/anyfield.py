"""Choose the best typed field for an arbitrary value."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Sequence

from quicklog.arrays import (
    array,
    bools,
    complex128s,
    durations,
    float64s,
    ints,
    strings,
    times,
)
from quicklog.error_fields import errors, named_error
from quicklog.field import (
    Field,
    _DictObject,
    binary,
    boolean,
    complex128,
    dict_,
    duration,
    float64,
    int_,
    object_,
    reflect,
    string,
    stringer,
    timestamp,
    uint64,
)

__all__ = ["any_field"]

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1


def _fits_int64(value: int) -> bool:
    return _INT64_MIN <= value <= _INT64_MAX


def _all_of(items: Sequence[Any], kinds: type | tuple[type, ...], exclude: tuple[type, ...] = ()) -> bool:
    return all(isinstance(item, kinds) and not isinstance(item, exclude) for item in items)


def _dict_from(key: str, items: Sequence[Field]) -> Field:
    return dict_(key, *items)


_SEQUENCE_RULES: tuple[tuple[type | tuple[type, ...], tuple[type, ...], Callable[[str, Any], Field]], ...] = (
    (Field, (), _dict_from),
    (bool, (), bools),
    (complex, (), complex128s),
    (float, (), float64s),
    (str, (), strings),
    (datetime, (), times),
    (timedelta, (), durations),
)


def _sequence_field(key: str, items: Sequence[Any]) -> Field:
    if not items:
        return reflect(key, items)
    for kinds, exclude, build in _SEQUENCE_RULES:
        if _all_of(items, kinds, exclude):
            return build(key, items)
    if _all_of(items, int, (bool,)) and all(_fits_int64(i) for i in items):
        return ints(key, items)
    if _all_of(items, (BaseException, type(None))) and any(i is not None for i in items):
        return errors(key, items)
    return reflect(key, items)


def _has_own_str(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


def any_field(key: str, value: Any) -> Field:
    """Build the most specific field for ``value``, falling back to a reflected one.

    Objects with ``marshal_log_object`` or ``marshal_log_array`` become object and
    array fields; booleans, numbers, text, bytes, datetimes, timedeltas and
    exceptions get their typed fields; non-empty lists and tuples whose items all
    share one of those types become array fields (a sequence of fields becomes a
    dict); objects that define their own ``__str__`` are logged through it.
    Integers beyond the signed 64-bit range are stored as unsigned 64-bit values
    where they fit. Everything else, including None, is reflected.
    """
    if value is None:
        return reflect(key, None)
    if hasattr(value, "marshal_log_object") or isinstance(value, _DictObject):
        return object_(key, value)
    if hasattr(value, "marshal_log_array"):
        return array(key, value)
    if isinstance(value, bool):
        return boolean(key, value)
    if isinstance(value, complex):
        return complex128(key, value)
    if isinstance(value, float):
        return float64(key, value)
    if isinstance(value, int):
        if _fits_int64(value):
            return int_(key, value)
        if 0 <= value <= _UINT64_MAX:
            return uint64(key, value)
        return reflect(key, value)
    if isinstance(value, str):
        return string(key, value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return binary(key, bytes(value))
    if isinstance(value, datetime):
        return timestamp(key, value)
    if isinstance(value, timedelta):
        return duration(key, value)
    if isinstance(value, BaseException):
        return named_error(key, value)
    if isinstance(value, (list, tuple)):
        return _sequence_field(key, value)
    if _has_own_str(value):
        return stringer(key, value)
    return reflect(key, value)