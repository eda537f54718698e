# quicklog

Building blocks for structured logging: typed fields that describe a value
and how it should be encoded, constructors for sequences and exceptions, a
helper that picks the right field for any value, and a pooled byte buffer
for assembling encoded output.

A field only records its key, a `FieldType` and the value. Turning it into
text is left to whatever encoder reads it.

## Fields

`quicklog.field` defines the `Field` dataclass (`key`, `type`, `integer`,
`string`, `interface`), the `FieldType` enum, and one constructor per kind
of value:

```python
from quicklog.field import string, int_, boolean, duration, timestamp, dict_

fields = [
    string("url", "http://example.com/health"),
    int_("attempt", 3),
    boolean("retry", True),
    dict_("request", string("method", "GET"), int_("status", 200)),
]
```

- Integers go into `integer`. The sized constructors (`int64`, `int32`,
  `int16`, `int8`, `uint`, `uint64`, `uint32`, `uint16`, `uint8`,
  `uintptr`) raise `ValueError` for values outside their range; unsigned
  64-bit values above the signed range are stored wrapped.
- `float64` and `float32` store the IEEE 754 bit pattern in `integer`;
  `complex128` and `complex64` keep the number in `interface`, the latter
  rounded to single precision.
- `boolean` stores 1 or 0. `string` stores text in `string`. `binary`
  holds opaque bytes, `byte_string` UTF-8 text held as bytes.
- `timestamp` takes a `datetime` (naive ones count as UTC). Times that fit
  in 64 bits of Unix nanoseconds are stored as that number with their
  tzinfo; others keep the whole datetime under `FieldType.TIME_FULL`.
- `duration` takes a `timedelta` or a number of nanoseconds.
- Passing `None` to any of these value constructors gives a reflected
  field holding `None`.

Other helpers:

- `skip()` – a field of type `SKIP`.
- `namespace(key)` – a field of type `NAMESPACE`.
- `object_(key, obj)` and `inline(obj)` – an object field, under a key or
  for the current scope; `object_` with `None` gives a reflected `None`.
- `dict_(key, *fields)` and `dict_object(*fields)` – an object made of a
  fixed list of fields; the object is iterable and has a length.
- `stringer(key, obj)` – logged through `str(obj)`.
- `reflect(key, value)` – any value, left for generic serialization.

### Sequences

`quicklog.arrays` builds `ARRAY_MARSHALER` fields:

```python
from quicklog.arrays import ints, strings, bools, objects

ints("ids", [1, 2, 3])
strings("tags", ["alpha", "beta"])
bools("flags", [True, False])
```

There is one constructor per element kind (`bools`, `byte_strings`,
`complex128s`, `complex64s`, `durations`, `float64s`, `float32s`, `ints`,
`int64s` … `int8s`, `uints`, `uint64s` … `uint8s`, `uintptrs`, `strings`,
`times`), plus `objects` / `object_values` for objects that have a
`marshal_log_object` method, and `stringers` for objects logged through
`str()`. Integer kinds check their range and raise `ValueError`.

The value stored in each field has a `marshal_log_array(arr)` method that
calls one method of `arr` per element: `append_bool`, `append_int64`,
`append_string`, `append_object` and so on, named after the element kind.
`array(key, marshaler)` wraps any object of your own with such a method.

### Errors

```python
from quicklog.error_fields import error, named_error, errors

error(ValueError("bad input"))            # stored under "error"
named_error("cause", KeyError("missing"))  # stored under "cause"
errors("failures", [OSError("a"), None, OSError("b")])
```

`error` and `named_error` return `skip()` for `None`. The value of an
`errors` field appends each non-`None` exception with `append_object` as an
object whose `marshal_log_object(enc)` calls `enc.add_string("error",
str(exc))`.

### Choosing a field automatically

`quicklog.anyfield.any_field` picks the most specific constructor:

```python
from quicklog.anyfield import any_field

any_field("count", 7)          # same as int_("count", 7)
any_field("name", "phil")      # same as string("name", "phil")
any_field("blob", b"\x01")     # same as binary("blob", b"\x01")
```

Objects with `marshal_log_object` or `marshal_log_array` become object or
array fields; booleans, numbers, text, bytes, datetimes, timedeltas and
exceptions get their typed fields; non-empty lists and tuples whose items
share one of those kinds become array fields (a list of fields becomes a
dict). Integers beyond the signed 64-bit range become `uint64` fields where
they fit. Objects with their own `__str__` become `stringer` fields, and
everything else, including `None`, is reflected.

## Buffers

`quicklog.buffer.BufferPool` hands out reusable `Buffer` objects:

```python
from quicklog.buffer import BufferPool

pool = BufferPool()
buf = pool.get()
buf.append_string("n=")
buf.append_int(42)
buf.append_byte(ord(" "))
buf.append_float(3.14, 64)
assert str(buf) == "n=42 3.14"
buf.free()  # back to the pool; do not use it afterwards
```

Buffers from `get()` are always empty. `append_float` writes plain decimal
without an exponent, `NaN`, `+Inf` and `-Inf` for special values, and takes
a bit size of 32 or 64. `append_time` formats a `datetime` with a
`strftime` layout. `write` and `write_string` return the number of bytes
written, `to_bytes()` returns a copy of the contents, `len()` their length,
`reset()` empties the buffer and `trim_newline()` drops one trailing
newline. `free()` on a buffer that does not belong to a pool raises
`RuntimeError`.

## What is not included

This package has no logger, no encoders (JSON or console), no log levels
and no output sinks. It builds fields and buffers; writing entries
anywhere needs an encoder supplied by you that reads `Field` objects and
provides the `append_*` and `add_string` methods the array and error values
call.