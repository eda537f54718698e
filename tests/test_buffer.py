import math
import threading
from datetime import datetime, timezone

import pytest

from quicklog.buffer import Buffer, BufferPool


@pytest.mark.parametrize(
    "action, want",
    [
        (lambda b: b.append_byte(ord("v")), "v"),
        (lambda b: b.append_string("foo"), "foo"),
        (lambda b: b.append_int(42), "42"),
        (lambda b: b.append_int(-42), "-42"),
        (lambda b: b.append_uint(42), "42"),
        (lambda b: b.append_bool(True), "true"),
        (lambda b: b.append_bool(False), "false"),
        (lambda b: b.append_float(3.14, 64), "3.14"),
        (lambda b: b.append_float(0.10000000149011612, 32), "0.1"),
        (lambda b: b.write(b"foo"), "foo"),
        (
            lambda b: b.append_time(
                datetime(2000, 1, 2, 3, 4, 5, 6, tzinfo=timezone.utc),
                "%Y-%m-%dT%H:%M:%SZ",
            ),
            "2000-01-02T03:04:05Z",
        ),
        (lambda b: b.write_byte(ord("v")), "v"),
        (lambda b: b.write_string("foo"), "foo"),
        (lambda b: b.append_bytes(b"ab"), "ab"),
    ],
)
def test_buffer_writes(action, want):
    buf = BufferPool().get()
    action(buf)
    assert str(buf) == want
    assert buf.to_bytes() == want.encode()
    assert len(buf) == len(want)


def test_append_float_rejects_bad_bit_size():
    buf = BufferPool().get()
    with pytest.raises(ValueError):
        buf.append_float(1.0, 16)


def test_append_uint_rejects_negative():
    buf = BufferPool().get()
    with pytest.raises(ValueError):
        buf.append_uint(-1)


def test_write_returns_counts():
    buf = BufferPool().get()
    assert buf.write(b"abc") == 3
    assert buf.write_string("é") == 2
    assert len(buf) == 5


def test_trim_newline():
    buf = BufferPool().get()
    buf.append_string("line\n\n")
    buf.trim_newline()
    assert str(buf) == "line\n"
    buf.trim_newline()
    buf.trim_newline()
    assert str(buf) == "line"


def test_trim_newline_on_empty_buffer():
    buf = BufferPool().get()
    buf.trim_newline()
    assert len(buf) == 0


def test_reset_empties():
    buf = BufferPool().get()
    buf.append_string("data")
    buf.reset()
    assert buf.to_bytes() == b""


def test_free_without_pool_raises():
    with pytest.raises(RuntimeError):
        Buffer().free()


def test_pool_reuses_buffers_reset():
    pool = BufferPool()
    buf = pool.get()
    buf.append_string("dummy")
    buf.free()
    again = pool.get()
    assert again is buf
    assert len(again) == 0


def test_buffers_concurrent_use():
    dummy = "dummy data"
    pool = BufferPool()
    observed = []
    lock = threading.Lock()

    def work():
        local = []
        for _ in range(100):
            buf = pool.get()
            before = len(buf)
            buf.append_string(dummy)
            local.append((before, len(buf), str(buf)))
            buf.free()
        with lock:
            observed.extend(local)

    threads = [threading.Thread(target=work) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert observed == [(0, len(dummy), dummy)] * 1000
    assert len(pool.get()) == 0