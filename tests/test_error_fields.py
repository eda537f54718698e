import pytest

from quicklog.error_fields import error, errors, named_error
from quicklog.field import Field, FieldType, skip


class RecordingObject:
    def __init__(self):
        self.fields = {}

    def add_string(self, key, value):
        self.fields[key] = value


class RecordingArray:
    def __init__(self):
        self.items = []

    def append_object(self, obj):
        sub = RecordingObject()
        obj.marshal_log_object(sub)
        self.items.append(sub.fields)


class BrokenArray:
    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    def append_object(self, obj):
        self.calls += 1
        raise self.exc


def test_error_nil_is_skip():
    assert error(None) == skip()


def test_error_constructor():
    fail = ValueError("fail")
    assert error(fail) == Field(key="error", type=FieldType.ERROR, interface=fail)


def test_named_error_nil_is_skip():
    assert named_error("foo", None) == skip()


def test_named_error_constructor():
    fail = ValueError("fail")
    assert named_error("foo", fail) == Field(key="foo", type=FieldType.ERROR, interface=fail)


def test_errors_equality():
    err = ValueError("v")
    assert errors("k", [err]) == errors("k", [err])
    assert errors("k", [err]).type is FieldType.ARRAY_MARSHALER


@pytest.mark.parametrize(
    "errs, expected",
    [
        ([], []),
        (
            [None, ValueError("foo"), None, ValueError("bar")],
            [{"error": "foo"}, {"error": "bar"}],
        ),
    ],
)
def test_error_array_constructor(errs, expected):
    rec = RecordingArray()
    errors("k", errs).interface.marshal_log_array(rec)
    assert rec.items == expected


def test_errors_none_is_empty():
    rec = RecordingArray()
    errors("k", None).interface.marshal_log_array(rec)
    assert rec.items == []


def test_errors_array_handles_rich_errors():
    rec = RecordingArray()
    errors("k", [RuntimeError("egad")]).interface.marshal_log_array(rec)
    assert len(rec.items) == 1
    assert rec.items[0]["error"] == "egad"


def test_err_array_broken_encoder():
    fail_with = RuntimeError("great sadness")
    broken = BrokenArray(fail_with)
    with pytest.raises(RuntimeError) as info:
        errors("errors", [ValueError("foo"), ValueError("bar")]).interface.marshal_log_array(broken)
    assert info.value is fail_with
    assert broken.calls == 1