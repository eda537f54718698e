"""Field constructors for exceptions and sequences of exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from quicklog.arrays import array
from quicklog.field import Field, FieldType, skip

__all__ = ["error", "named_error", "errors"]


def error(err: BaseException | None) -> Field:
    """Shorthand for ``named_error("error", err)``."""
    return named_error("error", err)


def named_error(key: str, err: BaseException | None) -> Field:
    """A field holding an exception under ``key``; a no-op field when ``err`` is None."""
    if err is None:
        return skip()
    return Field(key=key, type=FieldType.ERROR, interface=err)


@dataclass(frozen=True)
class _ErrorElement:
    """One exception logged as an object with an ``error`` entry."""

    error: BaseException

    def marshal_log_object(self, enc: Any) -> None:
        enc.add_string("error", str(self.error))


@dataclass(frozen=True)
class _ErrorArray:
    """A sequence of exceptions; None entries are left out."""

    errs: tuple[BaseException | None, ...]

    def marshal_log_array(self, arr: Any) -> None:
        for err in self.errs:
            if err is None:
                continue
            arr.append_object(_ErrorElement(err))

    def __iter__(self) -> Iterator[BaseException | None]:
        return iter(self.errs)

    def __len__(self) -> int:
        return len(self.errs)


def errors(key: str, errs: Iterable[BaseException | None] | None) -> Field:
    """A field holding a sequence of exceptions, each logged as an object."""
    return array(key, _ErrorArray(tuple(errs) if errs is not None else ()))