"""Assertion primitives.

Every function takes the test's :class:`~assertkit.sink.ReportingSink`
first. Soft assertions record a failure and return ``False`` so the test can
carry on; hard assertions (:func:`is_type`, :func:`not_nil`) record and then
halt the current test, because the code after them could not run safely.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from assertkit import equality, errors
from assertkit.equality import Option, differences, structural_equal
from assertkit.messages import is_message, semantic_equal
from assertkit.sink import ReportingSink


T = TypeVar("T")

# A deferred assertion, e.g. a column in a table-driven test.
Want = Callable[[ReportingSink, T], bool]


def mismatch_message(expected: Any, actual: Any) -> str:
    return f"{type(actual).__qualname__} = {actual!r}, want {expected!r}"


def default_equal(expected: Any, actual: Any, *opts: Option) -> bool:
    """Message types compare semantically, everything else structurally."""
    if is_message(expected) or is_message(actual):
        return semantic_equal(expected, actual)
    return structural_equal(expected, actual, *opts)


def equals(sink: ReportingSink, expected: T, actual: T, *opts: Option) -> bool:
    """Soft-assert that ``actual`` equals ``expected``.

    Protobuf messages, pydantic models and other message types are compared
    by their semantic content. Anything else is compared structurally,
    honoring ``opts`` (:class:`~assertkit.equality.IgnoreField`,
    :class:`~assertkit.equality.Comparer`,
    :class:`~assertkit.equality.TreatPrivate`).
    """
    if default_equal(expected, actual, *opts):
        return True

    message = mismatch_message(expected, actual)
    nested = [d for d in differences(expected, actual, *opts) if d.path]
    if nested:
        message += "\n" + "\n".join(f"  {d.render()}" for d in nested)
    sink.record_failure(message)
    return False


def equals_func(
    sink: ReportingSink,
    expected: T,
    actual: T,
    equals: Callable[[T, T], bool],
) -> bool:
    """Soft-assert equality using a caller-supplied ``equals(expected, actual)``."""
    if not callable(equals):
        raise TypeError(f"equals must be callable, got {type(equals).__qualname__}")

    ok = bool(equals(expected, actual))
    if not ok:
        sink.record_failure(mismatch_message(expected, actual))
    return ok


def not_equals(sink: ReportingSink, expected: T, actual: T, *opts: Option) -> bool:
    """Soft-assert that ``actual`` differs from ``expected`` (see :func:`equals`)."""
    ok = not default_equal(expected, actual, *opts)
    if not ok:
        sink.record_failure(mismatch_message(expected, actual))
    return ok


def is_type(sink: ReportingSink, value: Any, type_: type[T] | tuple[type, ...]) -> T:
    """Return ``value`` if it is an instance of ``type_``, otherwise halt the test."""
    names = _type_names(type_)
    if isinstance(value, type_):
        return value

    # We cannot continue: the caller is about to use value as a type_
    sink.record_failure(f"{value!r} is not of type {names}")
    sink.halt()


def no_error(sink: ReportingSink, err: BaseException | None) -> bool:
    """Soft-assert that no error occurred."""
    return equals(sink, None, err)


def not_nil(sink: ReportingSink, value: Any) -> bool:
    """Assert that ``value`` is not None, halting the test if it is."""
    if not equality.is_nil(value):
        return True

    # We cannot continue, the next use of value would fail anyway
    sink.record_failure(f"variable of type {type(value).__qualname__} should not be nil")
    sink.halt()


def is_nil(sink: ReportingSink, value: Any) -> bool:
    """Soft-assert that ``value`` is None."""
    ok = equality.is_nil(value)
    if not ok:
        sink.record_failure(mismatch_message(None, value))
    return ok


def error_is(
    sink: ReportingSink, expected: BaseException | None, actual: BaseException | None
) -> bool:
    """Soft-assert that ``actual`` is ``expected`` or wraps it somewhere in its chain."""
    return equals_func(
        sink, expected, actual, lambda expected, actual: errors.error_is(actual, expected)
    )


def check_all(sink: ReportingSink, value: T, *wants: Want[T]) -> bool:
    """Run every want against ``value``; all of them run even after a failure."""
    results = [want(sink, value) for want in wants]
    return all(results)


def _type_names(type_: type | tuple[type, ...]) -> str:
    if isinstance(type_, tuple):
        if not type_ or not all(isinstance(t, type) for t in type_):
            raise TypeError(f"type_ must be a class or a tuple of classes, got {type_!r}")
        return " | ".join(t.__qualname__ for t in type_)
    if not isinstance(type_, type):
        raise TypeError(f"type_ must be a class or a tuple of classes, got {type_!r}")
    return type_.__qualname__
