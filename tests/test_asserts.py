"""Tests for the assertion primitives."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from google.protobuf import wrappers_pb2
from pydantic import BaseModel

from assertkit.asserts import (
    check_all,
    equals,
    equals_func,
    error_is,
    is_nil,
    is_type,
    no_error,
    not_equals,
    not_nil,
)
from assertkit.equality import Comparer, IgnoreField
from assertkit.sink import RecordingSink, TestHalted, run_with_sink


@dataclass
class SomeStruct:
    a: int
    b: str


class Account(BaseModel):
    owner: str
    balance: int = 0


class Money:
    def __init__(self, amount, currency):
        self.amount = amount
        self.currency = currency

    def semantic_equals(self, other):
        return self.currency == other.currency and self.amount == other.amount

    def __repr__(self):
        return f"Money({self.amount}, {self.currency!r})"


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink("unit")


# --- equals ---


def test_equals_happy_path(sink):
    assert equals(sink, SomeStruct(a=1, b="foo"), SomeStruct(a=1, b="foo")) is True
    assert sink.failures == []


def test_equals_sad_path(sink):
    assert equals(sink, SomeStruct(a=1, b="foo"), SomeStruct(a=2, b="bar")) is False
    assert len(sink.failures) == 1

    message = sink.failures[0]
    got, want = message.split(", want ", 1)
    assert got.startswith("SomeStruct = ")
    assert "2" in got and "bar" in got
    assert "1" in want and "foo" in want


def test_equals_semantic_message_without_field_view(sink):
    assert equals(sink, Money(1, "EUR"), Money(2, "EUR")) is False
    assert sink.failures == ["Money = Money(2, 'EUR'), want Money(1, 'EUR')"]
    assert equals(sink, Money(1, "EUR"), Money(1, "EUR")) is True
    assert len(sink.failures) == 1


def test_equals_message_lists_nested_differences(sink):
    equals(sink, SomeStruct(a=1, b="foo"), SomeStruct(a=2, b="foo"))
    lines = sink.failures[0].splitlines()
    assert lines[1].strip() == "a: got 2, want 1"
    assert len(lines) == 2


@pytest.mark.parametrize(
    "value",
    [0, "", "text", [1, 2], {"k": [1, {"n": None}]}, (1, "x"), {1, 2}, None, SomeStruct(1, "x")],
)
def test_equals_is_reflexive(sink, value):
    assert equals(sink, value, value) is True
    assert sink.failures == []


def test_equals_continues_after_failure(sink):
    def body(s):
        equals(s, 1, 2)
        equals(s, "a", "b")
        equals(s, 3, 3)

    run_with_sink(body, sink)
    assert len(sink.failures) == 2
    assert sink.halted is False


def test_equals_does_not_coerce_numeric_types(sink):
    assert equals(sink, 1, 1.0) is False
    assert sink.failures == ["float = 1.0, want 1"]


def test_equals_with_ignore_field(sink):
    expected = {"id": 1, "created": "2023-01-01"}
    actual = {"id": 1, "created": "2024-06-30"}
    assert equals(sink, expected, actual, IgnoreField("created")) is True
    assert sink.failures == []


def test_equals_with_comparer(sink):
    close = Comparer(float, lambda want, got: abs(want - got) < 1e-6)
    assert equals(sink, [0.1 + 0.2], [0.3], close) is True
    assert sink.failures == []


def test_equals_does_not_mutate_inputs(sink):
    expected = {"items": [1, 2, 3]}
    actual = {"items": [1, 2]}
    equals(sink, expected, actual)
    assert expected == {"items": [1, 2, 3]}
    assert actual == {"items": [1, 2]}


def test_equals_uses_message_equality_for_pydantic(sink):
    implicit = Account(owner="ann")
    explicit = Account(owner="ann", balance=0)
    assert implicit.model_fields_set != explicit.model_fields_set
    assert equals(sink, implicit, explicit) is True
    assert sink.failures == []


def test_equals_uses_message_equality_for_protobuf(sink):
    assert equals(sink, wrappers_pb2.Int64Value(value=7), wrappers_pb2.Int64Value(value=7))
    assert not equals(sink, wrappers_pb2.Int64Value(value=7), wrappers_pb2.Int64Value(value=8))
    assert len(sink.failures) == 1
    assert sink.failures[0].startswith("Int64Value = ")


def test_equals_message_against_non_message(sink):
    assert equals(sink, Account(owner="ann"), {"owner": "ann", "balance": 0}) is False
    assert len(sink.failures) == 1


# --- not_equals ---


@pytest.mark.parametrize(
    "expected, actual",
    [
        (1, 1),
        (1, 2),
        ("a", "a"),
        (SomeStruct(1, "foo"), SomeStruct(1, "foo")),
        (SomeStruct(1, "foo"), SomeStruct(2, "bar")),
        (None, None),
        (None, 0),
        (Account(owner="ann"), Account(owner="ann", balance=0)),
        (Account(owner="ann"), Account(owner="bob")),
    ],
)
def test_not_equals_is_complement_of_equals(expected, actual):
    eq_sink = RecordingSink()
    ne_sink = RecordingSink()
    eq = equals(eq_sink, expected, actual)
    ne = not_equals(ne_sink, expected, actual)
    assert eq is not ne
    assert len(eq_sink.failures) + len(ne_sink.failures) == 1


def test_not_equals_failure_message(sink):
    assert not_equals(sink, 5, 5) is False
    assert sink.failures == ["int = 5, want 5"]


# --- equals_func ---


def test_equals_func_bypasses_default_policy(sink):
    calls = []

    def same_length(expected, actual):
        calls.append((expected, actual))
        return len(expected) == len(actual)

    assert equals_func(sink, "abc", "xyz", same_length) is True
    assert calls == [("abc", "xyz")]
    assert sink.failures == []


def test_equals_func_records_failure(sink):
    assert equals_func(sink, "abc", "xy", lambda e, a: len(e) == len(a)) is False
    assert sink.failures == ["str = 'xy', want 'abc'"]


def test_equals_func_requires_callable(sink):
    with pytest.raises(TypeError, match="callable"):
        equals_func(sink, 1, 1, "not a function")


# --- is_type ---


def test_is_type_returns_value_unchanged(sink):
    value = SomeStruct(1, "foo")
    assert is_type(sink, value, SomeStruct) is value
    assert sink.failures == []


def test_is_type_accepts_tuple_of_types(sink):
    assert is_type(sink, 3, (str, int)) == 3


def test_is_type_halts_on_mismatch(sink):
    reached = []

    def body(s):
        is_type(s, "text", int)
        reached.append(True)

    run_with_sink(body, sink)
    assert reached == []
    assert sink.halted is True
    assert sink.failures == ["'text' is not of type int"]


def test_is_type_halt_is_not_caught_by_except_exception(sink):
    with pytest.raises(TestHalted):
        try:
            is_type(sink, None, SomeStruct)
        except Exception:
            pytest.fail("halt must not be an Exception")


def test_is_type_rejects_non_class(sink):
    with pytest.raises(TypeError):
        is_type(sink, 1, "int")


# --- nil checks ---


def test_not_nil_passes_for_values(sink):
    for value in (0, "", [], {}, False, SomeStruct(0, "")):
        assert not_nil(sink, value) is True
    assert sink.failures == []


def test_not_nil_halts_on_none(sink):
    reached = []

    def body(s):
        not_nil(s, None)
        reached.append(True)

    run_with_sink(body, sink)
    assert reached == []
    assert sink.halted is True
    assert sink.failures == ["variable of type NoneType should not be nil"]


def test_is_nil_soft_failure(sink):
    reached = []

    def body(s):
        is_nil(s, SomeStruct(1, "x"))
        reached.append(True)

    run_with_sink(body, sink)
    assert reached == [True]
    assert sink.halted is False
    assert len(sink.failures) == 1
    assert sink.failures[0].endswith("want None")


def test_is_nil_passes_for_none(sink):
    assert is_nil(sink, None) is True
    assert sink.failures == []


def test_no_error(sink):
    assert no_error(sink, None) is True
    assert no_error(sink, ValueError("boom")) is False
    assert sink.failures == ["ValueError = ValueError('boom'), want None"]


# --- error_is ---


def _wrap(err: BaseException, layers: int) -> BaseException:
    for i in range(layers):
        try:
            raise RuntimeError(f"layer {i}") from err
        except RuntimeError as wrapped:
            err = wrapped
    return err


@pytest.mark.parametrize("layers", [0, 1, 2, 5])
def test_error_is_walks_wrapped_chain(sink, layers):
    root = KeyError("missing")
    assert error_is(sink, root, _wrap(root, layers)) is True
    assert sink.failures == []


def test_error_is_distinct_errors_with_same_text(sink):
    assert error_is(sink, ValueError("boom"), ValueError("boom")) is False
    assert len(sink.failures) == 1
    assert sink.failures[0].startswith("ValueError = ")


def test_error_is_none(sink):
    assert error_is(sink, None, None) is True
    assert error_is(sink, ValueError("x"), None) is False
    assert len(sink.failures) == 1


# --- check_all / Want ---


def test_check_all_runs_every_want(sink):
    def positive(s, v):
        return equals_func(s, "positive", v, lambda _, got: got > 0)

    def even(s, v):
        return equals_func(s, "even", v, lambda _, got: got % 2 == 0)

    def small(s, v):
        return equals_func(s, "small", v, lambda _, got: got < 10)

    assert check_all(sink, 4, positive, even, small) is True
    assert check_all(sink, -3, positive, even, small) is False
    assert len(sink.failures) == 2
