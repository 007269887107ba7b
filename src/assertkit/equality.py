"""Structural (deep) equality used by the assertion primitives.

The comparator walks both values in lockstep and records every difference
it finds, so the same walk answers :func:`structural_equal` and renders
:func:`diff`.
"""

from __future__ import annotations

import dataclasses
import enum
import re
import types
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from assertkit.messages import is_message, message_fields, semantic_equal

_SEGMENT_RE = re.compile(r"\[[^\]]*\]|[^.\[\]]+")

# never walked attribute by attribute, even without a custom __eq__
_OPAQUE_TYPES = (
    type,
    enum.Enum,
    BaseException,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
)

Path = tuple[str, ...]


class Option:
    """Base class for comparison options."""


@dataclass(frozen=True)
class IgnoreField(Option):
    """Skip the value at ``path``.

    Paths use attribute or string-key names separated by dots and ``[i]``
    for indexes and non-string keys, e.g. ``"items[0].name"``. A ``*``
    segment matches any name, ``[*]`` any index.
    """

    path: str

    def __post_init__(self) -> None:
        if not self.path or not self.path.strip():
            raise ValueError("IgnoreField path must not be empty")
        if format_path(self.segments) != self.path:
            raise ValueError(f"Malformed IgnoreField path: '{self.path}'")

    @property
    def segments(self) -> Path:
        return tuple(_SEGMENT_RE.findall(self.path))

    def matches(self, path: Path) -> bool:
        pattern = self.segments
        if len(pattern) != len(path):
            return False
        for want, got in zip(pattern, path):
            if want == got:
                continue
            if want == "*" and not got.startswith("["):
                continue
            if want == "[*]" and got.startswith("["):
                continue
            return False
        return True


@dataclass(frozen=True)
class Comparer(Option):
    """Compare values of ``type_`` with ``func(expected, actual)``."""

    type_: type
    func: Callable[[Any, Any], bool]

    def applies(self, a: Any, b: Any) -> bool:
        return isinstance(a, self.type_) and isinstance(b, self.type_)


@dataclass(frozen=True)
class TreatPrivate(Option):
    """Whether ``_``-prefixed attributes take part in the comparison."""

    enabled: bool = True


@dataclass
class Difference:
    path: Path
    got: Any
    want: Any
    note: str = ""

    def render(self) -> str:
        where = format_path(self.path)
        if self.note:
            return f"{where}: {self.note}"
        return f"{where}: got {self.got!r}, want {self.want!r}"


def format_path(path: Path) -> str:
    if not path:
        return "(root)"
    out = ""
    for segment in path:
        if segment.startswith("[") or not out:
            out += segment
        else:
            out += "." + segment
    return out


def _key_segment(key: Any) -> str:
    if isinstance(key, str) and key and _SEGMENT_RE.fullmatch(key):
        return key
    return f"[{key!r}]"


class _Comparator:
    def __init__(self, opts: tuple[Option, ...]):
        for opt in opts:
            if not isinstance(opt, Option):
                raise TypeError(f"Unknown comparison option: {opt!r}")
        self.ignored = [o for o in opts if isinstance(o, IgnoreField)]
        self.comparers = [o for o in opts if isinstance(o, Comparer)]
        self.private = any(o.enabled for o in opts if isinstance(o, TreatPrivate))
        self.differences: list[Difference] = []
        self._active: set[tuple[int, int]] = set()

    def compare(self, got: Any, want: Any, path: Path = ()) -> bool:
        if self._is_ignored(path):
            return True

        for comparer in self.comparers:
            if comparer.applies(got, want):
                return self._leaf(bool(comparer.func(want, got)), got, want, path)

        if is_message(got) or is_message(want):
            return self._compare_messages(got, want, path)

        if got is want:
            return True
        if type(got) is not type(want):
            return self._leaf(False, got, want, path)

        key = (id(got), id(want))
        if key in self._active:
            # this pair is already being compared further up
            return True
        self._active.add(key)
        try:
            return self._compare_same_type(got, want, path)
        finally:
            self._active.discard(key)

    def _compare_messages(self, got: Any, want: Any, path: Path) -> bool:
        if semantic_equal(want, got):
            return True
        view_got, view_want = message_fields(got), message_fields(want)
        # types without a field view come back as themselves
        if type(got) is type(want) and view_got is not got:
            before = len(self.differences)
            self.compare(view_got, view_want, path)
            if len(self.differences) > before:
                return False
        return self._leaf(False, got, want, path)

    def _compare_same_type(self, got: Any, want: Any, path: Path) -> bool:
        if isinstance(got, Mapping):
            return self._compare_mappings(got, want, path)
        if isinstance(got, (list, tuple)):
            return self._compare_sequences(got, want, path)
        if dataclasses.is_dataclass(got) and not isinstance(got, type):
            names = [f.name for f in dataclasses.fields(got)]
            return self._compare_attributes(got, want, names, path)
        if _walkable(got):
            names = sorted(set(vars(got)) | set(vars(want)))
            return self._compare_attributes(got, want, names, path)
        try:
            equal = got == want
        except (TypeError, ValueError):
            # e.g. array operands whose shapes do not broadcast
            equal = False
        return self._leaf(equal, got, want, path)

    def _compare_mappings(self, got: Mapping, want: Mapping, path: Path) -> bool:
        ok = True
        for k in want:
            sub = path + (_key_segment(k),)
            if k in got:
                ok = self.compare(got[k], want[k], sub) and ok
            elif not self._is_ignored(sub):
                self.differences.append(
                    Difference(sub, None, want[k], note=f"missing, want {want[k]!r}")
                )
                ok = False
        for k in got:
            sub = path + (_key_segment(k),)
            if k not in want and not self._is_ignored(sub):
                self.differences.append(
                    Difference(sub, got[k], None, note=f"unexpected {got[k]!r}")
                )
                ok = False
        return ok

    def _compare_sequences(self, got: Any, want: Any, path: Path) -> bool:
        ok = True
        for i, (g, w) in enumerate(zip(got, want)):
            ok = self.compare(g, w, path + (f"[{i}]",)) and ok
        for i in range(len(want), len(got)):
            self.differences.append(
                Difference(path + (f"[{i}]",), got[i], None, note=f"unexpected {got[i]!r}")
            )
            ok = False
        for i in range(len(got), len(want)):
            self.differences.append(
                Difference(path + (f"[{i}]",), None, want[i], note=f"missing, want {want[i]!r}")
            )
            ok = False
        return ok

    def _compare_attributes(self, got: Any, want: Any, names: list[str], path: Path) -> bool:
        ok = True
        missing = object()
        for name in names:
            if name.startswith("_") and not self.private:
                continue
            sub = path + (name,)
            g = getattr(got, name, missing)
            w = getattr(want, name, missing)
            if g is missing or w is missing:
                if not self._is_ignored(sub):
                    self.differences.append(
                        Difference(sub, g, w, note="attribute set on only one side")
                    )
                    ok = False
                continue
            ok = self.compare(g, w, sub) and ok
        return ok

    def _leaf(self, equal: Any, got: Any, want: Any, path: Path) -> bool:
        equal = _truth(equal)
        if not equal:
            self.differences.append(Difference(path, got, want))
        return equal

    def _is_ignored(self, path: Path) -> bool:
        return any(ignore.matches(path) for ignore in self.ignored)


def _truth(result: Any) -> bool:
    """Reduce an `==` result to a bool.

    Elementwise results, such as numpy arrays, are equal only if every
    element is.
    """
    try:
        return bool(result)
    except (TypeError, ValueError):
        pass
    try:
        return all(_truth(item) for item in result)
    except (TypeError, ValueError):
        return False


def _walkable(value: Any) -> bool:
    return (
        hasattr(value, "__dict__")
        and type(value).__eq__ is object.__eq__
        and not isinstance(value, _OPAQUE_TYPES)
    )


def differences(expected: Any, actual: Any, *opts: Option) -> list[Difference]:
    comparator = _Comparator(opts)
    comparator.compare(actual, expected)
    return comparator.differences


def structural_equal(expected: Any, actual: Any, *opts: Option) -> bool:
    """Deep-compare two values; message types use their semantic equality."""
    return _Comparator(opts).compare(actual, expected)


def diff(expected: Any, actual: Any, *opts: Option) -> str:
    """Describe how ``actual`` differs from ``expected``, one line per difference.

    Returns an empty string when the values are equal.
    """
    return "\n".join(d.render() for d in differences(expected, actual, *opts))


def is_nil(value: Any) -> bool:
    """Report whether ``value`` is the absence marker ``None``.

    Empty containers, zero values and wrapper objects are not nil.
    """
    return structural_equal(None, value)
