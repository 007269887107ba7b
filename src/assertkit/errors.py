"""Error-chain helpers and the exceptions raised by assertkit itself."""

from __future__ import annotations

from typing import Iterator


class ConfigError(ValueError):
    """Raised when an assertkit config file is missing or invalid."""


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and every error it wraps, depth-first.

    A link is followed through ``__cause__`` when set, otherwise through
    ``__context__`` unless the context was suppressed with ``raise ... from
    None``. Members of exception groups are walked as well. Each error is
    yielded once even if the chain loops back on itself.
    """
    seen: set[int] = set()
    stack = [err] if err is not None else []

    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current

        linked: list[BaseException] = []
        if isinstance(current, BaseExceptionGroup):
            linked.extend(current.exceptions)
        if current.__cause__ is not None:
            linked.append(current.__cause__)
        elif current.__context__ is not None and not current.__suppress_context__:
            linked.append(current.__context__)

        # reversed so the first link is visited first
        stack.extend(reversed(linked))


def error_is(err: BaseException | None, target: BaseException | None) -> bool:
    """Report whether ``err`` is, or wraps anywhere in its chain, ``target``.

    Links are matched by identity or by the error's own ``__eq__``, which
    for exceptions defaults to identity: two separately raised errors with
    the same text are different errors.
    """
    if target is None:
        return err is None

    for link in iter_chain(err):
        if link is target or link == target:
            return True
    return False
