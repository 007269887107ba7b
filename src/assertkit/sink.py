"""The reporting contract between assertions and the test harness."""

from __future__ import annotations

import logging
from typing import Callable, NoReturn, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ReportingSink(Protocol):
    """Where assertion failures go.

    ``record_failure`` notes a failure and lets the test go on. ``halt``
    stops the current test body and must not return.
    """

    def record_failure(self, message: str) -> None: ...

    def halt(self) -> NoReturn: ...


class TestHalted(BaseException):
    """Unwinds the current test body after a hard assertion failed.

    Derives from BaseException so that ``except Exception`` in test code
    cannot swallow it.
    """

    __test__ = False

    def __init__(self, failures: list[str]):
        self.failures = list(failures)
        super().__init__("\n".join(self.failures) or "test halted")


class RecordingSink:
    """In-memory sink, for harnesses other than pytest and for testing assertions."""

    __test__ = False

    def __init__(self, name: str = "test"):
        self.name = name
        self.failures: list[str] = []
        self.halted = False

    @property
    def failed(self) -> bool:
        return bool(self.failures) or self.halted

    def record_failure(self, message: str) -> None:
        logger.debug(f"{self.name}: {message}")
        self.failures.append(message)

    def halt(self) -> NoReturn:
        logger.warning(f"{self.name}: halted after {len(self.failures)} failure(s)")
        self.halted = True
        raise TestHalted(self.failures)

    def __repr__(self) -> str:
        return f"RecordingSink(name={self.name!r}, failures={len(self.failures)}, halted={self.halted})"


def run_with_sink(
    func: Callable[[RecordingSink], object], sink: RecordingSink | None = None
) -> RecordingSink:
    """Run one test body against a sink and return the sink.

    A halt ends ``func`` early; any other exception propagates.
    """
    if sink is None:
        sink = RecordingSink(getattr(func, "__name__", "test"))
    try:
        func(sink)
    except TestHalted:
        pass
    return sink
