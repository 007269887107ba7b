from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from junitparser import Failure, JUnitXml, TestCase, TestSuite

SUITE_NAME = "assertkit"
HALT_TYPE = "halt"
SOFT_TYPE = "soft"


@dataclass
class TestOutcome:
    """Assertion failures recorded by one test."""

    __test__ = False

    nodeid: str
    failures: list[str] = field(default_factory=list)
    halted: bool = False
    duration: float = 0.0

    @property
    def passed(self) -> bool:
        return not self.failures and not self.halted

    @property
    def classname(self) -> str:
        return self.nodeid.split("::", 1)[0]

    @property
    def name(self) -> str:
        return self.nodeid.split("::", 1)[-1]


def _failure(message: str, type_: str) -> Failure:
    # the attribute holds the first line, the element text the whole message
    failure = Failure(message.splitlines()[0] if message else "", type_)
    failure.text = message
    return failure


def write_junit(path: Path, outcomes: list[TestOutcome]) -> Path:
    """Write junit XML with one test case per outcome and one failure per message."""
    xml = JUnitXml()
    suite = TestSuite(SUITE_NAME)

    for outcome in outcomes:
        case = TestCase(outcome.name)
        case.classname = outcome.classname
        results = [_failure(message, SOFT_TYPE) for message in outcome.failures]
        if outcome.halted and results:
            # the last failure recorded is the one that halted the test
            results[-1] = _failure(outcome.failures[-1], HALT_TYPE)
        elif outcome.halted:
            results.append(_failure("test halted", HALT_TYPE))
        case.result = results
        case.time = outcome.duration
        suite.add_testcase(case)

    # Use append (not +=) to keep the suite as its own element
    xml.append(suite)

    path.parent.mkdir(parents=True, exist_ok=True)
    xml.write(str(path), pretty=True)
    return path


def read_junit(path: Path) -> list[TestOutcome]:
    """Read back the outcomes written by :func:`write_junit`."""
    xml = JUnitXml.fromfile(str(path))

    suites = [xml] if isinstance(xml, TestSuite) else list(xml)
    outcomes: list[TestOutcome] = []
    for suite in suites:
        for case in suite:
            failures = []
            halted = False
            for result in case.result:
                if not isinstance(result, Failure):
                    continue
                failures.append(result.text or result.message or "")
                if result.type == HALT_TYPE:
                    halted = True
            nodeid = f"{case.classname}::{case.name}" if case.classname else case.name
            outcomes.append(
                TestOutcome(
                    nodeid=nodeid,
                    failures=failures,
                    halted=halted,
                    duration=float(case.time or 0.0),
                )
            )
    return outcomes
