"""pytest integration.

Tests ask for the ``sink`` fixture and pass it to the assertion functions::

    def test_user(sink):
        user = is_type(sink, load("alice"), User)
        equals(sink, "alice", user.name)
        equals(sink, 3, len(user.groups))

Soft failures are collected while the test body runs and reported together
once it returns; a hard failure ends the test on the spot.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import pytest

from assertkit.config import DEFAULT_CONFIG_NAME, AssertKitConfig, load_config
from assertkit.errors import ConfigError
from assertkit.reporting.junit import TestOutcome, write_junit
from assertkit.verbose import setup_logger, teardown_logger

logger = logging.getLogger(__name__)

sink_key = pytest.StashKey["PytestSink"]()
config_key = pytest.StashKey[AssertKitConfig]()
outcomes_key = pytest.StashKey[dict[str, TestOutcome]]()
logger_key = pytest.StashKey[logging.Logger]()


class PytestSink:
    """Reporting sink bound to one pytest test item."""

    def __init__(self, nodeid: str, max_message_length: int = 2000):
        self.nodeid = nodeid
        self.max_message_length = max_message_length
        self.failures: list[str] = []
        self.halted = False

    @property
    def failed(self) -> bool:
        return bool(self.failures) or self.halted

    def record_failure(self, message: str) -> None:
        logger.debug(f"{self.nodeid}: {message}")
        self.failures.append(message)

    def halt(self) -> NoReturn:
        logger.warning(f"{self.nodeid}: halted after {len(self.failures)} failure(s)")
        self.halted = True
        pytest.fail(self.summary(), pytrace=False)

    def summary(self) -> str:
        lines = [f"{len(self.failures)} assertion(s) failed:"]
        for i, message in enumerate(self.failures, start=1):
            lines.append(f"  [{i}] {self._truncate(message)}")
        if self.halted:
            lines.append("  (test halted after the last failure)")
        return "\n".join(lines)

    def _truncate(self, message: str) -> str:
        if len(message) > self.max_message_length:
            return message[: self.max_message_length - 3] + "..."
        return message


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("assertkit", "soft/hard assertions")
    group.addoption(
        "--assertkit-config",
        default=None,
        help=f"Path to an assertkit YAML config (default: {DEFAULT_CONFIG_NAME} in rootdir, if present)",
    )
    group.addoption(
        "--assertkit-report",
        default=None,
        help="Write a junit XML report of recorded assertion failures to this path",
    )
    group.addoption(
        "--assertkit-log",
        default=None,
        help="Write assertkit debug logging to this file",
    )
    parser.addini("assertkit_config", "Path to an assertkit YAML config", default=None)


def _resolve_config(config: pytest.Config) -> AssertKitConfig:
    path = config.getoption("assertkit_config") or config.getini("assertkit_config")
    default = Path(config.rootpath) / DEFAULT_CONFIG_NAME
    try:
        if path:
            settings = load_config(Path(path))
        elif default.exists():
            settings = load_config(default)
        else:
            settings = AssertKitConfig()
    except ConfigError as e:
        raise pytest.UsageError(str(e)) from e

    return settings.merged(
        report=config.getoption("assertkit_report"),
        debug_log=config.getoption("assertkit_log"),
    )


def pytest_configure(config: pytest.Config) -> None:
    settings = _resolve_config(config)
    config.stash[config_key] = settings
    config.stash[outcomes_key] = {}

    if settings.debug_log:
        config.stash[logger_key] = setup_logger(
            Path(settings.debug_log), verbose=settings.verbose, logger_name="assertkit"
        )
        logger.debug("assertkit debug logging enabled")


@pytest.fixture
def sink(request: pytest.FixtureRequest) -> PytestSink:
    """A reporting sink owned by the requesting test."""
    settings = request.config.stash.get(config_key, AssertKitConfig())
    item_sink = PytestSink(request.node.nodeid, settings.max_message_length)
    request.node.stash[sink_key] = item_sink
    return item_sink


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    outcome = yield
    report = outcome.get_result()

    item_sink = item.stash.get(sink_key, None)
    if item_sink is None or report.when != "call":
        return

    if report.passed and item_sink.failures:
        # the body finished, but soft assertions failed along the way
        report.outcome = "failed"
        report.longrepr = item_sink.summary()
    elif report.failed and item_sink.failures and not item_sink.halted:
        # an unrelated error ended the test; keep the soft failures visible
        report.sections.append(("assertkit soft failures", item_sink.summary()))

    if item_sink.failed:
        outcomes = item.config.stash.get(outcomes_key, {})
        outcomes[item.nodeid] = TestOutcome(
            nodeid=item.nodeid,
            failures=list(item_sink.failures),
            halted=item_sink.halted,
            duration=report.duration,
        )


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    config = session.config
    settings = config.stash.get(config_key, None)
    if settings is None:
        return

    if settings.report:
        outcomes = list(config.stash.get(outcomes_key, {}).values())
        path = write_junit(Path(settings.report), outcomes)
        logger.info(f"Wrote {len(outcomes)} failing test(s) to {path}")


def pytest_unconfigure(config: pytest.Config) -> None:
    configured = config.stash.get(logger_key, None)
    if configured is not None:
        teardown_logger(configured)
        del config.stash[logger_key]


def pytest_report_header(config: pytest.Config) -> str | None:
    settings = config.stash.get(config_key, None)
    if settings is None or not settings.report:
        return None
    return f"assertkit: writing assertion report to {settings.report}"
