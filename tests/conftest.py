"""Pytest configuration and fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Drop loggers configured by setup_logger() in tests to prevent name collisions."""
    yield

    # Only the throwaway names used by tests; module loggers under
    # "assertkit." must stay registered for caplog to see them.
    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("assertkit_test")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]
