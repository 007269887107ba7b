"""Verbose logging configuration for debug output."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logger(
    debug_file: Path, verbose: bool = False, logger_name: str = "assertkit"
) -> logging.Logger:
    """
    Configure and return a logger for debug output.

    Always writes to debug_file. Optionally also writes to stderr if verbose=True.

    Args:
        debug_file: Path to debug log file (always created)
        verbose: If True, also log to stderr. If False, only log to file.
        logger_name: Name of the logger instance. Loggers below it
            (``assertkit.sink``, ``assertkit.plugin``) propagate into it.

    Returns:
        Configured logger instance.

    Raises:
        RuntimeError: if a logger with this name was already configured,
            since two sessions writing one log would interleave.
    """
    logger = logging.getLogger(logger_name)

    if getattr(logger, "_assertkit_configured", False):
        raise RuntimeError(f"Logger '{logger_name}' already exists and is configured")

    logger.handlers.clear()
    logger.disabled = False
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(name)s: %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"
    )

    # Always add file handler
    debug_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(debug_file, mode="a")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Add stderr handler only if verbose mode enabled
    if verbose:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG)
        stderr_handler.setFormatter(formatter)
        logger.addHandler(stderr_handler)

    logger._assertkit_configured = True  # type: ignore[attr-defined]
    return logger


def teardown_logger(logger: logging.Logger) -> None:
    """Close and detach the handlers added by :func:`setup_logger`."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    if hasattr(logger, "_assertkit_configured"):
        del logger._assertkit_configured
