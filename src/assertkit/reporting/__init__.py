"""Reports of recorded assertion failures."""

from assertkit.reporting.junit import TestOutcome, read_junit, write_junit

__all__ = ["TestOutcome", "read_junit", "write_junit"]
