"""assertkit - soft and hard assertions for test suites.

Soft assertions (``equals``, ``not_equals``, ``equals_func``, ``is_nil``,
``no_error``, ``error_is``) record a failure on the test's sink and return
False. Hard assertions (``is_type``, ``not_nil``) record and then halt the
current test.

Usage:
    from assertkit import equals, is_type, not_nil

    def test_lookup(sink):
        user = is_type(sink, directory.get("alice"), User)
        equals(sink, "Alice", user.display_name)
"""

__version__ = "0.1.0"

from assertkit.asserts import (
    Want,
    check_all,
    default_equal,
    equals,
    equals_func,
    error_is,
    is_nil,
    is_type,
    no_error,
    not_equals,
    not_nil,
)
from assertkit.equality import (
    Comparer,
    IgnoreField,
    Option,
    TreatPrivate,
    diff,
    structural_equal,
)
from assertkit.messages import SemanticMessage, is_message, semantic_equal
from assertkit.sink import RecordingSink, ReportingSink, TestHalted, run_with_sink

__all__ = [
    "__version__",
    # Assertions
    "Want",
    "check_all",
    "default_equal",
    "equals",
    "equals_func",
    "error_is",
    "is_nil",
    "is_type",
    "no_error",
    "not_equals",
    "not_nil",
    # Equality contract
    "Comparer",
    "IgnoreField",
    "Option",
    "TreatPrivate",
    "diff",
    "structural_equal",
    # Message types
    "SemanticMessage",
    "is_message",
    "semantic_equal",
    # Sinks
    "RecordingSink",
    "ReportingSink",
    "TestHalted",
    "run_with_sink",
]
