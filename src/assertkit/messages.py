"""Message types: values with their own notion of semantic equality.

Protocol buffer messages and pydantic models carry bookkeeping (field
presence, map ordering, ``model_fields_set``, private attributes) that a
field-by-field walk would wrongly treat as significant. Any other type can
opt in by implementing :class:`SemanticMessage`.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from google.protobuf import json_format
from google.protobuf.message import Message as ProtoMessage
from pydantic import BaseModel


@runtime_checkable
class SemanticMessage(Protocol):
    def semantic_equals(self, other: Any) -> bool: ...


def is_message(value: Any) -> bool:
    """Return True if ``value`` defines its own semantic equality."""
    return isinstance(value, (ProtoMessage, BaseModel, SemanticMessage))


def semantic_equal(a: Any, b: Any) -> bool:
    """Compare two message values by their semantic content.

    Messages of different types are never equal.
    """
    if type(a) is not type(b):
        return False

    if isinstance(a, ProtoMessage):
        return a == b
    if isinstance(a, BaseModel):
        return a.model_dump() == b.model_dump()
    if isinstance(a, SemanticMessage):
        return bool(a.semantic_equals(b))

    raise TypeError(f"{type(a).__qualname__} is not a message type")


def message_fields(value: Any) -> Any:
    """Return a plain dict view of a message, used to render diffs.

    Values of types without a field view are returned unchanged.
    """
    if isinstance(value, ProtoMessage):
        return json_format.MessageToDict(value, preserving_proto_field_name=True)
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value
