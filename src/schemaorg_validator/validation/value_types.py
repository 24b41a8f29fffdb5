"""
Best-effort type inference for JSON-LD values without an explicit @type.

The result is a heuristic gate for range checks, not authoritative typing:
strings are matched against the duration pattern first, then the URL pattern,
and sequences are judged by their first element only.
"""

import re
from enum import Enum
from typing import Any, Optional

from ..errors import RecordCycleError

TYPE_KEY = "@type"
CONTEXT_KEY = "@context"
RESERVED_KEYS = frozenset({TYPE_KEY, CONTEXT_KEY})

ISO8601_DURATION = re.compile(r"^P(T(\d+H)?(\d+M)?(\d+S)?)?$", re.IGNORECASE)
URL_PATTERN = re.compile(r"^(https?:)?//", re.IGNORECASE)


class ValueType(str, Enum):
    TEXT = "Text"
    URL = "URL"
    DURATION = "Duration"
    INTEGER = "Integer"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    UNKNOWN = "Unknown"


def is_iso8601_duration(value: Any) -> bool:
    return isinstance(value, str) and ISO8601_DURATION.match(value) is not None


def is_url(value: Any) -> bool:
    return isinstance(value, str) and URL_PATTERN.match(value) is not None


def declared_type(value: Any) -> Optional[str]:
    """
    Return the @type of a node, or None if it has none.

    A list of types (JSON-LD multi-typing) resolves to its first string entry.
    """
    if not isinstance(value, dict):
        return None
    tag = value.get(TYPE_KEY)
    if isinstance(tag, list):
        tag = next((t for t in tag if isinstance(t, str) and t), None)
    if isinstance(tag, str) and tag:
        return tag
    return None


def is_typed_node(value: Any) -> bool:
    return declared_type(value) is not None


def infer_value_type(value: Any) -> str:
    """
    Guess the Schema.org type name of a value.

    Args:
        value: Any parsed JSON value

    Returns:
        A ValueType value, or the node's own @type for typed nodes
    """
    if isinstance(value, str):
        if is_iso8601_duration(value):
            return ValueType.DURATION.value
        if is_url(value):
            return ValueType.URL.value
        return ValueType.TEXT.value

    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueType.BOOLEAN.value

    if isinstance(value, int):
        return ValueType.INTEGER.value

    if isinstance(value, float):
        return ValueType.INTEGER.value if value.is_integer() else ValueType.NUMBER.value

    if isinstance(value, (list, tuple)):
        # Assume a homogeneous sequence; empty ones have nothing to inspect
        seen = set()
        while isinstance(value, (list, tuple)):
            if not value:
                return ValueType.UNKNOWN.value
            if id(value) in seen:
                raise RecordCycleError()
            seen.add(id(value))
            value = value[0]
        return infer_value_type(value)

    if isinstance(value, dict):
        return declared_type(value) or ValueType.UNKNOWN.value

    return ValueType.UNKNOWN.value
