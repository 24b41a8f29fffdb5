"""
Validation engine: range checks and sanitization of JSON-LD records.
"""

from .engine import SchemaValidator
from .value_types import ValueType, infer_value_type
from .violations import ValidationResult, Violation, ViolationKind

__all__ = [
    "SchemaValidator",
    "ValueType",
    "infer_value_type",
    "ValidationResult",
    "Violation",
    "ViolationKind",
]
