"""
Structural validation of JSON-LD records against a Schema.org ontology.

The engine walks a record depth-first. At every typed node it checks that
each property is declared for the node's type (or one of its ancestors) and
that each value's inferred type is compatible with the property's range.
Nested typed nodes are validated recursively with an extended path.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from ..errors import RecordCycleError
from ..ontology import Ontology, ensure_tables
from . import violations as v
from .value_types import RESERVED_KEYS, declared_type, infer_value_type, is_typed_node
from .violations import ValidationResult, Violation

logger = logging.getLogger(__name__)

STRIP = "strip"
PASSTHROUGH = "passthrough"
UNKNOWN_TYPE_POLICIES = (STRIP, PASSTHROUGH)


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


class SchemaValidator:
    def __init__(self, ontology: Ontology, unknown_type_policy: str = STRIP):
        """
        Args:
            ontology: Type and subclass tables to validate against
            unknown_type_policy: What strip_invalid does with a node whose type is
                not in the ontology: 'strip' keeps only @type/@context,
                'passthrough' returns it unchanged
        """
        if unknown_type_policy not in UNKNOWN_TYPE_POLICIES:
            raise ValueError(
                f"Unknown type policy '{unknown_type_policy}' not supported. "
                f"Available policies: {', '.join(UNKNOWN_TYPE_POLICIES)}"
            )
        self.ontology = ontology
        self.unknown_type_policy = unknown_type_policy

    @classmethod
    def from_config(cls, config_manager) -> "SchemaValidator":
        """Create a validator from the configured ontology tables."""
        ontology = ensure_tables(config_manager)
        validation_config = config_manager.get_validation_config()
        return cls(ontology, validation_config.get('unknown_type_policy', STRIP))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, record: Any, path_prefix: str = "") -> List[Violation]:
        """
        Validate a record recursively.

        Args:
            record: Parsed JSON-LD node
            path_prefix: Address of the record from the validation root

        Returns:
            Violations in discovery order (depth-first, key order, element order)

        Raises:
            RecordCycleError: if the record contains itself
        """
        errors: List[Violation] = []
        self._validate_node(record, path_prefix, errors, set())
        logger.debug(f"Validated {declared_type(record) or '<untyped>'} record: {len(errors)} violations")
        return errors

    def check(self, record: Any) -> ValidationResult:
        violations = self.validate(record)
        return ValidationResult(ok=not violations, violations=violations)

    def is_valid(self, record: Any) -> bool:
        return not self.validate(record)

    def _validate_node(self, node: Any, path: str, errors: List[Violation], active: set) -> None:
        type_name = declared_type(node)
        if type_name is None:
            errors.append(v.missing_type(path))
            return

        allowed = self.ontology.allowed_properties(type_name)
        if not allowed:
            errors.append(v.unknown_type(path, type_name))
            return

        self._enter(node, path, active)
        for prop, value in node.items():
            if prop in RESERVED_KEYS:
                continue

            prop_path = _join(path, prop)
            expected = allowed.get(prop)
            if expected is None:
                errors.append(v.disallowed_property(prop_path, prop, type_name))
                continue

            if isinstance(value, list):
                self._enter(value, prop_path, active)
                for i, item in enumerate(value):
                    self._check_value(prop, item, expected, f"{prop_path}[{i}]", errors, active)
                active.discard(id(value))
            else:
                self._check_value(prop, value, expected, prop_path, errors, active)
        active.discard(id(node))

    def _check_value(self, prop: str, value: Any, expected, path: str,
                     errors: List[Violation], active: set) -> None:
        actual = infer_value_type(value)
        if not self.ontology.is_or_is_subtype_of(actual, expected):
            errors.append(v.type_mismatch(path, prop, expected, actual))

        if is_typed_node(value):
            self._validate_node(value, path, errors, active)

    @staticmethod
    def _enter(container: Any, path: str, active: set) -> None:
        key = id(container)
        if key in active:
            raise RecordCycleError(path)
        active.add(key)

    # ------------------------------------------------------------------
    # Sanitization
    # ------------------------------------------------------------------

    def strip_invalid(self, record: Any) -> Any:
        """
        Return a copy of the record with disallowed properties removed.

        Untyped records come back unchanged. Nested typed nodes, including
        those inside lists, are sanitized recursively. The input is not modified.
        """
        return self._strip_node(record, "", set())

    def _strip_node(self, node: Any, path: str, active: set) -> Any:
        type_name = declared_type(node)
        if type_name is None:
            return copy.deepcopy(node)

        allowed = self.ontology.allowed_properties(type_name)
        if not allowed and self.unknown_type_policy == PASSTHROUGH:
            return copy.deepcopy(node)

        self._enter(node, path, active)
        clean: Dict[str, Any] = {}
        for prop, value in node.items():
            if prop not in RESERVED_KEYS and prop not in allowed:
                continue

            prop_path = _join(path, prop)
            if isinstance(value, list):
                self._enter(value, prop_path, active)
                clean[prop] = [
                    self._strip_value(item, f"{prop_path}[{i}]", active)
                    for i, item in enumerate(value)
                ]
                active.discard(id(value))
            else:
                clean[prop] = self._strip_value(value, prop_path, active)
        active.discard(id(node))
        return clean

    def _strip_value(self, value: Any, path: str, active: set) -> Any:
        if is_typed_node(value):
            return self._strip_node(value, path, active)
        return copy.deepcopy(value)

    def describe_type(self, type_name: str) -> Optional[Dict[str, Any]]:
        """Summarise a type's position and properties, or None if it is unknown."""
        if not self.ontology.knows_type(type_name):
            return None
        allowed = self.ontology.allowed_properties(type_name)
        return {
            "type": type_name,
            "ancestors": list(self.ontology.ancestors_of(type_name)),
            "properties": {prop: list(expected) for prop, expected in allowed.items()},
        }
