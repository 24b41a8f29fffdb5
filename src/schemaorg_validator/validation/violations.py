"""Reported validation failures."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class ViolationKind(str, Enum):
    MISSING_TYPE = "missing_type"
    UNKNOWN_TYPE = "unknown_type"
    DISALLOWED_PROPERTY = "disallowed_property"
    TYPE_MISMATCH = "type_mismatch"


@dataclass(frozen=True)
class Violation:
    """One localized failure. path is empty at the validation root (e.g. 'step[0].name')."""

    path: str
    message: str
    kind: ViolationKind

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "message": self.message, "kind": self.kind.value}


@dataclass
class ValidationResult:
    ok: bool
    violations: List[Violation] = field(default_factory=list)

    def by_kind(self, kind: ViolationKind) -> List[Violation]:
        return [v for v in self.violations if v.kind == kind]


def missing_type(path: str) -> Violation:
    return Violation(path, "Missing @type", ViolationKind.MISSING_TYPE)


def unknown_type(path: str, type_name: str) -> Violation:
    return Violation(path, f'Unknown type: "{type_name}"', ViolationKind.UNKNOWN_TYPE)


def disallowed_property(path: str, prop: str, type_name: str) -> Violation:
    return Violation(
        path,
        f'Property "{prop}" is not allowed for type "{type_name}".',
        ViolationKind.DISALLOWED_PROPERTY,
    )


def type_mismatch(path: str, prop: str, expected, actual: str) -> Violation:
    return Violation(
        path,
        f'Property "{prop}" expects: {" | ".join(expected)}, got: {actual}',
        ViolationKind.TYPE_MISMATCH,
    )
