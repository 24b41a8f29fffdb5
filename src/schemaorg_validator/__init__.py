"""
Validate and sanitize Schema.org JSON-LD records against the vocabulary's
type hierarchy and property ranges.
"""

from .errors import (
    HierarchyCycleError,
    OntologyError,
    RecordCycleError,
    SchemaValidatorError,
    StructuralError,
    VocabularyError,
)
from .ontology import Ontology, VocabularyBuilder, load_ontology
from .validation import SchemaValidator, ValidationResult, Violation, ViolationKind

__version__ = "0.1.0"

__all__ = [
    "Ontology",
    "VocabularyBuilder",
    "load_ontology",
    "SchemaValidator",
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "SchemaValidatorError",
    "OntologyError",
    "VocabularyError",
    "StructuralError",
    "HierarchyCycleError",
    "RecordCycleError",
]
