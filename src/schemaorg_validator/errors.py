"""
Exceptions raised by the validator.

Problems in the validated data are never raised: they are reported as
violations. The classes below cover faults in the ontology, the vocabulary
source, or records that are not tree-shaped.
"""

from typing import Optional, Sequence


class SchemaValidatorError(Exception):
    """Base class for all validator faults."""


class OntologyError(SchemaValidatorError):
    """The ontology tables are missing or have the wrong shape."""


class VocabularyError(SchemaValidatorError):
    """The JSON-LD vocabulary source cannot be turned into ontology tables."""


class StructuralError(SchemaValidatorError):
    """A structure that must be acyclic contains a cycle."""


class HierarchyCycleError(StructuralError):
    """The subclass map loops back on itself."""

    def __init__(self, type_name: str, chain: Sequence[str]):
        self.type_name = type_name
        self.chain = tuple(chain)
        super().__init__(
            f"Subclass cycle detected starting at '{type_name}': {' -> '.join(self.chain)}"
        )


class RecordCycleError(StructuralError):
    """A record refers back to one of its own containers."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        if path is None:
            message = "Record is not tree-shaped: a sequence contains itself"
        else:
            message = f"Record is not tree-shaped: cycle at '{path or '<root>'}'"
        super().__init__(message)
