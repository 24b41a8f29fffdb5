"""
Immutable Schema.org ontology tables.

An ontology is two lookup tables:
- type map: type name -> property name -> acceptable value types (the range)
- subclass map: type name -> its single parent type

Both are built once (see vocabulary_builder) and never change afterwards, so
hierarchy lookups can be memoised per type.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import HierarchyCycleError, OntologyError

logger = logging.getLogger(__name__)

TYPE_MAP_FILE = "typeMap.json"
SUBCLASS_MAP_FILE = "subclassMap.json"

_EMPTY: Mapping[str, Tuple[str, ...]] = MappingProxyType({})


class Ontology:
    def __init__(self, type_map: Mapping[str, Mapping[str, Sequence[str]]],
                 subclass_map: Mapping[str, str]):
        self.type_map = MappingProxyType(self._freeze_type_map(type_map))
        self.subclass_map = MappingProxyType(self._freeze_subclass_map(subclass_map))

        # Hierarchy caches, keyed by type name
        self._ancestors_cache: Dict[str, Tuple[str, ...]] = {}
        self._properties_cache: Dict[str, Mapping[str, Tuple[str, ...]]] = {}

    @staticmethod
    def _freeze_type_map(type_map) -> Dict[str, Mapping[str, Tuple[str, ...]]]:
        if not isinstance(type_map, Mapping):
            raise OntologyError(f"Type map must be a mapping, got {type(type_map).__name__}")

        frozen = {}
        for type_name, properties in type_map.items():
            if not isinstance(properties, Mapping):
                raise OntologyError(f"Properties of type '{type_name}' must be a mapping")
            ranges = {}
            for prop, expected in properties.items():
                if isinstance(expected, str) or not isinstance(expected, Sequence):
                    raise OntologyError(
                        f"Range of '{type_name}.{prop}' must be a list of type names"
                    )
                if not all(isinstance(t, str) for t in expected):
                    raise OntologyError(
                        f"Range of '{type_name}.{prop}' contains a non-string entry: {list(expected)!r}"
                    )
                ranges[prop] = tuple(expected)
            frozen[type_name] = MappingProxyType(ranges)
        return frozen

    @staticmethod
    def _freeze_subclass_map(subclass_map) -> Dict[str, str]:
        if not isinstance(subclass_map, Mapping):
            raise OntologyError(f"Subclass map must be a mapping, got {type(subclass_map).__name__}")

        for child, parent in subclass_map.items():
            if not isinstance(parent, str):
                raise OntologyError(f"Parent of '{child}' must be a single type name")
        return dict(subclass_map)

    # ------------------------------------------------------------------
    # Hierarchy queries
    # ------------------------------------------------------------------

    def ancestors_of(self, type_name: str) -> Tuple[str, ...]:
        """
        Get all superclasses of a type, nearest first (HowTo -> CreativeWork -> Thing).

        Raises:
            HierarchyCycleError: if following parent links revisits a type
        """
        cached = self._ancestors_cache.get(type_name)
        if cached is not None:
            return cached

        chain: List[str] = []
        seen = {type_name}
        current = type_name
        while current in self.subclass_map:
            current = self.subclass_map[current]
            if current in seen:
                raise HierarchyCycleError(type_name, [type_name, *chain, current])
            seen.add(current)
            chain.append(current)

        ancestors = tuple(chain)
        self._ancestors_cache[type_name] = ancestors
        return ancestors

    def is_or_is_subtype_of(self, actual_type: str, expected_types) -> bool:
        """Check if actual_type is one of expected_types or a subtype of one."""
        expected = set(expected_types)
        if actual_type in expected:
            return True
        return any(parent in expected for parent in self.ancestors_of(actual_type))

    def allowed_properties(self, type_name: str) -> Mapping[str, Tuple[str, ...]]:
        """
        Collect the properties a type may carry, including inherited ones.

        Maps are merged from the root type down to type_name, so when a
        property is declared at several levels the most specific range wins.
        An unknown type yields an empty mapping.
        """
        cached = self._properties_cache.get(type_name)
        if cached is not None:
            return cached

        lineage = (type_name, *self.ancestors_of(type_name))
        merged: Dict[str, Tuple[str, ...]] = {}
        for level in reversed(lineage):
            merged.update(self.type_map.get(level, _EMPTY))

        allowed = MappingProxyType(merged) if merged else _EMPTY
        self._properties_cache[type_name] = allowed
        return allowed

    def knows_type(self, type_name: str) -> bool:
        """Check if the type appears anywhere in the ontology."""
        return (
            type_name in self.type_map
            or type_name in self.subclass_map
            or type_name in self.subclass_map.values()
        )

    def get_all_types(self) -> List[str]:
        """Get sorted list of every type named by either table."""
        names = set(self.type_map) | set(self.subclass_map) | set(self.subclass_map.values())
        return sorted(names)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def from_files(cls, type_map_path, subclass_map_path) -> "Ontology":
        """Load the two tables from their JSON documents."""
        type_map = _read_json(Path(type_map_path))
        subclass_map = _read_json(Path(subclass_map_path))
        ontology = cls(type_map, subclass_map)
        logger.info(
            f"Loaded ontology: {len(ontology.type_map)} types with properties, "
            f"{len(ontology.subclass_map)} subclass links"
        )
        return ontology

    @classmethod
    def from_directory(cls, data_dir) -> "Ontology":
        data_dir = Path(data_dir)
        return cls.from_files(data_dir / TYPE_MAP_FILE, data_dir / SUBCLASS_MAP_FILE)

    def to_files(self, type_map_path, subclass_map_path) -> None:
        """Write the two tables as JSON documents, creating parent directories."""
        type_map = {
            type_name: {prop: list(expected) for prop, expected in properties.items()}
            for type_name, properties in self.type_map.items()
        }
        _write_json(Path(type_map_path), type_map)
        _write_json(Path(subclass_map_path), dict(self.subclass_map))

    def __repr__(self) -> str:
        return f"Ontology(types={len(self.type_map)}, subclass_links={len(self.subclass_map)})"


def _read_json(path: Path):
    if not path.exists():
        raise OntologyError(f"Ontology table not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise OntologyError(f"Ontology table {path} is not valid JSON: {e}") from e


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_ontology(type_map_path: str, subclass_map_path: Optional[str] = None) -> Ontology:
    """
    Load an ontology from a type map path, or from a directory holding both tables.

    Args:
        type_map_path: Path to typeMap.json, or a directory containing both files
        subclass_map_path: Path to subclassMap.json (ignored for a directory)

    Returns:
        The loaded Ontology
    """
    path = Path(type_map_path)
    if path.is_dir():
        return Ontology.from_directory(path)
    if subclass_map_path is None:
        subclass_map_path = path.parent / SUBCLASS_MAP_FILE
    return Ontology.from_files(path, subclass_map_path)
