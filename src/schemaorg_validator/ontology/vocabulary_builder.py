"""
Builder for the ontology tables from the Schema.org vocabulary.
Parses the JSON-LD release file and extracts subclass links and, for every
property, the types it applies to (domain) and the types its values may take (range).
"""

import json
import logging
from pathlib import Path
from typing import Dict, List

from ..errors import VocabularyError
from .tables import Ontology, SUBCLASS_MAP_FILE, TYPE_MAP_FILE

logger = logging.getLogger(__name__)

SCHEMA_PREFIX = 'schema:'
PROPERTY_TYPE = 'rdf:Property'

DOMAIN_KEYS = ('http://schema.org/domainIncludes', 'schema:domainIncludes')
RANGE_KEYS = ('http://schema.org/rangeIncludes', 'schema:rangeIncludes')


class VocabularyBuilder:
    def __init__(self, vocabulary_path: str = "data/ontology/schema.jsonld"):
        self.vocabulary_path = Path(vocabulary_path)
        self.type_map: Dict[str, Dict[str, List[str]]] = {}
        self.subclass_map: Dict[str, str] = {}
        self._loaded = False

    def load_vocabulary(self) -> None:
        """Load the JSON-LD file and fill both tables."""
        if not self.vocabulary_path.exists():
            raise VocabularyError(
                f"Missing vocabulary file: {self.vocabulary_path}. "
                "Download it from https://schema.org/docs/developers.html"
            )

        with open(self.vocabulary_path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise VocabularyError(f"Invalid JSON-LD in {self.vocabulary_path}: {e}") from e

        self.load_graph(data)

    def load_graph(self, data) -> None:
        """Fill both tables from an already parsed JSON-LD document."""
        graph = data.get('@graph') if isinstance(data, dict) else None
        if not isinstance(graph, list):
            raise VocabularyError('Invalid JSON-LD: missing "@graph"')

        self.type_map = {}
        self.subclass_map = {}

        for entry in graph:
            if not isinstance(entry, dict) or not isinstance(entry.get('@id'), str):
                continue
            self._collect_subclass(entry)
            if PROPERTY_TYPE in _as_list(entry.get('@type')):
                self._collect_property(entry)

        self._loaded = True
        logger.info(
            f"Parsed vocabulary {self.vocabulary_path}: {len(self.type_map)} types with properties, "
            f"{len(self.subclass_map)} subclass links"
        )

    def _collect_subclass(self, entry: Dict) -> None:
        name = _strip_prefix(entry['@id'])
        # Single-parent hierarchy: when several parents are declared the last one is kept
        for parent in _as_list(entry.get('rdfs:subClassOf')):
            if isinstance(parent, dict) and parent.get('@id'):
                self.subclass_map[name] = _strip_prefix(parent['@id'])

    def _collect_property(self, entry: Dict) -> None:
        name = _strip_prefix(entry['@id'])
        domains = self._extract_refs(_first_present(entry, DOMAIN_KEYS))
        ranges = self._extract_refs(_first_present(entry, RANGE_KEYS))

        for domain in domains:
            self.type_map.setdefault(domain, {})[name] = list(ranges)

    def _extract_refs(self, ref_data) -> List[str]:
        """Extract type references from a single reference or a list of them."""
        refs = []
        for item in _as_list(ref_data):
            if isinstance(item, dict) and item.get('@id'):
                refs.append(_strip_prefix(item['@id']))
        return refs

    def build(self) -> Ontology:
        """Build the immutable ontology, loading the vocabulary if needed."""
        if not self._loaded:
            self.load_vocabulary()
        return Ontology(self.type_map, self.subclass_map)

    def build_to_files(self, type_map_path: str, subclass_map_path: str) -> Ontology:
        """Build the ontology and persist both tables."""
        ontology = self.build()
        ontology.to_files(type_map_path, subclass_map_path)
        logger.info(f"Wrote {type_map_path} and {subclass_map_path}")
        return ontology

    def build_to_directory(self, data_dir: str) -> Ontology:
        data_dir = Path(data_dir)
        return self.build_to_files(data_dir / TYPE_MAP_FILE, data_dir / SUBCLASS_MAP_FILE)


def _strip_prefix(identifier: str) -> str:
    return identifier.replace(SCHEMA_PREFIX, '', 1)


def _as_list(value) -> List:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _first_present(entry: Dict, keys):
    for key in keys:
        if entry.get(key):
            return entry[key]
    return None
