"""
Schema.org ontology tables: type hierarchy and per-type allowed properties.
"""

from .tables import Ontology, load_ontology
from .vocabulary_builder import VocabularyBuilder
from .schema_downloader import download_vocabulary, ensure_tables, ensure_vocabulary

__all__ = [
    "Ontology",
    "load_ontology",
    "VocabularyBuilder",
    "download_vocabulary",
    "ensure_vocabulary",
    "ensure_tables",
]
