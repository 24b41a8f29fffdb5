"""
Utility to download the Schema.org vocabulary and make sure the ontology tables exist.
"""

import logging
import requests
from pathlib import Path
from typing import Optional

from ..errors import OntologyError
from .tables import Ontology
from .vocabulary_builder import VocabularyBuilder

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_URL = "https://schema.org/version/latest/schemaorg-current-https.jsonld"


def download_vocabulary(
    url: str = DEFAULT_SCHEMA_URL,
    output_path: str = "data/ontology/schemaorg-current-https.jsonld",
    timeout: float = 30,
) -> bool:
    """
    Download the Schema.org vocabulary JSON-LD file.

    Args:
        url: URL of the Schema.org JSON-LD file
        output_path: Path where to save the file
        timeout: Request timeout in seconds

    Returns:
        True if the file is available, False if the download failed
    """
    output = Path(output_path)

    # Skip if already exists
    if output.exists():
        logger.info(f"[Schema.org] File already exists at {output}")
        return True

    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        logger.info(f"[Schema.org] Downloading from {url}...")
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        with open(output, "wb") as f:
            f.write(response.content)

        logger.info(f"[Schema.org] Downloaded successfully to {output}")
        return True

    except requests.exceptions.RequestException as e:
        logger.error(f"[Schema.org] Download failed: {str(e)}")
        return False


def ensure_vocabulary(config_manager) -> Optional[str]:
    """
    Ensure the Schema.org vocabulary file is available.
    Downloads it if not present.

    Args:
        config_manager: ConfigManager instance

    Returns:
        Path to the vocabulary file if available, None otherwise
    """
    ontology_config = config_manager.get_ontology_config()
    schema_url = ontology_config.get("schema_url", DEFAULT_SCHEMA_URL)
    schema_path = ontology_config.get("schema_path")

    if not schema_path:
        logger.error("[Schema.org] Missing configuration: ontology.schema_path")
        return None

    if not Path(schema_path).exists():
        timeout = ontology_config.get("download_timeout", 30)
        if not download_vocabulary(schema_url, schema_path, timeout=timeout):
            return None

    return schema_path


def ensure_tables(config_manager) -> Ontology:
    """
    Load the ontology tables named in the configuration.

    When the tables are missing and ontology.auto_build is enabled, the
    vocabulary is downloaded (if needed) and the tables are built first.

    Args:
        config_manager: ConfigManager instance

    Returns:
        The loaded Ontology

    Raises:
        OntologyError: if the tables are missing and cannot be built
    """
    ontology_config = config_manager.get_ontology_config()
    type_map_path = ontology_config.get("type_map_path", "data/typeMap.json")
    subclass_map_path = ontology_config.get("subclass_map_path", "data/subclassMap.json")

    if Path(type_map_path).exists() and Path(subclass_map_path).exists():
        return Ontology.from_files(type_map_path, subclass_map_path)

    if not ontology_config.get("auto_build", False):
        raise OntologyError(
            f"Ontology tables not found ({type_map_path}, {subclass_map_path}). "
            "Run scripts/build_type_map.py or enable ontology.auto_build."
        )

    schema_path = ensure_vocabulary(config_manager)
    if schema_path is None:
        raise OntologyError("Schema.org vocabulary is not available, cannot build ontology tables")

    builder = VocabularyBuilder(schema_path)
    return builder.build_to_files(type_map_path, subclass_map_path)
