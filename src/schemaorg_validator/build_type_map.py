"""
Build typeMap.json and subclassMap.json from the Schema.org vocabulary.

The vocabulary is downloaded first when it is not on disk. Paths default to
the ontology section of config.yaml and can be overridden on the command line.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .errors import VocabularyError
from .ontology import VocabularyBuilder, ensure_vocabulary
from .utils.logger import ValidationLogger, setup_logging


def build_tables(config: ConfigManager, vocabulary_path: Optional[str] = None,
                 output_dir: Optional[str] = None,
                 run_logger: Optional[ValidationLogger] = None):
    """
    Build and write both ontology tables.

    Args:
        config: Loaded configuration
        vocabulary_path: JSON-LD vocabulary to read (default: ontology.schema_path, downloaded if needed)
        output_dir: Directory for the tables (default: ontology.type_map_path / subclass_map_path)
        run_logger: Optional run logger for the build report

    Returns:
        The built Ontology
    """
    ontology_config = config.get_ontology_config()

    if vocabulary_path is None:
        vocabulary_path = ensure_vocabulary(config)
        if vocabulary_path is None:
            raise VocabularyError(
                "Schema.org vocabulary is not available. Download it from "
                "https://schema.org/docs/developers.html"
            )

    if output_dir is not None:
        type_map_path = Path(output_dir) / "typeMap.json"
        subclass_map_path = Path(output_dir) / "subclassMap.json"
    else:
        type_map_path = Path(ontology_config.get("type_map_path", "data/typeMap.json"))
        subclass_map_path = Path(ontology_config.get("subclass_map_path", "data/subclassMap.json"))

    ontology = VocabularyBuilder(vocabulary_path).build_to_files(type_map_path, subclass_map_path)

    if run_logger is not None:
        run_logger.log_build(
            vocabulary_path,
            len(ontology.type_map),
            len(ontology.subclass_map),
            [str(type_map_path), str(subclass_map_path)],
        )
    return ontology


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Build Schema.org ontology tables")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--vocabulary", default=None, help="Schema.org JSON-LD vocabulary file")
    parser.add_argument("--output-dir", default=None, help="Directory for typeMap.json and subclassMap.json")
    args = parser.parse_args(argv)

    config = ConfigManager(args.config)
    logging_config = config.get_logging_config()
    setup_logging(logging_config.get("level", "INFO"))
    run_logger = ValidationLogger(logging_config.get("log_dir", "logs"), show_banner=False)

    try:
        build_tables(config, args.vocabulary, args.output_dir, run_logger)
    except VocabularyError as e:
        run_logger.log_error(str(e), context="build_type_map")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
