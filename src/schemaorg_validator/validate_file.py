"""
Validate JSON-LD files against the configured ontology, optionally writing sanitized copies.
"""

import argparse
import json
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .errors import SchemaValidatorError
from .utils.logger import ValidationLogger, setup_logging
from .validation import SchemaValidator
from .validation.value_types import declared_type


def validate_paths(validator: SchemaValidator, paths: List[str], run_logger: ValidationLogger,
                   strip_dir: Optional[str] = None) -> int:
    """
    Validate every file and return how many of them had violations.

    A file holding a JSON array is treated as a list of records.
    """
    invalid_files = 0
    for path in map(Path, paths):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            run_logger.log_error(str(e), context=str(path))
            invalid_files += 1
            continue

        records = data if isinstance(data, list) else [data]
        file_has_violations = False
        for index, record in enumerate(records):
            source = path.name if len(records) == 1 else f"{path.name}[{index}]"
            violations = validator.validate(record)
            run_logger.log_validation(source, declared_type(record), violations)
            file_has_violations = file_has_violations or bool(violations)

        if file_has_violations:
            invalid_files += 1

        if strip_dir is not None:
            clean = [validator.strip_invalid(record) for record in records]
            output = Path(strip_dir) / path.name
            output.parent.mkdir(parents=True, exist_ok=True)
            with open(output, 'w', encoding='utf-8') as f:
                json.dump(clean if isinstance(data, list) else clean[0], f, indent=2, ensure_ascii=False)

    return invalid_files


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate Schema.org JSON-LD files")
    parser.add_argument("files", nargs="+", help="JSON-LD files to validate")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--strip-dir", default=None, help="Write sanitized copies into this directory")
    args = parser.parse_args(argv)

    config = ConfigManager(args.config)
    logging_config = config.get_logging_config()
    setup_logging(logging_config.get("level", "INFO"))
    run_logger = ValidationLogger(logging_config.get("log_dir", "logs"), show_banner=False)

    try:
        validator = SchemaValidator.from_config(config)
        invalid_files = validate_paths(validator, args.files, run_logger, args.strip_dir)
    except SchemaValidatorError as e:
        run_logger.log_error(str(e), context="validate_file")
        return 2
    finally:
        run_logger.log_summary()

    return 1 if invalid_files else 0


if __name__ == "__main__":
    raise SystemExit(main())
