"""Script to start the validation server."""

from ..config import ConfigManager
from ..utils.logger import get_logger, setup_logging
from ..validation import SchemaValidator
from .server import ValidationServer


def main():
    """Start the validation server."""
    config = ConfigManager()
    logging_config = config.get_logging_config()
    setup_logging(logging_config.get('level', 'INFO'))

    validator = SchemaValidator.from_config(config)

    server_config = config.get_server_config()
    host = server_config.get('host', 'localhost')
    port = server_config.get('port', 8010)

    run_logger = get_logger(logging_config.get('log_dir', 'logs'), record_html=False)
    run_logger.console.print(f"Starting validation server on {host}:{port}...")

    server = ValidationServer(validator, host=host, port=port, run_logger=run_logger)
    try:
        server.run(debug=logging_config.get('level', 'INFO').upper() == 'DEBUG')
    finally:
        run_logger.log_summary()


if __name__ == "__main__":
    main()
