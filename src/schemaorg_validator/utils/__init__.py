from .logger import ValidationLogger, get_logger, setup_logging

__all__ = ['ValidationLogger', 'get_logger', 'setup_logging']
