"""Logging configuration for the application."""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(level: int = logging.INFO):
    """Configure logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Uvicorn reload and test runs call this more than once
    if not any(getattr(h, '_devevents', False) for h in root_logger.handlers):
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._devevents = True
        root_logger.addHandler(console_handler)

    # Set higher log levels for noisy components
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('aiosqlite').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)

    # Configure specific loggers
    loggers = [
        'devevents.db.connection_cache',
        'devevents.db.operations',
        'devevents.api',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Don't add handler here since it's already handled by root logger
