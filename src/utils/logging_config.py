"""Logging configuration for the application."""

import logging
import sys

def setup_logging(level: int = logging.INFO):
    """Configure logging for the application."""
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Only attach our console handler once, the app factory may run repeatedly
    if not any(getattr(h, '_event_api_console', False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._event_api_console = True
        root_logger.addHandler(console_handler)

    # Set higher log levels for noisy components
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('multipart').setLevel(logging.WARNING)
    logging.getLogger('python_multipart').setLevel(logging.WARNING)

    # Configure specific loggers
    loggers = [
        'src.api.routes.events',
        'src.db.event_store',
        'src.storage.blob_store',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Don't add handler here since it's already handled by root logger
