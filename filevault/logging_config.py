"""
Application logging configuration.

This module provides unified logging configuration for the File Vault API.
Detailed diagnostics (operation, owner, file id, stack traces) go to the log
while clients only ever receive short, static messages.
"""
import logging
import sys


def setup_logging() -> logging.Logger:
    """
    Configure and return the application logger.

    The logger outputs to stdout with a structured format including:
    - Timestamp
    - Logger name
    - Log level
    - Message

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger("file_vault")
    logger.setLevel(logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
