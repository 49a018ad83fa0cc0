"""
Logging utilities for the Statement POS CLI tool.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "statement_pos"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger for CLI runs.

    Console output goes to stderr so that tables and JSON printed by the CLI
    on stdout stay machine-readable.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a log file; parent directories are created
        format_string: Custom format string for log messages

    Returns:
        The configured ``statement_pos`` logger
    """
    level_num = getattr(logging, (level or "INFO").upper(), logging.INFO)

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(format_string)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level_num)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level_num)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level_num)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child of the package logger.

    Args:
        name: Module name (usually __name__); a leading package prefix is
            not repeated

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
