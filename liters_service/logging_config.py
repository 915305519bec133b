"""
logging_config.py — Centralized Logging Configuration for the Liters Service

This module configures unified logging behavior for the entire application.
It ensures that all modules log messages consistently, whether they run inside a
serverless function or behind the local FastAPI server.

Features:
    • Console output (stdout), picked up by the function platform's log collector
    • Optional additional file output for local runs
    • Process ID tagging for multi-process visibility
    • Reduced verbosity for external dependencies (httpx, httpcore)
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configures the global logging system for the application.

    The configuration includes:
        - Log level: taken from the service configuration (INFO by default)
        - Log format: timestamp, log level, process ID, and message
        - Output destinations:
            1. Console (stdout)
            2. File, only when log_file is given
        - Reduced verbosity for httpx and httpcore

    Args:
        level (str): Name of the log level, e.g. 'INFO' or 'DEBUG'.
        log_file (str, optional): Path of an additional log file.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        # Function runtimes install their own root handler before our code runs.
        force=True,
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a configured logger instance for a given module or component name.

    Args:
        name (str): The logger name, typically the module's __name__.

    Returns:
        logging.Logger: A logger that follows the global format and handlers.
    """
    return logging.getLogger(name)
