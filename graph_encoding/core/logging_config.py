"""Centralized Logging Configuration

Provides a single place to configure logging for the encoding pipeline.

This module provides:
- Console and file logging with consistent formatting
- Logger factory with the graph_encoding naming convention
- Environment-based setup for scripts and notebooks
- Helpers for logging operation start and completion
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER = "graph_encoding"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    file_output: bool = True
) -> None:
    """Setup logging configuration for the graph_encoding namespace

    Library modules never call this; applications call it once at startup.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; file logging is skipped when None
        console_output: Whether to output logs to console
        file_output: Whether to output logs to file
    """
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "detailed": {
                "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(funcName)s() - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            }
        },
        "handlers": {},
        "loggers": {
            ROOT_LOGGER: {
                "level": log_level,
                "handlers": [],
                "propagate": False
            }
        }
    }

    if console_output:
        config["handlers"]["console"] = {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "standard",
            "stream": "ext://sys.stdout"
        }
        config["loggers"][ROOT_LOGGER]["handlers"].append("console")

    if file_output and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "level": log_level,
            "formatter": "detailed",
            "filename": str(log_path),
            "mode": "a",
            "encoding": "utf-8"
        }
        config["loggers"][ROOT_LOGGER]["handlers"].append("file")

    logging.config.dictConfig(config)

    logger = get_logger("core.logging")
    logger.info("Logging system initialized - Level: %s, Console: %s, File: %s",
                log_level, console_output, log_file if file_output else "None")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the graph_encoding namespace

    Args:
        name: Logger name, usually ``__name__``. Names outside the package
            are prefixed with 'graph_encoding.'

    Returns:
        Logger instance

    Example:
        logger = get_logger("visualization.assembler")
        # Creates logger named "graph_encoding.visualization.assembler"
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def auto_setup_logging():
    """Setup logging from GRAPH_ENCODING_LOG_* environment variables"""
    log_level = os.getenv("GRAPH_ENCODING_LOG_LEVEL", "INFO").upper()
    log_file = os.getenv("GRAPH_ENCODING_LOG_FILE")
    console_output = os.getenv("GRAPH_ENCODING_LOG_CONSOLE", "true").lower() == "true"

    setup_logging(
        log_level=log_level,
        log_file=log_file,
        console_output=console_output,
        file_output=log_file is not None
    )


def log_operation_start(logger: logging.Logger, operation: str, **kwargs):
    """Log the start of an operation with context"""
    context = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug("Starting %s%s", operation, f" ({context})" if context else "")


def log_operation_end(logger: logging.Logger, operation: str, duration: float, success: bool = True, **kwargs):
    """Log the completion of an operation with timing"""
    status = "completed" if success else "failed"
    context = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.info("%s %s in %.3fs%s", operation.capitalize(), status, duration,
                f" ({context})" if context else "")
