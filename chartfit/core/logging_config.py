"""Centralized logging configuration for ChartFit.

Configures structured JSON logging for production environments
and human-readable logging for development/CLI usage.
"""

import copy
import logging
import logging.config
from typing import Any


# Default logging configuration
LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
        "console": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
        "json_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": "logs/chartfit.log",
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
        },
    },
    "loggers": {
        "chartfit": {
            "level": "DEBUG",
            "handlers": ["console", "json_file"],
            "propagate": False,
        },
        "mcp_server": {
            "level": "DEBUG",
            "handlers": ["console", "json_file"],
            "propagate": False,
        },
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
}


def build_logging_config(
    json_output: bool = False, log_level: str = "INFO", log_dir: str = "logs"
) -> dict[str, Any]:
    """Build a dictConfig mapping without touching the module default.

    Args:
        json_output: If True, use JSON formatter for console output (for production)
        log_level: Logging level applied to the console handler and package loggers
        log_dir: Directory for the rotating JSON log file

    Returns:
        A fresh configuration dictionary suitable for logging.config.dictConfig
    """
    config = copy.deepcopy(LOGGING_CONFIG)
    config["handlers"]["json_file"]["filename"] = f"{log_dir}/chartfit.log"

    if json_output:
        config["handlers"]["console"]["formatter"] = "json"

    if log_level:
        level = log_level.upper()
        config["handlers"]["console"]["level"] = level
        for logger_name in ("chartfit", "mcp_server"):
            config["loggers"][logger_name]["level"] = level

    return config


def setup_logging(
    json_output: bool = False, log_level: str = "INFO", log_dir: str = "logs"
) -> None:
    """Configure logging for the application.

    Args:
        json_output: If True, use JSON formatter for console output (for production)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating JSON log file (created if missing)
    """
    import os

    os.makedirs(log_dir, exist_ok=True)
    logging.config.dictConfig(build_logging_config(json_output, log_level, log_dir))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Render finished", extra={"attempts": 2, "converged": True})
    """
    return logging.getLogger(name)
