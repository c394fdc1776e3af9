"""
bootstrap/entrypoints.py - Logging setup and engine bootstrap

The calculators never configure logging themselves; host applications
call setup_logging() (or bootstrap()) once at startup.
"""

from __future__ import annotations
from typing import Optional
import json
import logging
import sys

from .config import EngineConfig, load_config
from .app import Engine

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record):
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    json_format: bool = False,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
        fmt: Format string for plain-text logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = JSONFormatter() if json_format else logging.Formatter(fmt)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)


def bootstrap(config_file: Optional[str] = None, configure_logging: bool = True) -> Engine:
    """
    Load configuration, configure logging and build an Engine.

    Args:
        config_file: Optional JSON config path; otherwise default
            locations and HYDROSTAB_* environment variables are used
        configure_logging: Install log handlers from the logging section
    """
    config: EngineConfig = load_config(config_file)

    if configure_logging:
        setup_logging(
            level=config.logging.level,
            log_file=config.logging.log_file,
            json_format=config.logging.json_logs,
            fmt=config.logging.format,
        )

    engine = Engine(config)
    logger.info("Hydrostatics engine ready")
    return engine
