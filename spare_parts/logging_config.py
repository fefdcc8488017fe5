"""Centralized logging configuration for the application."""
import logging
import platform
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

from spare_parts.core.config import settings

LOGGER_NAME = "spare_parts"

# Define log format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logs_directory() -> Path:
    """Directory holding the rotating log files."""
    return Path(settings.log_dir)


def get_log_path() -> Path:
    """Path of the general application log, shown to the user from the settings page."""
    return get_logs_directory() / "app.log"


def setup_logging(log_level: Optional[str] = None, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Set up application-wide logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating log files

    Returns:
        Configured logger instance
    """
    level = (log_level or settings.log_level).upper()
    directory = Path(log_dir) if log_dir is not None else get_logs_directory()

    # Create logger
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    directory.mkdir(parents=True, exist_ok=True)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console_handler.setFormatter(console_formatter)

    # File handler - general log
    file_handler = RotatingFileHandler(
        directory / "app.log",
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    file_handler.setFormatter(file_formatter)

    # File handler - error log
    error_handler = RotatingFileHandler(
        directory / "error.log",
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8"
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_formatter)

    # Add handlers to logger
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    logger.addHandler(error_handler)

    return logger


def log_startup_banner(logger: logging.Logger, log_dir: Optional[Path] = None) -> None:
    """Write the application/environment banner at startup."""
    logger.info("=" * 60)
    logger.info("Application started")
    logger.info(f"Version: {settings.app_version}")
    logger.info(f"Platform: {platform.system()} {platform.release()}")
    logger.info(f"Python: {platform.python_version()}")
    logger.info(f"Log path: {log_dir or get_logs_directory()}")
    logger.info("=" * 60)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Name of the module/component

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
