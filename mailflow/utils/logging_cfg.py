"""
Logging configuration for the MailFlow client.

This module sets up logging with rotating file handlers and console output,
providing a centralized way to configure logging throughout the application.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from mailflow import config


# Maximum log file size (10 MB)
MAX_LOG_SIZE = 10 * 1024 * 1024

# Number of backup log files to keep
BACKUP_COUNT = 5


def setup_logging(debug: bool = False, log_dir: Optional[Path] = None) -> Path:
    """
    Configure logging for the MailFlow client.

    Sets up:
    - Rotating file handler for <log_dir>/app.log
    - Console handler for immediate feedback
    - Appropriate log levels based on debug mode

    Args:
        debug: If True, sets log level to DEBUG. Otherwise, uses INFO.
        log_dir: Directory for the log file. Defaults to ``config.LOG_DIR``.

    Returns:
        Path of the log file in use.
    """
    log_dir = Path(log_dir) if log_dir is not None else config.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "app.log"

    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Close handlers from a previous setup so the old file is released
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    detailed_formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        fmt='%(levelname)s - %(message)s'
    )

    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(log_file),
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(file_handler)

    # Console handler (only show WARNING and above unless debug)
    console_handler = logging.StreamHandler()
    console_level = logging.DEBUG if debug else logging.WARNING
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("MailFlow client started")
    logger.info("Log level: %s", logging.getLevelName(log_level))
    logger.info("Log file: %s", log_file)
    logger.info("=" * 60)

    _suppress_noisy_loggers()
    return log_file


def _suppress_noisy_loggers() -> None:
    """Pin verbose third-party loggers to WARNING."""
    # urllib3 is used by requests
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("PyQt5").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance for a module (usually ``__name__``)."""
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """
    Change the log level for all handlers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        handler.setLevel(level)
