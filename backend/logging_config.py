"""Shared logging configuration for the gridslice backend."""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FILE_NAME = "gridslice.log"
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


def setup_logging(name: str, level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """Set up logging with console and rotating file handlers.

    Child loggers (``gridslice.extract`` and friends) propagate here, so only
    the root ``gridslice`` logger needs handlers.

    Args:
        name: Logger name
        level: Log level string (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for the rotating log file; defaults to backend/logs

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    # Create logs directory
    log_dir = log_dir or os.path.join(os.path.dirname(__file__), "logs")
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # Console handler (INFO and above)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (rotating, captures all levels)
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Request logs come from our middleware; keep uvicorn's access log quiet
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return logger
