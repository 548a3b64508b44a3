import logging
import sys
from typing import Optional, Union

from cobweb.config import get_settings

# Log format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str, log_file: Optional[str] = None) -> logging.Logger:
    """Create and configure a logger that writes to stderr and, optionally, a log file."""
    logger = logging.getLogger(name)

    # Only configure if not already configured to avoid duplicate handlers
    if not logger.handlers:
        logger.setLevel(get_settings().log_level.upper())

        formatter = logging.Formatter(LOG_FORMAT)

        # Console Handler (stdout carries the report)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # File Handler
        if log_file:
            try:
                file_handler = logging.FileHandler(log_file, encoding="utf-8")
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
            except OSError as e:
                print(f"Failed to setup file handler for logging: {e}", file=sys.stderr)

    return logger


def set_level(level: Union[int, str]) -> None:
    """Change the level of the shared logger and all of its handlers."""
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


# Global logger instance for convenience
logger = setup_logger("cobweb", get_settings().log_file)
