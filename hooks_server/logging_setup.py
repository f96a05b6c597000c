"""
Logging configuration for the relay process.

Logs go to stdout and to a file rotated at midnight.
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "app.log"


def configure_logging(level: str, log_dir: Path | str) -> Path:
    """
    Install console and rotating file handlers on the root logger.

    Args:
        level: Logging level name (e.g. "INFO")
        log_dir: Directory for the log file, created if missing

    Returns:
        Path of the active log file

    Raises:
        OSError: If the directory or log file cannot be created
        ValueError: If the level name is unknown
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = TimedRotatingFileHandler(
        log_file, when="midnight", backupCount=14, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console_handler)
    root.addHandler(file_handler)

    return log_file
