"""
Logger Setup Module

Provides a colored console logger and optional file logging for the folder compressor.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


class LevelColorFormatter(logging.Formatter):
    """
    Formatter that colors only the levelname in console logs.

    Colors:
        DEBUG    -> Gray
        INFO     -> Green
        WARNING  -> Yellow
        ERROR    -> Red
        CRITICAL -> Magenta

    Example:
        12:00:01 | INFO    | Compressing 42 files with 4 threads
    """

    COLORS = {
        'DEBUG': '\033[90m',
        'INFO': '\033[92m',
        'WARNING': '\033[93m',
        'ERROR': '\033[91m',
        'CRITICAL': '\033[95m'
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record with colored levelname.

        Args:
            record (logging.LogRecord): The log record to format.

        Returns:
            str: Formatted log string with colored level name.
        """
        original_levelname = record.levelname
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        formatted = super().format(record)
        record.levelname = original_levelname
        return formatted


def setup_logger(name: str = "ImageCompressor", log_file: Optional[str] = None) -> logging.Logger:
    """
    Create a logger with colored console output and, optionally, file logging.

    Args:
        name (str): Name of the logger.
        log_file (str, optional): Path to a log file for persistent logging.
            Library modules call this without a file; the entry point adds one.

    Returns:
        logging.Logger: Configured logger instance.

    Notes:
        - The console handler is added once, on the first call for a given name.
        - A file handler is added once per distinct log file path.
        - Console logs have colored level names; file logs are plain text.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(LevelColorFormatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(console_handler)

    if log_file:
        existing = {
            getattr(h, "baseFilename", None)
            for h in logger.handlers
            if isinstance(h, logging.FileHandler)
        }
        if os.path.abspath(log_file) not in existing:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(file_handler)

    return logger
