"""
logger.py

Centralized logging configuration for printer-discovery.
Provides consistent logging across all modules.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from datetime import datetime

from printer_discovery.utils.config import config


LOGGER_NAME = "printer_discovery"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LoggerSetup:
    """
    Configures library-wide logging with console and optional file output.
    """

    _initialized = False

    @classmethod
    def setup(cls) -> logging.Logger:
        """
        Initialize and return the main library logger.
        Only configures once, subsequent calls return existing logger.
        """
        logger = logging.getLogger(LOGGER_NAME)

        if cls._initialized:
            return logger

        log_level = config.get("logging.level", "INFO")
        console_output = config.get("logging.console_output", True)
        file_output = config.get("logging.file_output", False)
        logs_dir = config.get("paths.logs_dir", "logs")
        max_bytes = config.get("logging.max_log_size_mb", 10) * 1024 * 1024
        backup_count = config.get("logging.backup_count", 5)

        numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)
        logger.setLevel(numeric_level)

        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(numeric_level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        # File handler with rotation
        if file_output:
            logs_path = Path(logs_dir)
            logs_path.mkdir(parents=True, exist_ok=True)

            log_file = logs_path / f"printer_discovery_{datetime.now().strftime('%Y%m%d')}.log"

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8"
            )
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        cls._initialized = True
        logger.debug("Logging system initialized")

        return logger


# Create global logger instance
app_logger = LoggerSetup.setup()
