"""
utils package

Provides shared utilities like configuration management and logging.
"""

from printer_discovery.utils.config import config
from printer_discovery.utils.logger import app_logger

__all__ = ["config", "app_logger"]
