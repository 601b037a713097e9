"""
Utility functions for Sortly services
"""

from .app_logger import configure_logging, get_logger, get_sortly_logger

__all__ = ["configure_logging", "get_logger", "get_sortly_logger"]
