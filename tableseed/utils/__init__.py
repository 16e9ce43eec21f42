"""
Utilities package for tableseed.

Exports shared helpers for cross-cutting concerns such as logging.
Keep this package lightweight and free of seed-generation logic.
"""

from tableseed.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
