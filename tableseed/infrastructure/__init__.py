"""
Infrastructure package for tableseed.

Centralizes database connectivity concerns. Keep this layer focused on I/O and
resource management, decoupled from fetching and generation logic.
"""

from tableseed.infrastructure.db_factory import (
    build_dsn,
    connection_scope,
    get_sync_connection,
)

__all__ = [
    "build_dsn",
    "connection_scope",
    "get_sync_connection",
]
