"""
Database connection factory utilities for tableseed.

Seed generation is sequential and read-only, so a single dedicated psycopg
connection per CLI invocation is enough. Connection acquisition retries
transient failures using tenacity; generation itself is never retried.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

import psycopg
from psycopg import Connection
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tableseed.config import Settings


def build_dsn(settings: Settings, database: Optional[str] = None) -> str:
    """
    Compose a DSN string from settings.

    Parameters
    ----------
    settings : Settings
        Effective configuration.
    database : str | None
        Database name overriding `settings.db_name` (the `--database` option).
    """
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{database or settings.db_name}"
        f"?connect_timeout={settings.db_connect_timeout}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: str, autocommit: bool = False) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn, autocommit=autocommit)


@contextmanager
def connection_scope(dsn: str, autocommit: bool = False) -> Generator[Connection, None, None]:
    """
    Context manager yielding a connection that is closed on exit.

    Example
    -------
        with connection_scope(build_dsn(settings)) as conn:
            RowFetcher(conn).fetch("products")
    """
    conn = get_sync_connection(dsn, autocommit=autocommit)
    try:
        yield conn
    finally:
        conn.close()


__all__ = [
    "build_dsn",
    "connection_scope",
    "get_sync_connection",
]
