"""
Pytest configuration for tableseed.

Provides fixtures for:
- Settings pointing the seed directory at a temporary path
- Fake psycopg connections recording the statements they receive
- A fake row fetcher serving in-memory tables to the generator
- Database connection management for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Optional

import psycopg
import pytest

from tableseed.config import Settings
from tableseed.domain.models import Direction
from tableseed.exceptions import TableNotFoundError
from tableseed.fetcher import select_columns


class FakeCursor:
    """Cursor answering information_schema queries from its FakeConnection."""

    def __init__(self, conn: "FakeConnection", row_factory: Any = None) -> None:
        self.conn = conn
        self.row_factory = row_factory
        self._rows: List[Any] = []

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        return False

    def execute(self, query: Any, params: Any = None) -> None:
        self.conn.executed.append((query, params))
        text = query if isinstance(query, str) else ""
        if "information_schema.tables" in text:
            self._rows = [(self.conn.table_exists,)]
        elif "information_schema.columns" in text:
            self._rows = [(column,) for column in self.conn.columns]
        else:
            self._rows = [dict(row) for row in self.conn.rows]

    def executemany(self, query: Any, params_seq: Iterable[Any]) -> None:
        self.conn.executed_many.append((query, list(params_seq)))

    def fetchone(self) -> Any:
        return self._rows[0] if self._rows else None

    def fetchall(self) -> List[Any]:
        return list(self._rows)


class FakeConnection:
    """Stand-in for psycopg.Connection that records every statement."""

    def __init__(
        self,
        columns: Optional[List[str]] = None,
        rows: Optional[List[Dict[str, Any]]] = None,
        table_exists: bool = True,
    ) -> None:
        self.columns = columns or []
        self.rows = rows or []
        self.table_exists = table_exists
        self.executed: List[tuple] = []
        self.executed_many: List[tuple] = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, row_factory: Any = None) -> FakeCursor:
        return FakeCursor(self, row_factory=row_factory)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeFetcher:
    """In-memory RowFetcher: tables are lists of ordered dicts."""

    def __init__(self, tables: Dict[str, List[Dict[str, Any]]], schema: str = "public") -> None:
        self.tables = tables
        self.schema = schema
        self.calls: List[dict] = []

    def fetch(
        self,
        table: str,
        exclude: Iterable[str] = (),
        order_by: Optional[str] = None,
        direction: Direction = Direction.ASC,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        self.calls.append(
            {"table": table, "exclude": tuple(exclude), "order_by": order_by, "direction": direction, "limit": limit}
        )
        if table not in self.tables:
            raise TableNotFoundError(table, self.schema)
        rows = [dict(row) for row in self.tables[table]]
        if exclude and rows:
            keep = select_columns(list(rows[0]), exclude)
            rows = [{column: row[column] for column in keep} for row in rows]
        if order_by:
            rows.sort(key=lambda row: row[order_by], reverse=Direction(direction) is Direction.DESC)
        if limit > 0:
            rows = rows[:limit]
        return rows


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings with the seed directory inside pytest's tmp_path.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "postgres"),
        seeds_path=tmp_path / "database" / "seeders",
        log_level="DEBUG",
    )


@pytest.fixture
def fake_connection_factory():
    """Build FakeConnection instances."""
    return FakeConnection


@pytest.fixture
def fake_fetcher_factory():
    """Build FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def products_rows() -> List[Dict[str, Any]]:
    """1200 product rows with a few awkward values mixed in."""
    rows = []
    for i in range(1, 1201):
        rows.append(
            {
                "id": i,
                "name": f"Product {i}" if i % 100 else "O'Brien's \\ {special} (item)",
                "price": i * 1.5,
                "weight": None if i % 3 == 0 else float(i) / 10,
                "is_active": i % 2 == 0,
            }
        )
    return rows


@pytest.fixture(scope="session")
def test_dsn() -> str:
    """
    Database connection string for integration tests.
    """
    return (
        f"postgresql://{os.getenv('DB_USER', 'postgres')}:{os.getenv('DB_PASSWORD', 'postgres')}"
        f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '5432')}"
        f"/{os.getenv('DB_NAME', 'postgres')}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide an autocommit database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()
