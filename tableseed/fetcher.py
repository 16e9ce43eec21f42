"""
Row fetcher: read a table's rows as ordered column -> value mappings.

Table existence and column listing go through `information_schema`; the data
query is composed with `psycopg.sql` so table and column names are always
quoted identifiers. Access is read-only.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from psycopg import Connection, sql
from psycopg.rows import dict_row

from tableseed.domain.models import Direction, TableRow
from tableseed.exceptions import TableNotFoundError
from tableseed.utils.logging import get_logger

log = get_logger(__name__)


def select_columns(all_columns: Sequence[str], exclude: Iterable[str]) -> List[str]:
    """
    Return `all_columns` minus `exclude`, keeping the table's column order.
    """
    excluded = set(exclude)
    return [column for column in all_columns if column not in excluded]


def build_select(
    schema: str,
    table: str,
    columns: Optional[Sequence[str]] = None,
    order_by: Optional[str] = None,
    direction: Direction = Direction.ASC,
    limit: int = 0,
) -> tuple[sql.Composed, tuple]:
    """
    Compose the SELECT statement for a fetch and its parameters.

    `columns=None` selects every column; `limit=0` means no LIMIT clause.
    """
    if columns is None:
        projection: sql.Composable = sql.SQL("*")
    else:
        projection = sql.SQL(", ").join(sql.Identifier(column) for column in columns)

    parts: List[sql.Composable] = [
        sql.SQL("SELECT {} FROM {}").format(projection, sql.Identifier(schema, table))
    ]
    params: tuple = ()
    if order_by:
        parts.append(
            sql.SQL("ORDER BY {} {}").format(
                sql.Identifier(order_by), sql.SQL(Direction(direction).keyword)
            )
        )
    if limit > 0:
        parts.append(sql.SQL("LIMIT %s"))
        params = (limit,)
    return sql.SQL(" ").join(parts), params


class RowFetcher:
    """
    Fetch rows of one table from a PostgreSQL schema.
    """

    def __init__(self, conn: Connection, schema: str = "public") -> None:
        self.conn = conn
        self.schema = schema

    def has_table(self, table: str) -> bool:
        """Check if a table (or view) exists in the schema."""
        with self.conn.cursor() as cur:
            cur.execute(
                """
                SELECT EXISTS(
                    SELECT 1 FROM information_schema.tables
                    WHERE table_schema = %s AND table_name = %s
                )
                """,
                (self.schema, table),
            )
            return bool(cur.fetchone()[0])

    def get_column_listing(self, table: str) -> List[str]:
        """Live column names of a table in ordinal order (never cached)."""
        with self.conn.cursor() as cur:
            cur.execute(
                """
                SELECT column_name
                FROM information_schema.columns
                WHERE table_schema = %s AND table_name = %s
                ORDER BY ordinal_position
                """,
                (self.schema, table),
            )
            return [row[0] for row in cur.fetchall()]

    def fetch(
        self,
        table: str,
        exclude: Iterable[str] = (),
        order_by: Optional[str] = None,
        direction: Direction = Direction.ASC,
        limit: int = 0,
    ) -> List[TableRow]:
        """
        Fetch the rows of `table`.

        Parameters
        ----------
        table : str
            Table name within `self.schema`.
        exclude : iterable[str]
            Columns left out of the result.
        order_by : str | None
            Column to order by; no ordering when None.
        direction : Direction
            Sort direction used with `order_by`.
        limit : int
            Maximum number of rows; 0 means unlimited.

        Raises
        ------
        TableNotFoundError
            If the table does not exist; raised before any data query.
        """
        if not self.has_table(table):
            raise TableNotFoundError(table, self.schema)

        exclude = list(exclude)
        columns = None
        if exclude:
            columns = select_columns(self.get_column_listing(table), exclude)

        query, params = build_select(
            self.schema, table, columns=columns, order_by=order_by, direction=direction, limit=limit
        )
        with self.conn.cursor(row_factory=dict_row) as cur:
            cur.execute(query, params)
            rows = cur.fetchall()

        log.debug(
            "Fetched rows",
            extra={"table": table, "rows": len(rows), "excluded": exclude, "order_by": order_by},
        )
        return rows


__all__ = ["RowFetcher", "build_select", "select_columns"]
