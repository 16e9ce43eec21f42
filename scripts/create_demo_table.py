"""
Create and fill a demo table for trying out tableseed.

Generates deterministic pseudo-random product rows, including awkward string
values (quotes, backslashes, brackets, newlines, non-ASCII text) so the
generated seed exercises the literal renderer.
"""

from __future__ import annotations

import random
import sys
import time
from decimal import Decimal

import psycopg
import typer
from psycopg import sql

from tableseed.config import get_settings
from tableseed.infrastructure.db_factory import build_dsn

app = typer.Typer(help="Create a demo table and fill it with generated rows.")

_AWKWARD_NAMES = [
    "O'Reilly mug",
    "Back\\slash poster",
    "Braces {} and (parens)",
    "Line one\nline two",
    "Café crème",
    "日本語の本",
    'Say "hello"',
]


def _generate_rows(rows: int, seed: int) -> list[tuple]:
    rng = random.Random(seed)
    generated = []
    for i in range(1, rows + 1):
        name = rng.choice(_AWKWARD_NAMES) if i % 10 == 0 else f"Product {i}"
        price = Decimal(f"{rng.uniform(1, 500):.2f}")
        weight = round(rng.uniform(0.1, 20.0), 3) if i % 7 else None
        is_active = rng.choice([True, False])
        payload = bytes(rng.randrange(256) for _ in range(4))
        generated.append((i, name, price, weight, is_active, payload))
    return generated


def _create_table(conn: psycopg.Connection, table: str) -> None:
    with conn.cursor() as cur:
        cur.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table)))
        cur.execute(
            sql.SQL(
                """
                CREATE TABLE {} (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL,
                    price NUMERIC(10, 2) NOT NULL,
                    weight DOUBLE PRECISION,
                    is_active BOOLEAN NOT NULL,
                    payload BYTEA
                )
                """
            ).format(sql.Identifier(table))
        )


def _fill_table(conn: psycopg.Connection, table: str, rows: list[tuple]) -> None:
    with conn.cursor() as cur:
        cur.executemany(
            sql.SQL(
                "INSERT INTO {} (id, name, price, weight, is_active, payload) "
                "VALUES (%s, %s, %s, %s, %s, %s)"
            ).format(sql.Identifier(table)),
            rows,
        )


@app.command()
def main(
    rows: int = typer.Option(1200, "--rows", "-r", help="Number of rows to generate."),
    table: str = typer.Option("products", "--table", "-t", help="Table to (re)create."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    dsn: str | None = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
) -> None:
    """
    Drop, recreate and fill the demo table.
    """
    start = time.perf_counter()
    with psycopg.connect(dsn or build_dsn(get_settings())) as conn:
        _create_table(conn, table)
        _fill_table(conn, table, _generate_rows(rows, seed))
        conn.commit()
    typer.echo(f"Created {table} with {rows:,} rows in {time.perf_counter() - start:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
