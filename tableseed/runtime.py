"""
Runtime support for generated seed files.

Every generated seed subclasses `Seeder` and implements `run()` as a
sequence of `self.insert(...)` calls, optionally guarded by before/after
hooks. `run_seed_file` loads such a file and executes it in one transaction.
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import sys
from pathlib import Path
from typing import Any, Callable, List, Mapping, Sequence, Type, Union

from psycopg import Connection, sql

from tableseed.exceptions import SeedHookError, TableSeedError
from tableseed.utils.logging import get_logger

log = get_logger(__name__)

Batch = Union[Mapping[int, Mapping[str, Any]], Sequence[Mapping[str, Any]]]


def resolve_hook(identifier: str) -> Callable[..., Any]:
    """
    Import a hook callable from `"package.module:callable"` or
    `"package.module.callable"`.
    """
    if ":" in identifier:
        module_name, _, attr = identifier.partition(":")
    else:
        module_name, _, attr = identifier.rpartition(".")
    if not module_name or not attr:
        raise SeedHookError(f"Invalid hook identifier '{identifier}'")
    try:
        target = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        raise SeedHookError(f"Cannot import hook '{identifier}': {exc}") from exc
    if not callable(target):
        raise SeedHookError(f"Hook '{identifier}' is not callable")
    return target


class Seeder:
    """Base class of generated seeds."""

    table: str = ""

    def __init__(self, conn: Connection, schema: str = "public") -> None:
        self.conn = conn
        self.schema = schema

    def run(self) -> None:  # pragma: no cover - implemented by generated seeds
        raise NotImplementedError

    def _target(self) -> sql.Identifier:
        return sql.Identifier(self.schema, self.table)

    def delete_all(self) -> None:
        """Remove the table's current rows before the snapshot is inserted."""
        with self.conn.cursor() as cur:
            cur.execute(sql.SQL("DELETE FROM {}").format(self._target()))

    def insert(self, rows: Batch) -> int:
        """
        Insert one batch of rows.

        Accepts the indexed form (`{0: {...}, 1: {...}}`, inserted in key
        order) or the unindexed form (`[{...}, {...}]`). Returns the number of
        rows inserted.
        """
        if isinstance(rows, Mapping):
            batch: List[Mapping[str, Any]] = [rows[key] for key in sorted(rows)]
        else:
            batch = list(rows)
        if not batch:
            return 0

        columns = list(batch[0])
        if not columns:
            query = sql.SQL("INSERT INTO {} DEFAULT VALUES").format(self._target())
            with self.conn.cursor() as cur:
                for _ in batch:
                    cur.execute(query)
            return len(batch)

        query = sql.SQL("INSERT INTO {} ({}) VALUES ({})").format(
            self._target(),
            sql.SQL(", ").join(sql.Identifier(column) for column in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        with self.conn.cursor() as cur:
            cur.executemany(query, [tuple(row.get(column) for column in columns) for row in batch])
        log.debug("Inserted batch", extra={"table": self.table, "rows": len(batch)})
        return len(batch)

    def run_hook(self, identifier: str) -> Any:
        """Call a hook with this seeder; a `False` result rejects the run."""
        return resolve_hook(identifier)(self)

    def call(self, seeder: Union[str, Type["Seeder"]]) -> None:
        """
        Run another seeder on the same connection.

        A string names a seed file next to this seeder's own file.
        """
        if isinstance(seeder, str):
            seeder = load_seeder(Path(inspect.getfile(type(self))).parent / f"{seeder}.py")
        log.info("Calling seeder", extra={"seeder": seeder.__name__})
        seeder(self.conn, schema=self.schema).run()


def load_seeder(path: Path | str) -> Type[Seeder]:
    """Import a generated seed file and return its Seeder subclass."""
    seed_path = Path(path)
    spec = importlib.util.spec_from_file_location(f"tableseed_seed_{seed_path.stem}", seed_path)
    if spec is None or spec.loader is None:
        raise TableSeedError(f"Cannot load seed file '{seed_path}'")
    module = importlib.util.module_from_spec(spec)
    # registered so inspect.getfile() can locate sibling seeds
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)

    candidates = [
        obj
        for obj in vars(module).values()
        if inspect.isclass(obj) and issubclass(obj, Seeder) and obj is not Seeder
    ]
    for candidate in candidates:
        if candidate.__name__ == seed_path.stem:
            return candidate
    if len(candidates) == 1:
        return candidates[0]
    raise TableSeedError(f"No Seeder subclass found in '{seed_path}'")


def run_seed_file(path: Path | str, conn: Connection, schema: str = "public") -> Seeder:
    """
    Execute a generated seed file inside a transaction.

    Rolls back and re-raises if any insert or hook fails.
    """
    seeder_cls = load_seeder(path)
    seeder = seeder_cls(conn, schema=schema)
    log.info("Running seed", extra={"seeder": seeder_cls.__name__, "table": seeder.table})
    try:
        seeder.run()
    except Exception:
        conn.rollback()
        raise
    conn.commit()
    return seeder


__all__ = ["Seeder", "load_seeder", "resolve_hook", "run_seed_file"]
