"""
Run seed generation for several tables, one after another.

Usage (example from CLI):
    from tableseed.orchestrator import build_requests, run_tables

    requests = build_requests(["users", "roles"], prerun=["app.hooks:check"])
    outcomes = run_tables(generator, requests, force=True)

Tables are processed strictly sequentially; a failing table is recorded and
the remaining tables still run.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Sequence

import psycopg

from tableseed.domain.models import GenerationRequest
from tableseed.exceptions import TableSeedError
from tableseed.generator import SeedGenerator
from tableseed.registry import update_database_seeder
from tableseed.reporter import TableOutcome
from tableseed.utils.logging import get_logger

log = get_logger(__name__)

Echo = Callable[[str], Any]


def split_option(value: Optional[str]) -> List[str]:
    """Split a comma separated option into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def build_requests(
    tables: Sequence[str],
    prerun: Sequence[str] = (),
    postrun: Sequence[str] = (),
    **options: Any,
) -> List[GenerationRequest]:
    """
    One GenerationRequest per table.

    `prerun` / `postrun` hooks are matched to tables by position; every other
    option applies to all tables.
    """
    requests = []
    for position, table in enumerate(tables):
        requests.append(
            GenerationRequest(
                table=table,
                prerun_hook=prerun[position] if position < len(prerun) else None,
                postrun_hook=postrun[position] if position < len(postrun) else None,
                **options,
            )
        )
    return requests


def result_line(successful: bool, table: str) -> str:
    if successful:
        return f"Created a seed file from table {table}"
    return f"Could not create seed file from table {table}"


def run_tables(
    generator: SeedGenerator,
    requests: Iterable[GenerationRequest],
    force: bool = False,
    update_seeder: bool = False,
    echo: Echo = print,
) -> List[TableOutcome]:
    """
    Generate the seed of every request and report one line per table.

    Existing seed files are kept unless `force` is set.
    """
    outcomes: List[TableOutcome] = []
    for request in requests:
        class_name = generator.class_name_for(request.table, request.prefix, request.suffix)
        path = generator.seed_path_for(class_name)

        if path.exists() and not force:
            log.info(f"[SKIP] {request.table}", extra={"table": request.table, "path": str(path)})
            echo(f"File {class_name}.py already exists, use --force to overwrite it")
            outcomes.append(TableOutcome(table=request.table, status="skipped"))
            continue

        try:
            artifact = generator.generate(request)
            if update_seeder:
                update_database_seeder(generator.seeds_path, artifact.class_name)
        except (TableSeedError, psycopg.Error, OSError, ValueError) as exc:
            log.error(f"[FAILED] {request.table}: {exc}", extra={"table": request.table})
            echo(result_line(False, request.table))
            outcomes.append(TableOutcome(table=request.table, status="failed", error=str(exc)))
            continue

        echo(result_line(True, request.table))
        outcomes.append(TableOutcome(table=request.table, status="created", artifact=artifact))

    return outcomes


__all__ = ["build_requests", "result_line", "run_tables", "split_option"]
