from __future__ import annotations

import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, Optional

import typer

from tableseed.config import get_settings
from tableseed.domain.models import Direction
from tableseed.fetcher import RowFetcher
from tableseed.generator import SeedGenerator
from tableseed.infrastructure.db_factory import build_dsn, connection_scope
from tableseed.orchestrator import build_requests, run_tables, split_option
from tableseed.registry import clean_database_seeder
from tableseed.reporter import print_results
from tableseed.runtime import run_seed_file
from tableseed.utils.logging import configure_logging

app = typer.Typer(help="Generate Python seed files from database tables.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} "
        f"schema={settings.db_schema} | seeds_path={settings.seeds_path} "
        f"chunk_size={settings.seed_chunk_size} direction={settings.seed_order_direction}"
    )


@app.command()
def seed(
    tables: str = typer.Argument(..., help="Comma separated table names."),
    clean: bool = typer.Option(False, "--clean", help="Clean the tableseed section of the DatabaseSeeder."),
    force: bool = typer.Option(False, "--force", help="Overwrite existing seed files."),
    database: Optional[str] = typer.Option(None, "--database", help="Database name (default from settings)."),
    max_rows: int = typer.Option(0, "--max", help="Maximum number of rows per table (0 = all)."),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunksize", help="Rows per insert statement (default from settings)."
    ),
    exclude: Optional[str] = typer.Option(None, "--exclude", help="Comma separated columns to leave out."),
    prerun: Optional[str] = typer.Option(
        None, "--prerun", help="Comma separated before-hooks, matched to tables by position."
    ),
    postrun: Optional[str] = typer.Option(
        None, "--postrun", help="Comma separated after-hooks, matched to tables by position."
    ),
    dump_auto: bool = typer.Option(
        True, "--dumpauto/--no-dumpauto", help="Refresh the seed directory's __init__.py."
    ),
    noindex: bool = typer.Option(False, "--noindex", help="Drop positional keys from the batch literals."),
    order_by: Optional[str] = typer.Option(None, "--orderby", help="Column to order rows by."),
    direction: Optional[Direction] = typer.Option(
        None, "--direction", case_sensitive=False, help="Order direction (default from settings)."
    ),
    prefix: Optional[str] = typer.Option(None, "--classnameprefix", help="Prefix for class and file name."),
    suffix: Optional[str] = typer.Option(None, "--classnamesuffix", help="Suffix for class and file name."),
    update_seeder: bool = typer.Option(
        False, "--update-seeder", help="Register the generated seeds in the DatabaseSeeder."
    ),
) -> None:
    """
    Generate one seed file per table.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    if clean:
        clean_database_seeder(Path(settings.seeds_path))

    requests = build_requests(
        split_option(tables),
        prerun=split_option(prerun),
        postrun=split_option(postrun),
        database=database,
        max_rows=max(max_rows, 0),
        chunk_size=chunk_size or settings.seed_chunk_size,
        exclude=tuple(split_option(exclude)),
        indexed=not noindex,
        order_by=order_by,
        direction=direction or settings.seed_order_direction,
        dump_auto=dump_auto,
        prefix=prefix,
        suffix=suffix,
    )

    with ExitStack() as stack:
        fetchers: Dict[Optional[str], RowFetcher] = {}

        def fetcher_for(name: Optional[str]) -> RowFetcher:
            if name not in fetchers:
                conn = stack.enter_context(
                    connection_scope(build_dsn(settings, name), autocommit=True)
                )
                fetchers[name] = RowFetcher(conn, schema=settings.db_schema)
            return fetchers[name]

        generator = SeedGenerator(settings, fetcher_factory=fetcher_for)
        outcomes = run_tables(
            generator, requests, force=force, update_seeder=update_seeder, echo=typer.echo
        )

    print_results(outcomes)
    if any(outcome.status == "failed" for outcome in outcomes):
        raise typer.Exit(code=1)


@app.command("run-seed")
def run_seed(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Generated seed file."),
    database: Optional[str] = typer.Option(None, "--database", help="Database name (default from settings)."),
) -> None:
    """
    Execute a generated seed file against the database.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    with connection_scope(build_dsn(settings, database)) as conn:
        seeder = run_seed_file(path, conn, schema=settings.db_schema)
    typer.echo(f"Ran {type(seeder).__name__} from {path}")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
