"""
Seed generator: turn a table snapshot into a Python seed file.

Usage:
    from tableseed.config import get_settings
    from tableseed.domain.models import GenerationRequest
    from tableseed.generator import SeedGenerator

    generator = SeedGenerator(get_settings(), conn)
    generator.generate_seed(GenerationRequest(table="products", order_by="id"))

The written file lives at `<seeds_path>/<ClassName>.py` and is overwritten on
every run. Nothing is written when the table is missing or a value cannot be
serialized.
"""

from __future__ import annotations

import keyword
import re
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from psycopg import Connection

from tableseed.config import Settings
from tableseed.domain.models import GeneratedArtifact, GenerationRequest, TableRow
from tableseed.exceptions import InvalidClassNameError, SeedTemplateError, SeedWriteError
from tableseed.fetcher import RowFetcher
from tableseed.registry import refresh_registry
from tableseed.serializer import INDENT, chunk_rows, normalize_rows, render_batch
from tableseed.utils.logging import get_logger

log = get_logger(__name__)

STUB_PATH = Path(__file__).parent / "stubs" / "seed.stub"
STATEMENT_LEVEL = 2

PRERUN_FAILURE = "Prerun event failed, seed wasn't executed!"
POSTRUN_FAILURE = "Seed was executed but the postrun event failed!"

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")

FetcherFactory = Callable[[Optional[str]], RowFetcher]


def class_name_for(table: str, prefix: Optional[str] = None, suffix: Optional[str] = None) -> str:
    """
    Derive the seed class name (also the file name) from a table name.

    >>> class_name_for("user_roles")
    'UserRolesTableSeeder'
    >>> class_name_for("orders", "Old", "V2")
    'OldOrdersTableSeederV2Seeder'
    """
    base = "".join(part[:1].upper() + part[1:] for part in table.split("_"))
    name = f"{prefix or ''}{base}TableSeeder"
    if suffix:
        name += f"{suffix}Seeder"
    return name


def check_class_name(table: str, class_name: str) -> None:
    """Raise InvalidClassNameError unless `class_name` can be used in a class statement."""
    if not class_name.isidentifier() or keyword.iskeyword(class_name):
        raise InvalidClassNameError(table, class_name)


def seed_path_for(seeds_path: Path, class_name: str) -> Path:
    """Full path of the seed file for a class name."""
    return Path(seeds_path) / f"{class_name}.py"


def _hook_block(hook: Optional[str], failure_message: str) -> str:
    if not hook:
        return ""
    indent = INDENT * STATEMENT_LEVEL
    return (
        f"response = self.run_hook({hook!r})\n"
        f"{indent}if response is False:\n"
        f"{indent}{INDENT}raise SeedHookError({failure_message!r})"
    )


def insert_statements(rows: Sequence[TableRow], chunk_size: int, indexed: bool = True) -> List[str]:
    """One `self.insert(...)` statement per batch, in row order."""
    return [
        f"self.insert({render_batch(batch, indexed=indexed, base_level=STATEMENT_LEVEL)})"
        for batch in chunk_rows(rows, chunk_size)
    ]


def populate_template(
    template: str,
    class_name: str,
    table: str,
    rows: Sequence[TableRow],
    chunk_size: int,
    prerun_hook: Optional[str] = None,
    postrun_hook: Optional[str] = None,
    indexed: bool = True,
) -> str:
    """
    Fill the seed template placeholders.

    Insert statements are separated by a blank line; lines left with only
    whitespace by empty placeholders are stripped.
    """
    separator = "\n\n" + INDENT * STATEMENT_LEVEL
    replacements = {
        "class": class_name,
        "table": repr(table),
        "prerun_event": _hook_block(prerun_hook, PRERUN_FAILURE),
        "postrun_event": _hook_block(postrun_hook, POSTRUN_FAILURE),
        "insert_statements": separator.join(insert_statements(rows, chunk_size, indexed)),
    }
    # single pass, so placeholder text inside substituted values stays literal
    content = _PLACEHOLDER_RE.sub(
        lambda match: replacements.get(match.group(1), match.group(0)), template
    )
    return "\n".join(line.rstrip() for line in content.split("\n"))


def read_template(path: Path = STUB_PATH) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SeedTemplateError(path, exc) from exc


class SeedGenerator:
    """
    Generate seed files for tables of one PostgreSQL database.

    Parameters
    ----------
    settings : Settings
        Seed directory, schema and defaults. Passed in explicitly.
    conn : Connection | None
        Connection used when no `fetcher_factory` is given.
    fetcher_factory : callable | None
        Returns the RowFetcher for a request's `database` (None = default).
    """

    def __init__(
        self,
        settings: Settings,
        conn: Optional[Connection] = None,
        fetcher_factory: Optional[FetcherFactory] = None,
        template_path: Path = STUB_PATH,
    ) -> None:
        if conn is None and fetcher_factory is None:
            raise ValueError("SeedGenerator needs a connection or a fetcher_factory")
        self.settings = settings
        self.seeds_path = Path(settings.seeds_path)
        self.template_path = template_path
        self._fetcher_factory = fetcher_factory or (
            lambda database: RowFetcher(conn, schema=settings.db_schema)
        )

    def class_name_for(self, table: str, prefix: Optional[str] = None, suffix: Optional[str] = None) -> str:
        return class_name_for(table, prefix, suffix)

    def seed_path_for(self, class_name: str) -> Path:
        return seed_path_for(self.seeds_path, class_name)

    def generate(self, request: GenerationRequest) -> GeneratedArtifact:
        """
        Fetch, serialize and write the seed for `request.table`.

        Raises
        ------
        InvalidClassNameError
            If the derived class name is not a Python identifier; nothing is written.
        TableNotFoundError
            If the table does not exist; nothing is written.
        SerializationError
            If a value has no literal form; nothing is written.
        SeedTemplateError
            If the seed template cannot be read.
        SeedWriteError
            If the file cannot be written. A failed registry refresh after a
            successful write is only logged.
        """
        class_name = self.class_name_for(request.table, request.prefix, request.suffix)
        check_class_name(request.table, class_name)
        path = self.seed_path_for(class_name)
        log.info(
            f"[GENERATE] {request.table}",
            extra={"table": request.table, "class_name": class_name, "path": str(path)},
        )

        fetcher = self._fetcher_factory(request.database)
        fetched = fetcher.fetch(
            request.table,
            exclude=request.exclude,
            order_by=request.order_by,
            direction=request.direction,
            limit=request.max_rows,
        )
        rows = normalize_rows(fetched)

        content = populate_template(
            read_template(self.template_path),
            class_name,
            request.table,
            rows,
            request.chunk_size,
            prerun_hook=request.prerun_hook,
            postrun_hook=request.postrun_hook,
            indexed=request.indexed,
        )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise SeedWriteError(path, exc) from exc

        # seed file already written; registry failures only warn
        if request.dump_auto:
            try:
                refresh_registry(path.parent)
            except OSError as exc:
                log.warning(
                    f"[REGISTRY] could not refresh {path.parent / '__init__.py'}: {exc}",
                    extra={"table": request.table, "path": str(path.parent)},
                )

        batches = -(-len(rows) // request.chunk_size)
        log.info(
            f"[GENERATED] {request.table}",
            extra={"table": request.table, "rows": len(rows), "batches": batches},
        )
        return GeneratedArtifact(
            table=request.table, class_name=class_name, path=path, rows=len(rows), batches=batches
        )

    def generate_seed(self, request: GenerationRequest) -> bool:
        """Generate the seed file; True on success, errors propagate."""
        self.generate(request)
        return True


__all__ = [
    "POSTRUN_FAILURE",
    "PRERUN_FAILURE",
    "SeedGenerator",
    "check_class_name",
    "class_name_for",
    "insert_statements",
    "populate_template",
    "read_template",
    "seed_path_for",
]
