"""
Bookkeeping files of the seed directory.

- `__init__.py` re-exports every generated seed class so the directory can be
  imported as a package (`refresh_registry`).
- `database_seeder.py` holds a `DatabaseSeeder` whose run method calls each
  generated seed between two marker comments (`update_database_seeder`,
  `clean_database_seeder`).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from tableseed.utils.logging import get_logger

log = get_logger(__name__)

REGISTRY_FILE = "__init__.py"
DATABASE_SEEDER_FILE = "database_seeder.py"
SECTION_START = "# tableseed_start"
SECTION_END = "# tableseed_end"

_STUB_PATH = Path(__file__).parent / "stubs" / "database_seeder.stub"
_SECTION_RE = re.compile(
    rf"^(?P<indent>[ \t]*){re.escape(SECTION_START)}\n(?P<body>.*?)^[ \t]*{re.escape(SECTION_END)}",
    re.MULTILINE | re.DOTALL,
)


def seed_modules(seeds_path: Path) -> List[str]:
    """Sorted module names of the generated seeds in a directory."""
    if not seeds_path.is_dir():
        return []
    return sorted(
        path.stem
        for path in seeds_path.glob("*Seeder.py")
        if path.is_file() and path.stem.isidentifier() and path.stem != "DatabaseSeeder"
    )


def refresh_registry(seeds_path: Path) -> Path:
    """
    Rewrite `<seeds_path>/__init__.py` with one import per generated seed.

    Returns the registry path.
    """
    modules = seed_modules(seeds_path)
    lines = ['"""Generated seed classes. Rewritten by tableseed; do not edit."""', ""]
    lines.extend(f"from .{name} import {name}" for name in modules)
    lines.append("")
    lines.append("__all__ = [")
    lines.extend(f'    "{name}",' for name in modules)
    lines.append("]")

    seeds_path.mkdir(parents=True, exist_ok=True)
    registry = seeds_path / REGISTRY_FILE
    registry.write_text("\n".join(lines) + "\n", encoding="utf-8")
    log.info("Seed registry refreshed", extra={"path": str(registry), "seeders": len(modules)})
    return registry


def _read_database_seeder(seeds_path: Path) -> str:
    path = seeds_path / DATABASE_SEEDER_FILE
    if path.exists():
        return path.read_text(encoding="utf-8")
    return _STUB_PATH.read_text(encoding="utf-8")


def update_database_seeder(seeds_path: Path, class_name: str) -> bool:
    """
    Add `self.call("<class_name>")` to the marked section of the DatabaseSeeder.

    Creates the file from its template when missing. Returns False if the
    call was already present.
    """
    content = _read_database_seeder(seeds_path)
    call = f'self.call("{class_name}")'
    if call in content:
        return False

    match = _SECTION_RE.search(content)
    if match is None:
        raise ValueError(
            f"{seeds_path / DATABASE_SEEDER_FILE} has no '{SECTION_START}' / '{SECTION_END}' section"
        )
    indent = match.group("indent")
    body = match.group("body") + f"{indent}{call}\n"
    content = (
        content[: match.start()]
        + f"{indent}{SECTION_START}\n{body}{indent}{SECTION_END}"
        + content[match.end() :]
    )

    seeds_path.mkdir(parents=True, exist_ok=True)
    (seeds_path / DATABASE_SEEDER_FILE).write_text(content, encoding="utf-8")
    log.info("DatabaseSeeder updated", extra={"seeder": class_name})
    return True


def clean_database_seeder(seeds_path: Path) -> bool:
    """Empty the marked section of the DatabaseSeeder. Returns False if no file exists."""
    path = seeds_path / DATABASE_SEEDER_FILE
    if not path.exists():
        return False
    content = path.read_text(encoding="utf-8")
    match = _SECTION_RE.search(content)
    if match is None:
        return False
    indent = match.group("indent")
    content = (
        content[: match.start()] + f"{indent}{SECTION_START}\n{indent}{SECTION_END}" + content[match.end() :]
    )
    path.write_text(content, encoding="utf-8")
    log.info("DatabaseSeeder section cleaned", extra={"path": str(path)})
    return True


__all__ = [
    "DATABASE_SEEDER_FILE",
    "REGISTRY_FILE",
    "clean_database_seeder",
    "refresh_registry",
    "seed_modules",
    "update_database_seeder",
]
