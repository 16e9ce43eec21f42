"""
tableseed - generate Python seed files from PostgreSQL tables.

Reads a snapshot of a table's rows and writes a seeder module that, when run,
deletes the table's rows and inserts the snapshot back in fixed-size batches:

- Row fetching with column exclusion, ordering and row limits
- Literal rendering that round-trips through `ast.literal_eval`
- Optional before/after hooks guarding the generated inserts
- A seed registry and DatabaseSeeder kept in sync with the generated files
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from tableseed.config import Settings, get_settings
from tableseed.domain.models import Direction, GeneratedArtifact, GenerationRequest
from tableseed.exceptions import (
    InvalidClassNameError,
    SeedHookError,
    SeedTemplateError,
    SeedWriteError,
    SerializationError,
    TableNotFoundError,
    TableSeedError,
)
from tableseed.fetcher import RowFetcher
from tableseed.generator import SeedGenerator, class_name_for
from tableseed.runtime import Seeder, run_seed_file
from tableseed.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Generation
    "Direction",
    "GeneratedArtifact",
    "GenerationRequest",
    "RowFetcher",
    "SeedGenerator",
    "class_name_for",
    # Runtime
    "Seeder",
    "run_seed_file",
    # Errors
    "SeedHookError",
    "InvalidClassNameError",
    "SeedTemplateError",
    "SeedWriteError",
    "SerializationError",
    "TableNotFoundError",
    "TableSeedError",
    # Logging
    "configure_logging",
    "get_logger",
]
