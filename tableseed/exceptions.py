"""Exceptions raised while generating and running seed files."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class TableSeedError(Exception):
    """Base exception for tableseed errors."""

    pass


class TableNotFoundError(TableSeedError):
    """Table does not exist in the target schema."""

    def __init__(self, table: str, schema: str):
        self.table = table
        self.schema = schema
        super().__init__(
            f"Table '{table}' not found in schema '{schema}'.\n\n"
            f"Suggestions:\n"
            f"1. Check table name spelling\n"
            f"2. Check the --database option and DB_SCHEMA setting\n"
            f"3. Ensure table exists: CREATE TABLE {schema}.{table} (...);"
        )


class SerializationError(TableSeedError):
    """A column value cannot be written as a Python literal."""

    def __init__(self, column: str, value: Any, reason: str | None = None):
        self.column = column
        self.value = value
        detail = reason or f"unsupported type {type(value).__name__}"
        super().__init__(
            f"Cannot serialize value of column '{column}': {detail}.\n\n"
            f"Suggestions:\n"
            f"1. Exclude the column with --exclude {column}\n"
            f"2. Cast the column to text in a view and seed the view instead"
        )


class InvalidClassNameError(TableSeedError):
    """The class name derived from a table is not a usable Python identifier."""

    def __init__(self, table: str, class_name: str):
        self.table = table
        self.class_name = class_name
        super().__init__(
            f"Table '{table}' gives class name '{class_name}', which is not a valid "
            f"Python class name.\n\n"
            f"Suggestions:\n"
            f"1. Use --classnameprefix with a leading letter if the table name starts with a digit\n"
            f"2. Check --classnameprefix / --classnamesuffix for spaces or punctuation\n"
            f"3. Seed a view with a snake_case name if the table name has spaces or dashes"
        )


class SeedWriteError(TableSeedError):
    """Writing the seed file failed."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write seed file '{path}': {cause}")


class SeedTemplateError(TableSeedError):
    """The seed template could not be read."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read seed template '{path}': {cause}")


class SeedHookError(TableSeedError):
    """A before/after hook rejected the seed run."""

    pass


__all__ = [
    "TableSeedError",
    "TableNotFoundError",
    "SerializationError",
    "InvalidClassNameError",
    "SeedWriteError",
    "SeedTemplateError",
    "SeedHookError",
]
