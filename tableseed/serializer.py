"""
Render fetched rows as Python literals that can be embedded in a seed file.

Rows are first normalized into driver-independent values (`None`, `bool`,
`int`, `float`, `str`, `bytes`), then each batch is written one key per line
and re-indented by `LiteralScanner`, a small state machine that tracks
bracket depth and string literals one character at a time.

Usage:
    from tableseed.serializer import normalize_rows, render_batch

    rows = normalize_rows(fetcher.fetch("products"))
    literal = render_batch(rows[:500], indexed=True)
"""

from __future__ import annotations

import ipaddress
import json
import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Sequence
from uuid import UUID

from tableseed.domain.models import TableRow, Value
from tableseed.exceptions import SerializationError

INDENT = "    "

_OPENERS = "([{"
_CLOSERS = ")]}"
_QUOTES = "'\""
_ESCAPE = "\\"

_ADDRESS_TYPES = (
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Interface,
    ipaddress.IPv6Interface,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
)


def normalize_value(column: str, value: Any) -> Value:
    """
    Convert a driver value into one of the canonical literal types.

    Values PostgreSQL accepts back as text input (numerics, temporal types,
    UUIDs, network addresses, JSON objects) become strings.

    Raises
    ------
    SerializationError
        If the value has no faithful literal form.
    """
    if value is None or isinstance(value, (bool, int, str, bytes)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializationError(column, value, f"non-finite float {value!r}")
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, Decimal):
        return str(value)
    # datetime is a subclass of date; both render through isoformat
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return f"{value.total_seconds()} seconds"
    if isinstance(value, (UUID,) + _ADDRESS_TYPES):
        return str(value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, sort_keys=False, default=str)
    if isinstance(value, (list, tuple)):
        raise SerializationError(column, value, "array values are not supported")
    raise SerializationError(column, value)


def normalize_rows(rows: Iterable[Any]) -> List[TableRow]:
    """
    Repack fetched rows into fresh ordered dicts of canonical values.

    Accepts mappings (e.g. psycopg `dict_row` results) or objects exposing
    `_asdict()` (named tuples).
    """
    repacked: List[TableRow] = []
    for row in rows:
        items = row._asdict().items() if hasattr(row, "_asdict") else dict(row).items()
        repacked.append({str(column): normalize_value(column, value) for column, value in items})
    return repacked


def render_value(column: str, value: Value) -> str:
    """Render one canonical value as a Python literal."""
    if value is None or isinstance(value, (bool, int, str, bytes)):
        return repr(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializationError(column, value, f"non-finite float {value!r}")
        return repr(value)
    raise SerializationError(column, value)


def _render_row_lines(row: TableRow, opening: str) -> List[str]:
    lines = [opening]
    for column, value in row.items():
        lines.append(f"{column!r}: {render_value(column, value)},")
    lines.append("},")
    return lines


class QuoteState(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


class LiteralScanner:
    """
    Track bracket depth across the lines of a rendered literal.

    Brackets only count while OUTSIDE a string. Inside a string the scanner
    waits for the quote character that opened it; a character following the
    escape marker is consumed without effect, so an escaped quote never
    closes the string.
    """

    def __init__(self) -> None:
        self.state = QuoteState.OUTSIDE
        self.quote = ""
        self.escaped = False
        self.depth = 0

    @property
    def in_string(self) -> bool:
        return self.state is QuoteState.INSIDE

    def feed(self, char: str) -> None:
        if self.state is QuoteState.INSIDE:
            if self.escaped:
                self.escaped = False
            elif char == _ESCAPE:
                self.escaped = True
            elif char == self.quote:
                self.state = QuoteState.OUTSIDE
                self.quote = ""
            return

        if char in _QUOTES:
            self.state = QuoteState.INSIDE
            self.quote = char
        elif char in _OPENERS:
            self.depth += 1
        elif char in _CLOSERS:
            self.depth -= 1

    def feed_line(self, line: str) -> None:
        for char in line:
            self.feed(char)

    def leading_closers(self, line: str) -> int:
        """Number of closing brackets a line starts with (it dedents by that)."""
        if self.in_string:
            return 0
        count = 0
        for char in line:
            if char not in _CLOSERS:
                break
            count += 1
        return count


def indent_literal(content: str, base_level: int = 2, indent: str = INDENT) -> str:
    """
    Re-indent a multi-line literal whose first line sits at `base_level`.

    Every following line is indented `base_level + depth` levels, where depth
    is the number of brackets still open. Lines that start inside a string
    literal are kept verbatim.
    """
    lines = content.split("\n")
    scanner = LiteralScanner()
    scanner.feed_line(lines[0])
    for i in range(1, len(lines)):
        if scanner.in_string:
            line = lines[i]
        else:
            line = lines[i].lstrip()
            level = base_level + scanner.depth - scanner.leading_closers(line)
            line = indent * max(level, 0) + line
        scanner.feed_line(line)
        lines[i] = line
    return "\n".join(lines)


def render_batch(rows: Sequence[TableRow], indexed: bool = True, base_level: int = 2) -> str:
    """
    Render a batch of rows as a literal.

    Indexed mode produces a dict keyed by row position (`{0: {...}, 1: {...}}`);
    unindexed mode produces a list of column-keyed dicts (`[{...}, {...}]`).
    """
    lines = ["{" if indexed else "["]
    for position, row in enumerate(rows):
        lines.extend(_render_row_lines(row, f"{position}: {{" if indexed else "{"))
    lines.append("}" if indexed else "]")
    return indent_literal("\n".join(lines), base_level=base_level)


def chunk_rows(rows: Sequence[TableRow], chunk_size: int) -> List[Sequence[TableRow]]:
    """Split rows into consecutive batches of `chunk_size` (last may be smaller)."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return [rows[start : start + chunk_size] for start in range(0, len(rows), chunk_size)]


__all__ = [
    "INDENT",
    "LiteralScanner",
    "QuoteState",
    "chunk_rows",
    "indent_literal",
    "normalize_rows",
    "normalize_value",
    "render_batch",
    "render_value",
]
