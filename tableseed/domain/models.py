"""
Domain models for tableseed.

Defines the request that drives one table's seed generation, the artifact
it produces, and the canonical row representation shared by the fetcher,
the serializer and the generator.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

Value = Union[None, bool, int, float, str, bytes]
TableRow = Dict[str, Value]

DEFAULT_CHUNK_SIZE = 500


class Direction(str, Enum):
    """Sort direction applied when an order column is given."""

    ASC = "asc"
    DESC = "desc"

    @property
    def keyword(self) -> str:
        return self.value.upper()


class GenerationRequest(BaseModel):
    """
    Options for generating the seed file of a single table.
    """

    table: str = Field(..., min_length=1, description="Source table name.")
    prefix: Optional[str] = Field(None, description="Prepended to the class/file name.")
    suffix: Optional[str] = Field(None, description="Appended to the class/file name.")
    database: Optional[str] = Field(None, description="Database overriding the configured one.")
    max_rows: int = Field(0, ge=0, description="Row cap; 0 means unlimited.")
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, description="Rows per insert statement.")
    exclude: Tuple[str, ...] = Field((), description="Columns left out of the seed.")
    prerun_hook: Optional[str] = Field(None, description="Hook run before the inserts.")
    postrun_hook: Optional[str] = Field(None, description="Hook run after the inserts.")
    indexed: bool = Field(True, description="Keep positional keys in the batch literals.")
    order_by: Optional[str] = Field(None, description="Column used to order the rows.")
    direction: Direction = Field(Direction.ASC, description="Direction used with order_by.")
    dump_auto: bool = Field(True, description="Refresh the seed registry after writing.")

    model_config = {
        "frozen": True,
    }

    @field_validator("chunk_size", mode="before")
    @classmethod
    def _default_chunk_size(cls, value: Optional[int]) -> int:
        if value is None or int(value) < 1:
            return DEFAULT_CHUNK_SIZE
        return int(value)

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class GeneratedArtifact(BaseModel):
    """
    Result of a successful generation: where the seed class was written.
    """

    table: str
    class_name: str
    path: Path
    rows: int = 0
    batches: int = 0

    model_config = {
        "frozen": True,
    }


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "Direction",
    "GeneratedArtifact",
    "GenerationRequest",
    "TableRow",
    "Value",
]
