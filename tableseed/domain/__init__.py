"""
Domain package for tableseed.

Exports the request/artifact models and row types used across the fetcher,
serializer and generator. Keep this package focused on data definitions.
"""

from tableseed.domain.models import (
    DEFAULT_CHUNK_SIZE,
    Direction,
    GeneratedArtifact,
    GenerationRequest,
    TableRow,
    Value,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "Direction",
    "GeneratedArtifact",
    "GenerationRequest",
    "TableRow",
    "Value",
]
