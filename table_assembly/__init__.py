"""
Table assembly: named columns of differing lengths -> rectangular tables.

This package provides:
1. TableAccumulator (append a column, pad to a shared row count)
2. Column name resolution (override > rename map > default)

Engineering approach:
- Tables only grow; shorter columns are padded with MISSING, never truncated
- Malformed columns fail locally (ShapeError) without touching the table
"""

from .accumulator import (
    MISSING,
    Cell,
    Placeholder,
    ShapeError,
    Table,
    TableAccumulator,
    is_missing,
    normalize_column
)
from .field_names import (
    InvalidRenameMapError,
    NameResolutionWarning,
    RenameMap,
    resolve_field_name
)

__all__ = [
    'MISSING',
    'Cell',
    'Placeholder',
    'ShapeError',
    'Table',
    'TableAccumulator',
    'is_missing',
    'normalize_column',
    'InvalidRenameMapError',
    'NameResolutionWarning',
    'RenameMap',
    'resolve_field_name',
]
