"""
Column-wise table assembly with trailing-placeholder padding.

Recordings are exported one field at a time, and fields of the same logical
table rarely agree on length (a 3-element corner vector next to a scalar
tracker name, a gaze column next to a shorter pupil column). The accumulator
keeps every table rectangular while columns arrive:

- A longer column back-fills every existing column with placeholders
- A shorter column is padded with placeholders before it is stored
- Nothing is ever truncated: the row count is the longest column seen so far

Engineering approach:
- Input normalization (text wrapping, row-vector transposition) happens
  before the length check so that numpy arrays, lists and scalars all
  land in the same column representation
- Malformed input raises ShapeError for that column only; the table is
  left untouched and stays usable
"""

import logging
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Union

import numpy as np

logger = logging.getLogger(__name__)


class Placeholder(Enum):
    """Missing-value marker for a row with no data."""
    MISSING = "missing"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = Placeholder.MISSING

# Number | Text | Missing (non-scalar cells are kept as plain lists)
Cell = Union[int, float, bool, str, Placeholder, list]


class ShapeError(ValueError):
    """Appended data does not form a single column; the column is skipped."""

    INVALID_DIMENSION = "invalid dimension"
    NESTED_DATA = "nested data"

    def __init__(self, column_name: str, reason: str):
        self.column_name = column_name
        self.reason = reason
        super().__init__(f"Cannot add column '{column_name}': {reason}")


def is_missing(cell: Any) -> bool:
    """True if the cell is the missing-value placeholder."""
    return cell is MISSING


@dataclass
class Table:
    """
    Rectangular table of named columns.

    Attributes:
        name: Table identifier (e.g. 'timeSeries')
        columns: Column name -> list of cells, in insertion order
        row_count: Length shared by every column
    """
    name: str
    columns: Dict[str, List[Cell]] = field(default_factory=dict)
    row_count: int = 0

    @property
    def column_names(self) -> List[str]:
        return list(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def __getitem__(self, column_name: str) -> List[Cell]:
        return self.columns[column_name]

    def __contains__(self, column_name: object) -> bool:
        return column_name in self.columns

    def rows(self) -> Iterator[List[Cell]]:
        """Iterate over rows in column order."""
        for i in range(self.row_count):
            yield [column[i] for column in self.columns.values()]


class TableAccumulator:
    """
    Owns a fixed set of tables and grows them one column at a time.

    Usage:
        accumulator = TableAccumulator(['sessionInfo', 'timeSeries'])
        accumulator.append('timeSeries', 'system timestamp', timestamps)
        table = accumulator['timeSeries']
    """

    def __init__(self, table_ids: Iterable[str] = ()):
        self.tables: Dict[str, Table] = {}
        for table_id in table_ids:
            self.add_table(table_id)

    def add_table(self, table_id: str) -> Table:
        """Register an empty table (no-op if it already exists)."""
        if table_id not in self.tables:
            self.tables[table_id] = Table(name=table_id)
        return self.tables[table_id]

    def __getitem__(self, table_id: str) -> Table:
        return self.tables[table_id]

    def __contains__(self, table_id: object) -> bool:
        return table_id in self.tables

    def append(self, table_id: str, column_name: str, values: Any) -> Table:
        """
        Add one column to a table, reconciling lengths.

        Args:
            table_id: Target table (must have been registered)
            column_name: Resolved column name; an existing column is replaced
            values: Text, scalar, 1-D sequence/array, or a single-row or
                single-column 2-D layout

        Returns:
            The updated table

        Raises:
            KeyError: Unknown table_id
            ShapeError: values is not a column (nothing is modified)
        """
        table = self.tables[table_id]
        column = normalize_column(values, column_name)

        diff = len(column) - table.row_count
        if diff > 0 and not table.is_empty:
            for existing in table.columns.values():
                existing.extend([MISSING] * diff)
        elif diff < 0:
            column.extend([MISSING] * -diff)

        if diff > 0:
            table.row_count = len(column)

        table.columns[column_name] = column
        logger.debug(
            f"{table_id}: added '{column_name}' "
            f"({table.row_count} rows, {len(table.columns)} columns)"
        )
        return table


def normalize_column(values: Any, column_name: str = "") -> List[Cell]:
    """
    Turn raw field data into a list of cells.

    Rules:
    1. A single string is a one-row column
    2. A 1 x N layout is transposed (with a warning)
    3. Anything else that is not N x 1 is an invalid dimension
    4. A single row holding a non-trivial sequence is a nesting artifact

    Raises:
        ShapeError: invalid dimension or nested data
    """
    if isinstance(values, str):
        rows = [values]
    elif isinstance(values, np.ndarray):
        rows = _array_rows(values, column_name)
    elif _is_sequence(values):
        rows = _sequence_rows(list(values), column_name)
    else:
        rows = [values]

    if not rows:
        raise ShapeError(column_name, ShapeError.INVALID_DIMENSION)

    if len(rows) == 1 and _is_nested(rows[0]):
        raise ShapeError(column_name, ShapeError.NESTED_DATA)

    return [to_cell(value) for value in rows]


def _array_rows(values: np.ndarray, column_name: str) -> list:
    if values.ndim == 0:
        return [values[()]]
    if values.ndim == 1:
        return list(values)
    if values.ndim > 2:
        raise ShapeError(column_name, ShapeError.INVALID_DIMENSION)

    n_rows, n_cols = values.shape
    if n_rows == 1 and n_cols != 1:
        logger.warning(f"Data must be a column vector. Transposing: {column_name}")
        values = values.T
    if values.shape[1] != 1:
        raise ShapeError(column_name, ShapeError.INVALID_DIMENSION)
    return list(values[:, 0])


def _sequence_rows(values: list, column_name: str) -> list:
    # A list of lists is a row-major 2-D layout
    if not values or not all(isinstance(row, (list, tuple)) for row in values):
        return list(values)

    widths = {len(row) for row in values}
    if len(widths) != 1:
        raise ShapeError(column_name, ShapeError.INVALID_DIMENSION)

    n_cols = widths.pop()
    if len(values) == 1 and n_cols != 1:
        logger.warning(f"Data must be a column vector. Transposing: {column_name}")
        return list(values[0])
    if n_cols != 1:
        raise ShapeError(column_name, ShapeError.INVALID_DIMENSION)
    return [row[0] for row in values]


def _is_nested(value: Any) -> bool:
    """True for a sequence with more than one element (empty and 1x1 are fine)."""
    if isinstance(value, str):
        return False
    if isinstance(value, np.ndarray):
        return value.size > 1
    if _is_sequence(value) or isinstance(value, (Mapping, Set)):
        return len(value) > 1
    return False


def to_cell(value: Any) -> Cell:
    """Unwrap numpy scalars and trivial containers; keep the value's kind."""
    if value is None or value is MISSING:
        return MISSING
    if isinstance(value, str):
        return str(value)
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        if value.size == 0:
            return MISSING
        if value.size == 1:
            return to_cell(value.reshape(-1)[0])
        return value.tolist()
    if _is_sequence(value):
        if not value:
            return MISSING
        if len(value) == 1:
            return to_cell(value[0])
        return list(value)
    return value


def _is_sequence(value: Any) -> bool:
    # Text and bytes are single cells, not sequences of characters
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))
