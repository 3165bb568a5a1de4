"""
Delimited text export of finished tables.

One file per table: a header row of column names followed by row_count
rows. Tables are rectangular by construction, so no padding happens here.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, Mapping

from table_assembly.accumulator import Cell, Table, is_missing

logger = logging.getLogger(__name__)


def format_cell(cell: Cell, missing_value: str = 'NaN') -> str:
    """Render one cell as text."""
    if is_missing(cell):
        return missing_value
    if isinstance(cell, bool):
        return '1' if cell else '0'
    if isinstance(cell, float):
        return repr(cell) if cell == cell else 'NaN'
    if isinstance(cell, (list, tuple)):
        return ' '.join(format_cell(item, missing_value) for item in cell)
    return str(cell)


def write_table(
    table: Table,
    output_path,
    delimiter: str = ',',
    missing_value: str = 'NaN'
) -> Path:
    """
    Write a table as delimited text.

    Args:
        table: Table to write
        output_path: Destination file path
        delimiter: Field separator
        missing_value: Text written for MISSING cells

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f, delimiter=delimiter)
        writer.writerow(table.column_names)
        for row in table.rows():
            writer.writerow([format_cell(cell, missing_value) for cell in row])

    logger.info(
        f"Wrote {table.name}: {table.row_count} rows x "
        f"{len(table.columns)} columns -> {output_path}"
    )
    return output_path


def write_tables(
    tables: Mapping[str, Table],
    output_dir,
    delimiter: str = ',',
    missing_value: str = 'NaN',
    extension: str = '.csv'
) -> Dict[str, Path]:
    """
    Write every non-empty table to output_dir as '<table id><extension>'.

    Returns:
        Table id -> written path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = {}
    for table_id, table in tables.items():
        if table.is_empty:
            logger.info(f"Skipping empty table: {table_id}")
            continue
        written[table_id] = write_table(
            table,
            output_dir / f"{table_id}{extension}",
            delimiter=delimiter,
            missing_value=missing_value
        )

    return written
