"""
Struct-array reshape for TobiiLog and notifications.

Both are arrays of records with (mostly) the same fields. Each field
becomes one column; a record that lacks a field contributes MISSING.
"""

from typing import Any, Dict, List, Sequence, Tuple

from table_assembly.accumulator import MISSING


def record_columns(records: Sequence[Dict[str, Any]]) -> List[Tuple[str, List[Any]]]:
    """
    Convert records to (field name, values) pairs.

    Field order is the order in which names are first seen.

    Example:
        [{'level': 'info', 'message': 'a'}, {'level': 'error'}]
        -> [('level', ['info', 'error']), ('message', ['a', MISSING])]
    """
    names: List[str] = []
    for record in records:
        for name in record:
            if name not in names:
                names.append(name)

    return [
        (name, [record.get(name, MISSING) for record in records])
        for name in names
    ]
