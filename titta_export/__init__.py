"""
Titta export: eye-tracking session recordings -> delimited tables.

This package implements the export driver:
1. Field inventory (default column names + recording paths)
2. TittaExport session object (extract -> resolve name -> append)
3. Log reshape for TobiiLog / notifications
4. PixelGazeExport example subclass
"""

from .custom_export import PixelGazeExport
from .exporter import (
    MESSAGES,
    NOTIFICATIONS,
    SESSION_INFO,
    TABLE_IDS,
    TIME_SERIES,
    TOBII_LOG,
    SkippedColumn,
    TittaExport
)
from .fields import (
    MESSAGE_FIELDS,
    SESSION_INFO_FIELDS,
    TIME_SERIES_FIELDS,
    FieldSpec,
    find_field
)
from .log_tables import record_columns

__all__ = [
    'PixelGazeExport',
    'MESSAGES',
    'NOTIFICATIONS',
    'SESSION_INFO',
    'TABLE_IDS',
    'TIME_SERIES',
    'TOBII_LOG',
    'SkippedColumn',
    'TittaExport',
    'MESSAGE_FIELDS',
    'SESSION_INFO_FIELDS',
    'TIME_SERIES_FIELDS',
    'FieldSpec',
    'find_field',
    'record_columns',
]
