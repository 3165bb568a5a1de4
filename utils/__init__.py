"""Shared utilities for the Titta export tool."""

from .config_loader import load_config, load_rename_map, get_nested_config
from .delimited_writer import write_table, write_tables
from .recording_io import load_recording, get_field, has_field, as_records

__all__ = [
    'load_config',
    'load_rename_map',
    'get_nested_config',
    'write_table',
    'write_tables',
    'load_recording',
    'get_field',
    'has_field',
    'as_records',
]
