"""
Titta recording I/O.

A Titta session is saved from MATLAB as a .mat file whose top-level
variables are the session structs (settings, systemInfo, geometry, data,
messages, TobiiLog, ...).

Engineering decisions:
- scipy.io.loadmat with simplify_cells: structs -> dicts, struct arrays ->
  lists of dicts, 1x1 values -> scalars, row/column vectors -> 1-D arrays
- Fields are addressed with dot paths ('data.gaze.left.pupil.diameter')
  so extraction code never walks the nesting by hand
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import scipy.io

logger = logging.getLogger(__name__)


def load_recording(recording_path) -> Dict[str, Any]:
    """
    Load a Titta .mat recording.

    Args:
        recording_path: Path to .mat file (str or Path)

    Returns:
        Dictionary of top-level variables (MATLAB header entries removed)

    Raises:
        FileNotFoundError: If the file doesn't exist
        RuntimeError: If the file cannot be read as a .mat file
    """
    recording_path = Path(recording_path)
    if not recording_path.exists():
        raise FileNotFoundError(f"Recording file not found: {recording_path}")

    logger.info(f"Loading recording from {recording_path}")

    try:
        contents = scipy.io.loadmat(str(recording_path), simplify_cells=True)
    except (scipy.io.matlab.MatReadError, ValueError, TypeError, IndexError, OSError,
            NotImplementedError) as e:
        raise RuntimeError(f"Failed to read recording {recording_path}: {e}") from e

    recording = {
        key: value for key, value in contents.items()
        if not key.startswith('__')
    }

    logger.debug(f"Recording variables: {list(recording.keys())}")

    return recording


def get_field(recording: Dict[str, Any], path: str) -> Any:
    """
    Get a nested recording field using dot notation.

    Example:
        get_field(recording, 'settings.tracker')

    Raises:
        KeyError: If any segment of the path is missing
    """
    value = recording
    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            raise KeyError(f"Recording field not found: {path}")
    return value


def has_field(recording: Dict[str, Any], path: str) -> bool:
    try:
        get_field(recording, path)
    except KeyError:
        return False
    return True


def as_records(value: Any) -> List[Dict[str, Any]]:
    """
    Normalize a struct, struct array or empty value to a list of dicts.

    loadmat returns a single struct as a dict and a struct array as a list
    (or object array) of dicts.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, np.ndarray):
        value = value.ravel().tolist()
    if isinstance(value, (list, tuple)):
        records = [item for item in value if isinstance(item, dict)]
        if len(records) != len(value):
            logger.warning(
                f"Ignoring {len(value) - len(records)} non-struct entries in struct array"
            )
        return records

    logger.warning(f"Expected a struct array, got {type(value).__name__}")
    return []
