"""
Column name resolution.

Every exported column has a hard-coded default name. Callers can rename
columns globally through a rename map (default name -> export name) or per
call through an explicit override. Priority:

1. Explicit override (when it is a single, non-empty piece of text)
2. Rename map entry for the default name
3. Default name
"""

import warnings
from typing import Any, Dict, Iterator, Mapping, Optional

import numpy as np


class NameResolutionWarning(UserWarning):
    """An override name was malformed and a fallback name was used."""


class InvalidRenameMapError(ValueError):
    """A rename map is not a text -> text mapping."""


class RenameMap(Mapping[str, str]):
    """
    Immutable default-name -> export-name mapping, validated on creation.

    Usage:
        rename_map = RenameMap.from_raw({'eyetracker': 'tracker_name'})
        rename_map['eyetracker']  # 'tracker_name'
    """

    def __init__(self, names: Optional[Mapping[str, str]] = None):
        self._names: Dict[str, str] = dict(names or {})

    @classmethod
    def from_raw(cls, raw: Any) -> "RenameMap":
        """
        Validate an untrusted mapping (e.g. parsed YAML).

        Raises:
            InvalidRenameMapError: raw is not a mapping, or a key or value
                is not text
        """
        if isinstance(raw, RenameMap):
            return raw
        if not isinstance(raw, Mapping):
            raise InvalidRenameMapError(
                f"Rename map must be a mapping, got {type(raw).__name__}"
            )

        bad_entries = [
            (key, value) for key, value in raw.items()
            if not isinstance(key, str) or not isinstance(value, str)
        ]
        if bad_entries:
            raise InvalidRenameMapError(
                f"Rename map entries must be text -> text: {bad_entries[:3]}"
            )

        return cls({str(key): str(value) for key, value in raw.items()})

    def __getitem__(self, default_name: str) -> str:
        return self._names[default_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"RenameMap({self._names!r})"


def resolve_field_name(
    default_name: str,
    rename_map: Optional[Mapping[str, str]] = None,
    override: Any = None
) -> str:
    """
    Resolve the column name for one field.

    Args:
        default_name: Hard-coded default column name
        rename_map: Optional default-name -> export-name mapping
        override: Optional caller-supplied name for this call only

    Returns:
        The override if it is valid text, else the mapped name, else the
        default name

    Warns:
        NameResolutionWarning: override is given but is not a single
            piece of text
    """
    effective_default = default_name
    if rename_map and default_name in rename_map:
        effective_default = rename_map[default_name]

    # A 0-d array (e.g. np.array('name')) is a boxed scalar
    if isinstance(override, np.ndarray) and override.ndim == 0:
        override = override.item()

    if _is_empty(override):
        return effective_default

    if isinstance(override, str):
        return str(override)

    # A one-element sequence holding text (e.g. ['name']) is accepted
    if isinstance(override, (list, tuple, np.ndarray)) and len(override) == 1:
        item = override[0]
        if isinstance(item, str) and item != "":
            return str(item)

    warnings.warn(
        f"Provided field name is invalid, setting to default: {effective_default}",
        NameResolutionWarning,
        stacklevel=2,
    )
    return effective_default


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, np.ndarray):
        return value.size == 0
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False
