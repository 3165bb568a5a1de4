"""
Inventory of exported fields.

Each FieldSpec pairs a default column name with the dot path of its data
inside a Titta recording. Coordinate matrices (2 x N or 3 x N) are split
into one column per axis with `row`; the N x 2 messages cell is split into
timestamp and text with `column`.

Default names are export headers only; they are not Titta or Tobii SDK
field names.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from utils.recording_io import get_field


@dataclass(frozen=True)
class FieldSpec:
    """
    One exportable field.

    Attributes:
        default_name: Column name used when no rename/override applies
        path: Dot path into the recording
        row: Row of a coordinate matrix to export (None = whole value)
        column: Column of an N x k cell to export (None = whole value)
    """
    default_name: str
    path: str
    row: Optional[int] = None
    column: Optional[int] = None

    def extract(self, recording: Dict[str, Any]) -> Any:
        """
        Pull this field's values out of a recording.

        Raises:
            KeyError: The path does not exist in the recording
        """
        value = get_field(recording, self.path)
        if self.row is None and self.column is None:
            return value

        if isinstance(value, np.ndarray):
            array = value
        else:
            array = np.array(value, dtype=object)

        if self.row is not None:
            # A single sample is squeezed to (axes,) on load
            if array.ndim == 1:
                array = array.reshape(-1, 1)
            return array[self.row, :]

        # A single message is squeezed to (k,) on load
        if array.ndim == 1:
            array = array.reshape(1, -1)
        return array[:, self.column]


def _axes(default_name: str, path: str, axes: str = "XYZ") -> List[FieldSpec]:
    return [
        FieldSpec(default_name.format(axis=axis), path, row=i)
        for i, axis in enumerate(axes)
    ]


EXPORT_DATE = "export date"

SESSION_INFO_FIELDS: List[FieldSpec] = [
    # settings
    FieldSpec("eyetracker", "settings.tracker"),
    FieldSpec("mode", "settings.trackingMode"),
    FieldSpec("sampling frequency", "settings.freq"),
    FieldSpec("calibrated eye", "settings.calibrateEye"),
    FieldSpec("license file", "settings.licenseFile"),
    FieldSpec("reconnection attempts", "settings.nTryReConnect"),
    FieldSpec("reconnection wait", "settings.connectRetryWait"),
    FieldSpec("debug mode", "settings.debugMode"),
    # systemInfo
    FieldSpec("device name", "systemInfo.deviceName"),
    FieldSpec("serial number", "systemInfo.serialNumber"),
    FieldSpec("model", "systemInfo.model"),
    FieldSpec("firmware version", "systemInfo.firmwareVersion"),
    FieldSpec("runtime version", "systemInfo.runtimeVersion"),
    FieldSpec("connection address", "systemInfo.address"),
    FieldSpec("capabilities", "systemInfo.capabilities"),
    FieldSpec("supported frequencies", "systemInfo.supportedFrequencies"),
    FieldSpec("supported modes", "systemInfo.supportedModes"),
    FieldSpec("SDK version", "systemInfo.SDKVersion"),
    # geometry.displayArea
    FieldSpec("display area height", "geometry.displayArea.height"),
    FieldSpec("display area width", "geometry.displayArea.width"),
    FieldSpec("display area bottom left", "geometry.displayArea.bottomLeft"),
    FieldSpec("display area bottom right", "geometry.displayArea.bottomRight"),
    FieldSpec("display area top left", "geometry.displayArea.topLeft"),
    FieldSpec("display area top right", "geometry.displayArea.topRight"),
    # geometry.trackBox
    FieldSpec("track box back lower left", "geometry.trackBox.backLowerLeft"),
    FieldSpec("track box back lower right", "geometry.trackBox.backLowerRight"),
    FieldSpec("track box back upper left", "geometry.trackBox.backUpperLeft"),
    FieldSpec("track box back upper right", "geometry.trackBox.backUpperRight"),
    FieldSpec("track box front lower left", "geometry.trackBox.frontLowerLeft"),
    FieldSpec("track box front lower right", "geometry.trackBox.frontLowerRight"),
    FieldSpec("track box front upper left", "geometry.trackBox.frontUpperLeft"),
    FieldSpec("track box front upper right", "geometry.trackBox.frontUpperRight"),
    FieldSpec("track box half width", "geometry.trackBox.halfWidth"),
    FieldSpec("track box half height", "geometry.trackBox.halfHeight"),
]

SYSTEM_TIMESTAMP_PATH = "data.gaze.systemTimeStamp"

TIME_SERIES_FIELDS: List[FieldSpec] = [
    FieldSpec("Eyetracker timestamp", "data.gaze.deviceTimeStamp"),
    FieldSpec("system timestamp", SYSTEM_TIMESTAMP_PATH),
    FieldSpec("Validity of gaze left", "data.gaze.left.gazePoint.valid"),
    FieldSpec("Validity of gaze right", "data.gaze.right.gazePoint.valid"),
    *_axes("Gaze point left {axis} (adcs)", "data.gaze.left.gazePoint.onDisplayArea", "XY"),
    *_axes("Gaze point right {axis} (adcs)", "data.gaze.right.gazePoint.onDisplayArea", "XY"),
    *_axes("Gaze point left {axis} (ucs)", "data.gaze.left.gazePoint.inUserCoords"),
    *_axes("Gaze point right {axis} (ucs)", "data.gaze.right.gazePoint.inUserCoords"),
    FieldSpec("Validity of pupil left", "data.gaze.left.pupil.valid"),
    FieldSpec("Validity of pupil right", "data.gaze.right.pupil.valid"),
    FieldSpec("Pupil diameter left", "data.gaze.left.pupil.diameter"),
    FieldSpec("Pupil diameter right", "data.gaze.right.pupil.diameter"),
    FieldSpec("Validity of gaze origin left", "data.gaze.left.gazeOrigin.valid"),
    FieldSpec("Validity of gaze origin right", "data.gaze.right.gazeOrigin.valid"),
    *_axes("Gaze origin left {axis} (ucs)", "data.gaze.left.gazeOrigin.inUserCoords"),
    *_axes("Gaze origin right {axis} (ucs)", "data.gaze.right.gazeOrigin.inUserCoords"),
    *_axes("Gaze origin left {axis} (tbcs)", "data.gaze.left.gazeOrigin.inTrackBoxCoords"),
    *_axes("Gaze origin right {axis} (tbcs)", "data.gaze.right.gazeOrigin.inTrackBoxCoords"),
]

MESSAGES_PATH = "messages"

MESSAGE_FIELDS: List[FieldSpec] = [
    FieldSpec("system timestamp", MESSAGES_PATH, column=0),
    FieldSpec("message", MESSAGES_PATH, column=1),
]


def find_field(fields: List[FieldSpec], default_name: str) -> FieldSpec:
    """Look up a field by its default name."""
    for spec in fields:
        if spec.default_name == default_name:
            return spec
    raise KeyError(f"Unknown field: {default_name}")
