"""
Shared fixtures: synthetic Titta recordings.

The dict layout matches what utils.recording_io.load_recording returns for
a real session file (structs -> dicts, vectors -> 1-D arrays, coordinate
matrices -> (axes, samples) arrays, messages -> N x 2 object array).
"""

import numpy as np
import pytest  # pyright: ignore[reportMissingImports]


def _eye(n_samples: int, offset: float) -> dict:
    samples = np.arange(n_samples, dtype=float)
    return {
        'gazePoint': {
            'valid': np.ones(n_samples, dtype=bool),
            'onDisplayArea': np.vstack([
                0.1 * samples + offset,
                0.05 * samples + offset,
            ]),
            'inUserCoords': np.vstack([samples, samples + 1, samples + 2]) + offset,
        },
        'pupil': {
            'valid': np.ones(n_samples, dtype=bool),
            'diameter': 3.0 + 0.1 * samples + offset,
        },
        'gazeOrigin': {
            'valid': np.ones(n_samples, dtype=bool),
            'inUserCoords': np.vstack([samples, samples, samples]) * 10 + offset,
            'inTrackBoxCoords': np.vstack([samples, samples, samples]) / 10 + offset,
        },
    }


def build_recording(n_samples: int = 5) -> dict:
    """
    Build a small recording.

    System timestamps are 1000, 2000, ...; messages at 1500 and 3500.
    """
    system_time = (np.arange(n_samples, dtype=np.int64) + 1) * 1000
    corner = np.array([-264.0, 15.0, 63.0])

    return {
        'settings': {
            'tracker': 'Tobii Pro Spectrum',
            'trackingMode': 'human',
            'freq': 600,
            'calibrateEye': 'both',
            'licenseFile': 'license.lic',
            'nTryReConnect': 3,
            'connectRetryWait': np.array([1.0, 2.0]),
            'debugMode': False,
        },
        'systemInfo': {
            'deviceName': 'spectrum',
            'serialNumber': 'TPSP1-010109524643',
            'model': 'Tobii Pro Spectrum',
            'firmwareVersion': '2.6.1-core',
            'runtimeVersion': '2.6.1',
            'address': 'tobii-prp://TPSP1-010109524643',
            'capabilities': np.array(
                ['CanSetDisplayArea', 'HasExternalSignal', 'HasEyeImages'], dtype=object
            ),
            'supportedFrequencies': np.array([60.0, 120.0, 150.0, 300.0, 600.0, 1200.0]),
            'supportedModes': np.array(['human', 'monkey'], dtype=object),
            'SDKVersion': '1.9.0',
        },
        'geometry': {
            'displayArea': {
                'height': 29.1,
                'width': 52.7,
                'bottomLeft': corner,
                'bottomRight': corner * [-1, 1, 1],
                'topLeft': corner + [0, 291, 0],
                'topRight': corner * [-1, 1, 1] + [0, 291, 0],
            },
            'trackBox': {
                'backLowerLeft': corner,
                'backLowerRight': corner,
                'backUpperLeft': corner,
                'backUpperRight': corner,
                'frontLowerLeft': corner,
                'frontLowerRight': corner,
                'frontUpperLeft': corner,
                'frontUpperRight': corner,
                'halfWidth': 170.0,
                'halfHeight': 140.0,
            },
        },
        'data': {
            'gaze': {
                'deviceTimeStamp': system_time + 7,
                'systemTimeStamp': system_time,
                'left': _eye(n_samples, 0.0),
                'right': _eye(n_samples, 0.5),
            },
            'notifications': [
                {'systemTimeStamp': 1200, 'notification': 'displayAreaChanged'},
                {'systemTimeStamp': 4200, 'notification': 'calibrationModeEntered'},
            ],
        },
        'messages': np.array(
            [[1500, 'trial 1 start'], [3500, 'trial 1 end']], dtype=object
        ),
        'TobiiLog': [
            {'systemTimeStamp': 900, 'source': 'stream', 'levelOrError': 'info', 'message': 'connected'},
            {'systemTimeStamp': 950, 'source': 'stream', 'levelOrError': 'warning', 'message': 'late sample'},
            {'systemTimeStamp': 990, 'source': 'sdk', 'levelOrError': 'info', 'message': 'subscribed'},
        ],
        'expt': {
            'winRect': np.array([0, 0, 1920, 1080]),
        },
    }


@pytest.fixture
def recording() -> dict:
    return build_recording()
