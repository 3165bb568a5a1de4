"""
End-to-end tests for the command-line export.
"""

import csv
import logging

import numpy as np
import pytest  # pyright: ignore[reportMissingImports]
import scipy.io
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from main import main, run_export
from utils.config_loader import load_config


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def mat_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / 'session.mat'
    scipy.io.savemat(str(path), {
        'settings': {'tracker': 'Tobii Pro Spectrum', 'freq': 600},
        'data': {
            'gaze': {
                'systemTimeStamp': np.array([1000, 2000, 3000]),
                'deviceTimeStamp': np.array([1007, 2007, 3007]),
            },
        },
        'messages': np.array([[1500, 'trial 1 start'], [2500, 'trial 1 end']], dtype=object),
    })
    return path


def read_dicts(path):
    with open(path, newline='', encoding='utf-8') as f:
        return list(csv.DictReader(f))


class TestMain:
    """Test the CLI entry point."""

    def test_export_with_split(self, mat_file, tmp_path):
        output = tmp_path / 'out'
        code = main(['--recording', str(mat_file), '--output', str(output), '--split-messages'])

        assert code == 0
        assert (output / 'sessionInfo.csv').exists()
        assert (output / 'messages.csv').exists()
        assert not (output / 'TobiiLog.csv').exists()
        assert (output / 'titta2delim.log').exists()

        rows = read_dicts(output / 'timeSeries.csv')
        assert [row['system timestamp'] for row in rows] == ['1000', '2000', '3000']
        assert [row['prior message'] for row in rows] == ['', 'trial 1 start', 'trial 1 end']
        assert rows[0]['prior message timestamp'] == 'NaN'
        assert rows[2]['post message timestamp'] == 'NaN'

    def test_rename_map_and_delimiter(self, mat_file, tmp_path):
        names = tmp_path / 'names.yaml'
        names.write_text('eyetracker: tracker\n')
        output = tmp_path / 'out'

        code = main([
            '--recording', str(mat_file),
            '--output', str(output),
            '--rename-map', str(names),
            '--delimiter', ';',
        ])

        assert code == 0
        header = (output / 'sessionInfo.csv').read_text(encoding='utf-8').splitlines()[0]
        assert header.split(';')[:2] == ['export date', 'tracker']

    def test_strict_fails_on_skipped_columns(self, mat_file, tmp_path):
        code = main(['--recording', str(mat_file), '--output', str(tmp_path / 'out'), '--strict'])
        assert code == 1

    def test_missing_recording(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        code = main(['--recording', str(tmp_path / 'nope.mat'), '--output', str(tmp_path / 'out')])
        assert code == 1

    def test_missing_config(self, mat_file, tmp_path):
        code = main([
            '--recording', str(mat_file),
            '--output', str(tmp_path / 'out'),
            '--config', str(tmp_path / 'missing.yaml'),
        ])
        assert code == 1

    def test_unreadable_recording(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = tmp_path / 'broken.mat'
        path.write_text('this is not a mat file\n' * 20)

        code = main(['--recording', str(path), '--output', str(tmp_path / 'out')])
        assert code == 1


class TestRunExport:
    """Test the programmatic entry point."""

    def test_pixel_gaze_without_window_rect(self, mat_file, tmp_path):
        result = run_export(str(mat_file), load_config(), str(tmp_path / 'out'), pixel_gaze=True)

        export = result['export']
        skipped = {s.column_name for s in export.skipped_columns}
        assert 'window size' in skipped
        assert 'prior message' in export.time_series
        assert set(result['files']) == {'sessionInfo', 'timeSeries', 'messages'}
