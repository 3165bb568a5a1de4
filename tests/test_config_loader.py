"""
Unit tests for configuration loading.
"""

import pytest  # pyright: ignore[reportMissingImports]
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.config_loader import (
    DEFAULT_CONFIG,
    get_nested_config,
    load_config,
    load_rename_map
)


class TestLoadConfig:
    """Test YAML config merged over defaults."""

    def test_defaults_without_file(self):
        config = load_config()

        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_partial_override(self, tmp_path):
        path = tmp_path / 'export.yaml'
        path.write_text('output:\n  delimiter: ";"\n')

        config = load_config(path)

        assert config['output']['delimiter'] == ';'
        assert config['output']['missing_value'] == 'NaN'
        assert config['export']['split_messages'] is False

    def test_rename_map_replaced(self, tmp_path):
        path = tmp_path / 'export.yaml'
        path.write_text('rename_map:\n  eyetracker: tracker\n')

        assert load_config(path)['rename_map'] == {'eyetracker': 'tracker'}

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'export.yaml'
        path.write_text('')

        assert load_config(path) == DEFAULT_CONFIG

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / 'export.yaml'
        path.write_text('- a\n- b\n')

        with pytest.raises(ValueError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'missing.yaml')

    def test_defaults_not_mutated(self, tmp_path):
        path = tmp_path / 'export.yaml'
        path.write_text('output:\n  delimiter: "|"\n')

        load_config(path)
        assert DEFAULT_CONFIG['output']['delimiter'] == ','

    def test_shipped_config_loads(self):
        config = load_config(Path(__file__).parent.parent / 'configs' / 'export.yaml')
        assert config == DEFAULT_CONFIG


class TestRenameMapFile:
    """Test standalone rename map files."""

    def test_load(self, tmp_path):
        path = tmp_path / 'names.yaml'
        path.write_text('eyetracker: tracker\nEyetracker timestamp: device timestamp\n')

        assert load_rename_map(path) == {
            'eyetracker': 'tracker',
            'Eyetracker timestamp': 'device timestamp',
        }

    def test_empty(self, tmp_path):
        path = tmp_path / 'names.yaml'
        path.write_text('')
        assert load_rename_map(path) == {}

    def test_unvalidated(self, tmp_path):
        path = tmp_path / 'names.yaml'
        path.write_text('- eyetracker\n')
        assert load_rename_map(path) == ['eyetracker']


class TestGetNestedConfig:
    """Test dot-path config access."""

    def test_found(self):
        assert get_nested_config(DEFAULT_CONFIG, 'output.delimiter') == ','

    def test_default(self):
        assert get_nested_config(DEFAULT_CONFIG, 'output.quote', '"') == '"'
        assert get_nested_config(DEFAULT_CONFIG, 'output.delimiter.x') is None
