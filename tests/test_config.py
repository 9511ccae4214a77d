"""
Tests for configuration management system.
"""

import pytest
import json

from discrete_hmm.config import (
    get_config, set_config, update_config,
    load_config_file, save_config_file,
    get_all_config, reset_config, DEFAULT_CONFIG
)


def test_default_config():
    """Test that default configuration is loaded correctly."""
    # Training defaults
    assert get_config('hmm', 'max_iterations') == 100
    assert get_config('hmm', 'convergence_tolerance') == 1e-10
    assert get_config('hmm', 'stochastic_tolerance') == 1e-10

    # Sampling defaults
    assert get_config('sampling', 'random_seed') is None
    assert get_config('sampling', 'sample_initial_state') is False

    assert get_config('logging', 'level') == 'INFO'


def test_get_config_section():
    """Test getting entire configuration sections."""
    hmm_config = get_config('hmm')
    assert isinstance(hmm_config, dict)
    assert 'max_iterations' in hmm_config
    assert 'convergence_tolerance' in hmm_config


def test_missing_keys():
    """Unknown sections and keys read as empty."""
    assert get_config('nonexistent') == {}
    assert get_config('hmm', 'nonexistent') is None


def test_set_config():
    """Test setting individual configuration values."""
    set_config('hmm', 'max_iterations', 5)
    assert get_config('hmm', 'max_iterations') == 5

    # Set value in new section
    set_config('test_section', 'test_key', 'test_value')
    assert get_config('test_section', 'test_key') == 'test_value'


def test_update_config():
    """Test updating configuration with dictionary."""
    update_dict = {
        'hmm': {
            'max_iterations': 20,
            'new_setting': True
        },
        'new_section': {
            'key1': 'value1',
            'key2': 42
        }
    }

    update_config(update_dict)

    assert get_config('hmm', 'max_iterations') == 20
    assert get_config('hmm', 'new_setting') is True
    assert get_config('new_section', 'key1') == 'value1'
    assert get_config('new_section', 'key2') == 42

    # Check that other values are preserved
    assert get_config('hmm', 'stochastic_tolerance') == 1e-10


def test_config_file_operations(temp_dir):
    """Test saving and loading configuration files."""
    config_file = temp_dir / "nested" / "test_config.json"

    set_config('hmm', 'max_iterations', 7)
    set_config('test', 'value', 123)

    save_config_file(str(config_file))
    assert config_file.exists()
    assert json.loads(config_file.read_text())['hmm']['max_iterations'] == 7

    # Reset and verify it's back to defaults
    reset_config()
    assert get_config('hmm', 'max_iterations') == 100
    assert get_config('test', 'value') is None

    load_config_file(str(config_file))
    assert get_config('hmm', 'max_iterations') == 7
    assert get_config('test', 'value') == 123


def test_get_all_config():
    """Test getting complete configuration dictionary."""
    all_config = get_all_config()

    assert isinstance(all_config, dict)
    assert 'hmm' in all_config
    assert 'sampling' in all_config
    assert 'logging' in all_config

    # Verify it's a copy (modifications don't affect original)
    all_config['hmm']['max_iterations'] = 99999
    assert get_config('hmm', 'max_iterations') != 99999


def test_reset_config():
    """Test resetting configuration to defaults."""
    set_config('hmm', 'max_iterations', 1)
    set_config('custom', 'key', 'value')

    reset_config()

    assert get_config('hmm', 'max_iterations') == 100
    assert get_config('custom', 'key') is None


def test_reset_does_not_share_defaults():
    """Changes after a reset never leak into the defaults."""
    reset_config()
    set_config('sampling', 'random_seed', 5)

    assert DEFAULT_CONFIG['sampling']['random_seed'] is None


def test_invalid_config_file(temp_dir):
    """Test handling of invalid configuration files."""
    with pytest.raises(ValueError):
        load_config_file(str(temp_dir / "nonexistent.json"))

    invalid_file = temp_dir / "invalid.json"
    invalid_file.write_text("{ invalid json }")

    with pytest.raises(ValueError):
        load_config_file(str(invalid_file))


def test_environment_overrides(monkeypatch):
    """Environment variables override defaults on reset."""
    monkeypatch.setenv('DISCRETE_HMM_MAX_ITERATIONS', '12')
    monkeypatch.setenv('DISCRETE_HMM_CONVERGENCE_TOLERANCE', '0.5')
    monkeypatch.setenv('DISCRETE_HMM_RANDOM_SEED', '3')

    reset_config()

    assert get_config('hmm', 'max_iterations') == 12
    assert get_config('hmm', 'convergence_tolerance') == 0.5
    assert get_config('sampling', 'random_seed') == 3


def test_invalid_environment_override(monkeypatch):
    """Unparseable environment values are ignored with a warning."""
    monkeypatch.setenv('DISCRETE_HMM_MAX_ITERATIONS', 'many')

    with pytest.warns(UserWarning, match="DISCRETE_HMM_MAX_ITERATIONS"):
        reset_config()

    assert get_config('hmm', 'max_iterations') == 100


def test_environment_log_level(monkeypatch):
    monkeypatch.setenv('DISCRETE_HMM_LOG_LEVEL', 'debug')

    reset_config()

    assert get_config('logging', 'level') == 'DEBUG'


def test_unknown_environment_log_level(monkeypatch):
    monkeypatch.setenv('DISCRETE_HMM_LOG_LEVEL', 'loud')

    with pytest.warns(UserWarning, match="DISCRETE_HMM_LOG_LEVEL"):
        reset_config()

    assert get_config('logging', 'level') == 'INFO'


def test_environment_config_file(monkeypatch, temp_dir):
    """DISCRETE_HMM_CONFIG points at a JSON file loaded on reset."""
    config_file = temp_dir / "env_config.json"
    config_file.write_text(json.dumps({'hmm': {'max_iterations': 4}}))
    monkeypatch.setenv('DISCRETE_HMM_CONFIG', str(config_file))

    reset_config()

    assert get_config('hmm', 'max_iterations') == 4
