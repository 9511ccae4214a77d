"""
Test configuration and fixtures for discrete-hmm.

This file contains pytest configuration and shared fixtures
for testing the discrete HMM engine.
"""

import json
import tempfile
from pathlib import Path

import numpy as np
import pytest

from discrete_hmm.config import reset_config
from discrete_hmm.hmm import DiscreteHMM


@pytest.fixture(autouse=True)
def restore_config():
    """Give every test a fresh global configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def identity_model():
    """Two states, each emitting exactly one symbol, uniform transitions."""
    return DiscreteHMM(
        2, 2,
        initial=[0.5, 0.5],
        transition=[[0.5, 0.5], [0.5, 0.5]],
        emission=[[1.0, 0.0], [0.0, 1.0]]
    )


@pytest.fixture
def chain_model():
    """Left-to-right chain 0 -> 1 -> 2 with no return transitions."""
    return DiscreteHMM(
        3, 2,
        initial=[1.0, 0.0, 0.0],
        transition=[[0.5, 0.5, 0.0],
                    [0.0, 0.5, 0.5],
                    [0.0, 0.0, 1.0]],
        emission=[[1.0, 0.0],
                  [0.0, 1.0],
                  [1.0, 0.0]]
    )


@pytest.fixture
def weather_model():
    """Small model with hand-checked forward/backward values."""
    return DiscreteHMM(
        2, 2,
        initial=[0.6, 0.4],
        transition=[[0.7, 0.3], [0.4, 0.6]],
        emission=[[0.9, 0.1], [0.2, 0.8]]
    )


@pytest.fixture
def biased_model():
    """Uniform transitions, state 0 leaning towards symbol 0."""
    return DiscreteHMM(
        2, 2,
        initial=[0.5, 0.5],
        transition=[[0.5, 0.5], [0.5, 0.5]],
        emission=[[0.7, 0.3], [0.3, 0.7]]
    )


@pytest.fixture
def three_symbol_model():
    """Ergodic 3-state, 3-symbol model used for property checks."""
    return DiscreteHMM(
        3, 3,
        initial=[0.5, 0.3, 0.2],
        transition=[[0.7, 0.2, 0.1],
                    [0.1, 0.8, 0.1],
                    [0.2, 0.3, 0.5]],
        emission=[[0.8, 0.1, 0.1],
                  [0.1, 0.8, 0.1],
                  [0.05, 0.15, 0.8]]
    )


@pytest.fixture
def zero_heavy_observations():
    """Observation sequence dominated by symbol 0."""
    return [0, 0, 0, 1, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 1]


@pytest.fixture
def model_file(temp_dir):
    """JSON definition of the weather model."""
    path = temp_dir / "model.json"
    path.write_text(json.dumps({
        "initial": [0.6, 0.4],
        "transition": [[0.7, 0.3], [0.4, 0.6]],
        "emission": [[0.9, 0.1], [0.2, 0.8]]
    }))
    return path


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(1234)


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
