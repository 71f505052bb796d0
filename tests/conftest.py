"""Pytest configuration - headless pygame and shared flock fixtures."""

import os

# pygame must not try to open a window or audio device under test
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from boids import Flock, FlockConfig


@pytest.fixture
def classic_config():
    """Default configuration (classic 10-bird constants)."""
    return FlockConfig()


@pytest.fixture(params=["numba", "python"])
def backend(request):
    """Run a test once per compute backend."""
    return request.param


@pytest.fixture
def make_flock():
    """Factory: build a flock from explicit state with config overrides."""
    def _make(positions, velocities=None, **overrides):
        if velocities is None:
            velocities = [[0.0, 0.0, 0.0] for _ in positions]
        return Flock.from_state(positions, velocities, FlockConfig(**overrides))
    return _make
