import numpy as np
import pytest

from boids import Boid, FlockSettings


@pytest.fixture
def settings():
    return FlockSettings(count=50, width=1200.0, height=800.0)


@pytest.fixture
def make_boid(settings):
    def _make(position, velocity=(0.0, 0.0), s=None):
        return Boid(position=np.array(position, dtype=float),
                    velocity=np.array(velocity, dtype=float),
                    settings=s or settings)
    return _make
