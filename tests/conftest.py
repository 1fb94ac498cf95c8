import logging

import pytest

from parameters import SimulationParameters
from particle import Particle, ParticleType


@pytest.fixture
def params():
    return SimulationParameters()


@pytest.fixture
def make_particle():
    def _make(x, y, particle_type=ParticleType.RED, vx=0.0, vy=0.0):
        return Particle([x, y], [vx, vy], particle_type)
    return _make


@pytest.fixture
def restore_root_logger():
    """setup_logging replaces the root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
