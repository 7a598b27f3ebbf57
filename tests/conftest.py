import random

import pytest

from funhouse.data_models import SceneBounds, SceneSettings
from funhouse.physics import PhysicsBody
from funhouse.vector_utils import Point3d, Vector3d


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bounds():
    return SceneBounds(left=-2.0, right=2.0, top=1.5, bottom=-1.5)


@pytest.fixture
def settings():
    return SceneSettings()


@pytest.fixture
def make_body(settings, clock):
    def _make(x=0.0, y=0.0, radius=None, velocity=(0.0, 0.0), color=(200, 200, 255)):
        body = PhysicsBody(color, Point3d(x, y, 0.0), settings=settings, rng=random.Random(7), clock=clock)
        if radius is not None:
            body.radius = radius
        body.velocity = Vector3d(velocity[0], velocity[1], 0.0)
        return body
    return _make
