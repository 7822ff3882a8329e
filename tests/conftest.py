import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from cannon_sim.game import GameLogic
from cannon_sim.primitives import Target

CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 600


@pytest.fixture
def logic():
    return GameLogic()


@pytest.fixture
def target_record():
    def _make(tid=1, x=700.0, y=500.0, radius=30.0, color="#ef4444"):
        return {"id": tid, "x": x, "y": y, "radius": radius, "color": color}
    return _make


@pytest.fixture
def make_target():
    def _make(tid=1, x=700.0, y=500.0, radius=30.0, is_hit=False):
        return Target(id=tid, x=x, y=y, radius=radius, color="#22c55e", is_hit=is_hit)
    return _make


@pytest.fixture
def play(logic):
    """Drive a state through aim, charge and release."""
    def _fire(state, aim=(200.0, 500.0), charge_ms=2000.0):
        state = logic.update_cannon_angle(state, *aim)
        state = logic.start_charging(state)
        state = logic.update_charge(state, charge_ms)
        return logic.fire_projectile(state)
    return _fire


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
