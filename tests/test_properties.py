"""Property-based tests for the game-state invariants."""

import pytest
from hypothesis import given, settings, strategies as st

from cannon_sim.collisions import CollisionDetector
from cannon_sim.engine import PhysicsEngine
from cannon_sim.game import GameLogic
from cannon_sim.primitives import Target, Vector2D
from cannon_sim.state import Phase

WIDTH, HEIGHT = 1200, 600

LAYOUT = [
    {"id": 1, "x": 130.0, "y": 470.0, "radius": 30.0, "color": "#ef4444"},
    {"id": 2, "x": 420.0, "y": 380.0, "radius": 30.0, "color": "#f97316"},
    {"id": 3, "x": 780.0, "y": 420.0, "radius": 26.0, "color": "#22c55e"},
]

coords = st.floats(min_value=-200.0, max_value=1400.0, allow_nan=False)
delta_ms = st.floats(min_value=0.0, max_value=100.0, allow_nan=False)

actions = st.one_of(
    st.tuples(st.just("aim"), coords, coords),
    st.tuples(st.just("press")),
    st.tuples(st.just("release")),
    st.tuples(st.just("frame"), delta_ms),
    st.tuples(st.just("reset")),
)


def apply(logic, state, action):
    kind = action[0]
    if kind == "aim":
        return logic.update_cannon_angle(state, action[1], action[2])
    if kind == "press":
        return logic.start_charging(state)
    if kind == "release":
        return logic.fire_projectile(state)
    if kind == "frame":
        state = logic.update_charge(state, action[1])
        return logic.update(state, action[1], WIDTH, HEIGHT)
    return logic.reset_game(state)


@given(st.floats(min_value=0.0, max_value=1.0, allow_nan=False))
def test_velocity_is_linear_in_charge(power):
    assert PhysicsEngine().calculate_velocity(power) == pytest.approx(600.0 + 600.0 * power)


@settings(max_examples=200, deadline=None)
@given(st.lists(actions, max_size=120))
def test_invariants_hold_over_any_action_sequence(sequence):
    logic = GameLogic()
    state = logic.initialize_game(LAYOUT)
    for action in sequence:
        previous = state
        state = apply(logic, state, action)

        assert 0.0 <= state.cannon.charge_power <= 1.0
        assert state.total_shots >= state.score
        assert state.score == sum(t.is_hit for t in state.targets)
        assert state.game_won == all(t.is_hit for t in state.targets)
        assert not (state.phase is Phase.IN_FLIGHT and state.cannon.is_charging)
        if state.projectile is not None:
            assert len(state.projectile.trail) <= 50
        if previous.game_won and action[0] != "reset":
            assert state.score == previous.score
            assert state.total_shots == previous.total_shots


@settings(deadline=None)
@given(st.lists(actions, max_size=60))
def test_reset_always_clears(sequence):
    logic = GameLogic()
    state = logic.initialize_game(LAYOUT)
    for action in sequence:
        state = apply(logic, state, action)
    aimed_angle = state.cannon.angle
    reset = logic.reset_game(state)
    assert reset.game_won is False
    assert reset.projectile is None
    assert reset.score == 0 and reset.total_shots == 0
    assert reset.cannon.angle == aimed_angle


@given(st.lists(st.booleans(), max_size=10))
def test_all_targets_hit_matches_flags(flags):
    targets = [Target(id=i, x=0.0, y=0.0, radius=1.0, color="#fff", is_hit=flag)
               for i, flag in enumerate(flags)]
    assert CollisionDetector().are_all_targets_hit(targets) == all(flags)


@given(coords, coords)
def test_detected_target_is_first_unhit_in_range(x, y):
    targets = [Target(id=i, x=100.0 + 40.0 * i, y=300.0, radius=30.0, color="#fff",
                      is_hit=(i == 1))
               for i in range(4)]
    point = Vector2D(x, y)
    in_range = [t for t in targets
                if not t.is_hit and point.distance_to(t.position) <= t.radius + 5.0]
    hit = CollisionDetector().detect_target_hit(point, targets)
    if in_range:
        assert hit == in_range[0]
    else:
        assert hit is None
