"""Tests for the matplotlib renderer (Agg backend)."""

import dataclasses
from types import SimpleNamespace

import matplotlib.pyplot as plt
import pytest

import cannon_sim.visualization as visualization
from cannon_sim.visualization import CanvasRenderer, RenderSurfaceError

from .conftest import CANVAS_HEIGHT, CANVAS_WIDTH


@pytest.fixture
def renderer():
    return CanvasRenderer(CANVAS_WIDTH, CANVAS_HEIGHT)


@pytest.fixture
def state(logic, target_record):
    return logic.initialize_game([target_record(tid=1, x=130.0, y=500.0),
                                  target_record(tid=2, x=900.0, y=200.0)])


class TestSurface:
    def test_axes_match_canvas(self, renderer):
        assert renderer.ax.get_xlim() == (0.0, CANVAS_WIDTH)
        # inverted for screen coordinates
        assert renderer.ax.get_ylim() == (CANVAS_HEIGHT, 0.0)

    def test_uses_supplied_axes(self):
        fig, ax = plt.subplots()
        renderer = CanvasRenderer(800, 400, ax=ax)
        assert renderer.fig is fig
        assert renderer.ax is ax

    def test_axes_without_figure(self):
        with pytest.raises(RenderSurfaceError):
            CanvasRenderer(800, 400, ax=SimpleNamespace(figure=None))

    def test_figure_creation_failure(self, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("no display")

        monkeypatch.setattr(visualization.plt, "subplots", broken)
        with pytest.raises(RenderSurfaceError, match="no display"):
            CanvasRenderer(800, 400)


class TestDraw:
    def test_initial_frame(self, renderer, state):
        artists = renderer.draw(state, pointer=(300.0, 300.0))
        assert renderer.stats_text in artists
        assert set(renderer.target_patches) == {1, 2}
        group = renderer.target_patches[1]
        assert group["body"].get_visible()
        assert not group["hit_cross_a"].get_visible()
        assert renderer.aim_line.get_visible()
        assert not renderer.projectile_patch.get_visible()
        assert not renderer.charge_arc.get_visible()
        text = renderer.stats_text.get_text()
        assert "Hits: 0" in text
        assert "Remaining: 2" in text
        assert "Angle: -45.0°" in text
        assert "Gravity: 980 px/s²" in text

    def test_charging_frame(self, renderer, logic, state):
        charging = logic.update_charge(logic.start_charging(state), 1000.0)
        renderer.draw(charging, pointer=(300.0, 300.0))
        assert not renderer.aim_line.get_visible()
        assert renderer.charge_arc.get_visible()
        assert renderer.charge_text.get_text() == "50%"
        assert "Velocity: 900 px/s" in renderer.stats_text.get_text()

    def test_projectile_and_trail(self, renderer, logic, target_record, play):
        state = logic.initialize_game([target_record(tid=2, x=900.0, y=200.0)])
        fired = play(state, aim=(200.0, 300.0))
        for _ in range(3):
            fired = logic.update(fired, 16.0, CANVAS_WIDTH, CANVAS_HEIGHT)
        renderer.draw(fired, pointer=(200.0, 300.0))
        assert renderer.projectile_patch.get_visible()
        assert renderer.projectile_patch.center == pytest.approx(
            (fired.projectile.position.x, fired.projectile.position.y))
        assert renderer.trail_line.get_visible()
        assert len(renderer.trail_line.get_xdata()) == 3
        assert not renderer.aim_line.get_visible()

    def test_hit_target_and_win_banner(self, renderer, logic, target_record, play):
        state = logic.initialize_game([target_record(tid=1, x=130.0, y=500.0)])
        won = logic.update(play(state), 16.0, CANVAS_WIDTH, CANVAS_HEIGHT)
        renderer.draw(won)
        group = renderer.target_patches[1]
        assert not group["body"].get_visible()
        assert group["hit_cross_a"].get_visible()
        assert group["hit_outline"].get_visible()
        assert not renderer.projectile_patch.get_visible()
        assert "ALL TARGETS HIT" in renderer.stats_text.get_text()
        assert "Accuracy: 100%" in renderer.stats_text.get_text()

    def test_no_pointer_hides_aim_line(self, renderer, state):
        renderer.draw(state)
        assert not renderer.aim_line.get_visible()

    def test_removed_targets_are_dropped(self, renderer, logic, state, target_record):
        renderer.draw(state)
        renderer.draw(logic.initialize_game([target_record(tid=2, x=900.0, y=200.0)]))
        assert set(renderer.target_patches) == {2}

    def test_draw_does_not_change_state(self, renderer, state):
        before = dataclasses.replace(state)
        renderer.draw(state, pointer=(10.0, 10.0))
        assert state == before

    def test_save(self, renderer, state, tmp_path):
        renderer.draw(state)
        path = tmp_path / "frame.png"
        renderer.save(str(path))
        assert path.exists()
