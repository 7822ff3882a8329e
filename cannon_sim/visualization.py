"""
Matplotlib-based rendering of the cannon simulation.

The renderer only reads game state. Screen coordinates are used, so the
y axis is inverted to put the origin at the top-left corner.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging
import math
import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.lines import Line2D
from matplotlib.patches import Arc, Circle as MPLCircle
from .primitives import CannonState, Projectile, Target
from .state import GameState

logger = logging.getLogger(__name__)

BACKGROUND = '#0a0a0a'
GRID_COLOR = '#1a1a1a'
GRID_SPACING = 50
CANNON_BASE_RADIUS = 20
CHARGE_RING_RADIUS = 35
PROJECTILE_RADIUS = 5
HIT_MARK_SIZE = 15

CHARGE_COLORS = LinearSegmentedColormap.from_list('charge', ['#10b981', '#fbbf24', '#dc2626'])


class RenderSurfaceError(RuntimeError):
    """Raised when no drawing surface can be set up."""


class CanvasRenderer:
    """Draws game snapshots onto a matplotlib axes."""

    def __init__(self, width: float, height: float, ax: Optional[Any] = None,
                 figsize: Tuple[float, float] = (12, 6)):
        """
        Initialize renderer.

        Args:
            width: Play area width, shared with the physics bounds check
            height: Play area height
            ax: Axes to draw on; a new figure is created when omitted
            figsize: Figure size (width, height) for a new figure

        Raises:
            RenderSurfaceError: If the figure or axes cannot be created
        """
        if ax is None:
            try:
                fig, ax = plt.subplots(figsize=figsize)
            except Exception as exc:
                raise RenderSurfaceError(f"Could not create drawing surface: {exc}") from exc
        fig = getattr(ax, 'figure', None)
        if fig is None or getattr(fig, 'canvas', None) is None:
            raise RenderSurfaceError("Axes has no figure canvas to draw on")

        self.fig = fig
        self.ax = ax
        self.width = float(width)
        self.height = float(height)

        self._setup_axes()

        # Visual elements
        self.target_patches: Dict[Any, Dict[str, Any]] = {}
        self.cannon_base = MPLCircle((0, 0), CANNON_BASE_RADIUS, zorder=5)
        self.cannon_barrel = Line2D([], [], linewidth=12, solid_capstyle='round', zorder=4)
        self.cannon_tip = MPLCircle((0, 0), 4, facecolor='#fef3c7', zorder=6)
        self.charge_background = MPLCircle((0, 0), CHARGE_RING_RADIUS, fill=False,
                                           edgecolor='#2a2a2a', linewidth=6, zorder=3)
        self.charge_arc = Arc((0, 0), 2 * CHARGE_RING_RADIUS, 2 * CHARGE_RING_RADIUS,
                              linewidth=6, zorder=3)
        self.charge_text = self.ax.text(0, 0, "", color='white', fontsize=9, fontweight='bold',
                                        ha='center', va='center', zorder=7)
        self.projectile_patch = MPLCircle((0, 0), PROJECTILE_RADIUS, facecolor='#22d3ee',
                                          edgecolor='#06b6d4', zorder=8)
        self.trail_line = Line2D([], [], color='#06b6d4', linewidth=2, alpha=0.5, zorder=7)
        self.aim_line = Line2D([], [], color='#fbbf24', linewidth=1, linestyle='--',
                               alpha=0.5, zorder=2)
        for patch in (self.cannon_base, self.cannon_tip, self.charge_background,
                      self.charge_arc, self.projectile_patch):
            self.ax.add_patch(patch)
        for line in (self.cannon_barrel, self.trail_line, self.aim_line):
            self.ax.add_line(line)

        # Statistics display
        self.stats_text = self.ax.text(0.01, 0.98, "", transform=self.ax.transAxes,
                                       verticalalignment='top', fontfamily='monospace',
                                       color='white', fontsize=9, zorder=10)

        logger.info(f"Renderer initialized for a {self.width:g}x{self.height:g} canvas")

    def _setup_axes(self) -> None:
        self.fig.patch.set_facecolor(BACKGROUND)
        self.ax.set_facecolor(BACKGROUND)
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)
        self.ax.set_aspect('equal')
        self.ax.set_xticks(range(0, int(self.width), GRID_SPACING))
        self.ax.set_yticks(range(0, int(self.height), GRID_SPACING))
        self.ax.tick_params(left=False, bottom=False, labelleft=False, labelbottom=False)
        self.ax.grid(True, color=GRID_COLOR, linewidth=1)
        self.ax.set_axisbelow(True)
        for spine in self.ax.spines.values():
            spine.set_visible(False)

    def draw(self, state: GameState, pointer: Optional[Tuple[float, float]] = None) -> List[Any]:
        """
        Update every artist from a snapshot.

        Args:
            state: Snapshot to draw
            pointer: Last pointer position, for the aim preview line

        Returns:
            Artists touched this frame
        """
        artists: List[Any] = []
        artists.extend(self._draw_targets(state.targets))
        artists.extend(self._draw_cannon(state.cannon))
        artists.extend(self._draw_projectile(state.projectile))

        projectile_active = state.projectile is not None and state.projectile.active
        show_aim = pointer is not None and not projectile_active and not state.cannon.is_charging
        if show_aim:
            self.aim_line.set_data([state.cannon.position.x, pointer[0]],
                                   [state.cannon.position.y, pointer[1]])
        self.aim_line.set_visible(show_aim)
        artists.append(self.aim_line)

        self._update_stats(state)
        artists.append(self.stats_text)
        return artists

    def _draw_targets(self, targets: Tuple[Target, ...]) -> List[Any]:
        artists = []
        for target in targets:
            if target.id not in self.target_patches:
                self.target_patches[target.id] = self._create_target_artists(target)
            group = self.target_patches[target.id]
            for name, artist in group.items():
                if name.startswith('hit_'):
                    artist.set_visible(target.is_hit)
                else:
                    artist.set_visible(not target.is_hit)
                artists.append(artist)

        # Remove artists for targets no longer in the layout
        current_ids = {target.id for target in targets}
        for target_id in list(self.target_patches.keys()):
            if target_id not in current_ids:
                for artist in self.target_patches[target_id].values():
                    artist.remove()
                del self.target_patches[target_id]
        return artists

    def _create_target_artists(self, target: Target) -> Dict[str, Any]:
        """Create patches for a target in both its active and hit looks."""
        center = (target.x, target.y)
        group = {
            'glow': MPLCircle(center, target.radius * 1.2, facecolor=target.color,
                              edgecolor='none', alpha=0.25),
            'body': MPLCircle(center, target.radius, facecolor=target.color, edgecolor='none'),
            'outer_ring': MPLCircle(center, target.radius * 0.7, fill=False,
                                    edgecolor='white', linewidth=2),
            'inner_ring': MPLCircle(center, target.radius * 0.4, fill=False,
                                    edgecolor='white', linewidth=2),
            'hit_outline': MPLCircle(center, target.radius, fill=False,
                                     edgecolor='#4a4a4a', linewidth=2),
        }
        for patch in group.values():
            self.ax.add_patch(patch)

        s = HIT_MARK_SIZE
        group['hit_cross_a'] = Line2D([target.x - s, target.x + s], [target.y - s, target.y + s],
                                      color='#ef4444', linewidth=3)
        group['hit_cross_b'] = Line2D([target.x + s, target.x - s], [target.y - s, target.y + s],
                                      color='#ef4444', linewidth=3)
        self.ax.add_line(group['hit_cross_a'])
        self.ax.add_line(group['hit_cross_b'])
        return group

    def _draw_cannon(self, cannon: CannonState) -> List[Any]:
        x, y = cannon.position.x, cannon.position.y
        tip_x, tip_y = cannon.muzzle

        self.cannon_base.center = (x, y)
        self.cannon_base.set_facecolor('#f59e0b' if cannon.is_charging else '#fbbf24')
        self.cannon_barrel.set_data([x, tip_x], [y, tip_y])
        self.cannon_barrel.set_color('#dc2626' if cannon.is_charging else '#f59e0b')
        self.cannon_tip.center = (tip_x, tip_y)

        # Charge ring sweeps clockwise on screen from twelve o'clock
        self.charge_background.center = (x, y)
        self.charge_background.set_visible(cannon.is_charging)
        self.charge_arc.center = (x, y)
        self.charge_arc.theta1 = 270.0
        self.charge_arc.theta2 = 270.0 + 360.0 * cannon.charge_power
        self.charge_arc.set_edgecolor(CHARGE_COLORS(cannon.charge_power))
        self.charge_arc.set_visible(cannon.is_charging and cannon.charge_power > 0)
        self.charge_text.set_position((x, y))
        self.charge_text.set_text(f"{round(cannon.charge_power * 100)}%" if cannon.is_charging else "")

        return [self.cannon_base, self.cannon_barrel, self.cannon_tip,
                self.charge_background, self.charge_arc, self.charge_text]

    def _draw_projectile(self, projectile: Optional[Projectile]) -> List[Any]:
        active = projectile is not None and projectile.active
        self.projectile_patch.set_visible(active)
        self.trail_line.set_visible(active and len(projectile.trail) > 1)
        if active:
            self.projectile_patch.center = (projectile.position.x, projectile.position.y)
            if len(projectile.trail) > 1:
                points = projectile.trail.as_array()
                self.trail_line.set_data(points[:, 0], points[:, 1])
        return [self.projectile_patch, self.trail_line]

    def _update_stats(self, state: GameState) -> None:
        """Update statistics display."""
        stats_text = (f"Hits: {state.score}\n"
                      f"Total Shots: {state.total_shots}\n"
                      f"Remaining: {state.remaining_targets}\n"
                      f"Accuracy: {state.accuracy}%\n"
                      f"Angle: {state.current_angle:.1f}°\n"
                      f"Velocity: {round(state.current_velocity)} px/s\n"
                      f"Acceleration: {math.hypot(*state.acceleration):g} px/s²\n"
                      f"Gravity: {state.gravity:g} px/s²")

        if state.game_won:
            stats_text += "\nALL TARGETS HIT"

        self.stats_text.set_text(stats_text)

    def save(self, path: str) -> None:
        """Save the current frame to an image file."""
        self.fig.savefig(path, dpi=150, bbox_inches='tight', facecolor=BACKGROUND)

    def close(self) -> None:
        plt.close(self.fig)
