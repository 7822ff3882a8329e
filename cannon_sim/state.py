"""
Game state snapshot shared by the simulation core and the renderer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple
import math
from .engine import GRAVITY
from .primitives import CannonState, Projectile, Target, Vector2D


class Phase(Enum):
    """Coarse state of the game, derived from a snapshot."""

    IDLE = 'idle'
    CHARGING = 'charging'
    IN_FLIGHT = 'in_flight'
    WON = 'won'


@dataclass(frozen=True)
class GameState:
    """One published snapshot of the game.

    Snapshots are never modified; ``GameLogic`` derives each new one from the
    previous with ``dataclasses.replace``.
    """

    targets: Tuple[Target, ...]
    cannon: CannonState = field(default_factory=CannonState)
    projectile: Optional[Projectile] = None
    score: int = 0
    total_shots: int = 0
    game_won: bool = False
    current_angle: float = math.degrees(CannonState().angle)
    current_velocity: float = 0.0
    gravity: float = GRAVITY
    acceleration: Vector2D = Vector2D(0.0, GRAVITY)

    def __post_init__(self):
        # Lists from callers are frozen into tuples.
        if not isinstance(self.targets, tuple):
            object.__setattr__(self, 'targets', tuple(self.targets))

    @property
    def phase(self) -> Phase:
        if self.game_won:
            return Phase.WON
        if self.projectile is not None and self.projectile.active:
            return Phase.IN_FLIGHT
        if self.cannon.is_charging:
            return Phase.CHARGING
        return Phase.IDLE

    @property
    def remaining_targets(self) -> int:
        return sum(1 for target in self.targets if not target.is_hit)

    @property
    def accuracy(self) -> int:
        """Hits over shots as a rounded percentage; 0 before the first shot."""
        if self.total_shots == 0:
            return 0
        return int(math.floor(self.score / self.total_shots * 100 + 0.5))
