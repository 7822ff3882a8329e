"""
2D Cannon Projectile Simulation Package

Aim, charge and fire a cannon at circular targets under constant gravity,
with a deterministic game-state core and matplotlib visualization.
"""

__version__ = "1.0.0"

from .engine import PhysicsEngine
from .collisions import CollisionDetector
from .primitives import Vector2D, Target, Trail, Projectile, CannonState
from .state import GameState, Phase
from .game import GameLogic, TargetLayoutError
from .io import ConfigLoader, GameSetup
from .visualization import CanvasRenderer, RenderSurfaceError
from .app import SimulationApp

__all__ = [
    'PhysicsEngine',
    'CollisionDetector',
    'Vector2D',
    'Target',
    'Trail',
    'Projectile',
    'CannonState',
    'GameState',
    'Phase',
    'GameLogic',
    'TargetLayoutError',
    'ConfigLoader',
    'GameSetup',
    'CanvasRenderer',
    'RenderSurfaceError',
    'SimulationApp'
]
