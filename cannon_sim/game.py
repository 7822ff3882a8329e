"""
Game logic: turns player actions and frame time into new game states.

Every operation is a total function of (state, input). An action that does
not apply in the current phase returns the state it was given.
"""

from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Union
import logging
import math
from .collisions import CollisionDetector
from .engine import PhysicsEngine
from .primitives import CannonState, Target, Vector2D
from .state import GameState, Phase

logger = logging.getLogger(__name__)

CHARGE_RATE = 0.5  # charge power per second

CAN_START_CHARGE = frozenset({Phase.IDLE, Phase.CHARGING})
CAN_CHARGE = frozenset({Phase.CHARGING})
CAN_FIRE = frozenset({Phase.CHARGING})
CAN_FLY = frozenset({Phase.IN_FLIGHT})


class TargetLayoutError(ValueError):
    """Raised when a target layout is missing or malformed."""


def make_target(record: Union[Target, Mapping[str, Any]]) -> Target:
    """
    Build an unhit target from a layout record.

    Args:
        record: A Target, or a mapping with id, x, y, radius and color

    Returns:
        Target with is_hit cleared

    Raises:
        TargetLayoutError: If the record is missing fields or has bad values
    """
    if isinstance(record, Target):
        return replace(record, is_hit=False)
    if not isinstance(record, Mapping):
        raise TargetLayoutError(f"Target record must be a mapping, got {type(record).__name__}")

    missing = [key for key in ('id', 'x', 'y', 'radius', 'color') if key not in record]
    if missing:
        raise TargetLayoutError(f"Target record {record!r} is missing {', '.join(missing)}")

    target_id = record['id']
    if isinstance(target_id, bool) or not isinstance(target_id, (int, str)):
        raise TargetLayoutError(f"Target id must be an int or string: {target_id!r}")
    for key in ('x', 'y', 'radius'):
        value = record[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise TargetLayoutError(f"Target {target_id!r} has invalid {key}: {value!r}")
    if not isinstance(record['color'], str):
        raise TargetLayoutError(f"Target {target_id!r} has invalid color: {record['color']!r}")

    try:
        return Target(id=target_id, x=float(record['x']), y=float(record['y']),
                      radius=float(record['radius']), color=record['color'])
    except ValueError as exc:
        raise TargetLayoutError(f"Target {target_id!r}: {exc}") from exc


class GameLogic:
    """State machine combining physics, collisions and player actions."""

    def __init__(self, physics: Optional[PhysicsEngine] = None,
                 collision_detector: Optional[CollisionDetector] = None,
                 cannon: Optional[CannonState] = None):
        """
        Initialize game logic.

        Args:
            physics: Physics engine, defaults to standard constants
            collision_detector: Collision detector, defaults to the engine's
                hit margin
            cannon: Cannon placement used by initialize_game
        """
        self.physics = physics or PhysicsEngine()
        self.collision_detector = collision_detector or CollisionDetector(self.physics.hit_margin)
        self.cannon = cannon or CannonState()

    def initialize_game(self, targets_config: Iterable[Union[Target, Mapping[str, Any]]]) -> GameState:
        """
        Build the initial state from a target layout.

        Raises:
            TargetLayoutError: If the layout is not a list of valid records or
                contains duplicate ids
        """
        if targets_config is None or isinstance(targets_config, (str, bytes, Mapping)):
            raise TargetLayoutError("Target layout must be a list of target records")

        targets = tuple(make_target(record) for record in targets_config)
        ids = [target.id for target in targets]
        duplicates = sorted({str(i) for i in ids if ids.count(i) > 1})
        if duplicates:
            raise TargetLayoutError(f"Duplicate target ids: {', '.join(duplicates)}")

        gravity = self.physics.get_gravity()
        cannon = replace(self.cannon, is_charging=False, charge_power=0.0)
        return GameState(
            targets=targets,
            cannon=cannon,
            projectile=None,
            score=0,
            total_shots=0,
            game_won=False,
            current_angle=math.degrees(cannon.angle),
            current_velocity=0.0,
            gravity=gravity,
            acceleration=Vector2D(0.0, gravity),
        )

    def update_cannon_angle(self, state: GameState, mouse_x: float, mouse_y: float) -> GameState:
        """Aim the cannon at the pointer. Allowed in every phase."""
        dx = mouse_x - state.cannon.position.x
        dy = mouse_y - state.cannon.position.y
        angle = math.atan2(dy, dx)
        return replace(
            state,
            cannon=replace(state.cannon, angle=angle),
            current_angle=math.degrees(angle),
        )

    def start_charging(self, state: GameState) -> GameState:
        """Begin charging a shot from zero power."""
        if state.phase not in CAN_START_CHARGE:
            return state
        return replace(state, cannon=replace(state.cannon, is_charging=True, charge_power=0.0))

    def update_charge(self, state: GameState, delta_time: float) -> GameState:
        """
        Grow charge power while charging.

        Args:
            state: Current state
            delta_time: Elapsed time in milliseconds

        Returns:
            State with charge power raised by CHARGE_RATE per second, capped
            at 1, and the matching launch speed as the velocity preview
        """
        if state.phase not in CAN_CHARGE:
            return state
        charge_power = min(1.0, state.cannon.charge_power + CHARGE_RATE * (delta_time / 1000.0))
        charge_power = max(0.0, charge_power)
        return replace(
            state,
            cannon=replace(state.cannon, charge_power=charge_power),
            current_velocity=self.physics.calculate_velocity(charge_power),
        )

    def fire_projectile(self, state: GameState) -> GameState:
        """Launch a projectile using the current angle and charge."""
        if state.phase not in CAN_FIRE:
            return state

        projectile = self.physics.create_projectile(
            state.cannon.position,
            state.cannon.angle,
            state.cannon.charge_power,
        )
        logger.debug(f"Fired shot {state.total_shots + 1} at {state.current_angle:.1f} deg, "
                     f"speed {projectile.speed:.1f}")
        return replace(
            state,
            projectile=projectile,
            total_shots=state.total_shots + 1,
            cannon=replace(state.cannon, is_charging=False, charge_power=0.0),
            current_velocity=0.0,
        )

    def update(self, state: GameState, delta_time: float,
               canvas_width: float, canvas_height: float) -> GameState:
        """
        Advance the projectile in flight by one frame.

        Args:
            state: Current state
            delta_time: Elapsed time in milliseconds
            canvas_width: Play area width
            canvas_height: Play area height

        Returns:
            New state. On a hit the target is marked and the projectile is
            frozen; on leaving the play area the projectile is frozen; else it
            keeps flying.
        """
        if state.phase not in CAN_FLY:
            return state

        projectile = self.physics.update_projectile(state.projectile, delta_time)
        hit_target = self.collision_detector.detect_target_hit(projectile.position, state.targets)

        if hit_target is not None:
            targets = tuple(replace(t, is_hit=True) if t.id == hit_target.id else t
                            for t in state.targets)
            game_won = self.collision_detector.are_all_targets_hit(targets)
            logger.debug(f"Target {hit_target.id!r} hit at "
                         f"({projectile.position.x:.1f}, {projectile.position.y:.1f})")
            if game_won:
                logger.debug("All targets hit")
            return replace(
                state,
                targets=targets,
                projectile=replace(projectile, active=False),
                score=state.score + 1,
                game_won=game_won,
                current_velocity=0.0,
            )

        if self.physics.is_out_of_bounds(projectile.position, canvas_width, canvas_height):
            logger.debug(f"Projectile left the play area at "
                         f"({projectile.position.x:.1f}, {projectile.position.y:.1f})")
            return replace(
                state,
                projectile=replace(projectile, active=False),
                current_velocity=0.0,
            )

        return replace(
            state,
            projectile=projectile,
            current_velocity=projectile.speed,
            acceleration=self.physics.get_acceleration(),
        )

    def reset_game(self, state: GameState) -> GameState:
        """Clear hits, shots and the projectile; keep the cannon's aim."""
        logger.debug("Game reset")
        return replace(
            state,
            targets=tuple(replace(t, is_hit=False) for t in state.targets),
            projectile=None,
            score=0,
            total_shots=0,
            game_won=False,
            cannon=replace(state.cannon, is_charging=False, charge_power=0.0),
            current_velocity=0.0,
        )
