"""
Physics engine for the cannon simulation.

Constant-gravity, drag-free ballistic motion. Screen coordinates are used
throughout, so gravity points along +y.
"""

from typing import Union
import numpy as np
import logging
from .primitives import Projectile, Trail, Vector2D, DEFAULT_TRAIL_CAPACITY
from .integrators import Integrator, SemiImplicitEulerIntegrator, ballistic_position

logger = logging.getLogger(__name__)

GRAVITY = 980.0
MIN_VELOCITY = 600.0
MAX_VELOCITY = 1200.0
HIT_MARGIN = 5.0


class PhysicsEngine:
    """Projectile integrator and charge-to-velocity mapping."""

    def __init__(self, gravity: float = GRAVITY,
                 min_velocity: float = MIN_VELOCITY,
                 max_velocity: float = MAX_VELOCITY,
                 max_trail_length: int = DEFAULT_TRAIL_CAPACITY,
                 hit_margin: float = HIT_MARGIN):
        """
        Initialize physics engine.

        Args:
            gravity: Downward acceleration magnitude in units/s^2
            min_velocity: Launch speed at zero charge
            max_velocity: Launch speed at full charge
            max_trail_length: Number of past positions kept per projectile
            hit_margin: Extra distance added to a radius in collision tests

        Raises:
            ValueError: If a parameter is out of range
        """
        if gravity <= 0:
            raise ValueError("Gravity must be positive")
        if min_velocity <= 0 or max_velocity <= 0:
            raise ValueError("Launch velocities must be positive")
        if min_velocity > max_velocity:
            raise ValueError("Minimum velocity cannot exceed maximum velocity")
        if max_trail_length < 1:
            raise ValueError("Trail length must be at least 1")
        if hit_margin < 0:
            raise ValueError("Hit margin must be non-negative")

        self.gravity = float(gravity)
        self.min_velocity = float(min_velocity)
        self.max_velocity = float(max_velocity)
        self.max_trail_length = int(max_trail_length)
        self.hit_margin = float(hit_margin)
        self.integrator: Integrator = SemiImplicitEulerIntegrator()
        self._acceleration = np.array([0.0, self.gravity], dtype=np.float64)

        logger.info(f"Physics engine initialized with gravity={self.gravity}")

    def get_gravity(self) -> float:
        return self.gravity

    def get_acceleration(self) -> Vector2D:
        return Vector2D(0.0, self.gravity)

    def calculate_velocity(self, charge_power: float) -> float:
        """
        Map charge power to launch speed by linear interpolation.

        The caller clamps charge_power to [0, 1]; values outside that range
        extrapolate.
        """
        return self.min_velocity + (self.max_velocity - self.min_velocity) * charge_power

    def create_projectile(self, origin: Vector2D, angle: float,
                          charge_power: float = 1.0) -> Projectile:
        """
        Create an active projectile at the muzzle origin.

        Args:
            origin: Launch position
            angle: Launch angle in radians (screen coordinates, +y down)
            charge_power: Normalized charge in [0, 1]

        Returns:
            New projectile with an empty trail
        """
        speed = self.calculate_velocity(charge_power)
        return Projectile(
            position=Vector2D(origin.x, origin.y),
            velocity=Vector2D(float(np.cos(angle) * speed), float(np.sin(angle) * speed)),
            active=True,
            trail=Trail(capacity=self.max_trail_length),
        )

    def update_projectile(self, projectile: Projectile, delta_time: float) -> Projectile:
        """
        Advance a projectile by one frame.

        Args:
            projectile: Current projectile, left untouched
            delta_time: Elapsed time in milliseconds

        Returns:
            Projectile with new position and velocity, and the pre-step
            position appended to its trail
        """
        dt = delta_time / 1000.0
        position, velocity = self.integrator.integrate(
            projectile.position.as_array(),
            projectile.velocity.as_array(),
            self._acceleration,
            dt,
        )
        return Projectile(
            position=Vector2D.from_array(position),
            velocity=Vector2D.from_array(velocity),
            active=projectile.active,
            trail=projectile.trail.appended(projectile.position),
        )

    def is_out_of_bounds(self, position: Vector2D, width: float, height: float) -> bool:
        """True when position lies strictly outside [0, width] x [0, height]."""
        return position.x < 0 or position.x > width or position.y < 0 or position.y > height

    def check_collision(self, point: Vector2D, center: Vector2D, radius: float) -> bool:
        """True when point is within radius plus the hit margin of center."""
        return point.distance_to(center) <= radius + self.hit_margin

    def analytic_position(self, origin: Vector2D, velocity: Vector2D,
                          t: Union[float, np.ndarray]) -> np.ndarray:
        """
        Exact position of a launched projectile after t seconds.

        Analytic reference for checking the integrated trajectory; the
        simulation itself always advances with the semi-implicit step.
        """
        return ballistic_position(origin.as_array(), velocity.as_array(),
                                  self._acceleration, t)
