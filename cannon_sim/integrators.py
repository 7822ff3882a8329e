"""
Numerical integration schemes for ballistic motion.
"""

from typing import Tuple, Union
import numpy as np


class Integrator:
    """Base class for numerical integrators.

    Integrators are pure: they take the current position and velocity and
    return new arrays without touching their inputs.
    """

    def integrate(self, position: np.ndarray, velocity: np.ndarray,
                  acceleration: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Advance one body forward by time step dt.

        Args:
            position: Current position [x, y]
            velocity: Current velocity [vx, vy]
            acceleration: Constant acceleration over the step [ax, ay]
            dt: Time step in seconds

        Returns:
            (new_position, new_velocity)
        """
        raise NotImplementedError


class SemiImplicitEulerIntegrator(Integrator):
    """Semi-implicit (symplectic) Euler integrator.

    Velocity is updated first and the new velocity moves the position. Under
    constant acceleration the position after n steps of size dt overshoots the
    exact parabola by 0.5 * a * dt * t.
    """

    def integrate(self, position: np.ndarray, velocity: np.ndarray,
                  acceleration: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        new_velocity = velocity + acceleration * dt
        new_position = position + new_velocity * dt
        return new_position, new_velocity


def ballistic_position(origin: np.ndarray, velocity: np.ndarray,
                       acceleration: np.ndarray,
                       t: Union[float, np.ndarray]) -> np.ndarray:
    """
    Closed-form position under constant acceleration.

    Args:
        origin: Launch position [x0, y0]
        velocity: Launch velocity [vx, vy]
        acceleration: Constant acceleration [ax, ay]
        t: Time in seconds, scalar or 1-D array

    Returns:
        Array of shape (2,) for scalar t, or (len(t), 2) for an array
    """
    t = np.asarray(t, dtype=np.float64)
    origin = np.asarray(origin, dtype=np.float64)
    velocity = np.asarray(velocity, dtype=np.float64)
    acceleration = np.asarray(acceleration, dtype=np.float64)
    tt = t[..., np.newaxis]
    return origin + velocity * tt + 0.5 * acceleration * tt**2
