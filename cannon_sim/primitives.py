"""
Value types for the cannon simulation.

Every type here is immutable once constructed. Operations that "change" a value
return a new one, so a published game snapshot can be shared freely between the
simulation core and the renderer.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Tuple, Union
import math
import numpy as np

DEFAULT_TRAIL_CAPACITY = 50
DEFAULT_CANNON_POSITION = (100.0, 500.0)
DEFAULT_CANNON_LENGTH = 50.0
DEFAULT_CANNON_ANGLE = -math.pi / 4


@dataclass(frozen=True)
class Vector2D:
    """A real-valued (x, y) pair."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_array(cls, values: Union[Iterable[float], np.ndarray]) -> 'Vector2D':
        x, y = np.asarray(values, dtype=np.float64)
        return cls(float(x), float(y))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: 'Vector2D') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


class Trail:
    """Bounded history of positions, oldest evicted first.

    A trail never changes after construction: ``appended`` copies the
    underlying bounded deque and returns a new trail.
    """

    __slots__ = ('_points', '_capacity')

    def __init__(self, points: Iterable[Vector2D] = (),
                 capacity: int = DEFAULT_TRAIL_CAPACITY):
        """
        Initialize a trail.

        Args:
            points: Initial positions, oldest first. Only the newest
                ``capacity`` entries are kept.
            capacity: Maximum number of stored positions

        Raises:
            ValueError: If capacity is less than one
        """
        if capacity < 1:
            raise ValueError("Trail capacity must be at least 1")
        self._capacity = int(capacity)
        self._points = deque(points, maxlen=self._capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def appended(self, point: Vector2D) -> 'Trail':
        """Return a new trail with ``point`` added at the newest end."""
        trail = Trail.__new__(Trail)
        trail._capacity = self._capacity
        trail._points = self._points.copy()
        trail._points.append(point)
        return trail

    def as_array(self) -> np.ndarray:
        """Positions as an (n, 2) float array, oldest first."""
        if not self._points:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([[p.x, p.y] for p in self._points], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Vector2D]:
        return iter(self._points)

    def __getitem__(self, index: int) -> Vector2D:
        return self._points[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trail):
            return NotImplemented
        return self._capacity == other._capacity and tuple(self._points) == tuple(other._points)

    def __hash__(self) -> int:
        return hash((self._capacity, tuple(self._points)))

    def __repr__(self) -> str:
        return f"Trail({list(self._points)!r}, capacity={self._capacity})"


@dataclass(frozen=True)
class Target:
    """A static circular target."""

    id: Union[int, str]
    x: float
    y: float
    radius: float
    color: str = '#ef4444'
    is_hit: bool = False

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError("Radius must be positive")

    @property
    def position(self) -> Vector2D:
        return Vector2D(self.x, self.y)


@dataclass(frozen=True)
class Projectile:
    """The single in-game projectile.

    Deactivated projectiles are kept in the game state, frozen at the
    position where they hit a target or left the play area.
    """

    position: Vector2D
    velocity: Vector2D
    active: bool = True
    trail: Trail = field(default_factory=Trail)

    @property
    def speed(self) -> float:
        return self.velocity.magnitude()


@dataclass(frozen=True)
class CannonState:
    """Cannon pose and charge."""

    position: Vector2D = Vector2D(*DEFAULT_CANNON_POSITION)
    angle: float = DEFAULT_CANNON_ANGLE
    length: float = DEFAULT_CANNON_LENGTH
    is_charging: bool = False
    charge_power: float = 0.0

    def __post_init__(self):
        if not (0.0 <= self.charge_power <= 1.0):
            raise ValueError("Charge power must be between 0 and 1")
        if self.length <= 0:
            raise ValueError("Barrel length must be positive")

    @property
    def muzzle(self) -> Tuple[float, float]:
        """End point of the barrel, for drawing."""
        return (self.position.x + math.cos(self.angle) * self.length,
                self.position.y + math.sin(self.angle) * self.length)
