"""
Collision detection between the projectile and targets.
"""

from typing import Optional, Sequence
from .engine import HIT_MARGIN
from .primitives import Target, Vector2D


class CollisionDetector:
    """Point-in-circle hit testing and win-condition check."""

    def __init__(self, hit_margin: float = HIT_MARGIN):
        """
        Initialize collision detector.

        Args:
            hit_margin: Extra distance added to each target radius
        """
        if hit_margin < 0:
            raise ValueError("Hit margin must be non-negative")
        self.hit_margin = float(hit_margin)

    def detect_target_hit(self, position: Vector2D,
                          targets: Sequence[Target]) -> Optional[Target]:
        """
        Find the target struck at position.

        Targets are scanned in the given order and already-hit ones are
        skipped, so when several unhit targets overlap the point the one with
        the lowest index is returned.

        Args:
            position: Projectile position
            targets: Targets in layout order

        Returns:
            First unhit target within radius + hit margin, or None
        """
        for target in targets:
            if target.is_hit:
                continue
            if position.distance_to(target.position) <= target.radius + self.hit_margin:
                return target
        return None

    def are_all_targets_hit(self, targets: Sequence[Target]) -> bool:
        """True if every target is hit; vacuously true for no targets."""
        return all(target.is_hit for target in targets)
