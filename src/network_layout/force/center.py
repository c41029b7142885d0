"""
Centering force.

Translates all nodes so that their centroid sits on a fixed point. The
translation is applied to positions directly, so the relative layout is
unchanged and alpha has no effect.
"""

from __future__ import annotations

from .base import Force, NodeArena


class CenterForce(Force):
    """Pull the centroid of all nodes toward (x, y)."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0) -> None:
        """
        Args:
            x, y: Target centroid
            strength: Fraction of the centroid offset corrected per tick
        """
        self._x = float(x)
        self._y = float(y)
        self._strength = float(strength)

    @property
    def center(self) -> tuple[float, float]:
        """Get target centroid."""
        return self._x, self._y

    @property
    def strength(self) -> float:
        return self._strength

    def apply(self, arena: NodeArena, alpha: float) -> None:
        if len(arena) == 0:
            return
        shift_x = (arena.x.mean() - self._x) * self._strength
        shift_y = (arena.y.mean() - self._y) * self._strength
        arena.x -= shift_x
        arena.y -= shift_y


__all__ = ["CenterForce"]
