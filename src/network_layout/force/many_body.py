"""
Charge (many-body) force.

Every node repels every other node. The velocity change on a node from
another node at distance d is ``strength * alpha / max(d, distance_min)``
along the line between them, and zero once d reaches ``distance_max``.
Negative strength repels.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .. import defaults
from ..spatial.quadtree import Body, QuadTree
from ..types import SimulationLink, SimulationNode
from .base import Force, Lcg, NodeArena


class ManyBodyForce(Force):
    """
    Pairwise repulsion between all nodes with distance clamps.

    Small graphs use an exact vectorised pairwise computation. Graphs larger
    than ``barnes_hut_threshold`` use a Barnes-Hut quadtree when
    ``use_barnes_hut`` is set.

    Example:
        force = ManyBodyForce(strength=-30, distance_min=1, distance_max=500)
    """

    def __init__(
        self,
        strength: float = -defaults.REPULSIVITY,
        distance_min: float = defaults.DISTANCE_MIN,
        distance_max: float = defaults.DISTANCE_MAX,
        theta: float = defaults.BARNES_HUT_THETA,
        use_barnes_hut: bool = True,
        barnes_hut_threshold: int = defaults.BARNES_HUT_THRESHOLD,
    ) -> None:
        """
        Args:
            strength: Charge strength (negative repels)
            distance_min: Distances below this are clamped to it
            distance_max: Pairs at or beyond this distance do not interact
            theta: Barnes-Hut accuracy (0 = exact)
            use_barnes_hut: Enable Barnes-Hut for large graphs
            barnes_hut_threshold: Node count above which Barnes-Hut is used
        """
        self._strength = float(strength)
        self._distance_min = float(distance_min)
        self._distance_max = float(distance_max)
        self._theta = max(0.0, float(theta))
        self._use_barnes_hut = bool(use_barnes_hut)
        self._barnes_hut_threshold = int(barnes_hut_threshold)
        self._random: Lcg = Lcg()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def strength(self) -> float:
        """Get charge strength (negative repels)."""
        return self._strength

    @property
    def distance_min(self) -> float:
        """Get lower distance clamp."""
        return self._distance_min

    @property
    def distance_max(self) -> float:
        """Get upper distance cutoff."""
        return self._distance_max

    @property
    def theta(self) -> float:
        """Get Barnes-Hut theta parameter (accuracy)."""
        return self._theta

    @property
    def use_barnes_hut(self) -> bool:
        """Get whether Barnes-Hut approximation is enabled."""
        return self._use_barnes_hut

    # -------------------------------------------------------------------------
    # Force Implementation
    # -------------------------------------------------------------------------

    def initialize(
        self,
        nodes: Sequence[SimulationNode],
        links: Sequence[SimulationLink],
        random: Lcg,
    ) -> None:
        self._random = random

    def apply(self, arena: NodeArena, alpha: float) -> None:
        n = len(arena)
        if n < 2 or self._strength == 0.0:
            return

        if self._use_barnes_hut and n > self._barnes_hut_threshold:
            dvx, dvy = self._compute_barnes_hut(arena, alpha)
        else:
            dvx, dvy = self._compute_pairwise(arena, alpha)

        arena.vx += dvx
        arena.vy += dvy

    def _compute_pairwise(
        self, arena: NodeArena, alpha: float
    ) -> tuple[np.ndarray, np.ndarray]:
        """Compute velocity changes using O(n^2) pairwise calculation."""
        # dx[i, j] points from node i to node j
        dx = arena.x[np.newaxis, :] - arena.x[:, np.newaxis]
        dy = arena.y[np.newaxis, :] - arena.y[:, np.newaxis]
        np.fill_diagonal(dx, np.nan)

        coincident = np.argwhere((dx == 0.0) & (dy == 0.0))
        for i, j in coincident:
            dx[i, j] = self._random.jiggle()
            dy[i, j] = self._random.jiggle()

        dist_sq = dx * dx + dy * dy
        active = dist_sq < self._distance_max * self._distance_max
        np.fill_diagonal(active, False)

        # Clamped: d * max(d, dmin) == sqrt(dmin^2 * d^2) below the clamp
        dmin_sq = self._distance_min * self._distance_min
        with np.errstate(invalid="ignore"):
            denom = np.where(dist_sq < dmin_sq, np.sqrt(dmin_sq * dist_sq), dist_sq)
            scale = np.where(active, self._strength * alpha / np.where(active, denom, 1.0), 0.0)

        dvx = np.where(active, dx * scale, 0.0).sum(axis=1)
        dvy = np.where(active, dy * scale, 0.0).sum(axis=1)
        return dvx, dvy

    def _compute_barnes_hut(
        self, arena: NodeArena, alpha: float
    ) -> tuple[np.ndarray, np.ndarray]:
        """Compute velocity changes using Barnes-Hut O(n log n) approximation."""
        n = len(arena)
        strengths = np.full(n, self._strength, dtype=np.float64)
        tree = QuadTree.from_points(arena.x, arena.y, strengths, padding=10.0, theta=self._theta)

        dvx = np.zeros(n, dtype=np.float64)
        dvy = np.zeros(n, dtype=np.float64)
        for i in range(n):
            body = Body(float(arena.x[i]), float(arena.y[i]), strength=self._strength, index=i)
            dvx[i], dvy[i] = tree.calculate_force(
                body,
                alpha=alpha,
                distance_min=self._distance_min,
                distance_max=self._distance_max,
                jiggle=self._random.jiggle,
            )
        return dvx, dvy


__all__ = ["ManyBodyForce"]
