"""
Link (spring) force.

Pulls the endpoints of every link toward the link's target distance. The
correction is proportional to the gap between the current distance and the
target distance, scaled by alpha and by a per-link strength that weakens
links attached to high-degree nodes. The correction is split between the
endpoints by a bias so that the lower-degree endpoint moves more.
"""

from __future__ import annotations

import math
import numbers
from typing import Callable, Optional, Sequence

import numpy as np

from ..types import SimulationLink, SimulationNode
from ..validation import ConfigurationError
from .base import Force, Lcg, NodeArena


class LinkForce(Force):
    """
    Spring force along links.

    Example:
        force = LinkForce(distance=lambda link: 50.0)
        force.initialize(nodes, links, Lcg())
        force.apply(arena, alpha=1.0)
    """

    def __init__(self, distance: Callable[[SimulationLink], float]) -> None:
        """
        Args:
            distance: Target distance accessor, evaluated once per link per run
        """
        self._distance_of = distance
        self._sources: Optional[np.ndarray] = None
        self._targets: Optional[np.ndarray] = None
        self._distances: Optional[np.ndarray] = None
        self._strengths: Optional[np.ndarray] = None
        self._bias: Optional[np.ndarray] = None
        self._random: Lcg = Lcg()

    @property
    def distance(self) -> Callable[[SimulationLink], float]:
        """Get the target distance accessor."""
        return self._distance_of

    def initialize(
        self,
        nodes: Sequence[SimulationNode],
        links: Sequence[SimulationLink],
        random: Lcg,
    ) -> None:
        m = len(links)
        self._random = random
        self._sources = np.zeros(m, dtype=np.intp)
        self._targets = np.zeros(m, dtype=np.intp)
        self._distances = np.zeros(m, dtype=np.float64)

        count = np.zeros(len(nodes), dtype=np.float64)
        for e, link in enumerate(links):
            self._sources[e] = link.source.index
            self._targets[e] = link.target.index
            count[link.source.index] += 1
            count[link.target.index] += 1

            distance = self._distance_of(link)
            if isinstance(distance, bool) or not isinstance(distance, numbers.Real):
                raise ConfigurationError(
                    f"link_distance returned {distance!r} for link {link.id!r}, expected a number"
                )
            if not math.isfinite(distance):
                raise ConfigurationError(
                    f"link_distance returned {distance} for link {link.id!r}"
                )
            self._distances[e] = distance

        if m:
            src_count = count[self._sources]
            tgt_count = count[self._targets]
            self._strengths = 1.0 / np.minimum(src_count, tgt_count)
            self._bias = src_count / (src_count + tgt_count)
        else:
            self._strengths = np.zeros(0, dtype=np.float64)
            self._bias = np.zeros(0, dtype=np.float64)

    def apply(self, arena: NodeArena, alpha: float) -> None:
        assert self._sources is not None and self._targets is not None
        assert self._distances is not None and self._strengths is not None
        assert self._bias is not None

        x, y, vx, vy = arena.x, arena.y, arena.vx, arena.vy
        # Links are applied in order; later links see earlier velocity updates.
        for e in range(len(self._sources)):
            s = self._sources[e]
            t = self._targets[e]

            dx = x[t] + vx[t] - x[s] - vx[s]
            dy = y[t] + vy[t] - y[s] - vy[s]
            if dx == 0.0:
                dx = self._random.jiggle()
            if dy == 0.0:
                dy = self._random.jiggle()

            length = math.sqrt(dx * dx + dy * dy)
            k = (length - self._distances[e]) / length * alpha * self._strengths[e]
            dx *= k
            dy *= k

            b = self._bias[e]
            vx[t] -= dx * b
            vy[t] -= dy * b
            vx[s] += dx * (1 - b)
            vy[s] += dy * (1 - b)


__all__ = ["LinkForce"]
