"""
Shared state for force contributors.

A NodeArena holds the positions and velocities of every node in a run as
numpy arrays indexed by node index. Forces read and write the arena; the
layout engine copies results back onto SimulationNodes when the run ends.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..types import SimulationLink, SimulationNode

# Linear congruential generator constants (Numerical Recipes)
_LCG_A = 1664525
_LCG_C = 1013904223
_LCG_M = 4294967296


class Lcg:
    """
    Seeded linear congruential generator.

    Used for jiggling coincident nodes apart. Every run starts from the same
    seed, so the jiggle sequence (and therefore the layout) is reproducible.
    """

    def __init__(self, seed: int = 1) -> None:
        self._state = seed

    def random(self) -> float:
        """Return the next value in [0, 1)."""
        self._state = (_LCG_A * self._state + _LCG_C) % _LCG_M
        return self._state / _LCG_M

    def jiggle(self) -> float:
        """Return a tiny non-zero offset in (-5e-7, 5e-7)."""
        value = (self.random() - 0.5) * 1e-6
        return value if value != 0.0 else 1e-12


@dataclass
class NodeArena:
    """
    Indexed working storage for a simulation run.

    Attributes:
        x, y: Node positions
        vx, vy: Node velocities
    """

    x: np.ndarray
    y: np.ndarray
    vx: np.ndarray
    vy: np.ndarray

    @classmethod
    def from_nodes(cls, nodes: Sequence[SimulationNode]) -> NodeArena:
        """Build an arena from the current positions of nodes."""
        n = len(nodes)
        arena = cls(
            x=np.zeros(n, dtype=np.float64),
            y=np.zeros(n, dtype=np.float64),
            vx=np.zeros(n, dtype=np.float64),
            vy=np.zeros(n, dtype=np.float64),
        )
        for i, node in enumerate(nodes):
            arena.x[i] = node.x
            arena.y[i] = node.y
            arena.vx[i] = node.vx
            arena.vy[i] = node.vy
        return arena

    def __len__(self) -> int:
        return len(self.x)

    def sync_to(self, nodes: Sequence[SimulationNode]) -> None:
        """Copy arena state back onto the nodes."""
        for i, node in enumerate(nodes):
            node.x = float(self.x[i])
            node.y = float(self.y[i])
            node.vx = float(self.vx[i])
            node.vy = float(self.vy[i])


class Force(ABC):
    """
    A force contributor.

    ``initialize`` is called once per run with the run's nodes, links and
    jiggle source; ``apply`` is called once per tick with the current alpha.
    """

    def initialize(
        self,
        nodes: Sequence[SimulationNode],
        links: Sequence[SimulationLink],
        random: Lcg,
    ) -> None:
        """Prepare per-run state. The default does nothing."""
        pass

    @abstractmethod
    def apply(self, arena: NodeArena, alpha: float) -> None:
        """Apply one tick of this force to the arena."""
        pass


__all__ = ["Lcg", "NodeArena", "Force"]
