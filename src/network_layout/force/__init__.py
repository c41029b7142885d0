"""
Force contributors for the network simulation.

This module provides the forces applied each tick:
- LinkForce: Springs pulling linked nodes toward a target distance
- ManyBodyForce: Clamped repulsion between all node pairs
- CenterForce: Keeps the node centroid on a fixed point
"""

from .base import Force, Lcg, NodeArena
from .builder import ForceModel, build_forces, resolve_link_distance
from .center import CenterForce
from .link import LinkForce
from .many_body import ManyBodyForce

__all__ = [
    "Force",
    "Lcg",
    "NodeArena",
    "LinkForce",
    "ManyBodyForce",
    "CenterForce",
    "ForceModel",
    "build_forces",
    "resolve_link_distance",
]
