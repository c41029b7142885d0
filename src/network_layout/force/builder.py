"""
Force model builder.

Translates declarative configuration (link distance policy, repulsivity,
distance clamps, center point) into the three force contributors run by the
layout engine.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple

from .. import defaults
from ..accessors import normalize_numeric_accessor
from ..types import PointType, SimulationLink
from ..validation import validate_center, validate_distance_range, validate_number
from .center import CenterForce
from .link import LinkForce
from .many_body import ManyBodyForce


class ForceModel(NamedTuple):
    """The three force contributors, in the order they are applied."""

    link: LinkForce
    charge: ManyBodyForce
    center: CenterForce


def resolve_link_distance(link_distance: Any) -> Callable[[SimulationLink], float]:
    """
    Normalize a link distance policy into ``distance(link) -> float``.

    Args:
        link_distance: A number, a function of the link, or a field path
            (``"weight"``, ``"data.length"``) read off the link

    Raises:
        ConfigurationError: If link_distance is none of these
    """
    return normalize_numeric_accessor(link_distance, "link_distance", allow_path=True)


def build_forces(
    *,
    link_distance: Any = defaults.LINK_DISTANCE,
    repulsivity: float = defaults.REPULSIVITY,
    distance_min: float = defaults.DISTANCE_MIN,
    distance_max: float = defaults.DISTANCE_MAX,
    center: PointType = (0.0, 0.0),
    theta: float = defaults.BARNES_HUT_THETA,
    use_barnes_hut: bool = True,
) -> ForceModel:
    """
    Build the link, charge and center forces from configuration.

    Args:
        link_distance: Target link distance (number, function, or field path)
        repulsivity: Repulsion magnitude; the charge strength is its negation
        distance_min: Charge distance lower clamp
        distance_max: Charge distance upper cutoff
        center: Point the node centroid is pulled to
        theta: Barnes-Hut accuracy for the charge force
        use_barnes_hut: Allow Barnes-Hut approximation for large graphs

    Returns:
        ForceModel(link, charge, center)

    Raises:
        ConfigurationError: If any value is invalid
    """
    distance = resolve_link_distance(link_distance)
    strength = -validate_number(repulsivity, "repulsivity")
    dmin, dmax = validate_distance_range(distance_min, distance_max)
    cx, cy = validate_center(center)

    return ForceModel(
        link=LinkForce(distance),
        charge=ManyBodyForce(
            strength=strength,
            distance_min=dmin,
            distance_max=dmax,
            theta=theta,
            use_barnes_hut=use_barnes_hut,
        ),
        center=CenterForce(cx, cy),
    )


__all__ = ["ForceModel", "resolve_link_distance", "build_forces"]
