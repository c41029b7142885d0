"""
Input validation utilities for the network layout.

Provides centralized validation functions for nodes, links, force
parameters and other configuration. Raises descriptive exceptions on
invalid input.
"""

from __future__ import annotations

import math
import numbers
import warnings
from typing import Any, Hashable, Optional, Sequence


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class ConfigurationError(ValidationError):
    """Raised when a configuration value cannot be interpreted."""

    pass


class InvalidNodeError(ValidationError):
    """Raised when a node is malformed or its id is not unique."""

    pass


class InvalidLinkError(ValidationError):
    """Raised when a link is malformed."""

    pass


class DanglingReferenceError(InvalidLinkError):
    """Raised when a link references a node id absent from the node set."""

    pass


class DuplicateLinkIdWarning(UserWarning):
    """Emitted when parallel links derive the same link id."""

    pass


_MISSING = object()


def get_field(obj: Any, name: str, default: Any = _MISSING) -> Any:
    """Read a field from a dict or an attribute from an object."""
    if isinstance(obj, dict):
        if name in obj:
            return obj[name]
    elif hasattr(obj, name):
        return getattr(obj, name)
    if default is _MISSING:
        raise KeyError(name)
    return default


def validate_node_ids(nodes: Sequence[Any]) -> list[Hashable]:
    """
    Validate that every node has a unique, hashable id.

    Args:
        nodes: Sequence of dicts or objects with an ``id``

    Returns:
        List of node ids in input order

    Raises:
        InvalidNodeError: If a node has no id, an unhashable id, or a duplicate id
    """
    ids: list[Hashable] = []
    seen: set[Hashable] = set()
    for i, node in enumerate(nodes):
        node_id = get_field(node, "id", None)
        if node_id is None:
            raise InvalidNodeError(f"Node {i}: missing id")
        try:
            duplicate = node_id in seen
        except TypeError:
            raise InvalidNodeError(f"Node {i}: id {node_id!r} is not hashable") from None
        if duplicate:
            raise InvalidNodeError(f"Node {i}: duplicate id {node_id!r}")
        seen.add(node_id)
        ids.append(node_id)
    return ids


def validate_link_references(
    links: Sequence[Any],
    node_ids: Sequence[Hashable],
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that all link source/target ids exist in the node set.

    Args:
        links: Sequence of dicts or objects with source/target
        node_ids: Ids of the nodes in the graph
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (link_index, issue_description) tuples

    Raises:
        DanglingReferenceError: If strict=True and a link names an unknown node
    """
    known = set(node_ids)
    issues: list[tuple[int, str]] = []

    for i, link in enumerate(links):
        for end in ("source", "target"):
            ref = get_field(link, end, None)
            if ref is None:
                issues.append((i, f"Link {i}: {end} is None"))
            elif ref not in known:
                issues.append((i, f"Link {i}: {end} id {ref!r} not found in nodes"))

    if strict and issues:
        msg = "Invalid link references:\n" + "\n".join(issue[1] for issue in issues)
        raise DanglingReferenceError(msg)

    return issues


def warn_duplicate_link_ids(link_ids: Sequence[str]) -> list[str]:
    """
    Warn about derived link ids shared by parallel links.

    Returns:
        Sorted list of duplicated ids
    """
    seen: set[str] = set()
    duplicates: set[str] = set()
    for lid in link_ids:
        if lid in seen:
            duplicates.add(lid)
        seen.add(lid)
    if duplicates:
        warnings.warn(
            f"Parallel links share derived ids {sorted(duplicates)}; "
            "keyed lookups will only see the last one.",
            DuplicateLinkIdWarning,
            stacklevel=3,
        )
    return sorted(duplicates)


def validate_iterations(iterations: int) -> int:
    """
    Validate iteration count is a positive integer.

    Raises:
        ConfigurationError: If iterations is not an int >= 1
    """
    if isinstance(iterations, bool) or not isinstance(iterations, numbers.Integral):
        raise ConfigurationError(f"iterations must be an integer, got {iterations!r}")
    if iterations < 1:
        raise ConfigurationError(f"iterations must be >= 1, got {iterations}")
    return int(iterations)


def validate_number(value: Any, name: str) -> float:
    """
    Validate a finite real number.

    Raises:
        ConfigurationError: If value is not a finite real number
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    return float(value)


def validate_distance_range(distance_min: Any, distance_max: Any) -> tuple[float, float]:
    """
    Validate charge force distance clamps.

    ``distance_max`` may be infinite.

    Returns:
        Validated (distance_min, distance_max) tuple

    Raises:
        ConfigurationError: If min is negative or max is not greater than min
    """
    dmin = validate_number(distance_min, "distance_min")
    if isinstance(distance_max, bool) or not isinstance(distance_max, numbers.Real):
        raise ConfigurationError(f"distance_max must be a number, got {distance_max!r}")
    dmax = float(distance_max)
    if math.isnan(dmax):
        raise ConfigurationError("distance_max must not be NaN")
    if dmin < 0:
        raise ConfigurationError(f"distance_min must be >= 0, got {dmin}")
    if dmax <= dmin:
        raise ConfigurationError(
            f"distance_max must be greater than distance_min, got {dmax} <= {dmin}"
        )
    return dmin, dmax


def validate_center(center: Any) -> tuple[float, float]:
    """
    Validate the center point.

    Args:
        center: (x, y) sequence

    Returns:
        Validated (x, y) tuple

    Raises:
        ConfigurationError: If center is not a pair of finite numbers
    """
    try:
        size = len(center)
    except TypeError:
        raise ConfigurationError(f"center must be an (x, y) pair, got {center!r}") from None
    if size != 2:
        raise ConfigurationError(f"center must have 2 elements (x, y), got {size}")
    return validate_number(center[0], "center x"), validate_number(center[1], "center y")


def coerce_position(value: Any) -> Optional[float]:
    """Return value as float if it is a finite number, else None."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    return float(value) if math.isfinite(value) else None


__all__ = [
    "ValidationError",
    "ConfigurationError",
    "InvalidNodeError",
    "InvalidLinkError",
    "DanglingReferenceError",
    "DuplicateLinkIdWarning",
    "get_field",
    "validate_node_ids",
    "validate_link_references",
    "warn_duplicate_link_ids",
    "validate_iterations",
    "validate_number",
    "validate_distance_range",
    "validate_center",
    "coerce_position",
]
