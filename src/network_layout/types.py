"""
Common types for the network layout.

This module provides the records that flow through a layout run:
- SimulationNode: per-run copy of an input node with position and velocity
- SimulationLink: per-run copy of an input link with resolved endpoints
- ComputedNode: simulation node plus presentation attributes
- ComputedLink: simulation link plus presentation attributes
- EventType: Layout lifecycle events
- Event: Event payload for callbacks
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Hashable, Optional, Sequence, TypedDict, Union


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Simulation ticks have begun
    - tick: Fired once per tick
    - end: The iteration budget has been spent
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    alpha: float
    iteration: int


class _Record:
    """
    Attribute bag that also reads like a mapping.

    Accessors written against dict-shaped records (``node["group"]`` or
    ``node.get("group")``) work the same as attribute access. Mapping reads
    go straight to the instance fields, so a custom field named ``get``
    never hides the ``get()`` method.
    """

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_frozen", False):
            raise AttributeError(f"{type(self).__name__} is read-only; cannot set {name!r}")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if self.__dict__.get("_frozen", False):
            raise AttributeError(f"{type(self).__name__} is read-only; cannot delete {name!r}")
        object.__delattr__(self, name)

    def __getitem__(self, key: str) -> Any:
        return self.__dict__[key]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and not key.startswith("_") and key in self.__dict__

    @property
    def get(self) -> Callable[..., Any]:
        """``get(key, default=None)`` over the record's fields."""
        data = self.__dict__
        return lambda key, default=None: data.get(key, default)


def record_fields(record: _Record) -> dict[str, Any]:
    """Return a shallow dict of a record's public fields."""
    return {k: v for k, v in vars(record).items() if not k.startswith("_")}


def freeze(record: _Record) -> _Record:
    """Make a record read-only and return it."""
    record.__dict__["_frozen"] = True
    return record


class SimulationNode(_Record):
    """
    Mutable per-run copy of an input node.

    Attributes:
        id: Stable node identifier (copied from the input node)
        index: Position of the node in the run's node arena
        x: X coordinate
        y: Y coordinate
        vx: X velocity (owned by the layout engine)
        vy: Y velocity (owned by the layout engine)
    """

    def __init__(self, id: Hashable, index: int, **kwargs: Any) -> None:
        # Custom properties first so the engine-owned fields below win.
        self.__dict__.update(kwargs)
        self.id = id
        self.index = index
        self.x: float = float(kwargs.get("x", float("nan")))
        self.y: float = float(kwargs.get("y", float("nan")))
        self.vx: float = 0.0
        self.vy: float = 0.0

    def __repr__(self) -> str:
        return f"SimulationNode(id={self.id!r}, x={self.x:.2f}, y={self.y:.2f})"


class SimulationLink(_Record):
    """
    Per-run copy of an input link.

    Attributes:
        id: Derived link identifier (see link_id())
        index: Position of the link in the run's link list
        source: Source SimulationNode
        target: Target SimulationNode
    """

    def __init__(
        self,
        id: str,
        index: int,
        source: SimulationNode,
        target: SimulationNode,
        **kwargs: Any,
    ) -> None:
        self.__dict__.update(kwargs)
        self.id = id
        self.index = index
        self.source = source
        self.target = target

    def __repr__(self) -> str:
        return f"SimulationLink({self.source.id!r} -> {self.target.id!r})"


class ComputedNode(SimulationNode):
    """
    Simulation node with presentation attributes, handed to the renderer.

    Read-only once the styling pipeline has produced it.

    Attributes:
        color: Fill color
        border_width: Border width
        border_color: Border color
        size: Node diameter
        radius: Half of size
    """

    def __init__(
        self,
        node: SimulationNode,
        *,
        color: Any,
        border_width: float,
        border_color: Any,
        size: float,
    ) -> None:
        # Shallow copy: every field of the simulation node, then style on top
        self.__dict__.update(record_fields(node))
        self.color = color
        self.border_width = border_width
        self.border_color = border_color
        self.size = size
        self.radius = size / 2

    def __repr__(self) -> str:
        return f"ComputedNode(id={self.id!r}, x={self.x:.2f}, y={self.y:.2f}, color={self.color!r})"


class ComputedLink(SimulationLink):
    """
    Simulation link with presentation attributes, handed to the renderer.

    Read-only once the styling pipeline has produced it.

    Attributes:
        source: ComputedNode for the source id in the same result
        target: ComputedNode for the target id in the same result
        thickness: Stroke thickness
        color: Stroke color
        previous_source: Previous result's ComputedNode for the source id, if any
        previous_target: Previous result's ComputedNode for the target id, if any
    """

    def __init__(
        self,
        link: SimulationLink,
        *,
        source: ComputedNode,
        target: ComputedNode,
        previous_source: Optional[ComputedNode] = None,
        previous_target: Optional[ComputedNode] = None,
    ) -> None:
        self.__dict__.update(record_fields(link))
        self.source = source
        self.target = target
        self.previous_source = previous_source
        self.previous_target = previous_target
        self.thickness: float = 0.0
        self.color: Any = None

    def __repr__(self) -> str:
        return f"ComputedLink({self.source.id!r} -> {self.target.id!r}, color={self.color!r})"


def link_id(source: Hashable, target: Hashable) -> str:
    """
    Derive a link identifier from its endpoint ids.

    Parallel links between the same pair share the same identifier.
    """
    return f"{source}.{target}"


# Type aliases for callbacks
NodeAccessor = Callable[[Any], Any]
LinkAccessor = Callable[[Any], Any]

# Input types: dicts or objects carrying the required attributes
NodeLike = Union[dict[str, Any], Any]
"""Input node: a dict or object with an ``id`` and arbitrary fields."""

LinkLike = Union[dict[str, Any], Any]
"""Input link: a dict or object with ``source`` and ``target`` node ids."""

PointType = Union[tuple[float, float], list[float], Sequence[float]]
"""A 2D point: (x, y) tuple, list, or sequence."""


__all__ = [
    "EventType",
    "Event",
    "SimulationNode",
    "SimulationLink",
    "ComputedNode",
    "ComputedLink",
    "link_id",
    "record_fields",
    "freeze",
    "NodeAccessor",
    "LinkAccessor",
    "NodeLike",
    "LinkLike",
    "PointType",
]
