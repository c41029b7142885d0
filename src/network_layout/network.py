"""
Network layout entry point.

Ties the three stages together: configuration is validated into an
immutable NetworkConfig, the force model is built from it, the layout
engine runs to completion, and the styling pipeline produces the computed
nodes and links handed to the rendering layer.

There is no implicit lifecycle: callers decide when inputs changed and call
``NetworkLayout.compute()`` (or ``compute_network()``) again.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, NamedTuple, Optional, Sequence, Union

from . import defaults
from .colors import DEFAULT_THEME, Theme
from .force.builder import ForceModel, build_forces
from .simulation import ForceSimulation
from .styling import LinkStyle, NodeStyle, style_links, style_nodes
from .types import ComputedLink, ComputedNode, LinkLike, NodeLike
from .validation import validate_iterations


class NotComputed(Enum):
    """Sentinel type for results that have not been computed yet."""

    NOT_COMPUTED = "not computed"

    def __repr__(self) -> str:
        return "NOT_COMPUTED"


NOT_COMPUTED = NotComputed.NOT_COMPUTED
"""Returned before the first run; distinct from an empty node list."""


@dataclass(frozen=True)
class NetworkConfig:
    """
    Immutable configuration snapshot for one layout run.

    Attributes:
        center: Point the node centroid is pulled to
        nodes: Input nodes, each with a unique ``id``
        links: Input links with ``source``/``target`` node ids
        link_distance: Target link length: number, function of the link, or field path
        repulsivity: Strength with which nodes push each other apart
        distance_min: Distances below this are clamped for repulsion
        distance_max: Nodes further apart than this do not repel
        iterations: Number of simulation ticks
        node_size: Node diameter, constant or function of the node
        node_color: Node fill, constant or function of the node
        node_border_width: Constant or function of the computed node
        node_border_color: Inherited color spec, defaults to the fill
        link_thickness: Constant or function of the computed link
        link_color: Inherited color spec, defaults to the source node's color
        theme: Theme for ``{"theme": ...}`` color references

    Raises:
        ConfigurationError: On construction, if any field is invalid
    """

    center: tuple[float, float] = (0.0, 0.0)
    nodes: Sequence[NodeLike] = ()
    links: Sequence[LinkLike] = ()
    link_distance: Any = defaults.LINK_DISTANCE
    repulsivity: float = defaults.REPULSIVITY
    distance_min: float = defaults.DISTANCE_MIN
    distance_max: float = defaults.DISTANCE_MAX
    iterations: int = defaults.ITERATIONS
    node_size: Any = defaults.NODE_SIZE
    node_color: Any = defaults.NODE_COLOR
    node_border_width: Any = defaults.NODE_BORDER_WIDTH
    node_border_color: Any = field(default_factory=defaults.node_border_color)
    link_thickness: Any = defaults.LINK_THICKNESS
    link_color: Any = field(default_factory=defaults.link_color)
    theme: Theme = DEFAULT_THEME

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "links", tuple(self.links))
        validate_iterations(self.iterations)
        # Build once so invalid accessors fail before any run.
        self.build_forces()
        self.node_style()
        self.link_style()

    def build_forces(self) -> ForceModel:
        """Build fresh force contributors for this configuration."""
        return build_forces(
            link_distance=self.link_distance,
            repulsivity=self.repulsivity,
            distance_min=self.distance_min,
            distance_max=self.distance_max,
            center=self.center,
        )

    def node_style(self) -> NodeStyle:
        return NodeStyle.build(
            color=self.node_color,
            border_width=self.node_border_width,
            border_color=self.node_border_color,
            size=self.node_size,
            theme=self.theme,
        )

    def link_style(self) -> LinkStyle:
        return LinkStyle.build(
            thickness=self.link_thickness,
            color=self.link_color,
            theme=self.theme,
        )

    def replace(self, **changes: Any) -> NetworkConfig:
        """Return a copy with some fields changed (validated again)."""
        return replace(self, **changes)


class NetworkResult(NamedTuple):
    """Computed nodes and links of one run."""

    nodes: list[ComputedNode]
    links: list[ComputedLink]


def compute_network(
    config: NetworkConfig,
    previous_nodes: Optional[Sequence[ComputedNode]] = None,
) -> NetworkResult:
    """
    Run the layout and styling pipeline for one configuration.

    Args:
        config: Validated configuration snapshot
        previous_nodes: Computed nodes of the prior run, used to fill
            ``previous_source``/``previous_target`` on links

    Returns:
        NetworkResult(nodes, links)

    Raises:
        InvalidNodeError: If node ids are missing or not unique
        DanglingReferenceError: If a link names an unknown node id
        ConfigurationError: If an accessor fails on an entity
    """
    simulation = ForceSimulation(
        nodes=config.nodes,
        links=config.links,
        forces=config.build_forces(),
        iterations=config.iterations,
    )
    simulation.run()

    nodes = style_nodes(simulation.nodes, config.node_style())
    links = style_links(simulation.links, nodes, config.link_style(), previous_nodes)
    return NetworkResult(nodes, links)


class NetworkLayout:
    """
    Recompute-on-demand holder for the latest computed network.

    Keeps the last result so the next run can link each computed link to the
    previous frame's nodes. Before the first successful run, ``nodes`` and
    ``links`` are NOT_COMPUTED.

    Example:
        layout = NetworkLayout()
        assert layout.nodes is NOT_COMPUTED

        layout.compute(NetworkConfig(
            nodes=[{"id": "a"}, {"id": "b"}],
            links=[{"source": "a", "target": "b"}],
            center=(400, 300),
        ))
        for node in layout.nodes:
            print(node.id, node.x, node.y, node.color)
    """

    def __init__(self) -> None:
        self._result: Optional[NetworkResult] = None
        self._config: Optional[NetworkConfig] = None

    @property
    def nodes(self) -> Union[list[ComputedNode], NotComputed]:
        """Get the computed nodes, or NOT_COMPUTED."""
        return self._result.nodes if self._result is not None else NOT_COMPUTED

    @property
    def links(self) -> Union[list[ComputedLink], NotComputed]:
        """Get the computed links, or NOT_COMPUTED."""
        return self._result.links if self._result is not None else NOT_COMPUTED

    @property
    def config(self) -> Optional[NetworkConfig]:
        """Get the configuration of the last successful run."""
        return self._config

    @property
    def computed(self) -> bool:
        return self._result is not None

    def compute(self, config: NetworkConfig) -> NetworkResult:
        """
        Run a new layout, replacing the previous result.

        On failure the previous result is kept and the error propagates.
        """
        previous = self._result.nodes if self._result is not None else None
        result = compute_network(config, previous_nodes=previous)
        self._result = result
        self._config = config
        return result

    def reset(self) -> None:
        """Forget the last result."""
        self._result = None
        self._config = None


__all__ = [
    "NOT_COMPUTED",
    "NotComputed",
    "NetworkConfig",
    "NetworkResult",
    "NetworkLayout",
    "compute_network",
]
