"""
Styling pipeline.

Attaches presentation attributes (color, border, size, thickness) to the
layout engine's output. Accessors are normalized once into callables when a
style is built; styling is then a pure map that layers the resolved fields
onto shallow copies and never touches geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Sequence

from . import defaults
from .accessors import normalize_accessor, normalize_numeric_accessor
from .colors import DEFAULT_THEME, Theme, resolve_inherited_color
from .types import ComputedLink, ComputedNode, SimulationLink, SimulationNode, freeze


@dataclass(frozen=True)
class NodeStyle:
    """Resolved node accessors."""

    color: Callable[[Any], Any]
    border_width: Callable[[Any], float]
    border_color: Callable[[Any], Any]
    size: Callable[[Any], float]

    @classmethod
    def build(
        cls,
        *,
        color: Any = defaults.NODE_COLOR,
        border_width: Any = defaults.NODE_BORDER_WIDTH,
        border_color: Any = None,
        size: Any = defaults.NODE_SIZE,
        theme: Theme = DEFAULT_THEME,
    ) -> NodeStyle:
        """
        Normalize node accessor configuration.

        ``color``, ``border_width`` and ``size`` accept a constant or a
        function of the node. ``border_color`` is an inherited color spec
        (see colors.resolve_inherited_color) and defaults to the node's fill.

        Raises:
            ConfigurationError: If any accessor cannot be interpreted
        """
        if border_color is None:
            border_color = defaults.node_border_color()
        return cls(
            color=normalize_accessor(color, "node_color"),
            border_width=normalize_numeric_accessor(border_width, "node_border_width"),
            border_color=resolve_inherited_color(border_color, theme),
            size=normalize_numeric_accessor(size, "node_size"),
        )


@dataclass(frozen=True)
class LinkStyle:
    """Resolved link accessors."""

    thickness: Callable[[Any], float]
    color: Callable[[Any], Any]

    @classmethod
    def build(
        cls,
        *,
        thickness: Any = defaults.LINK_THICKNESS,
        color: Any = None,
        theme: Theme = DEFAULT_THEME,
    ) -> LinkStyle:
        """
        Normalize link accessor configuration.

        ``thickness`` accepts a constant or a function of the link. ``color``
        is an inherited color spec and defaults to the source node's color.

        Raises:
            ConfigurationError: If any accessor cannot be interpreted
        """
        if color is None:
            color = defaults.link_color()
        return cls(
            thickness=normalize_numeric_accessor(thickness, "link_thickness"),
            color=resolve_inherited_color(color, theme),
        )


def style_nodes(nodes: Sequence[SimulationNode], style: NodeStyle) -> list[ComputedNode]:
    """Produce computed nodes; the fill color is resolved before the border color."""
    computed = []
    for node in nodes:
        item = ComputedNode(
            node,
            color=style.color(node),
            border_width=0.0,
            border_color=None,
            size=style.size(node),
        )
        # Border accessors see the resolved fill (default border inherits it)
        item.border_width = style.border_width(item)
        item.border_color = style.border_color(item)
        freeze(item)
        computed.append(item)
    return computed


def style_links(
    links: Sequence[SimulationLink],
    nodes: Sequence[ComputedNode],
    style: LinkStyle,
    previous_nodes: Optional[Sequence[ComputedNode]] = None,
) -> list[ComputedLink]:
    """
    Produce computed links whose endpoints are the given computed nodes.

    Args:
        links: Simulation links from the layout engine
        nodes: Computed nodes of the same run
        style: Resolved link accessors
        previous_nodes: Computed nodes of the previous run, if any

    Returns:
        Computed links with previous_source/previous_target set where the
        endpoint id existed in previous_nodes
    """
    by_id = {node.id: node for node in nodes}
    previous: dict[Hashable, ComputedNode] = (
        {node.id: node for node in previous_nodes} if previous_nodes else {}
    )

    computed = []
    for link in links:
        item = ComputedLink(
            link,
            source=by_id[link.source.id],
            target=by_id[link.target.id],
            previous_source=previous.get(link.source.id),
            previous_target=previous.get(link.target.id),
        )
        item.thickness = style.thickness(item)
        item.color = style.color(item)
        freeze(item)
        computed.append(item)
    return computed


__all__ = ["NodeStyle", "LinkStyle", "style_nodes", "style_links"]
