"""
Keyed transition contract for animated renderers.

Computed nodes are keyed by ``id``. Between two successive results a node is
entering (new key), updating (key in both) or exiting (key gone). The state
functions give the values a renderer animates from/to: entering nodes grow
from zero scale, exiting nodes shrink to zero scale.
"""

from __future__ import annotations

from typing import Any, Hashable, NamedTuple, Optional, Sequence

from .colors import Color
from .types import ComputedNode
from .validation import ConfigurationError

TransitionState = dict[str, Any]


class NodeTransitions(NamedTuple):
    """Classification of nodes across two computed results."""

    entering: list[ComputedNode]
    updating: list[tuple[ComputedNode, ComputedNode]]
    exiting: list[ComputedNode]


def diff_nodes(
    previous: Optional[Sequence[ComputedNode]],
    current: Sequence[ComputedNode],
) -> NodeTransitions:
    """
    Classify nodes by id across two results.

    On the first render (``previous`` is None) every node is reported as
    updating against itself, so it appears at full scale without an entry
    animation.

    Returns:
        NodeTransitions; ``updating`` holds (previous, current) pairs
    """
    if previous is None:
        return NodeTransitions([], [(node, node) for node in current], [])

    before: dict[Hashable, ComputedNode] = {node.id: node for node in previous}
    current_ids = {node.id for node in current}

    entering = []
    updating = []
    for node in current:
        old = before.get(node.id)
        if old is None:
            entering.append(node)
        else:
            updating.append((old, node))

    exiting = [node for node in previous if node.id not in current_ids]
    return NodeTransitions(entering, updating, exiting)


def _state(node: ComputedNode, scale: float) -> TransitionState:
    return {
        "x": node.x,
        "y": node.y,
        "radius": node.radius,
        "color": node.color,
        "border_width": node.border_width,
        "border_color": node.border_color,
        "scale": scale,
    }


def enter_state(node: ComputedNode) -> TransitionState:
    """Starting state of an entering node."""
    return _state(node, 0.0)


def update_state(node: ComputedNode) -> TransitionState:
    """Resting state of a node; also the target of enter and update."""
    return _state(node, 1.0)


def exit_state(node: ComputedNode) -> TransitionState:
    """Terminal state of an exiting node."""
    return _state(node, 0.0)


_NUMERIC_KEYS = ("x", "y", "radius", "border_width", "scale")
_COLOR_KEYS = ("color", "border_color")


def interpolate_state(start: TransitionState, end: TransitionState, t: float) -> TransitionState:
    """
    Blend two transition states.

    Numeric fields are interpolated linearly and colors channel by channel.
    ``t`` is clamped to [0, 1].

    Raises:
        ConfigurationError: If a color cannot be parsed
    """
    t = max(0.0, min(1.0, float(t)))
    state: TransitionState = {}
    for key in _NUMERIC_KEYS:
        a, b = start[key], end[key]
        state[key] = a + (b - a) * t
    for key in _COLOR_KEYS:
        state[key] = _interpolate_color(start[key], end[key], t)
    return state


def _interpolate_color(a: Any, b: Any, t: float) -> Any:
    if a == b:
        return a
    if t <= 0.0:
        return a
    if t >= 1.0:
        return b
    if not isinstance(a, str) or not isinstance(b, str):
        raise ConfigurationError(f"Cannot interpolate colors {a!r} and {b!r}")
    ca, cb = Color.parse(a), Color.parse(b)
    return str(
        Color(
            ca.r + (cb.r - ca.r) * t,
            ca.g + (cb.g - ca.g) * t,
            ca.b + (cb.b - ca.b) * t,
            ca.opacity + (cb.opacity - ca.opacity) * t,
        )
    )


__all__ = [
    "TransitionState",
    "NodeTransitions",
    "diff_nodes",
    "enter_state",
    "update_state",
    "exit_state",
    "interpolate_state",
]
