"""
network-layout: force-directed network layout in Python.

This package computes node positions for node-link graphs with a
physics-style relaxation simulation, then attaches per-node and per-link
presentation attributes for a rendering layer.

Stages:
- force: Force model builder (link, charge and center forces)
- simulation: Fixed-budget layout engine
- styling: Color, border, size and thickness accessors
- network: Immutable configuration and recompute entry point
- transitions: Keyed enter/update/exit contract for animated renderers
"""

__version__ = "0.1.0"

# Accessors and colors
from .accessors import (
    Accessor,
    AccessorKind,
    get_path,
    normalize_accessor,
    normalize_numeric_accessor,
)
from .colors import (
    DEFAULT_THEME,
    Color,
    Theme,
    resolve_color,
    resolve_inherited_color,
)

# Force model
from .force import (
    CenterForce,
    ForceModel,
    LinkForce,
    ManyBodyForce,
    build_forces,
    resolve_link_distance,
)

# Entry point
from .network import (
    NOT_COMPUTED,
    NetworkConfig,
    NetworkLayout,
    NetworkResult,
    NotComputed,
    compute_network,
)

# Layout engine
from .simulation import ForceSimulation

# Spatial data structures
from .spatial import Body, QuadTree, QuadTreeNode

# Styling
from .styling import LinkStyle, NodeStyle, style_links, style_nodes

# Transitions
from .transitions import (
    NodeTransitions,
    diff_nodes,
    enter_state,
    exit_state,
    interpolate_state,
    update_state,
)
from .types import (
    ComputedLink,
    ComputedNode,
    Event,
    EventType,
    LinkLike,
    NodeLike,
    PointType,
    SimulationLink,
    SimulationNode,
    link_id,
)

# Validation
from .validation import (
    ConfigurationError,
    DanglingReferenceError,
    DuplicateLinkIdWarning,
    InvalidLinkError,
    InvalidNodeError,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "SimulationNode",
    "SimulationLink",
    "ComputedNode",
    "ComputedLink",
    "EventType",
    "Event",
    "link_id",
    "NodeLike",
    "LinkLike",
    "PointType",
    # Accessors
    "Accessor",
    "AccessorKind",
    "get_path",
    "normalize_accessor",
    "normalize_numeric_accessor",
    # Colors
    "Color",
    "Theme",
    "DEFAULT_THEME",
    "resolve_color",
    "resolve_inherited_color",
    # Force model
    "ForceModel",
    "LinkForce",
    "ManyBodyForce",
    "CenterForce",
    "build_forces",
    "resolve_link_distance",
    # Layout engine
    "ForceSimulation",
    # Styling
    "NodeStyle",
    "LinkStyle",
    "style_nodes",
    "style_links",
    # Entry point
    "NOT_COMPUTED",
    "NotComputed",
    "NetworkConfig",
    "NetworkResult",
    "NetworkLayout",
    "compute_network",
    # Transitions
    "NodeTransitions",
    "diff_nodes",
    "enter_state",
    "update_state",
    "exit_state",
    "interpolate_state",
    # Spatial data structures
    "Body",
    "QuadTree",
    "QuadTreeNode",
    # Validation
    "ValidationError",
    "ConfigurationError",
    "InvalidNodeError",
    "InvalidLinkError",
    "DanglingReferenceError",
    "DuplicateLinkIdWarning",
]
