"""
Force simulation layout engine.

Runs a fixed number of relaxation ticks over a private copy of the input
graph. Each tick applies, in order:

1. the link force (springs toward each link's target distance),
2. the charge force (clamped repulsion between all node pairs),
3. the center force (translate the centroid onto the center point),

then integrates velocity into position with velocity decay, and cools
alpha. Identical inputs always produce identical positions: the engine uses
no global random state and always spends its whole iteration budget.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Hashable, Optional, Sequence

from . import defaults
from .base import IterativeLayout
from .force.base import Lcg, NodeArena
from .force.builder import ForceModel, build_forces
from .types import (
    Event,
    EventType,
    LinkLike,
    NodeLike,
    SimulationLink,
    SimulationNode,
    link_id,
)
from .validation import (
    coerce_position,
    validate_link_references,
    validate_node_ids,
    warn_duplicate_link_ids,
)

# Phyllotaxis placement for nodes without a starting position
INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

# Fields owned by the engine; never copied from input records
_ENGINE_FIELDS = frozenset({"id", "index", "x", "y", "vx", "vy"})


class ForceSimulation(IterativeLayout):
    """
    Fixed-budget force-directed layout engine.

    The engine never mutates or aliases the caller's node and link records:
    ``run()`` builds fresh SimulationNode/SimulationLink copies, relaxes them
    in an indexed NodeArena, and exposes the copies via ``nodes``/``links``.

    Example:
        sim = ForceSimulation(
            nodes=[{"id": "a"}, {"id": "b"}],
            links=[{"source": "a", "target": "b"}],
            forces=build_forces(link_distance=50, repulsivity=0),
            iterations=300,
        )
        sim.run()

        for node in sim.nodes:
            print(f"{node.id}: ({node.x:.1f}, {node.y:.1f})")
    """

    def __init__(
        self,
        *,
        nodes: Sequence[NodeLike] = (),
        links: Sequence[LinkLike] = (),
        forces: Optional[ForceModel] = None,
        iterations: int = defaults.ITERATIONS,
        velocity_decay: float = defaults.VELOCITY_DECAY,
        alpha: float = defaults.ALPHA,
        alpha_min: float = defaults.ALPHA_MIN,
        alpha_decay: Optional[float] = None,
        alpha_target: float = defaults.ALPHA_TARGET,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize the simulation.

        Args:
            nodes: Input nodes (dicts or objects with a unique ``id``)
            links: Input links (dicts or objects with ``source``/``target`` ids)
            forces: Force contributors. Defaults to build_forces() defaults.
            iterations: Number of ticks per run
            velocity_decay: Fraction of velocity kept each tick (0 to 1)
            alpha: Initial alpha
            alpha_min: Alpha reached after the default decay schedule
            alpha_decay: Alpha decay per tick; derived from alpha_min when None
            alpha_target: Value alpha decays toward
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        super().__init__(
            iterations=iterations,
            alpha=alpha,
            alpha_min=alpha_min,
            alpha_decay=alpha_decay,
            alpha_target=alpha_target,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )
        self._input_nodes: Sequence[NodeLike] = nodes
        self._input_links: Sequence[LinkLike] = links
        self._forces: ForceModel = forces if forces is not None else build_forces()
        self._velocity_decay: float = max(0.0, min(1.0, float(velocity_decay)))

        self._nodes: list[SimulationNode] = []
        self._links: list[SimulationLink] = []
        self._arena: Optional[NodeArena] = None
        self._completed: bool = False

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> list[SimulationNode]:
        """Get the simulation nodes of the last run."""
        return self._nodes

    @property
    def links(self) -> list[SimulationLink]:
        """Get the simulation links of the last run."""
        return self._links

    @property
    def forces(self) -> ForceModel:
        """Get the force contributors."""
        return self._forces

    @property
    def velocity_decay(self) -> float:
        """Get the fraction of velocity kept each tick."""
        return self._velocity_decay

    @property
    def completed(self) -> bool:
        """True once a run has spent its full iteration budget."""
        return self._completed

    # -------------------------------------------------------------------------
    # Working set
    # -------------------------------------------------------------------------

    def _build(self) -> None:
        """
        Copy inputs into fresh simulation records.

        Raises:
            InvalidNodeError: If node ids are missing or not unique
            DanglingReferenceError: If a link names an unknown node id
        """
        node_ids = validate_node_ids(self._input_nodes)
        validate_link_references(self._input_links, node_ids, strict=True)

        nodes: list[SimulationNode] = []
        by_id: dict[Hashable, SimulationNode] = {}
        for i, (node_id, data) in enumerate(zip(node_ids, self._input_nodes)):
            fields = _record_fields(data)
            node = SimulationNode(
                node_id, i, **{k: v for k, v in fields.items() if k not in _ENGINE_FIELDS}
            )
            x = coerce_position(fields.get("x"))
            y = coerce_position(fields.get("y"))
            if x is None or y is None:
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                x = radius * math.cos(angle)
                y = radius * math.sin(angle)
            node.x = x
            node.y = y
            nodes.append(node)
            by_id[node_id] = node

        links: list[SimulationLink] = []
        for e, data in enumerate(self._input_links):
            fields = _record_fields(data)
            source = by_id[fields["source"]]
            target = by_id[fields["target"]]
            lid = fields.get("id")
            if lid is None:
                lid = link_id(source.id, target.id)
            extra = {k: v for k, v in fields.items() if k not in ("id", "index", "source", "target")}
            links.append(SimulationLink(lid, e, source, target, **extra))

        warn_duplicate_link_ids([link.id for link in links])

        self._nodes = nodes
        self._links = links

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def run(self, **kwargs: Any) -> ForceSimulation:
        """
        Run the simulation for the full iteration budget.

        Any previous run's working state is discarded first.

        Returns:
            self for chaining

        Raises:
            InvalidNodeError: If node ids are missing or not unique
            DanglingReferenceError: If a link names an unknown node id
            ConfigurationError: If a link distance cannot be evaluated
        """
        self._completed = False
        self._nodes = []
        self._links = []
        self._arena = None

        self._build()

        random = Lcg()
        for force in self._forces:
            force.initialize(self._nodes, self._links, random)

        self._arena = NodeArena.from_nodes(self._nodes)
        self._alpha = self._initial_alpha
        self._iteration = 0

        self.trigger({"type": EventType.start, "alpha": self._alpha})

        self.kick()

        self._arena.sync_to(self._nodes)
        self._completed = True

        self.trigger({"type": EventType.end, "alpha": self._alpha, "iteration": self._iteration})

        return self

    def tick(self) -> None:
        """Perform one tick: apply forces, integrate, cool."""
        arena = self._arena
        assert arena is not None

        alpha = self.cool()

        for force in self._forces:
            force.apply(arena, alpha)

        arena.vx *= self._velocity_decay
        arena.vy *= self._velocity_decay
        arena.x += arena.vx
        arena.y += arena.vy

        self._iteration += 1
        self.trigger({"type": EventType.tick, "alpha": alpha, "iteration": self._iteration})

    def positions(self) -> dict[Hashable, tuple[float, float]]:
        """Return final positions keyed by node id."""
        return {node.id: (node.x, node.y) for node in self._nodes}


def _record_fields(data: Any) -> dict[str, Any]:
    """Shallow copy of a record's public fields (dict keys or instance attributes)."""
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if isinstance(k, str) and not k.startswith("_")}
    if hasattr(data, "__dict__"):
        return {k: v for k, v in vars(data).items() if not k.startswith("_")}
    fields = {}
    for attr in dir(data):
        if attr.startswith("_"):
            continue
        value = getattr(data, attr)
        if not callable(value):
            fields[attr] = value
    return fields


__all__ = ["ForceSimulation", "INITIAL_RADIUS", "INITIAL_ANGLE"]
