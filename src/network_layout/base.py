"""
Base class for the iterative layout engine.

Provides the shared infrastructure the force simulation builds on:

- Event system (start/tick/end events)
- Alpha (temperature/cooling) schedule
- Fixed-budget tick loop
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from typing_extensions import Self

from . import defaults
from .types import Event, EventType
from .validation import validate_iterations


class IterativeLayout(ABC):
    """
    Abstract base class for iterative layout algorithms.

    Alpha starts at ``alpha`` and moves toward ``alpha_target`` by
    ``alpha_decay`` of the remaining gap every tick. The default decay
    reaches ``alpha_min`` after ``defaults.ALPHA_DECAY_TICKS`` ticks.
    Unlike convergence-driven layouts, ``kick()`` always spends the whole
    iteration budget so that identical inputs give identical outputs.

    Example:
        layout = SomeSimulation(
            nodes=nodes,
            links=links,
            iterations=300,
        )
        layout.run()
    """

    def __init__(
        self,
        *,
        iterations: int = defaults.ITERATIONS,
        alpha: float = defaults.ALPHA,
        alpha_min: float = defaults.ALPHA_MIN,
        alpha_decay: Optional[float] = None,
        alpha_target: float = defaults.ALPHA_TARGET,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize iterative layout.

        Args:
            iterations: Number of ticks per run
            alpha: Initial alpha/temperature (0 to 1)
            alpha_min: Alpha reached after the default decay schedule
            alpha_decay: Alpha decay rate per tick (0 to 1). Derived from
                alpha_min when None.
            alpha_target: Value alpha decays toward
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}
        self._iterations: int = validate_iterations(iterations)
        self._initial_alpha: float = max(0.0, min(1.0, float(alpha)))
        self._alpha: float = self._initial_alpha
        self._alpha_min: float = float(alpha_min)
        if alpha_decay is None:
            alpha_decay = 1 - self._alpha_min ** (1 / defaults.ALPHA_DECAY_TICKS)
        self._alpha_decay: float = max(0.0, min(1.0, float(alpha_decay)))
        self._alpha_target: float = max(0.0, min(1.0, float(alpha_target)))
        self._iteration: int = 0

        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def alpha(self) -> float:
        """Get current alpha (temperature/energy)."""
        return self._alpha

    @property
    def alpha_min(self) -> float:
        """Get minimum alpha."""
        return self._alpha_min

    @property
    def alpha_decay(self) -> float:
        """Get alpha decay rate."""
        return self._alpha_decay

    @property
    def alpha_target(self) -> float:
        """Get the value alpha decays toward."""
        return self._alpha_target

    @property
    def iterations(self) -> int:
        """Get the iteration budget."""
        return self._iterations

    @property
    def iteration(self) -> int:
        """Get the number of ticks performed so far."""
        return self._iteration

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def cool(self) -> float:
        """Advance alpha one step along the cooling schedule."""
        self._alpha += (self._alpha_target - self._alpha) * self._alpha_decay
        return self._alpha

    @abstractmethod
    def tick(self) -> None:
        """Perform one tick of the layout."""
        pass

    def kick(self) -> None:
        """Run tick() for the whole iteration budget."""
        for _ in range(self._iterations):
            self.tick()

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout to completion.

        Returns:
            self (for chaining)
        """
        pass


__all__ = ["IterativeLayout"]
