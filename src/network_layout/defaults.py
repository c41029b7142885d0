"""Default configuration values for network layouts."""

from __future__ import annotations

from typing import Any

LINK_DISTANCE = 30.0
REPULSIVITY = 10.0
DISTANCE_MIN = 1.0
DISTANCE_MAX = float("inf")
ITERATIONS = 120

NODE_SIZE = 12.0
NODE_COLOR = "#000000"
NODE_BORDER_WIDTH = 0.0
LINK_THICKNESS = 1.0

# Simulation tuning
ALPHA = 1.0
ALPHA_MIN = 0.001
ALPHA_TARGET = 0.0
# Ticks over which alpha would decay from ALPHA to ALPHA_MIN
ALPHA_DECAY_TICKS = 300
VELOCITY_DECAY = 0.6
BARNES_HUT_THETA = 0.9
BARNES_HUT_THRESHOLD = 100


def node_border_color() -> dict[str, Any]:
    return {"from": "color"}


def link_color() -> dict[str, Any]:
    return {"from": "source.color"}
