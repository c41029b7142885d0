"""
Tests for the keyed enter/update/exit transition contract.
"""

import pytest

from network_layout import NetworkConfig, compute_network
from network_layout.transitions import (
    diff_nodes,
    enter_state,
    exit_state,
    interpolate_state,
    update_state,
)
from network_layout.validation import ConfigurationError


def compute(ids, **overrides):
    config = NetworkConfig(nodes=[{"id": i} for i in ids], iterations=20, **overrides)
    return compute_network(config).nodes


class TestDiffNodes:
    """Tests for keyed node classification."""

    def test_first_render_has_no_entering(self):
        nodes = compute(["a", "b"])
        transitions = diff_nodes(None, nodes)

        assert transitions.entering == []
        assert transitions.exiting == []
        assert transitions.updating == [(n, n) for n in nodes]

    def test_enter_update_exit(self):
        before = compute(["a", "b", "c"])
        after = compute(["b", "c", "d"])

        transitions = diff_nodes(before, after)

        assert [n.id for n in transitions.entering] == ["d"]
        assert [(old.id, new.id) for old, new in transitions.updating] == [("b", "b"), ("c", "c")]
        assert transitions.updating[0][0] is before[1]
        assert transitions.updating[0][1] is after[0]
        assert [n.id for n in transitions.exiting] == ["a"]

    def test_empty_previous(self):
        after = compute(["a"])
        transitions = diff_nodes([], after)
        assert [n.id for n in transitions.entering] == ["a"]


class TestStates:
    """Tests for the animated state values."""

    def test_state_fields(self):
        node = compute(["a"], node_size=10, node_color="#ff0000", node_border_width=2)[0]

        state = update_state(node)
        assert state == {
            "x": node.x,
            "y": node.y,
            "radius": 5.0,
            "color": "#ff0000",
            "border_width": 2,
            "border_color": "#ff0000",
            "scale": 1.0,
        }
        assert enter_state(node)["scale"] == 0.0
        assert exit_state(node)["scale"] == 0.0
        assert enter_state(node)["radius"] == 5.0


class TestInterpolateState:
    """Tests for state blending."""

    def make_state(self, x, color, scale=1.0):
        return {
            "x": x,
            "y": 0.0,
            "radius": 6.0,
            "color": color,
            "border_width": 0.0,
            "border_color": color,
            "scale": scale,
        }

    def test_midpoint(self):
        start = self.make_state(0.0, "#000000", scale=0.0)
        end = self.make_state(10.0, "#ffffff")

        state = interpolate_state(start, end, 0.5)

        assert state["x"] == 5.0
        assert state["scale"] == 0.5
        assert state["color"] == "rgb(128, 128, 128)"

    def test_endpoints(self):
        start = self.make_state(0.0, "#000000")
        end = self.make_state(10.0, "#ffffff")

        assert interpolate_state(start, end, 0.0)["color"] == "#000000"
        assert interpolate_state(start, end, 1.0)["color"] == "#ffffff"

    def test_t_clamped(self):
        start = self.make_state(0.0, "red")
        end = self.make_state(10.0, "red")

        assert interpolate_state(start, end, 2.0)["x"] == 10.0
        assert interpolate_state(start, end, -1.0)["x"] == 0.0

    def test_uninterpolatable_colors(self):
        start = self.make_state(0.0, ("not", "a", "color"))
        end = self.make_state(1.0, "#ffffff")
        with pytest.raises(ConfigurationError):
            interpolate_state(start, end, 0.5)
