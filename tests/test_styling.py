"""
Tests for the styling pipeline.
"""

import pytest

from network_layout import ForceSimulation, build_forces
from network_layout.colors import Theme
from network_layout.styling import LinkStyle, NodeStyle, style_links, style_nodes
from network_layout.validation import ConfigurationError

# =============================================================================
# Test Fixtures
# =============================================================================


def simulate():
    nodes = [
        {"id": "hub", "color": "#ff0000", "weight": 3},
        {"id": "a", "color": "#00ff00", "weight": 1},
        {"id": "b", "color": "#0000ff", "weight": 2},
    ]
    links = [
        {"source": "hub", "target": "a", "value": 4},
        {"source": "hub", "target": "b", "value": 1},
    ]
    sim = ForceSimulation(nodes=nodes, links=links, forces=build_forces(), iterations=10)
    return sim.run()


# =============================================================================
# Node Styling
# =============================================================================


class TestStyleNodes:
    """Tests for node presentation attributes."""

    def test_defaults(self):
        sim = simulate()
        nodes = style_nodes(sim.nodes, NodeStyle.build())

        for node in nodes:
            assert node.color == "#000000"
            assert node.size == 12.0
            assert node.radius == 6.0
            assert node.border_width == 0.0
            # Border inherits the resolved fill
            assert node.border_color == "#000000"

    def test_geometry_and_fields_preserved(self):
        sim = simulate()
        nodes = style_nodes(sim.nodes, NodeStyle.build())

        for styled, source in zip(nodes, sim.nodes):
            assert styled is not source
            assert (styled.id, styled.x, styled.y) == (source.id, source.x, source.y)
            assert styled.weight == source.weight

    def test_function_accessors(self):
        sim = simulate()
        style = NodeStyle.build(
            color=lambda n: n["color"],
            size=lambda n: n.weight * 10,
            border_width=lambda n: n.radius / 5,
        )
        nodes = {n.id: n for n in style_nodes(sim.nodes, style)}

        assert nodes["hub"].color == "#ff0000"
        assert nodes["hub"].size == 30
        assert nodes["hub"].radius == 15
        assert nodes["hub"].border_width == 3
        assert nodes["b"].border_color == "#0000ff"

    def test_border_color_modifiers(self):
        sim = simulate()
        style = NodeStyle.build(
            color="rgb(100, 200, 50)",
            border_color={"from": "color", "modifiers": [["darker", 1]]},
        )
        nodes = style_nodes(sim.nodes, style)
        assert nodes[0].border_color == "rgb(70, 140, 35)"

    def test_theme_border_color(self):
        sim = simulate()
        style = NodeStyle.build(
            border_color={"theme": "background"},
            theme=Theme(background="#101010"),
        )
        assert {n.border_color for n in style_nodes(sim.nodes, style)} == {"#101010"}

    def test_invalid_border_color(self):
        with pytest.raises(ConfigurationError):
            NodeStyle.build(border_color={"from": "color", "modifiers": [["fade", 1]]})

    def test_none_accessor(self):
        with pytest.raises(ConfigurationError, match="node_size"):
            NodeStyle.build(size=None)


# =============================================================================
# Link Styling
# =============================================================================


class TestStyleLinks:
    """Tests for link presentation attributes."""

    def test_endpoints_are_computed_nodes(self):
        sim = simulate()
        nodes = style_nodes(sim.nodes, NodeStyle.build())
        links = style_links(sim.links, nodes, LinkStyle.build())

        by_id = {n.id: n for n in nodes}
        for link in links:
            assert link.source is by_id[link.source.id]
            assert link.target is by_id[link.target.id]
            assert link.previous_source is None
            assert link.previous_target is None

    def test_default_color_follows_source(self):
        sim = simulate()
        nodes = style_nodes(sim.nodes, NodeStyle.build(color=lambda n: n["color"]))
        links = style_links(sim.links, nodes, LinkStyle.build())

        assert [l.color for l in links] == ["#ff0000", "#ff0000"]
        assert [l.thickness for l in links] == [1.0, 1.0]

    def test_thickness_and_color_accessors(self):
        sim = simulate()
        nodes = style_nodes(sim.nodes, NodeStyle.build(color=lambda n: n["color"]))
        style = LinkStyle.build(
            thickness=lambda l: l.value * 2,
            color={"from": "target.color", "modifiers": [["opacity", 0.5]]},
        )
        links = style_links(sim.links, nodes, style)

        assert [l.thickness for l in links] == [8, 2]
        assert links[0].color == "rgba(0, 255, 0, 0.5)"
        assert links[1].color == "rgba(0, 0, 255, 0.5)"

    def test_previous_nodes(self):
        sim = simulate()
        previous = style_nodes(sim.nodes[:2], NodeStyle.build())
        nodes = style_nodes(sim.nodes, NodeStyle.build())
        links = style_links(sim.links, nodes, LinkStyle.build(), previous_nodes=previous)

        assert links[0].previous_source is previous[0]
        assert links[0].previous_target is previous[1]
        assert links[1].previous_source is previous[0]
        assert links[1].previous_target is None

    def test_link_fields_preserved(self):
        sim = simulate()
        nodes = style_nodes(sim.nodes, NodeStyle.build())
        links = style_links(sim.links, nodes, LinkStyle.build())
        assert [l.value for l in links] == [4, 1]
        assert [l.id for l in links] == ["hub.a", "hub.b"]
