"""Tests for QuadTree implementation and Barnes-Hut charge approximation."""

import math

import pytest

from network_layout.spatial.quadtree import Body, QuadTree, QuadTreeNode


class TestBody:
    """Tests for the Body dataclass."""

    def test_body_creation(self):
        """Test basic body creation."""
        body = Body(x=10.0, y=20.0, strength=-5.0, index=5)
        assert body.x == 10.0
        assert body.y == 20.0
        assert body.strength == -5.0
        assert body.index == 5

    def test_body_defaults(self):
        """Test body default values."""
        body = Body(x=0.0, y=0.0)
        assert body.strength == -30.0
        assert body.index == -1


class TestQuadTreeNode:
    """Tests for QuadTreeNode."""

    def test_node_creation(self):
        """Test node creation with bounds."""
        node = QuadTreeNode(x=50.0, y=50.0, half_size=50.0)
        assert node.x == 50.0
        assert node.half_size == 50.0
        assert node.is_empty()
        assert node.is_leaf()

    def test_contains(self):
        """Test point containment check."""
        node = QuadTreeNode(x=50.0, y=50.0, half_size=50.0)

        assert node.contains(25.0, 25.0)
        assert node.contains(0.0, 0.0)
        assert node.contains(100.0, 100.0)
        assert not node.contains(-1.0, 50.0)
        assert not node.contains(50.0, 101.0)

    def test_get_quadrant(self):
        """Test quadrant determination."""
        node = QuadTreeNode(x=50.0, y=50.0, half_size=50.0)

        assert node.get_quadrant(25.0, 25.0) == 0
        assert node.get_quadrant(75.0, 25.0) == 1
        assert node.get_quadrant(25.0, 75.0) == 2
        assert node.get_quadrant(75.0, 75.0) == 3


class TestQuadTreeInsertion:
    """Tests for QuadTree insertion operations."""

    def test_empty_tree(self):
        """Test empty tree state."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        assert tree.body_count == 0
        assert tree.root.is_empty()

    def test_single_body_insertion(self):
        """Test inserting a single body."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        body = Body(25.0, 25.0, index=0)
        tree.insert(body)

        assert tree.body_count == 1
        assert tree.root.bodies == [body]
        assert tree.root.is_leaf()

    def test_two_body_insertion(self):
        """Test inserting two bodies causes subdivision."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        tree.insert(Body(25.0, 25.0, index=0))
        tree.insert(Body(75.0, 75.0, index=1))

        assert tree.body_count == 2
        assert not tree.root.is_leaf()
        assert tree.root.children is not None

    def test_coincident_bodies_share_leaf(self):
        """Coincident bodies are kept together instead of subdividing forever."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        tree.insert(Body(10.0, 10.0, index=0))
        tree.insert(Body(10.0, 10.0, index=1))
        tree.insert(Body(10.0, 10.0, index=2))

        assert tree.body_count == 3
        assert tree.root.is_leaf()
        assert [b.index for b in tree.root.bodies] == [0, 1, 2]


class TestQuadTreeStrengthDistribution:
    """Tests for aggregate strength computation."""

    def test_single_body(self):
        """Test distribution for a single body."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        tree.insert(Body(30.0, 40.0, strength=-2.0, index=0))
        tree.compute_strength_distribution()

        assert tree.root.total_strength == -2.0
        assert tree.root.center_x == 30.0
        assert tree.root.center_y == 40.0

    def test_weighted_center(self):
        """Center is weighted by absolute strength."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        tree.insert(Body(0.0, 0.0, strength=-3.0, index=0))
        tree.insert(Body(100.0, 0.0, strength=-1.0, index=1))
        tree.compute_strength_distribution()

        assert tree.root.total_strength == -4.0
        assert abs(tree.root.center_x - 25.0) < 1e-10


class TestQuadTreeForceCalculation:
    """Tests for Barnes-Hut charge approximation."""

    def test_no_force_on_single_body(self):
        """A body exerts no force on itself."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        body = Body(50.0, 50.0, index=0)
        tree.insert(body)
        tree.compute_strength_distribution()

        assert tree.calculate_force(body) == (0.0, 0.0)

    def test_repulsive_direction_and_magnitude(self):
        """Negative strength pushes bodies apart with magnitude |s| * alpha / d."""
        tree = QuadTree(bounds=(0, 0, 100, 100))
        tree.insert(Body(40.0, 50.0, strength=-30.0, index=0))
        tree.insert(Body(60.0, 50.0, strength=-30.0, index=1))
        tree.compute_strength_distribution()

        fx, fy = tree.calculate_force(Body(40.0, 50.0, strength=-30.0, index=0))
        assert fx == pytest.approx(-1.5)
        assert fy == pytest.approx(0.0)

        fx, _ = tree.calculate_force(Body(60.0, 50.0, strength=-30.0, index=1), alpha=0.5)
        assert fx == pytest.approx(0.75)

    def test_distance_min_clamp(self):
        """Closer than distance_min, the magnitude is capped at |s| * alpha / distance_min."""
        tree = QuadTree(bounds=(0, 0, 10, 10))
        tree.insert(Body(5.0, 5.0, strength=-10.0, index=0))
        tree.insert(Body(5.5, 5.0, strength=-10.0, index=1))
        tree.compute_strength_distribution()

        fx, _ = tree.calculate_force(Body(5.0, 5.0, index=0), distance_min=2.0)
        assert fx == pytest.approx(-5.0)

    def test_distance_max_cutoff(self):
        """Bodies at or beyond distance_max contribute nothing."""
        tree = QuadTree(bounds=(0, 0, 200, 200))
        tree.insert(Body(0.0, 0.0, index=0))
        tree.insert(Body(150.0, 0.0, index=1))
        tree.compute_strength_distribution()

        assert tree.calculate_force(Body(0.0, 0.0, index=0), distance_max=100.0) == (0.0, 0.0)

    def test_coincident_bodies_use_jiggle(self):
        """Coincident bodies get a finite, non-zero push."""
        tree = QuadTree(bounds=(0, 0, 10, 10))
        tree.insert(Body(5.0, 5.0, index=0))
        tree.insert(Body(5.0, 5.0, index=1))
        tree.compute_strength_distribution()

        fx, fy = tree.calculate_force(Body(5.0, 5.0, index=0), jiggle=lambda: 1e-6)
        assert math.isfinite(fx) and math.isfinite(fy)
        assert fx != 0.0

    def test_theta_zero_matches_pairwise(self):
        """With theta=0 the tree computes exact pairwise sums."""
        points = [(0.0, 0.0), (10.0, 3.0), (4.0, 12.0), (30.0, 30.0), (25.0, 5.0)]
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        tree = QuadTree.from_points(xs, ys, [-10.0] * len(points), theta=0.0)

        for i, (x, y) in enumerate(points):
            expected_x = 0.0
            expected_y = 0.0
            for j, (ox, oy) in enumerate(points):
                if i == j:
                    continue
                dx, dy = ox - x, oy - y
                d2 = dx * dx + dy * dy
                expected_x += dx * -10.0 / d2
                expected_y += dy * -10.0 / d2

            fx, fy = tree.calculate_force(Body(x, y, strength=-10.0, index=i))
            assert fx == pytest.approx(expected_x)
            assert fy == pytest.approx(expected_y)


class TestQuadTreeFromPoints:
    """Tests for building trees from coordinate sequences."""

    def test_empty(self):
        tree = QuadTree.from_points([], [], [])
        assert tree.body_count == 0

    def test_bounds_cover_points(self):
        tree = QuadTree.from_points([0.0, 100.0], [0.0, 50.0], [-1.0, -1.0], padding=10.0)
        assert tree.body_count == 2
        assert tree.root.contains(0.0, 0.0)
        assert tree.root.contains(100.0, 50.0)
        assert tree.root.total_strength == -2.0
