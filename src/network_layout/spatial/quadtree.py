"""
Quadtree implementation for Barnes-Hut charge approximation.

The quadtree recursively subdivides 2D space into quadrants,
enabling O(n log n) approximate n-body force calculations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

# Cells smaller than this are not subdivided further; coincident bodies
# share a leaf instead.
_MIN_HALF_SIZE = 1e-9


@dataclass
class Body:
    """A body (node) with position and charge strength for force calculations."""

    x: float
    y: float
    strength: float = -30.0
    index: int = -1  # Original node index


@dataclass
class QuadTreeNode:
    """
    A node in the quadtree.

    Attributes:
        x, y: Center of this region
        half_size: Half the width/height of this region
        center_x/y: Strength-weighted center of bodies in this subtree
        total_strength: Summed strength of bodies in this subtree
        bodies: Bodies held by this leaf (more than one only when coincident)
        children: Four child quadrants [NW, NE, SW, SE] if internal
    """

    x: float
    y: float
    half_size: float

    # Aggregated properties
    center_x: float = 0.0
    center_y: float = 0.0
    total_strength: float = 0.0

    # Content
    bodies: Optional[List[Body]] = None
    children: Optional[List[Optional[QuadTreeNode]]] = None

    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return self.children is None

    def is_empty(self) -> bool:
        """True if this node contains no bodies."""
        return not self.bodies and self.children is None

    def contains(self, x: float, y: float) -> bool:
        """Check if point (x, y) is within this node's region."""
        return abs(x - self.x) <= self.half_size and abs(y - self.y) <= self.half_size

    def get_quadrant(self, x: float, y: float) -> int:
        """
        Get quadrant index for a point.

        Returns:
            0=NW, 1=NE, 2=SW, 3=SE
        """
        east = x >= self.x
        south = y >= self.y
        return (2 if south else 0) + (1 if east else 0)


class QuadTree:
    """
    Barnes-Hut quadtree for approximate charge calculations.

    For distant clusters the tree treats the cluster as a single body at its
    strength-weighted center, reducing complexity from O(n^2) to O(n log n).

    Usage:
        tree = QuadTree(bounds=(0, 0, 1000, 1000))
        for i, node in enumerate(nodes):
            tree.insert(Body(node.x, node.y, strength=-30.0, index=i))
        tree.compute_strength_distribution()

        # Velocity change on a body for one tick
        dvx, dvy = tree.calculate_force(body, alpha=1.0)

    The theta parameter controls the accuracy/speed tradeoff:
    - theta = 0: Exact calculation (no approximation)
    - theta = 0.9: Layout default
    """

    def __init__(
        self,
        bounds: Tuple[float, float, float, float],
        theta: float = 0.9,
    ):
        """
        Initialize quadtree.

        Args:
            bounds: (min_x, min_y, max_x, max_y) bounding box
            theta: Barnes-Hut threshold (0 = exact, higher = more approximation)
        """
        min_x, min_y, max_x, max_y = bounds
        center_x = (min_x + max_x) / 2
        center_y = (min_y + max_y) / 2
        # Use max dimension to ensure square region
        half_size = max(max_x - min_x, max_y - min_y) / 2

        self.root = QuadTreeNode(center_x, center_y, half_size)
        self.theta = theta
        self.body_count = 0

    def insert(self, body: Body) -> None:
        """Insert a body into the quadtree."""
        self._insert_into(self.root, body)
        self.body_count += 1

    def _insert_into(self, node: QuadTreeNode, body: Body) -> None:
        """Recursively insert body into subtree rooted at node."""
        if node.is_empty():
            node.bodies = [body]
            return

        if node.is_leaf():
            assert node.bodies is not None
            first = node.bodies[0]
            if (first.x == body.x and first.y == body.y) or node.half_size < _MIN_HALF_SIZE:
                node.bodies.append(body)
                return

            # Leaf with bodies elsewhere in the cell - must subdivide
            existing = node.bodies
            node.bodies = None
            node.children = [None, None, None, None]
            for other in existing:
                self._insert_into_child(node, other)

        self._insert_into_child(node, body)

    def _insert_into_child(self, node: QuadTreeNode, body: Body) -> None:
        """Insert body into the appropriate child of node."""
        assert node.children is not None
        quadrant = node.get_quadrant(body.x, body.y)

        child = node.children[quadrant]
        if child is None:
            hs = node.half_size / 2
            cx = node.x + hs * (1 if quadrant & 1 else -1)
            cy = node.y + hs * (1 if quadrant & 2 else -1)
            child = QuadTreeNode(cx, cy, hs)
            node.children[quadrant] = child

        self._insert_into(child, body)

    def compute_strength_distribution(self) -> None:
        """Compute aggregate strength and center for all nodes (post-order)."""
        self._compute_strength(self.root)

    def _compute_strength(self, node: QuadTreeNode) -> None:
        """Recursively compute strength distribution."""
        if node.is_leaf():
            if node.bodies:
                node.total_strength = sum(b.strength for b in node.bodies)
                node.center_x = node.bodies[0].x
                node.center_y = node.bodies[0].y
            return

        total = 0.0
        weight = 0.0
        weighted_x = 0.0
        weighted_y = 0.0

        if node.children:
            for child in node.children:
                if child is not None:
                    self._compute_strength(child)
                    w = abs(child.total_strength)
                    total += child.total_strength
                    weight += w
                    weighted_x += child.center_x * w
                    weighted_y += child.center_y * w

        node.total_strength = total
        if weight > 0:
            node.center_x = weighted_x / weight
            node.center_y = weighted_y / weight
        else:
            node.center_x = node.x
            node.center_y = node.y

    def calculate_force(
        self,
        body: Body,
        alpha: float = 1.0,
        distance_min: float = 1.0,
        distance_max: float = math.inf,
        jiggle: Optional[Callable[[], float]] = None,
    ) -> Tuple[float, float]:
        """
        Calculate the approximate velocity change on a body.

        Uses Barnes-Hut approximation: if a cluster is sufficiently far away
        (size/distance < theta), treat it as a single body. Contributions from
        beyond distance_max are skipped; distances below distance_min are
        clamped to distance_min.

        Args:
            body: The body to calculate force on
            alpha: Current simulation alpha
            distance_min: Lower distance clamp
            distance_max: Upper distance cutoff
            jiggle: Source of tiny offsets for coincident bodies

        Returns:
            (dvx, dvy) velocity change (negative strength points away from other bodies)
        """
        state = _ForceQuery(
            body,
            alpha,
            distance_min * distance_min,
            distance_max * distance_max,
            self.theta * self.theta,
            jiggle or (lambda: 1e-6),
        )
        self._calculate_force(self.root, state)
        return state.vx, state.vy

    def _calculate_force(self, node: QuadTreeNode, q: _ForceQuery) -> None:
        """Recursively accumulate force contributions from node."""
        if node.is_empty() or node.total_strength == 0.0:
            return

        dx = node.center_x - q.body.x
        dy = node.center_y - q.body.y
        dist_sq = dx * dx + dy * dy
        width = node.half_size * 2

        # Barnes-Hut criterion: s/d < theta
        if not node.is_leaf() and width * width < q.theta_sq * dist_sq:
            if dist_sq < q.dmax_sq:
                q.accumulate(dx, dy, dist_sq, node.total_strength)
            return

        if not node.is_leaf():
            if dist_sq >= q.dmax_sq and _outside(node, q):
                return
            assert node.children is not None
            for child in node.children:
                if child is not None:
                    self._calculate_force(child, q)
            return

        assert node.bodies is not None
        for other in node.bodies:
            if other.index == q.body.index:
                continue
            dx = other.x - q.body.x
            dy = other.y - q.body.y
            dist_sq = dx * dx + dy * dy
            if dist_sq >= q.dmax_sq:
                continue
            if dx == 0.0 and dy == 0.0:
                dx = q.jiggle()
                dy = q.jiggle()
                dist_sq = dx * dx + dy * dy
            q.accumulate(dx, dy, dist_sq, other.strength)

    @classmethod
    def from_points(
        cls,
        xs: Sequence[float],
        ys: Sequence[float],
        strengths: Sequence[float],
        padding: float = 10.0,
        theta: float = 0.9,
    ) -> QuadTree:
        """
        Build a quadtree from parallel coordinate and strength sequences.

        Args:
            xs, ys: Body positions
            strengths: Charge strength per body
            padding: Padding around bounding box
            theta: Barnes-Hut threshold

        Returns:
            QuadTree with all bodies inserted and strength computed
        """
        if len(xs) == 0:
            return cls((0, 0, 100, 100), theta=theta)

        min_x = min(xs) - padding
        min_y = min(ys) - padding
        max_x = max(xs) + padding
        max_y = max(ys) + padding

        tree = cls((min_x, min_y, max_x, max_y), theta=theta)

        for i in range(len(xs)):
            tree.insert(Body(float(xs[i]), float(ys[i]), strength=float(strengths[i]), index=i))

        tree.compute_strength_distribution()
        return tree


class _ForceQuery:
    """Accumulator for one calculate_force() traversal."""

    __slots__ = ("body", "alpha", "dmin_sq", "dmax_sq", "theta_sq", "jiggle", "vx", "vy")

    def __init__(
        self,
        body: Body,
        alpha: float,
        dmin_sq: float,
        dmax_sq: float,
        theta_sq: float,
        jiggle: Callable[[], float],
    ) -> None:
        self.body = body
        self.alpha = alpha
        self.dmin_sq = dmin_sq
        self.dmax_sq = dmax_sq
        self.theta_sq = theta_sq
        self.jiggle = jiggle
        self.vx = 0.0
        self.vy = 0.0

    def accumulate(self, dx: float, dy: float, dist_sq: float, strength: float) -> None:
        # Dividing by d * max(d, dmin) gives magnitude |strength| * alpha / max(d, dmin)
        if dist_sq < self.dmin_sq:
            dist_sq = math.sqrt(self.dmin_sq * dist_sq)
        scale = strength * self.alpha / dist_sq
        self.vx += dx * scale
        self.vy += dy * scale


def _outside(node: QuadTreeNode, q: _ForceQuery) -> bool:
    """True if every point of node's cell is at least distance_max from the body."""
    gap_x = max(0.0, abs(q.body.x - node.x) - node.half_size)
    gap_y = max(0.0, abs(q.body.y - node.y) - node.half_size)
    return gap_x * gap_x + gap_y * gap_y >= q.dmax_sq


__all__ = ["Body", "QuadTree", "QuadTreeNode"]
