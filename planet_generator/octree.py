# planet_generator/octree.py

"""
================================================================================
SPARSE OCTREE
================================================================================
An adaptive point index over a cubic region, used to place and query surface
features such as vegetation.

Data Contract:
---------------
- Inputs: Points (a 3D position plus an opaque payload) lying inside the
  root cube.
- Outputs: Lists of Points from box, sphere and nearest-neighbour queries.
- Side Effects: insert/clear mutate the tree. The tree is single-writer:
  concurrent inserts need external locking, concurrent queries on an
  unchanging tree are safe.
- Invariants:
    - Every inserted point is held by exactly one node.
    - A leaf splits only when it holds more than 'capacity' points and its
      edge is larger than 'min_size'; otherwise it keeps accumulating.
    - Points outside the root cube are rejected with OctreeBoundsError.
================================================================================
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from . import config as DEFAULTS
from .errors import ConfigurationError, OctreeBoundsError

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Point:
    position: Vec3
    payload: Any = None


def _as_vec3(v: Sequence[float]) -> Vec3:
    return (float(v[0]), float(v[1]), float(v[2]))


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


def point_in_box(position: Sequence[float], center: Sequence[float], size: float) -> bool:
    """Closed-interval containment in the cube of edge 'size' around 'center'."""
    half = size / 2.0
    return (
        center[0] - half <= position[0] <= center[0] + half and
        center[1] - half <= position[1] <= center[1] + half and
        center[2] - half <= position[2] <= center[2] + half
    )


class OctreeNode:
    """A cube of space holding points directly (leaf) or through 8 children."""

    __slots__ = ("center", "size", "points", "children")

    def __init__(self, center: Sequence[float], size: float):
        self.center = _as_vec3(center)
        self.size = float(size)
        self.points: List[Point] = []
        self.children: List["OctreeNode"] = []

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def contains(self, position: Sequence[float]) -> bool:
        return point_in_box(position, self.center, self.size)

    def intersects_box(self, box_center: Sequence[float], box_size: float) -> bool:
        reach = self.size / 2.0 + box_size / 2.0
        return (
            abs(self.center[0] - box_center[0]) <= reach and
            abs(self.center[1] - box_center[1]) <= reach and
            abs(self.center[2] - box_center[2]) <= reach
        )

    def child_for(self, position: Sequence[float]) -> Optional["OctreeNode"]:
        """
        The first child whose cube contains the position. Children are ordered
        with X varying slowest, then Y, then Z, negative half first, so a point
        on a dividing plane goes to the negative side.
        """
        for child in self.children:
            if child.contains(position):
                return child
        if not self.children:
            return None
        # Rounding can leave a point on the parent's outer face just outside
        # every child; route it by octant instead.
        cx, cy, cz = self.center
        index = (position[0] > cx) * 4 + (position[1] > cy) * 2 + (position[2] > cz)
        return self.children[index]

    def split(self):
        """Creates the 8 octants and moves this node's points into them."""
        half = self.size / 2.0
        quarter = self.size / 4.0
        cx, cy, cz = self.center
        for dx in (-1, 1):
            for dy in (-1, 1):
                for dz in (-1, 1):
                    self.children.append(OctreeNode((cx + dx * quarter, cy + dy * quarter, cz + dz * quarter), half))

        points, self.points = self.points, []
        for point in points:
            self.child_for(point.position).points.append(point)


class SparseOctree:
    """
    Point index over the cube of edge 'size' centred on 'center'.
    """

    def __init__(self, center: Sequence[float] = (0.0, 0.0, 0.0), size: float = 1.0, capacity: int = DEFAULTS.OCTREE_CAPACITY, min_size: float = DEFAULTS.OCTREE_MIN_SIZE, logger: Optional[logging.Logger] = None):
        if not size > 0:
            raise ConfigurationError(f"Octree size must be > 0, got {size!r}")
        if capacity < 1:
            raise ConfigurationError(f"Octree capacity must be >= 1, got {capacity!r}")

        self.logger = logger or logging.getLogger(__name__)
        self.capacity = capacity
        self.min_size = min_size
        self.root = OctreeNode(center, size)
        self.count = 0

    def __len__(self) -> int:
        return self.count

    # --- Mutation ---

    def insert(self, point: Point):
        """
        Stores a point in the deepest node whose cube contains it.

        Raises:
            OctreeBoundsError: If the point lies outside the root cube.
        """
        if not self.root.contains(point.position):
            raise OctreeBoundsError(
                f"Point {point.position} is outside the octree root "
                f"(center={self.root.center}, size={self.root.size})"
            )

        node = self.root
        while not node.is_leaf:
            node = node.child_for(point.position)

        node.points.append(point)
        self.count += 1
        if len(node.points) > self.capacity and node.size > self.min_size:
            node.split()
            self.logger.debug(f"Split octree node at {node.center} (size {node.size}).")

    def clear(self):
        """Drops every node and point, keeping the root's center and size."""
        self.root = OctreeNode(self.root.center, self.root.size)
        self.count = 0

    # --- Queries ---

    def query_box(self, center: Sequence[float], size: float) -> List[Point]:
        """All points inside the cube of edge 'size' around 'center'."""
        center = _as_vec3(center)
        result = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if not node.intersects_box(center, size):
                continue
            result.extend(p for p in node.points if point_in_box(p.position, center, size))
            stack.extend(reversed(node.children))
        return result

    def query_sphere(self, center: Sequence[float], radius: float) -> List[Point]:
        """All points within 'radius' (inclusive) of 'center'."""
        center = _as_vec3(center)
        return [p for p in self.query_box(center, radius * 2.0) if distance(p.position, center) <= radius]

    def find_nearest(self, position: Sequence[float], max_radius: float = math.inf) -> Optional[Point]:
        """
        The point closest to 'position' within 'max_radius', or None.

        Probes spheres of doubling radius, starting at a fraction of the root
        edge. The final probe is made at exactly max_radius; with an infinite
        max_radius the search ends once a probe covers the whole root cube.
        """
        if self.count == 0 or max_radius < 0:
            return None

        position = _as_vec3(position)
        # Any probe of this radius contains every point in the tree.
        half_diagonal = self.root.size * math.sqrt(3.0) / 2.0
        covering_radius = (distance(position, self.root.center) + half_diagonal) * (1.0 + 1e-9)
        limit = min(max_radius, covering_radius)

        radius = min(self.root.size * DEFAULTS.OCTREE_NEAREST_START_FRACTION, limit)
        while True:
            candidates = self.query_sphere(position, radius)
            if candidates:
                return min(candidates, key=lambda p: distance(p.position, position))
            if radius >= limit:
                return None
            radius = min(radius * 2.0, limit)

    # --- Diagnostics ---

    def node_count(self) -> int:
        total = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.children)
        return total

    def depth(self) -> int:
        """Number of levels below the root (0 for an unsplit tree)."""
        deepest = 0
        stack = [(self.root, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest
