"""
Boundary extraction.

An edge shared by two quads is interior: after the corner merge both quads
reference the same vertices, so the two edges compare equal. Edges that
occur exactly once form the outer silhouette, which is walked into closed
loops.
"""
from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
import logging
from typing import Dict, Iterable, List, Tuple

from gradientgenerator.model.errors import GeometryInfeasible
from gradientgenerator.model.geometry_primitives import Edge, Point
from gradientgenerator.model.mesh import Quad

logger = logging.getLogger(__name__)


@dataclass
class BoundaryLoop:
    """Closed loop of boundary edges; `reversed[i]` is True when edge i is walked end -> start."""
    edges: List[Edge] = field(default_factory=list)
    reversed: List[bool] = field(default_factory=list)

    def add(self, edge: Edge, reverse: bool) -> None:
        self.edges.append(edge)
        self.reversed.append(reverse)

    @property
    def start(self) -> Point:
        return self.edges[0].end if self.reversed[0] else self.edges[0].start

    def points(self) -> List[Point]:
        """Vertices in walking order, the start point is not repeated."""
        return [edge.end if rev else edge.start for edge, rev in zip(self.edges, self.reversed)]

    def edge_set(self) -> frozenset:
        return frozenset(edge.key for edge in self.edges)


def count_edges(quads: Iterable[Quad]) -> Counter:
    """How many quads reference each edge."""
    return Counter(edge for quad in quads for edge in quad.edges)


def extract_boundary_edges(quads: Iterable[Quad]) -> List[Edge]:
    """Edges referenced by exactly one quad, sorted by vertex uids."""
    counts = count_edges(quads)
    edges = [edge for edge, count in counts.items() if count == 1]
    edges.sort(key=lambda edge: edge.sort_key)
    return edges


def build_loops(edges: List[Edge]) -> List[BoundaryLoop]:
    """
    Greedy walk of the boundary edges into closed loops.

    Raises:
        GeometryInfeasible: If a walk ends before returning to its start.
    """
    incident: Dict[int, List[Tuple[int, Edge]]] = defaultdict(list)
    for position, edge in enumerate(edges):
        incident[id(edge.start)].append((position, edge))
        incident[id(edge.end)].append((position, edge))

    consumed = [False] * len(edges)
    loops: List[BoundaryLoop] = []
    for position, first in enumerate(edges):
        if consumed[position]:
            continue

        loop = BoundaryLoop()
        loop.add(first, False)
        consumed[position] = True
        current = first.end

        while current is not first.start:
            candidates = [(p, e) for p, e in incident[id(current)] if not consumed[p]]
            if not candidates:
                raise GeometryInfeasible(
                    "boundary",
                    f"Boundary is not closed: no edge continues at vertex {current.uid} "
                    f"({current.x:.6e}, {current.y:.6e})",
                )
            p, edge = candidates[0]
            consumed[p] = True
            reverse = edge.end is current
            loop.add(edge, reverse)
            current = edge.start if reverse else edge.end

        loops.append(loop)

    logger.debug(f"Boundary: {len(edges)} edges in {len(loops)} loops")
    return loops


def extract_boundary(quads: Iterable[Quad]) -> List[BoundaryLoop]:
    return build_loops(extract_boundary_edges(quads))
