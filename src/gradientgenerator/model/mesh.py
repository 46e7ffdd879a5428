"""
Quad Mesh
=========
Arena of vertices plus the quadrilateral cells referencing them.

Why is this file needed?
------------------------
1. Construction: the layout builders create every cell through the Mesh so
   that each vertex gets a stable uid.
2. Merging: adjacent components are stitched by re-pointing a quad corner to
   the vertex of the neighbour (Mesh.merge). Both edges meeting at that
   corner follow automatically because edges are derived from the corners.
3. Inspection: bounds of the finished device and a matplotlib debug plot.

Corner numbering of a quad follows the counter-clockwise rectangle:
p0 bottom-left, p1 bottom-right, p2 top-right, p3 top-left; edge i runs from
corner i to corner i+1.
"""
from __future__ import annotations

from datetime import datetime
import logging
from typing import Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt

from gradientgenerator.model.geometry_primitives import Point, Edge, EdgeArc

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.axes import Axes

logger = logging.getLogger(__name__)


class Quad:
    """A four-cornered cell; edges with an interpolation point are arcs."""

    def __init__(
        self,
        corners: Sequence[Point],
        arc_points: Optional[Dict[int, Point]] = None,
        tag: str = "",
    ) -> None:
        if len(corners) != 4:
            raise ValueError(f"A quad needs exactly 4 corners, got {len(corners)}.")
        self.corners: List[Point] = list(corners)
        self.arc_points: Dict[int, Point] = dict(arc_points or {})
        self.tag = tag

    def __repr__(self) -> str:
        uids = [corner.uid for corner in self.corners]
        return f"{self.__class__.__name__}(tag={self.tag!r}, corners={uids})"

    def edge(self, index: int) -> Edge:
        start = self.corners[index]
        end = self.corners[(index + 1) % 4]
        if index in self.arc_points:
            return EdgeArc(start, end, self.arc_points[index])
        return Edge(start, end)

    @property
    def edges(self) -> List[Edge]:
        return [self.edge(i) for i in range(4)]

    @property
    def e0(self) -> Edge:
        return self.edge(0)

    @property
    def e1(self) -> Edge:
        return self.edge(1)

    @property
    def e2(self) -> Edge:
        return self.edge(2)

    @property
    def e3(self) -> Edge:
        return self.edge(3)

    def replace_corner(self, index: int, point: Point) -> None:
        """Re-point corner `index`; edges index-1 and index follow."""
        self.corners[index] = point


class Mesh:
    """Collection of vertices and quads of the whole device."""

    def __init__(self) -> None:
        self.points: List[Point] = []
        self.quads: List[Quad] = []

    def add_point(self, x: float, y: float) -> Point:
        point = Point(x, y, uid=len(self.points))
        self.points.append(point)
        return point

    def add_quad(
        self,
        corners: Sequence[Point],
        arc_points: Optional[Dict[int, Point]] = None,
        tag: str = "",
    ) -> Quad:
        quad = Quad(corners, arc_points, tag)
        self.quads.append(quad)
        return quad

    def add_rectangle(self, x_center: float, y_center: float, x_width: float, y_width: float, tag: str = "") -> Quad:
        """Axis-aligned rectangle centred at (x_center, y_center)."""
        dx = x_width / 2
        dy = y_width / 2
        corners = [
            self.add_point(x_center - dx, y_center - dy),
            self.add_point(x_center + dx, y_center - dy),
            self.add_point(x_center + dx, y_center + dy),
            self.add_point(x_center - dx, y_center + dy),
        ]
        return self.add_quad(corners, tag=tag)

    def add_square(self, x_center: float, y_center: float, width: float, tag: str = "") -> Quad:
        return self.add_rectangle(x_center, y_center, width, width, tag)

    def add_quad_between_edges(
        self,
        edge_start: Edge,
        edge_end: Edge,
        reverse_start: bool = False,
        reverse_end: bool = False,
        tag: str = "",
    ) -> Quad:
        """
        Quad spanned by two existing edges; no new vertex is created.

        The first edge becomes edge 0 and the second edge becomes edge 2.
        """
        p0, p1 = (edge_start.end, edge_start.start) if reverse_start else (edge_start.start, edge_start.end)
        p2, p3 = (edge_end.end, edge_end.start) if reverse_end else (edge_end.start, edge_end.end)
        return self.add_quad([p0, p1, p2, p3], tag=tag)

    def add_arc_quad(
        self,
        p0: Point,
        p1: Point,
        interpolation_12: Point,
        p2: Point,
        p3: Point,
        interpolation_30: Point,
        tag: str = "",
    ) -> Quad:
        """Quad whose edges 1 (p1 -> p2) and 3 (p3 -> p0) are circular arcs."""
        return self.add_quad([p0, p1, p2, p3], {1: interpolation_12, 3: interpolation_30}, tag)

    @staticmethod
    def merge(quad: Quad, corner: int, point: Point) -> None:
        quad.replace_corner(corner, point)

    def used_points(self) -> List[Point]:
        """Vertices referenced by at least one quad corner, ordered by uid."""
        seen: Dict[int, Point] = {}
        for quad in self.quads:
            for corner in quad.corners:
                seen[id(corner)] = corner
        return sorted(seen.values(), key=lambda p: p.uid if p.uid is not None else -1)

    def coordinates(self) -> npt.NDArray[np.float64]:
        """(n, 2) array of the used vertex coordinates."""
        points = self.used_points()
        if not points:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([[p.x, p.y] for p in points], dtype=np.float64)

    def bounds(self) -> Tuple[float, float, float, float]:
        """
        Bounding box of the used vertices.

        Returns:
            (min_x, min_y, max_x, max_y)
        """
        coords = self.coordinates()
        if coords.size == 0:
            raise ValueError("Mesh has no quads.")
        min_x, min_y = coords.min(axis=0)
        max_x, max_y = coords.max(axis=0)
        return float(min_x), float(min_y), float(max_x), float(max_y)

    def plot(self, ax: Optional[Axes] = None, show_vertices: bool = False) -> Axes:
        """Plot the quads of the mesh, coloured by tag."""
        if ax is None:
            _, ax = plt.subplots()
        ax.set_aspect('equal')

        unique_tags: List[str] = []
        for quad in self.quads:
            if quad.tag not in unique_tags:
                unique_tags.append(quad.tag)

        cmap = plt.get_cmap("gist_rainbow", max(len(unique_tags), 1))
        tag_to_color = {tag: cmap(i % cmap.N) for i, tag in enumerate(unique_tags)}
        # keep track of which tags have been seen to avoid duplicate labels
        seen_tags = set()

        for quad in self.quads:
            coords = np.vstack([edge.discretize()[:-1] for edge in quad.edges])
            coords = np.vstack((coords, coords[0]))  # Close the polygon

            color = tag_to_color[quad.tag]
            label = quad.tag if quad.tag and quad.tag not in seen_tags else "_nolegend_"
            seen_tags.add(quad.tag)

            ax.fill(coords[:, 0], coords[:, 1], color=color, lw=1, label=label, alpha=0.2)
            ax.plot(coords[:, 0], coords[:, 1], color='black', lw=0.5)

        if show_vertices:
            for point in self.used_points():
                ax.plot(point.x, point.y, 'ko', ms=2)
                ax.text(point.x, point.y, str(point.uid), fontsize=6, color='k', ha='left', va='bottom')

        ax.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        ax.set_title(f"Mesh plotted at {datetime.now().strftime('%d.%m.%Y %H:%M:%S')}")
        ax.set_xlabel("X Coordinate [m]")
        ax.set_ylabel("Y Coordinate [m]")
        if seen_tags - {""}:
            ax.legend(loc='best')
        logger.debug(f"Plotted {len(self.quads)} quads.")
        return ax
