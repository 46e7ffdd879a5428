"""
Geometric Primitives of the channel mesh.

Points are compared by identity: two coincident points stay distinct until a
quad corner is explicitly re-pointed to the other one (see Mesh.merge).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(eq=False)
class Point:
    """A vertex in the XY plane."""
    x: float
    y: float
    uid: Optional[int] = None  # Assigned by the Mesh arena

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(uid={self.uid}, x={self.x:.6e}, y={self.y:.6e})"

    def coincides(self, other: Point) -> bool:
        """Exact coordinate equality."""
        return self.x == other.x and self.y == other.y

    def is_close(self, other: Point, radius: float) -> bool:
        return self.distance_to(other) <= abs(radius)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])


def _uid(point: Point) -> int:
    return point.uid if point.uid is not None else -1


class Edge:
    """A straight edge between two points. Equality ignores the direction."""

    def __init__(self, start: Point, end: Point) -> None:
        self.start = start
        self.end = end

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({_uid(self.start)} -> {_uid(self.end)})"

    @property
    def key(self) -> tuple:
        """Hashable, direction-free identity of the edge."""
        return frozenset((id(self.start), id(self.end))), None

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        a, b = sorted((_uid(self.start), _uid(self.end)))
        return a, b, -1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def other_point(self, point: Point) -> Point:
        """The endpoint opposite to `point`."""
        if self.start is point:
            return self.end
        if self.end is point:
            return self.start
        raise ValueError(f"{point!r} is not an endpoint of {self!r}")

    def discretize(self) -> npt.NDArray[np.float64]:
        return np.array([self.start.to_array(), self.end.to_array()])


class EdgeArc(Edge):
    """
    A circular arc through start, interpolation point and end.

    The interpolation point is part of the identity: two arcs with the same
    endpoints but different interpolation points are different edges.
    """

    def __init__(self, start: Point, end: Point, interpolation: Point) -> None:
        super().__init__(start, end)
        self.interpolation = interpolation

    @property
    def key(self) -> tuple:
        return frozenset((id(self.start), id(self.end))), id(self.interpolation)

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        a, b = sorted((_uid(self.start), _uid(self.end)))
        return a, b, _uid(self.interpolation)

    def center_and_radius(self) -> Tuple[float, float, float]:
        """
        Circle through the three points of the arc.

        Returns:
            (xc, yc, r)
        """
        x1, y1 = self.start.x, self.start.y
        x2, y2 = self.end.x, self.end.y
        x3, y3 = self.interpolation.x, self.interpolation.y

        a1 = 2 * (x2 - x1)
        a2 = 2 * (x3 - x1)
        b1 = 2 * (y2 - y1)
        b2 = 2 * (y3 - y1)
        c1 = x2 * x2 - x1 * x1 + y2 * y2 - y1 * y1
        c2 = x3 * x3 - x1 * x1 + y3 * y3 - y1 * y1

        denominator = a1 * b2 - b1 * a2
        if denominator == 0.0:
            raise ValueError(f"Points of {self!r} are collinear, no circle passes through them.")

        xc = (c1 * b2 - b1 * c2) / denominator
        yc = (c1 * a2 - a1 * c2) / (b1 * a2 - a1 * b2)
        return xc, yc, math.hypot(x1 - xc, y1 - yc)

    @property
    def radius(self) -> float:
        return self.center_and_radius()[2]

    def arc_flags(self, reverse: bool = False) -> Tuple[int, int]:
        """
        Large-arc and sweep flag of the arc for the given traversal direction.

        Args:
            reverse: True when the arc is traversed from `end` to `start`.

        Returns:
            (large_arc_flag, sweep_flag)
        """
        start, end = (self.end, self.start) if reverse else (self.start, self.end)
        xc, yc, _ = self.center_and_radius()
        dx, dy = end.x - start.x, end.y - start.y

        # side of the chord on which the interpolation point lies
        side = np.sign(dx * (self.interpolation.y - start.y) - dy * (self.interpolation.x - start.x))
        sweep = 0 if side > 0 else 1

        # side of the chord on which the center lies
        side = np.sign(dx * (yc - start.y) - dy * (xc - start.x))
        large_arc = 0 if side > 0 else 1
        large_arc = 1 if large_arc == sweep else 0

        return large_arc, sweep

    def _angles(self) -> Tuple[float, float]:
        """Start angle and signed angular span of the arc."""
        xc, yc, _ = self.center_and_radius()
        ang_s = math.atan2(self.start.y - yc, self.start.x - xc)
        ang_e = math.atan2(self.end.y - yc, self.end.x - xc)
        ang_i = math.atan2(self.interpolation.y - yc, self.interpolation.x - xc)

        ccw_end = (ang_e - ang_s) % (2 * math.pi)
        ccw_interp = (ang_i - ang_s) % (2 * math.pi)
        if ccw_interp <= ccw_end:
            return ang_s, ccw_end
        return ang_s, ccw_end - 2 * math.pi

    @property
    def length(self) -> float:
        _, span = self._angles()
        return abs(span) * self.radius

    def discretize(self, resolution: int = 17) -> npt.NDArray[np.float64]:
        """Sample the arc from `start` to `end` through the interpolation point."""
        xc, yc, r = self.center_and_radius()
        ang_s, span = self._angles()
        angles = np.linspace(ang_s, ang_s + span, resolution)
        return np.column_stack((xc + r * np.cos(angles), yc + r * np.sin(angles)))
