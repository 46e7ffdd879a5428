"""
Vector path emission.

Each boundary loop becomes one closed sub-path: a start point followed by
line and arc segments. `BoundaryPath.to_svg` writes SVG path data
(M, L, A, Z) in raw device coordinates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from gradientgenerator.model.geometry_primitives import EdgeArc
from gradientgenerator.post.boundary import BoundaryLoop


def _fmt(value: float) -> str:
    return f"{value:.9g}"


@dataclass(frozen=True)
class LineSegment:
    end: Tuple[float, float]

    def to_svg(self) -> str:
        return f"L {_fmt(self.end[0])} {_fmt(self.end[1])}"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "line", "end": list(self.end)}


@dataclass(frozen=True)
class ArcSegment:
    end: Tuple[float, float]
    radius: float
    large_arc: int
    sweep: int

    def to_svg(self) -> str:
        r = _fmt(self.radius)
        return f"A {r} {r} 0 {self.large_arc} {self.sweep} {_fmt(self.end[0])} {_fmt(self.end[1])}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "arc",
            "end": list(self.end),
            "radius": self.radius,
            "large_arc": self.large_arc,
            "sweep": self.sweep,
        }


Segment = Union[LineSegment, ArcSegment]


@dataclass
class BoundaryPath:
    """One closed sub-path."""
    start: Tuple[float, float]
    segments: List[Segment] = field(default_factory=list)

    @classmethod
    def from_loop(cls, loop: BoundaryLoop) -> BoundaryPath:
        start = loop.start
        path = cls(start=(start.x, start.y))
        for edge, reverse in zip(loop.edges, loop.reversed):
            end = edge.start if reverse else edge.end
            if isinstance(edge, EdgeArc):
                large_arc, sweep = edge.arc_flags(reverse=reverse)
                path.segments.append(ArcSegment((end.x, end.y), edge.radius, large_arc, sweep))
            else:
                path.segments.append(LineSegment((end.x, end.y)))
        return path

    def to_svg(self) -> str:
        lines = [f"M {_fmt(self.start[0])} {_fmt(self.start[1])}"]
        lines.extend(segment.to_svg() for segment in self.segments)
        lines.append("Z")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"start": list(self.start), "segments": [segment.to_dict() for segment in self.segments]}


def boundary_paths(loops: List[BoundaryLoop]) -> List[BoundaryPath]:
    return [BoundaryPath.from_loop(loop) for loop in loops]


def to_svg_path_data(paths: List[BoundaryPath]) -> str:
    """SVG `d` attribute content of all sub-paths."""
    return "\n".join(path.to_svg() for path in paths)
