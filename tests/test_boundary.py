"""
Tests for boundary extraction and the emitted vector paths.
"""
import random

import pytest

from gradientgenerator.model.errors import GeometryInfeasible
from gradientgenerator.model.geometry_primitives import Edge, EdgeArc, Point
from gradientgenerator.post.boundary import build_loops, count_edges, extract_boundary, extract_boundary_edges
from gradientgenerator.post.path import ArcSegment, BoundaryPath, LineSegment, boundary_paths, to_svg_path_data


def grid(mesh, n, skip=()):
    """n x n unit cells sharing their vertices; cells in `skip` are left out."""
    points = [[mesh.add_point(float(i), float(j)) for j in range(n + 1)] for i in range(n + 1)]
    for i in range(n):
        for j in range(n):
            if (i, j) in skip:
                continue
            mesh.add_quad([points[i][j], points[i + 1][j], points[i + 1][j + 1], points[i][j + 1]])
    return mesh.quads


class TestBoundaryEdges:

    def test_shared_edge_is_interior(self, mesh):
        a = mesh.add_square(0.0, 0.0, 1.0)
        b = mesh.add_square(0.0, 1.0, 1.0)
        mesh.merge(b, 0, a.corners[3])
        mesh.merge(b, 1, a.corners[2])

        counts = count_edges(mesh.quads)
        assert counts[a.e2] == 2
        assert len(extract_boundary_edges(mesh.quads)) == 6

    def test_coincident_but_unmerged_edges_stay_boundary(self, mesh):
        mesh.add_square(0.0, 0.0, 1.0)
        mesh.add_square(0.0, 1.0, 1.0)
        assert len(extract_boundary_edges(mesh.quads)) == 8


class TestLoops:

    def test_single_loop(self, mesh):
        loops = extract_boundary(grid(mesh, 2))
        assert len(loops) == 1
        assert len(loops[0].edges) == 8

    def test_hole_gives_second_loop(self, mesh):
        loops = extract_boundary(grid(mesh, 3, skip={(1, 1)}))
        assert sorted(len(loop.edges) for loop in loops) == [4, 12]

    def test_loops_are_closed_walks(self, mesh):
        for loop in extract_boundary(grid(mesh, 3, skip={(1, 1)})):
            points = loop.points()
            for edge, rev, point in zip(loop.edges, loop.reversed, points):
                assert (edge.end if rev else edge.start) is point
            last = loop.edges[-1].start if loop.reversed[-1] else loop.edges[-1].end
            assert last is loop.start

    def test_independent_of_quad_order(self, mesh):
        quads = grid(mesh, 3, skip={(1, 1)})
        expected = {loop.edge_set() for loop in extract_boundary(quads)}
        shuffled = list(quads)
        random.Random(0).shuffle(shuffled)
        assert {loop.edge_set() for loop in extract_boundary(shuffled)} == expected

    def test_open_chain_fails(self):
        a, b, c = Point(0.0, 0.0, 0), Point(1.0, 0.0, 1), Point(1.0, 1.0, 2)
        with pytest.raises(GeometryInfeasible) as exc_info:
            build_loops([Edge(a, b), Edge(b, c)])
        assert exc_info.value.identifier == "boundary"
        assert exc_info.value.KIND == "geometry"


class TestPaths:

    def test_segment_svg(self):
        assert LineSegment((1.5e-3, -2.0)).to_svg() == "L 0.0015 -2"
        assert ArcSegment((0.0, 1.0), 1.0, 0, 1).to_svg() == "A 1 1 0 0 1 0 1"

    def test_square_path(self, mesh):
        path = boundary_paths(extract_boundary(grid(mesh, 1)))[0]
        assert path.start == (0.0, 1.0)
        assert all(isinstance(segment, LineSegment) for segment in path.segments)
        assert path.segments[-1].end == path.start
        lines = path.to_svg().split("\n")
        assert lines[0] == "M 0 1"
        assert lines[-1] == "Z"
        assert len(lines) == 6

    def test_arc_edges_become_arc_segments(self, mesh):
        p = [mesh.add_point(x, y) for x, y in [(0, 0), (1, 0), (1, 2), (0, 2)]]
        mesh.add_arc_quad(p[0], p[1], mesh.add_point(2.0, 1.0), p[2], p[3], mesh.add_point(-1.0, 1.0))
        path = BoundaryPath.from_loop(extract_boundary(mesh.quads)[0])
        arcs = [segment for segment in path.segments if isinstance(segment, ArcSegment)]
        assert len(arcs) == 2
        for arc in arcs:
            assert arc.radius == pytest.approx(1.0)

    def test_arc_direction_matches_walk(self):
        a, b = Point(1.0, 0.0, 0), Point(0.0, 1.0, 1)
        arc = EdgeArc(a, b, Point(2 ** -0.5, 2 ** -0.5, 2))
        # the line is walked first, so the arc is walked from b back to a
        line, walked_arc = BoundaryPath.from_loop(build_loops([Edge(a, b), arc])[0]).segments
        assert line.end == (0.0, 1.0)
        assert walked_arc.end == (1.0, 0.0)
        assert (walked_arc.large_arc, walked_arc.sweep) == arc.arc_flags(reverse=True) == (0, 0)

    def test_svg_path_data_joins_sub_paths(self, mesh):
        paths = boundary_paths(extract_boundary(grid(mesh, 3, skip={(1, 1)})))
        data = to_svg_path_data(paths)
        assert data.count("M ") == 2
        assert data.count("Z") == 2

    def test_to_dict(self):
        path = BoundaryPath(start=(0.0, 0.0), segments=[LineSegment((1.0, 0.0)), ArcSegment((0.0, 0.0), 0.5, 0, 1)])
        data = path.to_dict()
        assert data["start"] == [0.0, 0.0]
        assert data["segments"][0] == {"type": "line", "end": [1.0, 0.0]}
        assert data["segments"][1]["type"] == "arc"
        assert data["segments"][1]["sweep"] == 1
