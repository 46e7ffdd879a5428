"""
Tests for the component builders and the assembled device geometry.
"""
import pytest

from gradientgenerator.layout.components import Component, OutletShape
from gradientgenerator.layout.gradient_generator import GradientGeneratorGeometry
from gradientgenerator.layout.inlet import Inlet
from gradientgenerator.layout.layer import Layer
from gradientgenerator.layout.meander import Meander
from gradientgenerator.layout.outlet import Outlet, compute_angular_outlet_length
from gradientgenerator.post.boundary import extract_boundary
from gradientgenerator.solvers.meander_group import MeanderGroupSolver

W = 300e-6
R = 300e-6
W_MAX = 6000e-6
L_CONNECTION = (W_MAX + W) / 2


def quad_y_range(quads):
    ys = [corner.y for quad in quads for corner in quad.corners]
    return min(ys), max(ys)


@pytest.fixture
def meander_group():
    return MeanderGroupSolver(W, R, W_MAX, [20.677e-3, 22.233e-3, 20.677e-3]).solve()


class TestComponents:

    def test_inlet(self, mesh):
        inlet = Inlet(W, 1e-3)
        inlet.y = -0.5e-3
        inlet.create(mesh)
        assert len(inlet.quads) == 1
        assert inlet.quads[0].tag == Component.INLET
        assert quad_y_range(inlet.quads) == pytest.approx((-1e-3, 0.0))

    def test_layer_shares_node_vertices(self, mesh):
        layer = Layer(3, W, L_CONNECTION)
        layer.create(mesh)
        assert len(layer.inlet_nodes) == 3
        assert len(layer.outlet_nodes) == 4
        assert len(layer.channels) == 6
        # channels create no vertices of their own
        assert len(mesh.points) == 4 * 7
        assert len(extract_boundary(layer.quads)) == 1

    def test_layer_node_positions(self, mesh):
        layer = Layer(2, W, L_CONNECTION)
        layer.create(mesh)
        centres = sorted(sum(c.x for c in q.corners) / 4 for q in layer.inlet_nodes + layer.outlet_nodes)
        expected = [-2 * L_CONNECTION, -L_CONNECTION, 0.0, L_CONNECTION, 2 * L_CONNECTION]
        assert centres == pytest.approx(expected, abs=1e-12)

    def test_meander_quad_count(self, mesh, meander_group):
        meander = Meander(meander_group[1])
        meander.create(mesh)
        n = meander.n_arcs
        assert len(meander.straight_channels) == n - 1
        assert len(meander.left_arcs) + len(meander.right_arcs) == 2 * n
        assert len(meander.quads) == 6 + (n - 1) + 2 * n

    def test_meander_fills_bounding_box(self, mesh, meander_group):
        meander = Meander(meander_group[0])
        meander.create(mesh)
        min_x, min_y, max_x, max_y = mesh.bounds()
        assert max_x - min_x == pytest.approx(meander.w_meander)
        assert max_y - min_y == pytest.approx(meander.h_meander)

    def test_meander_is_one_channel(self, mesh, meander_group):
        meander = Meander(meander_group[2])
        meander.create(mesh)
        assert len(extract_boundary(meander.quads)) == 1


class TestOutlets:

    def test_angular_outlet_length(self):
        assert compute_angular_outlet_length(W, 0, 3, L_CONNECTION) == pytest.approx(6.6e-3)
        assert compute_angular_outlet_length(W, 1, 3, L_CONNECTION) == pytest.approx(3 * W)

    def test_straight_outlet_is_at_least_width(self, mesh):
        outlet = Outlet(W, 0.0)
        outlet.create(mesh)
        assert outlet.l == W
        assert quad_y_range(outlet.quads) == pytest.approx((-W, 0.0))

    def test_middle_outlet_stays_straight(self):
        outlet = Outlet(W, 0.0)
        outlet.set_angular(1, 3, L_CONNECTION)
        assert outlet.shape == OutletShape.STRAIGHT

    def test_angular_outlets_end_on_one_line(self, mesh):
        n = 4
        bottoms = []
        for i in range(n):
            outlet = Outlet(W, 0.0)
            outlet.set_angular(i, n, L_CONNECTION)
            outlet.x = (i - (n - 1) / 2) * 2 * L_CONNECTION
            outlet.create(mesh)
            assert outlet.shape == OutletShape.ANGULAR
            assert len(outlet.quads) == 5
            assert len(extract_boundary(outlet.quads)) == 1
            bottoms.append(quad_y_range(outlet.quads)[0])
        assert bottoms == pytest.approx([bottoms[0]] * n)


class TestGradientGeneratorGeometry:

    def test_count_mismatch(self, meander_group):
        with pytest.raises(ValueError):
            GradientGeneratorGeometry(W, L_CONNECTION, [1e-3, 1e-3], [meander_group], [0.0, 0.0])
        with pytest.raises(ValueError):
            GradientGeneratorGeometry(W, L_CONNECTION, [1e-3], [meander_group], [0.0, 0.0, 0.0])

    @pytest.mark.parametrize("straight", [True, False])
    def test_device_is_one_connected_channel(self, meander_group, straight):
        geometry = GradientGeneratorGeometry(
            W, L_CONNECTION, [1e-3, 1e-3], [meander_group], [0.0, 0.0, 0.0], straight_outlets=straight
        )
        mesh = geometry.create()
        assert mesh is geometry.mesh
        assert len(extract_boundary(mesh.quads)) == 1

    def test_inlet_tops_on_origin_line(self, meander_group):
        geometry = GradientGeneratorGeometry(W, L_CONNECTION, [1e-3, 2e-3], [meander_group], [0.0, 0.0, 0.0])
        geometry.create()
        tops = [quad_y_range(inlet.quads)[1] for inlet in geometry.inlets]
        assert tops == pytest.approx([-1e-3, 0.0], abs=1e-12)
