"""
Tests for the channel resistance and the closed-form meander relations.
"""
from math import pi

import pytest

from gradientgenerator.solvers import meander_equations as eq
from gradientgenerator.solvers.resistance import compute_factor_a, compute_resistance

W = 300e-6
R = 300e-6


class TestResistance:

    def test_factor_a_tends_to_parallel_plates(self):
        assert compute_factor_a(1.0, 1e-6) == pytest.approx(12.0, rel=1e-3)

    def test_factor_a_of_design_cross_section(self):
        assert compute_factor_a(300e-6, 100e-6) == pytest.approx(15.17, rel=1e-3)

    def test_resistance_is_linear_in_length_and_viscosity(self):
        r1 = compute_resistance(300e-6, 100e-6, 1e-3, 1e-3)
        assert compute_resistance(300e-6, 100e-6, 2e-3, 1e-3) == pytest.approx(2 * r1)
        assert compute_resistance(300e-6, 100e-6, 1e-3, 3e-3) == pytest.approx(3 * r1)

    def test_resistance_value(self):
        expected = 1e-3 * compute_factor_a(300e-6, 100e-6) * 1e-3 / (300e-6 * 100e-6 ** 3)
        assert compute_resistance(300e-6, 100e-6, 1e-3, 1e-3) == pytest.approx(expected)


class TestMeanderEquations:
    """All helpers are rearrangements of one length equation."""

    @pytest.mark.parametrize("n_arcs", [1, 2, 5])
    def test_height_and_width_invert_length(self, n_arcs):
        w_meander, h_meander = 6e-3, 4e-3
        length = eq.compute_length(W, R, w_meander, h_meander, n_arcs)
        assert eq.compute_height_meander(length, R, W, w_meander, n_arcs) == pytest.approx(h_meander)
        assert eq.compute_width_meander(length, R, W, h_meander, n_arcs) == pytest.approx(w_meander)

    def test_number_of_arcs_reaches_length(self):
        w_meander, h_meander = 6e-3, 4e-3
        length = eq.compute_length(W, R, w_meander, h_meander, 3)
        assert eq.compute_number_of_arcs(length * (1 - 1e-9), R, W, w_meander, h_meander) == 3

    def test_number_of_arcs_max_keeps_height_constraint(self):
        n = eq.compute_number_of_arcs_max(30e-3, R, W, 6e-3)
        h = eq.compute_height_meander(30e-3, R, W, 6e-3, n)
        assert h >= 2 * W + 2 * R * (n + 1)
        # one more turn would break it
        h_next = eq.compute_height_meander(30e-3, R, W, 6e-3, n + 1)
        assert h_next < 2 * W + 2 * R * (n + 2)

    def test_minimal_height_falls_back_for_short_meanders(self):
        assert eq.compute_minimal_height_meander(2e-3, R, W, 6e-3) == pytest.approx(2 * W + 4 * R)

    def test_minimal_height_of_long_meander(self):
        length = 22.233e-3
        expected = length + R * 4 * (4 - pi) - 3 * (6e-3 - W)
        assert eq.compute_minimal_height_meander(length, R, W, 6e-3) == pytest.approx(expected)
