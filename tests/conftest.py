"""
Pytest configuration and shared fixtures for the gradient generator tests.
"""
import matplotlib
matplotlib.use("Agg")

import pytest

from gradientgenerator.model.mesh import Mesh
from gradientgenerator.model.parameters import DesignParameters, InletParameters, OutletParameters


def make_parameters(outlets=None, **overrides) -> DesignParameters:
    """Three-outlet device (300 µm channels) with optional field overrides."""
    if outlets is None:
        outlets = [
            OutletParameters(concentration=1.0),
            OutletParameters(concentration=0.5, flow_rate=6.67e-11),
            OutletParameters(concentration=0.0),
        ]
    values = dict(
        width=300e-6,
        height=100e-6,
        radius=300e-6,
        meander_width_max=6000e-6,
        viscosity=1e-3,
        min_mixing_time=10.0,
        inlets=[
            InletParameters(concentration=1.0, flow_rate=1e-10, length=1e-3),
            InletParameters(concentration=0.0, flow_rate=1e-10, length=1e-3),
        ],
        outlets=outlets,
    )
    values.update(overrides)
    return DesignParameters(**values)


@pytest.fixture
def baseline_parameters():
    """Three outlets at 100 %, 50 % and 0 %."""
    return make_parameters()


@pytest.fixture
def four_outlet_parameters():
    """Two layers, linear gradient 100 %, 66.7 %, 33.3 %, 0 %."""
    return make_parameters(
        outlets=[
            OutletParameters(concentration=1.0),
            OutletParameters(concentration=2 / 3, flow_rate=5e-11),
            OutletParameters(concentration=1 / 3, flow_rate=5e-11),
            OutletParameters(concentration=0.0),
        ]
    )


@pytest.fixture
def infeasible_parameters():
    """Barely admissible meander width with a mixing time no meander can reach."""
    return make_parameters(
        meander_width_max=5 * 300e-6 + 8 * 300e-6 + 1e-6,
        min_mixing_time=10000.0,
        outlets=[
            OutletParameters(concentration=1.0),
            OutletParameters(concentration=0.5, flow_rate=1e-11),
            OutletParameters(concentration=0.0),
        ],
    )


@pytest.fixture
def baseline_dict():
    """JSON form of the baseline parameters."""
    return make_parameters().to_dict()


@pytest.fixture
def mesh():
    return Mesh()
