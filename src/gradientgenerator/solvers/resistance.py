"""
Hydraulic resistance of a rectangular micro-channel.

R = l * A(w, h) * mu / (w * h^3), where A is the truncated-series
correction of the rectangular duct (A -> 12 for h << w).
"""
from math import pi, tanh


def compute_factor_a(w: float, h: float) -> float:
    """Geometry factor A(w, h) of the rectangular cross-section."""
    return 12 / (1 - 192 * h * tanh(pi * w / (2 * h)) / (pi ** 5 * w))


def compute_resistance(w: float, h: float, l: float, mu: float) -> float:
    """
    Resistance of a channel.

    Args:
        w: Channel width [m].
        h: Channel height [m].
        l: Channel length [m].
        mu: Dynamic viscosity [Pa·s].

    Returns:
        Hydraulic resistance [Pa·s/m³].
    """
    return l * compute_factor_a(w, h) * mu / (w * h ** 3)
