"""
Closed-form relations of a serpentine (meander) channel.

A meander of bounding width wM and height hM with n 180° turns of radius r
has the centre-line length

    l = r (n + 1) (pi - 4) + hM + (wM - w) n

All other functions are rearrangements of this equation. The height
constraint hM >= 2 w + 2 r (n + 1) keeps an entry and an exit run of at
least w.
"""
from __future__ import annotations

from math import ceil, floor, pi


def compute_length(w: float, radius: float, w_meander: float, h_meander: float, n_arcs: int) -> float:
    return radius * (n_arcs + 1) * (pi - 4) + h_meander + (w_meander - w) * n_arcs


def compute_number_of_arcs(l_desired: float, radius: float, w: float, w_meander: float, h_meander: float) -> int:
    """Smallest turn count that reaches `l_desired` at the given width and height."""
    return ceil((l_desired + radius * (4 - pi) - h_meander) / (radius * (pi - 4) + w_meander - w))


def compute_number_of_arcs_max(l_desired: float, radius: float, w: float, w_meander: float) -> int:
    """Largest turn count that still satisfies the height constraint at width `w_meander`."""
    return floor((l_desired + radius * (2 - pi) - 2 * w) / (radius * (pi - 2) + w_meander - w))


def compute_width_meander(l_desired: float, radius: float, w: float, h_meander: float, n_arcs: int) -> float:
    return (l_desired + radius * (n_arcs + 1) * (4 - pi) - h_meander) / n_arcs + w


def compute_height_meander(l_desired: float, radius: float, w: float, w_meander: float, n_arcs: int) -> float:
    return l_desired + radius * (n_arcs + 1) * (4 - pi) - n_arcs * (w_meander - w)


def compute_minimal_height_meander(l_desired: float, radius: float, w: float, w_meander: float) -> float:
    """
    Smallest bounding height that realizes `l_desired` within width `w_meander`.

    When not even one full-width pass is needed, the single-turn minimum
    2 w + 4 r is returned; the length is then realized by a narrower meander.
    """
    n_arcs = compute_number_of_arcs_max(l_desired, radius, w, w_meander)
    if n_arcs < 1:
        return 2 * w + 4 * radius
    return compute_height_meander(l_desired, radius, w, w_meander, n_arcs)
