"""
Numerical Configuration
=======================
Central registry for the numerical constants used by the solvers.

Why is this file needed?
------------------------
1. Single source of truth: the flow network solver and the meander sizing
   agree on the same resolution and tolerances.
2. Tuning: a caller can pass its own SolverSettings instead of patching
   constants inside the solver modules.

All lengths are in metres.

Exports:
    SolverSettings: Frozen dataclass with the tunable values.
    DEFAULT_SETTINGS: Module-level default instance.
"""
from __future__ import annotations

from dataclasses import dataclass


# Number of inlets of the gradient generator (fixed by the topology)
NUMBER_OF_INLETS: int = 2

# Smallest number of outlets that still forms at least one mixing layer
MIN_NUMBER_OF_OUTLETS: int = 3


@dataclass(frozen=True)
class SolverSettings:
    """Tunable parameters of the resistance search and the mesh checks."""

    length_resolution: float = 1e-6
    """Step (as a channel length) above a root of the strict box condition."""

    upper_bound_factor: float = 100.0
    """The search bracket is [lower, upper_bound_factor * lower]."""

    check_tolerance: float = 1e-9
    """Relative slack of the fabrication minimums (l0 >= w, l2 >= w)."""


DEFAULT_SETTINGS = SolverSettings()
