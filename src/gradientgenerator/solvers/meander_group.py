"""
Sizing of all meanders of one layer.

The meanders of a layer share one bounding height. The longest meander sets
that height: it uses the maximal width if it needs at least one full-width
pass, otherwise it falls back to the single-turn minimum height and a
narrower width. Every other meander then only chooses its turn count and
width.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Sequence

from gradientgenerator.config import DEFAULT_SETTINGS, SolverSettings
from gradientgenerator.model.errors import GeometryInfeasible
from gradientgenerator.solvers import meander_equations as eq

logger = logging.getLogger(__name__)


@dataclass
class MeanderDimensions:
    """Dimensions of one meander [m]."""
    w: float
    radius: float
    length: float
    w_meander: float = 0.0
    h_meander: float = 0.0
    n_arcs: int = 0
    comment: str = ""  # Violated constraint, empty if valid

    @property
    def l0(self) -> float:
        """Length of the vertical entry and exit runs."""
        return 0.5 * self.h_meander - self.radius * (self.n_arcs + 1)

    @property
    def l1(self) -> float:
        """Length of a full horizontal run between two turns."""
        return self.w_meander - 2 * self.radius - self.w

    @property
    def l2(self) -> float:
        """Length of the half runs at the entry and the exit."""
        return 0.5 * (self.w_meander - self.w) - 2 * self.radius

    def check_constraints(self, tolerance: float = 0.0) -> bool:
        """
        Validate against the fabrication minimums; sets `comment` on failure.

        Args:
            tolerance: Relative slack of the straight-run minimums.
        """
        minimum = self.w * (1 - tolerance)
        if self.w <= 0:
            self.comment = "w <= 0"
        elif self.radius <= 0:
            self.comment = "radius <= 0"
        elif self.radius < self.w:
            self.comment = "radius < w"
        elif self.n_arcs < 1:
            self.comment = "nArcs < 1"
        elif self.l0 < minimum:
            self.comment = "l0 < w"
        elif self.l2 < minimum:
            self.comment = "l2 < w"
        else:
            self.comment = ""
        return not self.comment


class MeanderGroupSolver:
    """
    Sizes the meanders of one layer.

    Args:
        w: Channel width [m].
        radius: Turn radius [m].
        w_meander_max: Maximal bounding width of a meander [m].
        lengths: Desired length of every meander [m].
        layer: Index of the layer, used in error identifiers.
        settings: Numerical settings.
    """

    def __init__(
        self,
        w: float,
        radius: float,
        w_meander_max: float,
        lengths: Sequence[float],
        layer: int = 0,
        settings: SolverSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.w_meander_max = w_meander_max
        self.layer = layer
        self.settings = settings
        self.meanders = [MeanderDimensions(w=w, radius=radius, length=l) for l in lengths]

    @property
    def h_meander(self) -> float:
        return self.meanders[0].h_meander if self.meanders else 0.0

    def solve(self) -> List[MeanderDimensions]:
        """
        Size every meander.

        Raises:
            ValueError: If the group is empty.
            GeometryInfeasible: If a meander violates a fabrication minimum.
        """
        if not self.meanders:
            raise ValueError("Cannot size an empty group of meanders.")

        longest: Optional[MeanderDimensions] = None
        for meander in self.meanders:
            if longest is None or meander.length > longest.length:
                longest = meander

        longest.n_arcs = eq.compute_number_of_arcs_max(longest.length, longest.radius, longest.w, self.w_meander_max)
        if longest.n_arcs < 1:
            # too short for a full-width pass: minimal height, narrower width
            longest.n_arcs = 1
            longest.h_meander = 2 * longest.w + 4 * longest.radius
            longest.w_meander = eq.compute_width_meander(
                longest.length, longest.radius, longest.w, longest.h_meander, longest.n_arcs
            )
        else:
            longest.w_meander = self.w_meander_max
            longest.h_meander = eq.compute_height_meander(
                longest.length, longest.radius, longest.w, longest.w_meander, longest.n_arcs
            )

        for meander in self.meanders:
            if meander is longest:
                continue
            meander.h_meander = longest.h_meander
            n_arcs = eq.compute_number_of_arcs(
                meander.length, meander.radius, meander.w, self.w_meander_max, meander.h_meander
            )
            meander.n_arcs = min(max(n_arcs, 1), longest.n_arcs)
            meander.w_meander = eq.compute_width_meander(
                meander.length, meander.radius, meander.w, meander.h_meander, meander.n_arcs
            )

        for i, meander in enumerate(self.meanders):
            if not meander.check_constraints(self.settings.check_tolerance):
                logger.debug(f"Meander {i} of layer {self.layer} invalid ({meander.comment}): {meander}")
                raise GeometryInfeasible(
                    f"meander-{self.layer}-{i}",
                    f"Cannot find valid geometrical parameters for meander {i + 1} "
                    f"of {self.layer + 1}.Layer ({meander.comment})",
                    meander=(self.layer, i),
                )

        logger.debug(
            f"Layer {self.layer}: hMeander={longest.h_meander:.6e}, "
            f"nArcs={[m.n_arcs for m in self.meanders]}"
        )
        return self.meanders
