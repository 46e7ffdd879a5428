"""
Flow Network Solver
===================
Lumped-resistance model of the gradient generator.

Why is this file needed?
------------------------
The device is a hydraulic circuit: 2 inlets feed nLayers = nOutlets - 2
layers. Layer k splits k + 2 upstream branches through 4 + 2k connecting
channels into k + 3 meanders. The solver

1. propagates the target concentrations backwards from the outlets,
2. solves one dense system for every flow rate (node continuity plus
   concentration balance at every merge node),
3. finds, per layer, the smallest meander resistances that satisfy the
   residence-time and the shared-bounding-box constraints. The layer
   resistances are affine in the resistance of the middle meander, so the
   search walks the segments between the points where the longest meander
   changes its turn count and takes the first feasible one.

The meander lengths are the solved resistances divided by the resistance
of a unit length of channel.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from math import ceil, floor, pi
from typing import List, TYPE_CHECKING

import numpy as np
import scipy as sp

from gradientgenerator.config import DEFAULT_SETTINGS, NUMBER_OF_INLETS, SolverSettings
from gradientgenerator.model.errors import NetworkInfeasible
from gradientgenerator.solvers.meander_equations import compute_minimal_height_meander
from gradientgenerator.solvers.resistance import compute_resistance

if TYPE_CHECKING:
    import numpy.typing as npt

    from gradientgenerator.model.parameters import DesignParameters

logger = logging.getLogger(__name__)


@dataclass
class Channel:
    """State of one channel of the network."""
    length: float = 0.0          # m
    resistance: float = 0.0      # Pa·s/m³
    flow_rate: float = 0.0       # m³/s
    concentration: float = 0.0   # fraction [-]


class FlowNetworkSolver:
    """
    Solver for flow rates and meander resistances.

    Args:
        parameters: Validated design parameters.
        settings: Numerical settings of the resistance search.
    """

    def __init__(
        self,
        parameters: DesignParameters,
        settings: SolverSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.settings = settings

        self.w = parameters.width
        self.h = parameters.height
        self.radius = parameters.radius
        self.mu = parameters.viscosity
        self.t_min = parameters.min_mixing_time
        self.l_connection = parameters.connection_length
        self.w_meander_max = 2 * self.l_connection - self.w

        self.n_inlets = NUMBER_OF_INLETS
        self.n_outlets = parameters.number_of_outlets
        self.n_layers = self.n_outlets - 2
        self.n_connections = self.n_layers ** 2 + 3 * self.n_layers
        self.n_meanders = floor(0.5 * (self.n_layers + 5) * self.n_layers)

        # resistance of a channel of unit length
        self.r_unit = compute_resistance(self.w, self.h, 1.0, self.mu)

        self.inlets: List[Channel] = [
            Channel(length=inlet.length, flow_rate=inlet.flow_rate, concentration=inlet.concentration)
            for inlet in parameters.inlets
        ]
        self.connections: List[List[Channel]] = [
            [Channel(length=self.l_connection) for _ in range(4 + 2 * k)]
            for k in range(self.n_layers)
        ]
        self.meanders: List[List[Channel]] = [
            [Channel() for _ in range(3 + k)]
            for k in range(self.n_layers)
        ]
        concentrations = parameters.outlet_concentrations()
        self.outlets: List[Channel] = [
            Channel(
                length=outlet.extra_resistance / self.r_unit,
                flow_rate=outlet.flow_rate or 0.0,
                concentration=concentrations[i],
            )
            for i, outlet in enumerate(parameters.outlets)
        ]

    @property
    def number_of_unknowns(self) -> int:
        return self.n_inlets + self.n_connections + self.n_meanders + self.n_outlets

    # --- indexing of the flow-rate unknowns ---

    @staticmethod
    def index_inlet(i: int) -> int:
        return i

    def index_connection(self, k: int, i: int) -> int:
        return self.n_inlets + k * k + 3 * k + i

    def index_meander(self, k: int, i: int) -> int:
        return self.n_inlets + self.n_connections + floor(0.5 * (k + 5) * k) + i

    def index_outlet(self, i: int) -> int:
        return self.n_inlets + self.n_connections + self.n_meanders + i

    @staticmethod
    def index_free_meander(k: int) -> int:
        """Middle meander of layer k, its resistance is the search variable."""
        n = 3 + k
        i = n // 2
        if n % 2 == 0:
            i -= 1
        return i

    # --- solution steps ---

    def solve(self) -> None:
        """
        Run all steps.

        Raises:
            NetworkInfeasible: If the flow system is singular or a layer has
                no feasible meander resistances.
        """
        logger.info(f"Solving flow network: {self.n_layers} layers, {self.number_of_unknowns} flow unknowns")
        self.initialize_resistances()
        self.initialize_concentrations()
        self.solve_flow_rates()
        self.solve_resistances()

    def initialize_resistances(self) -> None:
        for channel in self.inlets + self.outlets:
            channel.resistance = compute_resistance(self.w, self.h, channel.length, self.mu)
        for layer in self.connections:
            for channel in layer:
                channel.resistance = compute_resistance(self.w, self.h, channel.length, self.mu)

    def initialize_concentrations(self) -> None:
        """Propagate the outlet concentrations backwards through the layers."""
        for k in range(self.n_layers - 1, -1, -1):
            layer = self.meanders[k]
            for i, meander in enumerate(layer):
                if k == self.n_layers - 1:
                    meander.concentration = self.outlets[i].concentration
                elif i == 0:
                    meander.concentration = self.meanders[k + 1][i].concentration
                elif i == len(layer) - 1:
                    meander.concentration = self.meanders[k + 1][i + 1].concentration
                else:
                    meander.concentration = 0.5 * (
                        self.meanders[k + 1][i].concentration + self.meanders[k + 1][i + 1].concentration
                    )

        for k, layer in enumerate(self.connections):
            # connections 2j and 2j+1 leave the same upstream branch j
            for j in range(len(layer) // 2):
                source = self.inlets[j] if k == 0 else self.meanders[k - 1][j]
                layer[2 * j].concentration = source.concentration
                layer[2 * j + 1].concentration = source.concentration

    def assemble_flow_system(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Matrix and right-hand side of the flow-rate system.

        Rows: node continuity of every layer, meander-to-outlet continuity,
        concentration balance of every interior meander, known flow rates.
        """
        n = self.number_of_unknowns
        a = np.zeros((n, n), dtype=np.float64)
        b = np.zeros(n, dtype=np.float64)

        row = 0
        for k in range(self.n_layers):
            ic = 0
            im = 0

            # first node
            a[row, self.index_connection(k, ic)] = 1
            a[row, self.index_meander(k, im)] = -1
            im += 1
            row += 1

            for node in range(3 + 2 * k):
                if node % 2 == 0:
                    # upstream branch splits into two connections
                    if k == 0:
                        a[row, self.index_inlet(node // 2)] = 1
                    else:
                        a[row, self.index_meander(k - 1, im - 1)] = 1
                    a[row, self.index_connection(k, ic)] = -1
                    ic += 1
                    a[row, self.index_connection(k, ic)] = -1
                else:
                    # two connections merge into a meander
                    a[row, self.index_connection(k, ic)] = 1
                    ic += 1
                    a[row, self.index_connection(k, ic)] = 1
                    a[row, self.index_meander(k, im)] = -1
                    im += 1
                row += 1

            # last node
            a[row, self.index_connection(k, ic)] = 1
            a[row, self.index_meander(k, im)] = -1
            row += 1

        for i in range(self.n_outlets):
            a[row, self.index_meander(self.n_layers - 1, i)] = 1
            a[row, self.index_outlet(i)] = -1
            row += 1

        for k in range(self.n_layers):
            for i in range(1, 2 + k):
                a[row, self.index_connection(k, 2 * i - 1)] = self.connections[k][2 * i - 1].concentration
                a[row, self.index_connection(k, 2 * i)] = self.connections[k][2 * i].concentration
                a[row, self.index_meander(k, i)] = -self.meanders[k][i].concentration
                row += 1

        for i in range(self.n_inlets):
            a[row, self.index_inlet(i)] = 1
            b[row] = self.inlets[i].flow_rate
            row += 1
        for i in range(1, self.n_outlets - 1):
            a[row, self.index_outlet(i)] = 1
            b[row] = self.outlets[i].flow_rate
            row += 1

        if row != n:
            raise RuntimeError(f"Flow system has {row} equations for {n} unknowns.")
        return a, b

    def solve_flow_rates(self) -> None:
        a, b = self.assemble_flow_system()
        logger.debug(f"Flow system assembled: {a.shape[0]}x{a.shape[1]}")
        try:
            q = sp.linalg.lu_solve(sp.linalg.lu_factor(a, check_finite=True), b)
        except (ValueError, np.linalg.LinAlgError) as e:
            raise NetworkInfeasible("flow-rates", f"Cannot solve for the flow rates: {e}") from e
        if not np.all(np.isfinite(q)):
            raise NetworkInfeasible("flow-rates", "Cannot solve for the flow rates: the system is singular")

        for i, inlet in enumerate(self.inlets):
            inlet.flow_rate = float(q[self.index_inlet(i)])
        for k in range(self.n_layers):
            for i, connection in enumerate(self.connections[k]):
                connection.flow_rate = float(q[self.index_connection(k, i)])
            for i, meander in enumerate(self.meanders[k]):
                meander.flow_rate = float(q[self.index_meander(k, i)])
        for i, outlet in enumerate(self.outlets):
            outlet.flow_rate = float(q[self.index_outlet(i)])

        if np.any(q <= 0):
            raise NetworkInfeasible(
                "flow-rates",
                "Cannot realize the requested outlet concentrations with positive flow rates in all channels"
            )

    def assemble_layer_system(self, k: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Loop equations of layer k for the meander resistances.

        The last row pins the free meander; its right-hand side entry is set
        by the resistance search.
        """
        n = 3 + k
        a = np.zeros((n, n), dtype=np.float64)
        b = np.zeros(n, dtype=np.float64)
        meanders = self.meanders[k]
        connections = self.connections[k]

        for i in range(n - 1):
            a[i, i] = meanders[i].flow_rate
            a[i, i + 1] = -meanders[i + 1].flow_rate

            top_left = connections[2 * i]
            top_right = connections[2 * i + 1]
            bi = top_left.flow_rate * top_left.resistance - top_right.flow_rate * top_right.resistance
            if k != self.n_layers - 1:
                bottom_left = self.connections[k + 1][2 * i + 1]
                bottom_right = self.connections[k + 1][2 * i + 2]
            else:
                bottom_left = self.outlets[i]
                bottom_right = self.outlets[i + 1]
            bi += bottom_left.flow_rate * bottom_left.resistance - bottom_right.flow_rate * bottom_right.resistance
            b[i] = -bi

        a[n - 1, self.index_free_meander(k)] = 1
        return a, b

    def resistance_bounds(self, k: int) -> tuple[float, float]:
        """Search bracket for the free meander of layer k."""
        q_free = self.meanders[k][self.index_free_meander(k)].flow_rate
        r_min_t = self.t_min * q_free * self.r_unit / (self.w * self.h)
        r_min_meander = (4 * self.w + 2 * pi * self.radius) * self.r_unit
        left = max(r_min_t, r_min_meander)
        return left, self.settings.upper_bound_factor * left

    def affine_layer_solution(self, k: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Resistances of layer k as an affine function of the free resistance.

        Returns:
            (x0, d) such that x0 + s * d solves the loop equations with the
            free meander pinned to s.

        Raises:
            NetworkInfeasible: If the loop equations are singular.
        """
        a, b = self.assemble_layer_system(k)
        unit = np.zeros_like(b)
        unit[-1] = 1.0
        try:
            lu = sp.linalg.lu_factor(a)
            x0 = sp.linalg.lu_solve(lu, b)
            d = sp.linalg.lu_solve(lu, unit)
        except (ValueError, np.linalg.LinAlgError) as e:
            raise NetworkInfeasible(
                f"rMeanders-{k}", f"Cannot find valid meander resistance for {k + 1}.Layer", layer=k
            ) from e
        if not (np.all(np.isfinite(x0)) and np.all(np.isfinite(d))):
            raise NetworkInfeasible(
                f"rMeanders-{k}", f"Cannot find valid meander resistance for {k + 1}.Layer", layer=k
            )
        return x0, d

    def mixing_time_window(
        self,
        x0: npt.NDArray[np.float64],
        d: npt.NDArray[np.float64],
        k: int,
    ) -> tuple[float, float]:
        """Range of the free resistance in which every interior meander reaches t_min."""
        low, high = -np.inf, np.inf
        for i in range(1, len(x0) - 1):
            target = self.t_min * self.meanders[k][i].flow_rate * self.r_unit / (self.w * self.h)
            if d[i] > 0:
                low = max(low, (target - x0[i]) / d[i])
            elif d[i] < 0:
                high = min(high, (target - x0[i]) / d[i])
            elif x0[i] < target:
                return np.inf, -np.inf
        return low, high

    def breakpoints(
        self,
        x0: npt.NDArray[np.float64],
        d: npt.NDArray[np.float64],
        left: float,
        right: float,
    ) -> npt.NDArray[np.float64]:
        """
        Sorted free resistances in [left, right] that split the bracket into
        segments with a fixed longest meander, a fixed shortest meander and a
        fixed turn count of the longest meander.

        The turn count of the longest meander jumps whenever its length
        crosses offset + n * step (see compute_number_of_arcs_max), which makes
        the box condition non-monotone in the free resistance.
        """
        points = [left, right]
        for i in range(len(x0)):
            for j in range(i + 1, len(x0)):
                if d[i] != d[j]:
                    points.append((x0[j] - x0[i]) / (d[i] - d[j]))
        crossings = np.array(points)
        crossings = np.unique(crossings[(crossings >= left) & (crossings <= right)])

        offset = 2 * self.w + self.radius * (pi - 2)
        step = self.radius * (pi - 2) + self.w_meander_max - self.w
        parts = [crossings]
        for s0, s1 in zip(crossings[:-1], crossings[1:]):
            i = int(np.argmax(x0 + 0.5 * (s0 + s1) * d))
            if d[i] == 0:
                continue
            l0, l1 = sorted(((x0[i] + s0 * d[i]) / self.r_unit, (x0[i] + s1 * d[i]) / self.r_unit))
            n_arcs = np.arange(max(floor((l0 - offset) / step) + 1, 1), ceil((l1 - offset) / step))
            parts.append(((offset + n_arcs * step) * self.r_unit - x0[i]) / d[i])

        points = np.concatenate(parts)
        return np.unique(points[(points >= left) & (points <= right)])

    def box_margin(
        self,
        x0: npt.NDArray[np.float64],
        d: npt.NDArray[np.float64],
        s0: npt.NDArray[np.float64],
        s1: npt.NDArray[np.float64],
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Margin r_min - r_min_realizable of the box condition at both ends of
        every segment [s0, s1].

        The longest meander, the shortest meander and the turn count are taken
        at the segment midpoint, so the margin is linear on each segment.
        """
        middle = 0.5 * (s0 + s1)
        x_middle = x0[:, None] + middle[None, :] * d[:, None]
        i_max = np.argmax(x_middle, axis=0)
        i_min = np.argmin(x_middle, axis=0)

        w, radius, w_meander = self.w, self.radius, self.w_meander_max
        l_middle = (x0[i_max] + middle * d[i_max]) / self.r_unit
        n_arcs = np.floor((l_middle + radius * (2 - pi) - 2 * w) / (radius * (pi - 2) + w_meander - w))

        margins = []
        for s in (s0, s1):
            length = (x0[i_max] + s * d[i_max]) / self.r_unit
            h_min = np.where(
                n_arcs < 1,
                2 * w + 4 * radius,
                length + radius * (n_arcs + 1) * (4 - pi) - n_arcs * (w_meander - w),
            )
            r_min = x0[i_min] + s * d[i_min]
            margins.append(r_min - self.r_unit * (h_min + 2 * radius * (pi - 2) + 2 * w))
        return margins[0], margins[1]

    def segment_candidates(
        self,
        x0: npt.NDArray[np.float64],
        d: npt.NDArray[np.float64],
        points: npt.NDArray[np.float64],
        window: tuple[float, float],
    ) -> npt.NDArray[np.float64]:
        """Smallest feasible free resistance of every segment, sorted ascending."""
        s0, s1 = points[:-1], points[1:]
        lo = np.maximum(s0, window[0])
        hi = np.minimum(s1, window[1])
        g0, g1 = self.box_margin(x0, d, s0, s1)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            slope = (g1 - g0) / (s1 - s0)
            g_lo = g0 + slope * (lo - s0)
            g_hi = g0 + slope * (hi - s0)
            root = lo - g_lo / slope
            candidates = np.where(g_lo > 0, lo, np.where(g_hi > 0, root, np.nan))
        candidates = candidates[(lo <= hi) & np.isfinite(candidates)]
        return np.sort(candidates)

    def solve_layer_resistances(self, k: int) -> npt.NDArray[np.float64]:
        """
        Smallest feasible meander resistances of layer k.

        The resistances are affine in the free resistance, and between two
        breakpoints both feasibility conditions are linear in it. The smallest
        feasible value of every segment follows in closed form; the candidates
        are verified with check_conditions in increasing order.

        Raises:
            NetworkInfeasible: If no value in the bracket is feasible.
        """
        x0, d = self.affine_layer_solution(k)
        left, right = self.resistance_bounds(k)
        delta = self.r_unit * self.settings.length_resolution

        points = self.breakpoints(x0, d, left, right)
        logger.debug(
            f"Layer {k}: {len(points) - 1} segments in "
            f"[{left / self.r_unit:.6e}, {right / self.r_unit:.6e}] m"
        )

        for s in self.segment_candidates(x0, d, points, self.mixing_time_window(x0, d, k)):
            # the box condition is strict, a root itself is not feasible
            for value in (s, s + delta):
                x = x0 + value * d
                if value <= right and self.check_conditions(x, k):
                    logger.debug(f"Layer {k}: free meander length {value / self.r_unit:.6e} m")
                    return x

        raise NetworkInfeasible(
            f"rMeanders-{k}", f"Cannot find valid meander resistance for {k + 1}.Layer", layer=k
        )

    def solve_resistances(self) -> None:
        for k in range(self.n_layers):
            x = self.solve_layer_resistances(k)
            for meander, r in zip(self.meanders[k], x):
                meander.resistance = float(r)
                meander.length = float(r) / self.r_unit
            logger.info(
                f"Layer {k}: meander lengths [m] = "
                f"{', '.join(f'{m.length:.4e}' for m in self.meanders[k])}"
            )

    def check_conditions(self, resistances: npt.NDArray[np.float64], k: int) -> bool:
        """
        Feasibility of a resistance vector of layer k.

        1. Every interior meander keeps the fluid for at least t_min.
        2. The shortest meander still fits into the bounding height that the
           longest meander needs.
        """
        if not np.all(np.isfinite(resistances)):
            return False

        n = len(resistances)
        for i in range(1, n - 1):
            q = self.meanders[k][i].flow_rate
            if self.t_min > self.w * self.h * resistances[i] / (q * self.r_unit):
                return False

        r_max = float(np.max(resistances))
        r_min = float(np.min(resistances))
        h_min = compute_minimal_height_meander(r_max / self.r_unit, self.radius, self.w, self.w_meander_max)
        r_min_realizable = self.r_unit * (h_min + 2 * self.radius * (pi - 2) + 2 * self.w)
        return r_min > r_min_realizable

    def meander_lengths(self, k: int) -> List[float]:
        return [meander.length for meander in self.meanders[k]]
