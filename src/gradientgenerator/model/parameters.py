"""
Design Parameters (Data Model)
==============================
This module defines the single validated parameter object the core consumes.

Why is this file needed?
------------------------
1. Contract: the parameter-entry front end hands over exactly one
   DesignParameters instance; nothing else flows into the pipeline.
2. Validation: every stated inequality is checked here, in a fixed order,
   before any solve is attempted. The first violation raises ParameterError.
3. Persistence: to_dict/from_dict give a JSON-safe representation.

All values are SI (metres, Pa·s, m³/s, seconds); concentrations are fractions.

Classes:
    InletParameters: Concentration, flow rate and length of one inlet.
    OutletParameters: Target concentration, flow rate and extra resistance of one outlet.
    DesignParameters: The main container.
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
import logging
from typing import Any, Dict, List, Optional

from gradientgenerator.config import NUMBER_OF_INLETS, MIN_NUMBER_OF_OUTLETS
from gradientgenerator.model.errors import ParameterError

logger = logging.getLogger(__name__)


@dataclass
class InletParameters:
    concentration: float  # fraction [-]
    flow_rate: float      # m³/s
    length: float         # m

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> InletParameters:
        return InletParameters(
            concentration=float(data["concentration"]),
            flow_rate=float(data["flow_rate"]),
            length=float(data["length"]),
        )


@dataclass
class OutletParameters:
    """
    Requested state of one outlet.

    The concentration of the first and the last outlet is fixed to the
    matching inlet, and their flow rate results from the solve, so both
    values are ignored for them.
    """
    concentration: float                 # fraction [-]
    flow_rate: Optional[float] = None    # m³/s, interior outlets only
    extra_resistance: float = 0.0        # Pa·s/m³

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> OutletParameters:
        flow_rate = data.get("flow_rate")
        return OutletParameters(
            concentration=float(data["concentration"]),
            flow_rate=None if flow_rate is None else float(flow_rate),
            extra_resistance=float(data.get("extra_resistance", 0.0)),
        )


@dataclass
class DesignParameters:
    width: float                  # channel width w [m]
    height: float                 # channel height h [m]
    radius: float                 # turn radius of the meanders [m]
    meander_width_max: float      # maximal bounding width of a meander [m]
    viscosity: float              # dynamic viscosity mu [Pa·s]
    min_mixing_time: float        # tMin [s]
    inlets: List[InletParameters] = field(default_factory=list)
    outlets: List[OutletParameters] = field(default_factory=list)
    straight_outlets: bool = True

    @property
    def number_of_outlets(self) -> int:
        return len(self.outlets)

    @property
    def number_of_layers(self) -> int:
        return len(self.outlets) - 2

    @property
    def connection_length(self) -> float:
        """Length of every connecting channel inside a layer."""
        return (self.meander_width_max + self.width) / 2

    def outlet_concentrations(self) -> List[float]:
        """Outlet concentrations with the first/last outlet pinned to the inlets."""
        concentrations = [outlet.concentration for outlet in self.outlets]
        if concentrations and len(self.inlets) == NUMBER_OF_INLETS:
            concentrations[0] = self.inlets[0].concentration
            concentrations[-1] = self.inlets[-1].concentration
        return concentrations

    def validate(self) -> None:
        """
        Check all parameters in a fixed order.

        Raises:
            ParameterError: On the first violated inequality, carrying the
                identifier of the offending field, inlet or outlet.
        """
        try:
            self._check()
        except ParameterError as e:
            logger.warning(f"Invalid parameter '{e.identifier}': {e.message}")
            raise

    def _check(self) -> None:
        w = self.width
        if not 0 < w:
            raise ParameterError("width", 'Parameter Error: "0 < w" must hold')
        if not 0 < self.height <= w:
            raise ParameterError("height", 'Parameter Error: "0 < h <= w" must hold')
        if not w <= self.radius:
            raise ParameterError("radius", 'Parameter Error: "w <= radius" must hold')
        if not 5 * w + 8 * self.radius < self.meander_width_max:
            raise ParameterError("wMeanderMax", 'Parameter Error: "5*w + 8*r < wMeanderMax" must hold')
        if not 0 < self.viscosity:
            raise ParameterError("mu", 'Parameter Error: "0 < mu" must hold')
        if not 0 < self.min_mixing_time:
            raise ParameterError("tMin", 'Parameter Error: "0 < tMin" must hold')

        # inlets
        if len(self.inlets) != NUMBER_OF_INLETS:
            raise ParameterError(
                "inlets.length",
                f'Parameter Error: "nInlets = {NUMBER_OF_INLETS}" must hold, where "nInlets" is the number of inlets'
            )
        q_inlet_sum = 0.0
        for i, inlet in enumerate(self.inlets):
            if not 0 <= inlet.concentration <= 1:
                raise ParameterError(f"inlet-{i}-c", f'Parameter Error at {i + 1}.Inlet: "0% <= c <= 100%" must hold')
            if not 0 < inlet.flow_rate:
                raise ParameterError(f"inlet-{i}-q", f'Parameter Error at {i + 1}.Inlet: "0 < q" must hold')
            q_inlet_sum += inlet.flow_rate
            if not w <= inlet.length:
                raise ParameterError(f"inlet-{i}-l", f'Parameter Error at {i + 1}.Inlet: "w <= l" must hold')
        for i in range(len(self.inlets) - 1):
            if not self.inlets[i].concentration > self.inlets[i + 1].concentration:
                raise ParameterError(
                    "inlets-c", f'Parameter Error at Inlets: "cInlet{i + 1} > cInlet{i + 2}" must hold'
                )

        # outlets
        n_outlets = len(self.outlets)
        if n_outlets < MIN_NUMBER_OF_OUTLETS:
            raise ParameterError(
                "outlets.length",
                f'Parameter Error: "nOutlets >= {MIN_NUMBER_OF_OUTLETS}" must hold, where "nOutlets" is the number of outlets'
            )
        q_outlet_sum = 0.0
        for i, outlet in enumerate(self.outlets):
            # first and last outlet get their concentration and flow rate from the network
            if 0 < i < n_outlets - 1:
                if not 0 <= outlet.concentration <= 1:
                    raise ParameterError(f"outlet-{i}-c", f'Parameter Error at {i + 1}.Outlet: "0% <= c <= 100%" must hold')
                if outlet.flow_rate is None or not 0 < outlet.flow_rate:
                    raise ParameterError(f"outlet-{i}-q", f'Parameter Error at {i + 1}.Outlet: "0 < q" must hold')
                q_outlet_sum += outlet.flow_rate
            if not 0 <= outlet.extra_resistance:
                raise ParameterError(f"outlet-{i}-r", f'Parameter Error at {i + 1}.Outlet: "0 <= r" must hold')
        concentrations = self.outlet_concentrations()
        for i in range(n_outlets - 1):
            if not concentrations[i] > concentrations[i + 1]:
                raise ParameterError(
                    "outlets-c", f'Parameter Error at Outlets: "cOutlet{i + 1} > cOutlet{i + 2}" must hold'
                )

        if not q_outlet_sum < q_inlet_sum:
            raise ParameterError("outlets-q", 'Parameter Error at Outlets: "sum(qOutlet[i]) < sum(qInlet[i])" must hold')

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "radius": self.radius,
            "meander_width_max": self.meander_width_max,
            "viscosity": self.viscosity,
            "min_mixing_time": self.min_mixing_time,
            "straight_outlets": self.straight_outlets,
            "inlets": [inlet.to_dict() for inlet in self.inlets],
            "outlets": [outlet.to_dict() for outlet in self.outlets],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> DesignParameters:
        return DesignParameters(
            width=float(data["width"]),
            height=float(data["height"]),
            radius=float(data["radius"]),
            meander_width_max=float(data["meander_width_max"]),
            viscosity=float(data["viscosity"]),
            min_mixing_time=float(data["min_mixing_time"]),
            inlets=[InletParameters.from_dict(d) for d in data.get("inlets", [])],
            outlets=[OutletParameters.from_dict(d) for d in data.get("outlets", [])],
            straight_outlets=bool(data.get("straight_outlets", True)),
        )
