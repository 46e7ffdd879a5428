"""
Design Pipeline
===============
validate -> flow/resistance solve -> meander sizing -> mesh -> boundary paths.

The pipeline stops at the first failure. Every failure of the design itself
(GradientGeneratorError) is returned as a structured DesignResult; any other
exception is a bug and propagates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional

from gradientgenerator.config import DEFAULT_SETTINGS, SolverSettings
from gradientgenerator.layout.gradient_generator import GradientGeneratorGeometry
from gradientgenerator.model.errors import GradientGeneratorError
from gradientgenerator.model.mesh import Mesh
from gradientgenerator.model.parameters import DesignParameters
from gradientgenerator.post.boundary import extract_boundary
from gradientgenerator.post.path import BoundaryPath, boundary_paths, to_svg_path_data
from gradientgenerator.solvers.flow_network import FlowNetworkSolver
from gradientgenerator.solvers.meander_group import MeanderDimensions, MeanderGroupSolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DesignError:
    kind: str          # "parameter", "network" or "geometry"
    identifier: str
    message: str

    @classmethod
    def from_exception(cls, error: GradientGeneratorError) -> DesignError:
        return cls(kind=error.KIND, identifier=error.identifier, message=error.message)


@dataclass
class DesignResult:
    success: bool
    paths: List[BoundaryPath] = field(default_factory=list)
    min_x: float = 0.0
    min_y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    mesh: Optional[Mesh] = None
    network: Optional[FlowNetworkSolver] = None
    meander_groups: List[List[MeanderDimensions]] = field(default_factory=list)
    error: Optional[DesignError] = None

    @property
    def svg_path_data(self) -> str:
        return to_svg_path_data(self.paths)


def create_gradient_generator(
    parameters: DesignParameters,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> DesignResult:
    """
    Run the whole design.

    Args:
        parameters: Design parameters, validated here.
        settings: Numerical settings of the solvers.

    Returns:
        DesignResult with the boundary paths and the bounding box on success,
        or with a DesignError on failure.
    """
    network: Optional[FlowNetworkSolver] = None
    groups: List[List[MeanderDimensions]] = []
    try:
        logger.info("Validating parameters")
        parameters.validate()

        logger.info("Solving flow rates and meander resistances")
        network = FlowNetworkSolver(parameters, settings)
        network.solve()

        logger.info("Sizing meanders")
        for k in range(network.n_layers):
            solver = MeanderGroupSolver(
                parameters.width,
                parameters.radius,
                network.w_meander_max,
                network.meander_lengths(k),
                layer=k,
                settings=settings,
            )
            groups.append(solver.solve())

        logger.info("Building mesh")
        geometry = GradientGeneratorGeometry(
            w=parameters.width,
            l_connection=parameters.connection_length,
            inlet_lengths=[inlet.length for inlet in parameters.inlets],
            meander_groups=groups,
            outlet_lengths=[outlet.length for outlet in network.outlets],
            straight_outlets=parameters.straight_outlets,
        )
        mesh = geometry.create()

        logger.info("Extracting boundary")
        paths = boundary_paths(extract_boundary(mesh.quads))
    except GradientGeneratorError as e:
        logger.error(f"Design failed [{e.KIND}] {e.identifier}: {e.message}")
        return DesignResult(
            success=False,
            network=network,
            meander_groups=groups,
            error=DesignError.from_exception(e),
        )

    min_x, min_y, max_x, max_y = mesh.bounds()
    logger.info(f"Design finished: {len(paths)} path(s), {max_x - min_x:.4e} m x {max_y - min_y:.4e} m")
    return DesignResult(
        success=True,
        paths=paths,
        min_x=min_x,
        min_y=min_y,
        width=max_x - min_x,
        height=max_y - min_y,
        mesh=mesh,
        network=network,
        meander_groups=groups,
    )
