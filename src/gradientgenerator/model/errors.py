"""
Error Taxonomy
==============
Every failure of the design pipeline is one of the exceptions below.
The pipeline catches this family and turns it into a structured result.

Classes:
    GradientGeneratorError: Base class with identifier + message.
    ParameterError: A field or a cross-field relation is invalid.
    NetworkInfeasible: No valid meander resistances for a layer.
    GeometryInfeasible: A sized component violates a fabrication minimum.
"""
from __future__ import annotations

from typing import Optional


class GradientGeneratorError(Exception):
    """Base class of all design errors."""
    KIND: str = "error"

    def __init__(self, identifier: str, message: str) -> None:
        super().__init__(message)
        self.identifier = identifier
        self.message = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(identifier={self.identifier!r}, message={self.message!r})"


class ParameterError(GradientGeneratorError):
    """A single field or a cross-field relation violates its inequality."""
    KIND = "parameter"


class NetworkInfeasible(GradientGeneratorError):
    """The flow network cannot be realized (carries the failing layer index)."""
    KIND = "network"

    def __init__(self, identifier: str, message: str, layer: Optional[int] = None) -> None:
        super().__init__(identifier, message)
        self.layer = layer


class GeometryInfeasible(GradientGeneratorError):
    """A meander (or the assembled mesh) violates a fabrication minimum."""
    KIND = "geometry"

    def __init__(self, identifier: str, message: str, meander: Optional[tuple[int, int]] = None) -> None:
        super().__init__(identifier, message)
        self.meander = meander
