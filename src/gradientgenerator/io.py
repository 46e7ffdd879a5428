"""
Input/Output Manager (JSON)
Loads DesignParameters from .json files and serialises a DesignResult.

Concentrations in the file may be given as fractions (default) or in percent
by setting "concentration_unit": "percent" at the top level.
"""
from __future__ import annotations

import json
import logging
from importlib.metadata import version, PackageNotFoundError
from typing import Any, Dict

from gradientgenerator.model.parameters import DesignParameters
from gradientgenerator.pipeline import DesignResult
from gradientgenerator.utils import percent_to_fraction

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("gradientgenerator")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

CONCENTRATION_UNITS = ("fraction", "percent")


def parameters_from_dict(data: Dict[str, Any]) -> DesignParameters:
    """
    Build DesignParameters from a JSON-like dict.

    Raises:
        ValueError: On an unknown concentration unit or a missing field.
    """
    unit = data.get("concentration_unit", "fraction")
    if unit not in CONCENTRATION_UNITS:
        raise ValueError(f"Unknown concentration unit '{unit}', expected one of {CONCENTRATION_UNITS}.")

    data = dict(data)
    if unit == "percent":
        data["inlets"] = [
            {**inlet, "concentration": percent_to_fraction(inlet["concentration"])} for inlet in data.get("inlets", [])
        ]
        data["outlets"] = [
            {**outlet, "concentration": percent_to_fraction(outlet["concentration"])}
            for outlet in data.get("outlets", [])
        ]
    try:
        return DesignParameters.from_dict(data)
    except KeyError as e:
        raise ValueError(f"Missing parameter {e}") from e


def load_parameters(filepath: str) -> DesignParameters:
    logger.info(f"Loading parameters from: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parameters_from_dict(data)


def save_parameters(parameters: DesignParameters, filepath: str) -> None:
    logger.info(f"Saving parameters to: {filepath}")
    data = {"version": APP_VERSION, "concentration_unit": "fraction", **parameters.to_dict()}
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def result_to_dict(result: DesignResult) -> Dict[str, Any]:
    """JSON-safe summary of a DesignResult."""
    data: Dict[str, Any] = {"version": APP_VERSION, "success": result.success}
    if result.success:
        data["bounds"] = {
            "min_x": result.min_x,
            "min_y": result.min_y,
            "width": result.width,
            "height": result.height,
        }
        data["paths"] = [path.to_dict() for path in result.paths]
        data["svg_path_data"] = result.svg_path_data
        data["meanders"] = [
            [
                {
                    "length": m.length,
                    "w_meander": m.w_meander,
                    "h_meander": m.h_meander,
                    "n_arcs": m.n_arcs,
                }
                for m in group
            ]
            for group in result.meander_groups
        ]
    else:
        data["error"] = {
            "kind": result.error.kind,
            "identifier": result.error.identifier,
            "message": result.error.message,
        }
    return data


def save_result(result: DesignResult, filepath: str) -> None:
    logger.info(f"Saving result to: {filepath}")
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=2)
