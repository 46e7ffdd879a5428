"""
Gradient Generator Designer
===========================
Turns a handful of physical design parameters into a fabricable 2-D channel
layout for a microfluidic gradient generator.

Pipeline:
    1. Validate the DesignParameters.
    2. Solve flow rates and meander resistances of the channel network.
    3. Size every serpentine (meander) of every layer.
    4. Assemble the quad mesh of the whole device.
    5. Extract the outer silhouette as vector paths.
"""
from gradientgenerator.pipeline import create_gradient_generator, DesignResult, DesignError

__all__ = ["create_gradient_generator", "DesignResult", "DesignError"]
