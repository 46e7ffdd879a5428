"""Tags of the mesh cells and outlet shapes."""
from enum import StrEnum


class Component(StrEnum):
    """Which part of the device a quad belongs to."""
    INLET = "inlet"
    NODE = "node"
    CONNECTION = "connection"
    MEANDER = "meander"
    OUTLET = "outlet"


class OutletShape(StrEnum):
    STRAIGHT = "straight"
    ANGULAR = "angular"
