"""
The LAYOUT layer turns solved dimensions into positioned mesh cells.
Every component builds its quads locally; GradientGeneratorGeometry places
the components and stitches their shared corners.
"""
