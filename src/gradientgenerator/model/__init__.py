"""
The MODEL layer contains pure data structures.
It deals with the design parameters, the geometric primitives and the mesh.
"""
