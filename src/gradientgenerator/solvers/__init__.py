"""Numerical solvers: channel resistance, meander sizing and the flow network."""
