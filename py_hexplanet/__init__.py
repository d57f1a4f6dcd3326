"""
Hexagonal-cell planet generation: icosphere, hexsphere dual, per-cell
elevation/color filters and terraced terrain meshes.
"""

__version__ = "0.1.0"
