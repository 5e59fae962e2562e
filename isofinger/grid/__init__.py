"""Grid — pad coordinate systems for isomorphic controllers.

Sub-package containing:
    hex_grid     – staggered hex layout (intervals / chromatic modes)
    square_grid  – 8x8 layout (fourths / sequential modes)
    devices      – controller presets and the ``make_grid`` factory
    coords       – position helpers shared by both topologies
"""

from .devices import Grid, detect_device, grid_for_device, list_devices, make_grid
from .hex_grid import HexGrid
from .square_grid import SquareGrid

__all__ = [
    "Grid",
    "HexGrid",
    "SquareGrid",
    "detect_device",
    "grid_for_device",
    "list_devices",
    "make_grid",
]
