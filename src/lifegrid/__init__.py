"""Conway's Game of Life on finite grids, with a pattern zoo and grid file codecs."""

__version__ = "0.1.0"

from .core.cell import Cell
from .core.grid import Grid
from .core.world import World
from .core import zoo

__all__ = ["Cell", "Grid", "World", "zoo"]
