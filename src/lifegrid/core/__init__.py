"""Core cellular automata logic."""

from .cell import Cell
from .grid import Grid
from .world import World
from . import errors, zoo

__all__ = ["Cell", "Grid", "World", "errors", "zoo"]
