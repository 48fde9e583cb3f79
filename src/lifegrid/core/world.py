"""Conway's Game of Life simulation world."""

import logging
from typing import Optional, Union

from .cell import Cell
from .grid import Grid

logger = logging.getLogger(__name__)


class World:
    """Conway's Game of Life simulation engine.

    Implements the classic B3/S23 rules:
    - Live cell with 2-3 neighbors survives
    - Dead cell with exactly 3 neighbors becomes alive
    - All other cells die or stay dead

    The world owns two grids of the same shape. Each step reads only the
    current grid, writes the next generation into the back buffer and then
    swaps the two, so callers never observe a half-updated generation.
    """

    def __init__(self, width: Union[int, Grid] = 0, height: Optional[int] = None) -> None:
        """Initialize the world.

        ``World()`` is empty, ``World(n)`` is n x n, ``World(w, h)`` is w x h
        and ``World(grid)`` starts from a copy of ``grid``.

        Args:
            width: Number of columns, side length, or a grid to copy
            height: Number of rows when ``width`` is an int

        Raises:
            InvalidDimensionsError: If either dimension is negative
        """
        if isinstance(width, Grid):
            if height is not None:
                raise TypeError("height cannot be given together with a source grid")
            self._current = width.copy()
        else:
            self._current = Grid(width, height)

        self._next = Grid(self._current.width, self._current.height)
        self._generation = 0

    @property
    def width(self) -> int:
        return self._current.width

    @property
    def height(self) -> int:
        return self._current.height

    @property
    def total_cells(self) -> int:
        return self._current.total_cells

    @property
    def alive_cells(self) -> int:
        """Current number of living cells."""
        return self._current.alive_cells

    @property
    def dead_cells(self) -> int:
        return self._current.dead_cells

    @property
    def generation(self) -> int:
        """Number of steps taken since the world was created."""
        return self._generation

    @property
    def state(self) -> Grid:
        """Read-only view of the current generation.

        A view kept across :meth:`step` or :meth:`resize` keeps showing the
        current generation. Use ``state.copy()`` to keep a snapshot.
        """
        return self._current.read_only_view()

    def resize(self, width: int, height: Optional[int] = None) -> None:
        """Resize both buffers, keeping the current generation's overlap.

        Raises:
            InvalidDimensionsError: If either dimension is negative
        """
        self._current.resize(width, height)
        self._next = Grid(self._current.width, self._current.height)

    def count_neighbours(self, x: int, y: int, toroidal: bool = False) -> int:
        """Count living neighbours of (x, y) in the current generation."""
        return self._current.count_neighbours(x, y, toroidal)

    def step(self, toroidal: bool = False) -> None:
        """Advance the simulation by one generation.

        Args:
            toroidal: Whether grid edges wrap around
        """
        neighbour_counts = self._current.count_all_neighbours(toroidal)
        cells = self._current.cells

        # Birth on exactly 3 neighbours, survival on 2 or 3
        alive = (neighbour_counts == 3) | ((cells == Cell.ALIVE) & (neighbour_counts == 2))
        self._next.cells[...] = alive

        # `_current` stays the grid that `state` views resolve through
        self._current._swap_cells(self._next)
        self._generation += 1

    def advance(self, steps: int, toroidal: bool = False) -> None:
        """Apply :meth:`step` ``steps`` times. Negative counts do nothing."""
        if steps <= 0:
            return

        logger.debug("Advancing %dx%d world by %d generations", self.width, self.height, steps)
        for _ in range(steps):
            self.step(toroidal)
