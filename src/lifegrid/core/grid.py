"""Grid data structure for cellular automata."""

import logging
import operator
from typing import Callable, Dict, Optional, TextIO, Tuple, Union

import numpy as np
import torch
import torch.nn.functional as F

from .cell import Cell
from .errors import (
    InvalidCropError,
    InvalidDimensionsError,
    InvalidMergeError,
    OutOfBoundsError,
    ReadOnlyGridError,
)

logger = logging.getLogger(__name__)

# Moore neighbourhood kernel, shaped (out_channels, in_channels, 3, 3) for conv2d
_NEIGHBOUR_KERNEL = (
    torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
)

# Lookup table from stored cell value to its ASCII character
_CELL_CHARS = np.array([Cell.DEAD.char, Cell.ALIVE.char])

# Clockwise quarter turns keyed by the normalized rotation. Storage is indexed
# [y, x], so a single turn reads destination (x, y) from source (y, H-1-x).
_ROTATIONS: Dict[int, Callable[[np.ndarray], np.ndarray]] = {
    0: lambda cells: cells,
    1: lambda cells: cells[::-1, :].T,
    2: lambda cells: cells[::-1, ::-1],
    3: lambda cells: cells[:, ::-1].T,
}


def _check_dimensions(width: int, height: int) -> Tuple[int, int]:
    width = operator.index(width)
    height = operator.index(height)
    if width < 0 or height < 0:
        raise InvalidDimensionsError(f"Grid dimensions must be non-negative, got {width}x{height}")
    return width, height


class Grid:
    """Represents a dense 2D grid of cells.

    Cells are stored in a numpy array of shape ``(height, width)``, so the
    cell at column x and row y sits at flat offset ``x + width * y``. The
    shape only changes through :meth:`resize`; everything else edits cells
    in place or returns a new grid.
    """

    def __init__(self, width: int = 0, height: Optional[int] = None) -> None:
        """Initialize a new grid with every cell dead.

        ``Grid()`` is empty, ``Grid(n)`` is n x n and ``Grid(w, h)`` is w x h.

        Args:
            width: Number of columns (or the side length of a square grid)
            height: Number of rows, defaults to ``width``

        Raises:
            InvalidDimensionsError: If either dimension is negative
        """
        if height is None:
            height = width
        width, height = _check_dimensions(width, height)
        self._data = np.zeros((height, width), dtype=np.int8)
        self._source: Optional[Grid] = None

    @classmethod
    def _from_array(cls, cells: np.ndarray) -> "Grid":
        grid = cls.__new__(cls)
        grid._data = cells
        grid._source = None
        return grid

    @property
    def _cells(self) -> np.ndarray:
        # Views look up their source on every access so they follow resizes and swaps
        if self._source is None:
            return self._data
        view = self._source._cells.view()
        view.flags.writeable = False
        return view

    @property
    def cells(self) -> np.ndarray:
        """Get the underlying cell array, indexed ``[y, x]``."""
        return self._cells

    @property
    def width(self) -> int:
        return self._cells.shape[1]

    @property
    def height(self) -> int:
        return self._cells.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (width, height)."""
        return (self.width, self.height)

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    @property
    def alive_cells(self) -> int:
        """Get the number of living cells."""
        return int(np.count_nonzero(self._cells))

    @property
    def dead_cells(self) -> int:
        """Get the number of dead cells."""
        return int(self._cells.size - np.count_nonzero(self._cells))

    @property
    def read_only(self) -> bool:
        """Whether this grid rejects mutation."""
        return self._source is not None

    def _check_writable(self) -> None:
        if self._source is not None:
            raise ReadOnlyGridError("Cannot modify a read-only grid")

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether (x, y) lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_coordinate(self, x: int, y: int) -> Tuple[int, int]:
        x, y = operator.index(x), operator.index(y)
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)
        return x, y

    def get(self, x: int, y: int) -> Cell:
        """Get the state of a cell.

        Args:
            x: Column coordinate
            y: Row coordinate

        Returns:
            The cell at (x, y)

        Raises:
            OutOfBoundsError: If the coordinates are outside the grid
        """
        x, y = self._check_coordinate(x, y)
        return Cell.from_bit(self._cells[y, x])

    def set(self, x: int, y: int, value: Union[Cell, int, bool]) -> None:
        """Set the state of a cell.

        Args:
            x: Column coordinate
            y: Row coordinate
            value: New cell state

        Raises:
            OutOfBoundsError: If the coordinates are outside the grid
            ValueError: If value is not a valid cell state
        """
        self._check_writable()
        x, y = self._check_coordinate(x, y)
        self._cells[y, x] = Cell(value)

    def __getitem__(self, coordinate: Tuple[int, int]) -> Cell:
        x, y = coordinate
        return self.get(x, y)

    def __setitem__(self, coordinate: Tuple[int, int], value: Union[Cell, int, bool]) -> None:
        x, y = coordinate
        self.set(x, y, value)

    def clear(self) -> None:
        """Clear all cells (set all to dead)."""
        self._check_writable()
        self._cells.fill(Cell.DEAD)

    def copy(self) -> "Grid":
        """Return an independent, writable copy of this grid."""
        return Grid._from_array(self._cells.copy())

    def read_only_view(self) -> "Grid":
        """Return a grid that rejects mutation and always shows this grid's cells.

        The view follows this grid through :meth:`resize` and buffer swaps.
        """
        view = Grid.__new__(Grid)
        view._data = None
        view._source = self
        return view

    def _swap_cells(self, other: "Grid") -> None:
        self._data, other._data = other._data, self._data

    def resize(self, width: int, height: Optional[int] = None) -> None:
        """Change the grid dimensions.

        Cells in the overlap of the old and new shapes, aligned at the
        origin, keep their state. New cells are dead and cells outside the
        new shape are discarded.

        Args:
            width: New number of columns (or side length of a square grid)
            height: New number of rows, defaults to ``width``

        Raises:
            InvalidDimensionsError: If either dimension is negative
        """
        self._check_writable()
        if height is None:
            height = width
        width, height = _check_dimensions(width, height)

        resized = np.zeros((height, width), dtype=np.int8)
        keep_w = min(width, self.width)
        keep_h = min(height, self.height)
        resized[:keep_h, :keep_w] = self._cells[:keep_h, :keep_w]

        logger.debug("Resized grid from %dx%d to %dx%d", self.width, self.height, width, height)
        self._data = resized

    def crop(self, x0: int, y0: int, x1: int, y1: int) -> "Grid":
        """Copy out the half-open window [x0, x1) x [y0, y1).

        Raises:
            InvalidCropError: If the window is inverted or leaves the grid
        """
        x0, y0, x1, y1 = (operator.index(v) for v in (x0, y0, x1, y1))
        if not (0 <= x0 <= x1 <= self.width and 0 <= y0 <= y1 <= self.height):
            raise InvalidCropError(
                f"Crop window ({x0}, {y0})-({x1}, {y1}) is not within {self.width}x{self.height} grid"
            )
        return Grid._from_array(self._cells[y0:y1, x0:x1].copy())

    def merge(self, other: "Grid", x0: int, y0: int, alive_only: bool = False) -> None:
        """Overlay another grid onto this one with its top-left corner at (x0, y0).

        Args:
            other: Source grid, which must fit entirely inside this grid
            x0: Destination column of the source's left edge
            y0: Destination row of the source's top edge
            alive_only: Only copy living cells, leaving the rest untouched

        Raises:
            InvalidMergeError: If the source does not fit at (x0, y0)
        """
        self._check_writable()
        x0, y0 = operator.index(x0), operator.index(y0)
        if x0 < 0 or y0 < 0 or x0 + other.width > self.width or y0 + other.height > self.height:
            raise InvalidMergeError(
                f"Cannot merge {other.width}x{other.height} grid at ({x0}, {y0}) "
                f"into {self.width}x{self.height} grid"
            )

        region = self._cells[y0 : y0 + other.height, x0 : x0 + other.width]
        if alive_only:
            region[other.cells == Cell.ALIVE] = Cell.ALIVE
        else:
            region[...] = other.cells

    def rotate(self, rotation: int) -> "Grid":
        """Return a copy rotated clockwise by ``rotation`` quarter turns.

        Negative rotations turn anticlockwise. Only ``rotation % 4`` matters.
        """
        quarter_turns = ((operator.index(rotation) % 4) + 4) % 4
        return Grid._from_array(_ROTATIONS[quarter_turns](self._cells).copy())

    def count_neighbours(self, x: int, y: int, toroidal: bool = False) -> int:
        """Count living neighbours of a cell.

        Args:
            x: Column coordinate
            y: Row coordinate
            toroidal: Wrap coordinates around the grid edges

        Returns:
            Number of living neighbours (0-8)

        Raises:
            OutOfBoundsError: If (x, y) is outside the grid
        """
        x, y = self._check_coordinate(x, y)

        count = 0
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue

                nx, ny = x + dx, y + dy

                if toroidal:
                    count += self._cells[ny % self.height, nx % self.width]
                elif self.in_bounds(nx, ny):
                    count += self._cells[ny, nx]

        return int(count)

    def count_all_neighbours(self, toroidal: bool = False) -> np.ndarray:
        """Count neighbours for all cells using a PyTorch convolution.

        Args:
            toroidal: Wrap around the grid edges instead of treating the
                outside as dead

        Returns:
            Array of shape (height, width) with the neighbour count of each cell
        """
        if self._cells.size == 0:
            return np.zeros(self._cells.shape, dtype=np.int8)

        tensor = torch.from_numpy(self._cells.astype(np.float32)).unsqueeze(0).unsqueeze(0)

        if toroidal:
            padded = F.pad(tensor, (1, 1, 1, 1), mode="circular")
            neighbours = F.conv2d(padded, _NEIGHBOUR_KERNEL)
        else:
            neighbours = F.conv2d(tensor, _NEIGHBOUR_KERNEL, padding=1)

        return neighbours[0, 0].numpy().astype(np.int8)

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y) or None if no living cells
        """
        ys, xs = np.nonzero(self._cells)
        if len(xs) == 0:
            return None

        return (int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max()))

    def to_string(self) -> str:
        """Render the grid inside a +/-/| border, one line per row."""
        border = "+" + "-" * self.width + "+\n"
        rows = ["|" + "".join(_CELL_CHARS[row]) + "|\n" for row in self._cells]
        return border + "".join(rows) + border

    def write(self, stream: TextIO) -> None:
        """Write the bordered rendering of the grid to a text stream."""
        stream.write(self.to_string())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, alive={self.alive_cells})"

    def __eq__(self, other: object) -> bool:
        """Check if two grids have the same shape and cells."""
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)
