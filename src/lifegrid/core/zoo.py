"""Canonical Game of Life patterns and grid file codecs.

Two file formats are supported:

``.gol`` (ASCII)
    A header line ``"W H\\n"`` followed by H rows of exactly W characters,
    each terminated by a newline. A space is a dead cell, a hash a living
    one. The terminator on the final row is optional when reading.

``.bgol`` (binary)
    Width and height as little-endian signed 32-bit integers, followed by
    ``ceil(W * H / 8)`` bytes holding one bit per cell in row-major order,
    least significant bit first. Unused high bits of the last byte are zero.
"""

import logging
import os
import re
from pathlib import Path
from typing import Callable, Dict, Iterable, Tuple, Union

import numpy as np

from .cell import Cell
from .errors import (
    InvalidCharacterError,
    InvalidHeaderError,
    InvalidLineError,
    UnexpectedEOFError,
    ZooIOError,
)
from .grid import Grid

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_ASCII_HEADER = re.compile(rb"(-?[0-9]+) (-?[0-9]+)")
_ALIVE_BYTE = ord(Cell.ALIVE.char)
_DEAD_BYTE = ord(Cell.DEAD.char)

_BINARY_HEADER = np.dtype("<i4")
_BINARY_HEADER_SIZE = 2 * _BINARY_HEADER.itemsize


def _from_cells(width: int, height: int, cells: Iterable[Tuple[int, int]]) -> Grid:
    grid = Grid(width, height)
    for x, y in cells:
        grid.set(x, y, Cell.ALIVE)
    return grid


def glider() -> Grid:
    """Construct a 3x3 grid containing a glider.

    ::

        +---+
        | # |
        |  #|
        |###|
        +---+
    """
    return _from_cells(3, 3, [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)])


def r_pentomino() -> Grid:
    """Construct a 3x3 grid containing an R-pentomino.

    ::

        +---+
        | ##|
        |## |
        | # |
        +---+
    """
    return _from_cells(3, 3, [(1, 0), (2, 0), (0, 1), (1, 1), (1, 2)])


def light_weight_spaceship() -> Grid:
    """Construct a 5x4 grid containing a lightweight spaceship.

    ::

        +-----+
        | #  #|
        |#    |
        |#   #|
        |#### |
        +-----+
    """
    return _from_cells(
        5,
        4,
        [(1, 0), (4, 0), (0, 1), (0, 2), (4, 2), (0, 3), (1, 3), (2, 3), (3, 3)],
    )


PATTERNS: Dict[str, Callable[[], Grid]] = {
    "glider": glider,
    "r-pentomino": r_pentomino,
    "lwss": light_weight_spaceship,
}


def get_pattern(name: str) -> Grid:
    """Construct a pattern by name (case-insensitive).

    Raises:
        KeyError: If no pattern has that name
    """
    try:
        factory = PATTERNS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown pattern '{name}'. Available: {', '.join(PATTERNS)}") from None
    return factory()


def _read_file(path: PathLike) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ZooIOError(f"Cannot read grid file {path}: {e}") from e


def _write_file(path: PathLike, data: bytes) -> None:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ZooIOError(f"Cannot write grid file {path}: {e}") from e


def save_ascii(path: PathLike, grid: Grid) -> None:
    """Save a grid as an ASCII ``.gol`` file, replacing any existing file.

    Raises:
        ZooIOError: If the file cannot be opened or written
    """
    chars = np.where(grid.cells == Cell.ALIVE, _ALIVE_BYTE, _DEAD_BYTE).astype(np.uint8)
    lines = [f"{grid.width} {grid.height}\n".encode("ascii")]
    lines.extend(row.tobytes() + b"\n" for row in chars)

    _write_file(path, b"".join(lines))
    logger.debug("Saved %dx%d grid to %s", grid.width, grid.height, path)


def load_ascii(path: PathLike) -> Grid:
    """Load a grid from an ASCII ``.gol`` file.

    Args:
        path: File to read

    Returns:
        The parsed grid

    Raises:
        ZooIOError: If the file cannot be opened
        InvalidHeaderError: If the width or height is missing, malformed or
            not a positive integer
        InvalidLineError: If a row is not exactly ``width`` characters long
        UnexpectedEOFError: If the file has fewer than ``height`` rows
        InvalidCharacterError: If a row contains anything but spaces and hashes
    """
    data = _read_file(path)
    source = os.fspath(path)

    header, _, body = data.partition(b"\n")
    match = _ASCII_HEADER.fullmatch(header)
    if match is None:
        raise InvalidHeaderError(source, f"expected 'WIDTH HEIGHT' header, found {header[:40]!r}", line=1)

    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise InvalidHeaderError(source, f"dimensions must be positive, found {width}x{height}", line=1)

    rows = body.split(b"\n")
    # A trailing newline (or an empty body) leaves an empty final piece
    if rows[-1] == b"":
        rows.pop()

    for y in range(height):
        line_number = y + 2
        if y >= len(rows):
            raise UnexpectedEOFError(source, f"expected {height} rows, found {len(rows)}", line=line_number)

        if len(rows[y]) != width:
            raise InvalidLineError(source, f"expected {width} cells, found {len(rows[y])}", line=line_number)

        row = np.frombuffer(rows[y], dtype=np.uint8)

        invalid = (row != _ALIVE_BYTE) & (row != _DEAD_BYTE)
        if invalid.any():
            column = int(np.argmax(invalid))
            try:
                Cell.from_char(chr(row[column]))
            except ValueError as e:
                raise InvalidCharacterError(source, f"{e} at column {column}", line=line_number) from e

    if len(rows) > height:
        logger.warning("Ignoring %d lines after the last row of %s", len(rows) - height, source)

    grid = Grid(width, height)
    cells = np.frombuffer(b"".join(rows[:height]), dtype=np.uint8).reshape(height, width)
    grid.cells[...] = cells == _ALIVE_BYTE

    logger.debug("Loaded %dx%d grid from %s", width, height, source)
    return grid


def save_binary(path: PathLike, grid: Grid) -> None:
    """Save a grid as a binary ``.bgol`` file, replacing any existing file.

    Raises:
        ZooIOError: If the file cannot be opened or written
    """
    header = np.array([grid.width, grid.height], dtype=_BINARY_HEADER).tobytes()
    payload = np.packbits(grid.cells.ravel() != 0, bitorder="little").tobytes()

    _write_file(path, header + payload)
    logger.debug("Saved %dx%d grid to %s (%d payload bytes)", grid.width, grid.height, path, len(payload))


def load_binary(path: PathLike) -> Grid:
    """Load a grid from a binary ``.bgol`` file.

    The dimensions are not validated beyond being readable. A negative width
    or height yields an empty grid, a zero one a grid with no cells.

    Raises:
        ZooIOError: If the file cannot be opened
        UnexpectedEOFError: If the header or cell data is truncated
    """
    data = _read_file(path)
    source = os.fspath(path)

    if len(data) < _BINARY_HEADER_SIZE:
        raise UnexpectedEOFError(source, f"expected {_BINARY_HEADER_SIZE} header bytes, found {len(data)}")

    width, height = (int(v) for v in np.frombuffer(data, dtype=_BINARY_HEADER, count=2))
    if width < 0 or height < 0:
        logger.warning("Negative dimensions %dx%d in %s, loading an empty grid", width, height, source)
        return Grid()

    total = width * height
    payload_size = (total + 7) // 8
    payload = data[_BINARY_HEADER_SIZE : _BINARY_HEADER_SIZE + payload_size]
    if len(payload) < payload_size:
        raise UnexpectedEOFError(source, f"expected {payload_size} bytes of cell data, found {len(payload)}")

    grid = Grid(width, height)
    if total:
        bits = np.unpackbits(np.frombuffer(payload, dtype=np.uint8), count=total, bitorder="little")
        grid.cells[...] = bits.reshape(height, width)

    logger.debug("Loaded %dx%d grid from %s", width, height, source)
    return grid


_CODECS: Dict[str, Tuple[Callable[[PathLike], Grid], Callable[[PathLike, Grid], None]]] = {
    ".gol": (load_ascii, save_ascii),
    ".bgol": (load_binary, save_binary),
}


def _codec_for(path: PathLike) -> Tuple[Callable[[PathLike], Grid], Callable[[PathLike, Grid], None]]:
    suffix = Path(path).suffix.lower()
    try:
        return _CODECS[suffix]
    except KeyError:
        raise ValueError(f"Unsupported grid file extension '{suffix}' (expected .gol or .bgol)") from None


def load(path: PathLike) -> Grid:
    """Load a grid, choosing the codec from the file extension."""
    loader, _ = _codec_for(path)
    return loader(path)


def save(path: PathLike, grid: Grid) -> None:
    """Save a grid, choosing the codec from the file extension."""
    _, saver = _codec_for(path)
    saver(path, grid)
