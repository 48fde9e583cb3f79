"""Exceptions raised by the grid, world and zoo modules.

Every exception carries a ``kind`` string naming the failure, and also
derives from the builtin exception a caller would naturally catch
(``IndexError`` for bad coordinates, ``OSError`` for file access, and so on).
"""

from typing import Optional


class LifeGridError(Exception):
    """Base class for all lifegrid errors."""

    kind = "error"


class InvalidDimensionsError(LifeGridError, ValueError):
    """A width or height was negative."""

    kind = "invalid-dimensions"


class OutOfBoundsError(LifeGridError, IndexError):
    """A coordinate fell outside the grid."""

    kind = "out-of-bounds"

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"Coordinates ({x}, {y}) out of bounds for {width}x{height} grid")
        self.x = x
        self.y = y


class InvalidCropError(LifeGridError, ValueError):
    """A crop window was inverted or extended past the grid."""

    kind = "invalid-crop"


class InvalidMergeError(LifeGridError, ValueError):
    """A merged grid does not fit inside the destination."""

    kind = "invalid-merge"


class ReadOnlyGridError(LifeGridError, TypeError):
    """A mutation was attempted on a read-only grid view."""

    kind = "read-only"


class ZooIOError(LifeGridError, OSError):
    """A grid file could not be opened, read or written."""

    kind = "io-error"


class ZooFormatError(LifeGridError, ValueError):
    """Base class for grid file parse failures."""

    def __init__(self, path: str, message: str, line: Optional[int] = None) -> None:
        location = path if line is None else f"{path}:{line}"
        super().__init__(f"{location}: {message}")
        self.path = path
        self.line = line


class InvalidHeaderError(ZooFormatError):
    kind = "invalid-header"


class InvalidLineError(ZooFormatError):
    kind = "invalid-line"


class InvalidCharacterError(ZooFormatError):
    kind = "invalid-character"


class UnexpectedEOFError(ZooFormatError):
    kind = "unexpected-eof"
