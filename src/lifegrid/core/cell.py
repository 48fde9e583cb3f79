"""Cell states for Conway's Game of Life."""

from enum import IntEnum


class Cell(IntEnum):
    """The state of a single grid cell.

    The integer value doubles as the cell's bit in the binary file format,
    which lets cells live directly inside numpy ``int8`` arrays.
    """

    DEAD = 0
    ALIVE = 1

    @property
    def char(self) -> str:
        """Character used for this cell in ASCII dumps and ``.gol`` files."""
        return "#" if self is Cell.ALIVE else " "

    @classmethod
    def from_char(cls, char: str) -> "Cell":
        """Parse a cell from its ASCII character.

        Raises:
            ValueError: If ``char`` is neither a space nor a hash
        """
        if char == "#":
            return cls.ALIVE
        if char == " ":
            return cls.DEAD
        raise ValueError(f"Invalid cell character {char!r}")

    @classmethod
    def from_bit(cls, bit: int) -> "Cell":
        return cls.ALIVE if bit else cls.DEAD

    def __str__(self) -> str:
        return self.char
