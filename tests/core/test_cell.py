"""Tests for the Cell enum."""

import pytest

from lifegrid.core.cell import Cell


class TestCell:
    """Test cases for Cell."""

    def test_values(self):
        """Test the bit value of each state."""
        assert Cell.DEAD == 0
        assert Cell.ALIVE == 1
        assert not Cell.DEAD
        assert Cell.ALIVE

    def test_characters(self):
        assert Cell.DEAD.char == " "
        assert Cell.ALIVE.char == "#"
        assert str(Cell.ALIVE) == "#"
        assert str(Cell.DEAD) == " "

    def test_from_char(self):
        assert Cell.from_char("#") is Cell.ALIVE
        assert Cell.from_char(" ") is Cell.DEAD

    @pytest.mark.parametrize("char", ["*", ".", "", "##", "\n"])
    def test_from_char_invalid(self, char):
        with pytest.raises(ValueError):
            Cell.from_char(char)

    def test_from_bit(self):
        assert Cell.from_bit(1) is Cell.ALIVE
        assert Cell.from_bit(0) is Cell.DEAD
