"""Tests for the World class."""

import numpy as np
import pytest

from lifegrid.core import zoo
from lifegrid.core.cell import Cell
from lifegrid.core.errors import InvalidDimensionsError, OutOfBoundsError, ReadOnlyGridError
from lifegrid.core.grid import Grid
from lifegrid.core.world import World


def make_grid(width, height, alive):
    grid = Grid(width, height)
    for x, y in alive:
        grid.set(x, y, Cell.ALIVE)
    return grid


def alive_set(grid):
    return {(x, y) for y in range(grid.height) for x in range(grid.width) if grid.get(x, y) == Cell.ALIVE}


class TestWorldConstruction:
    """Test cases for building worlds."""

    def test_default(self):
        world = World()
        assert world.width == 0
        assert world.height == 0
        assert world.total_cells == 0
        assert world.generation == 0

    def test_square(self):
        world = World(6)
        assert (world.width, world.height) == (6, 6)
        assert world.dead_cells == 36

    def test_rectangle(self):
        """Test world initialization from dimensions."""
        world = World(4, 7)
        assert world.width == 4
        assert world.height == 7
        assert world.total_cells == 28
        assert world.alive_cells == 0
        assert world.state == Grid(4, 7)

    def test_negative_dimensions(self):
        with pytest.raises(InvalidDimensionsError):
            World(-1, 4)

    def test_from_grid(self):
        """Test that a world copies its starting grid."""
        grid = zoo.glider()
        world = World(grid)

        assert world.state == grid
        assert world.alive_cells == 5

        grid.set(0, 0, Cell.ALIVE)
        assert world.state.get(0, 0) == Cell.DEAD

        world.step()
        assert grid.alive_cells == 6

    def test_from_grid_with_height(self):
        with pytest.raises(TypeError):
            World(Grid(2, 2), 3)


class TestWorldState:
    """Test cases for the state view."""

    def test_state_is_read_only(self):
        world = World(zoo.glider())
        with pytest.raises(ReadOnlyGridError):
            world.state.set(0, 0, Cell.ALIVE)
        with pytest.raises(ReadOnlyGridError):
            world.state.resize(1)

    def test_state_reflects_step(self):
        world = World(make_grid(5, 5, [(2, 1), (2, 2), (2, 3)]))
        world.step()
        assert alive_set(world.state) == {(1, 2), (2, 2), (3, 2)}

    def test_held_state_follows_steps(self):
        """Test that a view taken before stepping shows each new generation."""
        world = World(make_grid(5, 5, [(2, 1), (2, 2), (2, 3)]))
        state = world.state

        world.step()
        assert state == world.state
        assert alive_set(state) == {(1, 2), (2, 2), (3, 2)}

        world.step()
        assert state == world.state
        assert alive_set(state) == {(2, 1), (2, 2), (2, 3)}

        world.advance(3)
        assert alive_set(state) == {(1, 2), (2, 2), (3, 2)}

    def test_held_state_follows_resize(self):
        world = World(make_grid(3, 3, [(0, 0)]))
        state = world.state
        world.resize(5, 4)
        assert state.shape == (5, 4)
        assert state == world.state

    def test_state_copy_is_a_snapshot(self):
        world = World(make_grid(5, 5, [(2, 1), (2, 2), (2, 3)]))
        snapshot = world.state.copy()
        world.step()
        assert alive_set(snapshot) == {(2, 1), (2, 2), (2, 3)}
        assert snapshot != world.state

    def test_counts_delegate(self):
        world = World(make_grid(3, 2, [(0, 0), (2, 1)]))
        assert world.alive_cells == 2
        assert world.dead_cells == 4
        assert world.total_cells == world.alive_cells + world.dead_cells


class TestWorldResize:
    """Test cases for resizing worlds."""

    def test_resize_keeps_overlap(self):
        world = World(make_grid(4, 4, [(0, 0), (3, 3)]))
        world.resize(2, 2)
        assert (world.width, world.height) == (2, 2)
        assert world.alive_cells == 1

        world.resize(4)
        assert world.alive_cells == 1
        assert world.state.get(3, 3) == Cell.DEAD

    def test_resize_then_step(self):
        """Test that both buffers take the new shape."""
        world = World(make_grid(3, 3, [(0, 0), (1, 0), (0, 1), (1, 1)]))
        world.resize(6, 5)
        world.step()
        assert world.state.shape == (6, 5)
        assert alive_set(world.state) == {(0, 0), (1, 0), (0, 1), (1, 1)}

    def test_resize_negative(self):
        world = World(3)
        with pytest.raises(InvalidDimensionsError):
            world.resize(3, -3)


class TestWorldRules:
    """Test cases for Conway's rules."""

    def test_count_neighbours(self):
        world = World(make_grid(3, 3, [(0, 0), (0, 1), (0, 2)]))
        assert world.count_neighbours(1, 1) == 3
        assert world.count_neighbours(2, 1) == 0
        assert world.count_neighbours(2, 1, toroidal=True) == 3
        with pytest.raises(OutOfBoundsError):
            world.count_neighbours(3, 1)

    @pytest.mark.parametrize("toroidal", [False, True])
    def test_dead_world_stays_dead(self, toroidal):
        world = World(8, 5)
        world.advance(3, toroidal)
        assert world.alive_cells == 0
        assert world.generation == 3

    def test_still_life_block(self):
        """Test that a block pattern is stable (still life)."""
        block = make_grid(4, 4, [(1, 1), (2, 1), (1, 2), (2, 2)])
        world = World(block)

        for _ in range(5):
            world.step()

        assert world.state == block
        assert world.generation == 5

    def test_still_life_beehive(self):
        beehive = make_grid(6, 5, [(2, 1), (3, 1), (1, 2), (4, 2), (2, 3), (3, 3)])
        world = World(beehive)
        world.step(toroidal=True)
        assert world.state == beehive

    def test_oscillator_blinker(self):
        """Test blinker oscillator (period 2)."""
        vertical = make_grid(5, 5, [(2, 1), (2, 2), (2, 3)])
        world = World(vertical)

        world.step()
        assert alive_set(world.state) == {(1, 2), (2, 2), (3, 2)}

        world.step()
        assert world.state == vertical

    def test_underpopulation_and_overcrowding(self):
        """Test that isolated and crowded cells die."""
        world = World(make_grid(5, 5, [(0, 0), (2, 2), (1, 2), (3, 2), (2, 1), (2, 3)]))
        world.step()

        state = world.state
        assert state.get(0, 0) == Cell.DEAD
        assert state.get(2, 2) == Cell.DEAD

    def test_step_uses_previous_generation_only(self):
        """Test that births and deaths are decided on the old generation."""
        world = World(make_grid(4, 1, [(0, 0), (1, 0), (2, 0)]))
        world.step()
        assert alive_set(world.state) == {(1, 0)}

    def test_glider_translates(self):
        """Test that a glider moves one cell diagonally every four steps."""
        grid = Grid(10, 10)
        grid.merge(zoo.glider(), 0, 0)
        world = World(grid)

        world.advance(4)

        expected = Grid(10, 10)
        expected.merge(zoo.glider(), 1, 1)
        assert world.alive_cells == 5
        assert world.state == expected

    def test_glider_toroidal_returns_home(self):
        """Test that a glider on a torus wraps back to its start."""
        grid = Grid(8, 8)
        grid.merge(zoo.glider(), 5, 5)
        world = World(grid)

        world.advance(32, toroidal=True)
        assert world.state == grid

    def test_glider_dies_at_bounded_edge(self):
        grid = Grid(4, 4)
        grid.merge(zoo.glider(), 1, 1)
        world = World(grid)
        world.advance(12)
        assert world.state != grid
        assert world.alive_cells < 5

    def test_toroidal_column_fills_small_torus(self):
        """Test wrap-around on a 3x3 torus, where every cell neighbours every other."""
        world = World(make_grid(3, 3, [(0, 0), (0, 1), (0, 2)]))
        world.step(toroidal=True)

        state = world.state
        assert state.get(0, 1) == Cell.ALIVE
        assert state.get(1, 1) == Cell.ALIVE
        assert state.get(2, 1) == Cell.ALIVE
        assert world.alive_cells == 9

    def test_toroidal_blinker_across_corner(self):
        """Test a blinker centred on (0, 0) that wraps over both edges."""
        world = World(make_grid(5, 5, [(0, 4), (0, 0), (0, 1)]))

        world.step()
        assert world.alive_cells == 0

        world = World(make_grid(5, 5, [(0, 4), (0, 0), (0, 1)]))
        world.step(toroidal=True)
        assert alive_set(world.state) == {(4, 0), (0, 0), (1, 0)}

        world.step(toroidal=True)
        assert alive_set(world.state) == {(0, 4), (0, 0), (0, 1)}

    def test_step_matches_reference(self):
        """Test the vectorized step against a direct application of the rules."""
        rng = np.random.RandomState(3)
        grid = Grid(12, 9)
        grid.cells[...] = rng.randint(2, size=(9, 12))

        for toroidal in (False, True):
            world = World(grid)
            world.step(toroidal)
            for x in range(grid.width):
                for y in range(grid.height):
                    n = grid.count_neighbours(x, y, toroidal)
                    alive = grid.get(x, y) == Cell.ALIVE
                    expected = n == 3 or (alive and n == 2)
                    assert (world.state.get(x, y) == Cell.ALIVE) == expected

    def test_empty_world_steps(self):
        world = World()
        world.step(toroidal=True)
        assert world.total_cells == 0
        assert world.generation == 1


class TestWorldAdvance:
    """Test cases for advance."""

    def test_advance_matches_steps(self):
        grid = Grid(12, 12)
        grid.merge(zoo.r_pentomino(), 4, 4)

        stepped = World(grid)
        for _ in range(7):
            stepped.step()

        advanced = World(grid)
        advanced.advance(7)

        assert advanced.state == stepped.state
        assert advanced.generation == 7

    @pytest.mark.parametrize("steps", [0, -1, -100])
    def test_advance_non_positive_is_noop(self, steps):
        world = World(zoo.r_pentomino())
        world.advance(steps)
        assert world.state == zoo.r_pentomino()
        assert world.generation == 0
