#!/usr/bin/env python3
"""
Example usage of the lifegrid package.
"""

from lifegrid import Grid, World, zoo


def main():
    """Demonstrate programmatic usage of the lifegrid package."""
    # Place a glider in the corner of an empty grid
    grid = Grid(12, 12)
    grid.merge(zoo.glider(), 1, 1)
    world = World(grid)

    print("Initial state:")
    print(world.state, end="")
    print(f"Population: {world.alive_cells}")
    print()

    # Run simulation for 8 generations on a torus
    for _ in range(8):
        world.step(toroidal=True)
        print(f"Generation {world.generation}:")
        print(world.state, end="")
        print(f"Population: {world.alive_cells}")
        print()

    # Save the final generation in both file formats and read it back
    zoo.save_ascii("glider.gol", world.state)
    zoo.save_binary("glider.bgol", world.state)
    assert zoo.load_ascii("glider.gol") == zoo.load_binary("glider.bgol") == world.state
    print("Saved glider.gol and glider.bgol")


if __name__ == "__main__":
    main()
