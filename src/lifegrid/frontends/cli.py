"""Command-line interface for Conway's Game of Life."""

import argparse
import logging
import sys
import time
from typing import Any, Dict, Optional, Tuple

from ..core import zoo
from ..core.errors import LifeGridError
from ..core.grid import Grid
from ..core.world import World


class CLIWorld:
    """Command-line interface for running Game of Life simulations."""

    def build_grid(
        self,
        width: int,
        height: int,
        pattern: Optional[str] = None,
        pattern_x: int = 0,
        pattern_y: int = 0,
        rotation: int = 0,
        load_path: Optional[str] = None,
        verbose: bool = False,
    ) -> Grid:
        """Build the starting grid.

        A grid loaded from ``load_path`` is used as-is. Otherwise a dead
        ``width`` x ``height`` grid is created and the named pattern, rotated
        by ``rotation`` quarter turns, is stamped onto it at
        (``pattern_x``, ``pattern_y``).

        Raises:
            KeyError: If the pattern name is unknown
            LifeGridError: If the file cannot be loaded or the pattern does not fit
        """
        if load_path:
            if verbose:
                print(f"Loading grid from {load_path}")
            grid = zoo.load(load_path)
            return grid.rotate(rotation) if rotation else grid

        grid = Grid(width, height)
        if pattern:
            creature = zoo.get_pattern(pattern).rotate(rotation)
            if verbose:
                print(f"Placing pattern '{pattern}' at ({pattern_x}, {pattern_y})")
            grid.merge(creature, pattern_x, pattern_y, alive_only=True)

        return grid

    def run_simulation(
        self,
        grid: Grid,
        generations: int,
        toroidal: bool = False,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Tuple[World, Dict[str, Any]]:
        """Run a Game of Life simulation.

        Args:
            grid: Starting grid (copied, not modified)
            generations: Number of generations to simulate
            toroidal: Whether grid edges wrap around
            verbose: Print progress updates
            show_grid: Show initial and final grid states

        Returns:
            Tuple of (world, statistics)
        """
        world = World(grid)
        initial_population = world.alive_cells

        if verbose:
            print(f"Initialized {world.width}x{world.height} world (toroidal: {toroidal})")
            print(f"Initial population: {initial_population} cells")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(world.state), end="")

        start_time = time.time()
        world.advance(generations, toroidal)
        duration = time.time() - start_time

        if show_grid:
            print(f"\nFinal grid (generation {world.generation}):")
            print(self._format_grid(world.state), end="")

        stats = {
            "generation": world.generation,
            "grid_size": (world.width, world.height),
            "initial_population": initial_population,
            "population": world.alive_cells,
            "bounding_box": world.state.get_bounding_box(),
            "duration_seconds": duration,
            "generations_per_second": world.generation / duration if duration > 0 else 0,
        }
        return world, stats

    def _format_grid(self, grid: Grid, max_size: int = 80) -> str:
        """Format grid for display, truncating if too large.

        Args:
            grid: Grid to format
            max_size: Maximum dimension to display

        Returns:
            Formatted grid string
        """
        if grid.width > max_size or grid.height > max_size:
            return f"Grid too large to display ({grid.width}x{grid.height})\n"

        return grid.to_string()

    def list_patterns(self) -> None:
        """List available patterns."""
        print("Available patterns:")
        for name in zoo.PATTERNS:
            pattern = zoo.get_pattern(name)
            print(f"  {name}: {pattern.width}x{pattern.height}, {pattern.alive_cells} cells")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run Conway's Game of Life simulations from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a glider on a 20x20 toroidal grid for 80 generations
  lifegrid-cli -W 20 -H 20 --pattern glider --toroidal -n 80 --show-grid

  # Run an R-pentomino in the middle of a large grid and save the result
  lifegrid-cli -W 200 -H 200 --pattern r-pentomino --pattern-x 100 --pattern-y 100 -n 1103 --save out.bgol

  # Continue a saved simulation
  lifegrid-cli --load out.bgol -n 100 --save out.gol

  # List available patterns
  lifegrid-cli --list-patterns
        """,
    )

    # Grid configuration
    parser.add_argument("-W", "--width", type=int, default=50, help="Grid width (default: 50)")

    parser.add_argument("-H", "--height", type=int, default=50, help="Grid height (default: 50)")

    parser.add_argument(
        "-t",
        "--toroidal",
        action="store_true",
        help="Enable toroidal (wraparound) edges",
    )

    # Starting state
    parser.add_argument(
        "--pattern",
        type=str,
        default="glider",
        help="Pattern to place on an empty grid (default: glider)",
    )

    parser.add_argument(
        "--pattern-x",
        type=int,
        default=0,
        help="X offset for pattern placement (default: 0)",
    )

    parser.add_argument(
        "--pattern-y",
        type=int,
        default=0,
        help="Y offset for pattern placement (default: 0)",
    )

    parser.add_argument(
        "--rotate",
        type=int,
        default=0,
        help="Rotate the starting pattern clockwise by this many quarter turns (default: 0)",
    )

    parser.add_argument(
        "--load",
        type=str,
        metavar="PATH",
        help="Start from a .gol or .bgol file instead of a pattern",
    )

    # Simulation configuration
    parser.add_argument(
        "-n",
        "--generations",
        type=int,
        default=100,
        help="Number of generations to simulate (default: 100)",
    )

    # Output configuration
    parser.add_argument(
        "--save",
        type=str,
        metavar="PATH",
        help="Save the final grid to a .gol or .bgol file",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final grid states (small grids only)",
    )

    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="List available patterns and exit",
    )

    return parser


def print_results(stats: Dict[str, Any], verbose: bool) -> None:
    """Print simulation results.

    Args:
        stats: Statistics dictionary
        verbose: Whether to show detailed statistics
    """
    print(f"\nSimulation completed after {stats['generation']} generations")

    if verbose:
        print("\nDetailed Statistics:")
        print(f"  Grid size: {stats['grid_size'][0]}x{stats['grid_size'][1]}")
        print(f"  Initial population: {stats['initial_population']}")
        print(f"  Final population: {stats['population']}")
        print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
        print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")

        if stats["bounding_box"]:
            bbox = stats["bounding_box"]
            print(f"  Bounding box: ({bbox[0]}, {bbox[1]}) to ({bbox[2]}, {bbox[3]})")
    else:
        print(f"Population: {stats['initial_population']} -> {stats['population']}")


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.width <= 0:
        errors.append("Width must be positive")

    if args.height <= 0:
        errors.append("Height must be positive")

    if args.generations < 0:
        errors.append("Generations must be non-negative")

    if args.pattern_x < 0:
        errors.append("Pattern X offset must be non-negative")

    if args.pattern_y < 0:
        errors.append("Pattern Y offset must be non-negative")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def main() -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cli = CLIWorld()

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if not validate_args(args):
        return 1

    try:
        grid = cli.build_grid(
            width=args.width,
            height=args.height,
            pattern=args.pattern,
            pattern_x=args.pattern_x,
            pattern_y=args.pattern_y,
            rotation=args.rotate,
            load_path=args.load,
            verbose=args.verbose,
        )

        world, stats = cli.run_simulation(
            grid,
            generations=args.generations,
            toroidal=args.toroidal,
            verbose=args.verbose,
            show_grid=args.show_grid,
        )

        print_results(stats, args.verbose)

        if args.save:
            zoo.save(args.save, world.state)
            print(f"Saved final grid to {args.save}")

        return 0

    except KeyError as e:
        print(f"Error: {e.args[0]}")
        print("Use --list-patterns to see available patterns")
        return 1
    except (LifeGridError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
