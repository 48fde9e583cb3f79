"""Frontend interfaces for cellular automata."""

from .cli import CLIWorld

__all__ = ["CLIWorld"]
