"""Jaguar: a Battlesnake that searches a few plies ahead and scores positions heuristically."""
from .config import VERSION

__version__ = VERSION
