"""Screw Sort - a match-three screw puzzle game."""

__version__ = "0.1.0"
