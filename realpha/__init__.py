"""Recover alpha and foreground color from black/white background renders."""

__version__ = "1.0.3"
