"""Upkeep - keeps installed packages current on a daily schedule."""

__version__ = "0.3.0"
