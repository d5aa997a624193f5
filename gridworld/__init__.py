"""Authoritative world-state machine for a grid-based collection game."""

__version__ = "0.1.0"
