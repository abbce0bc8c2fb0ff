"""
Command-line interface for turning long-form text into themed image cards.

This package exposes a :func:`main` function which orchestrates argument parsing
and delegates pagination and rendering work to :mod:`pagesnap_core`.
"""

from .cli import main

__all__ = ["main"]
