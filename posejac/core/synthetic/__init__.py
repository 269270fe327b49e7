"""Synthetic operating points for testing."""

from .scene_gen import OperatingPointGenerator

__all__ = [
    "OperatingPointGenerator",
]
