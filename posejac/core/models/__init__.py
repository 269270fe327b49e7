"""Data models for posejac."""

from .entities import LinearCamera
from .observations import Observation, WeightedObservation

__all__ = [
    "LinearCamera",
    "Observation",
    "WeightedObservation",
]
