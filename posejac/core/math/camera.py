"""Projection helpers and point parametrization conversions."""

import numpy as np


def project(x: np.ndarray) -> np.ndarray:
    """Homogeneous divide: drop the last coordinate after dividing by it.

    A 3-vector maps to normalized image coordinates (x/z, y/z); a 2-vector
    maps to the 1-element (x/y).
    """
    x = np.asarray(x, dtype=float)
    return x[:-1] / x[-1]


def unproject(uv: np.ndarray, depth: float = 1.0) -> np.ndarray:
    """Point at the given depth along the ray through normalized coordinates."""
    uv = np.asarray(uv, dtype=float)
    return depth * np.append(uv, 1.0)


def uvq_to_xyz(uvq: np.ndarray) -> np.ndarray:
    """Inverse-depth (u, v, q) to Euclidean (u/q, v/q, 1/q)."""
    return np.array([uvq[0], uvq[1], 1.0]) / uvq[2]


def xyz_to_uvq(xyz: np.ndarray) -> np.ndarray:
    """Euclidean point to inverse-depth (x/z, y/z, 1/z)."""
    return np.array([xyz[0], xyz[1], 1.0]) / xyz[2]
