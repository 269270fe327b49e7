"""SE(2) exponential and logarithm for planar rigid motions."""

import numpy as np
from typing import Tuple


def so2(theta: float) -> np.ndarray:
    """2x2 rotation matrix for angle theta."""
    c = np.cos(theta)
    s = np.sin(theta)
    return np.array([[c, -s], [s, c]])


def se2_exp(mu: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Convert se(2) element [vx, vy, theta] to (R, t)."""
    mu = np.asarray(mu, dtype=float)
    if mu.shape != (3,):
        raise ValueError(f"mu must be 3-element vector, got shape {mu.shape}")

    theta = mu[2]
    theta_sq = theta * theta
    cross = np.array([-theta * mu[1], theta * mu[0]])

    if theta_sq < 1e-8:
        t = mu[:2] + 0.5 * cross
    else:
        sine_ratio = np.sin(theta) / theta
        cosine_ratio = (1.0 - np.cos(theta)) / theta_sq
        t = sine_ratio * mu[:2] + cosine_ratio * cross

    return so2(theta), t


def se2_log(R: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Convert (R, t) in SE(2) to [vx, vy, theta], the inverse of se2_exp."""
    R = np.asarray(R, dtype=float)
    t = np.asarray(t, dtype=float)
    if R.shape != (2, 2):
        raise ValueError(f"R must be 2x2 matrix, got shape {R.shape}")
    if t.shape != (2,):
        raise ValueError(f"t must be 2-element vector, got shape {t.shape}")

    theta = np.arctan2(R[1, 0], R[0, 0])
    shtot = 0.5
    if abs(theta) > 0.00001:
        shtot = np.sin(0.5 * theta) / theta

    v = (so2(-0.5 * theta) @ t) / (2.0 * shtot)
    return np.array([v[0], v[1], theta])
