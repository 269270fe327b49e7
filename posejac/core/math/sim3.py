"""Sim(3) exponential and logarithm.

A similarity tangent vector is ordered [upsilon, omega, sigma]: translation
generator, rotation vector, log-scale. The group element is (R, t, s) with
s = exp(sigma) and t = W(omega, sigma) @ upsilon.
"""

import numpy as np
from typing import Tuple

from .lie_algebra import skew, ln_so3
from .se3 import so3_exp

_EPS = 0.00001


def _w_matrix(omega: np.ndarray, sigma: float) -> np.ndarray:
    """Matrix W mapping the translation generator to the group translation."""
    theta = np.linalg.norm(omega)
    Omega = skew(omega)
    Omega2 = Omega @ Omega
    s = np.exp(sigma)

    C = 1.0 if sigma == 0.0 else np.expm1(sigma) / sigma

    if theta < _EPS:
        if abs(sigma) < _EPS:
            A = 0.5 + sigma / 3.0
            B = 1.0 / 6.0 + sigma / 8.0
        else:
            sigma_sq = sigma * sigma
            A = ((sigma - 1.0) * s + 1.0) / sigma_sq
            B = ((0.5 * sigma_sq - sigma + 1.0) * s - 1.0) / (sigma_sq * sigma)
    elif sigma == 0.0:
        theta_sq = theta * theta
        A = (1.0 - np.cos(theta)) / theta_sq
        B = (theta - np.sin(theta)) / (theta_sq * theta)
    else:
        a = s * np.sin(theta)
        b = s * np.cos(theta)
        theta_sq = theta * theta
        sigma_sq = sigma * sigma
        A = (a * sigma + (1.0 - b) * theta) / (theta * (theta_sq + sigma_sq))
        B = (C - ((b - 1.0) * sigma + a * theta) / (theta_sq + sigma_sq)) / theta_sq

    return A * Omega + B * Omega2 + C * np.eye(3)


def sim3_exp(xi: np.ndarray) -> Tuple[np.ndarray, np.ndarray, float]:
    """Convert sim(3) element [upsilon, omega, sigma] to (R, t, s)."""
    xi = np.asarray(xi, dtype=float)
    if xi.shape != (7,):
        raise ValueError(f"xi must be 7-element vector, got shape {xi.shape}")

    upsilon = xi[0:3]
    omega = xi[3:6]
    sigma = float(xi[6])

    R = so3_exp(omega)
    t = _w_matrix(omega, sigma) @ upsilon
    return R, t, float(np.exp(sigma))


def sim3_log(R: np.ndarray, t: np.ndarray, s: float) -> np.ndarray:
    """Convert (R, t, s) in Sim(3) to [upsilon, omega, sigma]."""
    R = np.asarray(R, dtype=float)
    t = np.asarray(t, dtype=float)
    if R.shape != (3, 3):
        raise ValueError(f"R must be 3x3 matrix, got shape {R.shape}")
    if t.shape != (3,):
        raise ValueError(f"t must be 3-element vector, got shape {t.shape}")
    if not s > 0:
        raise ValueError(f"scale must be positive, got {s}")

    sigma = float(np.log(s))
    omega = ln_so3(R)
    upsilon = np.linalg.solve(_w_matrix(omega, sigma), t)
    return np.concatenate([upsilon, omega, [sigma]])
