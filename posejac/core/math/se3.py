"""SO(3) and SE(3) exponential maps, composition and inversion."""

import numpy as np
from typing import Tuple

from .lie_algebra import skew, ln


def _exp_coefficients(theta_sq: float) -> Tuple[float, float, float]:
    """Coefficients (A, B, C) of I + A W + B W^2 and I + B W + C W^2."""
    if theta_sq < 1e-8:
        A = 1.0 - theta_sq / 6.0
        B = 0.5
        C = 1.0 / 6.0
    elif theta_sq < 1e-6:
        C = 1.0 / 6.0 - theta_sq / 120.0
        B = 0.5 - 0.25 * (1.0 / 6.0) * theta_sq
        A = 1.0 - theta_sq / 6.0 * (1.0 - theta_sq / 20.0)
    else:
        theta = np.sqrt(theta_sq)
        A = np.sin(theta) / theta
        B = (1.0 - np.cos(theta)) / theta_sq
        C = (1.0 - A) / theta_sq
    return A, B, C


def so3_exp(omega: np.ndarray) -> np.ndarray:
    """Convert a rotation vector to a 3x3 rotation matrix (Rodrigues)."""
    omega = np.asarray(omega, dtype=float)
    if omega.shape != (3,):
        raise ValueError(f"omega must be 3-element vector, got shape {omega.shape}")

    A, B, _ = _exp_coefficients(float(omega @ omega))
    W = skew(omega)
    return np.eye(3) + A * W + B * (W @ W)


def se3_exp(xi: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Convert se(3) algebra element to SE(3) group (R, t).

    Args:
        xi: 6-element vector [rho, phi] where rho is translation, phi is rotation

    Returns:
        Tuple of (R, t) where R is 3x3 rotation matrix, t is 3-element translation
    """
    xi = np.asarray(xi, dtype=float)
    if xi.shape != (6,):
        raise ValueError(f"xi must be 6-element vector, got shape {xi.shape}")

    rho = xi[:3]  # translation part
    phi = xi[3:]  # rotation part

    A, B, C = _exp_coefficients(float(phi @ phi))
    W = skew(phi)
    W2 = W @ W

    R = np.eye(3) + A * W + B * W2
    t = rho + B * (W @ rho) + C * (W2 @ rho)
    return R, t


def se3_log(R: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Convert SE(3) group element (R, t) to se(3) algebra.

    Args:
        R: 3x3 rotation matrix
        t: 3-element translation vector

    Returns:
        6-element se(3) vector [rho, phi], the inverse of se3_exp
    """
    R = np.asarray(R, dtype=float)
    t = np.asarray(t, dtype=float)
    if R.shape != (3, 3):
        raise ValueError(f"R must be 3x3 matrix, got shape {R.shape}")
    if t.shape != (3,):
        raise ValueError(f"t must be 3-element vector, got shape {t.shape}")

    v = ln(R, t)
    return np.concatenate([v[3:], v[:3]])


def compose(R1: np.ndarray, t1: np.ndarray, R2: np.ndarray, t2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Compose two SE(3) transformations: T1 * T2."""
    R = R1 @ R2
    t = R1 @ t2 + t1
    return R, t


def invert(R: np.ndarray, t: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Invert SE(3) transformation."""
    R_inv = R.T
    t_inv = -R_inv @ t
    return R_inv, t_inv
