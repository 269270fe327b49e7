"""Finite-difference Jacobian utilities."""

import numpy as np
from typing import Callable

# Step of the default one-sided difference used by prediction and constraint
# models that do not supply a closed-form Jacobian.
FD_STEP = 1e-12


def finite_difference_jacobian(
    func: Callable[[np.ndarray], np.ndarray],
    x: np.ndarray,
    h: float = FD_STEP,
    method: str = "forward"
) -> np.ndarray:
    """Compute Jacobian using finite differences.

    For manifold-valued arguments pass x = zeros(dof) and let func apply the
    increment, e.g. ``lambda eps: model.map(model.add_frame(T, eps), x)``.

    Args:
        func: Function that takes x and returns residual vector
        x: Input parameters
        h: Step size for finite differences
        method: Finite difference method ("forward", "backward", "central")

    Returns:
        Jacobian matrix J where J[i,j] = df_i/dx_j
    """
    x = np.atleast_1d(np.asarray(x, dtype=float))
    f0 = np.atleast_1d(func(x))

    m, n = len(f0), len(x)
    J = np.zeros((m, n))

    if method == "forward":
        for j in range(n):
            x_plus = x.copy()
            x_plus[j] += h
            J[:, j] = (np.atleast_1d(func(x_plus)) - f0) / h

    elif method == "backward":
        for j in range(n):
            x_minus = x.copy()
            x_minus[j] -= h
            J[:, j] = (f0 - np.atleast_1d(func(x_minus))) / h

    elif method == "central":
        for j in range(n):
            x_plus = x.copy()
            x_minus = x.copy()
            x_plus[j] += h
            x_minus[j] -= h
            f_plus = np.atleast_1d(func(x_plus))
            f_minus = np.atleast_1d(func(x_minus))
            J[:, j] = (f_plus - f_minus) / (2 * h)

    else:
        raise ValueError(f"Unknown finite difference method: {method}")

    return J


def check_jacobian(
    J_analytic: np.ndarray,
    J_numeric: np.ndarray,
    atol: float = 1e-6,
    rtol: float = 1e-6
) -> tuple[bool, float]:
    """Compare an analytic Jacobian against a numerical one.

    Returns:
        Tuple of (is_correct, max_abs_error)
    """
    if J_analytic.shape != J_numeric.shape:
        raise ValueError(
            f"Jacobian shapes differ: {J_analytic.shape} vs {J_numeric.shape}"
        )

    error = np.abs(J_analytic - J_numeric)
    max_error = float(np.max(error)) if error.size else 0.0
    is_correct = bool(np.allclose(J_analytic, J_numeric, atol=atol, rtol=rtol))

    return is_correct, max_error
