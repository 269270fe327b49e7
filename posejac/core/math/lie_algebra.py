"""Logarithms of SO(3) and SE(3) and their closed-form Jacobians.

Matrices are differentiated entry-wise in column-major order, so a rotation
R stacks as the 9-vector [R[:, 0], R[:, 1], R[:, 2]] and an SE(3) element
stacks as the 12-vector [vec(R), t]. Perturbations of a pose are ordered
[translation, rotation] and applied on the left: exp(delta) * T.

Every rotation logarithm (and derivative of one) switches to a Taylor
expansion once d = (trace(R) - 1) / 2 exceeds NEAR_IDENTITY_COS.
"""

import numpy as np

NEAR_IDENTITY_COS = 0.99999


def skew(v: np.ndarray) -> np.ndarray:
    """Cross-product matrix: skew(a) @ b == np.cross(a, b)."""
    return np.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0]
    ])


def kron(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """Kronecker product; 1-D arguments are treated as column vectors."""
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    if A.ndim == 1:
        A = A[:, None]
    if B.ndim == 1:
        B = B[:, None]
    return np.kron(A, B)


def delta_r(R: np.ndarray) -> np.ndarray:
    """Off-diagonal skew components (R21 - R12, R02 - R20, R10 - R01)."""
    return np.array([
        R[2, 1] - R[1, 2],
        R[0, 2] - R[2, 0],
        R[1, 0] - R[0, 1]
    ])


def rotation_cosine(R: np.ndarray) -> float:
    """Cosine of the rotation angle of R."""
    return 0.5 * (R[0, 0] + R[1, 1] + R[2, 2] - 1.0)


def _rotation_log_terms(d: float):
    """Scale g with ln_so3(R) = g * delta_r(R), and dg/dd."""
    if d > NEAR_IDENTITY_COS:
        return 0.5 + (1.0 - d) / 6.0, -1.0 / 6.0
    theta = np.arccos(max(d, -1.0))
    sq = np.sqrt(1.0 - d * d)
    return theta / (2.0 * sq), (d * theta - sq) / (2.0 * sq**3)


def _vinv_terms(d: float):
    """Coefficient h of delta x (delta x t) in V^-1 t, and dh/dd."""
    if d > NEAR_IDENTITY_COS:
        return 1.0 / 48.0 + 7.0 * (1.0 - d) / 480.0, -7.0 / 480.0
    theta = np.arccos(max(d, -1.0))
    oned2 = 1.0 - d * d
    sq = np.sqrt(oned2)
    cot = 1.0 / np.tan(0.5 * theta)
    csc2 = 1.0 / np.sin(0.5 * theta) ** 2
    h = (2.0 - theta * cot) / (8.0 * oned2)
    dh = ((cot - 0.5 * theta * csc2) * sq + 2.0 * d * (2.0 - theta * cot)) / (8.0 * oned2**2)
    return h, dh


def ln_so3(R: np.ndarray) -> np.ndarray:
    """Logarithm of a rotation matrix as an axis-angle 3-vector.

    Args:
        R: 3x3 rotation matrix

    Returns:
        Rotation vector omega with exp(skew(omega)) == R
    """
    d = rotation_cosine(R)
    if d > NEAR_IDENTITY_COS:
        # 0.5 * delta_r plus the next Taylor term of theta / (2 sin(theta))
        return (0.5 + (1.0 - d) / 6.0) * delta_r(R)
    theta = np.arccos(max(d, -1.0))
    return theta / (2.0 * np.sqrt(1.0 - d * d)) * delta_r(R)


def ln(R: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Logarithm of an SE(3) element.

    Args:
        R: 3x3 rotation matrix
        t: 3-element translation

    Returns:
        6-vector [omega, V^-1 t] (rotation part first)
    """
    d = rotation_cosine(R)
    if d > NEAR_IDENTITY_COS:
        omega = (0.5 + (1.0 - d) / 6.0) * delta_r(R)
        c = 1.0 / 12.0 + (1.0 - d) / 360.0
    else:
        theta = np.arccos(max(d, -1.0))
        omega = theta / (2.0 * np.sqrt(1.0 - d * d)) * delta_r(R)
        c = (1.0 - theta / (2.0 * np.tan(0.5 * theta))) / (theta * theta)

    Omega = skew(omega)
    V_inv = np.eye(3) - 0.5 * Omega + c * (Omega @ Omega)

    return np.concatenate([omega, V_inv @ np.asarray(t, dtype=float)])


def ln_so3xr3(T) -> np.ndarray:
    """Logarithm in the decoupled group <SO(3), R^3>: [ln_so3(R), t]."""
    return np.concatenate([ln_so3(T.rotation), T.translation])


def m3x9(a: np.ndarray, B: np.ndarray) -> np.ndarray:
    """Assemble the 3x9 Jacobian of a map depending on R via trace and delta_r.

    Column k is the derivative with respect to vec(R)[k]. ``a`` is the
    derivative with respect to each diagonal entry, ``-B`` the derivative
    with respect to delta_r(R).
    """
    J = np.empty((3, 9))
    J[:, 0] = a
    J[:, 1] = -B[:, 2]
    J[:, 2] = B[:, 1]
    J[:, 3] = B[:, 2]
    J[:, 4] = a
    J[:, 5] = -B[:, 0]
    J[:, 6] = -B[:, 1]
    J[:, 7] = B[:, 0]
    J[:, 8] = a
    return J


def dlnr_dr(R: np.ndarray) -> np.ndarray:
    """Jacobian (3x9) of ln_so3 with respect to vec(R)."""
    g, dg = _rotation_log_terms(rotation_cosine(R))
    a = 0.5 * dg * delta_r(R)
    B = -g * np.eye(3)
    return m3x9(a, B)


def ddeltart_dr(T) -> np.ndarray:
    """Jacobian of -(delta x (delta x t)) with respect to delta = delta_r(R)."""
    t = np.asarray(T.translation, dtype=float)
    delta = delta_r(T.rotation)
    return -(np.dot(delta, t) * np.eye(3) + np.outer(delta, t) - 2.0 * np.outer(t, delta))


def dvinvt_dr(T) -> np.ndarray:
    """Jacobian (3x9) of V^-1(R) t with respect to vec(R), t held fixed."""
    R = T.rotation
    t = np.asarray(T.translation, dtype=float)
    d = rotation_cosine(R)
    delta = delta_r(R)
    g, dg = _rotation_log_terms(d)
    h, dh = _vinv_terms(d)

    delta_x_t = np.cross(delta, t)
    a = 0.5 * (-0.5 * dg * delta_x_t + dh * np.cross(delta, delta_x_t))
    B = -0.5 * g * skew(t) + h * ddeltart_dr(T)
    return m3x9(a, B)


def dlnt_dt(T) -> np.ndarray:
    """Jacobian (6x12) of ln(R, t) with respect to [vec(R), t]."""
    R = T.rotation
    d = rotation_cosine(R)
    g, _ = _rotation_log_terms(d)
    h, _ = _vinv_terms(d)
    S = skew(delta_r(R))

    J = np.zeros((6, 12))
    J[0:3, 0:9] = dlnr_dr(R)
    J[3:6, 0:9] = dvinvt_dr(T)
    J[3:6, 9:12] = np.eye(3) - 0.5 * g * S + h * (S @ S)
    return J


def dexp_x_t_ddelta(T) -> np.ndarray:
    """Jacobian (12x6) of [vec(R), t] of exp(delta) * T at delta = 0."""
    R = T.rotation
    J = np.zeros((12, 6))
    J[0:3, 3:6] = -skew(R[:, 0])
    J[3:6, 3:6] = -skew(R[:, 1])
    J[6:9, 3:6] = -skew(R[:, 2])
    J[9:12, 3:6] = -skew(T.translation)
    J[9:12, 0:3] = np.eye(3)
    return J


def ddiff_dt1(C, T2) -> np.ndarray:
    """Jacobian (12x12) of D = C * T1 * T2^-1 with respect to [vec(R1), t1]."""
    R2 = T2.rotation
    Rc = C.rotation
    t2 = np.asarray(T2.translation, dtype=float)

    J = np.zeros((12, 12))
    J[0:9, 0:9] = kron(R2, Rc)
    J[9:12, 0:9] = kron(-(R2.T @ t2)[None, :], Rc)
    J[9:12, 9:12] = Rc
    return J


def ddiff_dt2(T1, C, T2) -> np.ndarray:
    """Jacobian (12x12) of D = C * T1 * T2^-1 with respect to [vec(R2), t2]."""
    M = C.rotation @ T1.rotation
    R2 = T2.rotation
    t2 = np.asarray(T2.translation, dtype=float)
    I = np.eye(3)

    J = np.zeros((12, 12))
    for k in range(3):
        J[0:9, 3 * k:3 * k + 3] = kron(I, M[:, k])
        J[9:12, 3 * k:3 * k + 3] = kron(-t2[None, :], M[:, k])
    J[9:12, 9:12] = -M @ R2.T
    return J
