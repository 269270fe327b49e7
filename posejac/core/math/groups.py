"""Immutable frame types: SE(3), SE(2) and Sim(3).

Every frame stores read-only copies of its rotation and translation (and
scale for Sim(3)); composition, inversion and exponential updates return
new frames.
"""

from dataclasses import dataclass, field
from typing import ClassVar

import numpy as np

from .se2 import se2_exp, se2_log
from .se3 import se3_exp, se3_log
from .sim3 import sim3_exp, sim3_log


def _frozen(array, shape, name: str) -> np.ndarray:
    value = np.array(array, dtype=float)
    if value.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {value.shape}")
    value.setflags(write=False)
    return value


def _orthonormalize(R: np.ndarray) -> np.ndarray:
    U, _, Vt = np.linalg.svd(R)
    R_n = U @ Vt
    if np.linalg.det(R_n) < 0:
        U[:, -1] *= -1
        R_n = U @ Vt
    return R_n


@dataclass(frozen=True, eq=False)
class SE3:
    """Rigid transformation x -> R x + t."""

    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    dof: ClassVar[int] = 6

    def __post_init__(self):
        object.__setattr__(self, "rotation", _frozen(self.rotation, (3, 3), "rotation"))
        object.__setattr__(self, "translation", _frozen(self.translation, (3,), "translation"))

    @classmethod
    def identity(cls) -> "SE3":
        return cls()

    @classmethod
    def exp(cls, xi: np.ndarray) -> "SE3":
        """Frame from a tangent vector [translation, rotation]."""
        R, t = se3_exp(xi)
        return cls(R, t)

    def log(self) -> np.ndarray:
        """Tangent vector [translation, rotation], the inverse of exp."""
        return se3_log(self.rotation, self.translation)

    def inverse(self) -> "SE3":
        R_inv = self.rotation.T
        return SE3(R_inv, -R_inv @ self.translation)

    def __mul__(self, other: "SE3") -> "SE3":
        if not isinstance(other, SE3):
            return NotImplemented
        return SE3(
            self.rotation @ other.rotation,
            self.rotation @ other.translation + self.translation
        )

    def transform(self, x: np.ndarray) -> np.ndarray:
        """Apply the transformation to a 3D point."""
        return self.rotation @ x + self.translation

    def matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix."""
        M = np.eye(4)
        M[:3, :3] = self.rotation
        M[:3, 3] = self.translation
        return M

    def normalized(self) -> "SE3":
        """Copy with the rotation projected back onto SO(3)."""
        return SE3(_orthonormalize(self.rotation), self.translation)

    def isclose(self, other: "SE3", atol: float = 1e-9) -> bool:
        return (np.allclose(self.rotation, other.rotation, atol=atol)
                and np.allclose(self.translation, other.translation, atol=atol))


@dataclass(frozen=True, eq=False)
class SE2:
    """Planar rigid transformation x -> R x + t."""

    rotation: np.ndarray = field(default_factory=lambda: np.eye(2))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(2))

    dof: ClassVar[int] = 3

    def __post_init__(self):
        object.__setattr__(self, "rotation", _frozen(self.rotation, (2, 2), "rotation"))
        object.__setattr__(self, "translation", _frozen(self.translation, (2,), "translation"))

    @classmethod
    def identity(cls) -> "SE2":
        return cls()

    @classmethod
    def exp(cls, mu: np.ndarray) -> "SE2":
        """Frame from a tangent vector [vx, vy, theta]."""
        R, t = se2_exp(mu)
        return cls(R, t)

    def log(self) -> np.ndarray:
        return se2_log(self.rotation, self.translation)

    @property
    def angle(self) -> float:
        return float(np.arctan2(self.rotation[1, 0], self.rotation[0, 0]))

    def inverse(self) -> "SE2":
        R_inv = self.rotation.T
        return SE2(R_inv, -R_inv @ self.translation)

    def __mul__(self, other: "SE2") -> "SE2":
        if not isinstance(other, SE2):
            return NotImplemented
        return SE2(
            self.rotation @ other.rotation,
            self.rotation @ other.translation + self.translation
        )

    def transform(self, x: np.ndarray) -> np.ndarray:
        return self.rotation @ x + self.translation

    def isclose(self, other: "SE2", atol: float = 1e-9) -> bool:
        return (np.allclose(self.rotation, other.rotation, atol=atol)
                and np.allclose(self.translation, other.translation, atol=atol))


@dataclass(frozen=True, eq=False)
class Sim3:
    """Similarity transformation x -> s R x + t."""

    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: float = 1.0

    dof: ClassVar[int] = 7

    def __post_init__(self):
        object.__setattr__(self, "rotation", _frozen(self.rotation, (3, 3), "rotation"))
        object.__setattr__(self, "translation", _frozen(self.translation, (3,), "translation"))
        if not self.scale > 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        object.__setattr__(self, "scale", float(self.scale))

    @classmethod
    def identity(cls) -> "Sim3":
        return cls()

    @classmethod
    def exp(cls, xi: np.ndarray) -> "Sim3":
        """Frame from a tangent vector [translation, rotation, log-scale]."""
        R, t, s = sim3_exp(xi)
        return cls(R, t, s)

    def log(self) -> np.ndarray:
        return sim3_log(self.rotation, self.translation, self.scale)

    def inverse(self) -> "Sim3":
        R_inv = self.rotation.T
        s_inv = 1.0 / self.scale
        return Sim3(R_inv, -s_inv * (R_inv @ self.translation), s_inv)

    def __mul__(self, other: "Sim3") -> "Sim3":
        if not isinstance(other, Sim3):
            return NotImplemented
        return Sim3(
            self.rotation @ other.rotation,
            self.scale * (self.rotation @ other.translation) + self.translation,
            self.scale * other.scale
        )

    def transform(self, x: np.ndarray) -> np.ndarray:
        return self.scale * (self.rotation @ x) + self.translation

    def isclose(self, other: "Sim3", atol: float = 1e-9) -> bool:
        return (np.allclose(self.rotation, other.rotation, atol=atol)
                and np.allclose(self.translation, other.translation, atol=atol)
                and abs(self.scale - other.scale) <= atol)
