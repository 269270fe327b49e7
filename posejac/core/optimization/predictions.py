"""Prediction models mapping a frame and a point to an observation."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..math.camera import project, uvq_to_xyz
from ..math.groups import SE2, SE3
from ..math.jacobians import FD_STEP, finite_difference_jacobian
from ..models.entities import LinearCamera

logger = logging.getLogger(__name__)


class AbstractPrediction(ABC):
    """Base class for prediction models.

    Subclasses fix the dimensions:
        frame_dof: DoF of the frame perturbation (6 for SE3)
        point_par_num: number of stored point parameters
        point_dof: DoF of the point perturbation
        obs_dim: dimension of an observation (2 for an image point)

    Jacobians default to one-sided finite differences with step FD_STEP;
    concrete models override them with closed forms.
    """

    frame_type: type
    point_parametrization: str
    frame_dof: int
    point_par_num: int
    point_dof: int
    obs_dim: int

    @abstractmethod
    def map(self, T, x: np.ndarray) -> np.ndarray:
        """Map point x into frame T and create an observation."""
        pass

    def frame_jac(self, T, x: np.ndarray) -> np.ndarray:
        """Jacobian (obs_dim x frame_dof) with respect to a frame perturbation."""
        return finite_difference_jacobian(
            lambda eps: self.map(self.add_frame(T, eps), x),
            np.zeros(self.frame_dof),
            FD_STEP
        )

    def point_jac(self, T, x: np.ndarray) -> np.ndarray:
        """Jacobian (obs_dim x point_dof) with respect to a point perturbation."""
        return finite_difference_jacobian(
            lambda eps: self.map(T, self.add_point(x, eps)),
            np.zeros(self.point_dof),
            FD_STEP
        )

    @abstractmethod
    def add_frame(self, T, delta: np.ndarray):
        """Apply an incremental update delta to frame T."""
        pass

    def add_point(self, x: np.ndarray, delta: np.ndarray) -> np.ndarray:
        """Apply an incremental update delta to point x."""
        return np.asarray(x, dtype=float) + delta

    @abstractmethod
    def is_valid(self, T, x: np.ndarray) -> bool:
        """Whether (T, x) satisfies the model's precondition."""
        pass

    @abstractmethod
    def first_rot_id(self) -> int:
        pass

    @abstractmethod
    def num_rot_pars(self) -> int:
        pass

    @abstractmethod
    def first_trans_id(self) -> int:
        pass

    @abstractmethod
    def num_trans_pars(self) -> int:
        pass

    def _invalid(self, rows: int, cols: Optional[int] = None) -> np.ndarray:
        logger.debug("%s: degenerate point depth, returning NaN", type(self).__name__)
        shape = (rows,) if cols is None else (rows, cols)
        return np.full(shape, np.nan)


class SE3AbstractPoint(AbstractPrediction):
    """Prediction models over 3D rigid transformations."""

    frame_type = SE3
    frame_dof = 6

    def add_frame(self, T: SE3, delta: np.ndarray) -> SE3:
        return SE3.exp(delta) * T

    def first_rot_id(self) -> int:
        return 3

    def num_rot_pars(self) -> int:
        return 3

    def first_trans_id(self) -> int:
        return 0

    def num_trans_pars(self) -> int:
        return 3


class SE2AbstractPoint(AbstractPrediction):
    """Prediction models over planar rigid transformations."""

    frame_type = SE2
    frame_dof = 3

    def add_frame(self, T: SE2, delta: np.ndarray) -> SE2:
        return SE2.exp(delta) * T

    def first_rot_id(self) -> int:
        return 2

    def num_rot_pars(self) -> int:
        return 1

    def first_trans_id(self) -> int:
        return 0

    def num_trans_pars(self) -> int:
        return 2


class SE2XY(SE2AbstractPoint):
    """Planar bearing-only sensor observing 2D points.

    The observation is the 1D projection x/y of the point in the sensor
    frame, i.e. the tangent of its bearing from the optical (y) axis.
    """

    point_parametrization = "xy"
    point_par_num = 2
    point_dof = 2
    obs_dim = 1

    def map(self, T: SE2, x: np.ndarray) -> np.ndarray:
        p = T.transform(x)
        if p[1] <= 0:
            return self._invalid(1)
        return project(p)

    def frame_jac(self, T: SE2, x: np.ndarray) -> np.ndarray:
        p = T.transform(x)
        if p[1] <= 0:
            return self._invalid(1, 3)
        dproj = np.array([1.0 / p[1], -p[0] / p[1] ** 2])
        # exp(delta) * p ~ p + delta[:2] + delta[2] * (-p[1], p[0])
        return np.array([[dproj[0], dproj[1], dproj @ np.array([-p[1], p[0]])]])

    def point_jac(self, T: SE2, x: np.ndarray) -> np.ndarray:
        p = T.transform(x)
        if p[1] <= 0:
            return self._invalid(1, 2)
        dproj = np.array([[1.0 / p[1], -p[0] / p[1] ** 2]])
        return dproj @ T.rotation

    def is_valid(self, T: SE2, x: np.ndarray) -> bool:
        return bool(T.transform(x)[1] > 0)


def _projection_frame_jacobian(p: np.ndarray) -> np.ndarray:
    """d(x/z, y/z) / d(exp(delta) * p) for delta = [translation, rotation]."""
    x, y, z = p
    z_2 = z * z

    J_frame = np.empty((2, 6))
    J_frame[0] = [1.0 / z, 0.0, -x / z_2, -x * y / z_2, 1.0 + x * x / z_2, -y / z]
    J_frame[1] = [0.0, 1.0 / z, -y / z_2, -(1.0 + y * y / z_2), x * y / z_2, x / z]
    return J_frame


def _projection_point_factor(p: np.ndarray) -> np.ndarray:
    x, y, z = p
    return np.array([
        [1.0, 0.0, -x / z],
        [0.0, 1.0, -y / z]
    ])


class SE3XYZ(SE3AbstractPoint):
    """Euclidean 3D point observed by a pinhole camera."""

    point_parametrization = "xyz"
    point_par_num = 3
    point_dof = 3
    obs_dim = 2

    def __init__(self, camera: Optional[LinearCamera] = None):
        """Initialize with camera intrinsics (unit focal length by default)."""
        self.camera = camera if camera is not None else LinearCamera()

    def map(self, T: SE3, x: np.ndarray) -> np.ndarray:
        p = T.transform(x)
        if p[2] <= 0:
            return self._invalid(2)
        return self.camera.map(project(p))

    def frame_jac(self, T: SE3, x: np.ndarray) -> np.ndarray:
        # Following Ethan Eade's PhD thesis
        p = T.transform(x)
        if p[2] <= 0:
            return self._invalid(2, 6)
        return self.camera.jacobian() @ _projection_frame_jacobian(p)

    def point_jac(self, T: SE3, x: np.ndarray) -> np.ndarray:
        p = T.transform(x)
        if p[2] <= 0:
            return self._invalid(2, 3)
        J_x = (1.0 / p[2]) * _projection_point_factor(p) @ T.rotation
        return self.camera.jacobian() @ J_x

    def is_valid(self, T: SE3, x: np.ndarray) -> bool:
        return bool(T.transform(x)[2] > 0)


class SE3UVQ(SE3AbstractPoint):
    """Inverse-depth point (u, v, q) observed by a pinhole camera.

    The point is (u/q, v/q, 1/q) in world coordinates; q must be non-zero.
    """

    point_parametrization = "uvq"
    point_par_num = 3
    point_dof = 3
    obs_dim = 2

    def __init__(self, camera: Optional[LinearCamera] = None):
        """Initialize with camera intrinsics (unit focal length by default)."""
        self.camera = camera if camera is not None else LinearCamera()

    def _camera_point(self, T: SE3, uvq: np.ndarray) -> Optional[np.ndarray]:
        if uvq[2] == 0:
            return None
        p = T.transform(uvq_to_xyz(uvq))
        if p[2] <= 0:
            return None
        return p

    def map(self, T: SE3, uvq: np.ndarray) -> np.ndarray:
        p = self._camera_point(T, uvq)
        if p is None:
            return self._invalid(2)
        return self.camera.map(project(p))

    def frame_jac(self, T: SE3, uvq: np.ndarray) -> np.ndarray:
        p = self._camera_point(T, uvq)
        if p is None:
            return self._invalid(2, 6)
        return self.camera.jacobian() @ _projection_frame_jacobian(p)

    def point_jac(self, T: SE3, uvq: np.ndarray) -> np.ndarray:
        p = self._camera_point(T, uvq)
        if p is None:
            return self._invalid(2, 3)

        R = T.rotation
        R12t = np.column_stack([R[:, 0], R[:, 1], T.translation])

        J_x = 1.0 / (p[2] * uvq[2]) * _projection_point_factor(p) @ R12t
        return self.camera.jacobian() @ J_x

    def is_valid(self, T: SE3, uvq: np.ndarray) -> bool:
        return self._camera_point(T, uvq) is not None
