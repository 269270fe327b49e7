"""Random operating points for exercising prediction and constraint models."""

import numpy as np
from typing import Optional, Tuple
from scipy.spatial.transform import Rotation

from ..math.camera import unproject, xyz_to_uvq
from ..math.groups import SE2, SE3, Sim3
from ..math.se3 import so3_exp


class OperatingPointGenerator:
    """Generator for random frames, points and constraint edges."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize generator.

        Args:
            seed: Random seed for reproducible generation
        """
        self.rng = np.random.default_rng(seed)

    def random_direction(self) -> np.ndarray:
        """Uniformly distributed unit 3-vector."""
        v = self.rng.standard_normal(3)
        return v / np.linalg.norm(v)

    def random_rotation(self, max_angle: float = 2.5, min_angle: float = 0.0) -> np.ndarray:
        """Rotation about a uniformly random axis with angle in [min_angle, max_angle]."""
        axis = self.random_direction()
        angle = self.rng.uniform(min_angle, max_angle)
        return Rotation.from_rotvec(angle * axis).as_matrix()

    def random_se3(self, max_angle: float = 2.5, translation_scale: float = 2.0) -> SE3:
        return SE3(
            self.random_rotation(max_angle),
            translation_scale * self.rng.standard_normal(3)
        )

    def random_se2(self, max_angle: float = 2.5, translation_scale: float = 2.0) -> SE2:
        theta = self.rng.uniform(-max_angle, max_angle)
        return SE2.exp(np.array([*(translation_scale * self.rng.standard_normal(2)), theta]))

    def random_sim3(
        self,
        max_angle: float = 2.5,
        translation_scale: float = 2.0,
        log_scale_std: float = 0.3
    ) -> Sim3:
        return Sim3(
            self.random_rotation(max_angle),
            translation_scale * self.rng.standard_normal(3),
            float(np.exp(log_scale_std * self.rng.standard_normal()))
        )

    def random_frame(self, frame_type: type, max_angle: float = 2.5):
        """Random frame of the given type."""
        if frame_type is SE3:
            return self.random_se3(max_angle)
        if frame_type is SE2:
            return self.random_se2(max_angle)
        if frame_type is Sim3:
            return self.random_sim3(max_angle)
        raise ValueError(f"Unsupported frame type: {frame_type}")

    def point_in_front(
        self,
        T: SE3,
        depth_range: Tuple[float, float] = (2.0, 8.0),
        field_of_view: float = 0.6
    ) -> np.ndarray:
        """World point whose camera-frame depth lies in depth_range.

        Args:
            T: World-to-camera transformation
            depth_range: (min_depth, max_depth) in the camera frame
            field_of_view: Half-width of the normalized image region sampled

        Returns:
            3-element world point
        """
        uv = self.rng.uniform(-field_of_view, field_of_view, 2)
        depth = self.rng.uniform(*depth_range)
        return T.inverse().transform(unproject(uv, depth))

    def planar_point_in_front(
        self,
        T: SE2,
        depth_range: Tuple[float, float] = (2.0, 8.0),
        field_of_view: float = 0.6
    ) -> np.ndarray:
        """2D world point in front of (positive y in) the sensor frame T."""
        depth = self.rng.uniform(*depth_range)
        p = np.array([depth * self.rng.uniform(-field_of_view, field_of_view), depth])
        return T.inverse().transform(p)

    def random_point(self, parametrization: str, T) -> np.ndarray:
        """Random point in the given parametrization, visible from T."""
        if parametrization == "xyz":
            return self.point_in_front(T)
        if parametrization == "uvq":
            return xyz_to_uvq(self.point_in_front(T))
        if parametrization == "xy":
            return self.planar_point_in_front(T)
        raise ValueError(f"Unknown point parametrization: {parametrization}")

    def random_edge(
        self,
        frame_type: type = SE3,
        residual_angle: float = 0.0,
        residual_translation: float = 0.0,
        max_angle: float = 2.5
    ):
        """Constraint edge (T1, C, T2) with a controlled residual.

        The difference D = C * T1 * T2^-1 rotates by exactly residual_angle
        and translates by a vector of norm residual_translation.
        """
        if frame_type is not SE3 and frame_type is not Sim3:
            raise ValueError(f"Unsupported edge frame type: {frame_type}")

        T1 = self.random_frame(frame_type, max_angle)
        C = self.random_frame(frame_type, max_angle)

        axis = self.random_direction()
        direction = self.random_direction()
        R_d = so3_exp(residual_angle * axis)
        t_d = residual_translation * direction
        if frame_type is Sim3:
            D = Sim3(R_d, t_d, 1.0)
        else:
            D = SE3(R_d, t_d)

        T2 = D.inverse() * C * T1
        return T1, C, T2
