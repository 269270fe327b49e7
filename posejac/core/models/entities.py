"""Camera collaborator models."""

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class LinearCamera(BaseModel):
    """Pinhole camera without distortion.

    Maps normalized image coordinates (x/z, y/z) to pixels. Instances are
    frozen so prediction models can share one safely.
    """

    model_config = ConfigDict(frozen=True)

    fx: float = Field(default=1.0, gt=0, description="Focal length in x (pixels)")
    fy: float = Field(default=1.0, gt=0, description="Focal length in y (pixels)")
    cx: float = Field(default=0.0, description="Principal point x (pixels)")
    cy: float = Field(default=0.0, description="Principal point y (pixels)")

    @classmethod
    def from_K(cls, K) -> "LinearCamera":
        """Build from intrinsics [fx, fy, cx, cy]."""
        if len(K) != 4:
            raise ValueError(f"K must have 4 elements, got {len(K)}")
        fx, fy, cx, cy = (float(k) for k in K)
        return cls(fx=fx, fy=fy, cx=cx, cy=cy)

    def map(self, uv: np.ndarray) -> np.ndarray:
        """Normalized coordinates to pixel coordinates."""
        return np.array([self.fx * uv[0] + self.cx, self.fy * uv[1] + self.cy])

    def unmap(self, pixel: np.ndarray) -> np.ndarray:
        """Pixel coordinates to normalized coordinates."""
        return np.array([(pixel[0] - self.cx) / self.fx, (pixel[1] - self.cy) / self.fy])

    def jacobian(self) -> np.ndarray:
        """Derivative of map with respect to the normalized coordinates."""
        return np.diag([self.fx, self.fy])

    def K_matrix(self) -> np.ndarray:
        """3x3 intrinsic matrix."""
        return np.array([
            [self.fx, 0.0, self.cx],
            [0.0, self.fy, self.cy],
            [0.0, 0.0, 1.0]
        ])
