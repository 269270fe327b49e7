"""Observation records consumed by optimizers."""

from typing import List, Optional

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator


class Observation(BaseModel):
    """Measurement of a point from a frame.

    Ids are opaque integers indexing the caller's own pose and point storage.
    """

    point_id: int = Field(description="Id of the observed point")
    frame_id: int = Field(description="Id of the observing frame")
    obs: List[float] = Field(min_length=1, description="Measurement vector")

    @field_validator('obs')
    @classmethod
    def validate_obs(cls, v):
        if not all(np.isfinite(v)):
            raise ValueError("obs must be finite")
        return v

    @property
    def obs_dim(self) -> int:
        return len(self.obs)

    def to_numpy(self) -> np.ndarray:
        """Convert measurement to numpy array."""
        return np.array(self.obs)

    def residual(self, prediction: np.ndarray) -> np.ndarray:
        """Measurement minus prediction."""
        prediction = np.atleast_1d(prediction)
        if prediction.shape != (self.obs_dim,):
            raise ValueError(
                f"prediction must have shape ({self.obs_dim},), got {prediction.shape}"
            )
        return self.to_numpy() - prediction


class WeightedObservation(Observation):
    """Observation with an inverse covariance (information) matrix.

    Without an explicit matrix the information is the identity.
    """

    information: Optional[List[List[float]]] = Field(
        default=None,
        description="ObsDim x ObsDim symmetric information matrix"
    )

    @model_validator(mode='after')
    def validate_information(self):
        if self.information is None:
            return self
        Lambda = np.array(self.information, dtype=float)
        if Lambda.shape != (self.obs_dim, self.obs_dim):
            raise ValueError(
                f"information must be {self.obs_dim}x{self.obs_dim}, got {Lambda.shape}"
            )
        if not np.allclose(Lambda, Lambda.T):
            raise ValueError("information must be symmetric")
        return self

    def information_matrix(self) -> np.ndarray:
        if self.information is None:
            return np.eye(self.obs_dim)
        return np.array(self.information, dtype=float)

    def chi2(self, prediction: np.ndarray) -> float:
        """Squared Mahalanobis error r^T Lambda r."""
        r = self.residual(prediction)
        return float(r @ self.information_matrix() @ r)
