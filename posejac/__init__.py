"""posejac - Lie-group Jacobians for bundle adjustment and pose graphs

Closed-form and numerical Jacobians of image predictions and relative-pose
constraints over SE(3), SE(2) and Sim(3).
"""

__version__ = "0.1.0"

# Frames and Lie algebra
from .core.math.groups import SE2, SE3, Sim3
from .core.math.jacobians import FD_STEP

# Models
from .core.models.entities import LinearCamera
from .core.models.observations import Observation, WeightedObservation

# Predictions and constraints
from .core.optimization.predictions import AbstractPrediction, SE2XY, SE3XYZ, SE3UVQ
from .core.optimization.constraints import (
    AbstractConFun,
    SE3ConFun,
    SO3xR3ConFun,
    SE3ConFunSO3xR3,
    Sim3ConFun,
)
from .core.optimization.registry import PredictionRegistry, ConstraintRegistry
from .core.optimization.diagnostics import JacobianDiagnostics, JacobianCheckOptions

__all__ = [
    # Version
    "__version__",
    # Frames
    "SE2",
    "SE3",
    "Sim3",
    "FD_STEP",
    # Models
    "LinearCamera",
    "Observation",
    "WeightedObservation",
    # Predictions
    "AbstractPrediction",
    "SE2XY",
    "SE3XYZ",
    "SE3UVQ",
    # Constraints
    "AbstractConFun",
    "SE3ConFun",
    "SO3xR3ConFun",
    "SE3ConFunSO3xR3",
    "Sim3ConFun",
    # Registries
    "PredictionRegistry",
    "ConstraintRegistry",
    # Diagnostics
    "JacobianDiagnostics",
    "JacobianCheckOptions",
]
