"""Prediction models, constraint functions and their diagnostics."""

from .predictions import (
    AbstractPrediction,
    SE3AbstractPoint,
    SE2AbstractPoint,
    SE2XY,
    SE3XYZ,
    SE3UVQ,
)
from .constraints import (
    AbstractConFun,
    SE3ConFun,
    SO3xR3ConFun,
    SE3ConFunSO3xR3,
    Sim3ConFun,
)
from .registry import PredictionRegistry, ConstraintRegistry
from .diagnostics import (
    JacobianCheckOptions,
    JacobianReport,
    JacobianDiagnostics,
    analyze_jacobian_rank,
)

__all__ = [
    "AbstractPrediction",
    "SE3AbstractPoint",
    "SE2AbstractPoint",
    "SE2XY",
    "SE3XYZ",
    "SE3UVQ",
    "AbstractConFun",
    "SE3ConFun",
    "SO3xR3ConFun",
    "SE3ConFunSO3xR3",
    "Sim3ConFun",
    "PredictionRegistry",
    "ConstraintRegistry",
    "JacobianCheckOptions",
    "JacobianReport",
    "JacobianDiagnostics",
    "analyze_jacobian_rank",
]
