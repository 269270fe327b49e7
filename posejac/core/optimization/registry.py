"""Registries for the closed sets of prediction and constraint models."""

from typing import List

from .constraints import (
    AbstractConFun,
    SE3ConFun,
    SE3ConFunSO3xR3,
    Sim3ConFun,
    SO3xR3ConFun,
)
from .predictions import AbstractPrediction, SE2XY, SE3UVQ, SE3XYZ


class PredictionRegistry:
    """Registry for prediction model types."""

    _prediction_types = {
        "se2_xy": SE2XY,
        "se3_xyz": SE3XYZ,
        "se3_uvq": SE3UVQ,
    }

    @classmethod
    def get_prediction_class(cls, prediction_type: str):
        """Get prediction class by type string."""
        if prediction_type not in cls._prediction_types:
            raise ValueError(f"Unknown prediction type: {prediction_type}")
        return cls._prediction_types[prediction_type]

    @classmethod
    def list_prediction_types(cls) -> List[str]:
        """List all available prediction types."""
        return list(cls._prediction_types.keys())

    @classmethod
    def create_prediction(cls, prediction_type: str, **kwargs) -> AbstractPrediction:
        """Create prediction model of specified type."""
        prediction_class = cls.get_prediction_class(prediction_type)
        return prediction_class(**kwargs)


class ConstraintRegistry:
    """Registry for relative pose constraint types."""

    _constraint_types = {
        "se3": SE3ConFun,
        "se3_so3xr3": SE3ConFunSO3xR3,
        "so3xr3": SO3xR3ConFun,
        "sim3": Sim3ConFun,
    }

    @classmethod
    def get_constraint_class(cls, constraint_type: str):
        """Get constraint class by type string."""
        if constraint_type not in cls._constraint_types:
            raise ValueError(f"Unknown constraint type: {constraint_type}")
        return cls._constraint_types[constraint_type]

    @classmethod
    def list_constraint_types(cls) -> List[str]:
        """List all available constraint types."""
        return list(cls._constraint_types.keys())

    @classmethod
    def create_constraint(cls, constraint_type: str) -> AbstractConFun:
        """Create constraint function of specified type."""
        return cls.get_constraint_class(constraint_type)()
