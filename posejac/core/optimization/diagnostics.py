"""Jacobian verification and analysis tools."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
from scipy.linalg import svd

from ..math.jacobians import check_jacobian, finite_difference_jacobian
from ..synthetic.scene_gen import OperatingPointGenerator
from .constraints import AbstractConFun
from .predictions import AbstractPrediction


@dataclass
class JacobianCheckOptions:
    """Options for comparing analytic and numerical Jacobians."""

    step: float = 1e-6
    method: str = "central"
    atol: float = 1e-6
    rtol: float = 1e-6
    n_samples: int = 100
    max_angle: float = 2.5
    seed: Optional[int] = None


@dataclass
class JacobianReport:
    """Outcome of a Jacobian check over sampled operating points."""

    name: str
    n_samples: int
    max_error: float = 0.0
    failures: List[int] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures


class JacobianDiagnostics:
    """Checks closed-form Jacobians against finite differences."""

    def __init__(self, options: Optional[JacobianCheckOptions] = None):
        """Initialize diagnostics.

        Args:
            options: Check options
        """
        self.options = options or JacobianCheckOptions()
        self.generator = OperatingPointGenerator(self.options.seed)
        self.logger = logging.getLogger(__name__)

    def _numeric(self, func, dof: int) -> np.ndarray:
        return finite_difference_jacobian(
            func, np.zeros(dof), self.options.step, self.options.method
        )

    def _record(self, report: JacobianReport, sample: int, J_analytic, J_numeric) -> None:
        is_correct, max_error = check_jacobian(
            J_analytic, J_numeric, atol=self.options.atol, rtol=self.options.rtol
        )
        report.max_error = max(report.max_error, max_error)
        if not is_correct and sample not in report.failures:
            report.failures.append(sample)

    def _finish(self, report: JacobianReport) -> JacobianReport:
        if report.passed:
            self.logger.info(
                f"{report.name}: {report.n_samples} samples agree, max error {report.max_error:.2e}"
            )
        else:
            self.logger.warning(
                f"{report.name}: {len(report.failures)}/{report.n_samples} samples disagree, "
                f"max error {report.max_error:.2e}"
            )
        return report

    def check_prediction(self, model: AbstractPrediction) -> JacobianReport:
        """Compare frame_jac and point_jac of a model with finite differences.

        Args:
            model: Prediction model to check

        Returns:
            Report over options.n_samples random visible operating points
        """
        report = JacobianReport(type(model).__name__, self.options.n_samples)

        for sample in range(self.options.n_samples):
            T = self.generator.random_frame(model.frame_type, self.options.max_angle)
            x = self.generator.random_point(model.point_parametrization, T)

            J_frame = self._numeric(
                lambda eps: model.map(model.add_frame(T, eps), x), model.frame_dof
            )
            J_point = self._numeric(
                lambda eps: model.map(T, model.add_point(x, eps)), model.point_dof
            )
            self._record(report, sample, model.frame_jac(T, x), J_frame)
            self._record(report, sample, model.point_jac(T, x), J_point)

        return self._finish(report)

    def check_constraint(
        self,
        confun: AbstractConFun,
        residual_angle: Optional[float] = None
    ) -> JacobianReport:
        """Compare d_diff_dt1 and d_diff_dt2 of a constraint with finite differences.

        Args:
            confun: Constraint function to check
            residual_angle: Rotation angle of the edge residual; random in
                [0, options.max_angle] when None

        Returns:
            Report over options.n_samples random edges
        """
        report = JacobianReport(type(confun).__name__, self.options.n_samples)
        rng = self.generator.rng

        for sample in range(self.options.n_samples):
            angle = residual_angle
            if angle is None:
                angle = rng.uniform(0.0, self.options.max_angle)
            T1, C, T2 = self.generator.random_edge(
                confun.frame_type,
                residual_angle=angle,
                residual_translation=rng.uniform(0.0, 2.0),
                max_angle=self.options.max_angle
            )

            J1 = self._numeric(lambda eps: confun.diff(confun.add(T1, eps), C, T2), confun.trans_dof)
            J2 = self._numeric(lambda eps: confun.diff(T1, C, confun.add(T2, eps)), confun.trans_dof)
            self._record(report, sample, confun.d_diff_dt1(T1, C, T2), J1)
            self._record(report, sample, confun.d_diff_dt2(T1, C, T2), J2)

        return self._finish(report)


def analyze_jacobian_rank(jacobian: np.ndarray, tolerance: float = 1e-6) -> Dict[str, Any]:
    """Analyze Jacobian matrix rank and condition.

    Args:
        jacobian: Jacobian matrix
        tolerance: Numerical tolerance for rank determination

    Returns:
        Dictionary with rank analysis
    """
    if jacobian.size == 0:
        return {
            "rank": 0,
            "full_rank": True,
            "condition_number": 1.0,
            "singular_values": [],
            "nullspace_dimension": 0
        }

    if not np.all(np.isfinite(jacobian)):
        logging.getLogger(__name__).warning("Jacobian contains non-finite entries")
        return {
            "error": "Jacobian contains non-finite entries",
            "rank": -1,
            "full_rank": False,
            "condition_number": np.inf,
            "singular_values": [],
            "nullspace_dimension": -1
        }

    s = svd(jacobian, compute_uv=False)

    # Determine numerical rank
    rank = int(np.sum(s > tolerance * s[0])) if s[0] > 0 else 0
    full_rank = rank == min(jacobian.shape)
    nullspace_dim = jacobian.shape[1] - rank

    # Condition number
    condition_number = s[0] / s[-1] if s[-1] > 0 else np.inf

    return {
        "rank": rank,
        "full_rank": bool(full_rank),
        "condition_number": float(condition_number),
        "singular_values": s.tolist(),
        "nullspace_dimension": int(nullspace_dim),
        "matrix_shape": jacobian.shape,
        "largest_singular_value": float(s[0]),
        "smallest_singular_value": float(s[-1])
    }
