"""Relative-pose constraint functions for pose-graph optimization.

Each function measures the residual of an edge (T1, C, T2) between two
absolute poses T1, T2 and a measured relative transformation C. The
residual vanishes when T2 == C * T1.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..math.groups import SE3, Sim3
from ..math.jacobians import FD_STEP, finite_difference_jacobian
from ..math.lie_algebra import (
    ddiff_dt1,
    ddiff_dt2,
    dexp_x_t_ddelta,
    dlnt_dt,
    ln,
    ln_so3xr3,
)
from ..math.se3 import so3_exp


class AbstractConFun(ABC):
    """Base class for relative pose constraints.

    trans_dof: DoF of the transformation and of the residual.
    """

    frame_type: type
    trans_dof: int

    @abstractmethod
    def diff(self, T1, C, T2) -> np.ndarray:
        """Residual between T1, T2 and the relative constraint C."""
        pass

    def d_diff_dt1(self, T1, C, T2) -> np.ndarray:
        """Jacobian with respect to T1; numerical by default."""
        return finite_difference_jacobian(
            lambda eps: self.diff(self.add(T1, eps), C, T2),
            np.zeros(self.trans_dof),
            FD_STEP
        )

    def d_diff_dt2(self, T1, C, T2) -> np.ndarray:
        """Jacobian with respect to T2; numerical by default."""
        return finite_difference_jacobian(
            lambda eps: self.diff(T1, C, self.add(T2, eps)),
            np.zeros(self.trans_dof),
            FD_STEP
        )

    @abstractmethod
    def add(self, T, delta: np.ndarray):
        """Incremental update delta of transformation T."""
        pass


def _difference(T1, C, T2):
    return (C * T1) * T2.inverse()


class SE3ConFun(AbstractConFun):
    """Rigid SE3 constraint with the full SE3 logarithm as residual.

    The residual is ordered [rotation, translation]; perturbations are
    ordered [translation, rotation].
    """

    frame_type = SE3
    trans_dof = 6

    def diff(self, T1: SE3, C: SE3, T2: SE3) -> np.ndarray:
        D = _difference(T1, C, T2)
        return ln(D.rotation, D.translation)

    def d_diff_dt1(self, T1: SE3, C: SE3, T2: SE3) -> np.ndarray:
        dT1_dlnT1 = dexp_x_t_ddelta(T1)
        dD_dT1 = ddiff_dt1(C, T2)
        dlnD_dD = dlnt_dt(_difference(T1, C, T2))
        return dlnD_dD @ dD_dT1 @ dT1_dlnT1

    def d_diff_dt2(self, T1: SE3, C: SE3, T2: SE3) -> np.ndarray:
        dT2_dlnT2 = dexp_x_t_ddelta(T2)
        dD_dT2 = ddiff_dt2(T1, C, T2)
        dlnD_dD = dlnt_dt(_difference(T1, C, T2))
        return dlnD_dD @ dD_dT2 @ dT2_dlnT2

    def add(self, T: SE3, delta: np.ndarray) -> SE3:
        return SE3.exp(delta) * T


class SO3xR3ConFun(AbstractConFun):
    """Pseudo-rigid <SO3, R3> constraint.

    Rotation and translation are updated independently:
    R' = exp(delta[3:6]) R and t' = t + delta[0:3].
    """

    frame_type = SE3
    trans_dof = 6

    def diff(self, T1: SE3, C: SE3, T2: SE3) -> np.ndarray:
        return ln_so3xr3(_difference(T1, C, T2))

    def add(self, T: SE3, delta: np.ndarray) -> SE3:
        delta = np.asarray(delta, dtype=float)
        R = so3_exp(delta[3:6]) @ T.rotation
        return SE3(R, T.translation + delta[0:3])


class SE3ConFunSO3xR3(AbstractConFun):
    """Rigid SE3 constraint using the <SO3, R3> logarithm as residual."""

    frame_type = SE3
    trans_dof = 6

    def diff(self, T1: SE3, C: SE3, T2: SE3) -> np.ndarray:
        return ln_so3xr3(_difference(T1, C, T2))

    def add(self, T: SE3, delta: np.ndarray) -> SE3:
        return SE3.exp(delta) * T


class Sim3ConFun(AbstractConFun):
    """Similarity Sim3 constraint; residual ordered [translation, rotation, log-scale]."""

    frame_type = Sim3
    trans_dof = 7

    def diff(self, T1: Sim3, C: Sim3, T2: Sim3) -> np.ndarray:
        return _difference(T1, C, T2).log()

    def add(self, T: Sim3, delta: np.ndarray) -> Sim3:
        return Sim3.exp(delta) * T
