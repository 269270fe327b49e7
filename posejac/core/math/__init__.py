"""Math primitives for posejac."""

from .lie_algebra import (
    NEAR_IDENTITY_COS,
    skew,
    kron,
    delta_r,
    ln_so3,
    ln,
    ln_so3xr3,
    m3x9,
    dlnr_dr,
    dvinvt_dr,
    dlnt_dt,
    dexp_x_t_ddelta,
    ddiff_dt1,
    ddiff_dt2,
)
from .se3 import so3_exp, se3_exp, se3_log, compose, invert
from .se2 import se2_exp, se2_log
from .sim3 import sim3_exp, sim3_log
from .groups import SE2, SE3, Sim3
from .camera import project, unproject, uvq_to_xyz, xyz_to_uvq
from .jacobians import FD_STEP, finite_difference_jacobian, check_jacobian

__all__ = [
    "NEAR_IDENTITY_COS",
    "skew",
    "kron",
    "delta_r",
    "ln_so3",
    "ln",
    "ln_so3xr3",
    "m3x9",
    "dlnr_dr",
    "dvinvt_dr",
    "dlnt_dt",
    "dexp_x_t_ddelta",
    "ddiff_dt1",
    "ddiff_dt2",
    "so3_exp",
    "se3_exp",
    "se3_log",
    "compose",
    "invert",
    "se2_exp",
    "se2_log",
    "sim3_exp",
    "sim3_log",
    "SE2",
    "SE3",
    "Sim3",
    "project",
    "unproject",
    "uvq_to_xyz",
    "xyz_to_uvq",
    "FD_STEP",
    "finite_difference_jacobian",
    "check_jacobian",
]
