"""Tests for SE(3) operations."""

import numpy as np
import pytest
from scipy.linalg import expm

from posejac.core.math.lie_algebra import skew
from posejac.core.math.se3 import compose, invert, se3_exp, se3_log, so3_exp


def _twist_matrix(xi):
    M = np.zeros((4, 4))
    M[:3, :3] = skew(xi[3:])
    M[:3, 3] = xi[:3]
    return M


class TestSE3:
    """Test SE(3) operations."""

    def test_se3_exp_identity(self):
        """Test SE(3) exponential map at identity."""
        xi = np.zeros(6)
        R, t = se3_exp(xi)

        np.testing.assert_allclose(R, np.eye(3), atol=1e-10)
        np.testing.assert_allclose(t, np.zeros(3), atol=1e-10)

    def test_se3_exp_small_rotation(self):
        """Test SE(3) exponential map for small rotations."""
        xi = np.array([0.1, 0.2, 0.3, 0.01, 0.02, 0.03])
        R, t = se3_exp(xi)

        assert abs(np.linalg.det(R) - 1.0) < 1e-10
        np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-10)

    @pytest.mark.parametrize("scale", [1e-9, 1e-4, 1e-2, 0.5, 1.0])
    def test_se3_exp_matches_matrix_exponential(self, scale):
        """Test SE(3) exponential against the 4x4 matrix exponential."""
        xi = scale * np.array([1.0, 2.0, 3.0, 1.5, 2.5, -1.0])
        R, t = se3_exp(xi)
        M = expm(_twist_matrix(xi))

        np.testing.assert_allclose(R, M[:3, :3], atol=1e-12)
        np.testing.assert_allclose(t, M[:3, 3], atol=1e-12)

    def test_so3_exp_matches_matrix_exponential(self):
        """Test Rodrigues' formula against the matrix exponential."""
        omega = np.array([0.3, -0.8, 1.1])
        np.testing.assert_allclose(so3_exp(omega), expm(skew(omega)), atol=1e-12)

    def test_se3_round_trip(self):
        """Test SE(3) exp/log round trip."""
        xi_original = np.array([0.5, 1.0, 1.5, 0.8, 1.2, 0.4])
        R, t = se3_exp(xi_original)
        xi_recovered = se3_log(R, t)

        np.testing.assert_allclose(xi_original, xi_recovered, atol=1e-10)

    def test_se3_round_trip_near_identity(self):
        """Test SE(3) exp/log round trip below the Taylor threshold."""
        xi_original = np.array([0.5, -1.0, 1.5, 1e-4, -2e-4, 5e-5])
        R, t = se3_exp(xi_original)

        np.testing.assert_allclose(se3_log(R, t), xi_original, atol=1e-12)

    def test_se3_log_identity(self):
        """Test SE(3) logarithm at identity."""
        xi = se3_log(np.eye(3), np.zeros(3))

        np.testing.assert_allclose(xi, np.zeros(6), atol=1e-10)

    def test_compose(self):
        """Test SE(3) composition."""
        R1, t1 = se3_exp(np.array([0.1, 0.2, 0.3, 0.4, 0.5, 0.6]))
        R2, t2 = se3_exp(np.array([0.2, 0.3, 0.4, 0.1, 0.2, 0.3]))

        R_comp, t_comp = compose(R1, t1, R2, t2)

        assert abs(np.linalg.det(R_comp) - 1.0) < 1e-10
        np.testing.assert_allclose(R_comp @ R_comp.T, np.eye(3), atol=1e-10)

        R_test, t_test = compose(R1, t1, np.eye(3), np.zeros(3))

        np.testing.assert_allclose(R_test, R1, atol=1e-10)
        np.testing.assert_allclose(t_test, t1, atol=1e-10)

    def test_invert(self):
        """Test SE(3) inversion."""
        R, t = se3_exp(np.array([1.0, 2.0, 3.0, 0.5, 1.0, 1.5]))

        R_inv, t_inv = invert(R, t)
        R_comp, t_comp = compose(R, t, R_inv, t_inv)

        np.testing.assert_allclose(R_comp, np.eye(3), atol=1e-10)
        np.testing.assert_allclose(t_comp, np.zeros(3), atol=1e-10)

    def test_invalid_input_shapes(self):
        """Test error handling for invalid input shapes."""
        with pytest.raises(ValueError):
            se3_exp(np.array([1, 2, 3]))

        with pytest.raises(ValueError):
            se3_log(np.array([[1, 2], [3, 4]]), np.array([1, 2, 3]))

        with pytest.raises(ValueError):
            se3_log(np.eye(3), np.array([1, 2]))

        with pytest.raises(ValueError):
            so3_exp(np.zeros(4))
