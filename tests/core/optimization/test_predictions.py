"""Tests for prediction models."""

import logging

import numpy as np
import pytest

from posejac.core.math.camera import xyz_to_uvq
from posejac.core.math.groups import SE2, SE3
from posejac.core.models.entities import LinearCamera
from posejac.core.optimization.diagnostics import JacobianCheckOptions, JacobianDiagnostics
from posejac.core.optimization.predictions import (
    AbstractPrediction,
    SE2XY,
    SE3UVQ,
    SE3XYZ,
)

CAMERA = LinearCamera(fx=520.0, fy=515.0, cx=320.0, cy=240.0)


@pytest.fixture
def frame():
    """Frame close to the identity."""
    return SE3.exp(np.array([0.1, -0.2, 0.3, 0.05, 0.02, -0.04]))


class TestSE3XYZ:
    """Test the Euclidean point model."""

    def test_dimensions(self):
        """Test model dimensions."""
        model = SE3XYZ()

        assert model.frame_dof == 6
        assert model.point_par_num == 3
        assert model.point_dof == 3
        assert model.obs_dim == 2
        assert model.frame_type is SE3

    def test_map_on_optical_axis(self):
        """Test a point on the optical axis projects to the origin."""
        model = SE3XYZ()
        np.testing.assert_allclose(model.map(SE3.identity(), np.array([0.0, 0.0, 5.0])), [0.0, 0.0])

    def test_map_off_axis(self):
        """Test a point off the optical axis."""
        model = SE3XYZ()
        np.testing.assert_allclose(
            model.map(SE3.identity(), np.array([0.05, 0.0, 5.0])), [0.01, 0.0], atol=1e-15
        )

    def test_map_with_intrinsics(self):
        """Test pixel observation with a calibrated camera."""
        model = SE3XYZ(CAMERA)
        np.testing.assert_allclose(
            model.map(SE3.identity(), np.array([0.05, 0.0, 5.0])), [325.2, 240.0]
        )

    def test_map_applies_frame(self):
        """Test the point is transformed into the frame before projection."""
        model = SE3XYZ()
        T = SE3(np.eye(3), np.array([1.0, 0.0, 2.0]))

        np.testing.assert_allclose(model.map(T, np.array([0.0, 0.0, 2.0])), [0.25, 0.0])

    def test_add_frame_zero_is_no_op(self, frame):
        """Test adding a zero increment leaves the frame unchanged."""
        assert SE3XYZ().add_frame(frame, np.zeros(6)).isclose(frame, atol=1e-15)

    def test_add_frame_is_left_multiplication(self, frame):
        """Test add_frame(T, delta) == exp(delta) * T."""
        delta = np.array([0.1, 0.0, -0.2, 0.3, -0.1, 0.2])
        assert SE3XYZ().add_frame(frame, delta).isclose(SE3.exp(delta) * frame)

    def test_add_point(self):
        """Test points are updated additively."""
        np.testing.assert_allclose(
            SE3XYZ().add_point(np.array([1.0, 2.0, 3.0]), np.array([0.5, 0.0, -1.0])),
            [1.5, 2.0, 2.0]
        )

    def test_index_accessors(self):
        """Test translation and rotation blocks of the frame increment."""
        model = SE3XYZ()

        assert model.first_trans_id() == 0
        assert model.num_trans_pars() == 3
        assert model.first_rot_id() == 3
        assert model.num_rot_pars() == 3

    def test_analytic_jacobians_match_finite_differences(self):
        """Test closed forms against central differences at random points."""
        diagnostics = JacobianDiagnostics(JacobianCheckOptions(seed=1))
        report = diagnostics.check_prediction(SE3XYZ())

        assert report.n_samples == 100
        assert report.passed, report.failures

    def test_analytic_jacobians_with_intrinsics(self):
        """Test closed forms with a calibrated camera."""
        diagnostics = JacobianDiagnostics(JacobianCheckOptions(seed=2, n_samples=50))
        assert diagnostics.check_prediction(SE3XYZ(CAMERA)).passed

    def test_default_jacobians_match_closed_form(self, frame):
        """Test the one-sided finite-difference defaults."""
        model = SE3XYZ()
        x = np.array([0.3, -0.2, 4.0])

        np.testing.assert_allclose(
            AbstractPrediction.frame_jac(model, frame, x), model.frame_jac(frame, x), atol=5e-3
        )
        np.testing.assert_allclose(
            AbstractPrediction.point_jac(model, frame, x), model.point_jac(frame, x), atol=5e-3
        )

    def test_frame_jacobian_at_optical_axis(self):
        """Test frame Jacobian entries for a point on the optical axis."""
        J = SE3XYZ().frame_jac(SE3.identity(), np.array([0.0, 0.0, 2.0]))

        np.testing.assert_allclose(J, [
            [0.5, 0.0, 0.0, 0.0, 1.0, 0.0],
            [0.0, 0.5, 0.0, -1.0, 0.0, 0.0]
        ])

    def test_point_behind_camera(self, caplog):
        """Test points behind the camera yield NaN and fail is_valid."""
        model = SE3XYZ()
        x = np.array([0.0, 0.0, -1.0])

        with caplog.at_level(logging.DEBUG, logger="posejac.core.optimization.predictions"):
            assert np.all(np.isnan(model.map(SE3.identity(), x)))

        assert model.frame_jac(SE3.identity(), x).shape == (2, 6)
        assert np.all(np.isnan(model.frame_jac(SE3.identity(), x)))
        assert np.all(np.isnan(model.point_jac(SE3.identity(), x)))
        assert not model.is_valid(SE3.identity(), x)
        assert "degenerate" in caplog.text

    def test_point_at_zero_depth(self):
        """Test points in the camera plane are invalid."""
        model = SE3XYZ()
        x = np.array([1.0, 0.0, 0.0])

        assert not model.is_valid(SE3.identity(), x)
        assert np.all(np.isnan(model.map(SE3.identity(), x)))

    def test_is_valid(self, frame):
        """Test a point in front of the camera is valid."""
        assert SE3XYZ().is_valid(frame, np.array([0.0, 0.0, 5.0]))


class TestSE3UVQ:
    """Test the inverse-depth point model."""

    def test_map_matches_euclidean_model(self, frame):
        """Test inverse-depth and Euclidean models agree on the same point."""
        xyz = np.array([0.4, -0.3, 6.0])

        np.testing.assert_allclose(
            SE3UVQ(CAMERA).map(frame, xyz_to_uvq(xyz)),
            SE3XYZ(CAMERA).map(frame, xyz),
            atol=1e-10
        )

    def test_frame_jacobian_matches_euclidean_model(self, frame):
        """Test frame Jacobians agree on the same point."""
        xyz = np.array([0.4, -0.3, 6.0])

        np.testing.assert_allclose(
            SE3UVQ().frame_jac(frame, xyz_to_uvq(xyz)),
            SE3XYZ().frame_jac(frame, xyz),
            atol=1e-12
        )

    def test_analytic_jacobians_match_finite_differences(self):
        """Test closed forms against central differences at random points."""
        diagnostics = JacobianDiagnostics(JacobianCheckOptions(seed=3))
        report = diagnostics.check_prediction(SE3UVQ())

        assert report.passed, report.failures

    def test_analytic_jacobians_with_intrinsics(self):
        """Test closed forms with a calibrated camera."""
        diagnostics = JacobianDiagnostics(JacobianCheckOptions(seed=4, n_samples=50))
        assert diagnostics.check_prediction(SE3UVQ(CAMERA)).passed

    def test_default_jacobians_match_closed_form(self, frame):
        """Test the one-sided finite-difference defaults."""
        model = SE3UVQ()
        uvq = xyz_to_uvq(np.array([0.3, -0.2, 4.0]))

        np.testing.assert_allclose(
            AbstractPrediction.frame_jac(model, frame, uvq), model.frame_jac(frame, uvq), atol=5e-3
        )
        np.testing.assert_allclose(
            AbstractPrediction.point_jac(model, frame, uvq), model.point_jac(frame, uvq), atol=5e-2
        )

    def test_zero_inverse_depth(self):
        """Test q == 0 yields NaN and fails is_valid."""
        model = SE3UVQ()
        uvq = np.array([0.1, 0.2, 0.0])

        assert not model.is_valid(SE3.identity(), uvq)
        assert np.all(np.isnan(model.map(SE3.identity(), uvq)))
        assert np.all(np.isnan(model.point_jac(SE3.identity(), uvq)))

    def test_point_behind_camera(self):
        """Test negative inverse depth puts the point behind the camera."""
        model = SE3UVQ()
        uvq = np.array([0.1, 0.2, -0.5])

        assert not model.is_valid(SE3.identity(), uvq)
        assert np.all(np.isnan(model.frame_jac(SE3.identity(), uvq)))


class TestSE2XY:
    """Test the planar bearing model."""

    def test_dimensions(self):
        """Test model dimensions."""
        model = SE2XY()

        assert model.frame_dof == 3
        assert model.point_dof == 2
        assert model.obs_dim == 1
        assert model.frame_type is SE2

    def test_map(self):
        """Test the planar projection."""
        np.testing.assert_allclose(SE2XY().map(SE2.identity(), np.array([1.0, 2.0])), [0.5])

    def test_add_frame_zero_is_no_op(self):
        """Test adding a zero increment leaves the frame unchanged."""
        T = SE2.exp(np.array([0.4, -1.0, 0.7]))
        assert SE2XY().add_frame(T, np.zeros(3)).isclose(T, atol=1e-15)

    def test_index_accessors(self):
        """Test translation and rotation blocks of the frame increment."""
        model = SE2XY()

        assert model.first_trans_id() == 0
        assert model.num_trans_pars() == 2
        assert model.first_rot_id() == 2
        assert model.num_rot_pars() == 1

    def test_analytic_jacobians_match_finite_differences(self):
        """Test closed forms against central differences at random points."""
        diagnostics = JacobianDiagnostics(JacobianCheckOptions(seed=5))
        assert diagnostics.check_prediction(SE2XY()).passed

    def test_default_jacobians_match_closed_form(self):
        """Test the one-sided finite-difference defaults."""
        model = SE2XY()
        T = SE2.exp(np.array([0.1, -0.2, 0.05]))
        x = np.array([0.5, 3.0])

        np.testing.assert_allclose(
            AbstractPrediction.frame_jac(model, T, x), model.frame_jac(T, x), atol=5e-3
        )
        np.testing.assert_allclose(
            AbstractPrediction.point_jac(model, T, x), model.point_jac(T, x), atol=5e-3
        )

    def test_point_behind_sensor(self):
        """Test points behind the sensor yield NaN and fail is_valid."""
        model = SE2XY()
        x = np.array([1.0, -2.0])

        assert not model.is_valid(SE2.identity(), x)
        assert np.all(np.isnan(model.map(SE2.identity(), x)))
        assert model.frame_jac(SE2.identity(), x).shape == (1, 3)
        assert np.all(np.isnan(model.point_jac(SE2.identity(), x)))


class TestAbstractPrediction:
    """Test the base class contract."""

    def test_cannot_instantiate(self):
        """Test the abstract base cannot be instantiated."""
        with pytest.raises(TypeError):
            AbstractPrediction()

    def test_numerical_defaults_for_new_model(self):
        """Test a model without closed forms gets numerical Jacobians."""

        class Translated(SE3XYZ):
            """Euclidean model relying on the numerical defaults."""

            frame_jac = AbstractPrediction.frame_jac
            point_jac = AbstractPrediction.point_jac

        model = Translated()
        x = np.array([0.2, 0.1, 3.0])

        assert model.frame_jac(SE3.identity(), x).shape == (2, 6)
        np.testing.assert_allclose(
            model.point_jac(SE3.identity(), x), SE3XYZ().point_jac(SE3.identity(), x), atol=5e-3
        )
