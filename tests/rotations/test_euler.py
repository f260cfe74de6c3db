# -*- coding: utf-8 -*-
"""
Euler Parametrization Tests
===========================

Tests for hyperrotations.euler module.
"""

import pytest
import numpy as np
import torch


class TestBuildRotationMatrix:
    """Test build_rotation_matrix function."""

    def test_two_dimensional_quarter_turn(self):
        """N=2, θ=[π/2] is [[0, -1], [1, 0]]."""
        from hyperrotations.euler import build_rotation_matrix

        R = build_rotation_matrix(2, [np.pi / 2])
        assert np.allclose(R, [[0.0, -1.0], [1.0, 0.0]])

    def test_zero_angles_identity(self):
        """N=3 with zero angles is the identity."""
        from hyperrotations.euler import build_rotation_matrix

        np.testing.assert_array_equal(build_rotation_matrix(3, [0.0, 0.0, 0.0]), np.eye(3))

    def test_trivial_dimensions(self):
        """N=1 and N=0 have no angles."""
        from hyperrotations.euler import build_rotation_matrix

        np.testing.assert_array_equal(build_rotation_matrix(1, []), [[1.0]])
        assert build_rotation_matrix(0, []).shape == (0, 0)

    def test_three_dimensional_form(self):
        """N=3 matrix equals R_2 · R_3 written out by hand."""
        from hyperrotations.euler import build_rotation_matrix

        a, b, c = 0.4, 1.1, 2.3
        ca, sa = np.cos(a), np.sin(a)
        c1, s1 = np.cos(b), np.sin(b)
        c2, s2 = np.cos(c), np.sin(c)

        R2 = np.array([[ca, -sa, 0.0], [sa, ca, 0.0], [0.0, 0.0, 1.0]])
        R3 = np.array([
            [c1, -s1, 0.0],
            [c2 * s1, c2 * c1, -s2],
            [s2 * s1, s2 * c1, c2],
        ])

        assert np.allclose(build_rotation_matrix(3, [a, b, c]), R2 @ R3)

    def test_orthogonal_with_unit_determinant(self, wild_angles):
        """Any angles give an element of SO(N)."""
        from hyperrotations.euler import build_rotation_matrix

        for N, thetas in wild_angles.items():
            R = build_rotation_matrix(N, thetas)
            pytest.assert_rotation_matrix(R, atol=1e-12, name=f"SO({N})")

    def test_last_row_is_largest_unit_vector(self, generic_angles):
        """The last row is the unit vector of the last block."""
        from hyperrotations.euler import build_rotation_matrix
        from hyperrotations.unit_vectors import unit_vector_from_angles

        for N, thetas in generic_angles.items():
            R = build_rotation_matrix(N, thetas)
            expected = unit_vector_from_angles(thetas[-(N - 1):])
            assert np.allclose(R[-1], expected)

    def test_dimension_mismatch(self):
        from hyperrotations.errors import DimensionMismatch
        from hyperrotations.euler import build_rotation_matrix

        with pytest.raises(DimensionMismatch):
            build_rotation_matrix(3, [0.1, 0.2])
        with pytest.raises(DimensionMismatch):
            build_rotation_matrix(2, [0.1, 0.2, 0.3])


class TestStageBlock:
    """Test stage_block function."""

    def test_rows_orthonormal(self, rng):
        from hyperrotations.euler import stage_block

        for k in range(2, 8):
            R = stage_block(rng.uniform(-4, 4, size=k - 1))
            pytest.assert_rotation_matrix(R, name=f"block {k}")

    def test_last_row(self, rng):
        from hyperrotations.euler import stage_block
        from hyperrotations.unit_vectors import unit_vector_from_angles

        angles = rng.uniform(-4, 4, size=4)
        assert np.allclose(stage_block(angles)[-1], unit_vector_from_angles(angles))


class TestAnglesFromRotationMatrix:
    """Test angles_from_rotation_matrix function."""

    def test_round_trip_from_angles(self, wild_angles):
        """build(decompose(M)) reproduces M."""
        from hyperrotations.euler import angles_from_rotation_matrix, build_rotation_matrix

        for N, thetas in wild_angles.items():
            M = build_rotation_matrix(N, thetas)
            rebuilt = build_rotation_matrix(N, angles_from_rotation_matrix(M))
            assert np.allclose(rebuilt, M, atol=1e-10), f"N={N}"

    def test_round_trip_random_matrices(self, random_rotation):
        """Arbitrary SO(N) matrices survive decomposition."""
        from hyperrotations.euler import angles_from_rotation_matrix, build_rotation_matrix

        for N in range(2, 9):
            M = random_rotation(N)
            thetas = angles_from_rotation_matrix(M)
            assert thetas.shape == (N * (N - 1) // 2,)
            assert np.allclose(build_rotation_matrix(N, thetas), M, atol=1e-10)

    def test_recovers_canonical_angles(self, generic_angles):
        """Decomposition agrees with canonicalization for generic angles."""
        from hyperrotations.canonical import canonicalize_angles
        from hyperrotations.euler import angles_from_rotation_matrix, build_rotation_matrix

        for N, thetas in generic_angles.items():
            decomposed = angles_from_rotation_matrix(build_rotation_matrix(N, thetas))
            dist = pytest.angle_distance(
                canonicalize_angles(N, decomposed),
                canonicalize_angles(N, thetas),
            )
            assert np.all(dist < 1e-8), f"N={N}"

    def test_identity(self):
        from hyperrotations.euler import angles_from_rotation_matrix

        np.testing.assert_array_equal(angles_from_rotation_matrix(np.eye(4)), np.zeros(6))

    def test_trivial_dimensions(self):
        from hyperrotations.euler import angles_from_rotation_matrix

        assert angles_from_rotation_matrix(np.eye(1)).shape == (0,)
        assert angles_from_rotation_matrix(np.zeros((0, 0))).shape == (0,)

    def test_degenerate_block_reports_zeros(self):
        """A degenerate block gives forced zeros yet the same matrix."""
        from hyperrotations.euler import angles_from_rotation_matrix, build_rotation_matrix

        thetas = np.array([0.4, 0.7, 0.0])
        M = build_rotation_matrix(3, thetas)
        decomposed = angles_from_rotation_matrix(M)

        assert decomposed[1] == 0.0
        assert decomposed[2] == 0.0
        assert np.isclose(decomposed[0], 1.1)
        assert np.allclose(build_rotation_matrix(3, decomposed), M)

    def test_input_not_modified(self, random_rotation):
        from hyperrotations.euler import angles_from_rotation_matrix

        M = random_rotation(5)
        before = M.copy()
        angles_from_rotation_matrix(M)
        np.testing.assert_array_equal(M, before)

    def test_non_square(self):
        from hyperrotations.errors import DimensionMismatch
        from hyperrotations.euler import angles_from_rotation_matrix

        with pytest.raises(DimensionMismatch):
            angles_from_rotation_matrix(np.zeros((2, 3)))

    def test_not_orthogonal(self):
        from hyperrotations.errors import RotationDomainError
        from hyperrotations.euler import angles_from_rotation_matrix

        with pytest.raises(RotationDomainError):
            angles_from_rotation_matrix(2.0 * np.eye(3))

    def test_reflection_rejected(self):
        from hyperrotations.errors import RotationDomainError
        from hyperrotations.euler import angles_from_rotation_matrix

        with pytest.raises(RotationDomainError):
            angles_from_rotation_matrix(np.diag([1.0, 1.0, -1.0]))

    def test_non_finite_rejected(self):
        from hyperrotations.errors import RotationDomainError
        from hyperrotations.euler import angles_from_rotation_matrix

        M = np.eye(3)
        M[0, 0] = np.nan
        with pytest.raises(RotationDomainError):
            angles_from_rotation_matrix(M)

    def test_ortho_tol_override(self, random_rotation):
        """A slightly perturbed matrix passes only with a looser tolerance."""
        from hyperrotations.errors import RotationDomainError
        from hyperrotations.euler import angles_from_rotation_matrix

        M = random_rotation(3)
        M[0, 0] += 1e-10

        with pytest.raises(RotationDomainError):
            angles_from_rotation_matrix(M)
        thetas = angles_from_rotation_matrix(M, ortho_tol=1e-8)
        assert np.all(np.isfinite(thetas))


class TestEulerSequence:
    """Test the elemental sequence form of the Euler matrix."""

    def test_coordinate_pairs(self):
        from hyperrotations.euler import euler_coordinate_pairs

        assert euler_coordinate_pairs(3).tolist() == [[0, 1], [1, 2], [0, 1]]
        assert euler_coordinate_pairs(4).shape == (6, 2)
        assert euler_coordinate_pairs(1).shape == (0, 2)

    def test_sequence_matrix_equals_build(self, wild_angles):
        from hyperrotations.elemental import sequence_matrix
        from hyperrotations.euler import build_rotation_matrix, euler_sequence

        for N, thetas in wild_angles.items():
            seq_thetas, pairs = euler_sequence(N, thetas)
            assert np.allclose(
                sequence_matrix(N, seq_thetas, pairs),
                build_rotation_matrix(N, thetas),
            )

    def test_rotate_euler_vector(self, rng, wild_angles):
        from hyperrotations.euler import build_rotation_matrix, rotate_euler

        for N, thetas in wild_angles.items():
            v = rng.standard_normal(N)
            assert np.allclose(rotate_euler(v, thetas), build_rotation_matrix(N, thetas) @ v)

    def test_rotate_euler_batch_axis(self, rng):
        from hyperrotations.euler import build_rotation_matrix, rotate_euler_

        thetas = rng.uniform(-3, 3, size=10)
        data = rng.standard_normal((5, 3))
        expected = build_rotation_matrix(5, thetas) @ data

        out = rotate_euler_(data, thetas, axis=0)
        assert out is data
        assert np.allclose(data, expected)

    def test_rotate_euler_dimension_mismatch(self):
        from hyperrotations.errors import DimensionMismatch
        from hyperrotations.euler import rotate_euler

        with pytest.raises(DimensionMismatch):
            rotate_euler(np.ones(4), [0.1, 0.2, 0.3])


class TestTorchVariant:
    """Test build_rotation_matrix_torch."""

    def test_matches_numpy(self, wild_angles, cpu_device):
        from hyperrotations.euler import build_rotation_matrix, build_rotation_matrix_torch

        for N, thetas in wild_angles.items():
            R = build_rotation_matrix_torch(N, torch.tensor(thetas, device=cpu_device))
            assert R.shape == (N, N)
            assert np.allclose(R.numpy(), build_rotation_matrix(N, thetas))

    def test_batched(self, rng):
        from hyperrotations.euler import build_rotation_matrix, build_rotation_matrix_torch

        thetas = rng.uniform(-3, 3, size=(2, 3, 6))
        R = build_rotation_matrix_torch(4, torch.tensor(thetas))

        assert R.shape == (2, 3, 4, 4)
        assert np.allclose(R[1, 2].numpy(), build_rotation_matrix(4, thetas[1, 2]))

    def test_gradient_flows(self):
        from hyperrotations.euler import build_rotation_matrix_torch

        thetas = torch.tensor([0.1, 0.2, 0.3], dtype=torch.float64, requires_grad=True)
        R = build_rotation_matrix_torch(3, thetas)
        R[0, 2].backward()

        assert thetas.grad is not None
        assert torch.isfinite(thetas.grad).all()

    def test_trivial_dimension(self):
        from hyperrotations.euler import build_rotation_matrix_torch

        R = build_rotation_matrix_torch(1, torch.zeros(0))
        assert torch.equal(R, torch.ones(1, 1))

    def test_dimension_mismatch(self):
        from hyperrotations.errors import DimensionMismatch
        from hyperrotations.euler import build_rotation_matrix_torch

        with pytest.raises(DimensionMismatch):
            build_rotation_matrix_torch(3, torch.zeros(4))
