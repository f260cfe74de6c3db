# -*- coding: utf-8 -*-
"""
Euler Parametrization of SO(N)
==============================

Builds N×N rotation matrices from N(N-1)/2 angles and decomposes them back.

The angles are read as N-1 unit vectors of dimension 2, 3, ..., N (see
``hyperrotations.unit_vectors``). The rotation matrix is the product

    RotMat = R_2 · R_3 · ... · R_N

where R_k is block-diagonal: a k×k rotation in the upper left and the
identity below. The last row of the k×k block is the unit vector rhat_k
defined by block k's angles, and the rows above it are

    thetahat_j = cos(θ_j) · rhat_j - sin(θ_j) · ehat_{j+1}

built from the nested partial unit vectors rhat_j. For N = 2 this is the
usual

    [[cos θ, -sin θ],
     [sin θ,  cos θ]]

Equivalently, R_k is the elemental sequence (k-2, k-1), ..., (1, 2), (0, 1)
with the block's angles in reverse order, which is what ``rotate_euler_``
uses to rotate data without building the matrix.
"""

from typing import List, Tuple

import numpy as np

from hyperrotations.config import resolve_ortho_tol, resolve_zero_tol
from hyperrotations.dimensions import (
    as_angle_vector,
    as_float_array,
    block_slices,
    check_dimension,
    n_angles,
    normalize_axis,
    require_float_buffer,
    sincos,
)
from hyperrotations.elemental import apply_elemental_rotations_
from hyperrotations.errors import DimensionMismatch, RotationDomainError
from hyperrotations.unit_vectors import angles_from_unit_vector


# =============================================================================
# Stage Blocks
# =============================================================================

def stage_block(block_angles) -> np.ndarray:
    """
    k×k rotation block for one unit-vector block of k-1 angles.

    The last row is ``unit_vector_from_angles(block_angles)``; the rows above
    complete it to an orthonormal basis.

    Args:
        block_angles: (k-1,) angles of a single block

    Returns:
        R: (k, k) rotation matrix
    """
    block_angles = as_angle_vector(block_angles)
    row = block_angles.shape[0] + 1

    R = np.zeros((row, row), dtype=block_angles.dtype)
    rhat = np.zeros(row, dtype=block_angles.dtype)
    rhat[0] = 1.0

    for i in range(1, row):
        s, c = sincos(block_angles[i - 1])

        # thetahat = c * rhat - s * ehat_i
        R[i - 1] = c * rhat
        R[i - 1, i] = -s

        rhat *= s
        rhat[i] = c

    R[row - 1] = rhat
    return R


# =============================================================================
# Angles -> Matrix
# =============================================================================

def build_rotation_matrix(N: int, thetas) -> np.ndarray:
    """
    Build the SO(N) matrix for the Euler angles ``thetas``.

    Stages run from the N-dimensional block down to the 2-dimensional one,
    each left-multiplying the running product.

    Args:
        N: Dimension of the rotation
        thetas: (N(N-1)/2,) angles

    Returns:
        RotMat: (N, N) orthogonal matrix with determinant +1

    Raises:
        DimensionMismatch: If N(N-1) != 2 * len(thetas)

    Examples:
        >>> R = build_rotation_matrix(2, [np.pi / 2])
        >>> np.allclose(R, [[0, -1], [1, 0]])
        True
        >>> np.allclose(build_rotation_matrix(3, [0, 0, 0]), np.eye(3))
        True
    """
    thetas = as_angle_vector(thetas)
    check_dimension(N, thetas.shape[0])

    rot_mat = np.eye(N, dtype=thetas.dtype)
    for row, sl in block_slices(N):
        block = stage_block(thetas[sl])
        # Only the leading `row` rows change under the block-diagonal stage
        rot_mat[:row, :] = block @ rot_mat[:row, :]

    return rot_mat


# =============================================================================
# Matrix -> Angles
# =============================================================================

def _validate_rotation_matrix(rot_mat: np.ndarray, ortho_tol) -> None:
    if rot_mat.ndim != 2 or rot_mat.shape[0] != rot_mat.shape[1]:
        raise DimensionMismatch(
            f"Rotation matrix must be square, got shape {rot_mat.shape}"
        )

    N = rot_mat.shape[0]
    if N == 0:
        return

    if not np.all(np.isfinite(rot_mat)):
        raise RotationDomainError("Rotation matrix contains NaN or Inf")

    ortho_tol = resolve_ortho_tol(ortho_tol, rot_mat.dtype, N)
    ortho_error = np.max(np.abs(rot_mat.T @ rot_mat - np.eye(N)))
    if ortho_error > ortho_tol:
        raise RotationDomainError(
            f"Matrix is not orthogonal: max|MᵀM - I| = {ortho_error:.3e} "
            f"exceeds tolerance {ortho_tol:.3e}"
        )

    det = np.linalg.det(rot_mat)
    if det <= 0:
        raise RotationDomainError(
            f"Matrix is not a proper rotation: det = {det:.6f}"
        )


def angles_from_rotation_matrix(rot_mat, zero_tol=None, *, ortho_tol=None) -> np.ndarray:
    """
    Decompose an SO(N) matrix into its Euler angles.

    Inverse of ``build_rotation_matrix``. The last row of RotMat is rhat_N,
    which gives block N's angles; multiplying by the transpose of the
    reconstructed R_N peels that stage off and exposes rhat_{N-1} in the
    next row up, and so on down to the 2-dimensional block.

    Near-degenerate rows reuse the ``angles_from_unit_vector`` policy:
    once the running sine product falls to ``zero_tol``, the remaining polar
    angles of that block are reported as exactly 0. Rotations with repeated
    invariant planes can therefore decompose to angles different from the
    ones used to build them, while still reproducing the matrix.

    Args:
        rot_mat: (N, N) rotation matrix; not modified
        zero_tol: Degeneracy threshold (default: 8 * eps of the dtype)
        ortho_tol: Orthogonality tolerance for max|MᵀM - I|
            (default: 256 * N * eps of the dtype)

    Returns:
        thetas: (N(N-1)/2,) angles; polar angles in [0, π], azimuths in [-π, π]

    Raises:
        DimensionMismatch: If rot_mat is not square.
        RotationDomainError: If rot_mat is not orthogonal or has det <= 0.
    """
    rot_mat = as_float_array(rot_mat)
    _validate_rotation_matrix(rot_mat, ortho_tol)

    N = rot_mat.shape[0]
    zero_tol = resolve_zero_tol(zero_tol, rot_mat.dtype)

    scratch = rot_mat.copy()
    thetas = np.zeros(n_angles(N), dtype=rot_mat.dtype)

    for row, sl in block_slices(N):
        block_angles = angles_from_unit_vector(scratch[row - 1, :row], zero_tol)
        thetas[sl] = block_angles

        # Peel the stage: scratch · (R_row ⊕ I)ᵀ touches only leading columns
        scratch[:, :row] = scratch[:, :row] @ stage_block(block_angles).T

    return thetas


# =============================================================================
# Elemental Sequence Form
# =============================================================================

def _euler_angle_order(N: int) -> List[int]:
    """Positions in ``thetas`` for each step of the Euler elemental sequence."""
    order = []
    for k in range(2, N + 1):
        start = (k - 1) * (k - 2) // 2
        order.extend(range(start + k - 2, start - 1, -1))
    return order


def euler_coordinate_pairs(N: int) -> np.ndarray:
    """
    Coordinate pairs of the elemental sequence equal to the Euler matrix.

    For block k the pairs are (k-2, k-1), ..., (1, 2), (0, 1); blocks are
    listed from k = 2 up to N.

    Examples:
        >>> euler_coordinate_pairs(3).tolist()
        [[0, 1], [1, 2], [0, 1]]
    """
    pairs = [(j - 1, j) for k in range(2, N + 1) for j in range(k - 1, 0, -1)]
    return np.array(pairs, dtype=np.intp).reshape(-1, 2)


def euler_sequence(N: int, thetas) -> Tuple[np.ndarray, np.ndarray]:
    """
    Elemental rotation sequence whose product is ``build_rotation_matrix(N, thetas)``.

    Returns:
        seq_thetas: (T,) angles in sequence order
        coord_pairs: (T, 2) coordinate pairs
    """
    thetas = as_angle_vector(thetas)
    check_dimension(N, thetas.shape[0])
    order = np.array(_euler_angle_order(N), dtype=np.intp)
    return thetas[order], euler_coordinate_pairs(N)


def rotate_euler_(data, thetas, axis: int = -1) -> np.ndarray:
    """
    Rotate ``data`` in place by the Euler rotation without building the matrix.

    The dimension N is the length of ``axis``; every other axis is a batch.

    Raises:
        DimensionMismatch: If N(N-1) != 2 * len(thetas) or axis is invalid.
    """
    require_float_buffer(data)
    if data.ndim == 0:
        raise DimensionMismatch("Cannot rotate a 0-dimensional array")
    axis = normalize_axis(axis, data.ndim)

    seq_thetas, coord_pairs = euler_sequence(data.shape[axis], thetas)
    return apply_elemental_rotations_(data, seq_thetas, coord_pairs, axis=axis)


def rotate_euler(data, thetas, axis: int = -1) -> np.ndarray:
    """Return a copy of ``data`` rotated by the Euler rotation."""
    return rotate_euler_(as_float_array(data, copy=True), thetas, axis=axis)


# =============================================================================
# PyTorch Variant
# =============================================================================

def build_rotation_matrix_torch(N: int, thetas: 'torch.Tensor') -> 'torch.Tensor':
    """
    Batched, differentiable ``build_rotation_matrix``.

    Args:
        N: Dimension of the rotation
        thetas: (..., N(N-1)/2) angles

    Returns:
        RotMat: (..., N, N)
    """
    import torch

    thetas = torch.as_tensor(thetas)
    if not torch.is_floating_point(thetas):
        thetas = thetas.to(torch.get_default_dtype())
    if thetas.dim() == 0:
        raise DimensionMismatch("thetas must have at least one dimension")
    check_dimension(N, thetas.shape[-1])

    batch_shape = thetas.shape[:-1]
    eye = torch.eye(N, dtype=thetas.dtype, device=thetas.device)
    eye = eye.expand(*batch_shape, N, N)
    if N < 2:
        return eye.clone()

    rows = list(torch.unbind(eye, dim=-2))
    order = _euler_angle_order(N)
    pairs = euler_coordinate_pairs(N)

    sines = torch.sin(thetas)
    cosines = torch.cos(thetas)

    # Mixing rows of the identity, last listed rotation first
    for k in range(len(order) - 1, -1, -1):
        s = sines[..., order[k]].unsqueeze(-1)
        c = cosines[..., order[k]].unsqueeze(-1)
        i, j = int(pairs[k, 0]), int(pairs[k, 1])
        a, b = rows[i], rows[j]
        rows[i], rows[j] = a * c - b * s, b * c + a * s

    return torch.stack(rows, dim=-2)
