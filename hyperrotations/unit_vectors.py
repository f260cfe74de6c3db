# -*- coding: utf-8 -*-
"""
Unit Vectors from Polar Angles
==============================

Converts between k angles and a (k+1)-dimensional unit vector.

N-dimensional unit vectors are defined recursively:

    rhat_N = sin(θ_{N-1}) · rhat_{N-1} + cos(θ_{N-1}) · ehat_N

so in 2-d rhat = [sin θ, cos θ] and in 3-d

    rhat = [sin φ sin θ, cos φ sin θ, cos θ].

Every angle therefore rotates from a higher-index basis vector into the lower
ones, like the polar angle of the classical 3-d parametrization. The first
angle is called azimuthal because it ranges over the full circle.
"""

import warnings

import numpy as np

from hyperrotations.config import DEFAULT_TOLERANCES, resolve_zero_tol
from hyperrotations.dimensions import (
    as_angle_vector,
    as_float_array,
    require_float_buffer,
    sincos,
)
from hyperrotations.errors import DimensionMismatch, RotationDomainError


# =============================================================================
# Angles -> Unit Vector
# =============================================================================

def unit_vector_from_angles(thetas) -> np.ndarray:
    """
    Build the unit vector defined by ``thetas``.

    Starts from [1]; for each angle, scales the existing coordinates by
    sin(θ) and appends cos(θ). Any real angles are accepted.

    Args:
        thetas: Angles, shape (k,)

    Returns:
        uvec: Unit vector, shape (k+1,)

    Examples:
        >>> np.allclose(unit_vector_from_angles([np.pi / 2]), [1.0, 0.0])
        True
        >>> unit_vector_from_angles([0.0])
        array([0., 1.])
    """
    thetas = as_angle_vector(thetas)
    uvec = np.ones(thetas.shape[0] + 1, dtype=thetas.dtype)

    for i, theta in enumerate(thetas):
        s, c = sincos(theta)
        uvec[:i + 1] *= s
        uvec[i + 1] = c

    return uvec


# =============================================================================
# Unit Vector -> Angles
# =============================================================================

def angles_from_unit_vector(uvec, zero_tol=None) -> np.ndarray:
    """
    Invert ``unit_vector_from_angles``.

    Polar angles are recovered from the last coordinate down to the third as
    acos(v[i] / denom), with denom accumulating the product of the sines found
    so far. Once denom drops to ``zero_tol`` or below, the direction is
    degenerate and every remaining polar angle is set to exactly 0, since no
    unique answer exists there.

    The azimuthal angle is atan2(v[0], v[1]). The argument order is swapped
    relative to the textbook atan2(y, x) because the forward construction
    puts sin in the first coordinate and cos in the second.

    Args:
        uvec: Unit vector, shape (m,)
        zero_tol: Magnitude treated as zero (default: 8 * eps of the dtype)

    Returns:
        thetas: Angles, shape (m-1,); polar angles in [0, π], azimuth in [-π, π].
        Vectors of length < 2 give an empty array.
    """
    uvec = as_float_array(uvec)
    if uvec.ndim != 1:
        raise DimensionMismatch(f"Unit vector must be 1-D, got shape {uvec.shape}")

    veclen = uvec.shape[0]
    if veclen < 2:
        return np.zeros(0, dtype=uvec.dtype)

    zero_tol = resolve_zero_tol(zero_tol, uvec.dtype)

    norm_error = abs(float(np.linalg.norm(uvec)) - 1.0)
    if norm_error > DEFAULT_TOLERANCES.norm_warn_tol:
        warnings.warn(
            f"angles_from_unit_vector received a vector with norm deviating "
            f"from 1 by {norm_error:.3e}; angles describe its direction only "
            f"approximately.",
            RuntimeWarning,
            stacklevel=2,
        )

    thetas = np.zeros(veclen - 1, dtype=uvec.dtype)

    # Purely polar angles, last coordinate first
    denom = 1.0
    iv = veclen - 1
    while iv > 1 and denom > zero_tol:
        theta = np.arccos(np.clip(uvec[iv] / denom, -1.0, 1.0))
        thetas[iv - 1] = theta
        denom *= np.sin(theta)
        iv -= 1

    # Anything left below iv stays at exactly zero

    # sin goes with x, cos with y
    thetas[0] = np.arctan2(uvec[0], uvec[1])

    return thetas


# =============================================================================
# Normalization
# =============================================================================

def normalize_vector_(v) -> np.ndarray:
    """Divide ``v`` in place by its Euclidean norm and return it."""
    require_float_buffer(v, "v")
    norm = np.linalg.norm(v)
    if norm == 0.0:
        raise RotationDomainError("Cannot normalize a zero vector")
    v /= norm
    return v


def normalize_vector(v) -> np.ndarray:
    """Return a copy of ``v`` scaled to unit Euclidean norm."""
    return normalize_vector_(as_float_array(v, copy=True))
