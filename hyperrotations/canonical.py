# -*- coding: utf-8 -*-
"""
Angle Canonicalization
======================

Rewrites an Euler angle vector into its unique representative with every
angle in its canonical range, without changing the rotation it describes.

Canonical ranges, per unit-vector block:

    azimuthal (first) angle:  [0, 2π)
    polar (other) angles:     [0, π]

so for N = 4 the upper limits are

    [2π,
     2π, π,
     2π, π, π]

Algorithm:
---------
The matrix is R_2 · R_3 · ... · R_N. Blocks are swept from R_N inward while
a diagonal sign matrix D (one ±1 per coordinate, all +1 to start) is pushed
from the right of each block to its left:

1. Sign transfer: R_k D = D R_k', where R_k' negates every angle whose two
   coordinates carry different signs in D.
2. Trailing sign: if D is negative on the block's last coordinate, negating
   the block's first and last rows is absorbed by θ -> π - θ on the polar
   angles and a shift of π on the azimuth; D trades that sign for one on
   coordinate 0.
3. Polar ranges: a negative polar angle is negated; this negates row 0 and
   the angle's lower row of the block, absorbed the same way by the angles
   below it, and flips the matching two entries of D.

Each block leaves D positive from its last coordinate up, and det(D) = +1
forces the last remaining entry positive too.
"""

import math
from typing import List, Optional

import numpy as np

from hyperrotations.dimensions import (
    as_angle_vector,
    block_slices,
    check_dimension,
    require_float_buffer,
)
from hyperrotations.errors import DimensionMismatch


TWO_PI = 2.0 * math.pi


# =============================================================================
# Scalar Helpers
# =============================================================================

def mod2pi(theta: float) -> float:
    """Reduce ``theta`` into [0, 2π)."""
    r = theta % TWO_PI
    # Rounding can land exactly on 2π for tiny negative inputs
    return 0.0 if r >= TWO_PI else r


def wrap_pi(theta: float) -> float:
    """Reduce ``theta`` into (-π, π]."""
    r = mod2pi(theta)
    return r - TWO_PI if r > math.pi else r


def _reflect(theta: float) -> float:
    # π - θ, kept inside [-π, π)
    return math.pi - theta if theta > 0.0 else -math.pi - theta


def _shift_half_turn(theta: float) -> float:
    return theta - math.pi if theta > 0.0 else theta + math.pi


def _compensate_below(vals: List[float], start: int, stop: int) -> None:
    """θ -> π - θ on polar angles in (start, stop), azimuth at start shifted by π."""
    for idx in range(start + 1, stop):
        vals[idx] = _reflect(vals[idx])
    vals[start] = _shift_half_turn(vals[start])


def _enforce_polar_ranges(
    vals: List[float],
    start: int,
    stop: int,
    signs: Optional[List[int]] = None,
) -> None:
    """
    Make every polar angle of the block [start, stop) non-negative.

    Sweeps from the block's last angle down to its second. When ``signs`` is
    given, each fix flips coordinate 0 and the angle's lower coordinate.
    """
    for idx in range(stop - 1, start, -1):
        if vals[idx] < 0.0:
            vals[idx] = -vals[idx]
            if signs is not None:
                signs[idx - start] *= -1
                signs[0] *= -1
            _compensate_below(vals, start, idx)


# =============================================================================
# SO(N) Euler Angles
# =============================================================================

def canonicalize_angles_(N: int, thetas) -> np.ndarray:
    """
    Bring the Euler angles of an SO(N) rotation into canonical ranges, in place.

    The matrix ``build_rotation_matrix(N, thetas)`` is unchanged up to
    rounding, and re-running on the output leaves it bit-for-bit identical.

    Args:
        N: Dimension of the rotation
        thetas: Writable floating ndarray of N(N-1)/2 angles

    Returns:
        thetas, mutated

    Raises:
        DimensionMismatch: If N(N-1) != 2 * len(thetas)
        TypeError: If thetas is not a writable floating ndarray
    """
    require_float_buffer(thetas, "thetas")
    if thetas.ndim != 1:
        raise DimensionMismatch(f"Angle vector must be 1-D, got shape {thetas.shape}")
    check_dimension(N, thetas.shape[0])

    if thetas.shape[0] < 1:
        return thetas

    vals = [wrap_pi(float(t)) for t in thetas]
    signs = [1] * N

    for k, sl in block_slices(N):
        start, stop = sl.start, sl.stop

        # 1. Move the sign matrix from the right of R_k to its left.
        #    Angle start + j mixes coordinates j and j + 1.
        for j in range(k - 1):
            if signs[j] != signs[j + 1]:
                vals[start + j] = -vals[start + j]

        # 2. Cancel a negative sign on the block's last coordinate
        if signs[k - 1] < 0:
            signs[k - 1] = 1
            signs[0] *= -1
            _compensate_below(vals, start, stop)

        # 3. Polar angles into [0, π]
        _enforce_polar_ranges(vals, start, stop, signs)

        vals[start] = mod2pi(vals[start])

    thetas[:] = vals
    return thetas


def canonicalize_angles(N: int, thetas) -> np.ndarray:
    """
    Return a canonicalized copy of the Euler angles ``thetas``.

    Examples:
        >>> canonicalize_angles(2, [-np.pi / 2]) / np.pi
        array([1.5])
    """
    return canonicalize_angles_(N, as_angle_vector(thetas, copy=True))


# =============================================================================
# Single Unit Vector
# =============================================================================

def canonicalize_unit_vector_angles_(thetas) -> np.ndarray:
    """
    Canonicalize the angles of one unit vector in place.

    The first angle ends up in [0, 2π) and the rest in [0, π]; the vector
    ``unit_vector_from_angles(thetas)`` is unchanged up to rounding.
    """
    require_float_buffer(thetas, "thetas")
    if thetas.ndim != 1:
        raise DimensionMismatch(f"Angle vector must be 1-D, got shape {thetas.shape}")
    if thetas.shape[0] < 1:
        return thetas

    vals = [wrap_pi(float(t)) for t in thetas]
    _enforce_polar_ranges(vals, 0, len(vals))
    vals[0] = mod2pi(vals[0])

    thetas[:] = vals
    return thetas


def canonicalize_unit_vector_angles(thetas) -> np.ndarray:
    """Return a canonicalized copy of unit-vector angles."""
    return canonicalize_unit_vector_angles_(as_angle_vector(thetas, copy=True))
