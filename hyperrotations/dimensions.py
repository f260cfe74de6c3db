# -*- coding: utf-8 -*-
"""
Dimension Contract and Block Layout
===================================

Shared bookkeeping for angle vectors of SO(N):

- An element of SO(N) is described by T = N(N-1)/2 angles.
- The angles are split into N-1 contiguous blocks. The block for dimension k
  (k = 2, ..., N) holds k-1 angles and defines a k-dimensional unit vector.
- Within a block, position 0 is the azimuthal angle and the rest are polar.

Block layout for N = 4 (T = 6):

    index:   0 | 1  2 | 3  4  5
    block:   2 | 3  3 | 4  4  4

Every public entry point that takes (N, thetas) calls ``check_dimension``
before doing any work.
"""

import math
from typing import Iterator, Tuple

import numpy as np

from hyperrotations.errors import DimensionMismatch


# =============================================================================
# Angle Counts
# =============================================================================

def n_angles(N: int) -> int:
    """
    Number of Euler angles needed to specify an element of SO(N).

    Examples:
        >>> n_angles(2)
        1
        >>> n_angles(4)
        6
    """
    if N < 0:
        raise DimensionMismatch(f"N must be >= 0, got N={N}")
    return N * (N - 1) // 2


def dimension_from_n_angles(T: int) -> int:
    """
    Recover N from an angle count T = N(N-1)/2.

    Zero angles map to N = 1 (the trivial group); callers that need N = 0
    must pass it explicitly.

    Raises:
        DimensionMismatch: If T is not a triangular number.
    """
    if T < 0:
        raise DimensionMismatch(f"Angle count must be >= 0, got T={T}")

    # Solving N(N-1) = 2T for the positive root
    N = (1 + math.isqrt(1 + 8 * T)) // 2
    if N * (N - 1) != 2 * T:
        raise DimensionMismatch(
            f"T={T} angles do not correspond to any SO(N). "
            f"Expected N*(N-1)/2 for some integer N."
        )
    return N


def check_dimension(N: int, T: int) -> None:
    """
    Enforce the shared contract N(N-1) = 2T.

    Raises:
        DimensionMismatch: If the dimension and angle count disagree.
    """
    if N < 0 or N * (N - 1) != 2 * T:
        raise DimensionMismatch(
            f"The number of dimensions (N={N}) must match the number of "
            f"angles (T={T}): N * (N - 1) = 2 * T"
        )


def block_slices(N: int) -> Iterator[Tuple[int, slice]]:
    """
    Yield ``(k, slice)`` for each unit-vector block, largest first.

    Block k (k = N, N-1, ..., 2) occupies angles [(k-1)(k-2)/2, k(k-1)/2).
    """
    for k in range(N, 1, -1):
        start = (k - 1) * (k - 2) // 2
        yield k, slice(start, start + k - 1)


def polar_exponents(N: int) -> np.ndarray:
    """
    Power of |sin θ| each angle contributes to the Haar Jacobian.

    Azimuthal angles get 0; the j-th polar angle of a block gets j.

    Examples:
        >>> polar_exponents(4)
        array([0, 0, 1, 0, 1, 2])
    """
    exponents = np.zeros(n_angles(N), dtype=np.int64)
    for k, sl in block_slices(N):
        exponents[sl] = np.arange(k - 1)
    return exponents


# =============================================================================
# Array Coercion
# =============================================================================

def working_dtype(x) -> np.dtype:
    """Floating dtype used for computations on ``x`` (float64 unless x is floating)."""
    dtype = np.asarray(x).dtype
    if np.issubdtype(dtype, np.floating):
        return dtype
    return np.dtype(np.float64)


def as_float_array(x, *, copy: bool = False) -> np.ndarray:
    """Convert ``x`` to an ndarray of its working floating dtype."""
    if copy:
        return np.array(x, dtype=working_dtype(x), copy=True)
    return np.asarray(x, dtype=working_dtype(x))


def as_angle_vector(thetas, *, copy: bool = False) -> np.ndarray:
    """Convert ``thetas`` to a 1-D floating array."""
    arr = as_float_array(thetas, copy=copy)
    if arr.ndim != 1:
        raise DimensionMismatch(
            f"Angle vector must be 1-D, got shape {arr.shape}"
        )
    return arr


def require_float_buffer(x, name: str = "data") -> np.ndarray:
    """
    Validate a caller-owned buffer for in-place operations.

    Raises:
        TypeError: If ``x`` is not a writable floating numpy array.
    """
    if not isinstance(x, np.ndarray):
        raise TypeError(
            f"{name} must be a numpy.ndarray for in-place operation, "
            f"got {type(x).__name__}"
        )
    if not np.issubdtype(x.dtype, np.floating):
        raise TypeError(f"{name} must have a floating dtype, got {x.dtype}")
    if not x.flags.writeable:
        raise TypeError(f"{name} is read-only")
    return x


def normalize_axis(axis: int, ndim: int) -> int:
    """Map a possibly negative axis into [0, ndim)."""
    if not -ndim <= axis < ndim:
        raise DimensionMismatch(
            f"axis {axis} is out of bounds for data with {ndim} dimension(s)"
        )
    return axis % ndim


# =============================================================================
# Trig Oracle
# =============================================================================

def sincos(theta) -> Tuple[float, float]:
    """Sine and cosine of ``theta``, sine first."""
    return np.sin(theta), np.cos(theta)
