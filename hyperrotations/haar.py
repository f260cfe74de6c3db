# -*- coding: utf-8 -*-
"""
Haar Measure in Euler Angles
============================

SO(N) is, as a measure space, the product of the unit spheres S^1, S^2, ...,
S^{N-1}, one per unit-vector block. The Jacobian below converts the flat
measure on the angles into the Haar measure: integrating it over the
canonical ranges gives the product of the sphere areas. Normalized, it is
the density of rotations drawn uniformly at random.
"""

from typing import Optional, Tuple, Union

import numpy as np

from hyperrotations.dimensions import (
    as_float_array,
    block_slices,
    check_dimension,
    n_angles,
    polar_exponents,
)
from hyperrotations.errors import DimensionMismatch
from hyperrotations.unit_vectors import angles_from_unit_vector


def haar_jacobian(N: int, thetas) -> Union[float, np.ndarray]:
    """
    Haar-measure density of the Euler parametrization at ``thetas``.

    Within each block the azimuthal angle contributes a factor of 1 and the
    j-th polar angle contributes |sin θ|^j.

    Args:
        N: Dimension of the rotation
        thetas: (..., N(N-1)/2) angles; leading axes are a batch

    Returns:
        Non-negative Jacobian, a float for 1-D input or an array of the batch
        shape. NaN when there are no angles (undefined for N < 2).

    Raises:
        DimensionMismatch: If N(N-1) != 2 * thetas.shape[-1]

    Examples:
        >>> haar_jacobian(3, [0.3, np.pi / 2, np.pi / 2])
        1.0
    """
    thetas = as_float_array(thetas)
    if thetas.ndim == 0:
        raise DimensionMismatch("thetas must have at least one dimension")
    check_dimension(N, thetas.shape[-1])

    if thetas.shape[-1] < 1:
        jacobian = np.full(thetas.shape[:-1], np.nan, dtype=thetas.dtype)
    else:
        factors = np.abs(np.sin(thetas)) ** polar_exponents(N)
        jacobian = np.abs(np.prod(factors, axis=-1))

    if thetas.ndim == 1:
        return float(jacobian)
    return jacobian


def haar_volume(N: int) -> float:
    """
    Integral of ``haar_jacobian`` over the canonical ranges.

    Equals the product of the areas of S^1, ..., S^{N-1}:
    area(S^{k-1}) = 2 π^{k/2} / Γ(k/2).
    """
    if N < 2:
        raise DimensionMismatch(f"N must be >= 2 for SO(N), got N={N}")

    volume = 1.0
    for k in range(2, N + 1):
        volume *= _sphere_area(k)
    return volume


def _sphere_area(k: int) -> float:
    """Area of the unit sphere S^{k-1} in R^k."""
    if k == 1:
        return 2.0
    if k == 2:
        return 2.0 * np.pi
    return 2.0 * np.pi / (k - 2) * _sphere_area(k - 2)


# =============================================================================
# Sampling
# =============================================================================

def sample_haar_angles(
    N: int,
    size: Optional[Union[int, Tuple[int, ...]]] = None,
    rng=None,
) -> np.ndarray:
    """
    Draw canonical Euler angles of Haar-uniform random rotations.

    Each block's unit vector is drawn uniformly on its sphere (a normalized
    standard normal vector) and converted to angles; because the Haar measure
    factorizes over the blocks, the resulting rotations are uniform on SO(N).

    Args:
        N: Dimension of the rotation (N >= 2)
        size: Batch shape; None for a single angle vector
        rng: Anything accepted by ``np.random.default_rng``

    Returns:
        thetas: (*size, N(N-1)/2) canonical angles
    """
    if N < 2:
        raise DimensionMismatch(f"N must be >= 2 for SO(N), got N={N}")

    rng = np.random.default_rng(rng)
    batch_shape = () if size is None else tuple(np.atleast_1d(size))
    n_samples = int(np.prod(batch_shape, dtype=np.int64))

    thetas = np.empty((n_samples, n_angles(N)))
    for k, sl in block_slices(N):
        vecs = rng.standard_normal((n_samples, k))
        vecs /= np.linalg.norm(vecs, axis=-1, keepdims=True)
        for i in range(n_samples):
            thetas[i, sl] = angles_from_unit_vector(vecs[i])

    # Polar angles from acos are already in [0, π]; move azimuths into [0, 2π)
    for _, sl in block_slices(N):
        azimuth = np.mod(thetas[:, sl.start], 2.0 * np.pi)
        azimuth[azimuth >= 2.0 * np.pi] = 0.0
        thetas[:, sl.start] = azimuth

    return thetas.reshape(batch_shape + (n_angles(N),))
