# -*- coding: utf-8 -*-
"""
Elemental Rotation Sequences
============================

Applies a sequence of elemental (two-plane) rotations to vectors, batches of
row vectors, or an arbitrary axis of a tensor.

An elemental rotation is an angle t plus an ordered coordinate pair
(from, to). Unlike 3-d, naming the fixed axis is not enough: the invariant
subspace has dimension N - 2. With i = from and j = to:

- If j = i + 1 the rotation has the standard 2-d form
      v[i], v[j] = cos(t) v[i] - sin(t) v[j],  sin(t) v[i] + cos(t) v[j]
- Otherwise the sign of sin(t) flips once per transposition needed to make
  the two coordinates adjacent in that order. With steps = j - i, the sine is
  negated when steps is odd and negative, or even and positive.

This is why the 3-d rotation from x into z reads

    [[ cos t,  0,  sin t],
     [ 0,      1,  0    ],
     [-sin t,  0,  cos t]]

with the minus sign on the opposite side compared with the x and z rotations.

Sequences compose as if the elemental matrices were multiplied in listed
order and the product right-multiplied onto the data, so they are applied in
reverse: the last listed rotation acts first. Coordinates are 0-based.
"""

from typing import Tuple

import numpy as np

from hyperrotations.dimensions import (
    as_angle_vector,
    as_float_array,
    normalize_axis,
    require_float_buffer,
    sincos,
)
from hyperrotations.errors import DimensionMismatch


# =============================================================================
# Sequence Validation
# =============================================================================

def sine_flipped(from_idx: int, to_idx: int) -> bool:
    """
    Whether the elemental rotation (from_idx, to_idx) negates its sine.

    Raises:
        DimensionMismatch: If both indices name the same coordinate.

    Examples:
        >>> sine_flipped(0, 1)
        False
        >>> sine_flipped(0, 2)
        True
        >>> sine_flipped(2, 0)
        False
    """
    steps = to_idx - from_idx
    if steps == 0:
        raise DimensionMismatch(
            "Rotations can only be defined as mixing distinct components, "
            f"got pair ({from_idx}, {to_idx})"
        )
    odd = steps % 2 == 1
    return (odd and steps < 0) or (not odd and steps > 0)


def _prepare_sequence(
    thetas,
    coord_pairs,
    n_coords: int,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Validate a rotation sequence against a coordinate axis of length n_coords.

    Returns:
        thetas: (L,) angles
        pairs: (L, 2) non-negative coordinate indices
        flips: (L,) bool, True where the sine is negated
    """
    thetas = as_angle_vector(thetas)
    pairs = np.asarray(coord_pairs)

    if pairs.size == 0:
        pairs = np.zeros((0, 2), dtype=np.intp)
    if pairs.ndim != 2 or pairs.shape[1] != 2:
        raise DimensionMismatch(
            f"coord_pairs must have shape (L, 2), got {pairs.shape}"
        )
    if not np.issubdtype(pairs.dtype, np.integer):
        raise DimensionMismatch(
            f"coord_pairs must hold integer indices, got dtype {pairs.dtype}"
        )
    if pairs.shape[0] != thetas.shape[0]:
        raise DimensionMismatch(
            f"Got {thetas.shape[0]} angles but {pairs.shape[0]} coordinate pairs"
        )
    if pairs.size and (pairs.min() < -n_coords or pairs.max() >= n_coords):
        raise DimensionMismatch(
            f"Coordinate indices must lie in [-{n_coords}, {n_coords}), "
            f"got range [{pairs.min()}, {pairs.max()}]"
        )

    pairs = pairs % n_coords if n_coords else pairs
    flips = np.array(
        [sine_flipped(int(i), int(j)) for i, j in pairs], dtype=bool
    )
    return thetas, pairs, flips


# =============================================================================
# Core Two-Coordinate Mix
# =============================================================================

def _mix(a: np.ndarray, b: np.ndarray, c, s) -> None:
    """a, b = a·c - b·s, b·c + a·s on views of the same buffer."""
    a0 = a.copy()
    a *= c
    a -= b * s
    b *= c
    b += a0 * s


def _rotate_along(
    data: np.ndarray,
    axis: int,
    thetas: np.ndarray,
    pairs: np.ndarray,
    flips: np.ndarray,
) -> None:
    """Apply a validated sequence, in reverse, along ``axis`` of ``data``."""
    # Coordinate axis first; still a view on the caller's buffer
    view = np.moveaxis(data, axis, 0)

    for k in range(thetas.shape[0] - 1, -1, -1):
        s, c = sincos(thetas[k])
        if flips[k]:
            s = -s
        i, j = pairs[k]
        _mix(view[i:i + 1], view[j:j + 1], c, s)


# =============================================================================
# In-Place Entry Points
# =============================================================================

def apply_elemental_rotations_(data, thetas, coord_pairs, axis: int = -1) -> np.ndarray:
    """
    Rotate ``data`` in place by a sequence of elemental rotations.

    The coordinate pairs index ``axis`` of ``data``; every other axis is
    treated as a batch dimension. All validation happens before ``data`` is
    touched.

    Args:
        data: Writable floating ndarray
        thetas: (L,) angles
        coord_pairs: (L, 2) integer (from, to) pairs
        axis: Axis holding the vector components (default: last)

    Returns:
        data, mutated

    Raises:
        DimensionMismatch: Mismatched lengths, bad indices, bad axis, or a
            pair that mixes a coordinate with itself.
        TypeError: If ``data`` is not a writable floating ndarray.
    """
    require_float_buffer(data)
    if data.ndim == 0:
        raise DimensionMismatch("Cannot rotate a 0-dimensional array")

    axis = normalize_axis(axis, data.ndim)
    thetas, pairs, flips = _prepare_sequence(thetas, coord_pairs, data.shape[axis])

    _rotate_along(data, axis, thetas, pairs, flips)
    return data


def rotate_vector_(v, thetas, coord_pairs) -> np.ndarray:
    """Rotate a single vector in place."""
    require_float_buffer(v, "v")
    if v.ndim != 1:
        raise DimensionMismatch(f"Expected a 1-D vector, got shape {v.shape}")
    return apply_elemental_rotations_(v, thetas, coord_pairs, axis=0)


def rotate_rows_(batch, thetas, coord_pairs) -> np.ndarray:
    """Rotate every row of a 2-D batch in place (rows are vectors)."""
    require_float_buffer(batch, "batch")
    if batch.ndim != 2:
        raise DimensionMismatch(f"Expected a 2-D batch, got shape {batch.shape}")
    return apply_elemental_rotations_(batch, thetas, coord_pairs, axis=1)


# =============================================================================
# Pure Entry Points
# =============================================================================

def apply_elemental_rotations(data, thetas, coord_pairs, axis: int = -1) -> np.ndarray:
    """Return a rotated copy of ``data``; see ``apply_elemental_rotations_``."""
    return apply_elemental_rotations_(
        as_float_array(data, copy=True), thetas, coord_pairs, axis=axis
    )


def rotate_vector(v, thetas, coord_pairs) -> np.ndarray:
    """Return a rotated copy of a single vector."""
    return rotate_vector_(as_float_array(v, copy=True), thetas, coord_pairs)


def rotate_rows(batch, thetas, coord_pairs) -> np.ndarray:
    """Return a copy of ``batch`` with every row rotated."""
    return rotate_rows_(as_float_array(batch, copy=True), thetas, coord_pairs)


def sequence_matrix(N: int, thetas, coord_pairs) -> np.ndarray:
    """
    Matrix of an elemental rotation sequence.

    Returns G_1 G_2 ... G_L, so that ``sequence_matrix(N, t, p) @ v`` equals
    ``rotate_vector(v, t, p)``.

    Examples:
        >>> R = sequence_matrix(3, [np.pi / 2], [(0, 2)])
        >>> np.allclose(R, [[0, 0, 1], [0, 1, 0], [-1, 0, 0]])
        True
    """
    thetas = as_angle_vector(thetas)
    rot = np.eye(N, dtype=thetas.dtype)
    # Mixing rows of the identity left-multiplies by each elemental matrix
    return apply_elemental_rotations_(rot, thetas, coord_pairs, axis=0)


# =============================================================================
# PyTorch Variant
# =============================================================================

def apply_elemental_rotations_torch(
    x: 'torch.Tensor',
    thetas: 'torch.Tensor',
    coord_pairs,
    dim: int = -1,
) -> 'torch.Tensor':
    """
    Out-of-place elemental rotation sequence for torch tensors.

    Same sign and ordering conventions as ``apply_elemental_rotations_``,
    but differentiable with respect to both ``x`` and ``thetas``.

    Args:
        x: Tensor whose ``dim`` axis holds the vector components
        thetas: (L,) angles tensor
        coord_pairs: (L, 2) integer pairs (any array-like)
        dim: Component axis (default: last)

    Returns:
        Rotated tensor, same shape as ``x``
    """
    import torch

    if x.dim() == 0:
        raise DimensionMismatch("Cannot rotate a 0-dimensional tensor")
    dim = normalize_axis(dim, x.dim())

    angles = torch.as_tensor(thetas, dtype=x.dtype, device=x.device)
    _, pairs, flips = _prepare_sequence(
        angles.detach().cpu().numpy(), coord_pairs, x.shape[dim]
    )

    comps = list(torch.unbind(x, dim=dim))
    sines = torch.sin(angles)
    cosines = torch.cos(angles)

    for k in range(angles.shape[0] - 1, -1, -1):
        s = -sines[k] if flips[k] else sines[k]
        c = cosines[k]
        i, j = int(pairs[k, 0]), int(pairs[k, 1])
        a, b = comps[i], comps[j]
        comps[i], comps[j] = a * c - b * s, b * c + a * s

    return torch.stack(comps, dim=dim)
