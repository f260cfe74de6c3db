# -*- coding: utf-8 -*-
"""
Hyperrotations
==============

Generalized Euler angles for the N-dimensional rotation group SO(N).

Converts between three representations of a rotation:
- a minimal vector of N(N-1)/2 angles,
- an explicit N×N orthogonal matrix,
- direct rotation of vectors and tensors by elemental two-plane rotations.

Also provides angle canonicalization and the Haar-measure Jacobian of the
parametrization.
"""

from .errors import (
    RotationError,
    DimensionMismatch,
    RotationDomainError,
)
from .config import (
    ToleranceConfig,
    DEFAULT_TOLERANCES,
    get_strict_tolerances,
    get_loose_tolerances,
)
from .dimensions import (
    n_angles,
    dimension_from_n_angles,
    check_dimension,
    block_slices,
)
from .unit_vectors import (
    unit_vector_from_angles,
    angles_from_unit_vector,
    normalize_vector,
    normalize_vector_,
)
from .elemental import (
    apply_elemental_rotations,
    apply_elemental_rotations_,
    apply_elemental_rotations_torch,
    rotate_vector,
    rotate_vector_,
    rotate_rows,
    rotate_rows_,
    sequence_matrix,
)
from .euler import (
    build_rotation_matrix,
    build_rotation_matrix_torch,
    angles_from_rotation_matrix,
    euler_coordinate_pairs,
    euler_sequence,
    rotate_euler,
    rotate_euler_,
)
from .canonical import (
    canonicalize_angles,
    canonicalize_angles_,
    canonicalize_unit_vector_angles,
    canonicalize_unit_vector_angles_,
)
from .haar import (
    haar_jacobian,
    haar_volume,
    sample_haar_angles,
)

__all__ = [
    # Errors
    'RotationError',
    'DimensionMismatch',
    'RotationDomainError',

    # Configuration
    'ToleranceConfig',
    'DEFAULT_TOLERANCES',
    'get_strict_tolerances',
    'get_loose_tolerances',

    # Dimension contract
    'n_angles',
    'dimension_from_n_angles',
    'check_dimension',
    'block_slices',

    # Unit vectors
    'unit_vector_from_angles',
    'angles_from_unit_vector',
    'normalize_vector',
    'normalize_vector_',

    # Elemental rotations
    'apply_elemental_rotations',
    'apply_elemental_rotations_',
    'apply_elemental_rotations_torch',
    'rotate_vector',
    'rotate_vector_',
    'rotate_rows',
    'rotate_rows_',
    'sequence_matrix',

    # Euler parametrization
    'build_rotation_matrix',
    'build_rotation_matrix_torch',
    'angles_from_rotation_matrix',
    'euler_coordinate_pairs',
    'euler_sequence',
    'rotate_euler',
    'rotate_euler_',

    # Canonicalization
    'canonicalize_angles',
    'canonicalize_angles_',
    'canonicalize_unit_vector_angles',
    'canonicalize_unit_vector_angles_',

    # Haar measure
    'haar_jacobian',
    'haar_volume',
    'sample_haar_angles',
]
