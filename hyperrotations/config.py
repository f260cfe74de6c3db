# -*- coding: utf-8 -*-
"""
Tolerance Configuration
=======================

Single source of truth for the numerical tolerances used by the rotation
engine. Tolerances scale with the machine epsilon of the working floating
type, so the same configuration serves float32 and float64 data.
"""

from dataclasses import dataclass, replace

import numpy as np


@dataclass(frozen=True)
class ToleranceConfig:
    """
    Numerical tolerances for decomposition and validation.

    Attributes:
        zero_tol_eps: Multiples of eps below which a running denominator is
            treated as exactly zero when inverting unit vectors.
        ortho_tol_eps: Multiples of N * eps allowed in max|MᵀM - I| before a
            matrix is rejected as non-orthogonal.
        norm_warn_tol: Allowed deviation of ||v|| from 1 before the unit
            vector codec warns about its input.
    """

    zero_tol_eps: float = 8.0
    ortho_tol_eps: float = 256.0
    norm_warn_tol: float = 1e-6

    def zero_tol(self, dtype=np.float64) -> float:
        """Degeneracy threshold for the given floating dtype."""
        return float(self.zero_tol_eps * np.finfo(dtype).eps)

    def ortho_tol(self, dtype=np.float64, N: int = 1) -> float:
        """Orthogonality threshold for an N×N matrix of the given dtype."""
        return float(self.ortho_tol_eps * max(N, 1) * np.finfo(dtype).eps)


DEFAULT_TOLERANCES = ToleranceConfig()


# =============================================================================
# Preset Configurations
# =============================================================================

def get_strict_tolerances(**overrides) -> ToleranceConfig:
    """Tight tolerances for matrices produced directly by this package."""
    config = ToleranceConfig(
        zero_tol_eps=4.0,
        ortho_tol_eps=64.0,
        norm_warn_tol=1e-10,
    )
    return replace(config, **overrides)


def get_loose_tolerances(**overrides) -> ToleranceConfig:
    """Forgiving tolerances for matrices read from text or low-precision sources."""
    config = ToleranceConfig(
        zero_tol_eps=64.0,
        ortho_tol_eps=1e6,
        norm_warn_tol=1e-3,
    )
    return replace(config, **overrides)


def resolve_zero_tol(zero_tol, dtype) -> float:
    """Return ``zero_tol`` or the default threshold for ``dtype``."""
    if zero_tol is None:
        return DEFAULT_TOLERANCES.zero_tol(dtype)
    return float(zero_tol)


def resolve_ortho_tol(ortho_tol, dtype, N: int) -> float:
    """Return ``ortho_tol`` or the default orthogonality threshold."""
    if ortho_tol is None:
        return DEFAULT_TOLERANCES.ortho_tol(dtype, N)
    return float(ortho_tol)
