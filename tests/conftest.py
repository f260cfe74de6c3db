# -*- coding: utf-8 -*-
"""
Pytest Configuration and Shared Fixtures
=========================================

Provides common fixtures for rotation tests.
"""

import pytest
import sys
from pathlib import Path

# Ensure project root is in path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
import torch


# =============================================================================
# Random Source Fixtures
# =============================================================================

@pytest.fixture
def rng():
    """Seeded generator so every test sees the same angles."""
    return np.random.default_rng(12345)


@pytest.fixture
def cpu_device():
    """Force CPU device."""
    return torch.device('cpu')


# =============================================================================
# Angle Fixtures
# =============================================================================

@pytest.fixture
def generic_angles(rng):
    """
    Angle vectors for N = 2..7 with every angle well away from 0 and ±π.

    Keeps decompositions away from the degenerate (zero-sine) policy.
    """
    angles = {}
    for N in range(2, 8):
        T = N * (N - 1) // 2
        signs = rng.choice([-1.0, 1.0], size=T)
        magnitudes = rng.uniform(0.2, np.pi - 0.2, size=T)
        angles[N] = signs * magnitudes
    return angles


@pytest.fixture
def wild_angles(rng):
    """Angle vectors for N = 2..7 drawn far outside the canonical ranges."""
    return {
        N: rng.uniform(-20.0, 20.0, size=N * (N - 1) // 2)
        for N in range(2, 8)
    }


@pytest.fixture
def random_rotation(rng):
    """Factory for Haar-ish SO(N) matrices from a QR decomposition."""
    def _make(N):
        Q, R = np.linalg.qr(rng.standard_normal((N, N)))
        Q = Q * np.sign(np.diag(R))
        if np.linalg.det(Q) < 0:
            Q[:, 0] = -Q[:, 0]
        return Q
    return _make


# =============================================================================
# Helper Functions
# =============================================================================

def assert_rotation_matrix(R, atol=1e-12, name="matrix"):
    """Assert R is orthogonal with determinant +1."""
    N = R.shape[0]
    assert R.shape == (N, N), f"{name} has shape {R.shape}, expected square"
    assert np.allclose(R.T @ R, np.eye(N), atol=atol), f"{name} is not orthogonal"
    assert np.isclose(np.linalg.det(R), 1.0, atol=1e-9), f"{name} has det != +1"


def assert_canonical(N, thetas, name="angles"):
    """Assert azimuths lie in [0, 2π) and polar angles in [0, π]."""
    for k in range(2, N + 1):
        start = (k - 1) * (k - 2) // 2
        azimuth = thetas[start]
        assert 0.0 <= azimuth < 2.0 * np.pi, f"{name}: azimuth {azimuth} out of range"
        for polar in thetas[start + 1:start + k - 1]:
            assert 0.0 <= polar <= np.pi, f"{name}: polar angle {polar} out of range"


def angle_distance(a, b):
    """Elementwise distance between angles modulo 2π."""
    d = np.mod(np.asarray(a) - np.asarray(b), 2.0 * np.pi)
    return np.minimum(d, 2.0 * np.pi - d)


# Export helpers for use in tests
pytest.assert_rotation_matrix = assert_rotation_matrix
pytest.assert_canonical = assert_canonical
pytest.angle_distance = angle_distance
