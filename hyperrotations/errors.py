# -*- coding: utf-8 -*-
"""
Rotation Errors
===============

Exception types raised by the rotation engine.

All of them derive from ``ValueError``.
"""


class RotationError(ValueError):
    """Base class for every error raised by hyperrotations."""


class DimensionMismatch(RotationError):
    """
    Shapes or counts do not fit together.

    Raised when the angle count T and dimension N violate N(N-1) = 2T, when an
    elemental rotation mixes a coordinate with itself, when a matrix is not
    square, or when a rotation sequence and its coordinate pairs disagree.
    """


class RotationDomainError(RotationError):
    """
    Input has the right shape but lies outside the operation's domain.

    Examples: a matrix that is not orthogonal to within tolerance, a matrix
    with non-positive determinant, or a zero vector passed for normalization.
    """
