"""
Free-function forms of the vector and quaternion operations.

These mirror the methods on FixedVector / Quaternion so callers can write
``dot(a, b)`` or pass the operation around as a plain function.
"""

import numpy as np
from typing import Union

from .vector import FixedVector
from .quaternion import Quaternion


def dot(a: FixedVector, b: FixedVector):
    """
    Sum of pairwise products.

    Args:
        a: First vector
        b: Second vector of the same length and dtype

    Returns:
        Scalar of the vectors' dtype
    """
    return a.dot(b)


def cross(a: FixedVector, b: FixedVector) -> FixedVector:
    """
    Right-handed cross product of two 3-component vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Vector perpendicular to both inputs
    """
    return a.cross(b)


def length2(v: Union[FixedVector, Quaternion]):
    """Squared length of a vector or quaternion."""
    if isinstance(v, Quaternion):
        return v.length_squared()
    return v.length2()


def length(v: Union[FixedVector, Quaternion]):
    """Euclidean length of a vector or quaternion."""
    return v.length()


def normalized(v: Union[FixedVector, Quaternion]) -> Union[FixedVector, Quaternion]:
    """
    Unit-length copy of ``v``.

    Quaternions raise ZeroLengthError below a squared length of 1e-5;
    vectors follow plain float division.
    """
    return v.normalized()


def angle_between(a: FixedVector, b: FixedVector):
    """
    Unsigned angle in radians between two float vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Angle in [0, pi] of the vectors' dtype
    """
    cos = a.dot(b) / (a.length() * b.length())
    return np.arccos(np.clip(cos, -1.0, 1.0)).astype(a.dtype)
