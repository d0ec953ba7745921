"""
Fixed-dimension algebra for fixedmath.

Provides the core numeric structures:
- Scalar capabilities: per-dtype sqrt/square/abs/constants and seeded generation
- FixedVector: N-component vectors with swizzles, dot and cross products
- FixedMatrix: column-major matrices with 3D transform constructors
- Quaternion: rotation quaternions with the Hamilton product
"""

from .scalar import ScalarCapabilities, NumpyScalar, RandomSource, get_scalar
from .vector import FixedVector, vector
from .matrix import FixedMatrix
from .quaternion import Quaternion
from .operations import dot, cross, length, length2, normalized, angle_between

__all__ = [
    'ScalarCapabilities',
    'NumpyScalar',
    'RandomSource',
    'get_scalar',
    'FixedVector',
    'vector',
    'FixedMatrix',
    'Quaternion',
    'dot',
    'cross',
    'length',
    'length2',
    'normalized',
    'angle_between',
]
