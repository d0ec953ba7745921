"""
fixedmath: fixed-dimension numeric algebra and a small feed-forward network.

Vectors, column-major matrices and quaternions with 3D transform
construction, plus a fixed-topology network with a fast-sigmoid
activation and a raw binary weight format.
"""

__version__ = '1.0.0'

from . import algebra
from . import layers
from . import models
from . import data
from .errors import (
    FixedMathError,
    VectorError,
    MatrixError,
    QuaternionError,
    NNetError,
)
