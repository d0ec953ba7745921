"""
Exception hierarchy for fixedmath.

Every fallible operation raises one of these immediately; nothing is
retried. Errors that wrap a lower-level failure keep it in
``vector_error`` and chain it with ``raise ... from``.
"""

from typing import Optional


class FixedMathError(Exception):
    """Base class for all fixedmath errors."""

    default_message = 'fixedmath error'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


# ---------------------------------------------------------------------------
# Vectors
# ---------------------------------------------------------------------------

class VectorError(FixedMathError):
    default_message = 'vector error'


class ZeroComponentsError(VectorError):
    default_message = 'vector has no components'


class NoComponentWithGivenIndexError(VectorError, IndexError):
    default_message = 'vector has no component with the given index'


class DimensionMismatchError(VectorError, ValueError):
    default_message = 'vectors have different numbers of components'


# ---------------------------------------------------------------------------
# Matrices
# ---------------------------------------------------------------------------

class MatrixError(FixedMathError):
    default_message = 'matrix error'

    def __init__(self, message: Optional[str] = None, vector_error: Optional[VectorError] = None):
        super().__init__(message or (str(vector_error) if vector_error else None))
        self.vector_error = vector_error


class NotSquareError(MatrixError):
    default_message = 'matrix shapes are incompatible'


class TooFewRowsError(MatrixError):
    default_message = 'matrix has too few rows'


class TooFewColumnsError(MatrixError):
    default_message = 'matrix has too few columns'


class OutOfRangeFOVError(MatrixError):
    default_message = 'field of view must be in the open interval (0, pi)'


class IncorrectNearFarPlanesError(MatrixError):
    default_message = 'near plane must satisfy 0 < near < far'


# ---------------------------------------------------------------------------
# Quaternions
# ---------------------------------------------------------------------------

class QuaternionError(FixedMathError):
    default_message = 'quaternion error'

    def __init__(self, message: Optional[str] = None, vector_error: Optional[VectorError] = None):
        super().__init__(message or (str(vector_error) if vector_error else None))
        self.vector_error = vector_error


class ZeroLengthError(QuaternionError):
    default_message = 'quaternion has a length of 0 or close to 0'


# ---------------------------------------------------------------------------
# Networks
# ---------------------------------------------------------------------------

class NNetError(FixedMathError):
    default_message = 'network error'


class OutputLargerThanHiddenLayerError(NNetError):
    default_message = 'Output layer cannot be larger than hidden layers'


class CouldNotReadBufferError(NNetError):
    default_message = 'Could not read from buffer when loading'


class CouldNotWriteBufferError(NNetError):
    default_message = 'Could not write to buffer when saving'
