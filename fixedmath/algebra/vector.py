"""
Fixed-dimension vectors.

A FixedVector holds N components of a single numpy dtype. N is fixed when
the vector is built and never changes; every arithmetic operation keeps
both N and the dtype.

Component-wise operators (+, -, *, /, %) accept another vector of the same
length and dtype or a broadcast scalar. Integer division truncates toward
zero and % is the truncated remainder (sign of the dividend), for floats
% is fmod.
"""

import numpy as np
from typing import Iterable, Iterator, List, Sequence, Tuple

from .scalar import NumpyScalar, get_scalar
from ..errors import (
    DimensionMismatchError,
    NoComponentWithGivenIndexError,
    ZeroComponentsError,
)


# Named component access: name -> (component indices, allowed lengths)
_SWIZZLES = {
    'xy': ((0, 1), (3, 4)),
    'yz': ((1, 2), (3, 4)),
    'zw': ((2, 3), (4,)),
    'xyz': ((0, 1, 2), (4,)),
    'yzw': ((1, 2, 3), (4,)),
}


def _truncated_divide(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    if np.any(b == 0):
        raise ZeroDivisionError("integer division by zero")
    quotient = np.floor_divide(a, b)
    remainder = a - quotient * b
    # floor_divide rounds toward -inf; move inexact negative quotients back to 0
    adjust = (remainder != 0) & ((a < 0) != (b < 0))
    return quotient + adjust.astype(quotient.dtype)


def _truncated_remainder(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    if np.any(b == 0):
        raise ZeroDivisionError("integer modulo by zero")
    return np.fmod(a, b)


class FixedVector:
    """
    An N-component numeric vector.

    Args:
        components: Iterable of exactly N scalars (N >= 1)
        dtype: numpy dtype of the components, inferred when omitted

    Example:
        >>> v = FixedVector([3.0, 4.0], dtype=np.float32)
        >>> float(v.length())
        5.0
    """

    __slots__ = ('_data', '_scalar')

    # numpy scalars on the left defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, components: Iterable, dtype=None):
        if isinstance(components, FixedVector):
            components = components._data
        data = np.array(list(components) if not isinstance(components, np.ndarray) else components,
                        dtype=dtype)
        if data.ndim != 1:
            raise ValueError(f"Vector components must be one-dimensional, got shape {data.shape}")
        if data.size == 0:
            raise ZeroComponentsError()
        self._scalar = get_scalar(data.dtype)
        self._data = data

    @classmethod
    def _wrap(cls, data: np.ndarray) -> 'FixedVector':
        """Wrap an existing 1-D array without copying (used for matrix column views)."""
        vec = cls.__new__(cls)
        vec._data = data
        vec._scalar = get_scalar(data.dtype)
        return vec

    @classmethod
    def zeros(cls, n: int, dtype=np.float64) -> 'FixedVector':
        return cls._filled(n, get_scalar(dtype).zero())

    @classmethod
    def ones(cls, n: int, dtype=np.float64) -> 'FixedVector':
        return cls._filled(n, get_scalar(dtype).one())

    @classmethod
    def twos(cls, n: int, dtype=np.float64) -> 'FixedVector':
        return cls._filled(n, get_scalar(dtype).two())

    @classmethod
    def _filled(cls, n: int, value) -> 'FixedVector':
        if n < 1:
            raise ZeroComponentsError()
        return cls._wrap(np.full(n, value, dtype=np.asarray(value).dtype))

    # ------------------------------------------------------------------
    # Shape and element access
    # ------------------------------------------------------------------

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def scalar(self) -> NumpyScalar:
        return self._scalar

    def __len__(self) -> int:
        return self._data.shape[0]

    def __iter__(self) -> Iterator:
        return iter(self._data)

    def _check_index(self, idx: int) -> int:
        if isinstance(idx, (bool, np.bool_)) or not isinstance(idx, (int, np.integer)):
            raise TypeError(f"Vector indices must be integers, not {type(idx).__name__}")
        if not 0 <= idx < len(self):
            raise IndexError(f"Index {idx} out of range for {len(self)}-component vector")
        return int(idx)

    def __getitem__(self, idx: int):
        return self._data[self._check_index(idx)]

    def __setitem__(self, idx: int, value):
        self._data[self._check_index(idx)] = self._coerce_scalar(value)

    def component(self, idx: int):
        """Checked access: raises NoComponentWithGivenIndexError instead of a bare IndexError."""
        try:
            return self[idx]
        except IndexError as e:
            raise NoComponentWithGivenIndexError(str(e)) from e

    def set_component(self, idx: int, value):
        try:
            self[idx] = value
        except IndexError as e:
            raise NoComponentWithGivenIndexError(str(e)) from e

    def _get_named(self, indices: Tuple[int, ...], allowed: Sequence[int], name: str):
        if len(self) not in allowed:
            raise AttributeError(f"'{name}' is not defined for {len(self)}-component vectors")
        if len(indices) == 1:
            return self._data[indices[0]]
        return FixedVector._wrap(self._data[list(indices)].copy())

    def _set_named(self, idx: int, allowed: Sequence[int], name: str, value):
        if len(self) not in allowed:
            raise AttributeError(f"'{name}' is not defined for {len(self)}-component vectors")
        self._data[idx] = self._coerce_scalar(value)

    x = property(lambda self: self._get_named((0,), (1, 2, 3, 4), 'x'),
                 lambda self, v: self._set_named(0, (1, 2, 3, 4), 'x', v))
    y = property(lambda self: self._get_named((1,), (2, 3, 4), 'y'),
                 lambda self, v: self._set_named(1, (2, 3, 4), 'y', v))
    z = property(lambda self: self._get_named((2,), (3, 4), 'z'),
                 lambda self, v: self._set_named(2, (3, 4), 'z', v))
    w = property(lambda self: self._get_named((3,), (4,), 'w'),
                 lambda self, v: self._set_named(3, (4,), 'w', v))

    def __getattr__(self, name: str):
        # Only reached when normal lookup fails, i.e. for the multi-component swizzles
        if name in _SWIZZLES:
            indices, allowed = _SWIZZLES[name]
            return self._get_named(indices, allowed, name)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    # ------------------------------------------------------------------
    # Operand handling
    # ------------------------------------------------------------------

    def _coerce_scalar(self, value):
        """Cast a broadcast scalar to this vector's dtype, refusing to widen it."""
        if isinstance(value, np.generic):
            if not np.can_cast(value.dtype, self.dtype, casting='safe'):
                raise TypeError(f"Cannot combine {value.dtype} scalar with {self.dtype} vector")
            return self.dtype.type(value)
        if isinstance(value, (bool, int)):
            return self.dtype.type(value)
        if isinstance(value, float):
            if not self._scalar.is_float:
                raise TypeError(f"Cannot combine float scalar with {self.dtype} vector")
            return self.dtype.type(value)
        raise TypeError(f"Unsupported operand type: {type(value).__name__}")

    def _operand(self, other):
        if isinstance(other, FixedVector):
            if len(other) != len(self):
                raise DimensionMismatchError(
                    f"Vector lengths differ: {len(self)} and {len(other)}"
                )
            if other.dtype != self.dtype:
                raise TypeError(f"Vector dtypes differ: {self.dtype} and {other.dtype}")
            return other._data
        return self._coerce_scalar(other)

    def _compute(self, a, b, op: str) -> np.ndarray:
        integer = not self._scalar.is_float
        if op == 'add':
            return np.add(a, b, dtype=self.dtype)
        if op == 'sub':
            return np.subtract(a, b, dtype=self.dtype)
        if op == 'mul':
            return np.multiply(a, b, dtype=self.dtype)
        a = np.broadcast_to(np.asarray(a, dtype=self.dtype), self._data.shape)
        b = np.broadcast_to(np.asarray(b, dtype=self.dtype), self._data.shape)
        if op == 'div':
            if integer:
                return _truncated_divide(a, b)
            with np.errstate(divide='ignore', invalid='ignore'):
                return np.true_divide(a, b, dtype=self.dtype)
        if op == 'rem':
            if integer:
                return _truncated_remainder(a, b)
            with np.errstate(divide='ignore', invalid='ignore'):
                return np.fmod(a, b)
        raise ValueError(f"Unknown operation: {op}")

    def _binary(self, other, op: str, reflected: bool = False) -> 'FixedVector':
        if not isinstance(other, (FixedVector, int, float, np.generic)):
            return NotImplemented
        rhs = self._operand(other)
        if reflected:
            return FixedVector._wrap(self._compute(rhs, self._data, op))
        return FixedVector._wrap(self._compute(self._data, rhs, op))

    def _inplace(self, other, op: str) -> 'FixedVector':
        self._data[...] = self._compute(self._data, self._operand(other), op)
        return self

    def __add__(self, other):
        return self._binary(other, 'add')

    def __sub__(self, other):
        return self._binary(other, 'sub')

    def __mul__(self, other):
        return self._binary(other, 'mul')

    def __truediv__(self, other):
        return self._binary(other, 'div')

    def __mod__(self, other):
        return self._binary(other, 'rem')

    def __radd__(self, other):
        return self._binary(other, 'add', reflected=True)

    def __rsub__(self, other):
        return self._binary(other, 'sub', reflected=True)

    def __rmul__(self, other):
        return self._binary(other, 'mul', reflected=True)

    def __rtruediv__(self, other):
        return self._binary(other, 'div', reflected=True)

    def __rmod__(self, other):
        return self._binary(other, 'rem', reflected=True)

    def __iadd__(self, other):
        return self._inplace(other, 'add')

    def __isub__(self, other):
        return self._inplace(other, 'sub')

    def __imul__(self, other):
        return self._inplace(other, 'mul')

    def __itruediv__(self, other):
        return self._inplace(other, 'div')

    def __imod__(self, other):
        return self._inplace(other, 'rem')

    def __neg__(self) -> 'FixedVector':
        return FixedVector._wrap(np.negative(self._data))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def length2(self):
        """Sum of squared components."""
        if len(self) == 0:
            raise ZeroComponentsError()
        total = self._scalar.square(self._data[0])
        for value in self._data[1:]:
            total = total + self._scalar.square(value)
        return self.dtype.type(total)

    def length(self):
        """Euclidean length. Integer vectors return a float64 length."""
        return self._scalar.sqrt(self.length2())

    def normalized(self) -> 'FixedVector':
        """
        Unit vector in the same direction.

        A zero vector yields non-finite components, as plain float
        division does. Integer vectors cannot be normalized in place of
        their dtype and raise TypeError.
        """
        if not self._scalar.is_float:
            raise TypeError(f"Cannot normalize a {self.dtype} vector; convert it to a float dtype first")
        length = self.length()
        with np.errstate(divide='ignore', invalid='ignore'):
            return FixedVector._wrap(self._data / length)

    def dot(self, other: 'FixedVector'):
        """Pairwise multiply then sum."""
        if not isinstance(other, FixedVector):
            raise TypeError("dot expects a FixedVector")
        rhs = self._operand(other)
        return np.multiply(self._data, rhs, dtype=self.dtype).sum(dtype=self.dtype)

    def cross(self, other: 'FixedVector') -> 'FixedVector':
        """Right-handed cross product, defined for 3-component vectors."""
        if len(self) != 3:
            raise DimensionMismatchError(
                f"Cross product requires 3-component vectors, got {len(self)}"
            )
        if not isinstance(other, FixedVector):
            raise TypeError("cross expects a FixedVector")
        b = self._operand(other)
        a = self._data
        return FixedVector._wrap(np.array([
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ], dtype=self.dtype))

    # ------------------------------------------------------------------
    # Conversion and comparison
    # ------------------------------------------------------------------

    def convert(self, dtype) -> 'FixedVector':
        """Map every component to ``dtype`` (e.g. float32 <-> float64)."""
        return FixedVector._wrap(self._data.astype(get_scalar(dtype).dtype))

    def copy(self) -> 'FixedVector':
        return FixedVector._wrap(self._data.copy())

    def to_list(self) -> List:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def allclose(self, other, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        other = other._data if isinstance(other, FixedVector) else np.asarray(other)
        if other.shape != self._data.shape:
            return False
        return bool(np.allclose(self._data, other, rtol=rtol, atol=atol))

    def __eq__(self, other) -> bool:
        if not isinstance(other, FixedVector):
            return NotImplemented
        return len(self) == len(other) and bool(np.array_equal(self._data, other._data))

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        """
        Hash of the current components.

        Vectors are mutable in place (``+=``, ``set_component``, matrix
        column views), so a vector used as a dict key or set member must not
        be modified afterwards. Store ``v.copy()`` when in doubt.
        """
        return hash(tuple(self.to_list()))

    def __str__(self) -> str:
        return '(' + ', '.join(repr(v) for v in self.to_list()) + ')'

    def __repr__(self) -> str:
        return f"FixedVector({self.to_list()}, dtype={self.dtype.name})"


def vector(*components, dtype=None) -> FixedVector:
    """
    Build a vector from its components.

    Example:
        >>> int(vector(2, 3, 4).length2())
        29
    """
    return FixedVector(components, dtype=dtype)
