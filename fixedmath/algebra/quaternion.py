"""
Rotation quaternions.

A Quaternion wraps a float32 FixedVector of (x, y, z, w), where w is the
real part. Multiplication between quaternions is the Hamilton product;
every other operator is component-wise.
"""

import numpy as np
from typing import Tuple

from .vector import FixedVector, vector
from ..errors import VectorError, ZeroLengthError


# Squared lengths below this are treated as zero
_EPSILON = 1e-5


class _IdentityConstant:
    """Class-level constant that hands out a fresh identity quaternion on every access."""

    def __get__(self, instance, owner):
        return owner(0.0, 0.0, 0.0, 1.0)


class Quaternion:
    """
    Quaternion x*i + y*j + z*k + w.

    Args:
        x, y, z: Imaginary (vector) part
        w: Real (scalar) part
    """

    __slots__ = ('_components',)

    __array_ufunc__ = None

    IDENTITY = _IdentityConstant()

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 1.0):
        self._components = FixedVector([x, y, z, w], dtype=np.float32)

    @classmethod
    def from_vec(cls, xyz, w: float) -> 'Quaternion':
        xyz = _as_float32(xyz)
        return cls(xyz[0], xyz[1], xyz[2], w)

    @classmethod
    def from_vec4(cls, xyzw) -> 'Quaternion':
        xyzw = _as_float32(xyzw)
        if len(xyzw) != 4:
            raise ValueError(f"Expected 4 components, got {len(xyzw)}")
        quat = cls.__new__(cls)
        quat._components = xyzw.copy()
        return quat

    @classmethod
    def from_axis_angle(cls, axis, radians: float) -> 'Quaternion':
        """
        Rotation of ``radians`` around ``axis``.

        Raises:
            ZeroLengthError: the axis has a length of 0 or close to 0
        """
        axis = _as_float32(axis)
        if len(axis) != 3:
            raise ValueError(f"Axis must have 3 components, got {len(axis)}")
        if axis.length2() < _EPSILON:
            cause = VectorError("Axis has a length of 0 or close to 0")
            raise ZeroLengthError(vector_error=cause) from cause
        normal = axis.normalized()
        half_angle = np.float32(radians) * np.float32(0.5)
        return cls.from_vec(normal * np.sin(half_angle), np.cos(half_angle)).normalized()

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def x(self) -> np.float32:
        return self._components[0]

    @property
    def y(self) -> np.float32:
        return self._components[1]

    @property
    def z(self) -> np.float32:
        return self._components[2]

    @property
    def w(self) -> np.float32:
        return self._components[3]

    @property
    def xyz(self) -> FixedVector:
        return self._components.xyz

    @property
    def xyzw(self) -> FixedVector:
        return self._components.copy()

    def set_x(self, value: float):
        self._components[0] = value

    def set_y(self, value: float):
        self._components[1] = value

    def set_z(self, value: float):
        self._components[2] = value

    def set_w(self, value: float):
        self._components[3] = value

    def set_xyz(self, value):
        value = _as_float32(value)
        for idx in range(3):
            self._components[idx] = value[idx]

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def length_squared(self) -> np.float32:
        return self.w * self.w + self.xyz.length2()

    def length(self) -> np.float32:
        return np.sqrt(self.length_squared())

    def normalized(self) -> 'Quaternion':
        """
        Unit quaternion with the same rotation.

        Raises:
            ZeroLengthError: squared length below 1e-5
        """
        len_sq = self.length_squared()
        if len_sq < _EPSILON:
            raise ZeroLengthError()
        length = np.sqrt(len_sq)
        return Quaternion.from_vec(self.xyz / length, self.w / length)

    def invert(self) -> 'Quaternion':
        """
        Multiplicative inverse: the conjugate divided by the squared length.

        Returns a new quaternion and leaves this one untouched. A quaternion
        with squared length near zero is returned unchanged (as a copy).
        """
        len_sq = self.length_squared()
        if abs(len_sq) > _EPSILON:
            inv = np.float32(1.0) / len_sq
            return Quaternion.from_vec(self.xyz * -inv, self.w * inv)
        return self.copy()

    def conjugate(self) -> 'Quaternion':
        return Quaternion.from_vec(-self.xyz, self.w)

    def axis_angle(self) -> Tuple[FixedVector, np.float32]:
        """
        Recover (axis, angle in radians).

        Falls back to the x axis with angle 0 when the rotation is (close
        to) the identity and the axis is undefined.
        """
        norm = self.normalized() if self.w > 1.0 else self
        w = norm.w
        # |w| > 1 gives NaN here and takes the x-axis fallback
        with np.errstate(invalid='ignore'):
            angle = np.float32(2.0) * np.arccos(w)
            den = np.sqrt(np.float32(1.0) - w * w)
        if den > _EPSILON:
            return norm.xyz / den, angle
        return vector(1.0, 0.0, 0.0, dtype=np.float32), np.float32(0.0)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _operand(self, other):
        if isinstance(other, Quaternion):
            return other._components
        if isinstance(other, (int, float, np.generic)):
            return np.float32(other)
        return None

    def __add__(self, other):
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return Quaternion.from_vec4(self._components + rhs)

    def __sub__(self, other):
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return Quaternion.from_vec4(self._components - rhs)

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            return self.hamilton(other)
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return Quaternion.from_vec4(self._components * rhs)

    def __rmul__(self, other):
        if isinstance(other, Quaternion):
            return NotImplemented
        return self.__mul__(other)

    def __truediv__(self, other):
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return Quaternion.from_vec4(self._components / rhs)

    def __mod__(self, other):
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return Quaternion.from_vec4(self._components % rhs)

    def __neg__(self) -> 'Quaternion':
        return Quaternion.from_vec4(-self._components)

    def hamilton(self, other: 'Quaternion') -> 'Quaternion':
        """Hamilton product ``self * other`` (apply ``other`` first, then ``self``)."""
        a, b = self.xyz, other.xyz
        cross = a.cross(b)
        dot = a.dot(b)
        return Quaternion(
            self.x * other.w + other.x * self.w + cross[0],
            self.y * other.w + other.y * self.w + cross[1],
            self.z * other.w + other.z * self.w + cross[2],
            self.w * other.w - dot,
        )

    # ------------------------------------------------------------------
    # Conversion and comparison
    # ------------------------------------------------------------------

    def copy(self) -> 'Quaternion':
        return Quaternion.from_vec4(self._components)

    def to_list(self):
        return self._components.to_list()

    def allclose(self, other: 'Quaternion', rtol: float = 1e-5, atol: float = 1e-6) -> bool:
        return self._components.allclose(other._components, rtol=rtol, atol=atol)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self._components == other._components

    __hash__ = None

    def __repr__(self) -> str:
        x, y, z, w = self.to_list()
        return f"Quaternion(x={x}, y={y}, z={z}, w={w})"


def _as_float32(value) -> FixedVector:
    if isinstance(value, FixedVector):
        return value if value.dtype == np.float32 else value.convert(np.float32)
    return FixedVector(value, dtype=np.float32)
