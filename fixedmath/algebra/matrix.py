"""
Column-major fixed-size matrices and 3D transform constructors.

A FixedMatrix with C columns and R rows stores C column vectors of R
components each. ``m[i]`` is column i, returned as a FixedVector that
shares the matrix storage.

Multiplication follows the column-major convention used throughout:
``(a * b)[row][col] = a.column(row) . b.row(col)``. Applied to homogeneous
transforms this composes ``b`` after ``a``, so

    identity.set_position((1, 2, 3))
    identity * new_position_scale((1, 0, 1), (2, 2, 2))

has position (3, 4, 7).
"""

import numpy as np
from typing import Iterable, List, Optional, Sequence, Tuple

from .scalar import get_scalar
from .vector import FixedVector, vector
from ..errors import (
    DimensionMismatchError,
    IncorrectNearFarPlanesError,
    MatrixError,
    NotSquareError,
    OutOfRangeFOVError,
    TooFewColumnsError,
    TooFewRowsError,
)


_F32_PI = np.float32(np.pi)


class FixedMatrix:
    """
    A matrix of ``column_count`` columns, each a FixedVector of ``row_count``
    components.

    Args:
        columns: Iterable of columns (FixedVectors or sequences), all the same length
        dtype: numpy dtype, inferred from the columns when omitted
    """

    __slots__ = ('_data',)

    __array_ufunc__ = None

    def __init__(self, columns: Iterable, dtype=None):
        cols = [c.to_numpy() if isinstance(c, FixedVector) else c for c in columns]
        if not cols:
            raise TooFewColumnsError("matrix needs at least one column")
        lengths = {len(c) for c in cols}
        if len(lengths) != 1:
            raise MatrixError(vector_error=DimensionMismatchError(
                f"Columns have different lengths: {sorted(lengths)}"
            ))
        if 0 in lengths:
            raise TooFewRowsError("matrix needs at least one row")
        data = np.array(cols, dtype=dtype)
        get_scalar(data.dtype)
        self._data = data

    @classmethod
    def _wrap(cls, data: np.ndarray) -> 'FixedMatrix':
        mat = cls.__new__(cls)
        mat._data = data
        return mat

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_columns(cls, columns: Iterable, dtype=None) -> 'FixedMatrix':
        return cls(columns, dtype=dtype)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence], dtype=None) -> 'FixedMatrix':
        """Build from row-major nested input, i.e. the way matrices are usually written."""
        data = np.array(rows, dtype=dtype)
        if data.ndim != 2 or data.size == 0:
            raise MatrixError(f"Expected a non-empty 2-D row list, got shape {data.shape}")
        return cls(data.T)

    @classmethod
    def identity(cls, n_columns: int = 4, n_rows: Optional[int] = None, dtype=np.float64) -> 'FixedMatrix':
        """Ones on the diagonal, zeros elsewhere."""
        n_rows = n_columns if n_rows is None else n_rows
        if n_columns < 1:
            raise TooFewColumnsError()
        if n_rows < 1:
            raise TooFewRowsError()
        scalar = get_scalar(dtype)
        data = np.full((n_columns, n_rows), scalar.zero(), dtype=scalar.dtype)
        for idx in range(min(n_columns, n_rows)):
            data[idx, idx] = scalar.one()
        return cls._wrap(data)

    @classmethod
    def from_smaller(cls, columns: Sequence[Sequence], n_columns: int = 4,
                     n_rows: Optional[int] = None, dtype=None) -> 'FixedMatrix':
        """
        Embed a smaller column-major block in the top-left of an identity matrix.

        Raises:
            TooFewRowsError: the block has more rows than ``n_rows``
            TooFewColumnsError: the block has more columns than ``n_columns``
        """
        n_rows = n_columns if n_rows is None else n_rows
        block = np.array(columns, dtype=dtype)
        if block.ndim != 2:
            raise MatrixError(f"Expected a 2-D column list, got shape {block.shape}")
        block_columns, block_rows = block.shape
        if block_rows > n_rows:
            raise TooFewRowsError()
        if block_columns > n_columns:
            raise TooFewColumnsError()
        mat = cls.identity(n_columns, n_rows, dtype=block.dtype)
        mat._data[:block_columns, :block_rows] = block
        return mat

    @classmethod
    def new_position(cls, position, n_columns: int = 4, n_rows: Optional[int] = None,
                     dtype=None) -> 'FixedMatrix':
        """Identity matrix translated to ``position``."""
        position = _as_vector(position, dtype)
        mat = cls.identity(n_columns, n_rows, dtype=position.dtype)
        mat.set_position(position)
        return mat

    @classmethod
    def new_scale(cls, scale, n_columns: int = 4, n_rows: Optional[int] = None,
                  dtype=None) -> 'FixedMatrix':
        """Identity matrix with axis lengths ``scale``. Integer input builds a float64 matrix."""
        scale = _as_float_vector(scale, dtype)
        mat = cls.identity(n_columns, n_rows, dtype=scale.dtype)
        mat.set_scale(scale)
        return mat

    @classmethod
    def new_position_scale(cls, position, scale, n_columns: int = 4,
                           n_rows: Optional[int] = None, dtype=None) -> 'FixedMatrix':
        position = _as_float_vector(position, dtype)
        mat = cls.identity(n_columns, n_rows, dtype=position.dtype)
        mat.set_position(position)
        mat.set_scale(scale)
        return mat

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def column_count(self) -> int:
        return self._data.shape[0]

    @property
    def row_count(self) -> int:
        return self._data.shape[1]

    @property
    def row_length(self) -> int:
        return self.column_count

    @property
    def column_length(self) -> int:
        return self.row_count

    @property
    def shape(self) -> Tuple[int, int]:
        """(columns, rows)"""
        return self.column_count, self.row_count

    def __len__(self) -> int:
        return self.column_count

    # ------------------------------------------------------------------
    # Columns and rows
    # ------------------------------------------------------------------

    def _check_column(self, idx: int) -> int:
        if isinstance(idx, (bool, np.bool_)) or not isinstance(idx, (int, np.integer)):
            raise TypeError(f"Column indices must be integers, not {type(idx).__name__}")
        if not 0 <= idx < self.column_count:
            raise IndexError(f"Column {idx} out of range for {self.column_count}-column matrix")
        return int(idx)

    def __getitem__(self, idx: int) -> FixedVector:
        return FixedVector._wrap(self._data[self._check_column(idx)])

    def __setitem__(self, idx: int, column):
        idx = self._check_column(idx)
        column = _as_vector(column, self.dtype)
        if len(column) != self.row_count:
            raise MatrixError(vector_error=DimensionMismatchError(
                f"Column has {len(column)} components, matrix has {self.row_count} rows"
            ))
        self._data[idx] = column.to_numpy()

    def __iter__(self):
        return (self[idx] for idx in range(self.column_count))

    def column(self, idx: int) -> FixedVector:
        return self[idx]

    def row(self, idx: int) -> FixedVector:
        """Gather component ``idx`` of every column into a new vector."""
        if not 0 <= idx < self.row_count:
            raise IndexError(f"Row {idx} out of range for {self.row_count}-row matrix")
        return FixedVector._wrap(self._data[:, idx].copy())

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _check_same_shape(self, other: 'FixedMatrix'):
        if other.shape != self.shape:
            raise MatrixError(vector_error=DimensionMismatchError(
                f"Matrix shapes differ: {self.shape} and {other.shape}"
            ))

    def _elementwise(self, other, op: str, inplace: bool = False):
        if not isinstance(other, FixedMatrix):
            return NotImplemented
        self._check_same_shape(other)
        target = self if inplace else self.copy()
        for idx in range(self.column_count):
            column = target[idx]
            if op == 'add':
                column += other[idx]
            elif op == 'sub':
                column -= other[idx]
            elif op == 'div':
                column /= other[idx]
            elif op == 'rem':
                column %= other[idx]
        return target

    def add_matrix(self, other: 'FixedMatrix'):
        self._elementwise(other, 'add', inplace=True)

    def sub_matrix(self, other: 'FixedMatrix'):
        self._elementwise(other, 'sub', inplace=True)

    def div_matrix(self, other: 'FixedMatrix'):
        self._elementwise(other, 'div', inplace=True)

    def rem_matrix(self, other: 'FixedMatrix'):
        self._elementwise(other, 'rem', inplace=True)

    def mul_matrix(self, other: 'FixedMatrix') -> 'FixedMatrix':
        """
        Matrix product with an operand of the transposed shape.

        ``result[row][col] = self.column(row) . other.row(col)``; the result
        has ``self.row_count`` columns of ``self.column_count`` components.

        Raises:
            NotSquareError: ``other`` is not shaped (rows, columns) of ``self``
            TooFewColumnsError: ``self`` has more rows than columns
        """
        if other.shape != (self.row_count, self.column_count):
            raise NotSquareError(
                f"Cannot multiply {self.shape} matrix by {other.shape} matrix; "
                f"expected {(self.row_count, self.column_count)}"
            )
        if other.dtype != self.dtype:
            raise TypeError(f"Matrix dtypes differ: {self.dtype} and {other.dtype}")
        if self.row_count > self.column_count:
            raise TooFewColumnsError(
                f"Product needs {self.row_count} columns, left operand has {self.column_count}"
            )
        result = np.empty((self.row_count, self.column_count), dtype=self.dtype)
        for row_idx in range(self.row_count):
            column = self.column(row_idx)
            for column_idx in range(self.column_count):
                result[row_idx, column_idx] = column.dot(other.row(column_idx))
        return FixedMatrix._wrap(result)

    def __add__(self, other):
        return self._elementwise(other, 'add')

    def __sub__(self, other):
        return self._elementwise(other, 'sub')

    def __truediv__(self, other):
        return self._elementwise(other, 'div')

    def __mod__(self, other):
        return self._elementwise(other, 'rem')

    def __iadd__(self, other):
        return self._elementwise(other, 'add', inplace=True)

    def __isub__(self, other):
        return self._elementwise(other, 'sub', inplace=True)

    def __itruediv__(self, other):
        return self._elementwise(other, 'div', inplace=True)

    def __imod__(self, other):
        return self._elementwise(other, 'rem', inplace=True)

    def __mul__(self, other):
        if not isinstance(other, FixedMatrix):
            return NotImplemented
        return self.mul_matrix(other)

    __matmul__ = __mul__

    def __neg__(self) -> 'FixedMatrix':
        return FixedMatrix._wrap(np.negative(self._data))

    def transposed(self) -> 'FixedMatrix':
        """
        Swap rows and columns of a square matrix.

        Raises:
            TooFewRowsError: fewer rows than columns
            TooFewColumnsError: fewer columns than rows
        """
        if self.row_count < self.column_count:
            raise TooFewRowsError("transpose requires a square matrix")
        if self.column_count < self.row_count:
            raise TooFewColumnsError("transpose requires a square matrix")
        return FixedMatrix._wrap(self._data.T.copy())

    # ------------------------------------------------------------------
    # Transform components
    # ------------------------------------------------------------------

    def _require_rows(self, count: int = 3):
        if self.row_count < count:
            raise TooFewRowsError(f"needs at least {count} rows, matrix has {self.row_count}")

    def _require_columns(self, count: int = 3):
        if self.column_count < count:
            raise TooFewColumnsError(f"needs at least {count} columns, matrix has {self.column_count}")

    def _set_axis_part(self, column_idx: int, value):
        self._require_rows()
        value = _as_vector3(value, self.dtype)
        self._data[column_idx, :3] = value.to_numpy()

    def _axis_part(self, column_idx: int) -> FixedVector:
        self._require_rows()
        return FixedVector._wrap(self._data[column_idx, :3].copy())

    def set_position(self, position):
        """Write the first three components of the last column."""
        self._set_axis_part(self.column_count - 1, position)

    def position(self) -> FixedVector:
        return self._axis_part(self.column_count - 1)

    def set_scale(self, scale):
        """
        Rescale the three axis columns to lengths ``scale``.

        Each axis column is normalized first, so any shear in columns 0..2
        is lost; the axes are assumed to be orthogonal already.
        """
        self._require_rows()
        self._require_columns()
        scale = _as_vector3(scale, self.dtype)
        for idx in range(3):
            self[idx] = self[idx].normalized() * scale[idx]

    def scale(self) -> FixedVector:
        """Lengths of the three axis columns."""
        self._require_rows()
        self._require_columns()
        return vector(*(self[idx].length() for idx in range(3)))

    def set_x(self, x):
        self._set_axis_part(0, x)

    def x(self) -> FixedVector:
        return self._axis_part(0)

    def set_y(self, y):
        self._require_columns(2)
        self._set_axis_part(1, y)

    def y(self) -> FixedVector:
        self._require_columns(2)
        return self._axis_part(1)

    def set_z(self, z):
        self._require_columns(3)
        self._set_axis_part(2, z)

    def z(self) -> FixedVector:
        self._require_columns(3)
        return self._axis_part(2)

    def transform_point(self, point) -> FixedVector:
        """Multiply by a pure translation to ``point`` and read back the position."""
        translation = FixedMatrix.new_position(
            _as_vector3(point, self.dtype), self.row_count, self.column_count
        )
        return (self * translation).position()

    # ------------------------------------------------------------------
    # Transform constructors (4x4 float32)
    # ------------------------------------------------------------------

    @classmethod
    def new_rotation_on_axis(cls, axis, radians: float) -> 'FixedMatrix':
        """Homogeneous rotation of ``radians`` around ``axis`` (Rodrigues' formula)."""
        axis = _as_vector3(axis, np.float32).normalized()
        x, y, z = axis.to_numpy()
        angle = np.float32(-radians)
        sin, cos = np.sin(angle), np.cos(angle)
        t = np.float32(1.0) - cos
        return cls([
            [t * x * x + cos, t * x * y - sin * z, t * x * z + sin * y, 0.0],
            [t * x * y + sin * z, t * y * y + cos, t * y * z - sin * x, 0.0],
            [t * x * z - sin * y, t * y * z + sin * x, t * z * z + cos, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ], dtype=np.float32)

    @classmethod
    def new_rotation(cls, quaternion) -> 'FixedMatrix':
        """Rotation matrix equivalent to ``quaternion``."""
        axis, angle = quaternion.axis_angle()
        return cls.new_rotation_on_axis(axis, angle)

    @classmethod
    def view(cls, from_, to, up) -> 'FixedMatrix':
        """
        Right-handed look-at matrix for a camera at ``from_`` facing ``to``.

        Args:
            from_: Eye position
            to: Target position
            up: Approximate up direction
        """
        from_ = _as_vector3(from_, np.float32)
        z_axis = (from_ - _as_vector3(to, np.float32)).normalized()
        x_axis = _as_vector3(up, np.float32).cross(z_axis).normalized()
        y_axis = z_axis.cross(x_axis)
        return cls([
            [x_axis[0], y_axis[0], z_axis[0], 0.0],
            [x_axis[1], y_axis[1], z_axis[1], 0.0],
            [x_axis[2], y_axis[2], z_axis[2], 0.0],
            [-x_axis.dot(from_), -y_axis.dot(from_), -z_axis.dot(from_), 1.0],
        ], dtype=np.float32)

    @classmethod
    def ortho(cls, size, near: float, far: float) -> 'FixedMatrix':
        """Orthographic projection of a ``size`` = (width, height) volume."""
        size = _as_vector(size, np.float32)
        near, far = np.float32(near), np.float32(far)
        depth = near - far
        return cls([
            [2.0 / size[0], 0.0, 0.0, 0.0],
            [0.0, 2.0 / size[1], 0.0, 0.0],
            [0.0, 0.0, 1.0 / depth, 0.0],
            [0.0, 0.0, near / depth, 1.0],
        ], dtype=np.float32)

    @classmethod
    def projection(cls, fov: float, aspect: float, near_plane: float, far_plane: float) -> 'FixedMatrix':
        """
        Perspective projection.

        Args:
            fov: Vertical field of view in radians, 0 < fov < pi
            aspect: Width / height
            near_plane: Distance to the near plane, 0 < near_plane < far_plane
            far_plane: Distance to the far plane

        Raises:
            OutOfRangeFOVError: fov outside (0, pi)
            IncorrectNearFarPlanesError: near/far planes out of order
        """
        fov = np.float32(fov)
        near_plane, far_plane = np.float32(near_plane), np.float32(far_plane)
        if fov <= 0.0 or fov >= _F32_PI:
            raise OutOfRangeFOVError()
        if near_plane <= 0.0 or near_plane >= far_plane:
            raise IncorrectNearFarPlanesError()

        y_scale = np.float32(1.0) / np.tan(fov * np.float32(0.5))
        x_scale = y_scale / np.float32(aspect)
        depth = near_plane - far_plane
        return cls([
            [x_scale, 0.0, 0.0, 0.0],
            [0.0, y_scale, 0.0, 0.0],
            [0.0, 0.0, far_plane / depth, -1.0],
            [0.0, 0.0, near_plane * far_plane / depth, 0.0],
        ], dtype=np.float32)

    # ------------------------------------------------------------------
    # Conversion and comparison
    # ------------------------------------------------------------------

    def convert(self, dtype) -> 'FixedMatrix':
        return FixedMatrix._wrap(self._data.astype(get_scalar(dtype).dtype))

    def copy(self) -> 'FixedMatrix':
        return FixedMatrix._wrap(self._data.copy())

    def to_nested(self) -> List[List]:
        """Column-major nested lists."""
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        """Row-major (rows, columns) array, as the matrix is written mathematically."""
        return self._data.T.copy()

    def allclose(self, other, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        if isinstance(other, FixedMatrix):
            other = other._data
        else:
            other = np.asarray(other)
        if other.shape != self._data.shape:
            return False
        return bool(np.allclose(self._data, other, rtol=rtol, atol=atol))

    def __eq__(self, other) -> bool:
        if not isinstance(other, FixedMatrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(tuple(tuple(column) for column in self.to_nested()))

    def __repr__(self) -> str:
        return f"FixedMatrix({self.to_nested()}, dtype={self.dtype.name})"


def _as_vector(value, dtype=None) -> FixedVector:
    if isinstance(value, FixedVector):
        if dtype is not None and value.dtype != np.dtype(dtype):
            if not np.can_cast(value.dtype, dtype, casting='same_kind'):
                raise TypeError(f"Cannot use a {value.dtype} vector with a {np.dtype(dtype)} matrix")
            return value.convert(dtype)
        return value
    return FixedVector(value, dtype=dtype)


def _as_vector3(value, dtype=None) -> FixedVector:
    value = _as_vector(value, dtype)
    if len(value) != 3:
        raise MatrixError(vector_error=DimensionMismatchError(
            f"Expected a 3-component vector, got {len(value)}"
        ))
    return value


def _as_float_vector(value, dtype=None) -> FixedVector:
    # scaling normalizes the axis columns, which needs a float dtype
    value = _as_vector(value, dtype)
    if not value.scalar.is_float:
        value = value.convert(np.float64)
    return value
