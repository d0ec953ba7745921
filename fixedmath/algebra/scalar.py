"""
Scalar capabilities consumed by the fixed-dimension algebra.

Each numeric dtype supplies a small set of operations:
- sqrt, square, abs
- zero / one / two constants
- next_value(seed): a deterministic seed -> (value, new seed) step

The algebra never looks at the dtype directly for these; it asks the
capability object returned by ``get_scalar``. There is no global random
state: seeds are threaded explicitly, or held by a caller-owned
``RandomSource``.
"""

import numpy as np
from functools import lru_cache
from typing import Any, Protocol, Tuple


# 64-bit linear congruential step used for weight initialisation
_LCG_MULTIPLIER = 2074984187
_LCG_INCREMENT = 2881137594
_U64_MASK = (1 << 64) - 1
_U32_MAX = (1 << 32) - 1


class ScalarCapabilities(Protocol):
    """Operations a scalar type must provide to the algebra."""

    dtype: np.dtype

    def sqrt(self, x: Any) -> Any: ...
    def square(self, x: Any) -> Any: ...
    def abs(self, x: Any) -> Any: ...
    def zero(self) -> Any: ...
    def one(self) -> Any: ...
    def two(self) -> Any: ...
    def next_value(self, seed: int) -> Tuple[Any, int]: ...


class NumpyScalar:
    """
    Scalar capabilities for a numpy dtype.

    Integer dtypes keep their type for every operation except ``sqrt``,
    which returns float64, and ``next_value``, which is only defined for
    floating dtypes.

    Args:
        dtype: Any value accepted by ``np.dtype``
    """

    def __init__(self, dtype):
        self.dtype = np.dtype(dtype)
        if self.dtype.kind not in 'iuf':
            raise TypeError(f"Unsupported scalar dtype: {self.dtype}")
        self._type = self.dtype.type

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == 'f'

    def cast(self, x: Any) -> Any:
        return self._type(x)

    def sqrt(self, x: Any) -> Any:
        if self.is_float:
            return np.sqrt(self._type(x))
        return np.sqrt(np.float64(x))

    def square(self, x: Any) -> Any:
        x = self._type(x)
        return x * x

    def abs(self, x: Any) -> Any:
        return np.abs(self._type(x))

    def zero(self) -> Any:
        return self._type(0)

    def one(self) -> Any:
        return self._type(1)

    def two(self) -> Any:
        return self._type(2)

    def next_value(self, seed: int) -> Tuple[Any, int]:
        """
        Advance ``seed`` one step and map the new seed into [0, 1].

        Args:
            seed: Unsigned 64-bit seed

        Returns:
            (value, new_seed): Same seed always gives the same pair
        """
        if not self.is_float:
            raise TypeError(f"next_value is only defined for floating dtypes, not {self.dtype}")
        new_seed = (_LCG_MULTIPLIER * (seed & _U64_MASK) + _LCG_INCREMENT) & _U64_MASK
        value = self._type(new_seed >> 32) / self._type(_U32_MAX)
        return value, new_seed

    def __repr__(self) -> str:
        return f"NumpyScalar({self.dtype.name})"


@lru_cache(maxsize=16)
def _cached_scalar(dtype: np.dtype) -> NumpyScalar:
    return NumpyScalar(dtype)


def get_scalar(dtype) -> NumpyScalar:
    """Get cached scalar capabilities for ``dtype``."""
    return _cached_scalar(np.dtype(dtype))


class RandomSource:
    """
    Caller-owned deterministic generator.

    Holds the seed and advances it on every draw, so passing the same
    source to several consumers continues one stream.

    Args:
        seed: Initial unsigned 64-bit seed
        dtype: Floating dtype of generated values
    """

    def __init__(self, seed: int, dtype=np.float64):
        self.seed = int(seed) & _U64_MASK
        self.scalar = get_scalar(dtype)

    def next(self) -> Any:
        value, self.seed = self.scalar.next_value(self.seed)
        return value

    def take(self, count: int) -> np.ndarray:
        """Draw ``count`` consecutive values."""
        return np.array([self.next() for _ in range(count)], dtype=self.scalar.dtype)

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed}, dtype={self.scalar.dtype.name})"
