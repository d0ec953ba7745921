"""Tests for FixedVector."""
import numpy as np
import pytest

from fixedmath.algebra import FixedVector, vector, dot, cross, length, normalized, angle_between
from fixedmath.errors import (
    DimensionMismatchError,
    NoComponentWithGivenIndexError,
    VectorError,
    ZeroComponentsError,
)


def test_components():
    v = vector(0, 44, 2)
    assert v.component(0) == 0
    assert v.component(1) == 44
    assert v.component(2) == 2

    v = vector(24.1, 4.44, 6.32, 666.420)
    assert v[0] == 24.1
    assert v[3] == 666.420
    assert len(v) == 4


def test_dtype_inference_and_override():
    assert vector(1, 2).dtype == np.int64
    assert vector(1.0, 2.0).dtype == np.float64
    assert vector(1, 2, dtype=np.float32).dtype == np.float32


def test_zero_components_rejected():
    with pytest.raises(ZeroComponentsError):
        FixedVector([])
    with pytest.raises(ZeroComponentsError):
        FixedVector.zeros(0)


def test_index_out_of_range():
    v = vector(1, 2, 3)
    with pytest.raises(IndexError):
        v[3]
    with pytest.raises(IndexError):
        v[-1]
    with pytest.raises(NoComponentWithGivenIndexError):
        v.component(5)
    with pytest.raises(VectorError):
        v.set_component(3, 1)


def test_set_component():
    v = vector(1, 2, 3)
    v.set_component(1, 9)
    v[2] = 7
    assert v == vector(1, 9, 7)


def test_length2():
    assert vector(2, 3, 4).length2() == 29


def test_length():
    v = vector(3.0, 4.0, dtype=np.float32)
    assert v.length() == 5.0
    assert v.length().dtype == np.float32
    assert length(v) == 5.0


def test_normalized():
    v = vector(3.0, 4.0, dtype=np.float32)
    expected = vector(np.float32(3.0) / np.float32(5.0), np.float32(4.0) / np.float32(5.0))
    assert v.normalized() == expected
    assert normalized(v).allclose([0.6, 0.8])


def test_normalized_integer_vector():
    with pytest.raises(TypeError):
        vector(3, 4).normalized()


def test_integer_math():
    a = vector(2, 3, 99)
    b = vector(6, -1, 2)
    assert a + b == vector(8, 2, 101)
    assert a - b == vector(-4, 4, 97)
    assert a * b == vector(12, -3, 198)
    assert a / b == vector(0, -3, 49)
    assert a % b == vector(2, 0, 1)


def test_compound_assignment():
    a = vector(2, 3, 99)
    a += vector(2, 2, 1)
    assert a == vector(4, 5, 100)

    a = vector(2, 3, 99)
    a -= vector(2, 2, 1)
    assert a == vector(0, 1, 98)

    a = vector(2, 3, 99)
    a *= vector(2, 2, 1)
    assert a == vector(4, 6, 99)

    a = vector(2, 3, 99)
    a /= vector(2, 2, 1)
    assert a == vector(1, 1, 99)

    a = vector(7, 8, 9)
    a %= 4
    assert a == vector(3, 0, 1)


def test_compound_assignment_is_in_place():
    a = vector(1.0, 2.0)
    alias = a
    a += 1.0
    assert alias is a
    assert alias == vector(2.0, 3.0)


def test_integer_division_truncates_toward_zero():
    assert vector(-7, 7, -7) / vector(2, -2, -2) == vector(-3, -3, 3)
    assert vector(-7, 7, -7) % vector(2, -2, -2) == vector(-1, 1, -1)


def test_integer_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        vector(1, 2) / vector(1, 0)
    with pytest.raises(ZeroDivisionError):
        vector(1, 2) % 0


def test_float_division_by_zero_follows_ieee():
    result = vector(1.0, -1.0, 0.0) / 0.0
    assert result[0] == np.inf
    assert result[1] == -np.inf
    assert np.isnan(result[2])


def test_float_remainder_sign_of_dividend():
    assert vector(-5.5, 5.5) % 2.0 == vector(-1.5, 1.5)


def test_scalar_broadcast_and_reflected():
    v = vector(1.0, 2.0, 3.0)
    assert v + 1.0 == vector(2.0, 3.0, 4.0)
    assert 1.0 + v == vector(2.0, 3.0, 4.0)
    assert 2 * v == vector(2.0, 4.0, 6.0)
    assert 10.0 - v == vector(9.0, 8.0, 7.0)
    assert 6.0 / v == vector(6.0, 3.0, 2.0)
    assert v * np.float64(2.0) == vector(2.0, 4.0, 6.0)
    assert np.float64(2.0) * v == vector(2.0, 4.0, 6.0)


def test_scalar_cannot_widen_dtype():
    with pytest.raises(TypeError):
        vector(1, 2) + 0.5
    with pytest.raises(TypeError):
        vector(1.0, 2.0, dtype=np.float32) * np.float64(2.0)


def test_dtype_mismatch():
    with pytest.raises(TypeError):
        vector(1, 2) + vector(1.0, 2.0)


def test_length_mismatch():
    with pytest.raises(DimensionMismatchError):
        vector(1, 2) + vector(1, 2, 3)


@pytest.mark.parametrize("n", [1, 2, 3, 5, 8])
def test_add_sub_mul_div_inverse(n):
    rng = np.random.default_rng(n)
    a = FixedVector(rng.integers(-100, 100, size=n))
    b = FixedVector(rng.integers(1, 50, size=n))
    assert (a + b) - b == a
    assert (a * b) / b == a

    fa = FixedVector(rng.normal(size=n))
    fb = FixedVector(rng.uniform(0.5, 2.0, size=n))
    assert ((fa + fb) - fb).allclose(fa)
    assert ((fa * fb) / fb).allclose(fa)


def test_negation():
    assert -vector(1, -2, 3) == vector(-1, 2, -3)


def test_dot():
    v = vector(2, 3, 4)
    assert v.dot(v) == 29
    assert dot(vector(1.0, 0.0), vector(0.0, 1.0)) == 0.0


def test_cross():
    x = vector(1.0, 0.0, 0.0)
    y = vector(0.0, 1.0, 0.0)
    assert x.cross(y) == vector(0.0, 0.0, 1.0)
    assert cross(y, x) == vector(0.0, 0.0, -1.0)

    a = vector(1.0, 2.0, 3.0)
    b = vector(-2.0, 0.5, 4.0)
    assert a.cross(b).dot(a) == pytest.approx(0.0)
    assert a.cross(b).to_list() == pytest.approx(np.cross([1, 2, 3], [-2, 0.5, 4]).tolist())


def test_cross_requires_three_components():
    with pytest.raises(DimensionMismatchError):
        vector(1.0, 0.0).cross(vector(0.0, 1.0))


def test_angle_between():
    assert angle_between(vector(1.0, 0.0), vector(0.0, 2.0)) == pytest.approx(np.pi / 2)


def test_named_components():
    v = vector(1, 2, 3, 4)
    assert (v.x, v.y, v.z, v.w) == (1, 2, 3, 4)
    assert v.xy == vector(1, 2)
    assert v.yz == vector(2, 3)
    assert v.zw == vector(3, 4)
    assert v.xyz == vector(1, 2, 3)
    assert v.yzw == vector(2, 3, 4)

    v3 = vector(1, 2, 3)
    assert v3.xy == vector(1, 2)
    assert v3.yz == vector(2, 3)


def test_named_components_alias_storage():
    v = vector(1.0, 2.0, 3.0)
    v.x = 5.0
    v.z = 7.0
    assert v == vector(5.0, 2.0, 7.0)


def test_named_components_by_length():
    with pytest.raises(AttributeError):
        vector(1, 2).z
    with pytest.raises(AttributeError):
        vector(1, 2, 3).w
    with pytest.raises(AttributeError):
        vector(1, 2).xy
    with pytest.raises(AttributeError):
        vector(1, 2, 3).xyz
    with pytest.raises(AttributeError):
        vector(1, 2, 3, 4, 5).x


def test_convert():
    v = vector(1.5, 2.5, dtype=np.float32)
    converted = v.convert(np.float64)
    assert converted.dtype == np.float64
    assert converted.to_list() == [1.5, 2.5]
    assert vector(1, 2).convert(np.float32).dtype == np.float32


def test_constant_vectors():
    assert FixedVector.zeros(3) == vector(0.0, 0.0, 0.0)
    assert FixedVector.ones(2, dtype=np.int32) == vector(1, 1)
    assert FixedVector.twos(2).to_list() == [2.0, 2.0]


def test_equality_and_hash():
    assert vector(1, 2) == vector(1, 2)
    assert vector(1, 2) != vector(2, 1)
    assert vector(1, 2) != vector(1, 2, 3)
    assert hash(vector(1, 2)) == hash(vector(1, 2))
    assert len({vector(1, 2), vector(1, 2), vector(3, 4)}) == 2


def test_hash_follows_components():
    key = vector(1, 2)
    table = {key.copy(): 'a'}
    key += 1
    assert hash(key) == hash(vector(2, 3))
    assert table[vector(1, 2)] == 'a'
    assert key not in table


def test_copy_is_independent():
    v = vector(1, 2)
    c = v.copy()
    c[0] = 9
    assert v == vector(1, 2)


def test_formatting():
    v = vector(1, 2)
    assert str(v) == '(1, 2)'
    assert 'int64' in repr(v)
