"""pytest configuration and fixtures for fixedmath tests"""
import numpy as np
import pytest

from fixedmath.algebra import FixedMatrix, vector
from fixedmath.data import BooleanFunctionDataset, GATED_OR
from fixedmath.models import FeedForwardNetwork

SEED = 13473


@pytest.fixture
def translated() -> FixedMatrix:
    """4x4 float64 identity moved to (1, 2, 3)."""
    mat = FixedMatrix.identity(4)
    mat.set_position(vector(1.0, 2.0, 3.0))
    return mat


@pytest.fixture
def square_int_matrix() -> FixedMatrix:
    return FixedMatrix.from_rows([
        [1, 2, 3],
        [4, 5, 6],
        [7, 8, 10],
    ], dtype=np.int64)


@pytest.fixture
def gated_or_dataset() -> BooleanFunctionDataset:
    return BooleanFunctionDataset(GATED_OR, 3)


@pytest.fixture
def network() -> FeedForwardNetwork:
    """3 inputs, 1 output, 2 hidden layers of width 2."""
    return FeedForwardNetwork(3, 1, 2, 2, seed=SEED, learning_rate=0.02)
