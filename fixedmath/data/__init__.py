"""
Data utilities for fixedmath.

Provides truth-table datasets for training small networks on boolean
functions.
"""

from .boolean import BooleanFunctionDataset, GATED_OR, gated_or, truth_table

__all__ = [
    'BooleanFunctionDataset',
    'GATED_OR',
    'gated_or',
    'truth_table',
]
