"""
Truth-table datasets for boolean functions.

Every input combination of ``n_inputs`` bits, in counting order
(000, 001, 010, ...), paired with the function's output(s) as 0.0 / 1.0.
"""

import itertools
import numpy as np
import torch
from torch.utils.data import Dataset
from typing import Callable, Tuple


def gated_or(a: bool, b: bool, c: bool) -> bool:
    """``b and (a or c)``: true for 011, 110 and 111."""
    return b and (a or c)


GATED_OR = gated_or


def truth_table(fn: Callable[..., object], n_inputs: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Enumerate a boolean function.

    Args:
        fn: Called with ``n_inputs`` bools; returns a bool or a sequence of bools
        n_inputs: Number of input bits

    Returns:
        inputs: [2**n_inputs, n_inputs] float64
        targets: [2**n_inputs, n_outputs] float64
    """
    if n_inputs < 1:
        raise ValueError(f"Need at least one input, got {n_inputs}")

    rows = list(itertools.product((0, 1), repeat=n_inputs))
    inputs = np.array(rows, dtype=np.float64)
    targets = np.array(
        [np.atleast_1d(fn(*(bool(bit) for bit in row))).astype(bool) for row in rows],
        dtype=np.float64,
    )
    return inputs, targets


class BooleanFunctionDataset(Dataset):
    """
    Truth table of a boolean function as a torch Dataset.

    Each item is (inputs [n_inputs], targets [n_outputs]) in float64.

    Args:
        fn: Boolean function of ``n_inputs`` arguments
        n_inputs: Number of input bits
    """

    def __init__(self, fn: Callable[..., object] = GATED_OR, n_inputs: int = 3):
        self.fn = fn
        self.n_inputs = n_inputs
        inputs, targets = truth_table(fn, n_inputs)
        self.inputs = torch.from_numpy(inputs)
        self.targets = torch.from_numpy(targets)

    @property
    def n_outputs(self) -> int:
        return self.targets.shape[1]

    def __len__(self) -> int:
        return self.inputs.shape[0]

    def __getitem__(self, idx: int) -> Tuple[torch.Tensor, torch.Tensor]:
        return self.inputs[idx], self.targets[idx]
