"""
Fast sigmoid activation.

    fast_sigmoid(x) = 0.5 * x / (|x| + 1) + 0.5

A rational approximation of the logistic sigmoid with the same (0, 1)
range and value 0.5 at x = 0. Works on floats, numpy arrays and torch
tensors alike.
"""

import torch
import torch.nn as nn


def fast_sigmoid(x):
    """Apply the fast sigmoid element-wise."""
    return 0.5 * x / (abs(x) + 1.0) + 0.5


def fast_sigmoid_derivative(x):
    """
    Derivative of ``0.5 * x / (|x| + 1)`` evaluated at ``x``.

    Note the network's backward pass evaluates this at the layer *output*
    (post-activation value), not at the pre-activation.
    """
    return 0.5 / (abs(x) + 1.0) ** 2


class FastSigmoid(nn.Module):
    """
    Fast sigmoid as a module, for use in torch pipelines.

    Example:
        >>> act = FastSigmoid()
        >>> act(torch.zeros(3))
        tensor([0.5000, 0.5000, 0.5000])
    """

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return fast_sigmoid(x)
