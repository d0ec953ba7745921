"""
Dense layer of the feed-forward network.

A layer owns:
- outputs: its current activations, [width]
- weights: the weights *into the next layer*, [next_width, width], one row
  per downstream neuron
- bias: a single scalar shared by every neuron of the layer

All three are registered buffers; they change only through
``calculate_outputs`` (outputs) and ``backpropagate`` (weights, bias),
never through autograd.
"""

import numpy as np
import torch
import torch.nn as nn
from typing import BinaryIO

from .activation import fast_sigmoid, fast_sigmoid_derivative
from ..algebra.scalar import RandomSource
from ..errors import CouldNotWriteBufferError


def numpy_dtype(dtype: torch.dtype) -> np.dtype:
    """numpy equivalent of a torch floating dtype."""
    return torch.empty(0, dtype=dtype).numpy().dtype


def wire_dtype(dtype: torch.dtype) -> np.dtype:
    """Big-endian on-disk dtype for values of ``dtype``."""
    return numpy_dtype(dtype).newbyteorder('>')


class Layer(nn.Module):
    """
    Fully connected layer with a shared bias and fast-sigmoid activation.

    Weights are drawn row by row from ``source`` and the bias last, so the
    same seed always produces the same layer.

    Args:
        width: Number of neurons in this layer
        next_width: Number of neurons in the downstream layer (0 for the output layer)
        source: Deterministic generator used for weights and bias
        dtype: Floating dtype of all buffers
    """

    def __init__(
        self,
        width: int,
        next_width: int,
        source: RandomSource,
        dtype: torch.dtype = torch.float64,
    ):
        super().__init__()
        if width < 1:
            raise ValueError(f"Layer width must be positive, got {width}")
        if next_width < 0:
            raise ValueError(f"Next layer width must be non-negative, got {next_width}")

        self.width = width
        self.next_width = next_width

        weights = source.take(next_width * width).reshape(next_width, width)
        bias = source.next()

        self.register_buffer('outputs', torch.zeros(width, dtype=dtype))
        self.register_buffer('weights', torch.tensor(weights, dtype=dtype))
        self.register_buffer('bias', torch.tensor(float(bias), dtype=dtype))

    @property
    def value_count(self) -> int:
        """Number of values this layer writes when saved."""
        return self.width + self.next_width * self.width + 1

    def calculate_outputs(self, previous: 'Layer'):
        """
        Recompute activations from the upstream layer.

        Neuron i receives ``dot(previous.outputs, previous.weights[i])`` plus
        this layer's shared bias.
        """
        pre_activation = previous.weights[:self.width] @ previous.outputs + self.bias
        self.outputs.copy_(fast_sigmoid(pre_activation))

    def cost(self, targets: torch.Tensor) -> float:
        """Mean squared error of the outputs against ``targets``."""
        n = min(self.width, targets.shape[0])
        squared = (targets[:n] - self.outputs[:n]) ** 2
        return (squared.sum() / self.width).item()

    def backpropagate(
        self,
        targets: torch.Tensor,
        previous: 'Layer',
        learning_rate: float,
        bias_layer: 'Layer',
    ):
        """
        One gradient step on the weights feeding this layer.

        Compares the first ``len(targets)`` outputs against ``targets``,
        adjusts ``previous.weights`` and accumulates the bias step into
        ``bias_layer``.

        Args:
            targets: [n] expected outputs
            previous: Upstream layer, whose weights feed this one
            learning_rate: Step size
            bias_layer: Layer whose shared bias absorbs the summed bias step
        """
        n = min(self.width, targets.shape[0])
        outputs = self.outputs[:n]
        z_delta = (outputs - targets[:n]) * fast_sigmoid_derivative(outputs)

        weight_deltas = -learning_rate * torch.outer(z_delta, previous.outputs)
        previous.weights[:n] += weight_deltas
        bias_layer.bias += (-learning_rate * z_delta).sum()

    def to_array(self) -> np.ndarray:
        """Flatten outputs, weights (row-major) and bias in save order."""
        return np.concatenate([
            self.outputs.cpu().numpy(),
            self.weights.cpu().numpy().reshape(-1),
            self.bias.cpu().numpy().reshape(1),
        ])

    def load_array(self, values: np.ndarray):
        """Inverse of ``to_array``."""
        if values.shape != (self.value_count,):
            raise ValueError(f"Expected {self.value_count} values, got {values.shape}")
        values = torch.from_numpy(np.ascontiguousarray(values, dtype=numpy_dtype(self.outputs.dtype)))
        outputs_end = self.width
        weights_end = outputs_end + self.next_width * self.width
        self.outputs.copy_(values[:outputs_end])
        self.weights.copy_(values[outputs_end:weights_end].reshape(self.next_width, self.width))
        self.bias.copy_(values[weights_end])

    def save(self, stream: BinaryIO):
        """
        Write this layer as raw big-endian floats.

        Raises:
            CouldNotWriteBufferError: the stream failed or accepted fewer bytes
        """
        buffer = self.to_array().astype(wire_dtype(self.outputs.dtype)).tobytes()
        try:
            written = stream.write(buffer)
        except OSError as e:
            raise CouldNotWriteBufferError() from e
        if written is not None and written != len(buffer):
            raise CouldNotWriteBufferError(
                f"Could not write to buffer when saving: wrote {written} of {len(buffer)} bytes"
            )

    def extra_repr(self) -> str:
        return f'width={self.width}, next_width={self.next_width}'
