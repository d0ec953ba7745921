"""
Fixed-topology feed-forward network.

    input (input_width) -> layer_count hidden layers (layer_width) -> output (output_width)

Training is plain per-sample gradient descent: call ``forward`` with one
input, then ``backward`` with its targets. There is no batching and no
optimizer state.

Weights are saved as raw big-endian floats with no header; a file can only
be loaded into a network of exactly the same shape and dtype. Layers are
written input, output, then hidden layers in index order.
"""

import logging
import numpy as np
import os
import torch
import torch.nn as nn
from typing import BinaryIO, Iterator, Sequence, Union

from ..algebra.scalar import RandomSource
from ..config import NetworkConfig
from ..errors import (
    CouldNotReadBufferError,
    CouldNotWriteBufferError,
    OutputLargerThanHiddenLayerError,
)
from ..layers.dense import Layer, numpy_dtype, wire_dtype

logger = logging.getLogger(__name__)

BIAS_UPDATE_MODES = ('upstream', 'downstream')

_DTYPES = {
    'float32': torch.float32,
    'float64': torch.float64,
}


class FeedForwardNetwork(nn.Module):
    """
    Multilayer network of fast-sigmoid layers with shared per-layer biases.

    Args:
        input_width: Number of inputs
        output_width: Number of outputs, at most ``layer_width``
        layer_width: Width of every hidden layer
        layer_count: Number of hidden layers (>= 1)
        seed: Initial seed, or a RandomSource that is advanced in place
        learning_rate: Gradient descent step size
        dtype: torch.float64 or torch.float32
        bias_update: Which layer's bias a backward step adjusts:
            'upstream' - the layer feeding the compared outputs
            'downstream' - the layer whose outputs were compared

    Raises:
        OutputLargerThanHiddenLayerError: output_width > layer_width
    """

    def __init__(
        self,
        input_width: int,
        output_width: int,
        layer_width: int,
        layer_count: int,
        seed: Union[int, RandomSource],
        learning_rate: float,
        dtype: torch.dtype = torch.float64,
        bias_update: str = 'upstream',
    ):
        super().__init__()
        if min(input_width, output_width, layer_width) < 1:
            raise ValueError(
                f"Layer widths must be positive, got input={input_width}, "
                f"output={output_width}, hidden={layer_width}"
            )
        if layer_count < 1:
            raise ValueError(f"Need at least one hidden layer, got {layer_count}")
        if output_width > layer_width:
            raise OutputLargerThanHiddenLayerError()
        if bias_update not in BIAS_UPDATE_MODES:
            raise ValueError(f"Unknown bias update mode: {bias_update}")
        if dtype not in _DTYPES.values():
            raise ValueError(f"Unsupported dtype: {dtype}")

        self.input_width = input_width
        self.output_width = output_width
        self.layer_width = layer_width
        self.layer_count = layer_count
        self.learning_rate = learning_rate
        self.bias_update = bias_update
        self.dtype = dtype

        if isinstance(seed, RandomSource):
            source = seed
        else:
            source = RandomSource(seed, dtype=numpy_dtype(dtype))

        # Initialisation order: input, output, then hidden layers
        self.input_layer = Layer(input_width, layer_width, source, dtype)
        self.output_layer = Layer(output_width, 0, source, dtype)
        self.hidden_layers = nn.ModuleList([
            Layer(layer_width, layer_width, source, dtype) for _ in range(layer_count)
        ])

        logger.debug(
            "Built network %d -> %dx%d -> %d (%s, bias_update=%s)",
            input_width, layer_count, layer_width, output_width, dtype, bias_update,
        )

    @classmethod
    def from_config(cls, config: NetworkConfig, seed: Union[int, RandomSource]) -> 'FeedForwardNetwork':
        if config.dtype not in _DTYPES:
            raise ValueError(f"Unsupported dtype: {config.dtype}")
        return cls(
            input_width=config.input_width,
            output_width=config.output_width,
            layer_width=config.layer_width,
            layer_count=config.layer_count,
            seed=seed,
            learning_rate=config.learning_rate,
            dtype=_DTYPES[config.dtype],
            bias_update=config.bias_update,
        )

    def _as_tensor(self, values, width: int, name: str) -> torch.Tensor:
        tensor = torch.as_tensor(values, dtype=self.dtype).reshape(-1)
        if tensor.shape[0] != width:
            raise ValueError(f"Expected {width} {name}, got {tensor.shape[0]}")
        return tensor

    def layers_in_order(self) -> Iterator[Layer]:
        """Layers in forward-pass order: input, hidden..., output."""
        yield self.input_layer
        yield from self.hidden_layers
        yield self.output_layer

    def layers_in_save_order(self) -> Iterator[Layer]:
        """Layers in construction and persistence order: input, output, hidden..."""
        yield self.input_layer
        yield self.output_layer
        yield from self.hidden_layers

    def forward(self, inputs: Sequence[float]) -> torch.Tensor:
        """
        Propagate one sample.

        Args:
            inputs: input_width values

        Returns:
            [output_width] copy of the output activations
        """
        self.input_layer.outputs.copy_(self._as_tensor(inputs, self.input_width, 'inputs'))
        layers = list(self.layers_in_order())
        for previous, layer in zip(layers, layers[1:]):
            layer.calculate_outputs(previous)
        return self.output_layer.outputs.clone()

    def backward(self, targets: Sequence[float]):
        """
        One per-sample gradient step against ``targets``.

        Must follow ``forward`` on the matching input. Each
        (upstream, downstream) pair adjusts the upstream weights using the
        downstream outputs' error; the bias step goes to the layer chosen
        by ``bias_update``.
        """
        targets = self._as_tensor(targets, self.output_width, 'targets')
        layers = list(self.layers_in_order())
        for previous, layer in zip(layers, layers[1:]):
            bias_layer = previous if self.bias_update == 'upstream' else layer
            layer.backpropagate(targets, previous, self.learning_rate, bias_layer)

    def cost(self, targets: Sequence[float]) -> float:
        """Mean squared error of the current outputs."""
        return self.output_layer.cost(self._as_tensor(targets, self.output_width, 'targets'))

    def train_step(self, inputs: Sequence[float], targets: Sequence[float]) -> float:
        """Forward, cost, backward. Returns the cost before the update."""
        self.forward(inputs)
        cost = self.cost(targets)
        self.backward(targets)
        return cost

    @property
    def value_count(self) -> int:
        """Number of floats in a saved weight file."""
        return sum(layer.value_count for layer in self.layers_in_save_order())

    def save_layers(self, stream: BinaryIO):
        """Write every layer to ``stream`` in save order."""
        for layer in self.layers_in_save_order():
            layer.save(stream)

    def load_layers(self, stream: BinaryIO):
        """
        Read every layer from ``stream`` in save order.

        The whole stream is read and size-checked before any layer is
        touched, so a failed load leaves the network unchanged.

        Raises:
            CouldNotReadBufferError: the stream failed, ended early or holds
                more values than this network
        """
        dtype = wire_dtype(self.dtype)
        expected = self.value_count * dtype.itemsize
        try:
            data = stream.read(expected)
            trailing = stream.read(1)
        except OSError as e:
            raise CouldNotReadBufferError() from e
        got = 0 if data is None else len(data)
        if got != expected:
            raise CouldNotReadBufferError(
                f"Could not read from buffer when loading: expected {expected} bytes, got {got}"
            )
        if trailing:
            raise CouldNotReadBufferError(
                f"Could not read from buffer when loading: more than {expected} bytes, "
                f"the saved network has a different shape"
            )

        values = np.frombuffer(data, dtype=dtype)
        offset = 0
        for layer in self.layers_in_save_order():
            layer.load_array(values[offset:offset + layer.value_count])
            offset += layer.value_count

    def save(self, path: Union[str, os.PathLike]):
        """
        Save weights to ``path``.

        Raises:
            CouldNotWriteBufferError: the file could not be opened or written
        """
        try:
            with open(path, 'wb') as f:
                self.save_layers(f)
        except OSError as e:
            raise CouldNotWriteBufferError() from e
        logger.debug("Saved %d values to %s", self.value_count, path)

    def load(self, path: Union[str, os.PathLike]):
        """
        Load weights saved by a network of the same shape.

        Raises:
            CouldNotReadBufferError: the file is missing, unreadable or too short
        """
        try:
            with open(path, 'rb') as f:
                self.load_layers(f)
        except OSError as e:
            raise CouldNotReadBufferError() from e
        logger.debug("Loaded %d values from %s", self.value_count, path)

    def extra_repr(self) -> str:
        return (f'input_width={self.input_width}, output_width={self.output_width}, '
                f'layer_width={self.layer_width}, layer_count={self.layer_count}, '
                f'learning_rate={self.learning_rate}, bias_update={self.bias_update}')
