"""
Network layers for fixedmath.

Provides:
- fast_sigmoid / fast_sigmoid_derivative: rational sigmoid approximation
- FastSigmoid: the activation as a torch module
- Layer: dense layer with a shared bias and raw binary persistence
"""

from .activation import FastSigmoid, fast_sigmoid, fast_sigmoid_derivative
from .dense import Layer

__all__ = [
    'FastSigmoid',
    'fast_sigmoid',
    'fast_sigmoid_derivative',
    'Layer',
]
