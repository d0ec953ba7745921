"""
Network architectures for fixedmath.
"""

from .feedforward import FeedForwardNetwork, BIAS_UPDATE_MODES

__all__ = ['FeedForwardNetwork', 'BIAS_UPDATE_MODES']
