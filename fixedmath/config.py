"""
Configuration for fixedmath networks and training runs.
"""

from dataclasses import dataclass, field


@dataclass
class NetworkConfig:
    """Shape and update rule of a FeedForwardNetwork."""
    # Topology
    input_width: int = 3
    output_width: int = 1
    layer_width: int = 2
    layer_count: int = 2

    # Updates
    learning_rate: float = 0.02
    dtype: str = 'float64'
    bias_update: str = 'upstream'


@dataclass
class TrainingConfig:
    """Per-sample training loop settings."""
    network: NetworkConfig = field(default_factory=NetworkConfig)

    epochs: int = 10000
    seed: int = 13473
    log_every: int = 1000


def get_default_config() -> TrainingConfig:
    """Get default training configuration."""
    return TrainingConfig()
