"""
Evaluation utilities for fixedmath networks.

Provides functions for:
- Mean squared error over a dataset
- Thresholded accuracy for boolean targets
"""

from typing import Dict

from torch.utils.data import Dataset

from .models.feedforward import FeedForwardNetwork


def evaluate_network(
    network: FeedForwardNetwork,
    dataset: Dataset,
    threshold: float = 0.5,
) -> Dict[str, float]:
    """
    Evaluate without updating weights.

    A sample counts as correct when every output lands on the same side
    of ``threshold`` as its target.
    """
    if len(dataset) == 0:
        raise ValueError("Cannot evaluate on an empty dataset")

    total_mse = 0.0
    correct = 0
    total = 0

    for idx in range(len(dataset)):
        inputs, targets = dataset[idx]
        outputs = network.forward(inputs)
        total_mse += network.cost(targets)
        predicted = outputs >= threshold
        expected = targets.to(outputs.dtype) >= threshold
        correct += int(bool((predicted == expected).all()))
        total += 1

    return {
        'mse': total_mse / total,
        'accuracy': correct / total,
        'n_samples': total,
    }
