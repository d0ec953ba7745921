"""
Per-sample training loop for FeedForwardNetwork.

Each sample is one forward pass, one cost measurement and one backward
step; an epoch visits the dataset once in order.
"""

import logging
from typing import List

from torch.utils.data import Dataset

from .config import TrainingConfig
from .models.feedforward import FeedForwardNetwork

logger = logging.getLogger(__name__)


def train_epoch(network: FeedForwardNetwork, dataset: Dataset) -> float:
    """
    Train on every sample of ``dataset`` once.

    Returns:
        Mean cost over the epoch, each sample measured before its update
    """
    total = 0.0
    for idx in range(len(dataset)):
        inputs, targets = dataset[idx]
        total += network.train_step(inputs, targets)
    return total / len(dataset)


def fit(network: FeedForwardNetwork, dataset: Dataset, config: TrainingConfig) -> List[float]:
    """
    Run ``config.epochs`` epochs.

    Returns:
        Per-epoch mean cost history
    """
    if len(dataset) == 0:
        raise ValueError("Cannot train on an empty dataset")

    history = []
    for epoch in range(config.epochs):
        cost = train_epoch(network, dataset)
        history.append(cost)
        if config.log_every and (epoch + 1) % config.log_every == 0:
            logger.info("Epoch %d/%d: cost=%.6f", epoch + 1, config.epochs, cost)
    return history
