from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import torch
import torch.nn as nn

from .losses import ClassificationLoss, MeanSquareLoss


@dataclass
class ClassificationBatch:
    samples: torch.Tensor  # (batch, input_size)
    targets: torch.Tensor  # (batch, num_classes)

    def to(self, device: torch.device) -> "ClassificationBatch":
        return ClassificationBatch(self.samples.to(device), self.targets.to(device))

    def pin_memory(self) -> "ClassificationBatch":
        # DataLoader(pin_memory=True) calls this on custom batch types
        return ClassificationBatch(self.samples.pin_memory(), self.targets.pin_memory())

    def __len__(self) -> int:
        return int(self.samples.size(0))


@dataclass
class ClassificationOutput:
    loss: torch.Tensor
    output: torch.Tensor
    targets: torch.Tensor


def forward_classification(
    model: nn.Module,
    batch: ClassificationBatch,
    loss_fn: Optional[nn.Module] = None,
) -> ClassificationOutput:
    """Forward pass plus loss; mean-square loss unless ``loss_fn`` is given."""
    if loss_fn is None:
        loss_fn = MeanSquareLoss()

    targets = batch.targets
    output = model(batch.samples)

    if isinstance(loss_fn, ClassificationLoss):
        loss = loss_fn(output, targets, model=model)
    else:
        loss = loss_fn(output, targets)

    return ClassificationOutput(loss=loss, output=output, targets=targets)


class TrainingObjective(nn.Module):
    """Pairs a model with its loss so a training step is a single call."""

    def __init__(self, model: nn.Module, loss_fn: Optional[nn.Module] = None):
        super().__init__()
        self.model = model
        self.loss_fn = MeanSquareLoss() if loss_fn is None else loss_fn

    def forward(self, batch: ClassificationBatch) -> ClassificationOutput:
        return forward_classification(self.model, batch, self.loss_fn)
