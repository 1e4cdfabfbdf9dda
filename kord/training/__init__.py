"""Training-only code: losses, the classification objective and the trainer.

Inference needs nothing from here; ``kord.models`` does not import this package.
"""
from .losses import (
    BinaryCrossEntropyLoss,
    ClassificationLoss,
    FocalLoss,
    HarmonicPenalty,
    MeanSquareLoss,
    build_loss,
    l1_regularization,
)
from .objective import ClassificationBatch, ClassificationOutput, TrainingObjective, forward_classification

__all__ = [
    "BinaryCrossEntropyLoss",
    "ClassificationBatch",
    "ClassificationLoss",
    "ClassificationOutput",
    "FocalLoss",
    "HarmonicPenalty",
    "MeanSquareLoss",
    "TrainingObjective",
    "build_loss",
    "forward_classification",
    "l1_regularization",
]
