from __future__ import annotations

import torch
import torch.nn as nn

from kord.config import INPUT_SPACE_SIZE, NUM_CLASSES
from .activation import BoundedSigmoid
from .mlp import Mlp
from .validation import check_dropout, check_positive_int


class KordModel(nn.Module):
    """Multi-label note classifier over a fixed-size spectral feature vector.

    Architecture:
      Linear(input_size -> mlp_size)
      mlp_layers x [Linear -> ReLU -> Dropout, + skip]
      Linear(mlp_size -> num_classes)
      BoundedSigmoid(sigmoid_strength)

    Output is (batch, num_classes) with values in [0, 1]; they stay strictly
    inside (0, 1) unless a logit times the strength passes about +-17, where
    float32 sigmoid rounds to exactly 0 or 1. Inputs are expected normalized.
    Shapes are not checked here; a wrong input width fails inside the first Linear.
    """

    def __init__(
        self,
        mlp_layers: int,
        mlp_size: int,
        mlp_dropout: float,
        sigmoid_strength: float,
        *,
        sigmoid_trainable: bool = False,
        input_size: int = INPUT_SPACE_SIZE,
        num_classes: int = NUM_CLASSES,
    ):
        super().__init__()
        self.input_size = check_positive_int("input_size", input_size)
        self.num_classes = check_positive_int("num_classes", num_classes)
        mlp_layers = check_positive_int("mlp_layers", mlp_layers)
        mlp_size = check_positive_int("mlp_size", mlp_size)
        mlp_dropout = check_dropout(mlp_dropout)
        # constructor arguments, enough to rebuild the same architecture
        self.hparams = {
            "name": "kord",
            "mlp_layers": mlp_layers,
            "mlp_size": mlp_size,
            "mlp_dropout": mlp_dropout,
            "sigmoid_strength": float(sigmoid_strength),
            "sigmoid_trainable": bool(sigmoid_trainable),
            "input_size": self.input_size,
            "num_classes": self.num_classes,
        }

        self.input = nn.Linear(self.input_size, mlp_size)
        self.mlp = Mlp(mlp_layers, mlp_size, mlp_dropout)
        self.output = nn.Linear(mlp_size, self.num_classes)
        self.sigmoid = BoundedSigmoid(sigmoid_strength, trainable=sigmoid_trainable)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        x = self.input(x)
        x = self.mlp(x)
        x = self.output(x)
        x = self.sigmoid(x)
        return x
