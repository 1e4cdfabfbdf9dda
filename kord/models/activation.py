from __future__ import annotations

import math

import torch
import torch.nn as nn


class BoundedSigmoid(nn.Module):
    """Sigmoid with a steepness coefficient: ``1 / (1 + exp(-k * x))``.

    The output is monotonic and lies in (0, 1) mathematically, so it can be read
    as independent per-class probabilities. In float32 it saturates to exactly
    0.0 or 1.0 once ``|k * x|`` passes about 17, so only the closed interval is
    guaranteed for unnormalized inputs.

    ``k`` is fixed by default and stored as a buffer; with ``trainable=True`` it
    becomes a parameter the optimizer updates. Both end up in ``state_dict()``.
    Large ``k`` approaches a hard step and small ``k`` flattens everything
    towards 0.5; ``k`` is only validated here, never clamped.
    """

    def __init__(self, strength: float = 1.0, trainable: bool = False):
        super().__init__()
        strength = float(strength)
        if not math.isfinite(strength) or strength <= 0.0:
            raise ValueError(f"sigmoid strength must be a finite positive number, got {strength!r}")

        self.trainable = bool(trainable)
        value = torch.tensor(strength, dtype=torch.float32)
        if self.trainable:
            self.strength = nn.Parameter(value)
        else:
            self.register_buffer("strength", value)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return torch.sigmoid(self.strength * x)

    def extra_repr(self) -> str:
        return f"strength={float(self.strength.item()):g}, trainable={self.trainable}"
