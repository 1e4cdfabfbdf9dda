from __future__ import annotations

from typing import Optional

import torch
import torch.nn as nn
from torch.nn import functional as F

from kord.config import NUM_CLASSES

# Intervals (in semitones, mod 12) treated as clashing when both notes fire:
# minor second, tritone, major seventh.
DISSONANT_INTERVALS = (1, 6, 11)


class MeanSquareLoss(nn.Module):
    """Mean of the elementwise squared error over every element."""

    def forward(self, output: torch.Tensor, targets: torch.Tensor) -> torch.Tensor:
        return F.mse_loss(output, targets, reduction="mean")


class BinaryCrossEntropyLoss(nn.Module):
    """BCE on probabilities (not logits); inputs are clamped away from 0 and 1."""

    def __init__(self, eps: float = 1e-7):
        super().__init__()
        self.eps = float(eps)

    def forward(self, output: torch.Tensor, targets: torch.Tensor) -> torch.Tensor:
        output = output.clamp(self.eps, 1.0 - self.eps)
        return F.binary_cross_entropy(output, targets, reduction="mean")


class FocalLoss(nn.Module):
    """Focal loss (Lin et al.) on probabilities.

    Each element's BCE term is scaled by ``(1 - p_t) ** gamma`` so confident,
    correct notes contribute little. ``alpha`` optionally weights positives
    against negatives.
    """

    def __init__(self, gamma: float = 2.0, alpha: Optional[float] = None, eps: float = 1e-7):
        super().__init__()
        if float(gamma) < 0.0:
            raise ValueError(f"focal gamma must be non-negative, got {gamma!r}")
        if alpha is not None and not 0.0 <= float(alpha) <= 1.0:
            raise ValueError(f"focal alpha must be in [0, 1], got {alpha!r}")
        self.gamma = float(gamma)
        self.alpha = None if alpha is None else float(alpha)
        self.eps = float(eps)

    def forward(self, output: torch.Tensor, targets: torch.Tensor) -> torch.Tensor:
        output = output.clamp(self.eps, 1.0 - self.eps)
        bce = F.binary_cross_entropy(output, targets, reduction="none")
        p_t = output * targets + (1.0 - output) * (1.0 - targets)
        loss = (1.0 - p_t).pow(self.gamma) * bce
        if self.alpha is not None:
            alpha_t = self.alpha * targets + (1.0 - self.alpha) * (1.0 - targets)
            loss = alpha_t * loss
        return loss.mean()


def l1_regularization(model: nn.Module, weight: float) -> torch.Tensor:
    """``weight * sum(|p|)`` over every trainable parameter of ``model``."""
    params = [p for p in model.parameters() if p.requires_grad]
    if not params:
        return torch.zeros(())
    total = torch.stack([p.abs().sum() for p in params]).sum()
    return total * float(weight)


def harmonic_penalty_matrix(num_classes: int) -> torch.Tensor:
    idx = torch.arange(num_classes)
    interval = (idx.view(1, -1) - idx.view(-1, 1)).remainder(12)
    mask = torch.zeros((num_classes, num_classes), dtype=torch.bool)
    for semitones in DISSONANT_INTERVALS:
        mask |= interval == semitones
    return mask.to(torch.float32)


class HarmonicPenalty(nn.Module):
    """Penalizes co-activation of dissonant note pairs: ``weight * mean_b(out_b P out_b^T)``."""

    def __init__(self, num_classes: int, weight: float):
        super().__init__()
        self.weight = float(weight)
        self.register_buffer("penalty", harmonic_penalty_matrix(int(num_classes)), persistent=False)

    def forward(self, output: torch.Tensor) -> torch.Tensor:
        pairwise = (output @ self.penalty) * output
        return pairwise.sum(dim=1).mean() * self.weight


class ClassificationLoss(nn.Module):
    """Base loss plus the optional regularization and harmonic terms."""

    def __init__(
        self,
        base: nn.Module,
        l1_weight: float = 0.0,
        harmonic: Optional[HarmonicPenalty] = None,
    ):
        super().__init__()
        if float(l1_weight) < 0.0:
            raise ValueError(f"l1_weight must be non-negative, got {l1_weight!r}")
        self.base = base
        self.l1_weight = float(l1_weight)
        self.harmonic = harmonic

    def forward(self, output: torch.Tensor, targets: torch.Tensor, model: Optional[nn.Module] = None) -> torch.Tensor:
        loss = self.base(output, targets)
        if self.l1_weight > 0.0 and model is not None:
            loss = loss + l1_regularization(model, self.l1_weight).to(loss.device)
        if self.harmonic is not None:
            loss = loss + self.harmonic(output)
        return loss


def build_loss(cfg: dict, num_classes: Optional[int] = None) -> ClassificationLoss:
    loss_cfg = cfg.get("loss", {}) or {}
    name = str(loss_cfg.get("name", "mse")).lower()

    if name == "mse":
        base = MeanSquareLoss()
    elif name == "bce":
        base = BinaryCrossEntropyLoss()
    elif name == "focal":
        alpha = loss_cfg.get("focal_alpha", None)
        base = FocalLoss(gamma=float(loss_cfg.get("focal_gamma", 2.0)), alpha=None if alpha is None else float(alpha))
    else:
        raise ValueError(f"Unknown loss name: {name!r}. Use one of: mse, bce, focal.")

    harmonic = None
    harmonic_weight = float(loss_cfg.get("harmonic_weight", 0.0))
    if harmonic_weight < 0.0:
        raise ValueError(f"harmonic_weight must be non-negative, got {harmonic_weight!r}")
    if harmonic_weight > 0.0:
        if num_classes is None:
            num_classes = int(cfg.get("model", {}).get("num_classes", NUM_CLASSES))
        harmonic = HarmonicPenalty(num_classes, harmonic_weight)

    return ClassificationLoss(base, l1_weight=float(loss_cfg.get("l1_weight", 0.0)), harmonic=harmonic)
