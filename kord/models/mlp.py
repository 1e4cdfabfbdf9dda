from __future__ import annotations

import torch
import torch.nn as nn

from .validation import check_dropout, check_positive_int


class ResidualBlock(nn.Module):
    """x -> Linear -> ReLU -> Dropout -> + x"""

    def __init__(self, in_size: int, out_size: int | None = None, dropout: float = 0.0):
        super().__init__()
        in_size = check_positive_int("in_size", in_size)
        out_size = in_size if out_size is None else check_positive_int("out_size", out_size)
        # the skip connection adds x back, so the block cannot change width
        if out_size != in_size:
            raise ValueError(f"residual block requires in_size == out_size, got {in_size} and {out_size}")

        self.linear = nn.Linear(in_size, out_size)
        self.activation = nn.ReLU()
        self.dropout = nn.Dropout(check_dropout(dropout))

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        out = self.linear(x)
        out = self.activation(out)
        out = self.dropout(out)
        return x + out


class Mlp(nn.Module):
    """Stack of ``num_layers`` residual blocks, all ``size`` wide."""

    def __init__(self, num_layers: int, size: int, dropout: float = 0.0):
        super().__init__()
        num_layers = check_positive_int("mlp_layers", num_layers)
        size = check_positive_int("mlp_size", size)
        dropout = check_dropout(dropout)

        self.size = size
        self.blocks = nn.ModuleList([ResidualBlock(size, dropout=dropout) for _ in range(num_layers)])

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        for block in self.blocks:
            x = block(x)
        return x
