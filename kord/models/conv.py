from __future__ import annotations

import torch
import torch.nn as nn

from .validation import check_non_negative_int, check_positive_int


class ConvBlock(nn.Module):
    """Bias-free Conv1d followed by ReLU.

    Input:  (batch, in_channels, length)
    Output: (batch, out_channels, length + 2 * padding - kernel_size + 1)

    Building block for convolutional front-ends; the classifier in
    ``kord.models.kord`` does not use it.
    """

    def __init__(self, in_channels: int, out_channels: int, kernel_size: int, padding: int = 0):
        super().__init__()
        in_channels = check_positive_int("in_channels", in_channels)
        out_channels = check_positive_int("out_channels", out_channels)
        kernel_size = check_positive_int("kernel_size", kernel_size)
        padding = check_non_negative_int("padding", padding)

        self.conv = nn.Conv1d(in_channels, out_channels, kernel_size, padding=padding, bias=False)
        self.activation = nn.ReLU()

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.activation(self.conv(x))
