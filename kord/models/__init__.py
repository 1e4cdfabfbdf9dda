from .activation import BoundedSigmoid
from .conv import ConvBlock
from .factory import build_model
from .kord import KordModel
from .mlp import Mlp, ResidualBlock

__all__ = ["BoundedSigmoid", "ConvBlock", "KordModel", "Mlp", "ResidualBlock", "build_model"]
