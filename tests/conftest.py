import pytest
import torch

from kord.models import KordModel

INPUT_SIZE = 24
NUM_CLASSES = 12


def zero_parameters(model: torch.nn.Module) -> None:
    with torch.no_grad():
        for name, p in model.named_parameters():
            if name.endswith("weight") or name.endswith("bias"):
                p.zero_()


@pytest.fixture(autouse=True)
def _seed():
    torch.manual_seed(0)


@pytest.fixture
def small_model() -> KordModel:
    model = KordModel(2, 16, 0.0, 1.0, input_size=INPUT_SIZE, num_classes=NUM_CLASSES)
    model.eval()
    return model
