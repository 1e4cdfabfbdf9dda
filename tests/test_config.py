from pathlib import Path

import pytest
import torch

from kord.config import deep_merge, load_config
from kord.device import get_device, seed_everything

CONFIGS = Path(__file__).resolve().parent.parent / "configs"


def test_deep_merge_nested():
    a = {"model": {"mlp_size": 8, "mlp_layers": 2}, "seed": 1}
    b = {"model": {"mlp_size": 16}, "loss": {"name": "bce"}}
    merged = deep_merge(a, b)
    assert merged == {"model": {"mlp_size": 16, "mlp_layers": 2}, "seed": 1, "loss": {"name": "bce"}}
    assert a["model"]["mlp_size"] == 8


def test_load_config_later_files_override(tmp_path):
    first = tmp_path / "a.yaml"
    second = tmp_path / "b.yaml"
    first.write_text("training:\n  epochs: 3\n  lr: 0.1\n", encoding="utf-8")
    second.write_text("training:\n  epochs: 5\n", encoding="utf-8")
    cfg = load_config([str(first), str(second)])
    assert cfg["training"] == {"epochs": 5, "lr": 0.1}


def test_empty_yaml_is_empty_dict(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_config([str(empty)]) == {}


def test_shipped_configs_merge():
    cfg = load_config([str(CONFIGS / "base.yaml"), str(CONFIGS / "loss_focal.yaml")])
    assert cfg["model"]["name"] == "kord"
    assert cfg["loss"]["name"] == "focal"
    assert cfg["training"]["optimizer"]["name"] == "adam"


def test_get_device():
    assert get_device("cpu").type == "cpu"
    assert get_device("auto").type in {"cpu", "cuda"}
    with pytest.raises(ValueError):
        get_device("tpu")


def test_seed_everything_repeatable():
    seed_everything(123)
    a = torch.rand(3)
    seed_everything(123)
    assert torch.equal(a, torch.rand(3))
