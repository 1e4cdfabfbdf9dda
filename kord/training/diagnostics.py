"""Per-stage gradient and weight summaries for the kord classifier.

Parameter names are grouped by their top-level module, which for ``KordModel``
gives the stages ``input``, ``mlp``, ``output`` and (when trainable)
``sigmoid``.
"""
from __future__ import annotations
from typing import Dict
import math
import torch


def _stage(param_name: str) -> str:
    return param_name.split(".", 1)[0]


@torch.no_grad()
def stage_grad_norms(model: torch.nn.Module) -> Dict[str, float]:
    """L2 norm of the gradients per stage, plus ``global`` over all of them.

    Parameters without a gradient are skipped; with none at all only
    ``global = 0.0`` is returned.
    """
    sq: Dict[str, float] = {}
    for name, p in model.named_parameters():
        if p.grad is None:
            continue
        stage = _stage(name)
        sq[stage] = sq.get(stage, 0.0) + float(p.grad.detach().pow(2).sum().item())

    out = {stage: math.sqrt(v) for stage, v in sq.items()}
    out["global"] = math.sqrt(sum(sq.values()))
    return out


@torch.no_grad()
def stage_weight_norms(model: torch.nn.Module) -> Dict[str, float]:
    """L2 norm of the weight matrices per stage (biases and the strength excluded)."""
    sq: Dict[str, float] = {}
    for name, p in model.named_parameters():
        if not name.endswith("weight"):
            continue
        stage = _stage(name)
        sq[stage] = sq.get(stage, 0.0) + float(p.detach().pow(2).sum().item())
    return {stage: math.sqrt(v) for stage, v in sq.items()}


@torch.no_grad()
def sigmoid_stats(model: torch.nn.Module) -> Dict[str, float]:
    """Current sigmoid strength, and its gradient once a trainable one has one."""
    act = getattr(model, "sigmoid", None)
    if act is None:
        return {}
    out = {"strength": float(act.strength.detach().item())}
    if act.strength.grad is not None:
        out["strength_grad"] = float(act.strength.grad.detach().item())
    return out
