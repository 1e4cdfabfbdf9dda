from __future__ import annotations
import torch

@torch.no_grad()
def binarize(probs: torch.Tensor, threshold: float = 0.5) -> torch.Tensor:
    return (probs >= threshold).to(torch.int64)

@torch.no_grad()
def per_class_counts(y_true: torch.Tensor, y_pred: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """tp, fp, fn per class for (N, C) 0/1 tensors."""
    y_true = y_true.to(torch.int64)
    y_pred = y_pred.to(torch.int64)
    tp = (y_true * y_pred).sum(dim=0)
    fp = ((1 - y_true) * y_pred).sum(dim=0)
    fn = (y_true * (1 - y_pred)).sum(dim=0)
    return tp, fp, fn

@torch.no_grad()
def per_class_precision(tp: torch.Tensor, fp: torch.Tensor) -> torch.Tensor:
    denom = (tp + fp).to(torch.float32).clamp_min(1.0)
    return tp.to(torch.float32) / denom

@torch.no_grad()
def per_class_recall(tp: torch.Tensor, fn: torch.Tensor) -> torch.Tensor:
    denom = (tp + fn).to(torch.float32).clamp_min(1.0)
    return tp.to(torch.float32) / denom

@torch.no_grad()
def f1_from_counts(tp: torch.Tensor, fp: torch.Tensor, fn: torch.Tensor) -> torch.Tensor:
    tp = tp.to(torch.float32)
    denom = (2 * tp + fp + fn).clamp_min(1.0)
    return 2 * tp / denom

@torch.no_grad()
def exact_match(y_true: torch.Tensor, y_pred: torch.Tensor) -> float:
    """Fraction of samples whose whole note set is predicted correctly."""
    hits = (y_true.to(torch.int64) == y_pred.to(torch.int64)).all(dim=1)
    return float(hits.to(torch.float32).mean().item())

@torch.no_grad()
def multilabel_metrics(probs: torch.Tensor, targets: torch.Tensor, threshold: float = 0.5) -> dict[str, float]:
    y_pred = binarize(probs, threshold)
    y_true = binarize(targets, 0.5)
    tp, fp, fn = per_class_counts(y_true, y_pred)

    micro_tp, micro_fp, micro_fn = tp.sum(), fp.sum(), fn.sum()
    return {
        "exact_match": exact_match(y_true, y_pred),
        "micro_precision": float(per_class_precision(micro_tp, micro_fp).item()),
        "micro_recall": float(per_class_recall(micro_tp, micro_fn).item()),
        "micro_f1": float(f1_from_counts(micro_tp, micro_fp, micro_fn).item()),
        "macro_f1": float(f1_from_counts(tp, fp, fn).mean().item()),
    }
