# kord/training/trainer.py
from __future__ import annotations

from typing import Optional

import torch

from kord.logging.wandb_logger import log
from kord.metrics.multilabel import multilabel_metrics
from .diagnostics import sigmoid_stats, stage_grad_norms, stage_weight_norms
from .losses import build_loss
from .objective import ClassificationBatch, forward_classification


def _as_tuple2(x, default=(0.9, 0.999)):
    if x is None:
        return default
    if isinstance(x, (list, tuple)) and len(x) == 2:
        return (float(x[0]), float(x[1]))
    raise ValueError(f"betas must be a list/tuple of length 2, got: {x!r}")


def build_optimizer(model: torch.nn.Module, training_cfg: dict) -> torch.optim.Optimizer:
    lr = float(training_cfg.get("lr", 1e-3))
    weight_decay = float(training_cfg.get("weight_decay", 0.0))

    opt_cfg = training_cfg.get("optimizer", {}) or {}
    name = str(opt_cfg.get("name", "sgd")).lower()

    if name == "sgd":
        momentum = float(opt_cfg.get("momentum", 0.0))
        nesterov = bool(opt_cfg.get("nesterov", False))
        return torch.optim.SGD(
            model.parameters(), lr=lr, momentum=momentum, weight_decay=weight_decay, nesterov=nesterov
        )

    if name == "adam":
        betas = _as_tuple2(opt_cfg.get("betas", None))
        eps = float(opt_cfg.get("eps", 1e-8))
        return torch.optim.Adam(model.parameters(), lr=lr, betas=betas, eps=eps, weight_decay=weight_decay)

    if name == "adamw":
        betas = _as_tuple2(opt_cfg.get("betas", None))
        eps = float(opt_cfg.get("eps", 1e-8))
        return torch.optim.AdamW(model.parameters(), lr=lr, betas=betas, eps=eps, weight_decay=weight_decay)

    raise ValueError(f"Unknown optimizer name: {name!r}. Use one of: sgd, adam, adamw.")


@torch.no_grad()
def evaluate(model, loader, device, loss_fn: Optional[torch.nn.Module] = None, threshold: float = 0.5,
             collect_outputs: bool = False):
    """Evaluate a multi-label classifier.

    Returns either:
      metrics dict
    or
      (metrics dict, probabilities, targets)
    """

    model.eval()
    total_loss, n = 0.0, 0

    all_out, all_targets = [], []

    for batch in loader:
        batch = batch.to(device)
        result = forward_classification(model, batch, loss_fn)

        total_loss += result.loss.item() * len(batch)
        n += len(batch)

        all_out.append(result.output.detach().cpu())
        all_targets.append(result.targets.detach().cpu())

    if n == 0:
        raise ValueError("evaluate() got an empty loader")

    probs, targets = torch.cat(all_out), torch.cat(all_targets)
    metrics = {"loss": total_loss / n} | multilabel_metrics(probs, targets, threshold=threshold)
    if not collect_outputs:
        return metrics

    return metrics, probs, targets


def train(model, train_loader, val_loader, device, cfg: dict, wandb_run=None):
    training_cfg = cfg["training"]
    epochs = int(training_cfg["epochs"])
    opt = build_optimizer(model, training_cfg)

    loss_fn = build_loss(cfg, num_classes=getattr(model, "num_classes", None)).to(device)

    log_every_steps = int(training_cfg.get("log_every_steps", 50))
    log_grads = bool(training_cfg.get("log_grads", True))
    threshold = float(training_cfg.get("threshold", 0.5))

    history: list[dict] = []
    global_step = 0

    for epoch in range(1, epochs + 1):
        model.train()
        epoch_loss, epoch_n = 0.0, 0

        for batch in train_loader:
            batch: ClassificationBatch = batch.to(device)
            opt.zero_grad(set_to_none=True)
            result = forward_classification(model, batch, loss_fn)
            loss = result.loss
            loss.backward()

            if wandb_run is not None and log_grads and (global_step % log_every_steps == 0):
                grads = {f"grad/{k}": v for k, v in stage_grad_norms(model).items()}
                # strength_grad is only present for a trainable sigmoid
                grads |= {f"sigmoid/{k}": v for k, v in sigmoid_stats(model).items()}
                log(wandb_run, grads | {"epoch": epoch}, step=global_step)

            opt.step()

            if wandb_run is not None and (global_step % log_every_steps == 0):
                log(wandb_run, {"train/loss": float(loss.item()), "epoch": epoch}, step=global_step)

            epoch_loss += loss.item() * len(batch)
            epoch_n += len(batch)
            global_step += 1

        train_loss = epoch_loss / max(epoch_n, 1)

        # ---- end epoch validation
        val_metrics = evaluate(model, val_loader, device, loss_fn=loss_fn, threshold=threshold)
        history.append({"epoch": epoch, "train_loss": train_loss} | {f"val_{k}": v for k, v in val_metrics.items()})
        print(
            f"[EPOCH {epoch}/{epochs}] train/loss={train_loss:.6f} "
            f"val/loss={val_metrics['loss']:.6f} val/micro_f1={val_metrics['micro_f1']:.4f}"
        )

        if wandb_run is None:
            continue

        log(wandb_run, {f"val/{k}": float(v) for k, v in val_metrics.items()} | {"epoch": epoch}, step=global_step)
        log(wandb_run, {f"weights/{k}": v for k, v in stage_weight_norms(model).items()}, step=global_step)
        log(wandb_run, {f"sigmoid/{k}": v for k, v in sigmoid_stats(model).items()}, step=global_step)

    return history
