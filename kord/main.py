import argparse

import torch
from torch.utils.data import DataLoader

from .checkpoint import save_checkpoint
from .config import load_config
from .device import get_device, seed_everything
from .datasets.features import collate_batch, get_feature_datasets
from .models.factory import build_model
from .training.losses import build_loss
from .training.trainer import train, evaluate
from .logging.wandb_logger import init_wandb, config_update, finish


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Train the kord note classifier.")
    p.add_argument(
        "--config",
        action="append",
        required=True,
        help="Path to a YAML config. Can be repeated.",
    )
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    cfg = load_config(args.config)

    seed_everything(int(cfg["seed"]))
    device = get_device(cfg.get("device", "auto"))

    run = init_wandb(cfg)

    train_ds, val_ds = get_feature_datasets(cfg)
    print(f"[DATA] train={len(train_ds)} val={len(val_ds)}")

    pin = (device.type == "cuda")
    train_loader = DataLoader(
        train_ds,
        batch_size=cfg["data"]["batch_size"],
        shuffle=True,
        num_workers=cfg["data"].get("num_workers", 0),
        pin_memory=pin,
        collate_fn=collate_batch,
    )
    val_loader = DataLoader(
        val_ds,
        batch_size=cfg["data"]["batch_size"],
        shuffle=False,
        num_workers=cfg["data"].get("num_workers", 0),
        pin_memory=pin,
        collate_fn=collate_batch,
    )

    model = build_model(cfg).to(device)
    n_params = sum(p.numel() for p in model.parameters())
    print(f"[MODEL] {model.hparams} params={n_params:,} device={device}")

    config_update(
        run,
        {
            "data/train/n": len(train_ds),
            "data/val/n": len(val_ds),
            "model/params": n_params,
            "device/type": device.type,
            "device/name": torch.cuda.get_device_name(0) if device.type == "cuda" else "cpu",
        },
    )

    train(model, train_loader, val_loader, device, cfg=cfg, wandb_run=run)

    loss_fn = build_loss(cfg, num_classes=model.num_classes).to(device)
    val_metrics = evaluate(model, val_loader, device, loss_fn=loss_fn, threshold=float(cfg["training"].get("threshold", 0.5)))

    ckpt_path = cfg["training"].get("checkpoint_path")
    if ckpt_path:
        saved = save_checkpoint(model, ckpt_path, extra={"val_metrics": val_metrics, "seed": int(cfg["seed"])})
        print(f"[CKPT] saved to {saved}")

    if run is not None:
        run.log({f"final/{k}": v for k, v in val_metrics.items()})
    finish(run)

    print("Final val:", val_metrics)
    return val_metrics


if __name__ == "__main__":
    main()
