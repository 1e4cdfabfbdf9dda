from pathlib import Path

import numpy as np
import torch
from torch.utils.data import Dataset, Subset

from kord.config import INPUT_SPACE_SIZE, NUM_CLASSES
from kord.training.objective import ClassificationBatch


class FeatureDataset(Dataset):
    """In-memory (feature vector, note targets) pairs.

    samples: (N, input_size) float32
    targets: (N, num_classes) float32, 1.0 where the note is sounding
    """

    def __init__(self, samples, targets, input_size: int = INPUT_SPACE_SIZE, num_classes: int = NUM_CLASSES):
        samples = torch.as_tensor(samples, dtype=torch.float32)
        targets = torch.as_tensor(targets, dtype=torch.float32)

        if samples.dim() != 2 or samples.size(1) != int(input_size):
            raise ValueError(f"samples must have shape (N, {input_size}), got {tuple(samples.shape)}")
        if targets.dim() != 2 or targets.size(1) != int(num_classes):
            raise ValueError(f"targets must have shape (N, {num_classes}), got {tuple(targets.shape)}")
        if samples.size(0) != targets.size(0):
            raise ValueError(f"samples and targets differ in length: {samples.size(0)} vs {targets.size(0)}")

        self.samples = samples
        self.targets = targets

    def __len__(self) -> int:
        return int(self.samples.size(0))

    def __getitem__(self, idx: int) -> tuple[torch.Tensor, torch.Tensor]:
        return self.samples[idx], self.targets[idx]


def collate_batch(items) -> ClassificationBatch:
    samples, targets = zip(*items)
    return ClassificationBatch(samples=torch.stack(samples), targets=torch.stack(targets))


def load_npz(path: str, input_size: int = INPUT_SPACE_SIZE, num_classes: int = NUM_CLASSES) -> FeatureDataset:
    """Reads a ``.npz`` with ``samples`` and ``targets`` arrays."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")
    with np.load(path) as data:
        missing = [k for k in ("samples", "targets") if k not in data.files]
        if missing:
            raise ValueError(f"{path} is missing arrays: {missing}")
        return FeatureDataset(data["samples"], data["targets"], input_size=input_size, num_classes=num_classes)


def _split_indices(n: int, val_split: float, seed: int) -> tuple[list[int], list[int]]:
    """
    Deterministic split of range(n) into train/val.
    """
    if not 0.0 < val_split < 1.0:
        raise ValueError(f"val_split must be in (0, 1), got {val_split!r}")
    n_val = max(1, int(n * val_split))
    n_train = n - n_val
    if n_train <= 0:
        raise ValueError(f"Not enough samples ({n}) for a train/val split of {val_split}")

    gen = torch.Generator().manual_seed(seed)
    perm = torch.randperm(n, generator=gen)
    return perm[:n_train].tolist(), perm[n_train:].tolist()


def get_feature_datasets(cfg: dict):
    model_cfg = cfg.get("model", {})
    input_size = int(model_cfg.get("input_size", INPUT_SPACE_SIZE))
    num_classes = int(model_cfg.get("num_classes", NUM_CLASSES))
    seed = int(cfg.get("seed", 42))
    val_split = float(cfg["data"].get("val_fraction", 0.1))

    base = load_npz(cfg["data"]["path"], input_size=input_size, num_classes=num_classes)
    train_idx, val_idx = _split_indices(len(base), val_split=val_split, seed=seed)
    return Subset(base, train_idx), Subset(base, val_idx)
