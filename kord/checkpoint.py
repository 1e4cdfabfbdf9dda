from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

import torch

from kord.models.factory import build_model


def save_checkpoint(model: torch.nn.Module, path: str, extra: Optional[dict] = None) -> Path:
    """Write the whole state_dict and the architecture as one file.

    The payload goes to a temp file in the target directory and is moved into
    place with ``os.replace``, so readers never see a partial checkpoint.
    The sigmoid strength is part of the state_dict whether or not it is trained.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {"model_state": model.state_dict(), "model_cfg": dict(model.hparams), "extra": dict(extra or {})}

    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            torch.save(payload, f)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    return path


def load_checkpoint(path: str, map_location="cpu") -> tuple[torch.nn.Module, dict]:
    payload = torch.load(path, map_location=map_location)
    model_cfg = payload["model_cfg"]
    model = build_model({"model": model_cfg})
    model.load_state_dict(payload["model_state"], strict=True)
    model.eval()
    return model, model_cfg
