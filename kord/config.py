from pathlib import Path
import yaml

# Feature width produced by the extractor and note classes (one per MIDI note).
INPUT_SPACE_SIZE = 512
NUM_CLASSES = 128

def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def deep_merge(a: dict, b: dict) -> dict:
    out = dict(a)
    for k, v in b.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def load_config(paths: list[str]) -> dict:
    cfg = {}
    for p in paths:
        cfg = deep_merge(cfg, load_yaml(p))
    return cfg
