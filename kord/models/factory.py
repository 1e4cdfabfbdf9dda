from kord.config import INPUT_SPACE_SIZE, NUM_CLASSES

from .kord import KordModel

def build_model(cfg: dict):
    model_cfg = cfg["model"]
    name = str(model_cfg.get("name", "kord")).lower()

    if name == "kord":
        return KordModel(
            mlp_layers=model_cfg.get("mlp_layers", 3),
            mlp_size=model_cfg.get("mlp_size", 1024),
            mlp_dropout=model_cfg.get("mlp_dropout", 0.3),
            sigmoid_strength=model_cfg.get("sigmoid_strength", 1.0),
            sigmoid_trainable=bool(model_cfg.get("sigmoid_trainable", False)),
            input_size=model_cfg.get("input_size", INPUT_SPACE_SIZE),
            num_classes=model_cfg.get("num_classes", NUM_CLASSES),
        )

    raise ValueError(f"Unknown model name: {name}")
