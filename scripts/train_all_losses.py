# scripts/train_all_losses.py
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

LOSSES = ["mse", "bce", "focal"]

BASE_CFG = Path("configs/base.yaml")

def main() -> int:
    if not BASE_CFG.exists():
        print(f"[ERR] Missing config: {BASE_CFG}")
        return 1

    for loss in LOSSES:
        loss_cfg = Path(f"configs/loss_{loss}.yaml")
        if not loss_cfg.exists():
            print(f"[WARN] Skip missing: {loss_cfg}")
            continue

        cmd = [
            sys.executable, "-m", "kord.main",
            "--config", str(BASE_CFG),
            "--config", str(loss_cfg),
            *sys.argv[1:],
        ]

        print("\n" + "=" * 80)
        print(f"[RUN] kord + loss_{loss}")
        print(" ".join(cmd))
        print("=" * 80)

        # stops at the first failing run (check=True)
        subprocess.run(cmd, check=True)

    print("\n[DONE] All loss configs finished.")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
