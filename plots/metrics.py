"""Plotting utilities for training curves."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from runner.loop import RoundRecord


def generate_plots(history: Iterable[RoundRecord], out_dir: str | Path) -> list[Path]:
    records = list(history)
    if not records:
        return []
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    epochs = np.array([rec.epoch for rec in records], dtype=float)
    losses = np.array([rec.loss for rec in records], dtype=float)
    errors = np.array([rec.errors for rec in records], dtype=float)
    alphas = np.array([rec.mean_alpha for rec in records], dtype=float)
    norms = np.array([rec.weight_norm for rec in records], dtype=float)

    plt.figure(figsize=(6, 4))
    plt.plot(epochs, losses, marker="o", label="loss")
    plt.plot(epochs, errors, marker="x", linestyle="--", label="mistakes")
    plt.xlabel("epoch")
    plt.ylabel("per-epoch total")
    plt.legend()
    plt.tight_layout()
    written.append(_save(out_path / "loss_curve.png"))

    plt.figure(figsize=(6, 4))
    plt.plot(epochs, alphas, marker="o")
    plt.xlabel("epoch")
    plt.ylabel("mean step size")
    plt.tight_layout()
    written.append(_save(out_path / "step_size.png"))

    plt.figure(figsize=(6, 4))
    plt.plot(epochs, norms, marker="o")
    plt.xlabel("epoch")
    plt.ylabel("||w||_2")
    plt.tight_layout()
    written.append(_save(out_path / "weight_norm.png"))
    return written


def _save(path: Path) -> Path:
    plt.savefig(path, dpi=150)
    plt.close()
    return path
