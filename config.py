"""Configuration loading for the Passive-Aggressive trainer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml

from learners.loss import Loss, make_loss
from learners.problems import make_strategy


@dataclass
class ProblemConfig:
    type: Literal["binary", "multiclass", "sequence"]
    n_features: int
    n_labels: int = 2
    n_instances: int = 200
    active: int = 5
    length: int = 8
    weighted: bool = False


@dataclass
class UpdaterConfig:
    c: float = 1.0
    use_instance_weight: bool = False
    loss: Literal["zero_one", "hamming"] = "zero_one"


@dataclass
class RunConfig:
    epochs: int = 10
    seed: int = 0
    shuffle: bool = True
    logging: bool = True


@dataclass
class Config:
    problem: ProblemConfig
    updater: UpdaterConfig
    run: RunConfig

    @property
    def strategy(self):
        return make_strategy(
            self.problem.type, self.problem.n_features, self.problem.n_labels
        )

    @property
    def loss(self) -> Loss:
        return make_loss(self.updater.loss)


_DEFAULT_LOSS = {"binary": "zero_one", "multiclass": "zero_one", "sequence": "hamming"}


def load_config(path: str | Path) -> Config:
    cfg_path = Path(path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)
    with cfg_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    problem_raw = raw.get("problem") or {}
    updater_raw = raw.get("updater") or {}
    run_raw = raw.get("run") or {}

    if "type" not in problem_raw or "n_features" not in problem_raw:
        raise ValueError("problem section requires 'type' and 'n_features'")
    kind = str(problem_raw["type"])
    if kind not in _DEFAULT_LOSS:
        raise ValueError(f"unsupported problem type: {kind}")

    problem = ProblemConfig(
        type=kind,
        n_features=int(problem_raw["n_features"]),
        n_labels=int(problem_raw.get("n_labels", 2)),
        n_instances=int(problem_raw.get("n_instances", 200)),
        active=int(problem_raw.get("active", 5)),
        length=int(problem_raw.get("length", 8)),
        weighted=bool(problem_raw.get("weighted", False)),
    )

    updater = UpdaterConfig(
        c=float(updater_raw.get("c", 1.0)),
        use_instance_weight=bool(updater_raw.get("use_instance_weight", False)),
        loss=str(updater_raw.get("loss", _DEFAULT_LOSS[kind])),
    )
    make_loss(updater.loss)
    if updater.loss == "hamming" and kind != "sequence":
        raise ValueError(f"hamming loss needs sequence labels, not {kind}")
    if updater.c <= 0:
        raise ValueError(f"aggressiveness bound c must be positive, got {updater.c}")

    run = RunConfig(
        epochs=int(run_raw.get("epochs", 10)),
        seed=int(run_raw.get("seed", 0)),
        shuffle=bool(run_raw.get("shuffle", True)),
        logging=bool(run_raw.get("logging", True)),
    )
    if run.epochs <= 0:
        raise ValueError("run.epochs must be positive")

    return Config(
        problem=problem,
        updater=updater,
        run=run,
    )
