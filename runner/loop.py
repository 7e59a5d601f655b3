"""Online training loop driving the Passive-Aggressive updater."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from config import Config
from instances import Instance
from learners.pa import PassiveAggressiveUpdater

logger = logging.getLogger(__name__)


@dataclass
class RoundRecord:
    epoch: int
    loss: float
    errors: int
    updates: int
    mean_alpha: float
    weight_norm: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "epoch": self.epoch,
            "loss": self.loss,
            "errors": self.errors,
            "updates": self.updates,
            "mean_alpha": self.mean_alpha,
            "weight_norm": self.weight_norm,
        }


def run_loop(
    cfg: Config, strategy, instances: Sequence[Instance]
) -> tuple[np.ndarray, list[RoundRecord]]:
    """Train dense weights for ``strategy`` over ``instances``.

    Stops before ``cfg.run.epochs`` once an epoch makes no prediction errors.
    """
    rng = np.random.default_rng(cfg.run.seed)
    weights = np.zeros(strategy.n_weights, dtype=float)
    updater = PassiveAggressiveUpdater(
        strategy,
        cfg.loss,
        use_instance_weight=cfg.updater.use_instance_weight,
    )
    history: list[RoundRecord] = []
    order = np.arange(len(instances))

    for epoch in range(cfg.run.epochs):
        if cfg.run.shuffle:
            rng.shuffle(order)

        total_loss = 0.0
        errors = 0
        alphas: list[float] = []
        for idx in order:
            instance = instances[idx]
            predicted = strategy.predict(instance, weights)
            if predicted != instance.target:
                errors += 1
            total_loss += updater.update(instance, weights, predicted, cfg.updater.c)
            if updater.last_alpha != 0.0:
                alphas.append(updater.last_alpha)

        record = RoundRecord(
            epoch=epoch,
            loss=total_loss,
            errors=errors,
            updates=len(alphas),
            mean_alpha=float(np.mean(alphas)) if alphas else 0.0,
            weight_norm=float(np.linalg.norm(weights)),
        )
        history.append(record)
        logger.info(
            "epoch %d: loss=%.3f errors=%d/%d updates=%d",
            epoch,
            record.loss,
            errors,
            len(instances),
            record.updates,
        )

        if errors == 0:
            logger.info("no mistakes in epoch %d, stopping", epoch)
            break

    return weights, history


def evaluate(strategy, weights: np.ndarray, instances: Sequence[Instance], loss) -> float:
    """Average loss of the current weights over ``instances``."""
    if not instances:
        return 0.0
    total = sum(
        loss.score(inst.target, strategy.predict(inst, weights)) for inst in instances
    )
    return float(total) / len(instances)
