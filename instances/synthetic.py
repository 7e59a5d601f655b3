"""Synthetic datasets labelled by a hidden weight vector."""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from .base import Instance


def make_classification(
    strategy,
    n_instances: int,
    *,
    active: int = 5,
    weighted: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[List[Instance], np.ndarray]:
    """Draw instances whose labels are the strategy's predictions under a
    random latent weight vector, so the data is linearly separable.

    Returns the instances together with the latent weights.
    """
    rng = rng if rng is not None else np.random.default_rng()
    active = _check_active(active, strategy.n_features)
    latent = rng.standard_normal(strategy.n_weights)
    instances = []
    for _ in range(n_instances):
        feats = rng.choice(strategy.n_features, size=active, replace=False)
        probe = Instance(data=feats.tolist(), target=None)
        label = strategy.predict(probe, latent)
        instances.append(
            Instance(data=probe.data, target=label, weight=_draw_weight(rng, weighted))
        )
    return instances, latent


def make_sequences(
    strategy,
    n_instances: int,
    *,
    length: int = 8,
    active: int = 3,
    weighted: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[List[Instance], np.ndarray]:
    """Draw label sequences decoded from a random latent chain model."""
    if length <= 0:
        raise ValueError("sequence length must be positive")
    rng = rng if rng is not None else np.random.default_rng()
    active = _check_active(active, strategy.n_features)
    latent = rng.standard_normal(strategy.n_weights)
    instances = []
    for _ in range(n_instances):
        data = [
            rng.choice(strategy.n_features, size=active, replace=False).tolist()
            for _ in range(length)
        ]
        labels = strategy.predict(Instance(data=data, target=None), latent)
        instances.append(
            Instance(data=data, target=labels, weight=_draw_weight(rng, weighted))
        )
    return instances, latent


def _check_active(active: int, n_features: int) -> int:
    if not 0 < active <= n_features:
        raise ValueError(f"active must be in [1, {n_features}], got {active}")
    return active


def _draw_weight(rng: np.random.Generator, weighted: bool) -> float:
    return float(rng.uniform(0.5, 1.5)) if weighted else 1.0
