"""Margin strategies for binary, multiclass and sequence labelling problems.

Each strategy knows how its labels map onto the dense weight vector. It
predicts with the current weights and, given a reference and a predicted
label, registers the differing index pairs on a
:class:`~learners.pa.PassiveAggressiveUpdater` and returns the margin the
update has to restore.
"""

from __future__ import annotations

from typing import Any, List, MutableSequence, Optional, Sequence

import numpy as np

from learners.pa import PassiveAggressiveUpdater, TrainingInstance


def _feature_ids(feats, n_features: int) -> np.ndarray:
    ids = np.asarray(feats, dtype=int)
    if ids.size and (ids.min() < 0 or ids.max() >= n_features):
        raise ValueError(f"feature ids must be in [0, {n_features})")
    return ids


class BinaryMargin:
    """Two-slot layout ``feature * 2 + slot`` for labels -1 and +1."""

    labels = (-1, 1)

    def __init__(self, n_features: int) -> None:
        if n_features <= 0:
            raise ValueError("n_features must be positive")
        self.n_features = n_features

    @property
    def n_weights(self) -> int:
        return self.n_features * 2

    def index(self, feature: int, label: int) -> Optional[int]:
        if label not in self.labels or not 0 <= feature < self.n_features:
            return None
        return feature * 2 + (1 if label == 1 else 0)

    def predict(self, instance: TrainingInstance, weights: Sequence[float]) -> int:
        feats = _feature_ids(instance.data, self.n_features)
        w = np.asarray(weights, dtype=float)
        positive = float(w[feats * 2 + 1].sum())
        negative = float(w[feats * 2].sum())
        return 1 if positive >= negative else -1

    def compute_margin(
        self,
        updater: PassiveAggressiveUpdater,
        instance: TrainingInstance,
        weights: MutableSequence[float],
        reference: int,
        predicted: int,
    ) -> int:
        if reference == predicted:
            return 0
        for feature in instance.data:
            updater.adjust(
                weights,
                self.index(feature, reference),
                self.index(feature, predicted),
            )
        return 1


class MulticlassMargin:
    """Label-major layout ``feature * n_labels + label``."""

    def __init__(self, n_features: int, n_labels: int) -> None:
        if n_features <= 0:
            raise ValueError("n_features must be positive")
        if n_labels < 2:
            raise ValueError("n_labels must be at least 2")
        self.n_features = n_features
        self.n_labels = n_labels

    @property
    def n_weights(self) -> int:
        return self.n_features * self.n_labels

    def index(self, feature: int, label: int) -> Optional[int]:
        if not 0 <= label < self.n_labels or not 0 <= feature < self.n_features:
            return None
        return feature * self.n_labels + label

    def scores(self, instance: TrainingInstance, weights: Sequence[float]) -> np.ndarray:
        table = np.asarray(weights, dtype=float).reshape(self.n_features, self.n_labels)
        return table[_feature_ids(instance.data, self.n_features)].sum(axis=0)

    def predict(self, instance: TrainingInstance, weights: Sequence[float]) -> int:
        return int(np.argmax(self.scores(instance, weights)))

    def compute_margin(
        self,
        updater: PassiveAggressiveUpdater,
        instance: TrainingInstance,
        weights: MutableSequence[float],
        reference: int,
        predicted: int,
    ) -> int:
        if reference == predicted:
            return 0
        for feature in instance.data:
            updater.adjust(
                weights,
                self.index(feature, reference),
                self.index(feature, predicted),
            )
        return 1


class SequenceMargin:
    """First-order linear-chain layout.

    Emission weights ``feature * n_labels + label`` come first, followed by
    an ``n_labels x n_labels`` block of transition weights indexed by
    ``(previous, current)``.
    """

    def __init__(self, n_features: int, n_labels: int) -> None:
        if n_features <= 0:
            raise ValueError("n_features must be positive")
        if n_labels < 2:
            raise ValueError("n_labels must be at least 2")
        self.n_features = n_features
        self.n_labels = n_labels

    @property
    def n_weights(self) -> int:
        return self.n_features * self.n_labels + self.n_labels * self.n_labels

    def emission(self, feature: int, label: int) -> Optional[int]:
        if not 0 <= label < self.n_labels or not 0 <= feature < self.n_features:
            return None
        return feature * self.n_labels + label

    def transition(self, previous: int, current: int) -> Optional[int]:
        if not 0 <= previous < self.n_labels or not 0 <= current < self.n_labels:
            return None
        return self.n_features * self.n_labels + previous * self.n_labels + current

    def predict(self, instance: TrainingInstance, weights: Sequence[float]) -> List[int]:
        """Viterbi decoding of the highest-scoring label sequence."""
        length = len(instance.data)
        if length == 0:
            return []
        w = np.asarray(weights, dtype=float)
        split = self.n_features * self.n_labels
        emit = w[:split].reshape(self.n_features, self.n_labels)
        trans = w[split:].reshape(self.n_labels, self.n_labels)

        local = np.array(
            [emit[_feature_ids(feats, self.n_features)].sum(axis=0) for feats in instance.data]
        )
        best = local[0].copy()
        back = np.zeros((length, self.n_labels), dtype=int)
        for t in range(1, length):
            candidates = best[:, None] + trans
            back[t] = candidates.argmax(axis=0)
            best = candidates.max(axis=0) + local[t]

        path = [int(best.argmax())]
        for t in range(length - 1, 0, -1):
            path.append(int(back[t, path[-1]]))
        path.reverse()
        return path

    def compute_margin(
        self,
        updater: PassiveAggressiveUpdater,
        instance: TrainingInstance,
        weights: MutableSequence[float],
        reference: Sequence[Any],
        predicted: Sequence[Any],
    ) -> int:
        if len(reference) != len(predicted) or len(reference) != len(instance.data):
            raise ValueError("reference, prediction and data must have equal length")
        mismatches = 0
        for t, feats in enumerate(instance.data):
            ref, pred = reference[t], predicted[t]
            if ref != pred:
                mismatches += 1
                for feature in feats:
                    updater.adjust(
                        weights,
                        self.emission(feature, ref),
                        self.emission(feature, pred),
                    )
            if t > 0 and (reference[t - 1], ref) != (predicted[t - 1], pred):
                updater.adjust(
                    weights,
                    self.transition(reference[t - 1], ref),
                    self.transition(predicted[t - 1], pred),
                )
        return mismatches


def make_strategy(kind: str, n_features: int, n_labels: int = 2):
    if kind == "binary":
        return BinaryMargin(n_features)
    if kind == "multiclass":
        return MulticlassMargin(n_features, n_labels)
    if kind == "sequence":
        return SequenceMargin(n_features, n_labels)
    raise ValueError(f"unknown problem type: {kind}")
