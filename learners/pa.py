"""Passive-Aggressive (PA-I) weight updates for structured prediction.

The update moves the weights along the sparse difference between the
reference and predicted feature activations,

    w <- w + alpha * (phi(x, y) - phi(x, y_hat)),
    alpha = min(c, (margin - w . diff) / ||diff||^2),

where ``margin`` is the number of mismatches reported by the margin strategy.
"""

from __future__ import annotations

import logging
from typing import Any, MutableSequence, Optional, Protocol

from learners.loss import Loss
from learners.sparse import SparseAccumulator

logger = logging.getLogger(__name__)


class InvalidIndexError(ValueError):
    """Raised when a margin strategy registers an unresolved weight index."""


class TrainingInstance(Protocol):
    target: Any
    weight: float


class MarginStrategy(Protocol):
    def compute_margin(
        self,
        updater: "PassiveAggressiveUpdater",
        instance: TrainingInstance,
        weights: MutableSequence[float],
        reference: Any,
        predicted: Any,
    ) -> int:
        """Register differing index pairs on ``updater`` and return the margin."""


class PassiveAggressiveUpdater:
    """Applies one PA-I step per training instance.

    The updater owns a single :class:`SparseAccumulator` that is cleared at the
    end of every call, so an instance must not be shared between threads or
    re-entered while an update is in flight. Give each worker its own updater
    and weight vector.
    """

    def __init__(
        self,
        strategy: MarginStrategy,
        loss: Loss,
        *,
        use_instance_weight: bool = False,
    ) -> None:
        self.strategy = strategy
        self.loss = loss
        self.use_instance_weight = use_instance_weight
        self.diff = SparseAccumulator()
        self.score_gap = 0.0
        self.last_alpha = 0.0

    def update(
        self,
        instance: TrainingInstance,
        weights: MutableSequence[float],
        predicted: Any,
        c: float,
    ) -> float:
        """Update ``weights`` against the instance's own target."""
        return self.apply_update(instance, weights, instance.target, predicted, c)

    def apply_update(
        self,
        instance: TrainingInstance,
        weights: MutableSequence[float],
        reference: Any,
        predicted: Any,
        c: float,
    ) -> float:
        """Update ``weights`` in place and return the loss of ``predicted``."""
        self.last_alpha = 0.0
        try:
            margin = self.strategy.compute_margin(
                self, instance, weights, reference, predicted
            )
            if margin == 0:
                return 0.0

            lam = self.diff.squared_norm()
            if lam == 0.0:
                logger.debug(
                    "difference vector cancelled out (margin=%s); skipping step",
                    margin,
                )
            elif self.score_gap <= margin:
                alpha = (margin - self.score_gap) / lam
                if self.use_instance_weight:
                    alpha *= instance.weight
                alpha = min(alpha, c)
                for idx in self.diff.indices():
                    weights[idx] += self.diff.get(idx) * alpha
                self.last_alpha = alpha

            return float(self.loss.score(reference, predicted))
        finally:
            self.reset()

    def adjust(
        self,
        weights: MutableSequence[float],
        reference_index: Optional[int],
        predicted_index: Optional[int],
    ) -> None:
        """Register one (reference, predicted) index pair."""
        if reference_index is None or predicted_index is None:
            raise InvalidIndexError(
                f"unresolved index pair ({reference_index}, {predicted_index})"
            )
        if reference_index < 0 or predicted_index < 0:
            raise InvalidIndexError(
                f"negative index pair ({reference_index}, {predicted_index})"
            )
        self.diff.add(reference_index, 1.0)
        self.diff.add(predicted_index, -1.0)
        self.score_gap += float(weights[reference_index] - weights[predicted_index])

    def reset(self) -> None:
        self.diff.clear()
        self.score_gap = 0.0
