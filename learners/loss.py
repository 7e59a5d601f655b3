"""Losses reported after each update."""

from __future__ import annotations

from typing import Any, Protocol, Sequence


class Loss(Protocol):
    def score(self, reference: Any, predicted: Any) -> float:
        ...


class ZeroOneLoss:
    """1.0 for a wrong label, 0.0 otherwise."""

    def score(self, reference: Any, predicted: Any) -> float:
        return 0.0 if reference == predicted else 1.0


class HammingLoss:
    """Number of positions where two label sequences disagree."""

    def score(self, reference: Sequence[Any], predicted: Sequence[Any]) -> float:
        if len(reference) != len(predicted):
            raise ValueError(
                f"sequence lengths differ: {len(reference)} != {len(predicted)}"
            )
        return float(sum(1 for r, p in zip(reference, predicted) if r != p))


def make_loss(name: str) -> Loss:
    if name == "zero_one":
        return ZeroOneLoss()
    if name == "hamming":
        return HammingLoss()
    raise ValueError(f"unknown loss: {name}")
