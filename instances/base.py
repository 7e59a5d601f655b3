"""Base type for training instances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Instance:
    """Active feature ids with their reference target.

    ``data`` is a list of feature ids for classification problems, or one
    such list per position for sequence labelling. ``weight`` scales the step
    size when the updater is configured to use instance weights.
    """

    data: Any
    target: Any
    weight: float = 1.0

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"instance weight must be nonnegative, got {self.weight}")
