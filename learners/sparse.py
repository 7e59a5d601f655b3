"""Sparse coefficient buffer reused across Passive-Aggressive updates."""

from __future__ import annotations

from typing import Dict, List


class SparseAccumulator:
    """Mapping from feature index to nonzero coefficient; missing keys read as zero.

    One buffer is owned by one updater. It is filled during a single update,
    read back to compute the step, then cleared in place for the next one.
    """

    def __init__(self) -> None:
        self._values: Dict[int, float] = {}

    def set(self, index: int, value: float) -> None:
        if value == 0.0:
            self._values.pop(index, None)
        else:
            self._values[index] = float(value)

    def get(self, index: int) -> float:
        return self._values.get(index, 0.0)

    def add(self, index: int, delta: float) -> None:
        self.set(index, self._values.get(index, 0.0) + float(delta))

    def squared_norm(self) -> float:
        """Return the sum of squared coefficients."""
        return float(sum(value * value for value in self._values.values()))

    def indices(self) -> List[int]:
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, index: object) -> bool:
        return index in self._values
