from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

from .kernel import Kernel


class CircularHistogram:
    """Kernel density estimate over a circular domain such as 0..1200 cents.

    Every observation spreads the shared kernel over neighbouring bins; indices
    wrap around, so an observation near the end of the domain also feeds the
    first bins.

    The histogram is meant for a single writer. Readers on another thread
    should work on the snapshot returned by :meth:`estimate`.
    """

    def __init__(self, kernel: Kernel, size: int):
        if kernel.size() > size:
            raise ValueError(
                f"Kernel size ({kernel.size()}) should not exceed the histogram size ({size})."
            )
        self.kernel = kernel
        self._bins = np.zeros(size, dtype=np.float64)

    @classmethod
    def from_bins(cls, kernel: Kernel, bins: Union[Sequence[float], np.ndarray]) -> "CircularHistogram":
        values = np.asarray(bins, dtype=np.float64)
        histogram = cls(kernel, int(values.size))
        histogram._bins[:] = values
        return histogram

    @property
    def size(self) -> int:
        return int(self._bins.size)

    def __len__(self) -> int:
        return self.size

    def _kernel_indices(self, value: float) -> np.ndarray:
        # Adding the size first keeps the start positive for values near 0.
        start = math.floor(value + self.size - self.kernel.size() // 2)
        return (start + np.arange(self.kernel.size())) % self.size

    def add(self, value: float) -> None:
        """Add the kernel centered on ``value``."""
        self._bins[self._kernel_indices(value)] += self.kernel.weights

    def remove(self, value: float) -> None:
        """Subtract the kernel centered on ``value``.

        Nothing checks that ``value`` was added before; removing an unknown
        value leaves the histogram in a meaningless state.
        """
        self._bins[self._kernel_indices(value)] -= self.kernel.weights

    def shift(self, positions: int) -> None:
        """Rotate the bins so that new bin ``i`` holds old bin ``i + positions``."""
        self._bins = np.roll(self._bins, -positions)

    def normalize(self) -> None:
        """Scale the bins so that the largest one is 1.0."""
        largest = max(float(self._bins.max()), 0.0)
        if largest > 0:
            self._bins /= largest

    def merge_max(self, other: "CircularHistogram") -> None:
        self._check_size(other)
        np.maximum(self._bins, other._bins, out=self._bins)

    def merge_add(self, other: "CircularHistogram") -> None:
        self._check_size(other)
        self._bins += other._bins

    def sum_frequency(self) -> float:
        return float(self._bins.sum())

    def correlation(self, other: "CircularHistogram", shift: int = 0) -> float:
        """Similarity with ``other`` when its bins are shifted by ``shift`` positions.

        This is not a statistical correlation: it is the area both histograms
        share (the sum of elementwise minima) divided by the area of the
        larger one. 1.0 means the mass of one histogram lies entirely under
        the other, 0.0 means they do not overlap.
        """
        self._check_size(other)
        shifted = np.roll(other._bins, -shift)
        matching_area = float(np.minimum(self._bins, shifted).sum())
        if matching_area == 0.0:
            return 0.0
        biggest_area = max(self.sum_frequency(), other.sum_frequency())
        return matching_area / biggest_area

    def shift_for_optimal_correlation(self, other: "CircularHistogram") -> int:
        """Shift of ``other``, in ``[0, size)``, with the highest correlation.

        On ties the smallest shift wins.
        """
        optimal_shift = 0
        best = -1.0
        for shift in range(self.size):
            current = self.correlation(other, shift)
            if best < current:
                best = current
                optimal_shift = shift
        return optimal_shift

    def estimate(self) -> np.ndarray:
        return self._bins.copy()

    def value(self, index: int) -> float:
        return float(self._bins[index])

    def copy(self) -> "CircularHistogram":
        return CircularHistogram.from_bins(self.kernel, self._bins)

    def clear(self) -> None:
        self._bins[:] = 0.0

    def _check_size(self, other: "CircularHistogram") -> None:
        if other.size != self.size:
            raise ValueError(f"Histogram sizes differ: {self.size} != {other.size}")
