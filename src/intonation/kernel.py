from __future__ import annotations

import math

import numpy as np


class Kernel:
    """Lookup table with the weight one observation adds to each neighbouring bin.

    The table is read-only once built, so one kernel can be shared by any
    number of histograms.
    """

    def __init__(self, weights: np.ndarray):
        table = np.array(weights, dtype=np.float64)
        table.setflags(write=False)
        self._weights = table

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    def size(self) -> int:
        return int(self._weights.size)

    def __len__(self) -> int:
        return self.size()

    def value(self, index: int) -> float:
        if not 0 <= index < self._weights.size:
            raise IndexError(f"Kernel index {index} outside [0, {self._weights.size})")
        return float(self._weights[index])


class GaussianKernel(Kernel):
    def __init__(self, width: float):
        if width <= 0:
            raise ValueError(f"Gaussian kernel width must be positive, got {width}")
        extent = math.floor(5.0 * width)
        half_width = width / 2.0
        offsets = np.arange(2 * extent + 1, dtype=np.float64) - extent
        super().__init__(np.exp(-0.5 * (offsets / half_width) ** 2))
        self.width = width


class RectangularKernel(Kernel):
    def __init__(self, width: float):
        if width < 1:
            raise ValueError(f"Rectangular kernel width must be at least 1, got {width}")
        super().__init__(np.ones(int(math.floor(width)), dtype=np.float64))
        self.width = width


_KERNELS = {
    "gaussian": GaussianKernel,
    "rectangular": RectangularKernel,
}


def make_kernel(kind: str, width: float) -> Kernel:
    try:
        factory = _KERNELS[kind.lower()]
    except KeyError:
        raise ValueError(f"Unknown kernel type: {kind!r}") from None
    return factory(width)
