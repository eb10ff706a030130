import math

import numpy as np
import pytest

from intonation.kernel import GaussianKernel, RectangularKernel, make_kernel


@pytest.mark.parametrize("width", [1.0, 2.5, 7.0, 15.0])
def test_gaussian_size(width):
    kernel = GaussianKernel(width)
    assert kernel.size() == 2 * math.floor(5 * width) + 1
    assert len(kernel) == kernel.size()
    for index in range(kernel.size()):
        assert kernel.value(index) > 0.0


def test_gaussian_is_centered_and_symmetric():
    kernel = GaussianKernel(7.0)
    center = kernel.size() // 2
    assert kernel.value(center) == 1.0
    np.testing.assert_allclose(kernel.weights, kernel.weights[::-1])
    assert kernel.value(center + 1) == pytest.approx(math.exp(-0.5 * (1 / 3.5) ** 2))


@pytest.mark.parametrize("width, size", [(1.0, 1), (4.0, 4), (7.9, 7)])
def test_rectangular_size(width, size):
    kernel = RectangularKernel(width)
    assert kernel.size() == size
    assert all(kernel.value(i) == 1.0 for i in range(size))


def test_value_out_of_range():
    kernel = RectangularKernel(3)
    with pytest.raises(IndexError):
        kernel.value(3)
    with pytest.raises(IndexError):
        kernel.value(-1)


def test_weights_are_read_only():
    kernel = GaussianKernel(2.0)
    with pytest.raises(ValueError):
        kernel.weights[0] = 5.0


@pytest.mark.parametrize("factory, width", [(GaussianKernel, 0.0), (RectangularKernel, 0.5)])
def test_invalid_width(factory, width):
    with pytest.raises(ValueError):
        factory(width)


def test_make_kernel():
    assert isinstance(make_kernel("gaussian", 3.0), GaussianKernel)
    assert isinstance(make_kernel("Rectangular", 3.0), RectangularKernel)
    with pytest.raises(ValueError):
        make_kernel("triangular", 3.0)
