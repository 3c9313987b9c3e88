import pytest

from mandelbrot import ImageBounds


@pytest.fixture
def full_window():
    return complex(-2.0, 1.25), complex(0.5, -1.25)


@pytest.fixture
def small_bounds():
    return ImageBounds(48, 36)
