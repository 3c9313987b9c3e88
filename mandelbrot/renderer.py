"""Band renderer: fills one horizontal strip of the output buffer."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from .errors import BandSizeError, ConfigurationError
from .escape import NO_ESCAPE, escape_counts, escape_time
from .plane import ImageBounds, pixel_to_point

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 255
KERNELS = ("python", "numpy", "tensorflow")

BandKernel = Callable[[np.ndarray, ImageBounds, complex, complex, int], None]


def intensity(count: Optional[int]) -> int:
    """Gray level for an escape count: 0 inside the set, brighter for faster escapes."""

    if count is None:
        return 0
    return 255 - (count & 0xFF)


def intensities(counts: np.ndarray) -> np.ndarray:
    """Vectorized :func:`intensity` for counts using ``NO_ESCAPE`` as the inside marker."""

    counts = np.asarray(counts, dtype=np.int64)
    values = 255 - (counts & 0xFF)
    return np.where(counts == NO_ESCAPE, 0, values).astype(np.uint8)


def _python_kernel(pixels: np.ndarray, bounds: ImageBounds, upper_left: complex, lower_right: complex, limit: int) -> None:
    for row in range(bounds.height):
        for col in range(bounds.width):
            point = pixel_to_point(bounds, (col, row), upper_left, lower_right)
            pixels[row * bounds.width + col] = intensity(escape_time(point, limit))


def band_grid(bounds: ImageBounds, upper_left: complex, lower_right: complex) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary parts of every pixel of ``bounds``, shaped ``(height, width)``."""

    width = lower_right.real - upper_left.real
    height = upper_left.imag - lower_right.imag
    cols = np.arange(bounds.width, dtype=np.float64)
    rows = np.arange(bounds.height, dtype=np.float64)
    re = upper_left.real + cols * width / bounds.width
    im = upper_left.imag - rows * height / bounds.height
    return np.meshgrid(re, im)


def _numpy_kernel(pixels: np.ndarray, bounds: ImageBounds, upper_left: complex, lower_right: complex, limit: int) -> None:
    c_re, c_im = band_grid(bounds, upper_left, lower_right)
    pixels[:] = intensities(escape_counts(c_re, c_im, limit)).ravel()


def _tensorflow_kernel(pixels: np.ndarray, bounds: ImageBounds, upper_left: complex, lower_right: complex, limit: int) -> None:
    # TensorFlow is an optional extra and slow to import.
    from .tf_kernel import escape_counts_tf

    c_re, c_im = band_grid(bounds, upper_left, lower_right)
    pixels[:] = intensities(escape_counts_tf(c_re, c_im, limit)).ravel()


_KERNELS: dict[str, BandKernel] = {
    "python": _python_kernel,
    "numpy": _numpy_kernel,
    "tensorflow": _tensorflow_kernel,
}


def get_kernel(name: str) -> BandKernel:
    try:
        return _KERNELS[name]
    except KeyError:
        raise ConfigurationError(f"unknown kernel {name!r}; choose one of {', '.join(KERNELS)}") from None


def render(
    pixels: np.ndarray,
    bounds: ImageBounds,
    upper_left: complex,
    lower_right: complex,
    *,
    limit: int = DEFAULT_LIMIT,
    kernel: str = "python",
) -> None:
    """Render the rectangle between ``upper_left`` and ``lower_right`` into ``pixels``.

    ``pixels`` holds exactly ``bounds.width * bounds.height`` gray levels in
    row-major order and is the only memory written.
    """

    band_kernel = get_kernel(kernel)
    if len(pixels) != bounds.size:
        raise BandSizeError(
            f"band buffer holds {len(pixels)} pixels, bounds {bounds.width}x{bounds.height} need {bounds.size}"
        )
    band_kernel(pixels, bounds, upper_left, lower_right, limit)
