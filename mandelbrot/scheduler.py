"""Parallel scheduler: splits the raster into bands and renders them concurrently."""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from .errors import ConfigurationError, PartitionError, RenderError
from .plane import ImageBounds, pixel_to_point
from .renderer import DEFAULT_LIMIT, KERNELS, render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderSettings:
    """Tunables of a single render."""

    max_iterations: int = DEFAULT_LIMIT
    workers: Optional[int] = None
    rows_per_band: int = 1
    kernel: str = "numpy"

    def __post_init__(self) -> None:
        if self.max_iterations < 0:
            raise ConfigurationError(f"max_iterations must not be negative, got {self.max_iterations}")
        if self.workers is not None and self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.rows_per_band < 1:
            raise ConfigurationError(f"rows_per_band must be at least 1, got {self.rows_per_band}")
        if self.kernel not in KERNELS:
            raise ConfigurationError(f"unknown kernel {self.kernel!r}; choose one of {', '.join(KERNELS)}")

    def worker_count(self) -> int:
        return self.workers if self.workers is not None else (os.cpu_count() or 1)


@dataclass(frozen=True)
class Band:
    """A run of ``rows`` consecutive raster rows starting at ``top``."""

    top: int
    rows: int

    @property
    def stop(self) -> int:
        return self.top + self.rows

    def slice(self, width: int) -> slice:
        """Flat buffer indices covered by the band in a raster ``width`` pixels wide."""
        return slice(self.top * width, self.stop * width)

    def bounds(self, width: int) -> ImageBounds:
        return ImageBounds(width, self.rows)


def partition(bounds: ImageBounds, rows_per_band: int = 1) -> list[Band]:
    """Split ``bounds`` into bands of ``rows_per_band`` rows, the last one possibly shorter."""

    if rows_per_band < 1:
        raise ConfigurationError(f"rows_per_band must be at least 1, got {rows_per_band}")
    return [
        Band(top, min(rows_per_band, bounds.height - top))
        for top in range(0, bounds.height, rows_per_band)
    ]


def check_partition(bands: Sequence[Band], bounds: ImageBounds) -> None:
    """Raise :class:`PartitionError` unless ``bands`` cover every row exactly once, in order."""

    expected_top = 0
    for band in bands:
        if band.rows < 1:
            raise PartitionError(f"band at row {band.top} is empty")
        if band.top != expected_top:
            kind = "overlaps" if band.top < expected_top else "leaves a gap before"
            raise PartitionError(f"band at row {band.top} {kind} row {expected_top}")
        expected_top = band.stop
    if expected_top != bounds.height:
        raise PartitionError(f"bands cover rows 0..{expected_top}, image has {bounds.height} rows")


def band_corners(
    bounds: ImageBounds, band: Band, upper_left: complex, lower_right: complex
) -> tuple[complex, complex]:
    """Plane corners of ``band``, measured in the coordinate space of the whole image."""

    return (
        pixel_to_point(bounds, (0, band.top), upper_left, lower_right),
        pixel_to_point(bounds, (bounds.width, band.stop), upper_left, lower_right),
    )


def _band_views(pixels: np.ndarray, bands: Iterable[Band], width: int) -> list[tuple[Band, np.ndarray]]:
    return [(band, pixels[band.slice(width)]) for band in bands]


def render_parallel(
    bounds: ImageBounds,
    upper_left: complex,
    lower_right: complex,
    settings: Optional[RenderSettings] = None,
) -> np.ndarray:
    """Render the window into a fresh row-major ``uint8`` buffer of ``bounds.size`` pixels.

    The window is not validated here. The returned buffer is read-only and
    only exists once every band finished; a failing band raises
    :class:`RenderError`.
    """

    settings = settings or RenderSettings()
    pixels = np.zeros(bounds.size, dtype=np.uint8)
    bands = partition(bounds, settings.rows_per_band)
    check_partition(bands, bounds)
    workers = settings.worker_count()

    logger.debug(
        "rendering %dx%d in %d bands on %d workers with the %s kernel",
        bounds.width, bounds.height, len(bands), workers, settings.kernel,
    )
    start = time.perf_counter()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="band") as executor:
        futures: dict[Future, Band] = {}
        for band, view in _band_views(pixels, bands, bounds.width):
            band_upper_left, band_lower_right = band_corners(bounds, band, upper_left, lower_right)
            future = executor.submit(
                render,
                view,
                band.bounds(bounds.width),
                band_upper_left,
                band_lower_right,
                limit=settings.max_iterations,
                kernel=settings.kernel,
            )
            futures[future] = band

        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [future for future in done if future.exception() is not None]
        if failed:
            executor.shutdown(wait=True, cancel_futures=True)
            future = min(failed, key=lambda f: futures[f].top)
            band = futures[future]
            raise RenderError(f"band at rows {band.top}..{band.stop} failed") from future.exception()

    logger.debug("rendered %d pixels in %.3fs", bounds.size, time.perf_counter() - start)
    pixels.flags.writeable = False
    return pixels
