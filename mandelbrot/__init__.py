"""Public API for banded Mandelbrot rendering."""

from .errors import (
    BandSizeError,
    ConfigurationError,
    InvalidBoundsError,
    InvalidWindowError,
    MandelbrotError,
    PartitionError,
    RenderError,
    SinkError,
)
from .escape import escape_counts, escape_time
from .parsing import parse_complex, parse_pair
from .plane import ImageBounds, PlaneWindow, pixel_to_point, point_to_pixel, validate_window
from .renderer import DEFAULT_LIMIT, KERNELS, intensity, render
from .scheduler import Band, RenderSettings, band_corners, check_partition, partition, render_parallel
from .sink import write_image

__all__ = [
    "Band",
    "BandSizeError",
    "ConfigurationError",
    "DEFAULT_LIMIT",
    "ImageBounds",
    "InvalidBoundsError",
    "InvalidWindowError",
    "KERNELS",
    "MandelbrotError",
    "PartitionError",
    "PlaneWindow",
    "RenderError",
    "RenderSettings",
    "SinkError",
    "band_corners",
    "check_partition",
    "escape_counts",
    "escape_time",
    "intensity",
    "parse_complex",
    "parse_pair",
    "partition",
    "pixel_to_point",
    "point_to_pixel",
    "render",
    "render_parallel",
    "validate_window",
    "write_image",
]
