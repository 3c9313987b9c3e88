"""Mapping between raster pixels and points of the complex plane."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

from .errors import InvalidBoundsError, InvalidWindowError


@dataclass(frozen=True)
class ImageBounds:
    """Pixel dimensions of a raster."""

    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidBoundsError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidBoundsError(f"{name} must be positive, got {value}")

    @property
    def size(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class PlaneWindow:
    """Rectangle of the complex plane drawn onto a raster.

    The window is not checked on construction; callers validate it with
    :meth:`validate` before rendering.
    """

    upper_left: complex
    lower_right: complex

    @property
    def width(self) -> float:
        return self.lower_right.real - self.upper_left.real

    @property
    def height(self) -> float:
        return self.upper_left.imag - self.lower_right.imag

    def validate(self) -> "PlaneWindow":
        validate_window(self.upper_left, self.lower_right)
        return self


def validate_window(upper_left: complex, lower_right: complex) -> None:
    """Raise :class:`InvalidWindowError` unless the corners span a proper window."""

    coords = (upper_left.real, upper_left.imag, lower_right.real, lower_right.imag)
    if not all(math.isfinite(value) for value in coords):
        raise InvalidWindowError(f"window corners must be finite: {upper_left} {lower_right}")
    if not lower_right.real > upper_left.real:
        raise InvalidWindowError(
            f"lower right real part {lower_right.real} must exceed upper left real part {upper_left.real}"
        )
    if not upper_left.imag > lower_right.imag:
        raise InvalidWindowError(
            f"upper left imaginary part {upper_left.imag} must exceed lower right imaginary part {lower_right.imag}"
        )


def pixel_to_point(
    bounds: ImageBounds,
    pixel: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Return the point of the plane under ``pixel``, given as ``(col, row)``.

    Rows grow downward while the imaginary part shrinks. Pixels outside
    ``bounds`` map to points outside the window.
    """

    width = lower_right.real - upper_left.real
    height = upper_left.imag - lower_right.imag
    col, row = pixel
    return complex(
        upper_left.real + col * width / bounds.width,
        upper_left.imag - row * height / bounds.height,
    )


def point_to_pixel(
    bounds: ImageBounds,
    point: complex,
    upper_left: complex,
    lower_right: complex,
) -> tuple[float, float]:
    """Inverse of :func:`pixel_to_point`; the result is fractional."""

    width = lower_right.real - upper_left.real
    height = upper_left.imag - lower_right.imag
    return (
        (point.real - upper_left.real) * bounds.width / width,
        (upper_left.imag - point.imag) * bounds.height / height,
    )
