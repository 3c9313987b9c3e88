"""Exception hierarchy for the Mandelbrot renderer."""

from __future__ import annotations


class MandelbrotError(Exception):
    """Base class for every error raised by the renderer."""


class InvalidBoundsError(MandelbrotError, ValueError):
    """Image dimensions that are not positive integers."""


class InvalidWindowError(MandelbrotError, ValueError):
    """A plane window that is degenerate, inverted or not finite."""


class ConfigurationError(MandelbrotError, ValueError):
    """Render settings that cannot be honoured."""


class BandSizeError(MandelbrotError, AssertionError):
    """A band buffer whose length does not match its bounds."""


class PartitionError(MandelbrotError, AssertionError):
    """Bands that overlap, leave gaps, or run past the image."""


class RenderError(MandelbrotError, RuntimeError):
    """A band failed while the image was being rendered."""


class SinkError(MandelbrotError, ValueError):
    """A buffer that cannot be encoded as an image."""
