"""Encoding of finished grayscale buffers into image files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import PIL.Image

from .errors import SinkError
from .plane import ImageBounds

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "png"


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def to_image(pixels: np.ndarray, bounds: ImageBounds) -> PIL.Image.Image:
    """Wrap a row-major gray buffer in a Pillow ``L`` image."""

    array = np.asarray(pixels, dtype=np.uint8)
    if array.size != bounds.size:
        raise SinkError(
            f"buffer holds {array.size} pixels, a {bounds.width}x{bounds.height} image needs {bounds.size}"
        )
    return PIL.Image.fromarray(np.ascontiguousarray(array.reshape(bounds.height, bounds.width)))


def write_image(
    path: Union[str, Path],
    pixels: np.ndarray,
    bounds: ImageBounds,
    image_format: Optional[str] = None,
) -> Path:
    """Write ``pixels`` to ``path`` as an 8-bit grayscale image.

    The format comes from ``image_format`` or the file extension, PNG when
    neither names one.
    """

    output_path = Path(path).expanduser()
    ext = (image_format or output_path.suffix.lstrip(".") or DEFAULT_FORMAT).lower().lstrip(".")
    image = to_image(pixels, bounds)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(ext))
    logger.info("wrote %dx%d %s image to %s", bounds.width, bounds.height, ext, output_path)
    return output_path
