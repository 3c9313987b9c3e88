"""Escape-time classification of points under ``z -> z**2 + c``."""

from __future__ import annotations

from typing import Optional

import numpy as np

# Squared escape radius; orbits leaving |z| = 2 diverge.
ESCAPE_RADIUS_SQ = 4.0
NO_ESCAPE = -1


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Return the iteration at which the orbit of ``c`` escapes, or ``None``.

    ``None`` means no escape was seen within ``limit`` iterations and the
    point is presumed to belong to the set.
    """

    z = 0j
    for i in range(limit):
        z = z * z + c
        if z.real * z.real + z.imag * z.imag > ESCAPE_RADIUS_SQ:
            return i
    return None


def escape_counts(c_re: np.ndarray, c_im: np.ndarray, limit: int) -> np.ndarray:
    """Vectorized :func:`escape_time` over arrays of points.

    Returns an ``int64`` array shaped like the broadcast inputs holding the
    escape iteration, or ``NO_ESCAPE`` for points that never escaped.
    """

    c_re, c_im = np.broadcast_arrays(
        np.asarray(c_re, dtype=np.float64), np.asarray(c_im, dtype=np.float64)
    )
    shape = c_re.shape
    counts = np.full(c_re.size, NO_ESCAPE, dtype=np.int64)

    # Only the orbits still running are carried from one step to the next.
    alive = np.arange(c_re.size)
    cr = c_re.ravel().copy()
    ci = c_im.ravel().copy()
    zr = np.zeros_like(cr)
    zi = np.zeros_like(ci)

    for i in range(limit):
        if not alive.size:
            break
        zr, zi = zr * zr - zi * zi + cr, zr * zi + zi * zr + ci
        escaped = zr * zr + zi * zi > ESCAPE_RADIUS_SQ
        if escaped.any():
            counts[alive[escaped]] = i
            keep = ~escaped
            alive, zr, zi, cr, ci = alive[keep], zr[keep], zi[keep], cr[keep], ci[keep]

    return counts.reshape(shape)
