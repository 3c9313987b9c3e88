"""TensorFlow implementation of the escape-time iteration."""

from __future__ import annotations

import numpy as np
import tensorflow as tf

from .escape import ESCAPE_RADIUS_SQ, NO_ESCAPE


@tf.function
def _escape_step(
    i: tf.Tensor, zs: tf.Tensor, cs: tf.Tensor, counts: tf.Tensor, active: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance the orbits that are still running by one iteration."""

    zs = tf.where(active, zs * zs + cs, zs)
    re = tf.math.real(zs)
    im = tf.math.imag(zs)
    escaped = tf.logical_and(active, re * re + im * im > tf.cast(ESCAPE_RADIUS_SQ, re.dtype))
    counts = tf.where(escaped, i, counts)
    return zs, counts, tf.logical_and(active, tf.logical_not(escaped))


@tf.function
def _escape_run(cs: tf.Tensor, limit: tf.Tensor) -> tf.Tensor:
    """Iterate until every orbit escaped or ``limit`` steps were taken."""

    limit = tf.cast(limit, tf.int64)
    i = tf.constant(0, dtype=tf.int64)
    zs = tf.zeros_like(cs)
    counts = tf.fill(tf.shape(cs), tf.constant(NO_ESCAPE, dtype=tf.int64))
    active = tf.ones(tf.shape(cs), tf.bool)

    def cond(i: tf.Tensor, zs: tf.Tensor, counts: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, limit), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, counts: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, counts, active = _escape_step(i, zs, cs, counts, active)
        return i + 1, zs, counts, active

    _, _, counts, _ = tf.while_loop(cond, body, (i, zs, counts, active))
    return counts


def escape_counts_tf(c_re: np.ndarray, c_im: np.ndarray, limit: int) -> np.ndarray:
    """TensorFlow counterpart of :func:`mandelbrot.escape.escape_counts`."""

    with tf.device("/CPU:0"):
        cs = tf.complex(
            tf.convert_to_tensor(c_re, dtype=tf.float64),
            tf.convert_to_tensor(c_im, dtype=tf.float64),
        )
        counts = _escape_run(cs, tf.constant(limit, dtype=tf.int64))
    return counts.numpy()
