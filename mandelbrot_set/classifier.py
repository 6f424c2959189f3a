"""Escape-iteration test for points of the complex plane."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import tensorflow as tf

HORIZON = 2.0


def _check_iterations(iterations: int) -> None:
    if iterations < 1:
        raise ValueError(f"iterations must be positive, got {iterations}")


def is_stable(point: complex, iterations: int) -> bool:
    """Return whether the orbit of ``point`` stays within the horizon.

    The recurrence ``z = z*z + point`` starting at zero always runs for the
    full ``iterations`` steps; the final magnitude is compared inclusively
    against :data:`HORIZON`.
    """

    _check_iterations(iterations)
    c = complex(point)
    z = 0j
    for _ in range(iterations):
        z = z * z + c
    # hypot gives inf for overflowed orbits where abs() would raise
    return math.hypot(z.real, z.imag) <= HORIZON


@tf.function
def _stability_step(zs: tf.Tensor, cs: tf.Tensor) -> tf.Tensor:
    """Advance every orbit by one step of the Mandelbrot recurrence."""

    return zs * zs + cs


@tf.function
def _stability_run(cs: tf.Tensor, iterations: tf.Tensor) -> tf.Tensor:
    """Iterate the recurrence a fixed number of times with a TensorFlow while loop."""

    iterations = tf.cast(iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)

    def cond(i: tf.Tensor, zs: tf.Tensor) -> tf.Tensor:
        return tf.less(i, iterations)

    def body(i: tf.Tensor, zs: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
        return i + 1, _stability_step(zs, cs)

    _, zs = tf.while_loop(cond, body, (i, zs))
    az = tf.abs(zs)
    return tf.less_equal(az, tf.constant(HORIZON, dtype=az.dtype))


def stability_mask(grid: np.ndarray, iterations: int, *, device: Optional[str] = None) -> np.ndarray:
    """Classify every element of ``grid`` and return a boolean array of the same shape."""

    _check_iterations(iterations)
    grid = np.asarray(grid, dtype=np.complex128)
    if grid.size == 0:
        return np.zeros(grid.shape, dtype=bool)

    with tf.device(device if device is not None else "/CPU:0"):
        cs = tf.convert_to_tensor(grid, dtype=tf.complex128)
        mask = _stability_run(cs, tf.constant(iterations, dtype=tf.int32))
    return mask.numpy()


def collect_stable(grid: np.ndarray, iterations: int, *, device: Optional[str] = None) -> np.ndarray:
    """Return the ``(re, im)`` coordinates of the stable elements of ``grid``.

    The result is a ``(N, 2)`` float array ordered like a row-major walk of the
    grid.
    """

    grid = np.asarray(grid, dtype=np.complex128)
    mask = stability_mask(grid, iterations, device=device)
    stable = grid[mask]
    return np.column_stack((stable.real, stable.imag)).astype(np.float64, copy=False)
