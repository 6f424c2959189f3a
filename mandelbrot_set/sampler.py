"""Regular sampling of a rectangular region of the complex plane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np


@dataclass(frozen=True)
class Region:
    """Rectangular window of the complex plane, bounds inclusive."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self) -> None:
        if not self.x_min < self.x_max:
            raise ValueError(f"x_min ({self.x_min}) must be smaller than x_max ({self.x_max})")
        if not self.y_min < self.y_max:
            raise ValueError(f"y_min ({self.y_min}) must be smaller than y_max ({self.y_max})")

    @property
    def x_range(self) -> tuple[float, float]:
        return self.x_min, self.x_max

    @property
    def y_range(self) -> tuple[float, float]:
        return self.y_min, self.y_max


def grid_shape(region: Region, density: float) -> tuple[int, int]:
    """Return ``(height_samples, width_samples)`` for ``region`` at ``density``."""

    if density < 0:
        raise ValueError(f"density must be non-negative, got {density}")
    x_extent = np.float64(region.x_max) - np.float64(region.x_min)
    y_extent = np.float64(region.y_max) - np.float64(region.y_min)
    width = int(round(float(x_extent * np.float64(density))))
    height = int(round(float(y_extent * np.float64(density))))
    return height, width


def _axes(region: Region, density: float) -> tuple[np.ndarray, np.ndarray]:
    height, width = grid_shape(region, density)
    re = np.linspace(region.x_min, region.x_max, width, dtype=np.float64)
    im = np.linspace(region.y_min, region.y_max, height, dtype=np.float64)
    return re, im


def _assemble(re: np.ndarray, im: np.ndarray) -> np.ndarray:
    grid = np.empty((im.size, re.size), dtype=np.complex128)
    grid.real = re[np.newaxis, :]
    grid.imag = im[:, np.newaxis]
    return grid


def sample(region: Region, density: float) -> np.ndarray:
    """Build the complex grid covering ``region``.

    Entry ``(i, j)`` is ``complex(re[j], im[i])`` where ``re`` and ``im`` are
    evenly spaced over the region bounds, both endpoints included. Rows run
    by increasing imaginary part. An axis with no samples gives an empty grid.
    """

    re, im = _axes(region, density)
    return _assemble(re, im)


def sample_bands(region: Region, density: float, band_rows: int) -> Iterator[tuple[int, np.ndarray]]:
    """Yield the grid of :func:`sample` as ``(row_offset, band)`` pairs.

    Each band holds at most ``band_rows`` consecutive rows; stacking the bands
    in order reproduces the full grid.
    """

    if band_rows < 1:
        raise ValueError(f"band_rows must be positive, got {band_rows}")
    re, im = _axes(region, density)
    for row_start in range(0, im.size, band_rows):
        yield row_start, _assemble(re, im[row_start:row_start + band_rows])
