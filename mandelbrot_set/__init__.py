"""Public API for sampling, classifying and plotting Mandelbrot set members."""

from .sampler import Region, grid_shape, sample, sample_bands
from .classifier import HORIZON, collect_stable, is_stable, stability_mask
from .canvas import (
    CanvasSpec,
    draw_points,
    mark_points,
    new_mask,
    plot_area,
    render,
    render_mask,
    save_image,
    to_pixels,
)
from .orbit import Orbit, OrbitParameters, julia_orbit, mandelbrot_orbit

__all__ = [
    "CanvasSpec",
    "HORIZON",
    "Orbit",
    "OrbitParameters",
    "Region",
    "collect_stable",
    "draw_points",
    "grid_shape",
    "is_stable",
    "julia_orbit",
    "mandelbrot_orbit",
    "mark_points",
    "new_mask",
    "plot_area",
    "render",
    "render_mask",
    "sample",
    "sample_bands",
    "save_image",
    "stability_mask",
    "to_pixels",
]
