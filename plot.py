import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import numpy as np

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from mandelbrot_set import (
    CanvasSpec,
    Region,
    collect_stable,
    grid_shape,
    mark_points,
    new_mask,
    render_mask,
    sample_bands,
    save_image,
)

from argparse import ArgumentParser

# Evaluation stays on the CPU; GPU placement is not supported.
DEVICE = '/CPU:0'


@dataclass(frozen=True)
class PlotConfig:
    x_min: float = -2.0
    x_max: float = 0.5
    y_min: float = -1.5
    y_max: float = 1.5
    density: float = 8000
    iterations: int = 20
    width: int = 20000
    height: int = 20000
    output: Path = Path("mandelbrot.png")
    image_format: str | None = None
    marker_radius: int = 1
    caption: str | None = "Mandelbrot Set"
    band_rows: int = 256

    @property
    def region(self) -> Region:
        return Region(self.x_min, self.x_max, self.y_min, self.y_max)


def build_parser():
    defaults = PlotConfig()
    parser = ArgumentParser(description='Plot the points of the Mandelbrot set that stay bounded.')

    parser.add_argument('--x-min', type=float,
                        dest='x_min', help='lower bound of the real axis',
                        metavar='X_MIN', default=defaults.x_min)

    parser.add_argument('--x-max', type=float,
                        dest='x_max', help='upper bound of the real axis',
                        metavar='X_MAX', default=defaults.x_max)

    parser.add_argument('--y-min', type=float,
                        dest='y_min', help='lower bound of the imaginary axis',
                        metavar='Y_MIN', default=defaults.y_min)

    parser.add_argument('--y-max', type=float,
                        dest='y_max', help='upper bound of the imaginary axis',
                        metavar='Y_MAX', default=defaults.y_max)

    parser.add_argument('--density', type=float,
                        dest='density', help='samples per unit length along each axis',
                        metavar='DENSITY', default=defaults.density)

    parser.add_argument('--iterations', type=int,
                        dest='iterations', help='number of times to apply z = z*z + c to every sample',
                        metavar='ITERATIONS', default=defaults.iterations)

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the output image in pixels',
                        metavar='WIDTH', default=defaults.width)

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the output image in pixels',
                        metavar='HEIGHT', default=defaults.height)

    parser.add_argument('--output', type=str,
                        dest='output', help='path of the image file to write',
                        metavar='OUTPUT', default=str(defaults.output))

    parser.add_argument('--format', type=str,
                        dest='format', help='image format. Can be any extension supported by Pillow. Default: taken from --output.',
                        metavar='FORMAT', default=None)

    parser.add_argument('--marker-radius', type=int,
                        dest='marker_radius', help='radius in pixels of the disc drawn for each stable point',
                        metavar='RADIUS', default=defaults.marker_radius)

    parser.add_argument('--caption', type=str,
                        dest='caption', help='caption printed above the chart',
                        metavar='CAPTION', default=defaults.caption)

    parser.add_argument('--no-caption', dest='caption', action='store_const', const=None,
                        help='leave out the caption band')

    parser.add_argument('--band-rows', type=int,
                        dest='band_rows', help='number of grid rows classified at a time',
                        metavar='BAND_ROWS', default=defaults.band_rows)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics and timings.')

    return parser


def config_from_args(opt, parser: ArgumentParser) -> PlotConfig:
    if not opt.x_min < opt.x_max:
        parser.error("--x-min must be smaller than --x-max.")
    if not opt.y_min < opt.y_max:
        parser.error("--y-min must be smaller than --y-max.")
    if opt.density < 0:
        parser.error("--density must not be negative.")
    if opt.iterations < 1:
        parser.error("--iterations must be at least 1.")
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.marker_radius < 0:
        parser.error("--marker-radius must not be negative.")
    if opt.band_rows < 1:
        parser.error("--band-rows must be at least 1.")

    image_format = (opt.format or "").lower().lstrip(".") or None

    return PlotConfig(
        x_min=opt.x_min,
        x_max=opt.x_max,
        y_min=opt.y_min,
        y_max=opt.y_max,
        density=opt.density,
        iterations=opt.iterations,
        width=opt.width,
        height=opt.height,
        output=Path(opt.output).expanduser(),
        image_format=image_format,
        marker_radius=opt.marker_radius,
        caption=opt.caption or None,
        band_rows=opt.band_rows,
    )


def chart_spec(config: PlotConfig) -> CanvasSpec:
    region = config.region
    return CanvasSpec(
        size=(config.width, config.height),
        x_range=region.x_range,
        y_range=region.y_range,
        marker_radius=config.marker_radius,
        caption=config.caption,
    )


def mark_members(config: PlotConfig, spec: CanvasSpec) -> tuple[np.ndarray, int]:
    """Classify the region band by band, marking stable points as they are found.

    Returns the marker mask and the number of stable points.
    """

    region = config.region
    height, width = grid_shape(region, config.density)
    log("Sampling %d x %d points over %s" % (width, height, region))

    mask = new_mask(spec)
    count = 0
    for row_offset, band in sample_bands(region, config.density, config.band_rows):
        log("rows {0} out of {1}".format(row_offset + band.shape[0], height), end='\r')
        count += mark_points(mask, collect_stable(band, config.iterations, device=DEVICE), spec)
    log("")
    return mask, count


def run(config: PlotConfig) -> Path:
    """Classify the region and write the chart; returns the image path."""

    spec = chart_spec(config)

    started = time.perf_counter()
    mask, count = mark_members(config, spec)
    log("%d stable points found in %.2fs" % (count, time.perf_counter() - started))

    started = time.perf_counter()
    path = save_image(render_mask(mask, spec), config.output, config.image_format)
    log("Image written in %.2fs" % (time.perf_counter() - started))
    return path


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = config_from_args(opt, parser)
    log("TensorFlow version: %s" % tf.__version__)

    path = run(config)
    print("Plot saved to {0}".format(path))


if __name__ == '__main__':
    main()
