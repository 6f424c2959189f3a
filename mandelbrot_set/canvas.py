"""Rasterize point sets onto a Cartesian chart with Pillow."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
import PIL.Image
import PIL.ImageColor
import PIL.ImageDraw
import PIL.ImageFont

Color = Union[str, tuple[int, int, int]]

_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
)


@dataclass(frozen=True)
class CanvasSpec:
    """Size, coordinate system and styling of a point chart."""

    size: tuple[int, int]
    x_range: tuple[float, float]
    y_range: tuple[float, float]
    background: Color = "white"
    foreground: Color = "black"
    marker_radius: int = 1
    caption: Optional[str] = "Mandelbrot Set"
    margin: int = 5
    label_area: int = 20
    caption_size: int = 30

    def __post_init__(self) -> None:
        width, height = self.size
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {self.size}")
        if not self.x_range[0] < self.x_range[1]:
            raise ValueError(f"empty x range {self.x_range}")
        if not self.y_range[0] < self.y_range[1]:
            raise ValueError(f"empty y range {self.y_range}")
        if self.marker_radius < 0:
            raise ValueError(f"marker_radius must be non-negative, got {self.marker_radius}")


def plot_area(spec: CanvasSpec) -> tuple[int, int, int, int]:
    """Pixel box ``(left, top, right, bottom)`` of the chart, right/bottom exclusive."""

    width, height = spec.size
    caption_band = spec.caption_size + spec.margin if spec.caption else 0
    left = spec.margin + spec.label_area
    top = spec.margin + caption_band
    right = width - spec.margin
    bottom = height - spec.margin - spec.label_area
    if right - left < 2 or bottom - top < 2:
        raise ValueError(f"canvas {spec.size} leaves no room for the chart")
    return left, top, right, bottom


def to_pixels(points: np.ndarray, spec: CanvasSpec) -> tuple[np.ndarray, np.ndarray]:
    """Map ``(re, im)`` rows into ``(cols, rows)`` pixel indices.

    Points outside the coordinate ranges are dropped. The imaginary axis
    points up, so larger ``im`` gives smaller row numbers.
    """

    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    left, top, right, bottom = plot_area(spec)
    x0, x1 = (np.float64(v) for v in spec.x_range)
    y0, y1 = (np.float64(v) for v in spec.y_range)

    re = points[:, 0]
    im = points[:, 1]
    inside = (re >= x0) & (re <= x1) & (im >= y0) & (im <= y1)
    re = re[inside]
    im = im[inside]

    cols = left + np.rint((re - x0) / (x1 - x0) * (right - left - 1)).astype(np.int64)
    rows = (bottom - 1) - np.rint((im - y0) / (y1 - y0) * (bottom - top - 1)).astype(np.int64)
    return cols, rows


def _disc_offsets(radius: int) -> list[tuple[int, int]]:
    return [
        (dy, dx)
        for dy in range(-radius, radius + 1)
        for dx in range(-radius, radius + 1)
        if dx * dx + dy * dy <= radius * radius
    ]


def new_mask(spec: CanvasSpec) -> np.ndarray:
    """Empty marker mask, one boolean per pixel, indexed ``[row, col]``."""

    width, height = spec.size
    return np.zeros((height, width), dtype=bool)


def mark_points(mask: np.ndarray, points: np.ndarray, spec: CanvasSpec) -> int:
    """Set the disc of every point in ``mask``; returns how many points were placed.

    Marking a point set in several calls gives the same mask as marking it
    in one.
    """

    height, width = mask.shape
    cols, rows = to_pixels(points, spec)
    for dy, dx in _disc_offsets(spec.marker_radius):
        r = rows + dy
        c = cols + dx
        valid = (r >= 0) & (r < height) & (c >= 0) & (c < width)
        mask[r[valid], c[valid]] = True
    return int(cols.size)


def _rgb(color: Color) -> tuple[int, int, int]:
    if isinstance(color, str):
        return PIL.ImageColor.getrgb(color)[:3]
    return tuple(int(channel) for channel in color[:3])


def _image_mode(spec: CanvasSpec) -> tuple[str, object, object]:
    background = _rgb(spec.background)
    foreground = _rgb(spec.foreground)
    if len(set(background)) == 1 and len(set(foreground)) == 1:
        return "L", background[0], foreground[0]
    return "RGB", background, foreground


def _load_font(size: int) -> PIL.ImageFont.ImageFont:
    for path in _FONT_CANDIDATES:
        font_path = Path(path)
        if font_path.exists():
            try:
                return PIL.ImageFont.truetype(str(font_path), size)
            except OSError:
                continue
    return PIL.ImageFont.load_default()


def _text_size(draw: PIL.ImageDraw.ImageDraw, text: str, font: PIL.ImageFont.ImageFont) -> tuple[int, int]:
    bbox = draw.textbbox((0, 0), text, font=font)
    return int(round(bbox[2] - bbox[0])), int(round(bbox[3] - bbox[1]))


def _draw_frame(image: PIL.Image.Image, spec: CanvasSpec, ink: object) -> None:
    """Draw the caption, both axes and their end labels."""

    draw = PIL.ImageDraw.Draw(image)
    left, top, right, bottom = plot_area(spec)
    width, _ = spec.size

    if spec.caption:
        caption_font = _load_font(spec.caption_size)
        text_width, _ = _text_size(draw, spec.caption, caption_font)
        draw.text(((width - text_width) / 2.0, spec.margin), spec.caption, font=caption_font, fill=ink)

    draw.line([(left - 1, top), (left - 1, bottom)], fill=ink)
    draw.line([(left - 1, bottom), (right - 1, bottom)], fill=ink)

    label_font = _load_font(max(8, int(round(spec.label_area * 0.6))))
    x0, x1 = spec.x_range
    y0, y1 = spec.y_range
    label_top = bottom + 2
    draw.text((left, label_top), f"{x0:g}", font=label_font, fill=ink)
    x1_label = f"{x1:g}"
    x1_width, _ = _text_size(draw, x1_label, label_font)
    draw.text((right - x1_width, label_top), x1_label, font=label_font, fill=ink)

    for value, row in ((y1, top), (y0, bottom)):
        label = f"{value:g}"
        label_width, label_height = _text_size(draw, label, label_font)
        draw.text((max(left - 2 - label_width, 0), row - label_height), label, font=label_font, fill=ink)


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def render_mask(mask: np.ndarray, spec: CanvasSpec) -> PIL.Image.Image:
    """Build the chart image from a marker mask filled by :func:`mark_points`."""

    mode, background, foreground = _image_mode(spec)
    image = PIL.Image.new(mode, spec.size, background)
    image.paste(foreground, (0, 0, spec.size[0], spec.size[1]), PIL.Image.fromarray(mask))
    _draw_frame(image, spec, foreground)
    return image


def render(points: np.ndarray, spec: CanvasSpec) -> PIL.Image.Image:
    """Build the chart image in memory."""

    mask = new_mask(spec)
    mark_points(mask, points, spec)
    return render_mask(mask, spec)


def save_image(image: PIL.Image.Image, path: Union[str, Path], image_format: Optional[str] = None) -> Path:
    """Write ``image`` to ``path``, replacing it only once the write has succeeded.

    ``image_format`` defaults to the file extension, or PNG without one.
    Pillow and filesystem errors are left to the caller.
    """

    output_path = Path(path).expanduser()
    ext = (image_format or output_path.suffix or "png").lower().lstrip(".")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    partial_path = output_path.with_name(output_path.name + ".partial")
    try:
        with open(partial_path, "wb") as handle:
            image.save(handle, format=_pil_format_name(ext))
        os.replace(partial_path, output_path)
    finally:
        if partial_path.exists():
            partial_path.unlink()
    return output_path


def draw_points(
    points: np.ndarray,
    spec: CanvasSpec,
    path: Union[str, Path],
    image_format: Optional[str] = None,
) -> Path:
    """Draw ``points`` as filled discs and write the chart to ``path``."""

    return save_image(render(points, spec), path, image_format)
