from __future__ import annotations

from typing import Sequence

import numpy as np
from PIL import Image, ImageDraw

from curvechart.raster.canvas import RGBA, composite


def polygon_coverage(width: int, height: int, polygons: Sequence[np.ndarray]) -> np.ndarray:
    """Rasterize the union of closed polygons into a float coverage mask."""
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    for poly in polygons:
        if poly.shape[0] < 3:
            continue
        draw.polygon([(float(x), float(y)) for x, y in poly.tolist()], fill=255)
    return np.asarray(image, dtype=np.float32) / 255.0


def gradient_rows(height: int, stops: Sequence[RGBA], start_y: float, end_y: float) -> np.ndarray:
    """Per-row RGBA colors, shape ``(height, 1, 4)``, for a vertical gradient."""
    colors = np.asarray(stops, dtype=np.float32)
    if colors.shape[0] == 1:
        return np.broadcast_to(colors.reshape(1, 1, 4), (height, 1, 4)).copy()
    rows = np.arange(height, dtype=np.float32)
    span = end_y - start_y
    t = np.zeros(height, dtype=np.float32) if span == 0 else np.clip((rows - start_y) / span, 0.0, 1.0)
    positions = np.linspace(0.0, 1.0, colors.shape[0], dtype=np.float32)
    out = np.empty((height, 1, 4), dtype=np.float32)
    for channel in range(4):
        out[:, 0, channel] = np.interp(t, positions, colors[:, channel])
    return out


def fill_polygons(
    dst: np.ndarray,
    polygons: Sequence[np.ndarray],
    *,
    color: RGBA | None = None,
    gradient: tuple[Sequence[RGBA], float, float] | None = None,
) -> None:
    height, width = dst.shape[:2]
    coverage = polygon_coverage(width, height, polygons)
    if gradient is not None:
        stops, start_y, end_y = gradient
        composite(dst, 0, 0, coverage, gradient_rows(height, stops, start_y, end_y))
        return
    if color is None:
        raise ValueError("fill needs a color or a gradient")
    composite(dst, 0, 0, coverage, color)
