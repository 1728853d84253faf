from __future__ import annotations

import numpy as np

from curvechart.curves import Path, Point
from curvechart.raster.canvas import RGBA, fill_rect, new_canvas
from curvechart.raster.draw_fill import fill_polygons
from curvechart.raster.draw_lines import stroke_polyline
from curvechart.raster.draw_markers import draw_circle
from curvechart.raster.draw_text import draw_text, text_size
from curvechart.surface import FillStyle, StrokeStyle, TextStyle


class RasterSurface:
    """Drawing surface backed by an ``(H, W, 4)`` uint8 RGBA array."""

    def __init__(self, width: int, height: int, background: RGBA = (0, 0, 0, 0)) -> None:
        self.rgba = new_canvas(width, height, color=background)

    @property
    def width(self) -> int:
        return int(self.rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self.rgba.shape[0])

    def measure_text(self, text: str, style: TextStyle) -> tuple[float, float]:
        w, h = text_size(text, font_family=style.font_family, font_size_px=style.size_px)
        return (float(w), float(h))

    def draw_rect(self, x0: float, y0: float, x1: float, y1: float, color: RGBA) -> None:
        fill_rect(self.rgba, x0, y0, x1, y1, color)

    def draw_line(self, start: Point, end: Point, style: StrokeStyle) -> None:
        pts = np.asarray([start, end], dtype=np.float64)
        stroke_polyline(self.rgba, pts, style.color, width=style.width, cap=style.cap)

    def draw_path(self, path: Path, style: StrokeStyle | FillStyle) -> None:
        polylines = path.flatten()
        if not polylines:
            return
        if isinstance(style, StrokeStyle):
            for poly in polylines:
                stroke_polyline(self.rgba, poly, style.color, width=style.width, cap=style.cap)
            return
        if style.gradient is not None:
            grad = style.gradient
            fill_polygons(self.rgba, polylines, gradient=(grad.stops, grad.start_y, grad.end_y))
        else:
            fill_polygons(self.rgba, polylines, color=style.color)

    def draw_circle(self, center: Point, radius: float, color: RGBA) -> None:
        draw_circle(self.rgba, center[0], center[1], radius, color)

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        draw_text(
            self.rgba,
            int(round(x)),
            int(round(y)),
            text,
            style.color,
            font_family=style.font_family,
            font_size_px=style.size_px,
        )
