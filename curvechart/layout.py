from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from curvechart.errors import ChartDataError


@dataclass(frozen=True)
class LabelExtents:
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def largest(cls, sizes: Iterable[tuple[float, float]]) -> "LabelExtents":
        width = 0.0
        height = 0.0
        for w, h in sizes:
            width = max(width, float(w))
            height = max(height, float(h))
        return cls(width=width, height=height)


@dataclass(frozen=True)
class DrawingBounds:
    start_width: float
    end_width: float
    start_height: float
    end_height: float

    @property
    def width(self) -> float:
        return self.end_width - self.start_width

    @property
    def height(self) -> float:
        return self.end_height - self.start_height

    def contains(self, x: float, y: float, *, tolerance: float = 1e-6) -> bool:
        return (
            self.start_width - tolerance <= x <= self.end_width + tolerance
            and self.start_height - tolerance <= y <= self.end_height + tolerance
        )


def compute_drawing_bounds(
    canvas_width: float,
    canvas_height: float,
    *,
    x_labels: LabelExtents,
    y_labels: LabelExtents,
    x_tick_mark_size: float,
    y_tick_mark_size: float,
    x_label_padding: float,
    y_label_padding: float,
    point_radius: float,
) -> DrawingBounds:
    """Inset the canvas so tick labels, tick marks and markers stay inside it.

    The y-axis labels sit left of the plot and the x-axis labels below it; half
    of the widest x label and half of the tallest y label overhang the plot's
    right and top edges, and a point marker may overhang any edge by its
    radius. This is a fixed formula: very large labels on a small canvas can
    still clip.
    """
    r = float(point_radius)
    bounds = DrawingBounds(
        start_width=y_labels.width + max(y_tick_mark_size, r) + y_label_padding,
        end_width=canvas_width - max(x_labels.width / 2.0, r),
        start_height=max(y_labels.height / 2.0, r),
        end_height=canvas_height - (x_labels.height + max(x_tick_mark_size, r) + x_label_padding),
    )
    if bounds.width <= 0 or bounds.height <= 0:
        raise ChartDataError(
            f"canvas too small for drawable area: {canvas_width}x{canvas_height} leaves "
            f"{bounds.width:.1f}x{bounds.height:.1f}"
        )
    return bounds
