from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

import numpy as np

from curvechart.config import DEFAULT_CONFIG, AxisStyle, ChartConfig
from curvechart.curves import CurvePaths, Point, build_curve
from curvechart.layout import DrawingBounds, LabelExtents, compute_drawing_bounds
from curvechart.scales import AxisScale, AxisSpec, format_ticks, resolve_axis
from curvechart.series import GAP, ChartSeries, Gap
from curvechart.surface import DrawingSurface, FillStyle, LinearGradient, StrokeStyle, TextStyle


LOGGER = logging.getLogger(__name__)

MeasureText = Callable[[str, TextStyle], tuple[float, float]]


@dataclass(frozen=True)
class Tick:
    index: int
    value: float
    label: str
    pixel: float
    label_width: float
    label_height: float


@dataclass(frozen=True)
class AxisGeometry:
    scale: AxisScale
    ticks: tuple[Tick, ...]
    label_extents: LabelExtents
    text_style: TextStyle

    @property
    def labels(self) -> list[str]:
        return [tick.label for tick in self.ticks]

    @property
    def pixels(self) -> list[float]:
        return [tick.pixel for tick in self.ticks]


@dataclass(frozen=True)
class ChartGeometry:
    width: int
    height: int
    bounds: DrawingBounds
    x_axis: AxisGeometry
    y_axis: AxisGeometry
    points: tuple[Point | Gap, ...]
    curve: CurvePaths
    out_of_bounds: tuple[int, ...] = ()

    def markers(self) -> list[Point]:
        return [p for p in self.points if p is not GAP]


def text_style_for(axis: AxisStyle, config: ChartConfig) -> TextStyle:
    return TextStyle(color=axis.text_color, size_px=axis.text_size_px, font_family=config.font_family)


def compute_geometry(
    series: ChartSeries,
    *,
    width: int,
    height: int,
    measure_text: MeasureText,
    config: ChartConfig = DEFAULT_CONFIG,
    x_axis: AxisSpec | None = None,
    y_axis: AxisSpec | None = None,
) -> ChartGeometry:
    """Resolve axes, insets, tick and data pixel positions and curve paths.

    Pure function of its inputs: nothing is drawn and nothing is cached.
    Categorical x data always uses one tick per point (initial 0, step 1).
    """
    if series.is_categorical:
        if x_axis is not None and x_axis != AxisSpec():
            LOGGER.debug("ignoring x axis spec %s for categorical data", x_axis)
        x_axis = AxisSpec(initial_value=0.0, step=1.0)
    x_scale = resolve_axis(series.x, x_axis, categorical=series.is_categorical)
    y_scale = resolve_axis(series.present_y(), y_axis)

    x_text = text_style_for(config.x_axis, config)
    y_text = text_style_for(config.y_axis, config)
    if series.categories is not None:
        x_labels = list(series.categories)
    else:
        x_labels = format_ticks(x_scale.tick_values(), step=x_scale.step, number_format=config.x_axis.number_format)
    y_labels = format_ticks(y_scale.tick_values(), step=y_scale.step, number_format=config.y_axis.number_format)
    x_sizes = [measure_text(label, x_text) for label in x_labels]
    y_sizes = [measure_text(label, y_text) for label in y_labels]
    x_extents = LabelExtents.largest(x_sizes)
    y_extents = LabelExtents.largest(y_sizes)

    bounds = compute_drawing_bounds(
        width,
        height,
        x_labels=x_extents,
        y_labels=y_extents,
        x_tick_mark_size=config.x_axis.tick_mark_size,
        y_tick_mark_size=config.y_axis.tick_mark_size,
        x_label_padding=config.x_axis.text_padding,
        y_label_padding=config.y_axis.text_padding,
        point_radius=config.point_radius,
    )

    x_pixels = x_scale.tick_pixels(bounds.start_width, bounds.end_width)
    y_pixels = y_scale.tick_pixels(bounds.start_height, bounds.end_height, inverted=True)
    x_geometry = AxisGeometry(
        scale=x_scale,
        ticks=_ticks(x_scale, x_labels, x_pixels, x_sizes),
        label_extents=x_extents,
        text_style=x_text,
    )
    y_geometry = AxisGeometry(
        scale=y_scale,
        ticks=_ticks(y_scale, y_labels, y_pixels, y_sizes),
        label_extents=y_extents,
        text_style=y_text,
    )

    px = x_scale.values_to_pixels(series.x, bounds.start_width, bounds.end_width)
    py = y_scale.values_to_pixels(np.where(series.mask, series.y, 0.0), bounds.start_height, bounds.end_height, inverted=True)
    points: list[Point | Gap] = []
    outside: list[int] = []
    for i in range(len(series)):
        if not bool(series.mask[i]):
            points.append(GAP)
            continue
        point = (float(px[i]), float(py[i]))
        if not bounds.contains(*point):
            outside.append(i)
        points.append(point)
    if outside:
        LOGGER.warning("%d point(s) fall outside the drawable area (indices %s)", len(outside), outside[:10])

    curve = build_curve(points, baseline_y=bounds.end_height)
    LOGGER.debug(
        "geometry: bounds=%s x_ticks=%d y_ticks=%d segments=%d",
        bounds,
        x_scale.milestone_count,
        y_scale.milestone_count,
        len(curve.segments),
    )
    return ChartGeometry(
        width=int(width),
        height=int(height),
        bounds=bounds,
        x_axis=x_geometry,
        y_axis=y_geometry,
        points=tuple(points),
        curve=curve,
        out_of_bounds=tuple(outside),
    )


def _ticks(
    scale: AxisScale,
    labels: list[str],
    pixels: np.ndarray,
    sizes: list[tuple[float, float]],
) -> tuple[Tick, ...]:
    return tuple(
        Tick(
            index=i,
            value=scale.tick_value(i),
            label=labels[i],
            pixel=float(pixels[i]),
            label_width=float(sizes[i][0]),
            label_height=float(sizes[i][1]),
        )
        for i in range(scale.milestone_count)
    )


class ChartRenderer:
    """Draws a series onto a ``DrawingSurface`` in one synchronous pass.

    Order: background, gridlines, axis lines, tick marks, tick labels, area
    fill, line stroke, point markers. Every call carries its own style.
    """

    def __init__(self, config: ChartConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def render(
        self,
        surface: DrawingSurface,
        series: ChartSeries,
        *,
        x_axis: AxisSpec | None = None,
        y_axis: AxisSpec | None = None,
    ) -> ChartGeometry:
        geometry = compute_geometry(
            series,
            width=surface.width,
            height=surface.height,
            measure_text=surface.measure_text,
            config=self.config,
            x_axis=x_axis,
            y_axis=y_axis,
        )
        self.draw(surface, geometry)
        return geometry

    def draw(self, surface: DrawingSurface, geometry: ChartGeometry) -> None:
        cfg = self.config
        surface.draw_rect(0, 0, geometry.width, geometry.height, cfg.background)
        self._draw_grid(surface, geometry)
        self._draw_axes(surface, geometry)
        self._draw_data(surface, geometry)

    def _draw_grid(self, surface: DrawingSurface, geometry: ChartGeometry) -> None:
        b = geometry.bounds
        x_style = self.config.x_axis
        if x_style.show_grid and x_style.grid_width > 0:
            stroke = StrokeStyle(color=x_style.grid_color, width=x_style.grid_width)
            for tick in geometry.x_axis.ticks:
                surface.draw_line((tick.pixel, b.start_height), (tick.pixel, b.end_height), stroke)
        y_style = self.config.y_axis
        if y_style.show_grid and y_style.grid_width > 0:
            stroke = StrokeStyle(color=y_style.grid_color, width=y_style.grid_width)
            for tick in geometry.y_axis.ticks:
                surface.draw_line((b.start_width, tick.pixel), (b.end_width, tick.pixel), stroke)

    def _draw_axes(self, surface: DrawingSurface, geometry: ChartGeometry) -> None:
        b = geometry.bounds
        r = self.config.point_radius
        x_style = self.config.x_axis
        y_style = self.config.y_axis

        if x_style.axis_line_width > 0:
            surface.draw_line(
                (b.start_width, b.end_height),
                (b.end_width, b.end_height),
                StrokeStyle(color=x_style.axis_line_color, width=x_style.axis_line_width),
            )
        if y_style.axis_line_width > 0:
            surface.draw_line(
                (b.start_width, b.start_height),
                (b.start_width, b.end_height),
                StrokeStyle(color=y_style.axis_line_color, width=y_style.axis_line_width),
            )

        if x_style.tick_mark_size > 0 and x_style.tick_mark_width > 0:
            mark = StrokeStyle(color=x_style.tick_mark_color, width=x_style.tick_mark_width)
            for tick in geometry.x_axis.ticks:
                surface.draw_line((tick.pixel, b.end_height), (tick.pixel, b.end_height + x_style.tick_mark_size), mark)
        if y_style.tick_mark_size > 0 and y_style.tick_mark_width > 0:
            mark = StrokeStyle(color=y_style.tick_mark_color, width=y_style.tick_mark_width)
            for tick in geometry.y_axis.ticks:
                surface.draw_line((b.start_width - y_style.tick_mark_size, tick.pixel), (b.start_width, tick.pixel), mark)

        # Labels sit past whichever is larger, the tick mark or a marker overhanging the axis.
        x_label_top = b.end_height + max(x_style.tick_mark_size, r) + x_style.text_padding
        for tick in geometry.x_axis.ticks:
            surface.draw_text(tick.label, tick.pixel - tick.label_width / 2.0, x_label_top, geometry.x_axis.text_style)
        y_label_right = b.start_width - max(y_style.tick_mark_size, r) - y_style.text_padding
        for tick in geometry.y_axis.ticks:
            surface.draw_text(
                tick.label,
                y_label_right - tick.label_width,
                tick.pixel - tick.label_height / 2.0,
                geometry.y_axis.text_style,
            )

    def _draw_data(self, surface: DrawingSurface, geometry: ChartGeometry) -> None:
        cfg = self.config
        curve = geometry.curve
        if curve.fill:
            gradient = LinearGradient(stops=cfg.area_gradient, start_y=0.0, end_y=curve.baseline_y)
            surface.draw_path(curve.fill, FillStyle(gradient=gradient))
        if curve.stroke and cfg.line_width > 0:
            surface.draw_path(curve.stroke, StrokeStyle(color=cfg.line_color, width=cfg.line_width, cap="round"))
        if cfg.point_radius > 0:
            for point in geometry.markers():
                surface.draw_circle(point, cfg.point_radius, cfg.point_color)
