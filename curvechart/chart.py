from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Mapping

import numpy as np
from PIL import Image

from curvechart.adapters import normalize_points
from curvechart.config import DEFAULT_CONFIG, ChartConfig, validate_chart_config
from curvechart.errors import ChartDataError
from curvechart.raster import RasterSurface
from curvechart.renderer import ChartGeometry, ChartRenderer
from curvechart.scales import AxisSpec
from curvechart.series import ChartSeries
from curvechart.surface import DrawingSurface


LOGGER = logging.getLogger(__name__)


def _axis_spec(value: AxisSpec | Mapping[str, Any] | None) -> AxisSpec | None:
    if value is None or isinstance(value, AxisSpec):
        return value
    unknown = set(value) - {"initial_value", "step"}
    if unknown:
        raise ValueError(f"Unknown axis field(s): {sorted(unknown)}")
    return AxisSpec(**dict(value))


@dataclass
class Chart:
    width: int
    height: int
    config: ChartConfig = DEFAULT_CONFIG
    _series: ChartSeries | None = None
    _x_axis: AxisSpec | None = None
    _y_axis: AxisSpec | None = None
    _last_geometry: ChartGeometry | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("chart width/height must be > 0")

    def plot(
        self,
        points: Any = None,
        *,
        x: Any = None,
        y: Any = None,
        data: Any = None,
        x_axis: AxisSpec | Mapping[str, Any] | None = None,
        y_axis: AxisSpec | Mapping[str, Any] | None = None,
        label: str | None = None,
    ) -> "Chart":
        """Set the chart's point sequence; replaces any earlier series."""
        self._series = normalize_points(points, x=x, y=y, data=data, source_name=label)
        self._x_axis = _axis_spec(x_axis)
        self._y_axis = _axis_spec(y_axis)
        return self

    def set_axes(
        self,
        *,
        x: AxisSpec | Mapping[str, Any] | None = None,
        y: AxisSpec | Mapping[str, Any] | None = None,
    ) -> "Chart":
        self._x_axis = _axis_spec(x)
        self._y_axis = _axis_spec(y)
        return self

    def configure(self, overrides: Mapping[str, Any]) -> "Chart":
        self.config = validate_chart_config(overrides, base=self.config)
        return self

    @property
    def series(self) -> ChartSeries | None:
        return self._series

    def render(self, surface: DrawingSurface) -> ChartGeometry:
        if self._series is None:
            raise ChartDataError("chart has no series; call plot() first")
        geometry = ChartRenderer(self.config).render(surface, self._series, x_axis=self._x_axis, y_axis=self._y_axis)
        self._last_geometry = geometry
        return geometry

    def to_rgba(self) -> np.ndarray:
        surface = RasterSurface(self.width, self.height, background=self.config.background)
        self.render(surface)
        return surface.rgba

    def save_png(self, path: str | Path) -> Path:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(self.to_rgba()).save(out_path, format="PNG")
        LOGGER.info("wrote %dx%d chart to %s", self.width, self.height, out_path)
        return out_path

    def last_geometry(self) -> ChartGeometry | None:
        return self._last_geometry
