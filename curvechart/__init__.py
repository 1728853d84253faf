from curvechart.adapters import normalize_points
from curvechart.api import chart
from curvechart.chart import Chart
from curvechart.config import DEFAULT_CONFIG, AxisStyle, ChartConfig, load_chart_config, validate_chart_config
from curvechart.curves import BezierSegment, CurvePaths, Path, bezier_segment, build_curve
from curvechart.errors import AxisConfigError, ChartDataError
from curvechart.layout import DrawingBounds, LabelExtents, compute_drawing_bounds
from curvechart.raster import RasterSurface
from curvechart.renderer import ChartGeometry, ChartRenderer, compute_geometry
from curvechart.scales import AxisScale, AxisSpec, NumberFormat, milestone_count, tick_pixel, tick_value
from curvechart.series import GAP, ChartSeries, DataPoint, Gap
from curvechart.surface import DrawingSurface, RecordingSurface

__all__ = [
    "DEFAULT_CONFIG",
    "GAP",
    "AxisConfigError",
    "AxisScale",
    "AxisSpec",
    "AxisStyle",
    "BezierSegment",
    "Chart",
    "ChartConfig",
    "ChartDataError",
    "ChartGeometry",
    "ChartRenderer",
    "ChartSeries",
    "CurvePaths",
    "DataPoint",
    "DrawingBounds",
    "DrawingSurface",
    "Gap",
    "LabelExtents",
    "NumberFormat",
    "Path",
    "RasterSurface",
    "RecordingSurface",
    "bezier_segment",
    "build_curve",
    "chart",
    "compute_drawing_bounds",
    "compute_geometry",
    "load_chart_config",
    "milestone_count",
    "normalize_points",
    "tick_pixel",
    "tick_value",
    "validate_chart_config",
]
