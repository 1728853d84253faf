from __future__ import annotations

from typing import Any, Mapping

from curvechart.chart import Chart
from curvechart.config import DEFAULT_CONFIG, ChartConfig, validate_chart_config


DEFAULT_ASPECT_RATIO = 16.0 / 9.0
DEFAULT_WIDTH = 640


def chart(
    width: int | None = None,
    height: int | None = None,
    *,
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
    config: ChartConfig | Mapping[str, Any] | None = None,
) -> Chart:
    if aspect_ratio <= 0:
        raise ValueError("aspect_ratio must be > 0")
    if width is None and height is None:
        width = DEFAULT_WIDTH
        height = max(1, int(round(width / aspect_ratio)))
    elif width is None and height is not None:
        if height <= 0:
            raise ValueError("height must be > 0")
        width = max(1, int(round(height * aspect_ratio)))
    elif width is not None and height is None:
        if width <= 0:
            raise ValueError("width must be > 0")
        height = max(1, int(round(width / aspect_ratio)))
    assert width is not None and height is not None

    if config is None:
        resolved = DEFAULT_CONFIG
    elif isinstance(config, ChartConfig):
        resolved = config
    else:
        resolved = validate_chart_config(config)
    return Chart(width=width, height=height, config=resolved)
