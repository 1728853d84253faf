from __future__ import annotations


class ChartDataError(ValueError):
    """Input data or canvas cannot produce a chart."""


class AxisConfigError(ChartDataError):
    """Axis step or initial value would produce degenerate geometry."""
