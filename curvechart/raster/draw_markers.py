from __future__ import annotations

import numpy as np

from curvechart.raster.canvas import RGBA, composite


def draw_circle(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    if radius <= 0:
        return
    x0 = int(np.floor(cx - radius - 1))
    y0 = int(np.floor(cy - radius - 1))
    x1 = int(np.ceil(cx + radius + 1))
    y1 = int(np.ceil(cy + radius + 1))
    yy, xx = np.mgrid[y0 : y1 + 1, x0 : x1 + 1]
    dist = np.hypot(xx - cx, yy - cy)
    # Half-pixel ramp at the rim for a smooth edge.
    coverage = np.clip(radius + 0.5 - dist, 0.0, 1.0)
    composite(dst, x0, y0, coverage, color)
