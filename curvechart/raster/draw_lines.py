from __future__ import annotations

import numpy as np

from curvechart.raster.canvas import RGBA, composite


def stroke_polyline(dst: np.ndarray, points: np.ndarray, color: RGBA, width: float = 1.0, cap: str = "butt") -> None:
    """Stroke a float ``(n, 2)`` polyline with a square or round brush."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] == 0:
        return
    offsets = _brush_offsets(width, round_brush=(cap == "round"))
    pad = max(abs(dx) for dx, _ in offsets) + 1
    height, width_px = dst.shape[:2]
    cx, cy = _trace_centers(pts, (-pad, -pad, width_px - 1 + pad, height - 1 + pad))
    if cx.size == 0:
        return
    mask = np.zeros(dst.shape[:2], dtype=bool)
    for dx, dy in offsets:
        xs = cx + dx
        ys = cy + dy
        valid = (xs >= 0) & (xs < width_px) & (ys >= 0) & (ys < height)
        mask[ys[valid], xs[valid]] = True
    # One composite over the union so overlapping brush stamps do not stack alpha.
    composite(dst, 0, 0, mask.astype(np.float32), color)


def _trace_centers(pts: np.ndarray, window: tuple[float, float, float, float]) -> tuple[np.ndarray, np.ndarray]:
    if pts.shape[0] == 1:
        return np.rint(pts[:, 0]).astype(np.int64), np.rint(pts[:, 1]).astype(np.int64)
    xs: list[np.ndarray] = []
    ys: list[np.ndarray] = []
    for (x0, y0), (x1, y1) in zip(pts[:-1], pts[1:], strict=False):
        clipped = clip_segment(x0, y0, x1, y1, window)
        if clipped is None:
            continue
        x0, y0, x1, y1 = clipped
        # Sample count is bounded by the clipped length, not the data range.
        n = int(np.ceil(max(abs(x1 - x0), abs(y1 - y0)))) + 1
        xs.append(np.linspace(x0, x1, n))
        ys.append(np.linspace(y0, y1, n))
    if not xs:
        empty = np.zeros(0, dtype=np.int64)
        return empty, empty
    return np.rint(np.concatenate(xs)).astype(np.int64), np.rint(np.concatenate(ys)).astype(np.int64)


def clip_segment(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    window: tuple[float, float, float, float],
) -> tuple[float, float, float, float] | None:
    """Liang-Barsky clip of a segment to ``(left, top, right, bottom)``; ``None`` if it misses."""
    left, top, right, bottom = window
    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - left), (dx, right - x0), (-dy, y0 - top), (dy, bottom - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    return (x0 + t0 * dx, y0 + t0 * dy, x0 + t1 * dx, y0 + t1 * dy)


def _brush_offsets(width: float, *, round_brush: bool) -> list[tuple[int, int]]:
    radius = max(0, int(round(width)) // 2)
    if radius == 0:
        return [(0, 0)]
    offsets: list[tuple[int, int]] = []
    limit = (radius + 0.5) ** 2
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if round_brush and dx * dx + dy * dy > limit:
                continue
            offsets.append((dx, dy))
    return offsets
