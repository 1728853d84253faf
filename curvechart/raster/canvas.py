from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def composite(dst: np.ndarray, x: int, y: int, coverage: np.ndarray, color: RGBA | np.ndarray) -> None:
    """Source-over blend ``color`` into ``dst`` weighted by ``coverage`` in [0, 1].

    ``coverage`` is placed with its top-left corner at ``(x, y)`` and clipped to
    the canvas. ``color`` is a single RGBA tuple or an RGBA float array whose
    rows (and optionally columns) line up with ``coverage``.
    """
    h, w = coverage.shape
    if h <= 0 or w <= 0:
        return
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    sx0 = x0 - x
    sy0 = y0 - y
    sx1 = sx0 + (x1 - x0)
    sy1 = sy0 + (y1 - y0)
    cov = coverage[sy0:sy1, sx0:sx1].astype(np.float32)
    if not np.any(cov > 0):
        return

    if isinstance(color, np.ndarray):
        src = color[sy0:sy1]
        if src.shape[1] > 1:
            src = src[:, sx0:sx1]
        src = src.astype(np.float32)
        src_rgb = src[:, :, :3]
        src_alpha = (src[:, :, 3] / 255.0) * cov
    else:
        src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
        src_alpha = (color[3] / 255.0) * cov

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def fill_rect(dst: np.ndarray, x0: float, y0: float, x1: float, y1: float, color: RGBA) -> None:
    left = int(round(min(x0, x1)))
    right = int(round(max(x0, x1)))
    top = int(round(min(y0, y1)))
    bottom = int(round(max(y0, y1)))
    if right <= left or bottom <= top:
        return
    coverage = np.ones((bottom - top, right - left), dtype=np.float32)
    composite(dst, left, top, coverage, color)
