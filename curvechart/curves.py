from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from curvechart.series import GAP, Gap


Point = tuple[float, float]

DEFAULT_FLATTEN_STEPS = 24


@dataclass(frozen=True)
class BezierSegment:
    """One cubic curve between two consecutive data points."""

    p0: Point
    p1: Point
    p2: Point
    p3: Point

    def point_at(self, t: float) -> Point:
        u = 1.0 - t
        a = u * u * u
        b = 3.0 * u * u * t
        c = 3.0 * u * t * t
        d = t * t * t
        return (
            a * self.p0[0] + b * self.p1[0] + c * self.p2[0] + d * self.p3[0],
            a * self.p0[1] + b * self.p1[1] + c * self.p2[1] + d * self.p3[1],
        )

    def flatten(self, steps: int = DEFAULT_FLATTEN_STEPS) -> np.ndarray:
        if steps < 1:
            raise ValueError("steps must be >= 1")
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)[:, None]
        u = 1.0 - t
        pts = np.asarray([self.p0, self.p1, self.p2, self.p3], dtype=np.float64)
        return (u**3) * pts[0] + (3.0 * u * u * t) * pts[1] + (3.0 * u * t * t) * pts[2] + (t**3) * pts[3]


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class CubicTo:
    p1: Point
    p2: Point
    p3: Point


PathCommand = LineTo | CubicTo


@dataclass(frozen=True)
class SubPath:
    start: Point
    commands: tuple[PathCommand, ...] = ()
    closed: bool = False

    def flatten(self, steps: int = DEFAULT_FLATTEN_STEPS) -> np.ndarray:
        chunks = [np.asarray([self.start], dtype=np.float64)]
        current = self.start
        for cmd in self.commands:
            if isinstance(cmd, LineTo):
                chunks.append(np.asarray([cmd.point], dtype=np.float64))
                current = cmd.point
            else:
                seg = BezierSegment(current, cmd.p1, cmd.p2, cmd.p3)
                chunks.append(seg.flatten(steps)[1:])
                current = cmd.p3
        out = np.concatenate(chunks, axis=0)
        if self.closed and not np.allclose(out[0], out[-1]):
            out = np.concatenate([out, out[:1]], axis=0)
        return out


@dataclass(frozen=True)
class Path:
    subpaths: tuple[SubPath, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.subpaths)

    def __len__(self) -> int:
        return len(self.subpaths)

    def flatten(self, steps: int = DEFAULT_FLATTEN_STEPS) -> list[np.ndarray]:
        return [sub.flatten(steps) for sub in self.subpaths]


@dataclass(frozen=True)
class CurvePaths:
    segments: tuple[BezierSegment, ...]
    stroke: Path
    fill: Path
    baseline_y: float


def bezier_segment(p0: Point, p3: Point) -> BezierSegment:
    """Control points sit on horizontal tangents at the horizontal midpoint."""
    mid_x = (p0[0] + p3[0]) / 2.0
    return BezierSegment(p0=p0, p1=(mid_x, p0[1]), p2=(mid_x, p3[1]), p3=p3)


def build_curve(points: Sequence[Point | Gap], baseline_y: float) -> CurvePaths:
    segments: list[BezierSegment] = []
    fills: list[SubPath] = []
    strokes: list[SubPath] = []
    run: list[BezierSegment] = []

    for i in range(len(points) - 1):
        p0 = points[i]
        p3 = points[i + 1]
        if p0 is GAP or p3 is GAP:
            if run:
                strokes.append(_stroke_subpath(run))
                run = []
            continue
        seg = bezier_segment(p0, p3)
        segments.append(seg)
        run.append(seg)
        fills.append(
            SubPath(
                start=seg.p0,
                commands=(
                    CubicTo(seg.p1, seg.p2, seg.p3),
                    LineTo((seg.p3[0], baseline_y)),
                    LineTo((seg.p0[0], baseline_y)),
                ),
                closed=True,
            )
        )
    if run:
        strokes.append(_stroke_subpath(run))

    return CurvePaths(
        segments=tuple(segments),
        stroke=Path(tuple(strokes)),
        fill=Path(tuple(fills)),
        baseline_y=float(baseline_y),
    )


def _stroke_subpath(run: list[BezierSegment]) -> SubPath:
    return SubPath(start=run[0].p0, commands=tuple(CubicTo(s.p1, s.p2, s.p3) for s in run))
