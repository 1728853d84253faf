from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from curvechart.curves import Path, Point


RGBA = tuple[int, int, int, int]

StrokeCap = Literal["butt", "round"]


@dataclass(frozen=True)
class StrokeStyle:
    color: RGBA
    width: float = 1.0
    cap: StrokeCap = "butt"


@dataclass(frozen=True)
class LinearGradient:
    """Vertical gradient; stops are spread evenly from ``start_y`` to ``end_y``."""

    stops: tuple[RGBA, ...]
    start_y: float
    end_y: float

    def __post_init__(self) -> None:
        if not self.stops:
            raise ValueError("gradient needs at least one color stop")


@dataclass(frozen=True)
class FillStyle:
    color: RGBA | None = None
    gradient: LinearGradient | None = None

    def __post_init__(self) -> None:
        if (self.color is None) == (self.gradient is None):
            raise ValueError("fill needs exactly one of color or gradient")


@dataclass(frozen=True)
class TextStyle:
    color: RGBA
    size_px: float
    font_family: str = "DejaVu Sans"


class DrawingSurface(Protocol):
    """Immediate-mode 2D canvas the chart renderer draws into."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def measure_text(self, text: str, style: TextStyle) -> tuple[float, float]: ...

    def draw_rect(self, x0: float, y0: float, x1: float, y1: float, color: RGBA) -> None: ...

    def draw_line(self, start: Point, end: Point, style: StrokeStyle) -> None: ...

    def draw_path(self, path: Path, style: StrokeStyle | FillStyle) -> None: ...

    def draw_circle(self, center: Point, radius: float, color: RGBA) -> None: ...

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None: ...


@dataclass(frozen=True)
class DrawCall:
    kind: str
    args: tuple[Any, ...]


@dataclass
class RecordingSurface:
    """Surface that records draw calls instead of producing pixels.

    Text is measured with a fixed monospace metric (``0.6 * size`` per
    character, ``size`` tall) so layouts are reproducible without fonts.
    """

    width: int
    height: int
    calls: list[DrawCall] = field(default_factory=list)

    def measure_text(self, text: str, style: TextStyle) -> tuple[float, float]:
        if not text:
            return (0.0, float(style.size_px))
        return (0.6 * style.size_px * len(text), float(style.size_px))

    def draw_rect(self, x0: float, y0: float, x1: float, y1: float, color: RGBA) -> None:
        self.calls.append(DrawCall("rect", (x0, y0, x1, y1, color)))

    def draw_line(self, start: Point, end: Point, style: StrokeStyle) -> None:
        self.calls.append(DrawCall("line", (start, end, style)))

    def draw_path(self, path: Path, style: StrokeStyle | FillStyle) -> None:
        self.calls.append(DrawCall("path", (path, style)))

    def draw_circle(self, center: Point, radius: float, color: RGBA) -> None:
        self.calls.append(DrawCall("circle", (center, radius, color)))

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        self.calls.append(DrawCall("text", (text, x, y, style)))

    def kinds(self) -> list[str]:
        return [call.kind for call in self.calls]

    def of_kind(self, kind: str) -> list[DrawCall]:
        return [call for call in self.calls if call.kind == kind]
