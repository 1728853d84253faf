from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import logging
import math
from typing import Sequence

import numpy as np

from curvechart.errors import AxisConfigError


LOGGER = logging.getLogger(__name__)

DEFAULT_TARGET_TICKS = 5
DENSE_AXIS_TICKS = 1000


@dataclass(frozen=True)
class AxisSpec:
    """Requested axis layout. ``None`` fields are resolved from the data."""

    initial_value: float | None = None
    step: float | None = None

    def __post_init__(self) -> None:
        if self.step is not None:
            _check_step(self.step)
        if self.initial_value is not None and not math.isfinite(self.initial_value):
            raise AxisConfigError(f"invalid axis configuration: initial value must be finite, got {self.initial_value!r}")


@dataclass(frozen=True)
class NumberFormat:
    decimals: int | None = None
    decimal_separator: str = "."
    group_separator: str = ""

    def __post_init__(self) -> None:
        if self.decimals is not None and self.decimals < 0:
            raise ValueError("decimals must be >= 0")


@dataclass(frozen=True)
class AxisScale:
    initial_value: float
    step: float
    milestone_count: int

    def __post_init__(self) -> None:
        _check_step(self.step)
        if not math.isfinite(self.initial_value):
            raise AxisConfigError(f"invalid axis configuration: initial value must be finite, got {self.initial_value!r}")
        if self.milestone_count < 1:
            raise AxisConfigError("invalid axis configuration: milestone count must be >= 1")

    @classmethod
    def covering(cls, max_value: float, initial_value: float, step: float) -> "AxisScale":
        return cls(
            initial_value=float(initial_value),
            step=float(step),
            milestone_count=milestone_count(max_value, initial_value, step),
        )

    @property
    def last_value(self) -> float:
        return self.tick_value(self.milestone_count - 1)

    @property
    def span(self) -> float:
        # A single-tick axis still spans one step so value mapping stays defined.
        return max(1, self.milestone_count - 1) * self.step

    def tick_value(self, index: int) -> float:
        return tick_value(index, self.initial_value, self.step)

    def tick_values(self) -> np.ndarray:
        idx = np.arange(self.milestone_count, dtype=np.float64)
        return self.initial_value + idx * self.step

    def tick_pixel(self, index: int, start_px: float, end_px: float) -> float:
        return tick_pixel(index, self.milestone_count, start_px, end_px)

    def tick_pixels(self, start_px: float, end_px: float, *, inverted: bool = False) -> np.ndarray:
        idx = np.arange(self.milestone_count, dtype=np.float64)
        spacing = (end_px - start_px) / max(1, self.milestone_count - 1)
        if inverted:
            return end_px - idx * spacing
        return start_px + idx * spacing

    def value_to_pixel(self, value: float, start_px: float, end_px: float, *, inverted: bool = False) -> float:
        offset = (value - self.initial_value) * (end_px - start_px) / self.span
        if inverted:
            return end_px - offset
        return start_px + offset

    def values_to_pixels(self, values: np.ndarray, start_px: float, end_px: float, *, inverted: bool = False) -> np.ndarray:
        offset = (np.asarray(values, dtype=np.float64) - self.initial_value) * ((end_px - start_px) / self.span)
        if inverted:
            return end_px - offset
        return start_px + offset

    def pixel_to_value(self, pixel: float, start_px: float, end_px: float, *, inverted: bool = False) -> float:
        offset = (end_px - pixel) if inverted else (pixel - start_px)
        return self.initial_value + offset * self.span / (end_px - start_px)


def milestone_count(max_value: float, initial_value: float, step: float) -> int:
    _check_step(step)
    ratio = (float(max_value) - float(initial_value)) / float(step)
    # Snap float drift so (0.3 - 0.1) / 0.1 does not grow an extra tick.
    nearest = round(ratio)
    if abs(ratio - nearest) <= 1e-9 * max(1.0, abs(ratio)):
        ratio = float(nearest)
    return max(1, int(math.ceil(ratio)) + 1)


def tick_value(index: int, initial_value: float, step: float) -> float:
    return float(initial_value) + index * float(step)


def tick_pixel(index: int, count: int, start_px: float, end_px: float) -> float:
    if count <= 1:
        return float(start_px)
    return start_px + index * (end_px - start_px) / (count - 1)


def aligned_initial_value(min_value: float, step: float) -> float:
    _check_step(step)
    return math.floor(min_value / step) * step


def resolve_axis(
    values: np.ndarray,
    spec: AxisSpec | None = None,
    *,
    categorical: bool = False,
) -> AxisScale:
    """Fill in the automatic parts of ``spec`` from the present data values."""
    spec = spec or AxisSpec()
    finite = np.asarray(values, dtype=np.float64)
    finite = finite[np.isfinite(finite)]

    if spec.step is not None:
        step = float(spec.step)
    elif categorical:
        step = 1.0
    elif finite.size == 0:
        step = 1.0
    else:
        step = nice_step(float(np.min(finite)), float(np.max(finite)))

    if spec.initial_value is not None:
        initial = float(spec.initial_value)
    elif categorical or finite.size == 0:
        initial = 0.0
    else:
        initial = aligned_initial_value(float(np.min(finite)), step)

    max_value = float(np.max(finite)) if finite.size else initial
    scale = AxisScale.covering(max_value, initial, step)
    LOGGER.debug(
        "resolved axis initial=%s step=%s milestones=%d (data max=%s)",
        scale.initial_value,
        scale.step,
        scale.milestone_count,
        max_value,
    )
    if scale.milestone_count > DENSE_AXIS_TICKS:
        LOGGER.warning(
            "axis has %d milestones (initial=%s step=%s); every tick is labelled and drawn",
            scale.milestone_count,
            scale.initial_value,
            scale.step,
        )
    return scale


def nice_step(vmin: float, vmax: float, target: int = DEFAULT_TARGET_TICKS) -> float:
    if target <= 1:
        raise ValueError("target must be > 1")
    span = vmax - vmin
    if span <= 0 or not math.isfinite(span):
        return 1.0
    return _nice_number(span / (target - 1))


def format_tick(value: float, *, step: float | None = None, number_format: NumberFormat | None = None) -> str:
    number_format = number_format or NumberFormat()
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    if number_format.decimals is not None:
        decimals = number_format.decimals
    elif step is not None:
        decimals = _decimals_from_step(step)
    else:
        decimals = 6

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Without an explicit decimal count, fractional zeros are noise; integer zeros (30, 40) stay.
    if number_format.decimals is None and "." in out:
        out = out.rstrip("0").rstrip(".")
    if out.lstrip("-").strip("0.") == "":
        out = out.lstrip("-")
    return _apply_separators(out, number_format)


def format_ticks(
    values: Sequence[float] | np.ndarray,
    *,
    step: float | None = None,
    number_format: NumberFormat | None = None,
) -> list[str]:
    return [format_tick(float(v), step=step, number_format=number_format) for v in values]


def _apply_separators(text: str, number_format: NumberFormat) -> str:
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    whole, dot, frac = text.partition(".")
    if number_format.group_separator and len(whole) > 3:
        groups: list[str] = []
        while len(whole) > 3:
            groups.insert(0, whole[-3:])
            whole = whole[:-3]
        groups.insert(0, whole)
        whole = number_format.group_separator.join(groups)
    if dot:
        return f"{sign}{whole}{number_format.decimal_separator}{frac}"
    return f"{sign}{whole}"


def _check_step(step: float) -> None:
    if not isinstance(step, (int, float, np.floating, np.integer)) or not math.isfinite(step) or step <= 0:
        raise AxisConfigError(f"invalid axis configuration: step must be a finite number > 0, got {step!r}")


def _nice_number(value: float) -> float:
    exp = math.floor(math.log10(value))
    frac = value / (10**exp)
    if frac < 1.5:
        nice_frac = 1.0
    elif frac < 3.0:
        nice_frac = 2.0
    elif frac < 7.0:
        nice_frac = 5.0
    else:
        nice_frac = 10.0
    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
