from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import logging
import math
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from curvechart.scales import NumberFormat


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
CYAN: RGBA = (0, 255, 255, 255)
YELLOW: RGBA = (255, 255, 0, 255)
LIGHT_GREY: RGBA = (220, 220, 220, 255)


@dataclass(frozen=True)
class AxisStyle:
    text_size_px: float = 12.0
    text_color: RGBA = BLACK
    text_padding: float = 4.0
    tick_mark_size: float = 4.0
    tick_mark_width: float = 1.0
    tick_mark_color: RGBA = BLACK
    show_grid: bool = False
    grid_color: RGBA = LIGHT_GREY
    grid_width: float = 1.0
    axis_line_color: RGBA = BLACK
    axis_line_width: float = 1.0
    number_format: NumberFormat = field(default_factory=NumberFormat)


@dataclass(frozen=True)
class ChartConfig:
    """Every visual parameter of a chart; all fields have defaults."""

    x_axis: AxisStyle = field(default_factory=AxisStyle)
    y_axis: AxisStyle = field(default_factory=AxisStyle)
    point_radius: float = 8.0
    point_color: RGBA = BLACK
    line_width: float = 5.0
    line_color: RGBA = BLACK
    area_gradient: tuple[RGBA, ...] = (CYAN, YELLOW)
    background: RGBA = WHITE
    font_family: str = "DejaVu Sans"

    def with_overrides(self, overrides: Mapping[str, Any]) -> "ChartConfig":
        return validate_chart_config(overrides, base=self)


DEFAULT_CONFIG = ChartConfig()

_AXIS_COLOR_FIELDS = ("text_color", "tick_mark_color", "grid_color", "axis_line_color")
_AXIS_NON_NEGATIVE_FIELDS = ("text_padding", "tick_mark_size", "tick_mark_width", "grid_width", "axis_line_width")
_CHART_COLOR_FIELDS = ("point_color", "line_color", "background")
_CHART_NON_NEGATIVE_FIELDS = ("point_radius", "line_width")


def parse_color(value: Any, *, name: str = "color") -> RGBA:
    """Accept ``#RRGGBB``/``#RRGGBBAA`` strings or 3/4 item integer sequences."""
    if isinstance(value, str):
        if not _HEX_COLOR.match(value):
            raise ValueError(f"`{name}` must be a hex color (#RRGGBB or #RRGGBBAA), got {value!r}")
        raw = value[1:]
        channels = [int(raw[i : i + 2], 16) for i in range(0, len(raw), 2)]
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        channels = list(value)
        if not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in channels):
            raise ValueError(f"`{name}` channels must be integers in [0, 255], got {value!r}")
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise ValueError(f"`{name}` must be a hex string or an RGB(A) sequence, got {value!r}")


def validate_chart_config(overrides: Mapping[str, Any] | None = None, *, base: ChartConfig = DEFAULT_CONFIG) -> ChartConfig:
    """Validate and merge user overrides against ``base``.

    Nested axis overrides go under ``x_axis``/``y_axis``; the ``axes`` key
    applies the same overrides to both axes before the per-axis ones.
    """
    if not overrides:
        return base

    known = {f.name for f in fields(ChartConfig)} | {"axes"}
    for key in overrides:
        if key not in known:
            raise ValueError(f"Unknown chart config field: {key}")

    shared = overrides.get("axes") or {}
    x_axis = _validate_axis_style({**_as_mapping(shared, "axes"), **_as_mapping(overrides.get("x_axis") or {}, "x_axis")}, base.x_axis, "x_axis")
    y_axis = _validate_axis_style({**_as_mapping(shared, "axes"), **_as_mapping(overrides.get("y_axis") or {}, "y_axis")}, base.y_axis, "y_axis")

    changes: dict[str, Any] = {"x_axis": x_axis, "y_axis": y_axis}
    for key in _CHART_COLOR_FIELDS:
        if key in overrides:
            changes[key] = parse_color(overrides[key], name=key)
    for key in _CHART_NON_NEGATIVE_FIELDS:
        if key in overrides:
            changes[key] = _non_negative(overrides[key], key)
    if "area_gradient" in overrides:
        stops = overrides["area_gradient"]
        if isinstance(stops, str) or not isinstance(stops, (list, tuple)) or len(stops) < 1:
            raise ValueError("`area_gradient` must be a non-empty list of colors")
        changes["area_gradient"] = tuple(parse_color(c, name="area_gradient") for c in stops)
    if "font_family" in overrides:
        family = overrides["font_family"]
        if not isinstance(family, str) or not family.strip():
            raise ValueError("`font_family` must be a non-empty string")
        changes["font_family"] = family
    return replace(base, **changes)


def load_chart_config(path: str | Path, *, base: ChartConfig = DEFAULT_CONFIG) -> ChartConfig:
    """Read overrides from a TOML file; a ``[chart]`` table is used when present."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    overrides = raw.get("chart", raw)
    LOGGER.debug("loaded chart config overrides from %s: %s", config_path, sorted(overrides))
    return validate_chart_config(overrides, base=base)


def _validate_axis_style(overrides: Mapping[str, Any], base: AxisStyle, axis_name: str) -> AxisStyle:
    if not overrides:
        return base
    known = {f.name for f in fields(AxisStyle)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown {axis_name} config field: {key}")
        name = f"{axis_name}.{key}"
        if key in _AXIS_COLOR_FIELDS:
            changes[key] = parse_color(value, name=name)
        elif key in _AXIS_NON_NEGATIVE_FIELDS:
            changes[key] = _non_negative(value, name)
        elif key == "text_size_px":
            size = _non_negative(value, name)
            if size <= 0:
                raise ValueError(f"`{name}` must be a positive number")
            changes[key] = size
        elif key == "show_grid":
            if not isinstance(value, bool):
                raise ValueError(f"`{name}` must be a boolean")
            changes[key] = value
        elif key == "number_format":
            changes[key] = _number_format(value, name)
    return replace(base, **changes)


def _number_format(value: Any, name: str) -> NumberFormat:
    if isinstance(value, NumberFormat):
        return value
    mapping = _as_mapping(value, name)
    known = {f.name for f in fields(NumberFormat)}
    for key in mapping:
        if key not in known:
            raise ValueError(f"Unknown {name} field: {key}")
    decimals = mapping.get("decimals")
    if decimals is not None and (not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0):
        raise ValueError(f"`{name}.decimals` must be a non-negative integer")
    for key in ("decimal_separator", "group_separator"):
        if key in mapping and not isinstance(mapping[key], str):
            raise ValueError(f"`{name}.{key}` must be a string")
    return NumberFormat(**mapping)


def _as_mapping(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"`{name}` must be a table of overrides")
    return value


def _non_negative(value: Any, name: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value) or value < 0:
        raise ValueError(f"`{name}` must be a finite non-negative number")
    return float(value)
