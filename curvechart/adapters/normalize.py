from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from curvechart.errors import ChartDataError
from curvechart.series import GAP, ChartSeries, DataPoint


try:
    import pandas as pd
except ImportError:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except ImportError:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_points(
    points: Any = None,
    *,
    x: Any = None,
    y: Any = None,
    data: Any = None,
    source_name: str | None = None,
) -> ChartSeries:
    """Coerce caller input into a ``ChartSeries``.

    ``points`` may hold ``DataPoint`` objects, ``(x, y)`` pairs or mappings with
    ``x``/``y`` keys. Alternatively ``x``/``y`` may be given as parallel
    sequences, numpy arrays, pandas Series, torch tensors, or column names of
    ``data`` (a pandas DataFrame). Missing y values (``None``, NaN, inf,
    ``GAP``) become gaps. Point order is preserved.
    """
    if points is not None:
        if x is not None or y is not None or data is not None:
            raise ChartDataError("pass either `points` or `x`/`y`/`data`, not both")
        x_values, y_values = _split_points(points)
    else:
        y_values = _resolve_input(y, key="y", data=data)
        if y_values is None:
            raise ChartDataError("y input is required")
        y_values = _to_list(y_values, label="y")
        if x is None:
            x_values = list(range(len(y_values)))
        else:
            x_values = _to_list(_resolve_input(x, key="x", data=data), label="x")

    if len(x_values) != len(y_values):
        raise ChartDataError(f"x and y length mismatch: {len(x_values)} != {len(y_values)}")

    x_arr, categories = _coerce_x(x_values)
    y_arr = _coerce_y(y_values)
    mask = np.isfinite(y_arr)
    return ChartSeries(x=x_arr, y=y_arr, mask=mask, categories=categories, source_name=source_name)


def _split_points(points: Any) -> tuple[list[Any], list[Any]]:
    if isinstance(points, (str, bytes, bytearray)) or not isinstance(points, Sequence):
        if isinstance(points, np.ndarray):
            if points.ndim != 2 or points.shape[1] != 2:
                raise ChartDataError("point array must have shape (n, 2)")
            return points[:, 0].tolist(), points[:, 1].tolist()
        raise ChartDataError(f"unsupported points input type: {type(points)!r}")

    xs: list[Any] = []
    ys: list[Any] = []
    for i, raw in enumerate(points):
        if isinstance(raw, DataPoint):
            xs.append(raw.x)
            ys.append(raw.y)
        elif isinstance(raw, Mapping):
            if "x" not in raw:
                raise ChartDataError(f"point {i} is missing `x`")
            xs.append(raw["x"])
            ys.append(raw.get("y"))
        elif isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)) and len(raw) == 2:
            xs.append(raw[0])
            ys.append(raw[1])
        else:
            raise ChartDataError(f"point {i} must be a DataPoint, (x, y) pair or mapping: {raw!r}")
    return xs, ys


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is None:
        return value
    if pd is None:
        raise ChartDataError("pandas is required when using `data=`")
    if not isinstance(data, pd.DataFrame):
        raise ChartDataError("`data` must be a pandas DataFrame")
    if isinstance(value, str):
        if value not in data.columns:
            raise ChartDataError(f"column not found: {value}")
        return data[value]
    if value is None and key == "y":
        numeric_cols = [c for c in data.columns if pd.api.types.is_numeric_dtype(data[c])]
        if len(numeric_cols) != 1:
            raise ChartDataError("when y is omitted, data must have exactly one numeric column")
        return data[numeric_cols[0]]
    return value


def _to_list(value: Any, *, label: str) -> list[Any]:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).tolist()

    if pd is not None and isinstance(value, pd.Series):
        return [None if _is_missing(v) else v for v in value.tolist()]

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        return value.tolist()

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return list(value)

    raise ChartDataError(f"unsupported {label} input type: {type(value)!r}")


def _is_missing(value: Any) -> bool:
    return pd is not None and value is not None and not isinstance(value, str) and bool(pd.isna(value))


def _coerce_x(values: list[Any]) -> tuple[np.ndarray, tuple[str, ...] | None]:
    if not values:
        return np.zeros(0, dtype=np.float64), None
    is_label = [isinstance(v, str) for v in values]
    if all(is_label):
        return np.arange(len(values), dtype=np.float64), tuple(values)
    if any(is_label):
        raise ChartDataError("x mixes category labels and numeric values")

    out = np.empty(len(values), dtype=np.float64)
    for i, raw in enumerate(values):
        value = _to_float(raw, label="x", index=i)
        if value is None or not np.isfinite(value):
            raise ChartDataError(f"x must be finite at index {i}: {raw!r}")
        out[i] = value
    return out, None


def _coerce_y(values: list[Any]) -> np.ndarray:
    out = np.empty(len(values), dtype=np.float64)
    for i, raw in enumerate(values):
        value = _to_float(raw, label="y", index=i)
        out[i] = np.nan if value is None else value
    # inf is a gap too; keep NaN as the single gap encoding.
    out[~np.isfinite(out)] = np.nan
    return out


def _to_float(raw: Any, *, label: str, index: int) -> float | None:
    if raw is None or raw is GAP:
        return None
    if isinstance(raw, Decimal):
        return float(raw)
    if isinstance(raw, str):
        raise ChartDataError(f"{label} contains non-numeric value at index {index}: {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{label} contains non-numeric value at index {index}: {raw!r}") from exc
