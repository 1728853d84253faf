from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from curvechart.api import chart
from curvechart.chart import Chart
from curvechart.config import load_chart_config, validate_chart_config
from curvechart.errors import ChartDataError
from curvechart.surface import RecordingSurface


LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="curvechart", description="Render smoothed line charts from point files.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a point file (JSON or CSV) to PNG.")
    _add_input_args(render)
    render.add_argument("--out", type=Path, required=True, help="Output PNG path.")

    inspect = sub.add_parser("inspect", help="Print the resolved axes and drawable area as JSON.")
    _add_input_args(inspect)
    return parser


def _add_input_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("input", type=Path, help="JSON point list/object, or CSV (requires pandas).")
    p.add_argument("--config", type=Path, default=None, help="TOML file with chart config overrides.")
    p.add_argument("--width", type=int, default=None)
    p.add_argument("--height", type=int, default=None)
    p.add_argument("--x-column", default="x", help="CSV column holding x values.")
    p.add_argument("--y-column", default="y", help="CSV column holding y values.")
    p.add_argument("--x-initial", type=float, default=None)
    p.add_argument("--x-step", type=float, default=None)
    p.add_argument("--y-initial", type=float, default=None)
    p.add_argument("--y-step", type=float, default=None)


def load_chart(args: argparse.Namespace) -> Chart:
    payload = _read_input(args)
    target = chart(args.width, args.height)
    if args.config is not None:
        target.config = load_chart_config(args.config)
    if payload.get("config"):
        target.config = validate_chart_config(payload["config"], base=target.config)

    x_axis = _merge_axis(payload.get("x_axis"), initial=args.x_initial, step=args.x_step)
    y_axis = _merge_axis(payload.get("y_axis"), initial=args.y_initial, step=args.y_step)
    if "points" in payload:
        target.plot(payload["points"], x_axis=x_axis, y_axis=y_axis, label=args.input.name)
    else:
        target.plot(x=payload["x"], y=payload["y"], x_axis=x_axis, y_axis=y_axis, label=args.input.name)
    return target


def _read_input(args: argparse.Namespace) -> dict[str, Any]:
    path: Path = args.input
    if not path.exists():
        raise FileNotFoundError(f"input not found: {path}")
    if path.suffix.lower() == ".csv":
        try:
            import pandas as pd
        except ImportError as exc:
            raise ChartDataError("pandas is required to read CSV input") from exc
        frame = pd.read_csv(path)
        for column in (args.x_column, args.y_column):
            if column not in frame.columns:
                raise ChartDataError(f"column not found: {column}")
        return {"x": frame[args.x_column], "y": frame[args.y_column]}

    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, list):
        return {"points": raw}
    if not isinstance(raw, dict) or "points" not in raw:
        raise ChartDataError("JSON input must be a point list or an object with `points`")
    return raw


def _merge_axis(raw: Any, *, initial: float | None, step: float | None) -> dict[str, Any] | None:
    merged: dict[str, Any] = dict(raw or {})
    if initial is not None:
        merged["initial_value"] = initial
    if step is not None:
        merged["step"] = step
    return merged or None


def _geometry_summary(target: Chart) -> dict[str, Any]:
    geometry = target.render(RecordingSurface(target.width, target.height))
    b = geometry.bounds
    return {
        "width": geometry.width,
        "height": geometry.height,
        "bounds": {
            "start_width": b.start_width,
            "end_width": b.end_width,
            "start_height": b.start_height,
            "end_height": b.end_height,
        },
        "x_axis": {
            "initial_value": geometry.x_axis.scale.initial_value,
            "step": geometry.x_axis.scale.step,
            "milestone_count": geometry.x_axis.scale.milestone_count,
            "labels": geometry.x_axis.labels,
        },
        "y_axis": {
            "initial_value": geometry.y_axis.scale.initial_value,
            "step": geometry.y_axis.scale.step,
            "milestone_count": geometry.y_axis.scale.milestone_count,
            "labels": geometry.y_axis.labels,
        },
        "segments": len(geometry.curve.segments),
        "markers": len(geometry.markers()),
    }


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        target = load_chart(args)
        if args.command == "render":
            target.save_png(args.out)
        else:
            print(json.dumps(_geometry_summary(target), indent=2))
    except (ChartDataError, ValueError, FileNotFoundError) as exc:
        LOGGER.error("%s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
