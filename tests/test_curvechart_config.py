from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from curvechart.config import DEFAULT_CONFIG, AxisStyle, ChartConfig, load_chart_config, parse_color, validate_chart_config
from curvechart.scales import NumberFormat


class ChartConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        self.assertEqual(validate_chart_config(), DEFAULT_CONFIG)
        self.assertEqual(DEFAULT_CONFIG.point_radius, 8.0)
        self.assertEqual(DEFAULT_CONFIG.line_width, 5.0)
        self.assertEqual(DEFAULT_CONFIG.area_gradient, ((0, 255, 255, 255), (255, 255, 0, 255)))
        self.assertFalse(DEFAULT_CONFIG.x_axis.show_grid)

    def test_partial_override_keeps_other_defaults(self) -> None:
        config = validate_chart_config({"point_radius": 3, "line_color": "#112233", "y_axis": {"show_grid": True}})
        self.assertEqual(config.point_radius, 3.0)
        self.assertEqual(config.line_color, (0x11, 0x22, 0x33, 255))
        self.assertTrue(config.y_axis.show_grid)
        self.assertFalse(config.x_axis.show_grid)
        self.assertEqual(config.point_color, DEFAULT_CONFIG.point_color)

    def test_shared_axes_override_then_per_axis(self) -> None:
        config = validate_chart_config({"axes": {"text_size_px": 9, "tick_mark_size": 2}, "x_axis": {"text_size_px": 14}})
        self.assertEqual(config.x_axis.text_size_px, 14.0)
        self.assertEqual(config.y_axis.text_size_px, 9.0)
        self.assertEqual(config.x_axis.tick_mark_size, 2.0)
        self.assertEqual(config.y_axis.tick_mark_size, 2.0)

    def test_with_overrides_builds_on_current_config(self) -> None:
        base = ChartConfig(point_radius=2.0)
        config = base.with_overrides({"line_width": 1})
        self.assertEqual((config.point_radius, config.line_width), (2.0, 1.0))
        self.assertEqual(base.line_width, 5.0)

    def test_number_format_override(self) -> None:
        config = validate_chart_config({"y_axis": {"number_format": {"decimals": 1, "decimal_separator": ","}}})
        self.assertEqual(config.y_axis.number_format, NumberFormat(decimals=1, decimal_separator=","))
        self.assertEqual(config.x_axis.number_format, NumberFormat())

    def test_rejects_unknown_fields(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown chart config field"):
            validate_chart_config({"colour": "#000000"})
        with self.assertRaisesRegex(ValueError, "Unknown x_axis config field"):
            validate_chart_config({"x_axis": {"label": "x"}})
        with self.assertRaisesRegex(ValueError, "Unknown y_axis.number_format field"):
            validate_chart_config({"y_axis": {"number_format": {"locale": "de"}}})

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaisesRegex(ValueError, "hex color"):
            validate_chart_config({"background": "white"})
        with self.assertRaisesRegex(ValueError, "non-negative"):
            validate_chart_config({"point_radius": -1})
        with self.assertRaisesRegex(ValueError, "finite"):
            validate_chart_config({"point_radius": float("nan")})
        with self.assertRaisesRegex(ValueError, "finite"):
            validate_chart_config({"line_width": float("inf")})
        with self.assertRaisesRegex(ValueError, "finite"):
            validate_chart_config({"y_axis": {"text_size_px": float("inf")}})
        with self.assertRaisesRegex(ValueError, "positive number"):
            validate_chart_config({"x_axis": {"text_size_px": 0}})
        with self.assertRaisesRegex(ValueError, "boolean"):
            validate_chart_config({"x_axis": {"show_grid": "yes"}})
        with self.assertRaisesRegex(ValueError, "area_gradient"):
            validate_chart_config({"area_gradient": []})
        with self.assertRaisesRegex(ValueError, "decimals"):
            validate_chart_config({"x_axis": {"number_format": {"decimals": -2}}})

    def test_parse_color(self) -> None:
        self.assertEqual(parse_color("#FF000080"), (255, 0, 0, 128))
        self.assertEqual(parse_color([1, 2, 3]), (1, 2, 3, 255))
        self.assertEqual(parse_color((1, 2, 3, 4)), (1, 2, 3, 4))
        with self.assertRaises(ValueError):
            parse_color((256, 0, 0))
        with self.assertRaises(ValueError):
            parse_color(12)

    def test_load_chart_config_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text(
                "[chart]\n"
                "point_radius = 4\n"
                'area_gradient = ["#FF0000", "#0000FF"]\n'
                "[chart.x_axis]\n"
                "show_grid = true\n"
                'grid_color = "#EEEEEE"\n',
                encoding="utf-8",
            )
            config = load_chart_config(path)
        self.assertEqual(config.point_radius, 4.0)
        self.assertEqual(config.area_gradient, ((255, 0, 0, 255), (0, 0, 255, 255)))
        self.assertTrue(config.x_axis.show_grid)
        self.assertEqual(config.x_axis.grid_color, (0xEE, 0xEE, 0xEE, 255))
        self.assertEqual(config.y_axis, AxisStyle())

    def test_load_chart_config_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_chart_config("/nonexistent/chart.toml")


if __name__ == "__main__":
    unittest.main()
