from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image

from curvechart import Chart, ChartDataError, RecordingSurface, chart
from curvechart.scales import AxisSpec


class ChartFactoryTests(unittest.TestCase):
    def test_default_dimensions(self) -> None:
        c = chart()
        self.assertEqual((c.width, c.height), (640, 360))

    def test_missing_dimension_follows_aspect_ratio(self) -> None:
        self.assertEqual(chart(width=400, aspect_ratio=2.0).height, 200)
        self.assertEqual(chart(height=100, aspect_ratio=1.5).width, 150)
        self.assertEqual((chart(300, 120).width, chart(300, 120).height), (300, 120))

    def test_config_mapping_is_validated(self) -> None:
        c = chart(200, 100, config={"point_radius": 2})
        self.assertEqual(c.config.point_radius, 2.0)
        with self.assertRaises(ValueError):
            chart(200, 100, config={"nope": 1})

    def test_rejects_bad_sizes(self) -> None:
        with self.assertRaises(ValueError):
            chart(width=0)
        with self.assertRaises(ValueError):
            chart(aspect_ratio=0)
        with self.assertRaises(ValueError):
            Chart(width=10, height=-1)


class ChartRenderTests(unittest.TestCase):
    def _chart(self) -> Chart:
        return chart(320, 200).plot([(0, 10), (1, 20), (2, 15)])

    def test_render_requires_series(self) -> None:
        with self.assertRaisesRegex(ChartDataError, "plot"):
            chart(100, 100).to_rgba()

    def test_to_rgba_is_deterministic(self) -> None:
        c = self._chart()
        first = c.to_rgba()
        second = c.to_rgba()
        self.assertEqual(first.shape, (200, 320, 4))
        self.assertEqual(first.dtype, np.uint8)
        self.assertTrue(np.array_equal(first, second))

    def test_far_outlier_renders_on_a_small_canvas(self) -> None:
        c = chart(200, 120).plot([(0, 20), (1, -2e7), (2, 30)], y_axis={"initial_value": 10, "step": 10})
        with self.assertLogs("curvechart.renderer", level="WARNING"):
            rgba = c.to_rgba()
        self.assertEqual(rgba.shape, (120, 200, 4))
        self.assertEqual(c.last_geometry().out_of_bounds, (1,))

    def test_markers_and_area_fill_are_drawn(self) -> None:
        c = self._chart()
        rgba = c.to_rgba()
        geometry = c.last_geometry()
        self.assertIsNotNone(geometry)

        mx, my = geometry.markers()[1]
        self.assertEqual(rgba[int(round(my)), int(round(mx)), :3].tolist(), [0, 0, 0])

        (x0, _), (x1, _) = geometry.markers()[:2]
        sample = rgba[int(geometry.bounds.end_height) - 3, int(round((x0 + x1) / 2.0))]
        # Near the baseline the gradient is at its last stop (yellow).
        self.assertGreater(int(sample[0]), 200)
        self.assertGreater(int(sample[1]), 200)
        self.assertLess(int(sample[2]), 60)

    def test_plot_accepts_axis_mappings(self) -> None:
        c = chart(200, 150).plot([(1, 12), (2, 15), (3, 32)], x_axis={"initial_value": 1, "step": 1}, y_axis=AxisSpec(10, 10))
        geometry = c.render(RecordingSurface(200, 150))
        self.assertEqual(geometry.y_axis.labels, ["10", "20", "30", "40"])
        with self.assertRaises(ValueError):
            c.set_axes(x={"start": 1})

    def test_set_axes_and_configure(self) -> None:
        c = self._chart().set_axes(y={"initial_value": 0, "step": 5}).configure({"axes": {"show_grid": True}})
        surface = RecordingSurface(c.width, c.height)
        geometry = c.render(surface)
        self.assertEqual(geometry.y_axis.scale.initial_value, 0.0)
        self.assertEqual(geometry.y_axis.scale.milestone_count, 5)
        self.assertTrue(c.config.y_axis.show_grid)

    def test_save_png(self) -> None:
        c = self._chart()
        with tempfile.TemporaryDirectory() as tmp:
            out = c.save_png(Path(tmp) / "nested" / "chart.png")
            self.assertTrue(out.exists())
            with Image.open(out) as image:
                self.assertEqual(image.size, (320, 200))
                self.assertEqual(image.mode, "RGBA")


if __name__ == "__main__":
    unittest.main()
