from __future__ import annotations

import unittest

import numpy as np

from curvechart.curves import LineTo, Path, SubPath
from curvechart.raster import (
    RasterSurface,
    composite,
    draw_circle,
    draw_text,
    fill_polygons,
    fill_rect,
    gradient_rows,
    new_canvas,
    polygon_coverage,
    stroke_polyline,
    text_size,
)
from curvechart.raster.draw_lines import clip_segment
from curvechart.surface import FillStyle, LinearGradient, StrokeStyle, TextStyle

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


class CanvasTests(unittest.TestCase):
    def test_new_canvas_shape_and_color(self) -> None:
        canvas = new_canvas(4, 3, color=(1, 2, 3, 4))
        self.assertEqual(canvas.shape, (3, 4, 4))
        self.assertEqual(canvas.dtype, np.uint8)
        self.assertEqual(canvas[2, 3].tolist(), [1, 2, 3, 4])
        with self.assertRaises(ValueError):
            new_canvas(0, 3)

    def test_composite_blends_source_over(self) -> None:
        canvas = new_canvas(2, 2, color=WHITE)
        composite(canvas, 0, 0, np.ones((1, 1), dtype=np.float32), (0, 0, 0, 128))
        self.assertIn(int(canvas[0, 0, 1]), (127, 128))
        self.assertEqual(int(canvas[0, 0, 3]), 255)
        self.assertEqual(canvas[1, 1].tolist(), list(WHITE))

    def test_composite_clips_to_canvas(self) -> None:
        canvas = new_canvas(3, 3, color=WHITE)
        composite(canvas, -1, -1, np.ones((2, 2), dtype=np.float32), BLACK)
        self.assertEqual(canvas[0, 0].tolist(), list(BLACK))
        self.assertEqual(canvas[1, 1].tolist(), list(WHITE))
        composite(canvas, 10, 10, np.ones((2, 2), dtype=np.float32), BLACK)

    def test_fill_rect(self) -> None:
        canvas = new_canvas(6, 6, color=WHITE)
        fill_rect(canvas, 1, 2, 4, 5, RED)
        self.assertEqual(canvas[2, 1].tolist(), list(RED))
        self.assertEqual(canvas[4, 3].tolist(), list(RED))
        self.assertEqual(canvas[5, 4].tolist(), list(WHITE))


class ShapeTests(unittest.TestCase):
    def test_horizontal_stroke(self) -> None:
        canvas = new_canvas(20, 10, color=WHITE)
        stroke_polyline(canvas, np.asarray([[2.0, 5.0], [17.0, 5.0]]), BLACK, width=1)
        self.assertTrue(np.all(canvas[5, 2:18, :3] == 0))
        self.assertTrue(np.all(canvas[3] == 255))
        self.assertEqual(canvas[5, 1].tolist(), list(WHITE))

    def test_wide_stroke_covers_neighbouring_rows(self) -> None:
        canvas = new_canvas(20, 10, color=WHITE)
        stroke_polyline(canvas, np.asarray([[2.0, 5.0], [17.0, 5.0]]), BLACK, width=5, cap="round")
        self.assertTrue(np.all(canvas[3:8, 5:15, :3] == 0))
        self.assertTrue(np.all(canvas[0] == 255))

    def test_far_off_canvas_segment_is_clipped(self) -> None:
        canvas = new_canvas(20, 10, color=WHITE)
        stroke_polyline(canvas, np.asarray([[5.0, 5.0], [5.0, -1e12]]), BLACK, width=5, cap="round")
        self.assertTrue(np.all(canvas[0:6, 5, :3] == 0))
        self.assertTrue(np.all(canvas[9] == 255))

    def test_clip_segment(self) -> None:
        x0, y0, x1, y1 = clip_segment(-50.0, 5.0, 100.0, 5.0, (0.0, 0.0, 9.0, 9.0))
        self.assertAlmostEqual(x0, 0.0)
        self.assertAlmostEqual(x1, 9.0)
        self.assertAlmostEqual(y0, 5.0)
        self.assertAlmostEqual(y1, 5.0)
        self.assertEqual(clip_segment(1.0, 2.0, 3.0, 4.0, (0.0, 0.0, 9.0, 9.0)), (1.0, 2.0, 3.0, 4.0))
        self.assertIsNone(clip_segment(20.0, 20.0, 30.0, 30.0, (0.0, 0.0, 9.0, 9.0)))

    def test_circle_fills_center(self) -> None:
        canvas = new_canvas(20, 20, color=WHITE)
        draw_circle(canvas, 10.0, 10.0, 4.0, RED)
        self.assertEqual(canvas[10, 10].tolist(), list(RED))
        self.assertEqual(canvas[10, 13].tolist(), list(RED))
        self.assertEqual(canvas[0, 0].tolist(), list(WHITE))
        self.assertEqual(canvas[10, 16].tolist(), list(WHITE))

    def test_polygon_coverage(self) -> None:
        square = np.asarray([[2.0, 2.0], [7.0, 2.0], [7.0, 7.0], [2.0, 7.0], [2.0, 2.0]])
        coverage = polygon_coverage(10, 10, [square])
        self.assertEqual(coverage.shape, (10, 10))
        self.assertEqual(float(coverage[4, 4]), 1.0)
        self.assertEqual(float(coverage[0, 0]), 0.0)

    def test_gradient_rows(self) -> None:
        rows = gradient_rows(10, [(0, 0, 0, 255), (255, 255, 255, 255)], 0.0, 9.0)
        self.assertEqual(rows.shape, (10, 1, 4))
        self.assertAlmostEqual(float(rows[0, 0, 0]), 0.0)
        self.assertAlmostEqual(float(rows[9, 0, 0]), 255.0)
        self.assertTrue(np.all(np.diff(rows[:, 0, 0]) >= 0))

    def test_gradient_fill_varies_by_row(self) -> None:
        canvas = new_canvas(10, 10, color=WHITE)
        square = np.asarray([[0.0, 0.0], [9.0, 0.0], [9.0, 9.0], [0.0, 9.0]])
        fill_polygons(canvas, [square], gradient=([(0, 0, 0, 255), (255, 0, 0, 255)], 0.0, 9.0))
        self.assertLess(int(canvas[1, 4, 0]), int(canvas[8, 4, 0]))
        self.assertEqual(int(canvas[5, 4, 1]), 0)

    def test_text_changes_pixels(self) -> None:
        canvas = new_canvas(60, 30, color=WHITE)
        draw_text(canvas, 2, 2, "Hi", BLACK, font_size_px=16)
        self.assertTrue(np.any(canvas[:, :, 0] < 128))
        width, height = text_size("Hi", font_size_px=16)
        self.assertGreater(width, 0)
        self.assertGreater(height, 0)


class RasterSurfaceTests(unittest.TestCase):
    def test_surface_dimensions(self) -> None:
        surface = RasterSurface(30, 20, background=WHITE)
        self.assertEqual((surface.width, surface.height), (30, 20))
        self.assertEqual(surface.rgba.shape, (20, 30, 4))

    def test_draw_path_fill_and_stroke(self) -> None:
        surface = RasterSurface(20, 20, background=WHITE)
        square = Path((SubPath(start=(2.0, 2.0), commands=(LineTo((17.0, 2.0)), LineTo((17.0, 17.0)), LineTo((2.0, 17.0))), closed=True),))
        surface.draw_path(square, FillStyle(color=RED))
        self.assertEqual(surface.rgba[10, 10].tolist(), list(RED))

        gradient = FillStyle(gradient=LinearGradient(stops=(BLACK,), start_y=0.0, end_y=20.0))
        surface.draw_path(square, gradient)
        self.assertEqual(surface.rgba[10, 10].tolist(), list(BLACK))

        line = Path((SubPath(start=(0.0, 19.0), commands=(LineTo((19.0, 19.0)),)),))
        surface.draw_path(line, StrokeStyle(color=RED, width=1))
        self.assertEqual(surface.rgba[19, 5].tolist(), list(RED))

    def test_measure_and_draw_text(self) -> None:
        surface = RasterSurface(80, 30, background=WHITE)
        style = TextStyle(color=BLACK, size_px=14)
        width, height = surface.measure_text("40", style)
        self.assertGreater(width, 0)
        self.assertGreater(height, 0)
        surface.draw_text("40", 2, 2, style)
        self.assertTrue(np.any(surface.rgba[:, :, 0] < 128))


if __name__ == "__main__":
    unittest.main()
