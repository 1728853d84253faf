from .canvas import composite, fill_rect, new_canvas
from .draw_fill import fill_polygons, gradient_rows, polygon_coverage
from .draw_lines import stroke_polyline
from .draw_markers import draw_circle
from .draw_text import draw_text, text_size
from .surface import RasterSurface

__all__ = [
    "RasterSurface",
    "composite",
    "draw_circle",
    "draw_text",
    "fill_polygons",
    "fill_rect",
    "gradient_rows",
    "new_canvas",
    "polygon_coverage",
    "stroke_polyline",
    "text_size",
]
