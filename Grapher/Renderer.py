# Renderer.py
"""
Composes one frame of the graph: coordinate system, every curve of the
session and the markers of every pairwise intersection.

The renderer only issues logical draw calls against a Surface; the Qt
widget in UI.py provides the implementation that owns the pixels.
Rendering is idempotent and always redraws the whole frame.
"""

import logging
import math

from . import error as E
from .CoordinateMapper import CoordinateMapper, Point

logger = logging.getLogger(__name__)

AXIS_COLOR = "#000000"
LABEL_COLOR = "#000000"
TICK_HALF_LENGTH = 5
CURVE_WIDTH = 2
LABEL_OFFSET_X = 10
LABEL_OFFSET_Y = -5


class Surface:
    """Drawing operations the renderer needs. Coordinates are screen Points."""

    def clear(self, width, height):
        raise NotImplementedError

    def draw_line(self, start, end, color, width=1):
        raise NotImplementedError

    def draw_polyline(self, points, color, width=1):
        raise NotImplementedError

    def fill_circle(self, center, radius, color):
        raise NotImplementedError

    def draw_text(self, text, position, color, align="left", baseline="bottom"):
        raise NotImplementedError


# -----------------------------
# Settings helpers
# -----------------------------

def mapper_from_settings(settings):
    """Mapper with the origin in the middle of the canvas."""
    return CoordinateMapper.centered(settings["canvas_width"], settings["canvas_height"], settings["grid_size"])


def scan_options_from_settings(settings):
    return {
        "start": settings["intersection_start"],
        "end": settings["intersection_end"],
        "step": settings["intersection_step"],
        "iterations": settings["bisection_iterations"],
    }


# -----------------------------
# Formatting
# -----------------------------

def format_number(value):
    """Render a coordinate the way it is labelled on the graph: 2 -> '2', 0.5 -> '0.5'."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_point(point):
    return f"({format_number(point.x)}, {format_number(point.y)})"


# -----------------------------
# Drawing
# -----------------------------

def draw_coordinate_system(surface, mapper, settings):
    width = settings["canvas_width"]
    height = settings["canvas_height"]
    grid_size = settings["grid_size"]
    show_numbers = settings["show_axis_tick_numbers"]
    origin_x = mapper.origin_x
    origin_y = mapper.origin_y

    surface.clear(width, height)

    # --- Axes ---
    surface.draw_line(Point(0, origin_y), Point(width, origin_y), AXIS_COLOR)
    surface.draw_line(Point(origin_x, 0), Point(origin_x, height), AXIS_COLOR)

    # --- Origin ---
    surface.draw_text("0", Point(origin_x - 5, origin_y + 5), LABEL_COLOR, align="right", baseline="top")

    # --- X axis ticks ---
    i = grid_size
    while i < width / 2:
        if show_numbers:
            surface.draw_text(format_number(i / grid_size), Point(origin_x + i - 5, origin_y + 5),
                              LABEL_COLOR, align="right", baseline="top")
            surface.draw_text(format_number(-i / grid_size), Point(origin_x - i - 5, origin_y + 5),
                              LABEL_COLOR, align="right", baseline="top")

        surface.draw_line(Point(origin_x + i, origin_y - TICK_HALF_LENGTH),
                          Point(origin_x + i, origin_y + TICK_HALF_LENGTH), AXIS_COLOR)
        surface.draw_line(Point(origin_x - i, origin_y - TICK_HALF_LENGTH),
                          Point(origin_x - i, origin_y + TICK_HALF_LENGTH), AXIS_COLOR)
        i += grid_size

    # --- Y axis ticks ---
    i = grid_size
    while i < height / 2:
        if show_numbers:
            surface.draw_text(format_number(-i / grid_size), Point(origin_x - 5, origin_y + i + 5),
                              LABEL_COLOR, align="right", baseline="top")
            surface.draw_text(format_number(i / grid_size), Point(origin_x - 5, origin_y - i + 5),
                              LABEL_COLOR, align="right", baseline="top")

        surface.draw_line(Point(origin_x - TICK_HALF_LENGTH, origin_y + i),
                          Point(origin_x + TICK_HALF_LENGTH, origin_y + i), AXIS_COLOR)
        surface.draw_line(Point(origin_x - TICK_HALF_LENGTH, origin_y - i),
                          Point(origin_x + TICK_HALF_LENGTH, origin_y - i), AXIS_COLOR)
        i += grid_size


def draw_curves(session, surface, mapper, settings):
    for formula in session:
        for segment in session.curve(formula, mapper, settings["canvas_width"]):
            surface.draw_polyline(segment, formula.color, CURVE_WIDTH)


def draw_intersection_points(points, surface, mapper, settings):
    for point in points:
        # Spurious points next to a pole can carry an infinite y
        if not (math.isfinite(point.x) and math.isfinite(point.y)):
            continue
        center = mapper.to_screen(point)
        if not (math.isfinite(center.x) and math.isfinite(center.y)):
            continue
        surface.fill_circle(center, settings["point_radius"], settings["intersection_color"])
        surface.draw_text(format_point(point), Point(center.x + LABEL_OFFSET_X, center.y + LABEL_OFFSET_Y),
                          LABEL_COLOR, align="left", baseline="bottom")


def render(session, surface, settings):
    """Redraw everything; return the intersection points that were marked."""
    if surface is None:
        raise E.RenderError("No drawing surface available.", code="6000")

    mapper = mapper_from_settings(settings)
    draw_coordinate_system(surface, mapper, settings)
    draw_curves(session, surface, mapper, settings)

    points = session.intersections()
    draw_intersection_points(points, surface, mapper, settings)
    logger.debug("Rendered %d formula(s), %d intersection(s)", len(session), len(points))
    return points
