# CurveEngine.py
"""
Curve sampling: walks a compiled formula across a model x range and turns
the samples into screen-space polylines.

Samples with a non-finite value are dropped and break the polyline, so a
pole such as 1/x at x = 0 yields two separate segments instead of a line
jumping across the discontinuity.
"""

import math

from .CoordinateMapper import Point

PLOT_STEP = 0.1


def sample_curve(function, mapper, domain=None, step=PLOT_STEP, width=None):
    """Return a list of segments, each an ordered list of screen Points.

    Without an explicit domain the visible surface width is used, which then
    has to be passed as `width`.
    """
    if domain is None:
        if width is None:
            raise ValueError("sample_curve needs either a domain or the surface width")
        domain = mapper.visible_domain(width)
    if step <= 0:
        raise ValueError(f"Sampling step must be positive, got {step}")

    start_x, end_x = domain
    segments = []
    current_segment = []

    x = start_x
    while x <= end_x:
        y = function(x)
        # Huge finite values can still overflow once scaled to pixels
        screen_y = mapper.to_screen_y(y) if math.isfinite(y) else math.nan
        if math.isfinite(screen_y):
            current_segment.append(Point(mapper.to_screen_x(x), screen_y))
        elif current_segment:
            # Gap: the next finite sample opens a new segment
            segments.append(current_segment)
            current_segment = []
        if x + step == x:
            raise ValueError(f"Sampling step {step} is too small to advance past x = {x}")
        x += step

    if current_segment:
        segments.append(current_segment)
    return segments
