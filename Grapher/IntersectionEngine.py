# IntersectionEngine.py
"""
Intersection search between pairs of curves.

The difference d(x) = f1(x) - f2(x) is scanned at a fixed step. Every
interval where d changes sign (or touches zero) is refined by a fixed number
of bisection rounds. This is a heuristic: tangent curves can be missed and
poles can produce spurious points.
"""

import logging
import math
from dataclasses import dataclass
from itertools import combinations

logger = logging.getLogger(__name__)

SCAN_START = -10
SCAN_END = 10
SCAN_STEP = 0.01
BISECTION_ITERATIONS = 10
DISPLAY_DECIMALS = 2


@dataclass(frozen=True)
class IntersectionPoint:
    """Model-space point, rounded for display."""
    x: float
    y: float


def round_display(value, decimals=DISPLAY_DECIMALS):
    """Round half up (towards +inf) to a fixed number of decimals.

    Non-finite values, and values too large to scale, are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** decimals
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    # + 0.0 turns -0.0 into 0.0
    return math.floor(scaled + 0.5) / factor + 0.0


def bisect(difference, left, right, iterations=BISECTION_ITERATIONS):
    """Shrink [left, right] around a sign change of `difference`; return the midpoint."""
    for _ in range(iterations):
        mid = (left + right) / 2
        if difference(left) * difference(mid) <= 0:
            right = mid
        else:
            left = mid
    return (left + right) / 2


def find_intersections(f1, f2, start=SCAN_START, end=SCAN_END, step=SCAN_STEP,
                       iterations=BISECTION_ITERATIONS):
    """Return the intersections of f1 and f2 on [start, end] in ascending x.

    A root landing exactly on a scan point is reported twice, once from each
    adjacent interval.
    """
    if step <= 0:
        raise ValueError(f"Scan step must be positive, got {step}")

    def difference(x):
        return f1(x) - f2(x)

    intersections = []
    x = start
    while x <= end:
        next_x = x + step
        if next_x == x:
            raise ValueError(f"Scan step {step} is too small to advance past x = {x}")
        # NaN products compare False and never open a bracket
        if difference(x) * difference(next_x) <= 0:
            intersect_x = bisect(difference, x, next_x, iterations)
            intersect_y = f1(intersect_x)
            intersections.append(IntersectionPoint(round_display(intersect_x), round_display(intersect_y)))
        x = next_x

    return intersections


def find_all_intersections(functions, **scan_options):
    """Run find_intersections over every unordered pair, in registration order."""
    all_points = []
    for f1, f2 in combinations(functions, 2):
        points = find_intersections(f1, f2, **scan_options)
        logger.debug("%s x %s: %d intersection(s)", f1, f2, len(points))
        all_points.extend(points)
    return all_points
