import math

import pytest

from Grapher import FormulaEngine
from Grapher.IntersectionEngine import (
    IntersectionPoint,
    bisect,
    find_all_intersections,
    find_intersections,
    round_display,
)


def compile_all(*formulas):
    return [FormulaEngine.compile_formula(formula) for formula in formulas]


def test_crossing_lines_meet_once_at_origin():
    f1, f2 = compile_all("x", "-x")
    points = find_intersections(f1, f2)
    assert len(points) == 1
    assert points[0].x == pytest.approx(0)
    assert points[0].y == pytest.approx(0)


def test_parabola_and_constant():
    f1, f2 = compile_all("x^2", "4")
    points = find_intersections(f1, f2)
    assert len(points) == 2
    assert (points[0].x, points[0].y) == pytest.approx((-2.0, 4.0))
    assert (points[1].x, points[1].y) == pytest.approx((2.0, 4.0))


def test_parallel_lines_never_meet():
    f1, f2 = compile_all("2x+1", "2x+3")
    assert find_intersections(f1, f2) == []


def test_roots_outside_the_domain_are_ignored():
    f1, f2 = compile_all("x", "15")
    assert find_intersections(f1, f2) == []
    assert len(find_intersections(f1, f2, start=10, end=20, step=0.3)) == 1


def test_grid_aligned_root_is_reported_twice():
    points = find_intersections(lambda x: x, lambda x: 0.0, start=-1, end=1, step=0.5)
    assert points == [IntersectionPoint(0.0, 0.0), IntersectionPoint(0.0, 0.0)]


def test_nan_never_opens_a_bracket():
    assert find_intersections(lambda x: math.nan, lambda x: x) == []


def test_y_comes_from_the_first_function():
    f1, f2 = compile_all("x+1", "3-x")
    assert set(find_intersections(f1, f2)) == {IntersectionPoint(1.0, 2.0)}


def test_output_is_reproducible():
    f1, f2 = compile_all("x^3-x", "0.5x")
    assert find_intersections(f1, f2) == find_intersections(f1, f2)


def test_bisection_uses_a_fixed_number_of_rounds():
    calls = []

    def difference(x):
        calls.append(x)
        return x - 0.3

    mid = bisect(difference, 0.0, 1.0, iterations=10)
    assert abs(mid - 0.3) < 1.0 / 2 ** 10
    assert len(calls) == 20


def test_zero_rounds_return_bracket_midpoint():
    assert bisect(lambda x: x, -1.0, 3.0, iterations=0) == 1.0


@pytest.mark.parametrize("value, expected", [
    (1.005000001, 1.01),
    (-2.0000039, -2.0),
    (-1.995, -1.99),
    (2.3451, 2.35),
    (-0.001, 0.0),
    (1e307, 1e307),
    (-1e307, -1e307),
])
def test_round_display(value, expected):
    assert round_display(value) == pytest.approx(expected)


def test_round_display_keeps_non_finite():
    assert round_display(math.inf) == math.inf
    assert math.isnan(round_display(math.nan))


def test_all_pairs_are_searched():
    functions = compile_all("x", "-x", "2")
    points = find_all_intersections(functions)
    # x/-x at 0, x/2 at 2, -x/2 at -2; y is taken from the first function of each pair
    assert list(dict.fromkeys((point.x, point.y) for point in points)) == [(0.0, 0.0), (2.0, 2.0), (-2.0, 2.0)]


def test_single_function_has_no_pairs():
    assert find_all_intersections(compile_all("x")) == []


def test_huge_equal_constants_do_not_overflow():
    f1, f2 = compile_all("10^307", "10^307")
    points = find_intersections(f1, f2, start=0, end=1, step=0.5)
    assert points
    assert all(point.y == 1e307 for point in points)


def test_step_that_cannot_advance_is_rejected():
    with pytest.raises(ValueError):
        find_intersections(lambda x: x, lambda x: 0.0, start=1e20, end=2e20, step=1.0)
