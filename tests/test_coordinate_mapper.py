import pytest

from Grapher import error as E
from Grapher.CoordinateMapper import CoordinateMapper, Point


@pytest.fixture
def mapper():
    return CoordinateMapper.centered(800, 800, 50)


def test_origin_maps_to_center(mapper):
    assert mapper.to_screen(Point(0, 0)) == Point(400, 400)


def test_y_axis_is_flipped(mapper):
    assert mapper.to_screen_x(2) == 500
    assert mapper.to_screen_y(2) == 300
    assert mapper.to_screen_y(-1) == 450


@pytest.mark.parametrize("point", [
    Point(0, 0),
    Point(1.25, -3.5),
    Point(-7.9, 7.9),
    Point(1e-9, 123456.789),
])
def test_round_trip(mapper, point):
    restored = mapper.to_model(mapper.to_screen(point))
    assert restored.x == pytest.approx(point.x)
    assert restored.y == pytest.approx(point.y)


def test_visible_domain_spans_width(mapper):
    assert mapper.visible_domain(800) == (-8, 8)
    assert CoordinateMapper(100, 0, 50).visible_domain(800) == (-2, 14)


@pytest.mark.parametrize("scale", [0, -1, float("inf")])
def test_scale_must_be_positive(scale):
    with pytest.raises(E.ConfigurationError):
        CoordinateMapper(0, 0, scale)


def test_mappers_compare_by_value():
    assert CoordinateMapper(1, 2, 3) == CoordinateMapper(1, 2, 3)
    assert hash(CoordinateMapper(1, 2, 3)) == hash(CoordinateMapper(1, 2, 3))
    assert CoordinateMapper(1, 2, 3) != CoordinateMapper(1, 2, 4)
