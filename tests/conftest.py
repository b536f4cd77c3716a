import pytest

from Grapher import config_manager
from Grapher.Renderer import Surface


class RecordingSurface(Surface):
    """Surface that only remembers the calls it received."""

    def __init__(self):
        self.calls = []

    def clear(self, width, height):
        self.calls.append(("clear", width, height))

    def draw_line(self, start, end, color, width=1):
        self.calls.append(("line", start, end, color, width))

    def draw_polyline(self, points, color, width=1):
        self.calls.append(("polyline", list(points), color, width))

    def fill_circle(self, center, radius, color):
        self.calls.append(("circle", center, radius, color))

    def draw_text(self, text, position, color, align="left", baseline="bottom"):
        self.calls.append(("text", text, position, color, align, baseline))

    def of_kind(self, kind):
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def settings():
    return dict(config_manager.DEFAULT_SETTINGS)
