# CoordinateMapper.py
"""
Model <-> screen coordinate mapping.

Model space is the mathematical (x, y) plane, y growing upwards.
Screen space is the pixel grid of the drawing surface, y growing downwards.
"""

import math
from dataclasses import dataclass

from . import error as E


@dataclass(frozen=True)
class Point:
    """A 2D point. Whether it lives in model or screen space is up to the caller."""
    x: float
    y: float


class CoordinateMapper:
    """Uniform-scale affine transform anchored at a screen origin."""

    def __init__(self, origin_x, origin_y, scale):
        if not math.isfinite(scale) or scale <= 0:
            raise E.ConfigurationError(f"Scale must be positive, got {scale}", code="5000")
        self.origin_x = origin_x
        self.origin_y = origin_y
        self.scale = scale

    @classmethod
    def centered(cls, width, height, scale):
        """Mapper whose origin sits in the middle of a width x height surface."""
        return cls(width / 2, height / 2, scale)

    def to_screen_x(self, x):
        return self.origin_x + x * self.scale

    def to_screen_y(self, y):
        # Screen y grows downwards
        return self.origin_y - y * self.scale

    def to_model_x(self, screen_x):
        return (screen_x - self.origin_x) / self.scale

    def to_model_y(self, screen_y):
        return (self.origin_y - screen_y) / self.scale

    def to_screen(self, point):
        return Point(self.to_screen_x(point.x), self.to_screen_y(point.y))

    def to_model(self, point):
        return Point(self.to_model_x(point.x), self.to_model_y(point.y))

    def visible_domain(self, width):
        """Model x range spanning the full surface width."""
        return (-(self.origin_x / self.scale), (width - self.origin_x) / self.scale)

    def __eq__(self, other):
        if not isinstance(other, CoordinateMapper):
            return NotImplemented
        return (self.origin_x, self.origin_y, self.scale) == (other.origin_x, other.origin_y, other.scale)

    def __hash__(self):
        return hash((self.origin_x, self.origin_y, self.scale))

    def __repr__(self):
        return f"CoordinateMapper(origin=({self.origin_x}, {self.origin_y}), scale={self.scale})"
