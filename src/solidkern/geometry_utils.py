"""Small value types shared by the kernel, the triangulator and mesh
consumers: triangles, segments and colors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from solidkern.geom import Point3, Vector3, cross, epsilon, mag, sub

Color = Tuple[int, int, int, int]

DEFAULT_COLOR: Color = (255, 0, 0, 255)


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle in model space."""

    v0: Point3
    v1: Point3
    v2: Point3

    def points(self) -> Tuple[Point3, Point3, Point3]:
        return self.v0, self.v1, self.v2

    def normal(self) -> Vector3 | None:
        return triangle_normal(self.v0, self.v1, self.v2)

    def area(self) -> float:
        return triangle_area(self.v0, self.v1, self.v2)


@dataclass(frozen=True)
class Segment:
    """Straight line segment from ``a`` to ``b``."""

    a: Point3
    b: Point3

    def points(self) -> Tuple[Point3, Point3]:
        return self.a, self.b

    def length(self) -> float:
        return mag(sub(self.b, self.a))


def triangle_normal(v0: Point3, v1: Point3, v2: Point3) -> Vector3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = cross(sub(v1, v0), sub(v2, v0))
    length = mag(n)
    if length <= epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def triangle_area(v0: Point3, v1: Point3, v2: Point3) -> float:
    """Return the area of a triangle."""

    return 0.5 * mag(cross(sub(v1, v0), sub(v2, v0)))


def as_color(color) -> Color:
    """Validate an RGBA color given as four 0-255 integers."""

    if color is None:
        return DEFAULT_COLOR
    rgba = tuple(color)
    if len(rgba) != 4 or not all(isinstance(c, int) and 0 <= c <= 255 for c in rgba):
        raise ValueError(f"color must be four integers in 0..255, got {color!r}")
    return rgba


__all__ = [
    "Color",
    "DEFAULT_COLOR",
    "Triangle",
    "Segment",
    "triangle_normal",
    "triangle_area",
    "as_color",
]
