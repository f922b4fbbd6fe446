## parametric curves for solidkern: lines and circular arcs
## Copyright (c) 2025 solidkern contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Curve variants.

A curve maps its own one-dimensional coordinate space onto model
space.  Curve coordinates are 1-tuples (``Point1``), model points are
3-tuples.  There are two variants, :class:`Line` and :class:`Arc`;
code that needs to behave differently per variant dispatches with
``isinstance`` and raises ``TypeError`` for anything else, so a new
curve kind means a new class here plus a branch at each dispatch site.

Lines
=====

``Line(origin, direction)`` is parameterised as
``origin + t * direction``.  ``Line.from_points(a, b)`` puts ``a`` at
``t=0`` and ``b`` at ``t=1``.

Arcs
====

``Arc(center, radius, length, normal)`` is a circle or part of one.
``radius`` is the vector from the center to the point at curve
coordinate 0; it may be given with two components, in which case it
lies in the XY plane.  ``normal`` is the axis the arc turns about and
defaults to +Z.  The curve coordinate is the angle in radians from
``radius``, measured counter-clockwise about ``normal``.  ``length``
is the signed angular extent: positive arcs run counter-clockwise,
negative ones clockwise, and ``|length| >= 2*pi`` is a full circle.

"""

from __future__ import annotations

from dataclasses import dataclass
from math import acos, ceil, cos, sin
from typing import List, Optional, Union

from solidkern.errors import DegenerateCurve
from solidkern.geom import (Point1, Point3, Vector3, add, angle_of, as_tolerance,
                            cross, dot, epsilon, mag, pi2, scalar, scale, sub,
                            to_xyz, unit)


@dataclass(frozen=True)
class Line:
    """Straight line through ``origin`` along ``direction``."""

    origin: Point3
    direction: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, 'origin', to_xyz(self.origin))
        object.__setattr__(self, 'direction', to_xyz(self.direction))
        if mag(self.direction) < epsilon:
            raise DegenerateCurve('line direction has zero length',
                                  details={'origin': self.origin,
                                           'direction': self.direction})

    @classmethod
    def from_points(cls, a, b) -> "Line":
        a = to_xyz(a)
        return cls(a, sub(to_xyz(b), a))

    @property
    def is_closed(self) -> bool:
        return False

    def point_model_to_curve(self, point) -> Point1:
        """Project ``point`` onto the line and return its coordinate."""
        d = self.direction
        v = sub(to_xyz(point), self.origin)
        return (dot(v, d) / dot(d, d),)

    def point_curve_to_model(self, point: Point1) -> Point3:
        return add(self.origin, self.vector_curve_to_model(point))

    def vector_curve_to_model(self, vector: Point1) -> Vector3:
        return scale(self.direction, vector[0])

    def transform(self, transform) -> "Line":
        return Line(transform.transform_point(self.origin),
                    transform.transform_vector(self.direction))

    def segment(self, t0: float, t1: float) -> "Line":
        """The part of the line between coordinates ``t0`` and ``t1``,
        reparameterised onto ``[0, 1]``."""
        return Line(self.point_curve_to_model((t0,)),
                    scale(self.direction, t1 - t0))

    def approx(self, tolerance, out: Optional[List[Point3]] = None) -> List[Point3]:
        # a line is its own approximation; the vertices of the edge it
        # belongs to bound it
        as_tolerance(tolerance)
        if out is None:
            out = []
        return out


@dataclass(frozen=True)
class Arc:
    """Circular arc about ``center``."""

    center: Point3
    radius: Vector3
    length: float = pi2
    normal: Vector3 = (0.0, 0.0, 1.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'center', to_xyz(self.center))
        object.__setattr__(self, 'radius', to_xyz(self.radius))
        object.__setattr__(self, 'length', scalar(self.length))
        details = {'center': self.center, 'radius': self.radius,
                   'length': self.length}
        n = unit(to_xyz(self.normal))
        if n is None:
            raise DegenerateCurve('arc normal has zero length', details=details)
        object.__setattr__(self, 'normal', n)
        if mag(self.radius) < epsilon:
            raise DegenerateCurve('arc radius is zero', details=details)
        if abs(self.length) < epsilon:
            raise DegenerateCurve('arc length is zero', details=details)
        if abs(dot(unit(self.radius), n)) > epsilon:
            raise DegenerateCurve('arc radius does not lie in the arc plane',
                                  details=details)

    @classmethod
    def circle(cls, center, radius: float, normal=(0.0, 0.0, 1.0)) -> "Arc":
        """Full circle of scalar ``radius``, starting on the +X side
        when ``normal`` is +Z."""
        n = unit(to_xyz(normal))
        if n is None:
            raise DegenerateCurve('arc normal has zero length')
        # any direction perpendicular to the normal will do; prefer +X
        ref = (1.0, 0.0, 0.0) if abs(n[0]) < 0.9 else (0.0, 1.0, 0.0)
        a = unit(sub(ref, scale(n, dot(ref, n))))
        return cls(center, scale(a, radius), pi2, n)

    def origin(self) -> Point3:
        """Access the origin of the curve's coordinate system"""
        return self.center

    @property
    def radius_magnitude(self) -> float:
        return mag(self.radius)

    @property
    def binormal(self) -> Vector3:
        """In-plane vector a quarter turn ahead of ``radius``, with the
        same magnitude."""
        return cross(self.normal, self.radius)

    @property
    def is_closed(self) -> bool:
        return abs(self.length) >= pi2 - epsilon

    def point_model_to_curve(self, point) -> Point1:
        """Convert a point in model coordinates to curve coordinates.

        Returns a coordinate in ``[0, 2*pi)``.  The point is projected
        onto the arc plane and its angle taken from the center; the
        radius magnitude is never divided out, which keeps the result
        robust against floating point error.

        The point is not checked against the curve.  Passing a point
        that is not on the arc, intentionally or not, silently returns
        the coordinate of its projection.
        """
        v = sub(to_xyz(point), self.center)
        x = dot(v, self.radius)
        y = dot(v, self.binormal)
        return (angle_of(x, y),)

    def point_curve_to_model(self, point: Point1) -> Point3:
        return add(self.center, self.vector_curve_to_model(point))

    def vector_curve_to_model(self, vector: Point1) -> Vector3:
        angle = vector[0]
        c = cos(angle)
        s = sin(angle)
        return add(scale(self.radius, c), scale(self.binormal, s))

    def transform(self, transform) -> "Arc":
        """Create a new arc transformed by ``transform``.

        The radius and its quarter-turn partner are transformed as
        vectors and the normal rebuilt from them, so the angular
        parameterisation is carried over exactly.  ``length`` is
        unchanged.
        """
        radius = transform.transform_vector(self.radius)
        binormal = transform.transform_vector(self.binormal)
        normal = cross(radius, binormal)
        return Arc(transform.transform_point(self.center), radius,
                   self.length, normal)

    def segment(self, t0: float, t1: float) -> "Arc":
        """Sub-arc running from coordinate ``t0`` to ``t1``."""
        return Arc(self.center, self.vector_curve_to_model((t0,)),
                   t1 - t0, self.normal)

    def approx(self, tolerance, out: Optional[List[Point3]] = None) -> List[Point3]:
        """Approximate the arc, appending points to ``out``.

        ``tolerance`` specifies how much the approximation is allowed
        to deviate from the arc.  The points are the vertices of a
        regular polygon whose circumscribed circle is the arc's circle;
        the gap between polygon and circle is the difference between
        the circumradius and the apothem.  The first point is at curve
        coordinate 0, and for full circles the last point is not
        repeated.
        """
        tolerance = as_tolerance(tolerance)
        if out is None:
            out = []

        n = self.number_of_vertices(tolerance, self.radius_magnitude, self.length)

        for i in range(n):
            angle = self.length / n * i
            out.append(self.point_curve_to_model((angle,)))
        return out

    @staticmethod
    def number_of_vertices(tolerance, radius: float, length: float) -> int:
        tolerance = as_tolerance(tolerance)
        length = abs(length)

        ratio = 1.0 - tolerance.value / radius
        if ratio >= -1.0:
            n = int(ceil(length / 2.0 / acos(ratio)))
        else:
            # the tolerance exceeds the circle's diameter; any polygon
            # will do
            n = 0

        if length >= pi2:
            return max(n, 3)
        return max(n, 2)


Curve = Union[Line, Arc]


def is_curve(x) -> bool:
    return isinstance(x, (Line, Arc))


__all__ = [
    'Line',
    'Arc',
    'Curve',
    'is_curve',
]
