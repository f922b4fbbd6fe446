## parametric surfaces for solidkern
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

"""Surface variants.

There is a single variant, :class:`Swept`: the ruled surface traced by
translating a curve along a vector, ``S(u, v) = curve(u) + v * path``.
A plane is a line swept along a second direction, so sketches live on
``Swept`` surfaces too (see :meth:`Swept.xy_plane`), and the side faces
produced by sweep are the bottom edge's curve swept along the
extrusion path.

Surface coordinates are 2-tuples ``(u, v)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from solidkern.curves import Arc, Curve, Line
from solidkern.errors import DegenerateCurve
from solidkern.geom import (Point2, Point3, Vector3, add, cross, dot, epsilon,
                            mag, scale, sub, to_xyz, unit)


@dataclass(frozen=True)
class Swept:
    """A curve swept along ``path``."""

    curve: Curve
    path: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, 'path', to_xyz(self.path))
        path = self.path
        if mag(path) < epsilon:
            raise DegenerateCurve('sweep path has zero length',
                                  details={'path': path})
        if isinstance(self.curve, Line):
            d = self.curve.direction
            if mag(cross(d, path)) < epsilon * mag(d) * mag(path):
                raise DegenerateCurve('sweep path is parallel to the line',
                                      details={'direction': d, 'path': path})
        elif isinstance(self.curve, Arc):
            if abs(dot(path, self.curve.normal)) < epsilon * mag(path):
                raise DegenerateCurve('sweep path lies in the arc plane',
                                      details={'normal': self.curve.normal,
                                               'path': path})
        else:
            raise TypeError('not a curve: {!r}'.format(self.curve))

    @classmethod
    def xy_plane(cls) -> "Swept":
        return cls(Line((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)), (0.0, 1.0, 0.0))

    @classmethod
    def plane_from_points(cls, a, b, c) -> "Swept":
        """Plane through ``a``, ``b`` and ``c``; ``u`` runs from ``a``
        towards ``b`` and ``v`` from ``a`` towards ``c``."""
        a = to_xyz(a)
        return cls(Line.from_points(a, b), sub(to_xyz(c), a))

    def origin(self) -> Point3:
        if isinstance(self.curve, Line):
            return self.curve.origin
        return self.curve.center

    @property
    def is_plane(self) -> bool:
        return isinstance(self.curve, Line)

    def normal(self) -> Optional[Vector3]:
        """Unit normal, ``du x dv``.  Curved surfaces report the normal
        along the ``u=0`` ruling."""
        if isinstance(self.curve, Line):
            tangent = self.curve.direction
        else:
            tangent = self.curve.binormal
        return unit(cross(tangent, self.path))

    def point_model_to_surface(self, point) -> Point2:
        """Convert a model point into surface coordinates.

        Like the curve conversions, this projects rather than checks:
        a point off the surface yields the coordinates of a nearby
        surface point.
        """
        p = to_xyz(point)
        path = self.path
        if isinstance(self.curve, Line):
            d = self.curve.direction
            r = sub(p, self.curve.origin)
            dd = dot(d, d)
            dw = dot(d, path)
            ww = dot(path, path)
            rd = dot(r, d)
            rw = dot(r, path)
            det = dd * ww - dw * dw
            u = (rd * ww - rw * dw) / det
            v = (rw * dd - rd * dw) / det
            return (u, v)

        n = self.curve.normal
        v = dot(sub(p, self.curve.center), n) / dot(path, n)
        u = self.curve.point_model_to_curve(sub(p, scale(path, v)))[0]
        return (u, v)

    def point_surface_to_model(self, point: Point2) -> Point3:
        return add(self.curve.point_curve_to_model((point[0],)),
                   scale(self.path, point[1]))

    def vector_surface_to_model(self, vector: Point2) -> Vector3:
        return add(self.curve.vector_curve_to_model((vector[0],)),
                   scale(self.path, vector[1]))

    def transform(self, transform) -> "Swept":
        return Swept(self.curve.transform(transform),
                     transform.transform_vector(self.path))


Surface = Union[Swept]


__all__ = [
    'Swept',
    'Surface',
]
