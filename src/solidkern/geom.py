## foundational scalar, vector and tolerance operations for solidkern
## Copyright (c) 2020 Richard DeVaul
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

"""foundational computational geometry helpers for **solidkern**

====================
OVERVIEW
====================

The solidkern.geom module provides the scalar and vector operations
that the rest of the kernel is built on, the shared comparison
``epsilon``, the :class:`Tolerance` type used by curve approximation,
and axis-aligned bounding boxes.

constants
=========

``epsilon`` and ``pi2`` (2*pi).  Every geometric predicate in the
kernel goes through ``close()`` or ``vclose()``, which use ``epsilon``
unless told otherwise.  Redefine it at your peril.

scalars
=======

Scalars are ordinary Python ``float`` values.  ``scalar()`` converts a
number to ``float`` and refuses booleans and NaN, which valid kernel
operations never produce.

points and vectors
==================

Points and vectors are tuples of floats.  The number of components
tells you which space they live in: one component for curve
coordinates, two for surface coordinates, three for model space.
Unlike the homogeneous four-vectors used by ``xform``, these carry no
``w`` component; ``xform.Matrix`` adds and removes it as needed.

"""

from __future__ import annotations

from dataclasses import dataclass
from math import atan2, isfinite, isnan, pi, sqrt
from typing import Iterable, Sequence, Tuple, Union

from solidkern.errors import NonPositiveTolerance

## constants
epsilon = 0.000005
pi2 = 2.0 * pi

Point1 = Tuple[float]
Point2 = Tuple[float, float]
Point3 = Tuple[float, float, float]
Vector2 = Tuple[float, float]
Vector3 = Tuple[float, float, float]


## operations on scalars
## -----------------------

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n, bool)) and isinstance(n, (int, float))


def scalar(x) -> float:
    """Return ``x`` as a float, refusing booleans and NaN."""
    if not isgoodnum(x) or isnan(x):
        raise ValueError('bad scalar value: {}'.format(x))
    return float(x)


## are two scalars the same to within a tolerance, which defaults to
## epsilon
def close(a, b, tol=epsilon):
    """ are two scalars the same within ``tol``
    """
    return abs(a - b) < tol


def normalize_angle(angle: float) -> float:
    """Map an angle in radians onto ``[0, 2*pi)``."""
    angle = angle % pi2
    if angle >= pi2:
        angle = 0.0
    return angle


def angle_of(x: float, y: float) -> float:
    """``atan2`` mapped onto ``[0, 2*pi)``.

    Negative results get ``2*pi`` added rather than going through a
    modulo, so exact angles such as ``pi`` come back unchanged.
    """
    a = atan2(y, x)
    if a >= 0.0:
        return a
    return a + pi2


## operations on vectors
## ------------------------

def point(*coords) -> Tuple[float, ...]:
    """Make a point (or vector) tuple from numbers or a single sequence."""
    if len(coords) == 1 and isinstance(coords[0], (tuple, list)):
        coords = tuple(coords[0])
    if not coords:
        raise ValueError('cannot make a point without coordinates')
    return tuple(scalar(c) for c in coords)


vector = point


def to_xyz(v: Sequence[float]) -> Vector3:
    """Lift a 1, 2 or 3 component tuple into model space (missing
    components are zero)."""
    if len(v) > 3:
        raise ValueError('too many components for a 3D value: {}'.format(v))
    padded = tuple(float(c) for c in v) + (0.0,) * (3 - len(v))
    return padded


def add(a, b):
    """ `a + b`, componentwise"""
    return tuple(x + y for x, y in zip(a, b))


def sub(a, b):
    """ `a - b`, componentwise"""
    return tuple(x - y for x, y in zip(a, b))


def scale(a, c):
    """ vector `a` scaled by scalar `c`"""
    return tuple(x * c for x in a)


def dot(a, b):
    return sum(x * y for x, y in zip(a, b))


def cross(a, b) -> Vector3:
    """ 3D cross product, `a x b`"""
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def mag(a):
    return sqrt(dot(a, a))


def dist(a, b):  # compute distance between two points a & b
    return mag(sub(a, b))


def unit(a):
    """Return ``a`` scaled to unit length, or ``None`` if it has no
    usable direction."""
    m = mag(a)
    if m < epsilon:
        return None
    return scale(a, 1.0 / m)


## determine if two points or vectors are the same, to within a
## tolerance
def vclose(a, b, tol=epsilon):
    if len(a) != len(b):
        return False
    return dist(a, b) < tol


## tolerances
## ------------------------

@dataclass(frozen=True, order=True)
class Tolerance:
    """Maximum allowed deviation between an approximation and the true
    geometry.  Always strictly positive."""

    value: float

    def __post_init__(self) -> None:
        if not isgoodnum(self.value) or not isfinite(self.value) \
           or self.value <= 0.0:
            raise NonPositiveTolerance(
                'tolerance must be a positive number, got {}'.format(self.value),
                details={'value': self.value})
        object.__setattr__(self, 'value', float(self.value))

    def __float__(self) -> float:
        return self.value


def as_tolerance(t: Union[Tolerance, float, int]) -> Tolerance:
    """Accept either a :class:`Tolerance` or a plain number."""
    if isinstance(t, Tolerance):
        return t
    return Tolerance(t)


## bounding boxes
## ------------------------

@dataclass(frozen=True)
class Aabb:
    """Axis-aligned bounding box spanning ``min`` to ``max``."""

    min: Point3
    max: Point3

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "Aabb":
        pts = [to_xyz(p) for p in points]
        if not pts:
            raise ValueError('cannot compute the bounding box of no points')
        lo = tuple(min(p[i] for p in pts) for i in range(3))
        hi = tuple(max(p[i] for p in pts) for i in range(3))
        return cls(lo, hi)

    def merged(self, other: "Aabb") -> "Aabb":
        lo = tuple(min(a, b) for a, b in zip(self.min, other.min))
        hi = tuple(max(a, b) for a, b in zip(self.max, other.max))
        return Aabb(lo, hi)

    def with_max_z(self, z: float) -> "Aabb":
        return Aabb(self.min, (self.max[0], self.max[1], float(z)))

    @property
    def size(self) -> Vector3:
        return sub(self.max, self.min)

    def contains(self, p: Sequence[float], tol=epsilon) -> bool:
        p = to_xyz(p)
        return all(self.min[i] - tol <= p[i] <= self.max[i] + tol
                   for i in range(3))


__all__ = [
    'epsilon',
    'pi2',
    'Point1',
    'Point2',
    'Point3',
    'Vector2',
    'Vector3',
    'isgoodnum',
    'scalar',
    'close',
    'normalize_angle',
    'angle_of',
    'point',
    'vector',
    'to_xyz',
    'add',
    'sub',
    'scale',
    'dot',
    'cross',
    'mag',
    'dist',
    'unit',
    'vclose',
    'Tolerance',
    'as_tolerance',
    'Aabb',
]
