"""Triangulation of solidkern faces.

We delegate to ``mapbox-earcut`` (the fast ear clipping implementation
used by Mapbox GL) to keep the logic compact and reliable.  B-rep faces
are approximated, mapped into their surface's ``(u, v)`` space,
triangulated there and lifted back onto the model points they came
from.  The resulting ``(Triangle, Color)`` lists are what renderers and
exporters consume.
"""

from __future__ import annotations

from math import pi
from typing import Any, Iterable, List, Sequence, Tuple

import mapbox_earcut as _earcut
import numpy as np
import structlog

from solidkern.approx import Approximation
from solidkern.config import get_config
from solidkern.curves import Arc
from solidkern.geom import as_tolerance, epsilon, pi2
from solidkern.geometry_utils import Color, Triangle
from solidkern.topology import FaceBRep, FaceTriangles, Shape

log = structlog.get_logger(__name__)

Point2D = Tuple[float, float]


def triangulate_polygon(outer: Sequence[Sequence[float]],
                        holes: Iterable[Sequence[Sequence[float]]] | None = None
                        ) -> List[List[Point2D]]:
    """Return triangles covering ``outer`` minus any ``holes``.

    ``outer`` and each entry in ``holes`` is expected to be a sequence of
    XY-like points.  Degenerate loops (fewer than three distinct points)
    are ignored.  The returned triangles are lists of three ``(x, y)``
    pairs, counter-clockwise.
    """

    outer_loop, _ = _prepare_loop(outer, want_ccw=True)
    hole_loops = [_prepare_loop(hole, want_ccw=False)[0] for hole in holes or []]
    return [[a, b, c] for a, b, c in _earcut_loops(
        [(loop, loop) for loop in [outer_loop] + hole_loops])]


def _earcut_loops(loops: List[Tuple[List[Point2D], List[Any]]]) -> List[Tuple[Any, Any, Any]]:
    """Triangulate prepared loops (outer first), returning payload
    triples wound counter-clockwise in 2D."""

    if not loops or len(loops[0][0]) < 3:
        return []

    point_map: List[Point2D] = []
    payloads: List[Any] = []
    ring_ends: List[int] = []

    for loop, payload in loops:
        if len(loop) < 3:
            continue
        point_map.extend(loop)
        payloads.extend(payload)
        ring_ends.append(len(point_map))

    vertices = np.asarray(point_map, dtype=np.float64)
    ring_array = np.asarray(ring_ends, dtype=np.uint32)
    indices = _earcut.triangulate_float64(vertices, ring_array)

    triangles = []
    for i in range(0, len(indices), 3):
        a, b, c = int(indices[i]), int(indices[i + 1]), int(indices[i + 2])
        if _signed_area([point_map[a], point_map[b], point_map[c]]) < 0:
            b, c = c, b
        triangles.append((payloads[a], payloads[b], payloads[c]))
    return triangles


def _prepare_loop(points: Sequence[Sequence[float]], *, want_ccw: bool,
                  payload: Sequence[Any] | None = None
                  ) -> Tuple[List[Point2D], List[Any]]:
    loop: List[Point2D] = []
    carried: List[Any] = []
    for i, pt in enumerate(points):
        x, y = float(pt[0]), float(pt[1])
        if loop and _near(loop[-1], (x, y)):
            continue
        loop.append((x, y))
        carried.append(payload[i] if payload is not None else (x, y))
    if loop and _near(loop[0], loop[-1]):
        loop.pop()
        carried.pop()
    if len(loop) < 3:
        return loop, carried
    area = _signed_area(loop)
    if (want_ccw and area < 0) or (not want_ccw and area > 0):
        loop.reverse()
        carried.reverse()
    return loop, carried


def _near(p1: Point2D, p2: Point2D) -> bool:
    return abs(p1[0] - p2[0]) <= epsilon and abs(p1[1] - p2[1]) <= epsilon


def _signed_area(loop: Sequence[Point2D]) -> float:
    total = 0.0
    for i, (x0, y0) in enumerate(loop):
        x1, y1 = loop[(i + 1) % len(loop)]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def _point_in_polygon(p: Point2D, loop: Sequence[Point2D]) -> bool:
    inside = False
    x, y = p
    n = len(loop)
    for i in range(n):
        x0, y0 = loop[i]
        x1, y1 = loop[(i + 1) % n]
        if (y0 > y) != (y1 > y):
            xi = x0 + (y - y0) * (x1 - x0) / (y1 - y0)
            if x < xi:
                inside = not inside
    return inside


def _surface_loop(surface, points) -> List[Point2D]:
    uv = [surface.point_model_to_surface(p) for p in points]
    if isinstance(surface.curve, Arc):
        # keep u continuous across the seam at 2*pi
        unwrapped = []
        offset = 0.0
        for i, (u, v) in enumerate(uv):
            if i:
                prev = uv[i - 1][0]
                if u - prev > pi:
                    offset -= pi2
                elif prev - u > pi:
                    offset += pi2
            unwrapped.append((u + offset, v))
        uv = unwrapped
    return uv


def triangulate_face(face, tolerance=None) -> List[Tuple[Triangle, Color]]:
    """Triangulate one face into colored model-space triangles.

    Triangles are wound so their normals follow the surface normal.
    """
    if isinstance(face, FaceTriangles):
        return list(face.triangles)
    if not isinstance(face, FaceBRep):
        raise TypeError('not a face: {!r}'.format(face))

    tolerance = get_config().tolerance if tolerance is None else as_tolerance(tolerance)
    surface = face.surface

    def prepared(cycle, want_ccw):
        points = Approximation.for_cycle(cycle, tolerance).points
        return _prepare_loop(_surface_loop(surface, points), want_ccw=want_ccw,
                             payload=points)

    exteriors = [prepared(c, True) for c in face.exteriors.as_canonical()]
    interiors = [prepared(c, False) for c in face.interiors.as_canonical()]

    holes: List[List] = [[] for _ in exteriors]
    for hole in interiors:
        if len(hole[0]) < 3 or not exteriors:
            continue
        owner = 0
        for i, (loop, _) in enumerate(exteriors):
            if len(loop) >= 3 and _point_in_polygon(hole[0][0], loop):
                owner = i
                break
        holes[owner].append(hole)

    result = []
    for ext, ext_holes in zip(exteriors, holes):
        if len(ext[0]) < 3 or abs(_signed_area(ext[0])) <= epsilon:
            log.debug('skipping degenerate boundary', points=len(ext[0]))
            continue
        for a, b, c in _earcut_loops([ext] + ext_holes):
            result.append((Triangle(a, b, c), face.color))
    return result


def triangulate_shape(shape: Shape, tolerance=None) -> List[Tuple[Triangle, Color]]:
    """Triangulate every face of ``shape``."""
    tolerance = get_config().tolerance if tolerance is None else as_tolerance(tolerance)
    triangles: List[Tuple[Triangle, Color]] = []
    for face in shape.faces:
        triangles.extend(triangulate_face(face, tolerance))
    log.debug('triangulated shape', faces=len(shape.faces), triangles=len(triangles))
    return triangles


__all__ = [
    'triangulate_polygon',
    'triangulate_face',
    'triangulate_shape',
]
