## polyline approximation of solidkern edges, cycles and faces
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

"""Tolerance-bounded approximation of topology.

Edges become polylines running from their start vertex to their end
vertex.  Vertex positions are used exactly, so the polylines of edges
that share a vertex meet at the same point.  Cycles become closed
loops, faces the union of their cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import structlog

from solidkern.curves import Arc, Line
from solidkern.geom import Point3, as_tolerance, close, pi2, vclose
from solidkern.geometry_utils import Segment
from solidkern.topology import Cycle, Edge, FaceBRep, FaceTriangles

log = structlog.get_logger(__name__)


def _arc_span(arc: Arc, t0: float, t1: float) -> float:
    # signed angle from t0 to t1 following the arc's orientation
    if close(t0, t1):
        return arc.length
    if arc.length > 0.0:
        return (t1 - t0) % pi2
    return -((t0 - t1) % pi2)


def approximate_edge(edge: Edge, tolerance) -> List[Point3]:
    """Approximate ``edge`` as a polyline from its start to its end.

    A continuous edge is returned as a closed polyline whose last point
    repeats the first.
    """
    tolerance = as_tolerance(tolerance)
    curve = edge.curve.canonical

    if edge.vertices is None:
        points = curve.approx(tolerance)
        points.append(points[0])
        return points

    a, b = edge.vertices
    start = a.canonical.position
    end = b.canonical.position

    if isinstance(curve, Line):
        return [start, end]
    if isinstance(curve, Arc):
        t0 = a.local[0] if a.local is not None else \
            curve.point_model_to_curve(start)[0]
        t1 = b.local[0] if b.local is not None else \
            curve.point_model_to_curve(end)[0]
        inner = curve.segment(t0, t0 + _arc_span(curve, t0, t1)).approx(tolerance)
        return [start] + inner[1:] + [end]
    raise TypeError('not a curve: {!r}'.format(curve))


class _Run(NamedTuple):
    start: Optional[str]
    end: Optional[str]
    points: List[Point3]

    def reversed(self) -> "_Run":
        return _Run(self.end, self.start, list(reversed(self.points)))


def _runs(edges: Iterable[Edge], tolerance) -> List[_Run]:
    runs = []
    for edge in edges:
        ids = edge.global_vertices()
        start, end = (ids[0].id, ids[1].id) if ids else (None, None)
        runs.append(_Run(start, end, approximate_edge(edge, tolerance)))
    return runs


def _chain(runs: List[_Run]) -> Optional[List[_Run]]:
    """Order and orient runs head-to-tail, or return ``None`` if they
    do not form a chain."""
    chain = [runs[0]]
    remaining = list(runs[1:])
    while remaining:
        end = chain[-1].end
        if end is None:
            return None
        for i, run in enumerate(remaining):
            if run.start == end:
                nxt = run
                break
            if run.end == end:
                nxt = run.reversed()
                break
        else:
            return None
        del remaining[i]
        chain.append(nxt)
    return chain


def _dedup(points: Sequence[Point3]) -> List[Point3]:
    result: List[Point3] = []
    for p in points:
        if not result or not vclose(result[-1], p):
            result.append(p)
    return result


@dataclass(frozen=True)
class Approximation:
    """Points and segments approximating some topology."""

    points: Tuple[Point3, ...]
    segments: Tuple[Segment, ...]

    @classmethod
    def for_edges(cls, edges: Iterable[Edge], tolerance) -> "Approximation":
        points: List[Point3] = []
        segments: List[Segment] = []
        for edge in edges:
            polyline = _dedup(approximate_edge(edge, tolerance))
            for p in polyline:
                if not any(vclose(p, q) for q in points):
                    points.append(p)
            segments.extend(Segment(a, b) for a, b in zip(polyline, polyline[1:]))
        return cls(tuple(points), tuple(segments))

    @classmethod
    def for_cycle(cls, cycle: Cycle, tolerance) -> "Approximation":
        """Approximate ``cycle`` as a closed loop.

        ``points`` holds the loop in order, without repeating the first
        point; ``segments`` includes the closing segment.
        """
        runs = _runs(cycle.canonical_edges(), tolerance)
        chain = _chain(runs)
        if chain is None:
            log.warning('cycle edges do not chain', edges=len(runs))
            chain = runs

        points = _dedup([p for run in chain for p in run.points])
        if len(points) > 1 and vclose(points[0], points[-1]):
            points.pop()
        segments = [Segment(points[i], points[(i + 1) % len(points)])
                    for i in range(len(points))] if len(points) > 1 else []
        log.debug('approximated cycle', edges=len(runs), points=len(points))
        return cls(tuple(points), tuple(segments))

    @classmethod
    def for_face(cls, face, tolerance) -> "Approximation":
        if isinstance(face, FaceTriangles):
            points: List[Point3] = []
            segments: List[Segment] = []
            for triangle, _ in face.triangles:
                v0, v1, v2 = triangle.points()
                points.extend((v0, v1, v2))
                segments.extend((Segment(v0, v1), Segment(v1, v2), Segment(v2, v0)))
            return cls(tuple(points), tuple(segments))
        if isinstance(face, FaceBRep):
            points = []
            segments = []
            for cycle in face.all_cycles():
                approx = cls.for_cycle(cycle, tolerance)
                points.extend(approx.points)
                segments.extend(approx.segments)
            return cls(tuple(points), tuple(segments))
        raise TypeError('not a face: {!r}'.format(face))


__all__ = [
    'Approximation',
    'approximate_edge',
]
