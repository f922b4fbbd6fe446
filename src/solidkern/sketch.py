## planar sketch builders for solidkern
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

"""Builders for the flat shapes that sweep takes as input.

Sketches live on the XY plane, ``Swept.xy_plane()``, whose surface
coordinates coincide with model X and Y.  Local curves are therefore
the canonical curves themselves.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import structlog

from solidkern.config import get_config
from solidkern.curves import Arc, Line
from solidkern.errors import EmptyCycle
from solidkern.geom import close, to_xyz, vclose
from solidkern.geometry_utils import as_color
from solidkern.surfaces import Swept
from solidkern.topology import (Cycle, CyclesInFace, Edge, FaceBRep, LocalForm,
                                Shape, vertex)

log = structlog.get_logger(__name__)


def _check_planar(edge: Edge) -> None:
    curve = edge.curve.canonical
    if isinstance(curve, Line):
        ok = close(curve.origin[2], 0.0) and close(curve.direction[2], 0.0)
    elif isinstance(curve, Arc):
        ok = close(curve.center[2], 0.0) and close(abs(curve.normal[2]), 1.0)
    else:
        raise TypeError('not a curve: {!r}'.format(curve))
    if not ok:
        raise ValueError('sketch edges must lie in the XY plane: {!r}'.format(curve))


def _cycle_form(edges: Sequence[Edge]) -> LocalForm:
    canonical = []
    paired = []
    for edge in edges:
        _check_planar(edge)
        curve = edge.curve.canonical
        plain = Edge.new(curve, edge.vertices)
        canonical.append(plain)
        paired.append(LocalForm(Edge(LocalForm(curve, curve), edge.vertices), plain))
    return LocalForm(Cycle(tuple(paired)), Cycle.from_edges(canonical))


def sketch_from_cycles(exteriors: Iterable[Sequence[Edge]],
                       interiors: Iterable[Sequence[Edge]] = (),
                       color=None, shape: Shape | None = None) -> Shape:
    """Build an XY-plane face from edge loops.

    Each element of ``exteriors`` and ``interiors`` is the edge list of
    one cycle.  The face is added to ``shape`` (a new one by default),
    along with its cycles and their vertices.
    """
    if shape is None:
        shape = Shape()
    color = get_config().color if color is None else as_color(color)

    ext = [_cycle_form(list(edges)) for edges in exteriors]
    inner = [_cycle_form(list(edges)) for edges in interiors]
    if not ext:
        raise EmptyCycle('a sketch face needs an exterior cycle')
    for form in ext + inner:
        shape.add_cycle(form.canonical)

    face = FaceBRep(Swept.xy_plane(), CyclesInFace(tuple(ext)),
                    CyclesInFace(tuple(inner)), color)
    shape.add_face(face)
    log.debug('sketched face', exteriors=len(ext), interiors=len(inner))
    return shape


def polygon_edges(shape: Shape, points) -> List[Edge]:
    """Line edges around a closed polygon, sharing one vertex per
    corner.  A repeated closing point is dropped."""
    pts = [to_xyz(p) for p in points]
    if len(pts) > 1 and vclose(pts[0], pts[-1]):
        pts.pop()
    if len(pts) < 3:
        raise EmptyCycle('a polygon needs at least three points, got {}'
                         .format(len(pts)), details={'points': pts})
    verts = [shape.create_vertex(p) for p in pts]
    edges = []
    for i, a in enumerate(verts):
        b = verts[(i + 1) % len(verts)]
        line = Line.from_points(a.position, b.position)
        edges.append(Edge.new(line, (vertex(0.0, a), vertex(1.0, b))))
    return edges


def sketch_polygon(points, holes=(), color=None) -> Shape:
    """XY-plane polygon face, with optional polygonal holes."""
    shape = Shape()
    exterior = polygon_edges(shape, points)
    interiors = [polygon_edges(shape, hole) for hole in holes]
    return sketch_from_cycles([exterior], interiors, color, shape)


def sketch_circle(radius: float, center=(0.0, 0.0), color=None) -> Shape:
    """XY-plane disc bounded by a single continuous edge."""
    arc = Arc.circle(center, radius)
    return sketch_from_cycles([[Edge.new(arc)]], (), color)


__all__ = [
    'sketch_from_cycles',
    'sketch_polygon',
    'sketch_circle',
    'polygon_edges',
]
