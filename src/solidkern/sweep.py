## sweep of planar solidkern topology into solids
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

"""Sweep a sketch along +Z.

Given the faces and cycles of a sketch in the XY plane, produce:

- bottom faces: the sketch faces turned over by a 180 degree rotation
  about the X axis, so they face down.  This only gives the right
  geometry for faces that are symmetric about the X axis; other faces
  end up mirrored, and sweep logs a warning for them.
- top faces: the sketch faces translated by ``length``.
- side faces: one per edge of every sketch cycle, on the surface swept
  by the edge's curve.  A cycle made of a single continuous edge (a
  circle) produces one triangulated side face instead, since its side
  has no edges to bound it.

Vertex sharing
==============

Each sketch vertex yields exactly one top vertex, stored in the result
shape's vertex cache under the sketch vertex's id.  The top faces, the
top edges of the side faces and the upper ends of the side edges all
use that vertex.  Side edges are cached per sketch vertex, so the two
side faces meeting at a vertex share the very same edge object.

The bottom cap is transformed with a vertex map that sends each sketch
vertex to the sketch vertex found at its flipped position.  The side
faces build their bottom edges on the sketch vertices, so for faces
symmetric about the X axis every bottom corner is one vertex shared by
the cap and the sides.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import structlog

from solidkern.approx import Approximation, approximate_edge
from solidkern.config import get_config
from solidkern.curves import Line
from solidkern.errors import DegenerateCurve
from solidkern.geom import (Aabb, Tolerance, as_tolerance, close, scalar,
                            vclose)
from solidkern.geometry_utils import Color, Triangle, as_color
from solidkern.surfaces import Swept
from solidkern.topology import (Cycle, CyclesInFace, Edge, Face, FaceBRep,
                                FaceTriangles, GlobalVertex, LocalForm, Shape,
                                vertex)
from solidkern.transform import transform_face
from solidkern.xform import Rotation, Translation

log = structlog.get_logger(__name__)

# local curves of side face edges, in the side surface's (u, v) space
_BOTTOM_LOCAL = Line((0.0, 0.0), (1.0, 0.0))
_TOP_LOCAL = Line((0.0, 1.0), (1.0, 0.0))


def _source_cycles(shape: Shape) -> List[Cycle]:
    if shape.cycles:
        return list(shape.cycles)
    cycles = []
    for face in shape.faces:
        if isinstance(face, FaceBRep):
            cycles.extend(face.all_cycles())
    return cycles


def _continuous_side(cycle: Cycle, translation, tolerance: Tolerance,
                     color: Color) -> FaceTriangles:
    approx = Approximation.for_cycle(cycle, tolerance)

    quads = []
    for segment in approx.segments:
        v0, v1 = segment.points()
        v3, v2 = translation.transform_segment(segment).points()
        quads.append((v0, v1, v2, v3))

    triangles = []
    for v0, v1, v2, v3 in quads:
        triangles.append((Triangle(v0, v1, v2), color))
        triangles.append((Triangle(v0, v2, v3), color))
    return FaceTriangles(tuple(triangles))


def _face_points(face, tolerance) -> List:
    if isinstance(face, FaceTriangles):
        return [p for t, _ in face.triangles for p in t.points()]
    return [p for cycle in face.all_cycles()
            for edge in cycle.canonical_edges()
            for p in approximate_edge(edge, tolerance)]


def _symmetric_about_x(face, tolerance) -> bool:
    points = _face_points(face, tolerance)
    return all(any(vclose((x, -y, z), q) for q in points) for x, y, z in points)


def _sketch_vertices(shape: Shape) -> List[GlobalVertex]:
    found = dict(shape.vertices)
    for face in shape.faces:
        if isinstance(face, FaceBRep):
            for cycle in face.all_cycles():
                for v in cycle.global_vertices():
                    found.setdefault(v.id, v)
    return list(found.values())


def _bottom_vertex_map(shape: Shape, rotation) -> Dict[str, GlobalVertex]:
    """Map each sketch vertex onto the sketch vertex lying where the
    bottom cap flip puts it, if there is one.

    Side faces use the sketch vertices for their bottom edges, so
    seeding the cap transform with this map makes the cap share them.
    """
    verts = _sketch_vertices(shape)
    mapping = {}
    for v in verts:
        p = rotation.transform_point(v.position)
        for w in verts:
            if vclose(w.position, p):
                mapping[v.id] = w
                break
    return mapping


def _vertex_coordinate(curve, v) -> float:
    if v.local is not None:
        return v.local[0]
    return curve.point_model_to_curve(v.canonical.position)[0]


class _SideBuilder:
    """Builds the side faces of one sweep, caching side edges by sketch
    vertex id."""

    def __init__(self, result: Shape, path, translation, color: Color):
        self.result = result
        self.path = path
        self.translation = translation
        self.color = color
        self.side_edges: Dict[str, Edge] = {}

    def top_vertex(self, v):
        return self.result.cached_vertex(
            v.id, self.translation.transform_point(v.position))

    def side_edge(self, v) -> Edge:
        edge = self.side_edges.get(v.id)
        if edge is None:
            line = Line(v.position, self.path)
            top = self.top_vertex(v)
            edge = Edge(LocalForm.canonical_only(line),
                        (vertex(0.0, v), vertex(1.0, top)))
            self.side_edges[v.id] = edge
        return edge

    def face(self, bottom_edge: Edge) -> FaceBRep:
        curve = bottom_edge.curve.canonical
        surface = Swept(curve, self.path)
        top_curve = curve.transform(self.translation)

        if bottom_edge.vertices is None:
            exteriors = []
            for local_curve, c in ((_BOTTOM_LOCAL, curve), (_TOP_LOCAL, top_curve)):
                edge = Edge.new(c)
                local = Edge(LocalForm(local_curve, c), None)
                exteriors.append(LocalForm(Cycle((LocalForm(local, edge),)),
                                           Cycle.from_edges([edge])))
            return FaceBRep(surface, CyclesInFace(tuple(exteriors)),
                            CyclesInFace(), self.color)

        a, b = bottom_edge.vertices
        ta = _vertex_coordinate(curve, a)
        tb = _vertex_coordinate(curve, b)
        va, vb = a.canonical, b.canonical
        bottom_vertices = (vertex(ta, va), vertex(tb, vb))
        top_vertices = (vertex(ta, self.top_vertex(va)),
                        vertex(tb, self.top_vertex(vb)))

        bottom = Edge(LocalForm.canonical_only(curve), bottom_vertices)
        top = Edge(LocalForm.canonical_only(top_curve), top_vertices)
        side_a = self.side_edge(va)
        side_b = self.side_edge(vb)

        def paired(edge: Edge, local_curve: Line) -> LocalForm:
            local = Edge(LocalForm(local_curve, edge.curve.canonical),
                         edge.vertices)
            return LocalForm(local, edge)

        edges = (
            paired(bottom, _BOTTOM_LOCAL),
            paired(top, _TOP_LOCAL),
            paired(side_a, Line((ta, 0.0), (0.0, 1.0))),
            paired(side_b, Line((tb, 0.0), (0.0, 1.0))),
        )
        canonical = Cycle.from_edges([bottom, top, side_a, side_b])
        exteriors = CyclesInFace((LocalForm(Cycle(edges), canonical),))
        return FaceBRep(surface, exteriors, CyclesInFace(), self.color)


def sweep_shape(shape: Shape, length: float, tolerance=None,
                color=None) -> Shape:
    """Sweep ``shape`` by ``length`` along +Z into a new shape.

    ``tolerance`` bounds the triangulated side faces of swept circles;
    it and ``color`` default to the kernel configuration.
    """
    config = get_config()
    tolerance = config.tolerance if tolerance is None else as_tolerance(tolerance)
    color = config.color if color is None else as_color(color)
    length = scalar(length)
    if close(length, 0.0):
        raise DegenerateCurve('sweep length is zero', details={'length': length})

    path = (0.0, 0.0, length)
    rotation = Rotation((1.0, 0.0, 0.0), 180.0)
    translation = Translation(path)

    result = Shape()
    bottom_map = _bottom_vertex_map(shape, rotation)
    top_map = result.vertex_cache()

    bottom_faces: List[Face] = []
    top_faces: List[Face] = []
    for face in shape.faces:
        if not _symmetric_about_x(face, tolerance):
            log.warning('bottom cap mirrored', face=len(bottom_faces),
                        reason='face is not symmetric about the X axis')
        bottom_faces.append(transform_face(face, rotation, bottom_map))
        top_faces.append(transform_face(face, translation, top_map))

    sides = _SideBuilder(result, path, translation, color)
    side_faces: List[Face] = []
    for cycle in _source_cycles(shape):
        edges = cycle.canonical_edges()
        if len(edges) == 1:
            side_faces.append(_continuous_side(cycle, translation, tolerance, color))
            log.debug('swept continuous cycle', triangles=len(side_faces[-1].triangles))
        else:
            for edge in edges:
                side_faces.append(sides.face(edge))
            log.debug('swept cycle', edges=len(edges))

    for face in bottom_faces + top_faces + side_faces:
        result.add_face(face)

    log.info('swept shape', length=length, tolerance=tolerance.value,
             **result.summary())
    return result


def bounding_volume(shape: Shape, length: float) -> Aabb:
    """Bounding volume of ``shape`` swept by ``length``."""
    return shape.bounding_volume().with_max_z(length)


@dataclass(frozen=True)
class Sweep:
    """A sweep operation, evaluated on demand."""

    shape: Shape
    length: float

    def to_shape(self, tolerance=None, color=None) -> Shape:
        return sweep_shape(self.shape, self.length, tolerance, color)

    def bounding_volume(self) -> Aabb:
        return bounding_volume(self.shape, self.length)


__all__ = [
    'sweep_shape',
    'bounding_volume',
    'Sweep',
]
