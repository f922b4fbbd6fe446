## propagation of affine transforms through solidkern topology
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

"""Apply an ``xform.Matrix`` to faces, cycles and edges.

Canonical geometry is transformed; local geometry (vertex curve
coordinates, edge curves in surface space) is kept as is, because the
parent curve or surface is transformed along with it and the mapping
between the two forms is unchanged.

Every transformed vertex becomes a new :class:`GlobalVertex`.  The
optional ``vertex_map`` argument (source vertex id -> new vertex)
controls sharing: all entities transformed with the same map share the
new vertex wherever their sources shared the old one, and each source
vertex yields exactly one new vertex.  A fresh map is created per face
when none is given.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import structlog

from solidkern.topology import (Cycle, CyclesInFace, Edge, Face, FaceBRep,
                                FaceTriangles, GlobalVertex, LocalForm, Shape)

log = structlog.get_logger(__name__)

VertexMap = Dict[str, GlobalVertex]


def transform_global_vertex(v: GlobalVertex, transform,
                            vertex_map: Optional[VertexMap] = None) -> GlobalVertex:
    if vertex_map is None:
        return GlobalVertex.from_position(transform.transform_point(v.position))
    new = vertex_map.get(v.id)
    if new is None:
        new = GlobalVertex.from_position(transform.transform_point(v.position))
        vertex_map[v.id] = new
    return new


def _transform_vertices(edge: Edge, transform, vertex_map):
    if edge.vertices is None:
        return None
    return tuple(LocalForm(v.local,
                           transform_global_vertex(v.canonical, transform,
                                                   vertex_map))
                 for v in edge.vertices)


def transform_edge(edge: Edge, transform,
                   vertex_map: Optional[VertexMap] = None) -> Edge:
    """Transform one edge, keeping its local curve."""
    if vertex_map is None:
        vertex_map = {}
    curve = edge.curve.canonical.transform(transform)
    vertices = _transform_vertices(edge, transform, vertex_map)
    return Edge(LocalForm(edge.curve.local, curve), vertices)


def transform_cycle(cycle: Cycle, transform,
                    vertex_map: Optional[VertexMap] = None) -> Cycle:
    """Transform the canonical form of every edge of ``cycle``."""
    if vertex_map is None:
        vertex_map = {}
    edges = []
    for form in cycle.edges:
        local = None
        if form.local is not None:
            local = transform_edge(form.local, transform, vertex_map)
        canonical = transform_edge(form.canonical, transform, vertex_map)
        edges.append(LocalForm(local, canonical))
    return Cycle(tuple(edges))


def _local_paired_cycle(cycle: Cycle, transform, vertex_map) -> Cycle:
    # each edge: local curve kept, canonical curve and vertices taken
    # from the edge's canonical form and transformed
    edges = []
    for form in cycle.edges:
        source = form.canonical
        curve = source.curve.canonical.transform(transform)
        vertices = _transform_vertices(source, transform, vertex_map)
        edge_local = Edge(LocalForm(form.local_or_canonical().curve.local, curve),
                          vertices)
        edge_canonical = Edge(LocalForm.canonical_only(curve), vertices)
        edges.append(LocalForm(edge_local, edge_canonical))
    return Cycle(tuple(edges))


def _canonical_cycle(cycle: Cycle, transform, vertex_map) -> Cycle:
    edges = []
    for edge in cycle.canonical_edges():
        curve = edge.curve.canonical.transform(transform)
        vertices = _transform_vertices(edge, transform, vertex_map)
        edges.append(LocalForm.canonical_only(
            Edge(LocalForm.canonical_only(curve), vertices)))
    return Cycle(tuple(edges))


def transform_cycles(cycles: CyclesInFace, transform,
                     vertex_map: Optional[VertexMap] = None) -> CyclesInFace:
    """Transform the cycles of a face.

    Each cycle is rebuilt twice: once from its local form, pairing the
    kept local curves with the transformed canonical ones, and once,
    independently, from its canonical form.  The two results become the
    local and canonical halves of the output cycle.  A cycle without a
    local form stays canonical-only.
    """
    if vertex_map is None:
        vertex_map = {}
    result = []
    for form in cycles.as_local_form():
        canonical = _canonical_cycle(form.canonical, transform, vertex_map)
        if form.local is None:
            result.append(LocalForm.canonical_only(canonical))
            continue
        local = _local_paired_cycle(form.local, transform, vertex_map)
        result.append(LocalForm(local, canonical))
    return CyclesInFace(tuple(result))


def transform_face(face: Face, transform,
                   vertex_map: Optional[VertexMap] = None) -> Face:
    if isinstance(face, FaceBRep):
        if vertex_map is None:
            vertex_map = {}
        surface = face.surface.transform(transform)
        exteriors = transform_cycles(face.exteriors, transform, vertex_map)
        interiors = transform_cycles(face.interiors, transform, vertex_map)
        return FaceBRep(surface, exteriors, interiors, face.color)
    if isinstance(face, FaceTriangles):
        return FaceTriangles(tuple((transform.transform_triangle(t), color)
                                   for t, color in face.triangles))
    raise TypeError('not a face: {!r}'.format(face))


def transform_shape(faces: List[Face], transform) -> None:
    """Transform a shape given as a list of faces, in place."""
    for i, face in enumerate(faces):
        faces[i] = transform_face(face, transform)


def transformed_shape(shape: Shape, transform,
                      vertex_map: Optional[VertexMap] = None) -> Shape:
    """Return a transformed copy of ``shape``.

    Unlike :func:`transform_shape`, one vertex map is shared by all
    faces and cycles, so vertices shared across faces stay shared.
    """
    if vertex_map is None:
        vertex_map = {}
    result = Shape()
    for v in shape.vertices.values():
        result.add_vertex(transform_global_vertex(v, transform, vertex_map))
    for cycle in shape.cycles:
        result.add_cycle(transform_cycle(cycle, transform, vertex_map))
    for face in shape.faces:
        result.add_face(transform_face(face, transform, vertex_map))
    log.debug('transformed shape', **result.summary())
    return result


__all__ = [
    'transform_global_vertex',
    'transform_edge',
    'transform_cycle',
    'transform_cycles',
    'transform_face',
    'transform_shape',
    'transformed_shape',
]
