## boundary representation topology for solidkern
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

"""Topology data model.

Hierarchy, leaves first:

- GlobalVertex: a model-space position with a unique id
- Vertex: a curve coordinate paired with a GlobalVertex
- Edge: a curve bounded by two vertices, or a continuous closed curve
- Cycle: an ordered, closed sequence of edges
- Face: a surface bounded by exterior and interior cycles, or a bare
  list of colored triangles
- Shape: the container that owns the faces, cycles and vertices of one
  model

Local and canonical forms
=========================

Every entity below a face exists in two forms.  The *local* form is
expressed in the parameter space of its parent (a vertex as a curve
coordinate, an edge's curve in the surface's ``(u, v)`` space), the
*canonical* form in model space.  :class:`LocalForm` keeps both side by
side so neither has to be recomputed from the other on every access.
The canonical form must always be what you get by mapping the local
form through the parent curve or surface; ``solidkern.validate`` checks
this.  A local form of ``None`` means the parent's parameter space is
not tracked (``LocalForm.canonical_only``).

Local curves use the same :class:`~solidkern.curves.Line` and
:class:`~solidkern.curves.Arc` classes as canonical ones, with surface
coordinates stored as ``(u, v, 0)``.

Design principle: GlobalVertex identity is the ``id``, not the
position.  Two coincident vertices are only the same vertex when they
are the same object, so structural rebuilds must carry vertex sharing
across explicitly (see ``transform.py`` and ``sweep.py``).

All entities are frozen.  Transform and sweep build new ones.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from math import sqrt
from typing import (Dict, Generic, Hashable, Iterator, List, Optional, Tuple,
                    TypeVar, Union)

from solidkern.curves import Arc, Curve, Line
from solidkern.errors import DegenerateCurve, EmptyCycle
from solidkern.geom import Aabb, Point1, Point3, add, sub, to_xyz
from solidkern.geometry_utils import DEFAULT_COLOR, Color, Triangle, as_color
from solidkern.surfaces import Surface

L = TypeVar('L')
C = TypeVar('C')


def _generate_id() -> str:
    """Generate a unique ID for a topology entity."""
    return str(uuid.uuid4())


# -----------------------------------------------------------------------------
# Vertices
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class GlobalVertex:
    """The single source of truth for where a vertex is in model space."""

    position: Point3
    id: str = field(default_factory=_generate_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'position', to_xyz(self.position))

    @classmethod
    def from_position(cls, position) -> "GlobalVertex":
        return cls(position)


@dataclass(frozen=True)
class LocalForm(Generic[L, C]):
    """An entity's local representation paired with its canonical one."""

    local: Optional[L]
    canonical: C

    @classmethod
    def canonical_only(cls, canonical: C) -> "LocalForm[L, C]":
        return cls(None, canonical)

    @property
    def is_canonical_only(self) -> bool:
        return self.local is None

    def local_or_canonical(self):
        if self.local is None:
            return self.canonical
        return self.local


# a vertex is a curve coordinate paired with its global vertex
Vertex = LocalForm


def vertex(t: Optional[float], global_vertex: GlobalVertex) -> LocalForm:
    """Build a vertex at curve coordinate ``t`` (``None`` for
    canonical-only)."""
    local: Optional[Point1] = None if t is None else (float(t),)
    return LocalForm(local, global_vertex)


def vertex_position(v: LocalForm) -> Point3:
    return v.canonical.position


# -----------------------------------------------------------------------------
# Edges and cycles
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Edge:
    """A curve bounded by two vertices.

    ``vertices is None`` marks a continuous edge: a closed curve with
    no distinguished start or end, such as a bare circle.
    """

    curve: LocalForm
    vertices: Optional[Tuple[LocalForm, LocalForm]] = None

    def __post_init__(self) -> None:
        curve = self.curve
        if not isinstance(curve, LocalForm):
            curve = LocalForm.canonical_only(curve)
            object.__setattr__(self, 'curve', curve)
        if not isinstance(curve.canonical, (Line, Arc)):
            raise TypeError('not a curve: {!r}'.format(curve.canonical))
        if self.vertices is not None:
            verts = tuple(self.vertices)
            if len(verts) != 2:
                raise ValueError('an edge needs exactly two vertices, got {}'
                                 .format(len(verts)))
            object.__setattr__(self, 'vertices', verts)
        elif not curve.canonical.is_closed:
            raise DegenerateCurve('continuous edge on a curve that does not close',
                                  details={'curve': curve.canonical})

    @classmethod
    def new(cls, curve: Curve, vertices=None) -> "Edge":
        """Edge on a canonical-only curve."""
        return cls(LocalForm.canonical_only(curve), vertices)

    @classmethod
    def line_from_points(cls, a: GlobalVertex, b: GlobalVertex,
                         local: Optional[Line] = None) -> "Edge":
        """Straight edge from vertex ``a`` (t=0) to vertex ``b`` (t=1)."""
        line = Line.from_points(a.position, b.position)
        return cls(LocalForm(local, line), (vertex(0.0, a), vertex(1.0, b)))

    @classmethod
    def circle(cls, radius: float, center=(0.0, 0.0, 0.0),
               local: Optional[Arc] = None) -> "Edge":
        """Continuous edge on a full circle in the XY plane."""
        return cls(LocalForm(local, Arc.circle(center, radius)), None)

    def curve_canonical(self) -> Curve:
        return self.curve.canonical

    @property
    def is_continuous(self) -> bool:
        return self.vertices is None

    def global_vertices(self) -> Optional[Tuple[GlobalVertex, GlobalVertex]]:
        if self.vertices is None:
            return None
        a, b = self.vertices
        return a.canonical, b.canonical


def _as_edge_form(e) -> LocalForm:
    if isinstance(e, LocalForm):
        return e
    if isinstance(e, Edge):
        return LocalForm.canonical_only(e)
    raise TypeError('not an edge: {!r}'.format(e))


@dataclass(frozen=True)
class Cycle:
    """Ordered sequence of edges forming a closed loop."""

    edges: Tuple[LocalForm, ...]

    def __post_init__(self) -> None:
        edges = tuple(_as_edge_form(e) for e in self.edges)
        if not edges:
            raise EmptyCycle('a cycle needs at least one edge')
        object.__setattr__(self, 'edges', edges)

    @classmethod
    def from_edges(cls, edges) -> "Cycle":
        return cls(tuple(LocalForm.canonical_only(e) for e in edges))

    def __len__(self) -> int:
        return len(self.edges)

    def canonical_edges(self) -> List[Edge]:
        return [e.canonical for e in self.edges]

    def local_edges(self) -> List[Edge]:
        return [e.local_or_canonical() for e in self.edges]

    @property
    def is_continuous(self) -> bool:
        """True for the single-edge cycle with no vertices."""
        return len(self.edges) == 1 and self.edges[0].canonical.is_continuous

    def global_vertices(self) -> List[GlobalVertex]:
        seen = set()
        result = []
        for edge in self.canonical_edges():
            for v in edge.global_vertices() or ():
                if v.id not in seen:
                    seen.add(v.id)
                    result.append(v)
        return result


def _as_cycle_form(c) -> LocalForm:
    if isinstance(c, LocalForm):
        return c
    if isinstance(c, Cycle):
        return LocalForm.canonical_only(c)
    raise TypeError('not a cycle: {!r}'.format(c))


@dataclass(frozen=True)
class CyclesInFace:
    """The exterior or interior cycles of a face, in local form."""

    cycles: Tuple[LocalForm, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'cycles',
                           tuple(_as_cycle_form(c) for c in self.cycles))

    @classmethod
    def from_cycles(cls, cycles) -> "CyclesInFace":
        return cls(tuple(LocalForm.canonical_only(c) for c in cycles))

    def __iter__(self) -> Iterator[LocalForm]:
        return iter(self.cycles)

    def __len__(self) -> int:
        return len(self.cycles)

    def as_local_form(self) -> Iterator[LocalForm]:
        return iter(self.cycles)

    def as_canonical(self) -> Iterator[Cycle]:
        return (c.canonical for c in self.cycles)


# -----------------------------------------------------------------------------
# Faces
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FaceBRep:
    """A surface bounded by exterior cycles, with interior cycles as
    holes."""

    surface: Surface
    exteriors: CyclesInFace
    interiors: CyclesInFace = field(default_factory=CyclesInFace)
    color: Color = DEFAULT_COLOR

    def __post_init__(self) -> None:
        if not isinstance(self.exteriors, CyclesInFace):
            object.__setattr__(self, 'exteriors', CyclesInFace(self.exteriors))
        if not isinstance(self.interiors, CyclesInFace):
            object.__setattr__(self, 'interiors', CyclesInFace(self.interiors))
        object.__setattr__(self, 'color', as_color(self.color))

    def all_cycles(self) -> List[Cycle]:
        return list(self.exteriors.as_canonical()) + \
            list(self.interiors.as_canonical())


@dataclass(frozen=True)
class FaceTriangles:
    """Fallback face made of colored triangles.

    Only used where the boundary representation cannot be triangulated
    later, which is the side of a swept continuous edge.
    """

    triangles: Tuple[Tuple[Triangle, Color], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'triangles',
                           tuple((t, as_color(c)) for t, c in self.triangles))


Face = Union[FaceBRep, FaceTriangles]


def is_face(x) -> bool:
    return isinstance(x, (FaceBRep, FaceTriangles))


# -----------------------------------------------------------------------------
# Shape
# -----------------------------------------------------------------------------

def _arc_extent(arc: Arc) -> List[Point3]:
    # axis-aligned extent of the arc's full circle
    r = arc.radius_magnitude
    n = arc.normal
    half = tuple(r * sqrt(max(0.0, 1.0 - c * c)) for c in n)
    return [sub(arc.center, half), add(arc.center, half)]


class Shape:
    """Container for the topology of one model.

    Vertices are stored by id, so edges, cycles and faces that share a
    vertex all refer to the same entry.  The vertex cache lets a
    construction routine (sweep) create exactly one new vertex per
    source vertex, keyed by identity rather than position.
    """

    def __init__(self):
        self.vertices: Dict[str, GlobalVertex] = {}
        self.cycles: List[Cycle] = []
        self.faces: List[Face] = []
        self._vertex_cache: Dict[Hashable, GlobalVertex] = {}

    def create_vertex(self, position) -> GlobalVertex:
        v = GlobalVertex.from_position(position)
        self.vertices[v.id] = v
        return v

    def add_vertex(self, v: GlobalVertex) -> str:
        self.vertices[v.id] = v
        return v.id

    def get_vertex(self, vid: str) -> Optional[GlobalVertex]:
        return self.vertices.get(vid)

    def cached_vertex(self, key: Hashable, position) -> GlobalVertex:
        """Return the vertex created for ``key``, creating it at
        ``position`` the first time."""
        v = self._vertex_cache.get(key)
        if v is None:
            v = self.create_vertex(position)
            self._vertex_cache[key] = v
        return v

    def vertex_cache(self) -> Dict[Hashable, GlobalVertex]:
        return self._vertex_cache

    def add_edge(self, edge: Edge) -> Edge:
        for v in edge.global_vertices() or ():
            self.add_vertex(v)
        return edge

    def add_cycle(self, cycle: Cycle) -> Cycle:
        for edge in cycle.canonical_edges():
            self.add_edge(edge)
        self.cycles.append(cycle)
        return cycle

    def add_face(self, face: Face) -> Face:
        if isinstance(face, FaceBRep):
            for cycle in face.all_cycles():
                for edge in cycle.canonical_edges():
                    self.add_edge(edge)
        elif not isinstance(face, FaceTriangles):
            raise TypeError('not a face: {!r}'.format(face))
        self.faces.append(face)
        return face

    def edges(self) -> List[Edge]:
        """Distinct edges of all B-rep faces, in first-seen order."""
        result = []
        for face in self.faces:
            if not isinstance(face, FaceBRep):
                continue
            for cycle in face.all_cycles():
                for edge in cycle.canonical_edges():
                    if not any(edge is e for e in result):
                        result.append(edge)
        return result

    def summary(self) -> Dict[str, int]:
        """Return a summary of the shape's contents."""
        return {
            'vertices': len(self.vertices),
            'edges': len(self.edges()),
            'cycles': len(self.cycles),
            'faces': len(self.faces),
            'brep_faces': sum(1 for f in self.faces if isinstance(f, FaceBRep)),
            'triangle_faces': sum(1 for f in self.faces
                                  if isinstance(f, FaceTriangles)),
        }

    def bounding_volume(self) -> Aabb:
        points: List[Point3] = [v.position for v in self.vertices.values()]
        cycles = list(self.cycles)
        for face in self.faces:
            if isinstance(face, FaceBRep):
                cycles.extend(face.all_cycles())
            else:
                for triangle, _ in face.triangles:
                    points.extend(triangle.points())
        for cycle in cycles:
            for edge in cycle.canonical_edges():
                curve = edge.curve.canonical
                if isinstance(curve, Arc):
                    points.extend(_arc_extent(curve))
                for v in edge.global_vertices() or ():
                    points.append(v.position)
        return Aabb.from_points(points)


__all__ = [
    'GlobalVertex',
    'LocalForm',
    'Vertex',
    'vertex',
    'vertex_position',
    'Edge',
    'Cycle',
    'CyclesInFace',
    'FaceBRep',
    'FaceTriangles',
    'Face',
    'is_face',
    'Shape',
]
