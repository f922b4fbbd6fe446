"""Validation helpers for solidkern topology."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from solidkern.curves import Arc
from solidkern.geom import dist, epsilon
from solidkern.geometry_utils import Triangle
from solidkern.topology import Cycle, Edge, FaceBRep, FaceTriangles, Shape


def _samples(curve) -> List[float]:
    if isinstance(curve, Arc):
        return [0.0, curve.length / 2.0, curve.length]
    return [0.0, 0.5, 1.0]


def edge_consistent(edge: Edge, surface=None, tol: float = epsilon) -> "CheckResult":
    """Check that ``edge``'s local forms map onto its canonical ones.

    Vertex curve coordinates must map to their global positions.  When
    ``surface`` is given, the local curve must map through it onto the
    canonical curve.
    """

    warnings: List[str] = []
    curve = edge.curve.canonical

    for v in edge.vertices or ():
        if v.local is None:
            continue
        p = curve.point_curve_to_model(v.local)
        d = dist(p, v.canonical.position)
        if d > tol:
            warnings.append(f'vertex {v.canonical.id} is {d:g} off its curve coordinate')

    local = edge.curve.local
    if surface is not None and local is not None:
        for t in _samples(local):
            uv = local.point_curve_to_model((t,))
            p = surface.point_surface_to_model((uv[0], uv[1]))
            q = curve.point_curve_to_model((t,))
            d = dist(p, q)
            if d > tol:
                warnings.append(f'local curve is {d:g} off the canonical curve at t={t:g}')
                break

    return CheckResult(not warnings, warnings)


def cycle_consistent(cycle: Cycle, surface=None, tol: float = epsilon) -> "CheckResult":
    warnings: List[str] = []
    for edge in cycle.local_edges():
        warnings.extend(edge_consistent(edge, surface, tol).warnings)
    for edge in cycle.canonical_edges():
        warnings.extend(edge_consistent(edge, None, tol).warnings)
    return CheckResult(not warnings, warnings)


def face_consistent(face, tol: float = epsilon) -> "CheckResult":
    if isinstance(face, FaceTriangles):
        return CheckResult(True, [])
    if not isinstance(face, FaceBRep):
        raise ValueError('face_consistent expects a face')

    warnings: List[str] = []
    for cycles in (face.exteriors, face.interiors):
        for form in cycles.as_local_form():
            if form.local is not None:
                warnings.extend(cycle_consistent(form.local, face.surface, tol).warnings)
            warnings.extend(cycle_consistent(form.canonical, None, tol).warnings)
    return CheckResult(not warnings, warnings)


def shape_consistent(shape: Shape, tol: float = epsilon) -> "CheckResult":
    warnings: List[str] = []
    for idx, face in enumerate(shape.faces):
        warnings.extend(f'face {idx}: {w}' for w in face_consistent(face, tol).warnings)
    for idx, cycle in enumerate(shape.cycles):
        warnings.extend(f'cycle {idx}: {w}' for w in cycle_consistent(cycle, None, tol).warnings)
    return CheckResult(not warnings, warnings)


def mesh_watertight(triangles: Iterable[Tuple[Triangle, object]],
                    digits: int = 6) -> "CheckResult":
    """Check that every triangle edge is shared by exactly two
    triangles.  Vertices are matched by position rounded to ``digits``."""

    edges: Counter = Counter()
    for triangle, _ in triangles:
        keys = [_point_key(p, digits) for p in triangle.points()]
        for a, b in ((keys[0], keys[1]), (keys[1], keys[2]), (keys[2], keys[0])):
            edges[_edge_key(a, b)] += 1

    boundary = [edge for edge, count in edges.items() if count == 1]
    invalid = [edge for edge, count in edges.items() if count > 2]

    warnings: List[str] = []
    ok = True
    if boundary:
        ok = False
        warnings.append(f'{len(boundary)} boundary edges detected')
    if invalid:
        ok = False
        warnings.append(f'edges with multiplicity >2: {invalid}')

    return CheckResult(ok, warnings)


def _point_key(p: Sequence[float], digits: int) -> tuple:
    # normalise -0.0 so it matches 0.0
    return tuple(round(c, digits) + 0.0 for c in p)


def _edge_key(a: tuple, b: tuple) -> tuple:
    return (a, b) if a < b else (b, a)


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    'CheckResult',
    'edge_consistent',
    'cycle_consistent',
    'face_consistent',
    'shape_consistent',
    'mesh_watertight',
]
