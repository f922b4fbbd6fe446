"""Tests for sweeping sketches into solids."""

import math

import pytest

from solidkern.config import KernelConfig
from solidkern.curves import Arc, Line
from solidkern.errors import DegenerateCurve, EmptyCycle
from solidkern.geom import vclose
from solidkern.sketch import polygon_edges, sketch_circle, sketch_from_cycles, sketch_polygon
from solidkern.sweep import Sweep, bounding_volume, sweep_shape
from solidkern.topology import Edge, FaceBRep, FaceTriangles, Shape, vertex
from solidkern.validate import shape_consistent

SQUARE = [(-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5)]


def _side_faces(shape):
    return shape.faces[2:]


class TestSquareSweep:

    def test_face_count(self):
        swept = sweep_shape(sketch_polygon(SQUARE), 1.0)
        assert len(swept.faces) == 6
        assert all(isinstance(f, FaceBRep) for f in swept.faces)

    def test_side_faces_are_closed_four_edge_cycles(self):
        swept = sweep_shape(sketch_polygon(SQUARE), 1.0)
        for face in _side_faces(swept):
            assert len(face.exteriors) == 1
            assert len(face.interiors) == 0
            cycle = next(face.exteriors.as_canonical())
            assert len(cycle) == 4
            # every vertex of the cycle is used by exactly two of its edges
            counts = {}
            for edge in cycle.canonical_edges():
                for v in edge.global_vertices():
                    counts[v.id] = counts.get(v.id, 0) + 1
            assert sorted(counts.values()) == [2, 2, 2, 2]

    def test_bottom_and_top(self):
        swept = sweep_shape(sketch_polygon(SQUARE), 2.0)
        bottom, top = swept.faces[0], swept.faces[1]
        assert vclose(bottom.surface.normal(), (0, 0, -1))
        assert vclose(top.surface.normal(), (0, 0, 1))
        for v in next(top.exteriors.as_canonical()).global_vertices():
            assert v.position[2] == pytest.approx(2.0)
        for v in next(bottom.exteriors.as_canonical()).global_vertices():
            assert v.position[2] == pytest.approx(0.0)

    def test_adjacent_side_faces_share_side_edge(self):
        swept = sweep_shape(sketch_polygon(SQUARE), 1.0)
        sides = [next(f.exteriors.as_canonical()).canonical_edges()
                 for f in _side_faces(swept)]
        for i, edges in enumerate(sides):
            following = sides[(i + 1) % len(sides)]
            # end side edge of one face is the start side edge of the next
            assert edges[3] is following[2]

    def test_one_top_vertex_per_sketch_vertex(self):
        sketch = sketch_polygon(SQUARE)
        swept = sweep_shape(sketch, 1.0)
        top_face = swept.faces[1]
        top_ids = {v.id for v in next(top_face.exteriors.as_canonical()).global_vertices()}
        side_top_ids = set()
        for face in _side_faces(swept):
            edges = next(face.exteriors.as_canonical()).canonical_edges()
            side_top_ids.update(v.id for v in edges[1].global_vertices())
            side_top_ids.update(e.vertices[1].canonical.id for e in edges[2:])
        assert side_top_ids == top_ids
        assert len(top_ids) == 4
        cache = swept.vertex_cache()
        assert {v.id for v in cache.values()} == top_ids
        assert set(cache) == set(sketch.vertices)

    def test_no_coincident_vertices(self):
        swept = sweep_shape(sketch_polygon(SQUARE), 1.0)
        positions = [v.position for v in swept.vertices.values()]
        for i, p in enumerate(positions):
            for q in positions[i + 1:]:
                assert not vclose(p, q)

    def test_bottom_cap_shares_side_vertices(self):
        sketch = sketch_polygon(SQUARE)
        swept = sweep_shape(sketch, 1.0)
        bottom_ids = {v.id for v in next(swept.faces[0].exteriors.as_canonical()).global_vertices()}
        side_ids = set()
        for face in _side_faces(swept):
            bottom_edge = next(face.exteriors.as_canonical()).canonical_edges()[0]
            side_ids.update(v.id for v in bottom_edge.global_vertices())
        assert bottom_ids == side_ids == set(sketch.vertices)

    def test_side_surfaces(self):
        swept = sweep_shape(sketch_polygon(SQUARE), 3.0)
        for face in _side_faces(swept):
            assert face.surface.path == (0.0, 0.0, 3.0)
            assert isinstance(face.surface.curve, Line)
        # the first sketch edge runs along -y, so its side faces -y
        assert vclose(swept.faces[2].surface.normal(), (0, -1, 0))

    def test_consistent(self):
        swept = sweep_shape(sketch_polygon(SQUARE), 1.0)
        result = shape_consistent(swept)
        assert result.ok, result.warnings

    def test_input_is_untouched(self):
        sketch = sketch_polygon(SQUARE)
        before = sketch.summary()
        positions = {k: v.position for k, v in sketch.vertices.items()}
        sweep_shape(sketch, 1.0)
        assert sketch.summary() == before
        assert {k: v.position for k, v in sketch.vertices.items()} == positions

    def test_summary_and_log(self, log_output):
        swept = sweep_shape(sketch_polygon(SQUARE), 1.0)
        summary = swept.summary()
        assert summary['faces'] == 6
        # bottom corners are the sketch vertices, plus one top vertex each
        assert summary['vertices'] == 8
        entries = [e for e in log_output.entries if e['event'] == 'swept shape']
        assert len(entries) == 1
        assert entries[0]['faces'] == 6
        assert entries[0]['log_level'] == 'info'


class TestCircleSweep:

    def test_side_is_triangles(self):
        swept = sweep_shape(sketch_circle(1.0), 2.0, tolerance=0.01)
        assert len(swept.faces) == 3
        assert isinstance(swept.faces[0], FaceBRep)
        assert isinstance(swept.faces[1], FaceBRep)
        side = swept.faces[2]
        assert isinstance(side, FaceTriangles)
        assert not any(isinstance(f, FaceBRep) for f in swept.faces[2:])

    def test_triangle_count_follows_tolerance(self):
        swept = sweep_shape(sketch_circle(100.0), 5.0, tolerance=1.0)
        side = swept.faces[2]
        assert len(side.triangles) == 2 * 23

    def test_quads_span_the_side(self):
        swept = sweep_shape(sketch_circle(1.0), 2.0, tolerance=0.1, color=(0, 0, 255, 255))
        for triangle, color in swept.faces[2].triangles:
            assert color == (0, 0, 255, 255)
            zs = sorted(p[2] for p in triangle.points())
            assert zs[0] == pytest.approx(0.0)
            assert zs[-1] == pytest.approx(2.0)
            for p in triangle.points():
                assert math.hypot(p[0], p[1]) == pytest.approx(1.0)
            # normals point away from the axis
            n = triangle.normal()
            c = triangle.points()[0]
            assert n[0] * c[0] + n[1] * c[1] > 0


def test_continuous_edge_in_multi_edge_cycle():
    shape = Shape()
    square = polygon_edges(shape, SQUARE)
    circle = Edge.new(Arc.circle((0, 0), 0.2))
    sketch = sketch_from_cycles([square + [circle]], shape=shape)
    swept = sweep_shape(sketch, 1.0)
    side = swept.faces[-1]
    assert isinstance(side, FaceBRep)
    assert len(side.exteriors) == 2
    assert all(len(c) == 1 for c in side.exteriors.as_canonical())
    assert shape_consistent(swept).ok


def test_arc_edges_sweep_to_curved_sides():
    shape = Shape()
    a = shape.create_vertex((1, 0))
    b = shape.create_vertex((-1, 0))
    arc = Arc((0, 0, 0), (1, 0), math.pi)
    edges = [
        Edge.new(arc, (vertex(0.0, a), vertex(math.pi, b))),
        Edge.new(Line.from_points(b.position, a.position), (vertex(0.0, b), vertex(1.0, a))),
    ]
    sketch = sketch_from_cycles([edges], shape=shape)
    swept = sweep_shape(sketch, 1.0)
    assert len(swept.faces) == 4
    curved = swept.faces[2]
    assert isinstance(curved.surface.curve, Arc)
    assert shape_consistent(swept).ok


def test_zero_length():
    with pytest.raises(DegenerateCurve):
        sweep_shape(sketch_polygon(SQUARE), 0.0)


def test_empty_polygon():
    with pytest.raises(EmptyCycle):
        sweep_shape(sketch_polygon([(0, 0), (1, 0)]), 1.0)


def test_defaults_come_from_config(monkeypatch):
    import solidkern.sweep as sweep_module

    config = KernelConfig(tolerance=1.0, color=(1, 2, 3, 4))
    monkeypatch.setattr(sweep_module, 'get_config', lambda: config)
    swept = sweep_shape(sketch_circle(100.0), 1.0)
    side = swept.faces[2]
    assert len(side.triangles) == 2 * 23
    assert side.triangles[0][1] == (1, 2, 3, 4)


class TestBoundingVolume:

    def test_square(self):
        box = bounding_volume(sketch_polygon(SQUARE), 3.0)
        assert box.min == (-0.5, -0.5, 0.0)
        assert box.max == (0.5, 0.5, 3.0)

    def test_matches_swept_shape(self):
        sketch = sketch_polygon(SQUARE)
        swept = sweep_shape(sketch, 3.0)
        expected = bounding_volume(sketch, 3.0)
        actual = swept.bounding_volume()
        assert actual.min == pytest.approx(expected.min)
        assert actual.max == pytest.approx(expected.max)

    def test_circle(self):
        op = Sweep(sketch_circle(2.0, center=(1, 0)), 4.0)
        box = op.bounding_volume()
        assert box.min == pytest.approx((-1.0, -2.0, 0.0))
        assert box.max == pytest.approx((3.0, 2.0, 4.0))
        assert len(op.to_shape(tolerance=0.5).faces) == 3


class TestBottomCapWarning:

    @staticmethod
    def _warnings(log_output):
        return [e for e in log_output.entries if e['event'] == 'bottom cap mirrored']

    def test_symmetric_faces_are_quiet(self, log_output):
        sweep_shape(sketch_polygon(SQUARE), 1.0)
        sweep_shape(sketch_circle(1.0, center=(2, 0)), 1.0, tolerance=0.1)
        assert self._warnings(log_output) == []

    def test_asymmetric_face_is_flagged(self, log_output):
        triangle = [(0, 0), (1, 0), (0, 1)]
        sweep_shape(sketch_polygon(triangle), 1.0)
        warnings = self._warnings(log_output)
        assert len(warnings) == 1
        assert warnings[0]['log_level'] == 'warning'
        assert warnings[0]['face'] == 0

    def test_half_disc_is_flagged(self, log_output):
        shape = Shape()
        a = shape.create_vertex((1, 0))
        b = shape.create_vertex((-1, 0))
        edges = [
            Edge.new(Arc((0, 0, 0), (1, 0), math.pi), (vertex(0.0, a), vertex(math.pi, b))),
            Edge.new(Line.from_points(b.position, a.position), (vertex(0.0, b), vertex(1.0, a))),
        ]
        sweep_shape(sketch_from_cycles([edges], shape=shape), 1.0, tolerance=0.1)
        assert len(self._warnings(log_output)) == 1
