import pytest

from solidkern.curves import Arc, Line
from solidkern.errors import EmptyCycle
from solidkern.sketch import sketch_circle, sketch_from_cycles, sketch_polygon
from solidkern.topology import FaceBRep
from solidkern.validate import shape_consistent


def test_polygon():
    shape = sketch_polygon([(0, 0), (2, 0), (2, 1), (0, 1)], color=(0, 255, 0, 255))
    assert len(shape.faces) == 1
    assert len(shape.cycles) == 1
    assert len(shape.vertices) == 4
    face = shape.faces[0]
    assert isinstance(face, FaceBRep)
    assert face.color == (0, 255, 0, 255)
    assert face.surface.is_plane
    form = next(face.exteriors.as_local_form())
    assert form.canonical is shape.cycles[0]
    for paired in form.local.edges:
        assert paired.local.curve.local == paired.canonical.curve.canonical
    assert shape_consistent(shape).ok


def test_polygon_drops_closing_point():
    shape = sketch_polygon([(0, 0), (1, 0), (1, 1), (0, 0)])
    assert len(shape.vertices) == 3
    assert len(shape.cycles[0]) == 3


def test_polygon_edges_share_vertices():
    shape = sketch_polygon([(0, 0), (1, 0), (1, 1)])
    edges = shape.cycles[0].canonical_edges()
    for i, edge in enumerate(edges):
        assert isinstance(edge.curve.canonical, Line)
        assert edge.vertices[1].canonical is edges[(i + 1) % 3].vertices[0].canonical


def test_too_few_points():
    with pytest.raises(EmptyCycle):
        sketch_polygon([(0, 0), (1, 0)])
    with pytest.raises(EmptyCycle):
        sketch_polygon([(0, 0), (1, 0), (0, 0)])


def test_points_must_be_in_xy_plane():
    with pytest.raises(ValueError):
        sketch_polygon([(0, 0, 1), (1, 0, 1), (1, 1, 1)])


def test_holes():
    shape = sketch_polygon([(0, 0), (4, 0), (4, 4), (0, 4)],
                           holes=[[(1, 1), (2, 1), (2, 2)]])
    face = shape.faces[0]
    assert len(face.exteriors) == 1
    assert len(face.interiors) == 1
    assert len(shape.cycles) == 2
    assert len(shape.vertices) == 7


def test_circle():
    shape = sketch_circle(3.0, center=(1, 1))
    cycle = shape.cycles[0]
    assert cycle.is_continuous
    arc = cycle.canonical_edges()[0].curve.canonical
    assert isinstance(arc, Arc)
    assert arc.radius_magnitude == pytest.approx(3.0)
    assert arc.center == (1.0, 1.0, 0.0)
    assert shape.vertices == {}
    assert shape_consistent(shape).ok


def test_needs_exterior():
    with pytest.raises(EmptyCycle):
        sketch_from_cycles([])
