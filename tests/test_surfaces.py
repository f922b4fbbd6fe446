import math

import pytest

from solidkern.curves import Arc, Line
from solidkern.errors import DegenerateCurve
from solidkern.geom import vclose
from solidkern.surfaces import Swept
from solidkern.xform import Rotation, Translation


def test_xy_plane():
    plane = Swept.xy_plane()
    assert plane.is_plane
    assert plane.point_surface_to_model((2.0, 3.0)) == (2.0, 3.0, 0.0)
    assert plane.point_model_to_surface((2.0, 3.0, 0.0)) == pytest.approx((2.0, 3.0))
    assert vclose(plane.normal(), (0, 0, 1))
    assert plane.origin() == (0.0, 0.0, 0.0)


def test_plane_from_points():
    plane = Swept.plane_from_points((1, 1, 1), (2, 1, 1), (1, 1, 3))
    assert vclose(plane.point_surface_to_model((1.0, 0.5)), (2, 1, 2))
    assert plane.point_model_to_surface((2, 1, 2)) == pytest.approx((1.0, 0.5))


def test_oblique_plane_round_trip():
    plane = Swept(Line((0, 0, 0), (1, 1, 0)), (0, 1, 1))
    p = plane.point_surface_to_model((0.3, -2.0))
    assert plane.point_model_to_surface(p) == pytest.approx((0.3, -2.0))


def test_cylinder_round_trip():
    cylinder = Swept(Arc.circle((0, 0), 2.0), (0, 0, 5))
    assert not cylinder.is_plane
    p = cylinder.point_surface_to_model((math.pi / 2, 0.5))
    assert vclose(p, (0, 2, 2.5))
    u, v = cylinder.point_model_to_surface(p)
    assert u == pytest.approx(math.pi / 2)
    assert v == pytest.approx(0.5)


def test_cylinder_normal_points_outward_at_start():
    cylinder = Swept(Arc.circle((0, 0), 2.0), (0, 0, 5))
    assert vclose(cylinder.normal(), (1, 0, 0))


def test_vector_surface_to_model():
    plane = Swept(Line((0, 0, 0), (2, 0, 0)), (0, 0, 3))
    assert plane.vector_surface_to_model((1.0, 1.0)) == (2.0, 0.0, 3.0)


def test_transform():
    plane = Swept.xy_plane().transform(Rotation((1, 0, 0), 180))
    assert vclose(plane.normal(), (0, 0, -1))
    moved = Swept.xy_plane().transform(Translation((0, 0, 4)))
    assert vclose(moved.point_surface_to_model((1, 1)), (1, 1, 4))


def test_degenerate_paths():
    with pytest.raises(DegenerateCurve):
        Swept(Line((0, 0, 0), (1, 0, 0)), (0, 0, 0))
    with pytest.raises(DegenerateCurve):
        Swept(Line((0, 0, 0), (1, 0, 0)), (2, 0, 0))
    with pytest.raises(DegenerateCurve):
        Swept(Arc.circle((0, 0), 1.0), (1, 0, 0))
    with pytest.raises(TypeError):
        Swept('not a curve', (0, 0, 1))
