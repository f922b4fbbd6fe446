import pytest

from solidkern.geom import vclose
from solidkern.geometry_utils import Segment, Triangle
from solidkern.xform import Identity, Matrix, Rotation, Scale, Translation


class TestXform:
    """unit tests for matrix operations"""

    def test_matrix(self):
        foo = Matrix([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16])
        fooT = Matrix(foo, True)
        bar = Matrix([[1, 0, 0, 1], [0, 1, 0, 1], [0, 0, 1, 1], [0, 0, 0, 1]])
        baz = [1, 2, 3, 1]
        I = Matrix()
        a = 10.0
        assert I.mul(bar).m == bar.m
        assert I.mul(foo).m == foo.m
        assert I.mul(fooT).m == fooT.mul(I).m
        assert I.mul(I).m == I.m
        assert foo.mul(bar).m == [[1, 2, 3, 10], [5, 6, 7, 26], [9, 10, 11, 42], [13, 14, 15, 58]]
        assert foo.mul(baz) == [18, 46, 74, 102]
        assert foo.mul(a).m == [[10.0, 20.0, 30.0, 40.0],
                                [50.0, 60.0, 70.0, 80.0],
                                [90.0, 100.0, 110.0, 120.0],
                                [130.0, 140.0, 150.0, 160.0]]
        assert I.mul(baz) == baz
        assert fooT.get(0, 1) == 5.0
        assert fooT.getrow(0) == [1.0, 5.0, 9.0, 13.0]

    def test_bad_input(self):
        with pytest.raises(ValueError):
            Matrix([1, 2, 3])
        with pytest.raises(ValueError):
            Matrix().get(4, 0)
        with pytest.raises(ValueError):
            Matrix().mul('foo')

    def test_rotation(self):
        r = Rotation((0, 0, 1), 90)
        assert vclose(r.transform_point((1, 0, 0)), (0, 1, 0))
        flip = Rotation((1, 0, 0), 180)
        assert vclose(flip.transform_point((1, 2, 3)), (1, -2, -3))
        back = Rotation((0, 0, 1), 90, inverse=True)
        assert r.mul(back).isclose(Identity())

    def test_rotation_needs_axis(self):
        with pytest.raises(ValueError):
            Rotation((0, 0, 0), 45)

    def test_translation(self):
        t = Translation((1, 2, 3))
        assert t.transform_point((0, 0, 0)) == (1.0, 2.0, 3.0)
        assert t.transform_vector((1, 0, 0)) == (1.0, 0.0, 0.0)
        assert t.mul(Translation((1, 2, 3), inverse=True)).isclose(Identity())

    def test_scale(self):
        assert Scale(2).transform_point((1, 1, 1)) == (2.0, 2.0, 2.0)
        assert Scale(2, inverse=True).transform_point((2, 2, 2)) == (1.0, 1.0, 1.0)
        with pytest.raises(ValueError):
            Scale(0)

    def test_compose_applies_right_operand_first(self):
        m = Translation((1, 0, 0)).compose(Rotation((0, 0, 1), 90))
        assert vclose(m.transform_point((1, 0, 0)), (1, 1, 0))

    def test_triangles_and_segments(self):
        t = Translation((0, 0, 2))
        tri = t.transform_triangle(Triangle((0, 0, 0), (1, 0, 0), (0, 1, 0)))
        assert tri.v2 == (0.0, 1.0, 2.0)
        seg = t.transform_segment(Segment((0, 0, 0), (1, 0, 0)))
        assert seg.points() == ((0.0, 0.0, 2.0), (1.0, 0.0, 2.0))
