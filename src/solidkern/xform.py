## generalized matrix transformation operations for 3D homogeneous
## Copyright (c) 2020 Richard DeVaul
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
## coordinates in solidkern

## a matrix is represented as a list of four four-vectors. In a
## matrix, vectors represent rows unless the transpose property is
## true.  Points and vectors elsewhere in the kernel are plain 3-tuples;
## the transform_* methods lift them into homogeneous coordinates
## (w=1 for points, w=0 for vectors) and drop w again afterwards.

## Every topological transform in the kernel (transform propagation,
## sweep) is expressed through this one class.  Matrices are treated
## as values: nothing in the kernel modifies a matrix after it has been
## built, and composition always returns a new matrix.

from math import cos, sin

import solidkern.geom as geom
from solidkern.geometry_utils import Segment, Triangle


def _isrow(x):
    return isinstance(x, (tuple, list)) and len(x) == 4 and \
        all(geom.isgoodnum(c) for c in x)


def _dot4(a, b):
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2] + a[3]*b[3]


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self, a=None, trans=False):
        self.m = [[1.0, 0.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0, 0.0],
                  [0.0, 0.0, 1.0, 0.0],
                  [0.0, 0.0, 0.0, 1.0]]
        self.trans = False

        if isinstance(a, Matrix):
            for i in range(4):
                self.m[i] = list(a.getrow(i))

        elif isinstance(a, (tuple, list)):
            if len(a) == 4 and all(isinstance(r, (tuple, list)) for r in a):
                for i in range(4):
                    if not _isrow(a[i]):
                        raise ValueError('bad row in matrix initialization: {}'.format(a[i]))
                    self.m[i] = [float(x) for x in a[i]]
            elif len(a) == 16:
                for i in range(4):
                    for j in range(4):
                        x = a[i*4+j]
                        if not geom.isgoodnum(x):
                            raise ValueError('bad element in matrix initialization: {}'.format(x))
                        self.m[i][j] = float(x)
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not None:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        self.trans = trans

    def __repr__(self):
        return "Matrix({},{},{},{},{})".format(self.m[0], self.m[1],
                                               self.m[2], self.m[3], self.trans)

    #return value indexed by i,j
    def get(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i, j))
        if self.trans:
            return self.m[j][i]
        else:
            return self.m[i][j]

    def getrow(self, i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        if self.trans:
            return [self.m[0][i],
                    self.m[1][i],
                    self.m[2][i],
                    self.m[3][i]]
        else:
            return list(self.m[i])

    def getcol(self, j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        if not self.trans:
            return [self.m[0][j],
                    self.m[1][j],
                    self.m[2][j],
                    self.m[3][j]]
        else:
            return list(self.m[j])

    # matrix multiply.  If x is a matrix, compute MX.  If x is a
    # homogeneous four-vector, compute Mx. If x is a scalar, compute
    # xM.  Respects transpose flag.

    def mul(self, x):
        if isinstance(x, Matrix):
            rows = []
            for i in range(4):
                rows.append([_dot4(self.getrow(i), x.getcol(j))
                             for j in range(4)])
            return Matrix(rows)
        elif _isrow(x):
            return [_dot4(self.getrow(i), x) for i in range(4)]
        elif geom.isgoodnum(x):
            return Matrix([[c * x for c in self.getrow(i)] for i in range(4)])

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def compose(self, other):
        """Return the transform that applies ``other`` first, then self."""
        return self.mul(other)

    def isclose(self, other, tol=geom.epsilon):
        return all(geom.close(self.get(i, j), other.get(i, j), tol)
                   for i in range(4) for j in range(4))

    ## application to kernel points, vectors, triangles and segments

    def transform_point(self, p):
        """Transform a 3D point (translation applies)."""
        x, y, z = geom.to_xyz(p)
        r = self.mul([x, y, z, 1.0])
        w = r[3]
        if geom.close(w, 0.0):
            raise ValueError('transform maps point {} to infinity'.format(p))
        if w != 1.0:
            return (r[0]/w, r[1]/w, r[2]/w)
        return (r[0], r[1], r[2])

    def transform_vector(self, v):
        """Transform a 3D vector (translation does not apply)."""
        x, y, z = geom.to_xyz(v)
        r = self.mul([x, y, z, 0.0])
        return (r[0], r[1], r[2])

    def transform_triangle(self, t):
        return Triangle(self.transform_point(t.v0),
                        self.transform_point(t.v1),
                        self.transform_point(t.v2))

    def transform_segment(self, s):
        return Segment(self.transform_point(s.a),
                       self.transform_point(s.b))


def Identity():
    return Matrix()


# return the generalized 4x4 arbitrary axis rotation matrix.  angle is
# in degrees.
def Rotation(axis, angle, inverse=False):
    axis = geom.to_xyz(axis)
    m = geom.mag(axis)
    u = axis
    if m < geom.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    if not geom.close(m, 1.0):
        u = geom.scale(axis, 1.0/m)

    if inverse:
        angle *= -1.0
    rad = (angle % 360.0)*geom.pi2/360.0

    ux = u[0]
    uy = u[1]
    uz = u[2]

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang, 0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang, 0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin, 0],
         [0, 0, 0, 1]]

    return Matrix(R)


def Translation(delta, inverse=False):
    delta = geom.to_xyz(delta)
    if inverse:
        delta = geom.scale(delta, -1.0)
    dx = delta[0]
    dy = delta[1]
    dz = delta[2]
    T = [[1, 0, 0, dx],
         [0, 1, 0, dy],
         [0, 0, 1, dz],
         [0, 0, 0, 1]]
    return Matrix(T)


def Scale(s, inverse=False):
    """Uniform scaling about the origin."""
    if not geom.isgoodnum(s) or geom.close(s, 0.0):
        raise ValueError('bad scaling value passed to Scale: {}'.format(s))
    if inverse:
        s = 1.0/s
    S = [[s, 0, 0, 0],
         [0, s, 0, 0],
         [0, 0, s, 0],
         [0, 0, 0, 1.0]]
    return Matrix(S)
