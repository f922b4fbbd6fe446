## error kinds raised by the solidkern geometry kernel
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

"""Exceptions raised by solidkern.

Geometry construction problems are reported to the immediate caller
through a :class:`KernelError` subclass.  Every error carries an
optional ``details`` dictionary with the offending values, so callers
building sketches or sweeps can report something more useful than the
message string.
"""


class KernelError(ValueError):
    """Base class for geometry kernel errors."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


class NonPositiveTolerance(KernelError):
    """Raised when a tolerance is zero, negative or not finite."""


class DegenerateCurve(KernelError):
    """Raised for zero-length lines, zero-radius or zero-length arcs,
    and for continuous edges whose curve does not close on itself."""


class EmptyCycle(KernelError):
    """Raised when a cycle (or a polygon sketch) has no usable edges."""


__all__ = [
    'KernelError',
    'NonPositiveTolerance',
    'DegenerateCurve',
    'EmptyCycle',
]
