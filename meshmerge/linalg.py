# Copyright 2024, m3shware
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.

""" Basic vector math.

Tolerance based comparisons used throughout the merge engine. All
"about equal" tests share the single tolerance :data:`EPSILON`.
"""

import math
import numpy as np


EPSILON = 1e-5
""" Absolute tolerance of all scalar and vector comparisons. """


def about_eq(a, b):
    """ Scalar comparison within tolerance.

    Parameters
    ----------
    a, b : float
        Values to compare.

    Returns
    -------
    bool
        True if ``abs(a - b) < EPSILON``.
    """
    return abs(a - b) < EPSILON


def vec_about_eq(u, v):
    r""" Vector comparison within tolerance.

    Component-wise comparison of vectors :math:`\mathbf{u}` and
    :math:`\mathbf{v}`.

    Parameters
    ----------
    u, v : array_like, shape (3, )
        Vector in :math:`\mathbb{R}^3`.

    Returns
    -------
    bool
        True if all components differ by less than :data:`EPSILON`.
    """
    return bool(np.all(np.abs(np.subtract(u, v)) < EPSILON))


def norm(u):
    r""" Length of vector.

    Parameters
    ----------
    u : array_like, shape (n, )
        Vector in :math:`\mathbb{R}^n`.

    Returns
    -------
    float
        Euclidean length of the vector :math:`\mathbf{u}`.
    """
    u = np.asarray(u, dtype=float)
    return math.sqrt(u.dot(u))


def unit(u):
    r""" Vector normalization.

    Convenience function to normalize a vector.

    Parameters
    ----------
    u : ~numpy.ndarray, shape (3, )
        Vector in :math:`\mathbb{R}^3`.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Normalized copy of input vector. The zero vector is returned
        unchanged (as a copy).
    """
    u = np.array(u, dtype=float)
    length = norm(u)

    if length < EPSILON:
        return u

    return u / length
