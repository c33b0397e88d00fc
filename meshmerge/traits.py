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

""" Face and vertex traits.

Geometric quantities derived from vertex coordinates and face
definitions. Faces are plain sequences of vertex indices into a
coordinate array, no mesh object is required.
"""

import numpy as np

import meshmerge.linalg as linalg


KEY_PRECISION = 5
""" Number of decimals kept by :func:`positional_key`. """


def positional_key(point, precision=KEY_PRECISION):
    """ Quantized vertex position.

    Two points are considered equal when their keys are equal. Keys are
    hashable and can be used as dictionary keys.

    Parameters
    ----------
    point : array_like, shape (3, )
        Vertex coordinates.
    precision : int, optional
        Number of decimals to round to.

    Returns
    -------
    tuple(float, float, float)
        Rounded coordinates.
    """
    # Adding 0.0 maps negative zero to positive zero. Both would print
    # differently but compare (and hash) equal anyway.
    return tuple(round(float(c), precision) + 0.0 for c in point)


def face_key(face):
    """ Face signature.

    Canonical representation of the vertex set of a face. Identical
    vertex loops (regardless of start vertex and winding) share the
    same key.

    Parameters
    ----------
    face : sequence of int
        Face definition.

    Returns
    -------
    tuple(int, ...)
        Sorted vertex indices.
    """
    return tuple(sorted(set(face)))


def face_normal(points, face):
    """ Face normal.

    Compute the face normal via Newell's method, i.e., by summing the
    cross products of consecutive vertex positions around the face.

    Parameters
    ----------
    points : ~numpy.ndarray, shape (n, 3)
        Vertex coordinates.
    face : sequence of int
        Face definition.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Unit normal vector. The zero vector for degenerate faces.

    Note
    ----
    Newell's method is robust for non-convex and slightly non-planar
    faces. The sign follows the right-hand rule applied to the winding
    of the face.
    """
    vector = np.zeros(3, dtype=float)

    for i, v in enumerate(face):
        p = points[v]
        q = points[face[(i + 1) % len(face)]]

        vector[0] += (p[1] - q[1]) * (p[2] + q[2])
        vector[1] += (p[2] - q[2]) * (p[0] + q[0])
        vector[2] += (p[0] - q[0]) * (p[1] + q[1])

    return linalg.unit(vector)


def face_dump(points, face):
    # Debugging aid, vertex indices together with their coordinates.
    return ' '.join(f'{v}{tuple(round(float(c), 5) for c in points[v])}'
                    for v in face)
