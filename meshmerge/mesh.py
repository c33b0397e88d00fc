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

""" Face list mesh.

A polygonal mesh is described by two containers:

    - an array of vertex coordinates,
    - and a list of face definitions (lists of vertex indices).

In contrast to a halfedge data structure no connectivity is stored. The
mesh may be non-manifold, adjacency is derived on demand by
:class:`~meshmerge.topology.Side` objects.
"""

from pathlib import Path

import numpy as np

import meshmerge.obj as obj
import meshmerge.traits as traits


class Mesh:
    """ Mesh container.

    Owns vertex coordinates and face definitions. A dictionary maps
    quantized vertex positions to vertex indices, see
    :func:`~meshmerge.traits.positional_key`.

    Parameters
    ----------
    points : array_like, optional
        Vertex coordinates, shape ``(n, 3)``. The data is copied.
    faces : sequence of sequence of int, optional
        Face definitions, 0-based vertex indexing.
    name : str, optional
        Name tag.

    Raises
    ------
    ValueError
        If a face has fewer than three vertices or visits a vertex twice.
    IndexError
        If a face references a vertex that does not exist.
    """

    def __init__(self, points=None, faces=None, *, name=None):
        """ Initialize from vertex and face lists.
        """
        if points is None and faces:
            msg = "face definitions require 'points' argument != None"
            raise ValueError(msg)

        if points is None:
            self._points = np.empty((0, 3), dtype=float)
        else:
            self._points = np.array(points, dtype=float).reshape(-1, 3)

        self._faces = []
        self._keys = {}
        self._rebuild_keys()

        if faces is not None:
            self.faces = faces

        self.name = name

    def __bool__(self):
        return True

    def __repr__(self):
        v, f = self.size
        return f'Mesh(name={self._name!r}, vertices={v}, faces={f})'

    @property
    def points(self):
        """ Vertex coordinate array.

        Assigning a new array rebuilds the position lookup table. Face
        definitions are not checked against the new array.

        :type: ~numpy.ndarray, shape (n, 3)
        """
        return self._points

    @points.setter
    def points(self, value):
        self._points = np.array(value, dtype=float).reshape(-1, 3)
        self._rebuild_keys()

    @property
    def faces(self):
        """ Face list.

        Read access returns the list object owned by the mesh. Assigning
        validates every face definition and stores a copy.

        :type: list[list[int]]
        """
        return self._faces

    @faces.setter
    def faces(self, value):
        faces = [[int(v) for v in face] for face in value]

        for i, face in enumerate(faces):
            self._check_face(i, face)

        self._faces = faces

    @property
    def size(self):
        """ Mesh size.

        Number of vertices and number of faces.

        :type: (int, int)
        """
        return len(self._points), len(self._faces)

    @property
    def name(self):
        """ Name property.

        :type: str or None

        Note
        ----
        Assigning a file name keeps the file stem only.
        """
        return self._name

    @name.setter
    def name(self, value):
        self._name = value if value is None else Path(value).stem

    @classmethod
    def read(cls, filename):
        """ Read mesh from file.

        Parameters
        ----------
        filename : str or ~pathlib.Path
            Name of an OBJ file.

        Returns
        -------
        Mesh
            A new mesh named after the file.
        """
        points, faces = obj.read(filename)
        return cls(points, faces, name=filename)

    def write(self, filename):
        """ Write mesh to an OBJ file.
        """
        obj.write(filename, self._points, self._faces)

    def copy(self):
        """ Return mesh copy.

        Vertex coordinates and face definitions are duplicated, the copy
        does not share any data with the original.

        Returns
        -------
        Mesh
            Copy of the mesh.
        """
        return self.__class__(self._points, self._faces, name=self._name)

    def add_vertex(self, point):
        """ Add vertex unless present.

        Parameters
        ----------
        point : array_like, shape (3, )
            Vertex coordinates.

        Returns
        -------
        int
            Index of the new vertex, or of the existing vertex at the
            same position.
        """
        key = traits.positional_key(point)

        if key in self._keys:
            return self._keys[key]

        point = np.asarray(point, dtype=float).reshape(1, 3)
        self._points = np.concatenate((self._points, point))
        self._keys[key] = len(self._points) - 1

        return len(self._points) - 1

    def _rebuild_keys(self):
        # The first of several coinciding vertices is the one that gets
        # returned by position lookups.
        self._keys = {}

        for i, point in enumerate(self._points):
            self._keys.setdefault(traits.positional_key(point), i)

    def _check_face(self, i, face):
        if len(face) < 3:
            msg = f'face #{i} has {len(face)} vertices, at least 3 required'
            raise ValueError(msg)

        if len(set(face)) != len(face):
            raise ValueError(f'face #{i} visits a vertex more than once')

        for v in face:
            if not 0 <= v < len(self._points):
                raise IndexError(f'face #{i} references missing vertex {v}')


def mesh_from_vertex_face_lists(verts, faces, *, name=None):
    """ Construct a mesh from vertex and face lists.

    Parameters
    ----------
    verts : array_like, shape (n, 3)
        Vertex coordinates.
    faces : sequence of sequence of int
        Face definitions, 0-based vertex indexing.
    name : str, optional
        Name tag.

    Returns
    -------
    Mesh
        The new mesh.
    """
    return Mesh(verts, faces, name=name)


def mesh_to_vertex_face_lists(mesh):
    """ Vertex and face lists of a mesh.

    Returns copies, modifying them does not affect the mesh.

    Returns
    -------
    verts : ~numpy.ndarray, shape (n, 3)
        Vertex coordinates.
    faces : list[list[int]]
        Face definitions.
    """
    return mesh.points.copy(), [list(face) for face in mesh.faces]
