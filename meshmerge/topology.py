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

""" Topology index.

A :class:`Side` wraps the face list of one operand of a merge and
derives adjacency from it: face normals, vertex to face incidences,
and edge to face incidences. Edges that do not border exactly two faces
are *bad edges*.

Faces are referenced by their position in the face list. These indices
are only valid until faces get deleted, see
:func:`delete_faces_highest_index_first`.
"""

import logging
from bisect import insort

import meshmerge.linalg as linalg
import meshmerge.traits as traits

from meshmerge.errors import UnsupportedTopologyError


logger = logging.getLogger(__name__)


def make_edge(a, b):
    """ Canonical edge.

    Parameters
    ----------
    a, b : int
        Vertex indices.

    Raises
    ------
    ValueError
        If both indices are equal.

    Returns
    -------
    tuple(int, int)
        Vertex indices in ascending order.
    """
    if a == b:
        raise ValueError(f'degenerate edge ({a}, {b})')

    return (a, b) if a < b else (b, a)


def face_edges(face):
    """ Canonical edges of a face in traversal order. """
    n = len(face)
    return [make_edge(face[i], face[(i + 1) % n]) for i in range(n)]


def delete_faces_highest_index_first(faces, marked):
    """ Delete faces from a face list.

    Faces are removed in descending index order, a removal never shifts
    the index of a face that is still to be removed.

    Parameters
    ----------
    faces : list
        Face list, modified in place.
    marked : iterable of int
        Indices of faces to remove.

    Returns
    -------
    list
        The modified face list.
    """
    for i in sorted(set(marked), reverse=True):
        del faces[i]

    return faces


class EdgeVector:
    """ Directed edge.

    Parameters
    ----------
    origin, target : int
        Vertex indices.
    points : ~numpy.ndarray, shape (n, 3)
        Vertex coordinates.
    """

    __slots__ = ('origin', 'target', 'vector', 'length')

    def __init__(self, origin, target, points):
        self.origin = origin
        self.target = target
        self.vector = points[target] - points[origin]
        self.length = linalg.norm(self.vector)

    def __repr__(self):
        return (f'EdgeVector({self.origin} -> {self.target}, '
                f'length={self.length:.5f})')

    @property
    def edge(self):
        """ Canonical undirected edge.

        :type: tuple(int, int)
        """
        return make_edge(self.origin, self.target)

    @property
    def direction(self):
        """ Unit direction vector.

        :type: ~numpy.ndarray, shape (3, )
        """
        return linalg.unit(self.vector)

    def parallel(self, other):
        """ Test for equal directions (within tolerance). """
        return linalg.vec_about_eq(self.direction, other.direction)


class Side:
    """ Topology index of one merge operand.

    Parameters
    ----------
    mesh : Mesh
        Mesh that owns the vertex coordinates. Coordinates are always
        read from the mesh, they are never cached.
    faces : sequence of sequence of int
        Face definitions. The side works on a copy.
    role : Role
        Whether this is the source or destination side.

    Note
    ----
    The index is rebuilt from scratch by :meth:`rebuild`. Face changes
    applied via :meth:`set_face`, :meth:`add_face`,
    :meth:`replace_vertex`, and :meth:`insert_vertex` keep the index
    consistent incrementally.
    """

    def __init__(self, mesh, faces, role):
        self.mesh = mesh
        self.role = role
        self.faces = [list(face) for face in faces]
        self.marked = set()
        self.rebuild()

    def __repr__(self):
        return (f'Side({self.role.value}, faces={len(self.faces)}, '
                f'bad_edges={len(self.bad_edges)})')

    def __len__(self):
        return len(self.faces)

    @property
    def points(self):
        """ Vertex coordinates of the owning mesh.

        :type: ~numpy.ndarray, shape (n, 3)
        """
        return self.mesh.points

    @property
    def bad_edges(self):
        """ Edges not bordered by exactly two faces.

        :type: dict[tuple(int, int), list[int]]
        """
        good = self.good_edges
        return {e: fs for e, fs in sorted(self.edge_faces.items())
                if e not in good}

    @property
    def good_edges(self):
        """ Edges bordered by exactly two faces.

        :type: dict[tuple(int, int), list[int]]
        """
        return {e: fs for e, fs in sorted(self.edge_faces.items())
                if len(fs) == 2}

    @property
    def bad_faces(self):
        """ Faces that border at least one bad edge.

        :type: list[int]
        """
        return sorted({f for fs in self.bad_edges.values() for f in fs})

    @property
    def face_keys(self):
        """ Map face signatures to face indices.

        :type: dict[tuple(int, ...), int]
        """
        keys = {}

        for i, face in enumerate(self.faces):
            keys.setdefault(traits.face_key(face), i)

        return keys

    def rebuild(self):
        """ Rebuild the index from the current face list.
        """
        self.normals = [None] * len(self.faces)
        self.vert_faces = {}
        self.edge_faces = {}

        for i in range(len(self.faces)):
            self._index(i)

    def mark(self, f):
        """ Mark face for deletion. """
        logger.debug('%s: marking face #%d [%s] for deletion',
                     self.role.value, f,
                     traits.face_dump(self.points, self.faces[f]))
        self.marked.add(f)

    def delete_marked(self):
        """ Delete all marked faces and rebuild the index.
        """
        delete_faces_highest_index_first(self.faces, self.marked)
        self.marked.clear()
        self.rebuild()

    def set_face(self, f, face):
        """ Replace a face definition.

        Parameters
        ----------
        f : int
            Face index.
        face : sequence of int
            New face definition.
        """
        self._unindex(f)
        self.faces[f] = list(face)
        self._index(f)

    def add_face(self, face):
        """ Append a face.

        Returns
        -------
        int
            Index of the new face.
        """
        self.faces.append(list(face))
        self.normals.append(None)
        self._index(len(self.faces) - 1)

        return len(self.faces) - 1

    def replace_vertex(self, f, old, new):
        """ Replace a vertex of a face by another vertex.
        """
        face = [new if v == old else v for v in self.faces[f]]
        self.set_face(f, face)

    def insert_vertex(self, f, edge, v):
        """ Insert a vertex on an edge of a face.

        Parameters
        ----------
        f : int
            Face index.
        edge : tuple(int, int)
            Edge of the face.
        v : int
            Vertex to insert between the edge endpoints.

        Raises
        ------
        UnsupportedTopologyError
            If `edge` is not an edge of the face.
        """
        face = self.faces[f]
        n = len(face)

        for i in range(n):
            if make_edge(face[i], face[(i + 1) % n]) == edge:
                self.set_face(f, face[:i + 1] + [v] + face[i + 1:])
                return

        msg = f'{self.role.value}: edge {edge} is not part of face #{f}'
        raise UnsupportedTopologyError(msg)

    def edge_vector(self, origin, target):
        """ Directed edge from `origin` to `target`. """
        return EdgeVector(origin, target, self.points)

    def neighbors(self, v, f):
        """ Predecessor and successor of vertex `v` on face `f`.
        """
        face = self.faces[f]

        try:
            i = face.index(v)
        except ValueError:
            msg = f'{self.role.value}: vertex {v} is not part of face #{f}'
            raise UnsupportedTopologyError(msg) from None

        return face[i - 1], face[(i + 1) % len(face)]

    def other_vertex(self, v, edge, f):
        """ Neighbor of `v` on face `f` that is not on `edge`.

        Parameters
        ----------
        v : int
            Endpoint of `edge`.
        edge : tuple(int, int)
            Edge of face `f`.
        f : int
            Face index.

        Returns
        -------
        int
            Vertex index.
        """
        prev, succ = self.neighbors(v, f)
        w = edge[1] if edge[0] == v else edge[0]

        if prev == w:
            return succ
        elif succ == w:
            return prev

        msg = f'{self.role.value}: edge {edge} is not part of face #{f}'
        raise UnsupportedTopologyError(msg)

    def connected_edge_vector(self, v, edge, f):
        """ Edge vector leaving `v` on face `f` away from `edge`. """
        return self.edge_vector(v, self.other_vertex(v, edge, f))

    def edge_vectors(self, edge, f):
        """ Edge vectors leaving both endpoints of `edge` on face `f`.

        Returns
        -------
        tuple(EdgeVector, EdgeVector)
            Edge vectors starting at ``edge[0]`` and ``edge[1]``.
        """
        return (self.connected_edge_vector(edge[0], edge, f),
                self.connected_edge_vector(edge[1], edge, f))

    def edge_vectors_from_vertex(self, v, f):
        """ Edge vectors from `v` to its predecessor and successor. """
        prev, succ = self.neighbors(v, f)
        return self.edge_vector(v, prev), self.edge_vector(v, succ)

    def incident_edges(self, v):
        """ All edges of the side that contain vertex `v`.

        :rtype: list[tuple(int, int)]
        """
        edges = set()

        for f in self.vert_faces.get(v, ()):
            edges.update(e for e in face_edges(self.faces[f]) if v in e)

        return sorted(edges)

    def connected_bad_edge_vector(self, v, edge):
        """ Follow the bad edge loop through `v`.

        Parameters
        ----------
        v : int
            Endpoint of the bad edge `edge`.
        edge : tuple(int, int)
            A bad edge.

        Raises
        ------
        UnsupportedTopologyError
            If not exactly one other bad edge is incident to `v`.

        Returns
        -------
        EdgeVector
            Edge vector from `v` along the other bad edge.
        """
        others = [e for e in self.incident_edges(v)
                  if e != edge and len(self.edge_faces[e]) != 2]

        if len(others) != 1:
            msg = (f'{self.role.value}: vertex {v} has {len(others)} '
                   f'bad edges besides {edge}, expected 1')
            raise UnsupportedTopologyError(msg)

        e = others[0]
        return self.edge_vector(v, e[1] if e[0] == v else e[0])

    def side_edge_vectors(self, f):
        """ Edge vectors leaving the vertices of a face.

        For a cap face of an extrusion every vertex has exactly one edge
        that does not belong to the cap, the side edge.

        Parameters
        ----------
        f : int
            Face index.

        Raises
        ------
        UnsupportedTopologyError
            If a vertex has not exactly one side edge.

        Returns
        -------
        list[EdgeVector]
            Side edge vectors in face order.
        """
        own = set(face_edges(self.faces[f]))
        vectors = []

        for v in self.faces[f]:
            sides = [e for e in self.incident_edges(v) if e not in own]

            if len(sides) != 1:
                msg = (f'{self.role.value}: vertex {v} of face #{f} has '
                       f'{len(sides)} side edges, expected 1')
                raise UnsupportedTopologyError(msg)

            e = sides[0]
            vectors.append(self.edge_vector(v, e[1] if e[0] == v else e[0]))

        return vectors

    def bad_edge_loops(self):
        """ Group bad edges into connected components.

        Bad edges that share a vertex belong to the same loop. Groups
        are found with a union-find structure over edge endpoints.

        Returns
        -------
        list[list[tuple(int, int)]]
            Sorted edges of each loop, loops sorted by their key.
        """
        parent = {}

        def find(v):
            root = v

            while parent[root] != root:
                root = parent[root]

            # Path compression.
            while parent[v] != root:
                parent[v], v = root, parent[v]

            return root

        bad = self.bad_edges

        for a, b in bad:
            parent.setdefault(a, a)
            parent.setdefault(b, b)

            ra, rb = find(a), find(b)

            if ra != rb:
                parent[max(ra, rb)] = min(ra, rb)

        loops = {}

        for edge in bad:
            loops.setdefault(find(edge[0]), []).append(edge)

        return sorted(loops.values(), key=loop_key)

    def _index(self, f):
        face = self.faces[f]
        self.normals[f] = traits.face_normal(self.points, face)

        for v in face:
            faces = self.vert_faces.setdefault(v, [])

            if f not in faces:
                insort(faces, f)

        for i in range(len(face)):
            # Degenerate edges do not contribute to adjacency.
            if face[i] == face[(i + 1) % len(face)]:
                continue

            faces = self.edge_faces.setdefault(
                make_edge(face[i], face[(i + 1) % len(face)]), [])

            if f not in faces:
                insort(faces, f)

    def _unindex(self, f):
        face = self.faces[f]

        for v in face:
            faces = self.vert_faces.get(v)

            if faces is not None and f in faces:
                faces.remove(f)

                if not faces:
                    del self.vert_faces[v]

        for i in range(len(face)):
            if face[i] == face[(i + 1) % len(face)]:
                continue

            edge = make_edge(face[i], face[(i + 1) % len(face)])
            faces = self.edge_faces.get(edge)

            if faces is not None and f in faces:
                faces.remove(f)

                if not faces:
                    del self.edge_faces[edge]


def loop_key(edges):
    """ Signature of an edge loop.

    Same format as :func:`~meshmerge.traits.face_key`, a loop whose key
    equals the key of a face runs along the boundary of that face.
    """
    return tuple(sorted({v for edge in edges for v in edge}))


def loop_cycle(edges):
    """ Ordered vertices of a closed edge loop.

    The walk starts at the smallest vertex and proceeds towards its
    smaller neighbor.

    Parameters
    ----------
    edges : sequence of tuple(int, int)
        Edges of a simple closed loop.

    Raises
    ------
    UnsupportedTopologyError
        If the edges do not form a simple closed loop.

    Returns
    -------
    list[int]
        Loop vertices in traversal order.
    """
    adjacent = {}

    for a, b in edges:
        adjacent.setdefault(a, []).append(b)
        adjacent.setdefault(b, []).append(a)

    if any(len(vs) != 2 for vs in adjacent.values()):
        raise UnsupportedTopologyError('edge loop is not a simple cycle')

    start = min(adjacent)
    cycle = [start]
    prev, v = start, min(adjacent[start])

    while v != start:
        cycle.append(v)
        a, b = adjacent[v]
        prev, v = v, (b if a == prev else a)

    if len(cycle) != len(adjacent):
        raise UnsupportedTopologyError('edge loop is not connected')

    return cycle
