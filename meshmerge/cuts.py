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

""" Stitch and resize primitives.

Operations that reshape faces of a single :class:`~meshmerge.topology.Side`
while keeping its topology index consistent. Vertices that need to be
created are added to the mesh that owns the side, existing vertices at
the same position are reused.
"""

import logging

import meshmerge.linalg as linalg
import meshmerge.traits as traits

from meshmerge.errors import OrientationInvariantError
from meshmerge.errors import UnsupportedTopologyError
from meshmerge.topology import make_edge


logger = logging.getLogger(__name__)


def orient_face(points, face, normal):
    """ Match face winding to a normal.

    Parameters
    ----------
    points : ~numpy.ndarray, shape (n, 3)
        Vertex coordinates.
    face : sequence of int
        Face definition.
    normal : ~numpy.ndarray, shape (3, )
        Expected unit normal.

    Raises
    ------
    OrientationInvariantError
        If neither winding of the face yields the expected normal.

    Returns
    -------
    list[int]
        The face, reversed if necessary.
    """
    face = list(face)

    if linalg.vec_about_eq(traits.face_normal(points, face), normal):
        return face

    face.reverse()
    result = traits.face_normal(points, face)

    if linalg.vec_about_eq(result, normal):
        logger.debug('reversed winding of new face %s', face)
        return face

    msg = (f'normal {result} of face {face} cannot be matched to '
           f'expected normal {normal}')
    raise OrientationInvariantError(
        msg, {'face': face, 'normal': [round(float(c), 5) for c in normal]})


def insert_vertex_on_edge(side, f, edge, vectors):
    """ Split an edge of a face at the target of an edge vector.

    The edge vector whose origin is an endpoint of `edge` determines
    the vertex to insert.

    Parameters
    ----------
    side : Side
        Side that owns the face.
    f : int
        Face index.
    edge : tuple(int, int)
        Edge of face `f`.
    vectors : sequence of EdgeVector
        Candidate edge vectors.

    Raises
    ------
    UnsupportedTopologyError
        If no edge vector starts at an endpoint of `edge`.
    """
    for ev in vectors:
        if ev.origin in edge:
            logger.debug('%s: inserting vertex %d on edge %s of face #%d',
                         side.role.value, ev.target, edge, f)
            side.insert_vertex(f, edge, ev.target)
            return

    msg = f'{side.role.value}: no edge vector starts on edge {edge}'
    raise UnsupportedTopologyError(msg)


def add_vertex_to_edge(side, edge, v):
    """ Insert vertex `v` on `edge` in all faces that border the edge.
    """
    for f in list(side.edge_faces.get(edge, ())):
        logger.debug('%s: inserting vertex %d on edge %s of face #%d',
                     side.role.value, v, edge, f)
        side.insert_vertex(f, edge, v)


def resize_face(side, f, edges, vectors):
    """ Shrink a face along edge vectors.

    Every vertex of the face that is the origin of one of the edge
    vectors is replaced by the target of that edge vector. The face
    loses the parts of `edges` between origin and target, those targets
    are inserted into the other (unmarked) faces on `edges`.

    Parameters
    ----------
    side : Side
        Side that owns the face.
    f : int
        Face index.
    edges : sequence of tuple(int, int)
        Edges of face `f` that are shortened.
    vectors : sequence of EdgeVector
        Edge vectors along `edges`, starting at the vertices to move.
    """
    moves = {ev.origin: ev.target for ev in vectors}

    logger.debug('%s: resizing face #%d, moving vertices %s',
                 side.role.value, f, moves)
    side.set_face(f, [moves.get(v, v) for v in side.faces[f]])

    for edge in edges:
        for g in list(side.edge_faces.get(edge, ())):
            if g == f or g in side.marked:
                continue

            insert_vertex_on_edge(side, g, edge, vectors)


def move_vertices(side, face, move):
    """ Translated copies of face vertices.

    Parameters
    ----------
    side : Side
        Side whose mesh receives the new vertices.
    face : sequence of int
        Vertices to move.
    move : ~numpy.ndarray, shape (3, )
        Translation vector.

    Returns
    -------
    dict[int, int]
        Map from old to new vertex indices. The face is not modified.
    """
    points = side.points
    targets = [points[v] + move for v in face]

    return {v: side.mesh.add_vertex(p) for v, p in zip(face, targets)}


def cut_neighbors_and_shorten(side, base, move, avoid=()):
    """ Shorten the neighbors of a face.

    The vertices of the base face are translated by `move`. All other
    faces that reference these vertices are rewired to the translated
    vertices and the gap that opens up between the base face and each
    shortened face is closed by a new face. New faces share the normal
    of the face they were cut from. The base face itself is kept.

    Parameters
    ----------
    side : Side
        Side that owns the faces.
    base : int
        Index of the base face.
    move : ~numpy.ndarray, shape (3, )
        Translation vector.
    avoid : collection of tuple(int, int), optional
        No gap face is added if the cut starts on one of these edges.

    Raises
    ------
    OrientationInvariantError
        If a gap face cannot be oriented like its neighbor.
    """
    moved = move_vertices(side, side.faces[base], move)
    affected = sorted({g for v in moved for g in side.vert_faces.get(v, ())
                       if g != base and g not in side.marked})

    logger.debug('%s: cutting %d neighbors of face #%d by %s',
                 side.role.value, len(affected), base, move)

    for g in affected:
        face = side.faces[g]
        normal = side.normals[g]

        old_cut = [v for v in face if v in moved]
        new_cut = [moved[v] for v in old_cut]

        side.set_face(g, [moved.get(v, v) for v in face])

        if len(old_cut) < 2:
            continue

        if make_edge(old_cut[0], old_cut[1]) in avoid:
            logger.debug('%s: no gap face along edge %s', side.role.value,
                         make_edge(old_cut[0], old_cut[1]))
            continue

        gap = orient_face(side.points, old_cut + new_cut[::-1], normal)
        side.add_face(gap)

        logger.debug('%s: added gap face [%s]', side.role.value,
                     traits.face_dump(side.points, gap))


def truncate_extrusion(side, vectors, others):
    """ Truncate an extrusion to the length of another one.

    Side faces of the extrusion are cut back so that their base vertices
    coincide with the far vertices of the other extrusion.

    Parameters
    ----------
    side : Side
        Side that owns the longer extrusion.
    vectors : sequence of EdgeVector
        Side edge vectors of the longer extrusion.
    others : sequence of EdgeVector
        Side edge vectors of the shorter extrusion, same base vertices.

    Raises
    ------
    UnsupportedTopologyError
        If the base vertices of both extrusions differ.
    """
    targets = {ev.origin: ev.target for ev in others}

    for ev in vectors:
        if ev.origin not in targets:
            msg = (f'{side.role.value}: side edge at vertex {ev.origin} '
                   f'has no counterpart')
            raise UnsupportedTopologyError(msg)

        for g in list(side.edge_faces.get(ev.edge, ())):
            logger.debug('%s: truncating face #%d, vertex %d -> %d',
                         side.role.value, g, ev.origin, targets[ev.origin])
            side.replace_vertex(g, ev.origin, targets[ev.origin])
