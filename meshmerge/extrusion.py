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

""" Extrusion merges.

Two configurations are handled here:

    - an open ended extrusion (source side with boundary loops) that
      joins a closed destination mesh,
    - and two closed extrusions that share one boundary face.
"""

import logging

import meshmerge.cuts as cuts
import meshmerge.linalg as linalg
import meshmerge.traits as traits

from meshmerge.errors import UnsupportedTopologyError
from meshmerge.topology import loop_cycle
from meshmerge.topology import loop_key


logger = logging.getLogger(__name__)


def merge_open_extrusion(ctx):
    """ Join the open boundary loops of the source side to the destination.

    Each boundary loop of the source side is handled independently:

        - if the loop runs along the boundary of a destination face,
          that face is deleted,
        - if the loop shares an edge with a destination face whose
          adjacent edges point in the directions of the loop, that face
          is shrunk (single cut),
        - if a corner of the loop is a corner of a destination face and
          both loop edges at the corner run along the edges of that
          face, the loop is walked around the corner (double cut).

    Parameters
    ----------
    ctx : MergeContext
        Source side with bad edges, destination side without.

    Raises
    ------
    UnsupportedTopologyError
        If the source side does not look like an open extrusion, or if a
        loop could not be matched. All other loops are processed before
        the error is raised.
    OrientationInvariantError
        If a face walked around a corner cannot be oriented.
    """
    src, dst = ctx.src, ctx.dst

    if len(src.bad_edges) != len(src.bad_faces):
        msg = (f'{len(src.bad_edges)} bad edges and {len(src.bad_faces)} '
               f'bad faces do not describe open extrusions')
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    unmatched = []

    for edges in src.bad_edge_loops():
        key = loop_key(edges)
        face_keys = dst.face_keys

        if key in face_keys:
            logger.debug('edge loop %s matches dst face #%d', key,
                         face_keys[key])
            dst.mark(face_keys[key])
            continue

        try:
            if _single_cut(src, dst, edges):
                logger.debug('edge loop %s merged by single cut', key)
                continue

            if _double_cut(src, dst, edges):
                logger.debug('edge loop %s merged by double cut', key)
                continue
        except UnsupportedTopologyError as error:
            logger.warning('skipping edge loop %s: %s', key, error)
        else:
            logger.warning('skipping unmatched edge loop %s', key)

        unmatched.append(key)

    if unmatched:
        signature = dict(ctx.shared.signature, loops=unmatched)
        msg = f'{len(unmatched)} open edge loop(s) could not be joined'
        raise UnsupportedTopologyError(msg, signature)


def _single_cut(src, dst, edges):
    for edge in edges:
        if len(src.edge_faces[edge]) != 1 or edge not in dst.edge_faces:
            continue

        e1 = src.connected_bad_edge_vector(edge[0], edge)
        e2 = src.connected_bad_edge_vector(edge[1], edge)

        for f in list(dst.edge_faces[edge]):
            evs = dst.edge_vectors(edge, f)

            if not (evs[0].parallel(e1) and evs[1].parallel(e2)):
                continue

            # The loop has to end inside the face to be cut.
            if e1.length >= evs[0].length or e2.length >= evs[1].length:
                continue

            cuts.resize_face(dst, f, [ev.edge for ev in evs], (e1, e2))
            return True

    return False


def _double_cut(src, dst, edges):
    cycle = loop_cycle(edges)
    n = len(cycle)

    for i, c in enumerate(cycle):
        if c not in dst.vert_faces:
            continue

        ea = src.edge_vector(c, cycle[i - 1])
        eb = src.edge_vector(c, cycle[(i + 1) % n])

        for f in list(dst.vert_faces[c]):
            to_prev, to_next = dst.edge_vectors_from_vertex(c, f)

            # Walk the loop starting at the neighbor that lies on the edge
            # towards the predecessor of the corner.
            if to_prev.parallel(ea) and to_next.parallel(eb):
                first, last = ea, eb
                path = [cycle[(i - k) % n] for k in range(1, n)]
            elif to_prev.parallel(eb) and to_next.parallel(ea):
                first, last = eb, ea
                path = [cycle[(i + k) % n] for k in range(1, n)]
            else:
                continue

            if (first.length >= to_prev.length or
                    last.length >= to_next.length):
                continue

            face = dst.faces[f]
            j = face.index(c)
            face = cuts.orient_face(dst.points, face[:j] + path + face[j+1:],
                                    dst.normals[f])

            logger.debug('dst: walking face #%d around corner %d: [%s]',
                         f, c, traits.face_dump(dst.points, face))

            dst.set_face(f, face)

            cuts.add_vertex_to_edge(dst, to_prev.edge, first.target)
            cuts.add_vertex_to_edge(dst, to_next.edge, last.target)
            return True

    return False


def merge_extrusion_pair(ctx):
    """ Merge two extrusions that share one boundary face.

    If the face normals are opposite, both extrusions touch along the
    shared face and both copies of the face are deleted. Otherwise both
    extrusions start at the shared face in the same direction, the longer
    one is truncated to the length of the shorter one.

    Parameters
    ----------
    ctx : MergeContext
        Both sides manifold, exactly one shared face.

    Raises
    ------
    UnsupportedTopologyError
        If side edges are not parallel, or of equal length on both sides.
    """
    src, dst = ctx.src, ctx.dst
    (fs, fd), = ctx.shared.faces.values()

    if linalg.vec_about_eq(src.normals[fs], -dst.normals[fd]):
        src.mark(fs)
        dst.mark(fd)
        return

    src_evs = src.side_edge_vectors(fs)
    dst_evs = dst.side_edge_vectors(fd)

    for side, evs in ((src, src_evs), (dst, dst_evs)):
        if not all(linalg.vec_about_eq(ev.vector, evs[0].vector)
                   for ev in evs):
            msg = f'{side.role.value}: side edges do not form an extrusion'
            raise UnsupportedTopologyError(msg, ctx.shared.signature)

    if not src_evs[0].parallel(dst_evs[0]):
        msg = 'extrusions point in different directions'
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    if linalg.about_eq(src_evs[0].length, dst_evs[0].length):
        msg = 'extrusions of equal length coincide'
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    if src_evs[0].length > dst_evs[0].length:
        long, long_face, long_evs, short, short_evs = (
            src, fs, src_evs, dst, dst_evs)
    else:
        long, long_face, long_evs, short, short_evs = (
            dst, fd, dst_evs, src, src_evs)

    logger.debug('truncating %s extrusion from %.5f to %.5f',
                 long.role.value, long_evs[0].length, short_evs[0].length)

    cuts.truncate_extrusion(long, long_evs, short_evs)

    key = traits.face_key([ev.target for ev in short_evs])
    far = short.face_keys.get(key)

    if far is None:
        msg = f'{short.role.value}: extrusion has no far cap'
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    long.mark(long_face)
    short.mark(far)
