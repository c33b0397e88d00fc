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

""" Edge stitching.

Merges of two sides that touch along shared edges, either along a
single edge (two abutting faces) or along several edges that all belong
to one main face per side.
"""

import logging

import meshmerge.cuts as cuts
import meshmerge.linalg as linalg

from meshmerge.errors import UnsupportedTopologyError
from meshmerge.flags import Role
from meshmerge.shared import faces_by_edge_count
from meshmerge.shared import faces_to_edges


logger = logging.getLogger(__name__)


def _antiparallel(u, v):
    return linalg.vec_about_eq(u, -v)


def stitch_single_edge(ctx):
    """ Stitch two abutting faces along one shared edge.

    Both sides border the shared edge with exactly two faces. The pair
    of faces (one per side) with opposite normals abuts. The face with
    the shorter side edges is deleted, the other one is shrunk to the
    far edge of the deleted face.

    Parameters
    ----------
    ctx : MergeContext
        Exactly one shared edge.

    Raises
    ------
    UnsupportedTopologyError
        If the faces at the edge do not abut.
    """
    src, dst = ctx.src, ctx.dst
    (edge, (src_faces, dst_faces)), = ctx.shared.edges.items()

    if len(src_faces) != 2 or len(dst_faces) != 2:
        msg = (f'edge {edge} borders {len(src_faces)} src and '
               f'{len(dst_faces)} dst faces, expected 2 each')
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    pairs = [(s, d) for s in src_faces for d in dst_faces
             if _antiparallel(src.normals[s], dst.normals[d])]

    if not pairs:
        msg = f'no abutting faces at edge {edge}'
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    s, d = pairs[0]
    src_evs = src.edge_vectors(edge, s)
    dst_evs = dst.edge_vectors(edge, d)

    if not (src_evs[0].parallel(dst_evs[0]) and
            src_evs[1].parallel(dst_evs[1])):
        msg = f'abutting faces at edge {edge} are not aligned'
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    src_length = 0.5 * (src_evs[0].length + src_evs[1].length)
    dst_length = 0.5 * (dst_evs[0].length + dst_evs[1].length)

    logger.debug('abutting faces at edge %s: src #%d (%.5f), dst #%d (%.5f)',
                 edge, s, src_length, d, dst_length)

    if linalg.about_eq(src_length, dst_length):
        src.mark(s)
        dst.mark(d)
    elif src_length < dst_length:
        src.mark(s)
        cuts.resize_face(dst, d, [ev.edge for ev in dst_evs], src_evs)
    else:
        dst.mark(d)
        cuts.resize_face(src, s, [ev.edge for ev in src_evs], dst_evs)


def _main_face(face_edges, count):
    # Exactly one face touches all shared edges, every other face
    # touches a single one.
    groups = faces_by_edge_count(face_edges)

    if len(groups.get(count, ())) != 1 or set(groups) - {1, count}:
        return None

    return groups[count][0]


def merge_many_edges(ctx):
    """ Merge two sides that share several edges of one main face each.

    For every shared edge the faces other than the main faces are
    compared: the one with the shorter free edge is deleted, the main
    face on the other side gets its neighbors cut back by that length.
    The cut invalidates face references, it is applied once after all
    shared edges are processed.

    Parameters
    ----------
    ctx : MergeContext
        More than one shared edge.

    Raises
    ------
    UnsupportedTopologyError
        If there are no main faces, if faces across a shared edge are
        not antiparallel, or if the required cuts contradict each other.
    """
    src, dst = ctx.src, ctx.dst
    edges = ctx.shared.edges

    src_main = _main_face(faces_to_edges(edges, 0), len(edges))
    dst_main = _main_face(faces_to_edges(edges, 1), len(edges))

    if src_main is None or dst_main is None:
        msg = f'{len(edges)} shared edges without a main face per side'
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    failed = []
    pending = {}

    for edge, (src_faces, dst_faces) in edges.items():
        src_other = [f for f in src_faces if f != src_main]
        dst_other = [f for f in dst_faces if f != dst_main]

        if len(src_other) != 1 or len(dst_other) != 1:
            logger.warning('skipping edge %s with %d src and %d dst faces',
                           edge, len(src_faces), len(dst_faces))
            failed.append(edge)
            continue

        s, d = src_other[0], dst_other[0]

        if not _antiparallel(src.normals[s], dst.normals[d]):
            logger.warning('skipping edge %s, faces are not antiparallel',
                           edge)
            failed.append(edge)
            continue

        src_ev = src.connected_edge_vector(edge[0], edge, s)
        dst_ev = dst.connected_edge_vector(edge[0], edge, d)

        if not src_ev.parallel(dst_ev):
            logger.warning('skipping edge %s, free edges are not parallel',
                           edge)
            failed.append(edge)
            continue

        if linalg.about_eq(src_ev.length, dst_ev.length):
            src.mark(s)
            dst.mark(d)
        elif src_ev.length < dst_ev.length:
            src.mark(s)
            pending.setdefault(Role.DST, []).append(src_ev.vector)
        else:
            dst.mark(d)
            pending.setdefault(Role.SRC, []).append(dst_ev.vector)

    if failed:
        signature = dict(ctx.shared.signature, failed=failed)
        msg = f'{len(failed)} shared edge(s) could not be merged'
        raise UnsupportedTopologyError(msg, signature)

    if len(pending) > 1:
        msg = 'both main faces would have to be cut'
        raise UnsupportedTopologyError(msg, ctx.shared.signature)

    for role, moves in pending.items():
        if not all(linalg.vec_about_eq(m, moves[0]) for m in moves):
            msg = f'{role.value}: cuts of different lengths required'
            raise UnsupportedTopologyError(msg, ctx.shared.signature)

        side, main = (dst, dst_main) if role is Role.DST else (src, src_main)
        cuts.cut_neighbors_and_shorten(side, main, moves[0],
                                       avoid=set(edges))
