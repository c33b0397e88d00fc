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

""" Mesh merging.

Entry point of the merge engine. :func:`merge` absorbs a source mesh
into a destination mesh:

    1. vertices of both meshes are deduplicated by position,
    2. a topology index is built for each side,
    3. the dispatcher classifies the pair by bad edges and shared
       geometry and runs a merge strategy,
    4. faces marked for deletion are removed and the remaining face
       lists are concatenated,
    5. the result is checked for bad edges.

Example
-------
>>> from meshmerge.mesh import Mesh
>>> from meshmerge.merge import merge
>>> dst = Mesh.read('cube.obj')
>>> strategy = merge(dst, Mesh.read('wedge.obj'))
"""

import logging

import numpy as np

import meshmerge.extrusion as extrusion
import meshmerge.stitch as stitch
import meshmerge.traits as traits

from meshmerge.capture import Capture
from meshmerge.errors import PostMergeInvariantError
from meshmerge.errors import UnsupportedTopologyError
from meshmerge.flags import Role
from meshmerge.flags import Strategy
from meshmerge.shared import find_shared
from meshmerge.topology import Side


logger = logging.getLogger(__name__)


class MergeContext:
    """ State of a single merge call.

    Parameters
    ----------
    mesh : Mesh
        Mesh that owns the (deduplicated) vertices of both sides.
    src, dst : Side
        Topology indices of the source and the destination faces.

    Attributes
    ----------
    shared : SharedGeometry or None
        Shared geometry, available once the dispatcher computed it.
    """

    def __init__(self, mesh, src, dst):
        self.mesh = mesh
        self.src = src
        self.dst = dst
        self.shared = None

    def swap(self):
        """ Exchange source and destination side.
        """
        self.src, self.dst = self.dst, self.src
        self.src.role = Role.SRC
        self.dst.role = Role.DST

        if self.shared is not None:
            self.shared = self.shared.swapped()

    def find_shared(self):
        self.shared = find_shared(self.src, self.dst)
        logger.debug('shared geometry: %s', self.shared.signature)

        return self.shared


def bad_edge_count(mesh):
    """ Number of edges of a mesh not bordered by exactly two faces. """
    return len(Side(mesh, mesh.faces, Role.DST).bad_edges)


def check_manifold(mesh, limit=0):
    """ Verify the manifold property of a merge result.

    Parameters
    ----------
    mesh : Mesh
        Merge result.
    limit : int, optional
        Number of bad edges the merge inputs had in total.

    Raises
    ------
    PostMergeInvariantError
        If the mesh has more than `limit` bad edges.

    Returns
    -------
    int
        Number of bad edges.
    """
    count = bad_edge_count(mesh)

    if count == 0:
        return 0

    if count <= limit:
        logger.warning('merge result has %d bad edges (inputs had %d)',
                       count, limit)
        return count

    msg = f'merge result has {count} bad edges, inputs had {limit}'
    raise PostMergeInvariantError(msg, {'bad_edges': count, 'limit': limit})


def _collapse(face):
    # Faces are cyclic, the last index precedes the first one.
    return [v for i, v in enumerate(face) if v != face[i - 1]]


def _deduplicate(dst, src):
    # Destination vertices come first, the first vertex at a position
    # wins. Face definitions of both meshes are remapped accordingly.
    keys = {}
    points = []

    def remap(mesh, role):
        index = []

        for point in mesh.points:
            key = traits.positional_key(point)

            if key not in keys:
                keys[key] = len(points)
                points.append(point)

            index.append(keys[key])

        faces = []

        for i, face in enumerate(mesh.faces):
            face = _collapse([index[v] for v in face])

            if len(face) < 3 or len(set(face)) != len(face):
                msg = (f'{role.value} face #{i} degenerates to {face} when '
                       f'vertices are merged by position')
                raise UnsupportedTopologyError(
                    msg, {'role': role.value, 'face': i, 'verts': face})

            if len(face) != len(mesh.faces[i]):
                logger.debug('%s face #%d collapsed to %d vertices',
                             role.value, i, len(face))

            faces.append(face)

        return faces

    dst_faces = remap(dst, Role.DST)
    src_faces = remap(src, Role.SRC)

    return np.array(points, dtype=float).reshape(-1, 3), dst_faces, src_faces


def _merge_two_manifolds(ctx):
    shared = ctx.shared

    if len(shared.faces) > 1:
        msg = f'{len(shared.faces)} shared faces'
        raise UnsupportedTopologyError(msg, shared.signature)

    if len(shared.faces) == 1:
        (fs, fd), = shared.faces.values()

        if (len(ctx.src.faces[fs]) == len(ctx.dst.faces[fd]) ==
                len(shared.edges)):
            extrusion.merge_extrusion_pair(ctx)
            return Strategy.EXTRUSION_PAIR

        stitch.merge_many_edges(ctx)
        return Strategy.MANY_EDGES

    if len(shared.edges) > 1:
        stitch.merge_many_edges(ctx)
        return Strategy.MANY_EDGES

    if len(shared.edges) == 1:
        stitch.stitch_single_edge(ctx)
        return Strategy.SINGLE_EDGE

    if shared.verts:
        msg = 'meshes touch in non-manifold vertices only'
        raise UnsupportedTopologyError(msg, shared.signature)

    return Strategy.CONCATENATE


def _merge_two_non_manifolds(ctx):
    shared = ctx.shared

    if not shared:
        return Strategy.CONCATENATE

    if len(shared.edges) == 1:
        stitch.stitch_single_edge(ctx)
        return Strategy.SINGLE_EDGE

    if len(shared.edges) > 1:
        stitch.merge_many_edges(ctx)
        return Strategy.MANY_EDGES

    msg = 'open meshes touch without shared edges'
    raise UnsupportedTopologyError(msg, shared.signature)


def dispatch(ctx):
    """ Select and run a merge strategy.

    Parameters
    ----------
    ctx : MergeContext
        Merge state, source and destination may get swapped.

    Raises
    ------
    MergeError
        If the configuration is not supported.

    Returns
    -------
    Strategy
        The strategy that was applied.
    """
    if not ctx.src.faces or not ctx.dst.faces:
        return Strategy.CONCATENATE

    src_bad = len(ctx.src.bad_edges)
    dst_bad = len(ctx.dst.bad_edges)

    logger.debug('dispatch: src %d faces/%d bad edges, '
                 'dst %d faces/%d bad edges', len(ctx.src), src_bad,
                 len(ctx.dst), dst_bad)

    if not src_bad and not dst_bad:
        # The side with fewer faces is the source, ties keep the order.
        if len(ctx.dst) < len(ctx.src):
            ctx.swap()

        ctx.find_shared()
        return _merge_two_manifolds(ctx)

    if not src_bad or not dst_bad:
        # The side with bad edges is the source.
        if not src_bad:
            ctx.swap()

        if not ctx.find_shared():
            return Strategy.CONCATENATE

        extrusion.merge_open_extrusion(ctx)
        return Strategy.OPEN_EXTRUSION

    ctx.find_shared()
    return _merge_two_non_manifolds(ctx)


def merge(dst, src, *, capture=None):
    """ Merge source mesh into destination mesh.

    Parameters
    ----------
    dst : Mesh
        Destination mesh, modified in place.
    src : Mesh
        Source mesh, not modified.
    capture : Capture, optional
        Write operands and result to OBJ files.

    Raises
    ------
    UnsupportedTopologyError
        If no strategy handles the configuration of both meshes, or if
        a face is left with fewer than three distinct vertices once
        vertices are merged by position.
    OrientationInvariantError
        If a new face could not be oriented.
    PostMergeInvariantError
        If the result has more bad edges than both inputs together.

    Returns
    -------
    Strategy
        The strategy that produced the result.

    Note
    ----
    After an error `dst` is consistent (valid face definitions) but its
    contents are unspecified.
    """
    capture = capture or Capture()

    capture.snapshot('src', src)
    capture.snapshot('dst', dst)

    if not dst.faces and not src.faces:
        dst.points = np.concatenate((dst.points, src.points))
        capture.snapshot('result', dst)
        return Strategy.CONCATENATE

    points, dst_faces, src_faces = _deduplicate(dst, src)
    dst.points = points
    dst.faces = dst_faces

    ctx = MergeContext(dst, Side(dst, src_faces, Role.SRC),
                       Side(dst, dst_faces, Role.DST))
    limit = len(ctx.src.bad_edges) + len(ctx.dst.bad_edges)

    strategy = dispatch(ctx)
    logger.debug('merged %s into %s via %s strategy', src.name, dst.name,
                 strategy.value)

    ctx.src.delete_marked()
    ctx.dst.delete_marked()

    dst.faces = ctx.dst.faces + ctx.src.faces

    check_manifold(dst, limit)
    capture.snapshot('result', dst)

    return strategy
