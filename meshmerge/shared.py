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

""" Shared geometry detection.

Both sides of a merge reference the same vertex array after
deduplication, hence geometry common to both sides can be found by
comparing vertex indices.
"""

from dataclasses import dataclass
from dataclasses import field


@dataclass
class SharedGeometry:
    """ Geometry common to the source and the destination side.

    Attributes
    ----------
    verts : list[int]
        Vertices used by faces of both sides.
    edges : dict[tuple(int, int), tuple(list[int], list[int])]
        Edges of both sides, mapped to the incident source faces and the
        incident destination faces.
    faces : dict[tuple(int, ...), tuple(int, int)]
        Face signatures found on both sides, mapped to the source face
        index and the destination face index.
    """

    verts: list = field(default_factory=list)
    edges: dict = field(default_factory=dict)
    faces: dict = field(default_factory=dict)

    def __bool__(self):
        return bool(self.verts or self.edges or self.faces)

    @property
    def signature(self):
        """ Counts of shared items, used in error reports.

        :type: dict
        """
        return {'shared_verts': len(self.verts),
                'shared_edges': len(self.edges),
                'shared_faces': len(self.faces),
                'edges': list(self.edges)}

    def swapped(self):
        """ Same shared geometry seen with source and destination swapped.
        """
        return SharedGeometry(
            list(self.verts),
            {e: (d, s) for e, (s, d) in self.edges.items()},
            {k: (d, s) for k, (s, d) in self.faces.items()})


def find_shared(src, dst):
    """ Find shared vertices, edges, and faces.

    Parameters
    ----------
    src, dst : Side
        Topology indices over the same vertex array.

    Returns
    -------
    SharedGeometry
        Shared items in ascending order of their keys.
    """
    verts = sorted(src.vert_faces.keys() & dst.vert_faces.keys())

    edges = {e: (list(src.edge_faces[e]), list(dst.edge_faces[e]))
             for e in sorted(src.edge_faces.keys() & dst.edge_faces.keys())}

    src_keys = src.face_keys
    dst_keys = dst.face_keys

    faces = {k: (src_keys[k], dst_keys[k])
             for k in sorted(src_keys.keys() & dst_keys.keys())}

    return SharedGeometry(verts, edges, faces)


def faces_to_edges(edges, index):
    """ Invert an edge to faces map.

    Parameters
    ----------
    edges : dict
        Map as found in :attr:`SharedGeometry.edges`.
    index : int
        0 to collect source faces, 1 for destination faces.

    Returns
    -------
    dict[int, list[tuple(int, int)]]
        Shared edges touched by each face.
    """
    result = {}

    for edge, faces in edges.items():
        for f in faces[index]:
            result.setdefault(f, []).append(edge)

    return dict(sorted(result.items()))


def faces_by_edge_count(face_edges):
    """ Group faces by the number of shared edges they touch.

    Parameters
    ----------
    face_edges : dict[int, list]
        Map as returned by :func:`faces_to_edges`.

    Returns
    -------
    dict[int, list[int]]
        Sorted face indices keyed on edge count.
    """
    result = {}

    for f, edges in face_edges.items():
        result.setdefault(len(edges), []).append(f)

    return {n: sorted(fs) for n, fs in sorted(result.items())}
