# Copyright 2022-2024, m3sh76
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

""" Merge enumerations.
"""

from enum import Enum


class Role(Enum):
    """ Role of a mesh side in a merge.
    """

    SRC = 'src'
    """ Side that gets absorbed. """

    DST = 'dst'
    """ Side that absorbs the other. """


class Strategy(Enum):
    """ Merge strategy enumeration.

    Returned by :func:`~meshmerge.merge.merge` to report which branch of
    the dispatcher produced the result.
    """

    CONCATENATE = 'concatenate'
    """ Plain concatenation.

    Both sides do not touch, face lists are appended without any
    topology processing."""

    EXTRUSION_PAIR = 'extrusion-pair'
    """ Two coincident boundary faces of matched extrusions.

    The longer extrusion is truncated to the length of the shorter one
    or both faces are removed if they coincide."""

    OPEN_EXTRUSION = 'open-extrusion'
    """ Open ended extrusion joined to a closed mesh.

    The boundary loops of the open side either match a face of the
    closed side or cut that face open."""

    SINGLE_EDGE = 'single-edge'
    """ Two abutting faces stitched along one shared edge. """

    MANY_EDGES = 'many-edges'
    """ Several shared edges resolved via one main face per side. """
