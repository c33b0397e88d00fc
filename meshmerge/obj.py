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

""" OBJ file I/O.

Low-level functions to read and write OBJ files. Only vertex ('v') and
face ('f') statements are supported, all other statements are skipped.
Complete specifications can be found in the `Advanced Visualizer Manual`.
"""

import numpy as np


def read(filename):
    """ Read from file.

    Assumes an OBJ-like file structure, i.e., a text file where each
    line starts with a tag.

    Parameters
    ----------
    filename : str or ~pathlib.Path
        Name of an OBJ file.

    Raises
    ------
    ValueError
        If a vertex or face statement could not be parsed.

    Returns
    -------
    points : ~numpy.ndarray, shape (n, 3)
        Vertex coordinates.
    faces : list[list[int]]
        Face definitions, 0-based vertex indexing.
    """

    def parse(block):
        """ Parse vertex definition.

        Returned values can be negative (relative offsets). If positive,
        indices are 1-based. Texture and normal indices are discarded.

        Parameters
        ----------
        block : str
            A v/vt/vn string representing a vertex definition as
            encountered when reading 'f' statements.

        Raises
        ------
        ValueError
            If the string could not be parsed.

        Returns
        -------
        int
            Vertex index.
        """
        if '//' in block:
            bits = block.split('//')

            # A v//vn statement is split by // into exactly two parts.
            # The definition is invalid in all other cases.
            if len(bits) != 2:
                raise ValueError('invalid v//vn definition: ' + block)
        else:
            bits = block.split('/')

            if len(bits) > 3:
                msg = 'invalid v/vt/vn or v/vt definition: ' + block
                raise ValueError(msg)

        # This will raise ValueError if the vertex part cannot be
        # converted to an integer value.
        return int(bits[0])

    points = []
    faces = []

    with open(filename, 'r') as file:
        for line in file:
            blocks = line.split()

            if not blocks:
                continue

            if blocks[0] == 'v':
                # Homogeneous w coordinates are ignored.
                points.append([float(block) for block in blocks[1:4]])
            elif blocks[0] == 'f':
                face = [parse(block) for block in blocks[1:]]

                # Negative vertex indices are relative to the number of
                # vertices read up to this point.
                faces.append([len(points) + v if v < 0 else v - 1
                              for v in face])

    return np.array(points, dtype=float).reshape(-1, 3), faces


def write(filename, points, faces):
    """ Write to file.

    Parameters
    ----------
    filename : str or ~pathlib.Path
        Name of output file.
    points : array_like, shape (n, 3)
        Vertex coordinates.
    faces : list[list[int]]
        Face definitions, 0-based vertex indexing.
    """
    with open(filename, 'w') as file:
        for point in points:
            file.write('v')

            for element in point:
                file.write(f' {float(element)}')

            file.write('\n')

        for face in faces:
            file.write('f')

            for vertex in face:
                file.write(f' {int(vertex) + 1}')

            file.write('\n')
