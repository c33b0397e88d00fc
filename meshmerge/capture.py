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

""" Debug capture.

Snapshots of merge operands and results written as OBJ files, used to
record regression data. Capture is configured per call, see
:func:`~meshmerge.merge.merge`.
"""

import logging

from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capture:
    """ Capture configuration.

    Attributes
    ----------
    prefix : str
        File name prefix. Capture is disabled if empty.
    directory : str or ~pathlib.Path
        Output directory, must exist.
    """

    prefix: str = ''
    directory: Path = Path('.')

    def __bool__(self):
        return bool(self.prefix)

    def path(self, tag):
        """ Name of the snapshot file for `tag`. """
        return Path(self.directory) / f'{self.prefix}-{tag}.obj'

    def snapshot(self, tag, mesh):
        """ Write mesh to the snapshot file for `tag`.

        Does nothing if capture is disabled.

        Returns
        -------
        ~pathlib.Path or None
            Name of the written file.
        """
        if not self:
            return None

        path = self.path(tag)
        mesh.write(path)

        logger.info('captured %s mesh (%d vertices, %d faces) to %s',
                    tag, *mesh.size, path)

        return path
