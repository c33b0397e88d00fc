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

""" Merge exceptions.

All errors raised by :func:`~meshmerge.merge.merge` derive from
:class:`MergeError`. None of them is fatal to the calling process, the
destination mesh is left in an unspecified but consistent state.
"""


class MergeError(Exception):
    """ Merge exception base class.

    Parameters
    ----------
    message : str
        Human readable description.
    signature : dict, optional
        Description of the shared geometry that triggered the error,
        e.g., counts of shared vertices, edges, and faces.
    """

    def __init__(self, message, signature=None):
        super().__init__(message)
        self.signature = dict(signature) if signature else {}

    def __str__(self):
        msg = super().__str__()

        if self.signature:
            items = ', '.join(f'{k}={v}' for k, v in self.signature.items())
            msg = f'{msg} [{items}]'

        return msg


class UnsupportedTopologyError(MergeError):
    """ No merge strategy handles the given configuration.

    Also raised when a strategy finds one of its preconditions violated,
    for example an edge expected to border exactly one face borders
    more. The caller may retry with swapped operands or skip the merge.
    """

    pass


class OrientationInvariantError(MergeError):
    """ Face winding could not be matched to its expected normal.

    Raised if neither winding of a newly constructed face yields a
    normal pointing in the expected direction, which happens for
    degenerate (collinear) faces.
    """

    pass


class PostMergeInvariantError(MergeError):
    """ Merge result has more bad edges than its inputs combined. """

    pass
