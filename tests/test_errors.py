from meshmerge.errors import MergeError
from meshmerge.errors import OrientationInvariantError
from meshmerge.errors import PostMergeInvariantError
from meshmerge.errors import UnsupportedTopologyError


def test_hierarchy():
    for cls in (UnsupportedTopologyError, OrientationInvariantError,
                PostMergeInvariantError):
        assert issubclass(cls, MergeError)


def test_message_without_signature():
    error = UnsupportedTopologyError('no strategy')
    assert str(error) == 'no strategy'
    assert error.signature == {}


def test_message_with_signature():
    error = MergeError('failed', {'shared_edges': 2, 'shared_faces': 0})
    assert str(error) == 'failed [shared_edges=2, shared_faces=0]'
