import numpy as np
import pytest

from conftest import U_SHAPE
from conftest import make_box
from conftest import make_prism
from conftest import used_vertices

from meshmerge.capture import Capture
from meshmerge.errors import MergeError
from meshmerge.errors import OrientationInvariantError
from meshmerge.errors import PostMergeInvariantError
from meshmerge.errors import UnsupportedTopologyError
from meshmerge.flags import Strategy
from meshmerge.merge import bad_edge_count
from meshmerge.merge import check_manifold
from meshmerge.merge import merge
from meshmerge.mesh import Mesh


def cube():
    return make_box(0, 1, 0, 1, 0, 1)


def open_box_on_top():
    return make_box(0, 1, 0, 1, 1, 2, bottom=False)


def lift(mesh, vertices, z):
    """ Move vertices of a mesh to height z. """
    points = mesh.points.copy()
    points[vertices, 2] = z
    mesh.points = points
    return mesh


def shear(mesh, dx):
    """ Shift the far cap of a prism along x. """
    points = mesh.points.copy()
    points[len(points) // 2:, 0] += dx
    mesh.points = points
    return mesh


def join(*meshes):
    """ Put several meshes into one without merging vertices. """
    points, faces = [], []

    for mesh in meshes:
        offset = len(points)
        points.extend(mesh.points.tolist())
        faces.extend([offset + v for v in face] for face in mesh.faces)

    return Mesh(points, faces)


SHARED_KEYS = {'shared_verts', 'shared_edges', 'shared_faces', 'edges'}


# Pairs of meshes with the expected strategy, number of faces, and number
# of vertices of the merge result. All results are closed meshes.
SCENARIOS = {
    'shared-face': (
        cube, lambda: make_box(1, 2, 0, 1, 0, 1),
        Strategy.EXTRUSION_PAIR, 10, 12),
    'truncated-extrusion': (
        lambda: make_box(0, 1, 0, 1, 0, 4), lambda: make_box(0, 1, 0, 1, 0, 3),
        Strategy.EXTRUSION_PAIR, 10, 12),
    'disjoint': (
        cube, lambda: make_box(3, 4, 0, 1, 0, 1),
        Strategy.CONCATENATE, 12, 16),
    'abutting': (
        cube, lambda: make_box(1, 2, 0, 1, 0, 2),
        Strategy.SINGLE_EDGE, 11, 14),
    'open-extrusion': (
        cube, open_box_on_top,
        Strategy.OPEN_EXTRUSION, 10, 12),
    'single-cut': (
        lambda: make_box(0, 2, 0, 1, 0, 1), open_box_on_top,
        Strategy.OPEN_EXTRUSION, 11, 14),
    'double-cut': (
        lambda: make_box(0, 2, 0, 2, 0, 1), open_box_on_top,
        Strategy.OPEN_EXTRUSION, 11, 15),
    'notch': (
        lambda: make_prism(U_SHAPE, 0, 2), lambda: make_box(1, 2, 1, 2, 0, 1),
        Strategy.MANY_EDGES, 18, 24),
}


@pytest.mark.parametrize('name', list(SCENARIOS))
@pytest.mark.parametrize('swap', [False, True])
def test_closed_result(name, swap):
    make_dst, make_src, strategy, faces, verts = SCENARIOS[name]
    dst, src = make_dst(), make_src()

    if swap:
        dst, src = src, dst

    total = len(dst.points) + len(src.points)
    src_copy = src.copy()

    assert merge(dst, src) is strategy
    assert len(dst.faces) == faces
    assert len(used_vertices(dst)) == verts
    assert len(dst.points) <= total
    assert bad_edge_count(dst) == 0

    # The source mesh is left alone.
    assert np.array_equal(src.points, src_copy.points)
    assert src.faces == src_copy.faces


def test_shared_face_is_removed():
    dst = cube()
    merge(dst, make_box(1, 2, 0, 1, 0, 1))

    assert not any(all(dst.points[v][0] == 1.0 for v in face)
                   for face in dst.faces)


def test_extrusion_is_truncated():
    dst = make_box(0, 1, 0, 1, 0, 4)
    merge(dst, make_box(0, 1, 0, 1, 0, 3))

    heights = sorted({tuple(sorted({float(dst.points[v][2]) for v in face}))
                      for face in dst.faces})
    assert heights == [(0.0,), (0.0, 3.0), (3.0, 4.0), (4.0,)]


def test_double_cut_walks_around_corner():
    dst = make_box(0, 2, 0, 2, 0, 1)
    merge(dst, open_box_on_top())

    top = [face for face in dst.faces
           if all(dst.points[v][2] == 1.0 for v in face)]
    assert sorted(len(face) for face in top) == [6]


def test_vertices_are_deduplicated():
    dst = cube()
    merge(dst, make_box(1, 2, 0, 1, 0, 1))

    keys = {tuple(p) for p in dst.points.round(5)}
    assert len(keys) == len(dst.points)


def test_merge_with_empty_mesh():
    dst = cube()
    original = cube()

    assert merge(dst, Mesh()) is Strategy.CONCATENATE
    assert np.array_equal(dst.points, original.points)
    assert dst.faces == original.faces


def test_merge_into_empty_mesh():
    dst = Mesh()
    assert merge(dst, cube()) is Strategy.CONCATENATE
    assert np.array_equal(dst.points, cube().points)
    assert dst.faces == cube().faces


def test_merge_point_clouds():
    dst = Mesh([[0, 0, 0], [1, 0, 0]])
    src = Mesh([[0, 0, 0]])

    assert merge(dst, src) is Strategy.CONCATENATE
    assert len(dst.points) == 3


def test_open_boxes_apart():
    dst = make_box(0, 1, 0, 1, 0, 1, top=False)
    src = make_box(3, 4, 0, 1, 0, 1, top=False)

    assert merge(dst, src) is Strategy.CONCATENATE
    assert len(dst.faces) == 10
    assert bad_edge_count(dst) == 8


def test_open_notch():
    dst = make_prism(U_SHAPE, 0, 2, top=False)
    src = make_box(1, 2, 1, 2, 0, 1, top=False)

    assert merge(dst, src) is Strategy.MANY_EDGES
    assert len(dst.faces) == 16
    assert bad_edge_count(dst) == 12


def test_open_abutting_faces():
    dst = make_box(0, 1, 0, 1, 0, 1, top=False)
    src = make_box(1, 2, 0, 1, 0, 2, top=False)

    assert merge(dst, src) is Strategy.SINGLE_EDGE
    assert len(dst.faces) == 9
    assert bad_edge_count(dst) == 8


def test_corner_contact_is_unsupported():
    dst = cube()

    with pytest.raises(UnsupportedTopologyError) as info:
        merge(dst, make_box(1, 2, 1, 2, 1, 2))

    assert info.value.signature['shared_verts'] == 1
    assert isinstance(info.value, MergeError)


def test_diagonal_edge_contact_is_unsupported():
    with pytest.raises(UnsupportedTopologyError):
        merge(cube(), make_box(1, 2, 0, 1, -1, 0))


def test_unmatched_edge_loop():
    dst = make_box(1, 2, 1, 2, 0, 1)

    with pytest.raises(UnsupportedTopologyError) as info:
        merge(dst, open_box_on_top())

    assert len(info.value.signature['loops']) == 1
    assert 'loops=' in str(info.value)


def test_open_extrusion_requires_loops():
    quad = Mesh([[0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1]], [[0, 1, 2, 3]])

    with pytest.raises(UnsupportedTopologyError):
        merge(cube(), quad)


def test_check_manifold():
    mesh = make_box(0, 1, 0, 1, 0, 1, top=False)

    assert check_manifold(cube()) == 0
    assert check_manifold(mesh, 4) == 4

    with pytest.raises(PostMergeInvariantError) as info:
        check_manifold(mesh, 3)

    assert info.value.signature == {'bad_edges': 4, 'limit': 3}


def test_capture(tmp_path):
    dst = cube()
    capture = Capture('shared-face', tmp_path)

    merge(dst, make_box(1, 2, 0, 1, 0, 1), capture=capture)

    assert sorted(p.name for p in tmp_path.iterdir()) == [
        'shared-face-dst.obj', 'shared-face-result.obj',
        'shared-face-src.obj']
    assert len(Mesh.read(capture.path('result')).faces) == 10
    assert len(Mesh.read(capture.path('dst')).faces) == 6


def test_capture_disabled(tmp_path):
    capture = Capture('', tmp_path)
    assert not capture
    assert capture.snapshot('src', cube()) is None
    assert list(tmp_path.iterdir()) == []


def test_face_collapses_to_triangle(box):
    dst = box(5, 6, 0, 1, 0, 1)
    src = Mesh([[0, 0, 0], [1, 0, 0], [1, 1, 0], [1, 1, 1e-6]], [[0, 1, 2, 3]])

    assert merge(dst, src) is Strategy.CONCATENATE
    assert len(dst.points) == 11
    assert len(dst.faces) == 7
    assert dst.faces[-1] == [8, 9, 10]


def test_face_collapses_to_edge():
    dst = cube()
    src = Mesh([[0, 0, 0], [1, 0, 0], [1, 0, 1e-6]], [[0, 1, 2]])

    with pytest.raises(UnsupportedTopologyError) as info:
        merge(dst, src)

    assert info.value.signature == {'role': 'src', 'face': 0,
                                    'verts': [0, 1]}
    assert dst.faces == cube().faces


def test_loop_that_is_not_a_cycle(box):
    # The open box on top of the cube closes its loop. The other two
    # boxes touch in a single vertex, their loops form a figure eight.
    src = join(open_box_on_top(), box(5, 6, 0, 1, 0, 1, bottom=False),
               box(6, 7, 1, 2, -1, 0, top=False))

    with pytest.raises(UnsupportedTopologyError) as info:
        merge(cube(), src)

    loops = info.value.signature['loops']
    assert len(loops) == 1
    assert len(loops[0]) == 7
    assert info.value.signature['shared_edges'] == 4


def test_warped_loop_cannot_be_oriented(box):
    src = lift(open_box_on_top(), [2], 1.5)

    with pytest.raises(OrientationInvariantError) as info:
        merge(box(0, 2, 0, 2, 0, 1), src)

    assert set(info.value.signature) == {'face', 'normal'}
    assert len(info.value.signature['face']) == 6
    assert info.value.signature['normal'] == [0.0, 0.0, 1.0]


def test_single_edge_between_open_boxes(box):
    dst = box(0, 1, 0, 1, 0, 1, top=False)
    src = box(1, 2, 0, 1, 1, 2, bottom=False)

    with pytest.raises(UnsupportedTopologyError, match='expected 2 each') \
            as info:
        merge(dst, src)

    assert set(info.value.signature) == SHARED_KEYS
    assert info.value.signature['shared_edges'] == 1


def test_walls_facing_the_same_way(prism):
    # Hexagonal prism on top of the cube, sharing two edges of its top
    # face. Both walls at each shared edge face outwards.
    hexagon = [(0, 0), (1, 0), (2, 0), (2, 2), (0, 2), (0, 1)]

    with pytest.raises(UnsupportedTopologyError) as info:
        merge(cube(), prism(hexagon, 1, 2))

    assert len(info.value.signature['failed']) == 2
    assert info.value.signature['shared_edges'] == 2


@pytest.mark.parametrize('far, message', [
    (0.5, 'cuts of different lengths'),
    (3.0, 'both main faces would have to be cut'),
])
def test_notch_filler_with_sloped_top(prism, box, far, message):
    src = lift(box(1, 2, 1, 2, 0, 1), [6, 7], far)

    with pytest.raises(UnsupportedTopologyError, match=message) as info:
        merge(prism(U_SHAPE, 0, 2), src)

    assert set(info.value.signature) == SHARED_KEYS
    assert info.value.signature['shared_edges'] == 3


@pytest.mark.parametrize('make_src, message', [
    (lambda box: lift(box(0, 1, 0, 1, 0, 2), [6, 7], 3),
     'side edges do not form an extrusion'),
    (lambda box: shear(box(0, 1, 0, 1, 0, 2), 0.5),
     'extrusions point in different directions'),
    (lambda box: box(0, 1, 0, 1, 0, 1.000008),
     'extrusions of equal length coincide'),
], ids=['uneven', 'sheared', 'equal'])
def test_extrusion_pair_mismatch(box, make_src, message):
    with pytest.raises(UnsupportedTopologyError, match=message) as info:
        merge(cube(), make_src(box))

    assert set(info.value.signature) == SHARED_KEYS
    assert info.value.signature['shared_faces'] == 1


def test_mismatched_abutting_faces_fail_verification(box):
    # The sloped wall has the mean height of the cube wall it abuts,
    # but the two faces do not cover each other.
    src = lift(lift(box(1, 2, 0, 1, 0, 1), [4, 5], 0.5), [6, 7], 1.5)

    with pytest.raises(PostMergeInvariantError) as info:
        merge(cube(), src)

    assert info.value.signature == {'bad_edges': 6, 'limit': 0}
