import numpy as np
import pytest

import meshmerge.obj as obj

from meshmerge.mesh import Mesh
from meshmerge.mesh import mesh_from_vertex_face_lists
from meshmerge.mesh import mesh_to_vertex_face_lists


TRIANGLE = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]


def test_empty_mesh():
    mesh = Mesh()
    assert mesh.points.shape == (0, 3)
    assert mesh.faces == []
    assert mesh.size == (0, 0)


def test_faces_require_points():
    with pytest.raises(ValueError):
        Mesh(None, [[0, 1, 2]])


def test_face_validation():
    with pytest.raises(ValueError):
        Mesh(TRIANGLE, [[0, 1]])

    with pytest.raises(ValueError):
        Mesh(TRIANGLE, [[0, 1, 1]])

    with pytest.raises(IndexError):
        Mesh(TRIANGLE, [[0, 1, 3]])


def test_points_are_copied():
    points = np.array(TRIANGLE, dtype=float)
    mesh = Mesh(points, [[0, 1, 2]])
    points[0, 0] = 5.0
    assert mesh.points[0, 0] == 0.0


def test_add_vertex_deduplicates():
    mesh = Mesh(TRIANGLE, [[0, 1, 2]])
    assert mesh.add_vertex([1.000001, 0, 0]) == 1
    assert mesh.add_vertex([1, 1, 0]) == 3
    assert mesh.size == (4, 1)


def test_copy_is_independent(cube):
    other = cube.copy()
    other.faces[0].reverse()
    other.points[0] = [9, 9, 9]
    assert cube.faces[0] != other.faces[0]
    assert cube.points[0].tolist() == [0, 0, 0]


def test_name_keeps_file_stem():
    mesh = Mesh(name='some/dir/part.obj')
    assert mesh.name == 'part'


def test_vertex_face_lists(cube):
    verts, faces = mesh_to_vertex_face_lists(cube)
    mesh = mesh_from_vertex_face_lists(verts, faces)
    assert np.array_equal(mesh.points, cube.points)
    assert mesh.faces == cube.faces

    faces[0].reverse()
    assert cube.faces[0] != faces[0]


def test_read_write(cube, tmp_path):
    filename = tmp_path / 'cube.obj'
    cube.write(filename)
    mesh = Mesh.read(filename)

    assert mesh.name == 'cube'
    assert np.allclose(mesh.points, cube.points)
    assert mesh.faces == cube.faces


def test_obj_read_vertex_definitions(tmp_path):
    filename = tmp_path / 'quad.obj'
    filename.write_text('# quad\n'
                        'v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\n'
                        'vn 0 0 1\n'
                        'f 1//1 2//1 3//1\n'
                        'f 1/1/1 -2 -1\n')

    points, faces = obj.read(filename)

    assert points.shape == (4, 3)
    assert faces == [[0, 1, 2], [0, 2, 3]]


def test_obj_read_invalid(tmp_path):
    filename = tmp_path / 'bad.obj'
    filename.write_text('v 0 0 0\nf 1//2//3 1 1\n')

    with pytest.raises(ValueError):
        obj.read(filename)
