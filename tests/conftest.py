import pytest

from meshmerge.mesh import Mesh


U_SHAPE = [(0, 0), (3, 0), (3, 2), (2, 2), (2, 1), (1, 1), (1, 2), (0, 2)]


def make_prism(polygon, z0, z1, *, bottom=True, top=True):
    """ Extrude a counter-clockwise polygon from z0 to z1. """
    n = len(polygon)
    points = ([(x, y, z0) for x, y in polygon] +
              [(x, y, z1) for x, y in polygon])

    faces = []

    if bottom:
        faces.append(list(reversed(range(n))))

    if top:
        faces.append([n + i for i in range(n)])

    for i in range(n):
        j = (i + 1) % n
        faces.append([i, j, n + j, n + i])

    return Mesh(points, faces)


def make_box(x0, x1, y0, y1, z0, z1, **kwargs):
    polygon = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
    return make_prism(polygon, z0, z1, **kwargs)


def used_vertices(mesh):
    return {v for face in mesh.faces for v in face}


@pytest.fixture
def prism():
    return make_prism


@pytest.fixture
def box():
    return make_box


@pytest.fixture
def cube():
    return make_box(0, 1, 0, 1, 0, 1)


@pytest.fixture
def combined():
    """ Put the vertices of several meshes into one mesh.

    Returns the shared mesh and the remapped face lists.
    """

    def combine(*meshes):
        mesh = Mesh()
        face_lists = []

        for m in meshes:
            index = [mesh.add_vertex(p) for p in m.points]
            face_lists.append([[index[v] for v in f] for f in m.faces])

        return (mesh, *face_lists)

    return combine
