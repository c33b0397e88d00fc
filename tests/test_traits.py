import numpy as np

import meshmerge.linalg as linalg
import meshmerge.traits as traits


SQUARE = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)


def test_about_eq():
    assert linalg.about_eq(1.0, 1.0 + 1e-6)
    assert not linalg.about_eq(1.0, 1.0 + 1e-4)


def test_vec_about_eq():
    assert linalg.vec_about_eq([1, 2, 3], [1, 2, 3 + 1e-6])
    assert not linalg.vec_about_eq([1, 2, 3], [1, 2.001, 3])


def test_unit_zero_vector():
    assert np.array_equal(linalg.unit(np.zeros(3)), np.zeros(3))
    assert linalg.about_eq(linalg.norm(linalg.unit([3.0, 4.0, 0.0])), 1.0)


def test_positional_key():
    assert traits.positional_key([0.1 + 0.2, 0, 0]) == (0.3, 0.0, 0.0)
    assert traits.positional_key([1.000001, 2, 3]) == (1.0, 2.0, 3.0)
    assert traits.positional_key([1.0001, 2, 3]) != (1.0, 2.0, 3.0)


def test_positional_key_negative_zero():
    key = traits.positional_key([-0.0, -0.000001, 0.0])
    assert key == (0.0, 0.0, 0.0)
    assert str(key) == '(0.0, 0.0, 0.0)'


def test_face_key_ignores_start_and_winding():
    assert traits.face_key([3, 1, 2]) == (1, 2, 3)
    assert traits.face_key([2, 1, 3]) == traits.face_key([1, 2, 3])


def test_face_normal_follows_winding():
    assert np.allclose(traits.face_normal(SQUARE, [0, 1, 2, 3]), [0, 0, 1])
    assert np.allclose(traits.face_normal(SQUARE, [3, 2, 1, 0]), [0, 0, -1])


def test_face_normal_non_convex():
    # L-shaped hexagon, counter-clockwise when seen from above.
    points = np.array([[0, 1, 0], [1, 1, 0], [1, 0, 0],
                       [2, 0, 0], [2, 2, 0], [0, 2, 0]], dtype=float)
    normal = traits.face_normal(points, range(6))
    assert np.allclose(normal, [0, 0, 1])


def test_face_normal_degenerate():
    points = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0]], dtype=float)
    assert np.allclose(traits.face_normal(points, [0, 1, 2]), 0.0)
