import math

from funhouse.vector_utils import Point3d, Vector3d, clamp


def test_clamp():
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert clamp(2, 0, 3) == 2


def test_point_minus_point_is_vector():
    v = Point3d(3, 4, 1) - Point3d(1, 1, 1)
    assert v == Vector3d(2, 3, 0)


def test_point_plus_and_minus_vector():
    p = Point3d(1, 2, 3)
    assert p + Vector3d(1, 1, 1) == Point3d(2, 3, 4)
    assert p - Vector3d(1, 1, 1) == Point3d(0, 1, 2)


def test_vector_arithmetic():
    v = Vector3d(1, 2, 0)
    assert v * 2 == Vector3d(2, 4, 0)
    assert 2 * v == Vector3d(2, 4, 0)
    assert -v == Vector3d(-1, -2, 0)
    assert v.dot(Vector3d(3, 4, 5)) == 11
    assert Vector3d(1, 0, 0).cross2d(Vector3d(0, 1, 0)) == 1
    assert Vector3d(0, 1, 0).cross2d(Vector3d(1, 0, 0)) == -1


def test_norms_and_distances():
    v = Vector3d(3, 4, 0)
    assert v.norm2() == 25
    assert v.norm() == 5
    assert Point3d(0, 0, 0).dist(Point3d(3, 4, 0)) == 5
    assert Point3d(0, 0, 0).planar_dist2(Point3d(3, 4, 12)) == 25
    assert Point3d(0, 0, 0).dist2(Point3d(3, 4, 12)) == 169


def test_unit_of_zero_vector_is_zero():
    assert Vector3d(0, 0, 0).unit() == Vector3d(0, 0, 0)
    u = Vector3d(3, 4, 0).unit()
    assert math.isclose(u.norm(), 1.0)


def test_isclose_and_from_sequence():
    assert Point3d(1, 2, 0).isclose(Point3d(1 + 1e-12, 2, 0))
    assert not Point3d(1, 2, 0).isclose(Point3d(1.1, 2, 0))
    assert Point3d.from_sequence([1, 2]) == Point3d(1.0, 2.0, 0.0)
    assert Point3d.from_sequence([1, 2, 3]) == Point3d(1.0, 2.0, 3.0)
