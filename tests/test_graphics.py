import pytest

from funhouse.graphics import LIGHTING, Mat4, RecordingContext
from funhouse.vector_utils import Point3d


def test_rotation_about_z_matches_gl():
    m = Mat4.rotation(90, 0, 0, 1)
    assert m.apply(Point3d(1, 0, 0)).isclose(Point3d(0, 1, 0))


def test_rotation_about_y_turns_z_into_x():
    m = Mat4.rotation(90, 0, 1, 0)
    assert m.apply(Point3d(0, 0, 1)).isclose(Point3d(1, 0, 0))


def test_rotation_about_zero_axis_is_identity():
    m = Mat4.rotation(45, 0, 0, 0)
    assert m.apply(Point3d(1, 2, 3)).isclose(Point3d(1, 2, 3))


def test_transforms_compose_right_to_left():
    gc = RecordingContext()
    gc.translate(1, 2, 0)
    gc.scale(2, 2, 2)
    gc.begin_end("square")
    d = gc.draws[0]
    assert d.matrix.apply(Point3d(1, 1, 0)).isclose(Point3d(3, 4, 0))


def test_push_pop_restores_matrix():
    gc = RecordingContext()
    gc.translate(1, 0, 0)
    gc.push_matrix()
    gc.translate(5, 5, 5)
    gc.pop_matrix()
    gc.begin_end("sphere")
    assert gc.draws[0].origin().isclose(Point3d(1, 0, 0))
    assert gc.depth == 0


def test_unbalanced_pop_raises():
    gc = RecordingContext()
    with pytest.raises(IndexError):
        gc.pop_matrix()


def test_unknown_primitive_is_rejected():
    gc = RecordingContext()
    with pytest.raises(ValueError):
        gc.begin_end("teapot")


def test_color_and_lighting_are_captured():
    gc = RecordingContext()
    gc.color((1, 2, 3))
    gc.enable(LIGHTING)
    gc.begin_end("sphere")
    gc.disable(LIGHTING)
    gc.begin_end("sphere-wireframe")
    lit, unlit = gc.draws
    assert lit.color == (1, 2, 3) and lit.lighting
    assert not unlit.lighting
    assert [c[0] for c in gc.calls] == ["color", "enable", "begin_end", "disable", "begin_end"]
    assert gc.primitives("sphere") == [lit]
