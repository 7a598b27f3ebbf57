import random

import pytest

from funhouse.data_models import SceneBounds, SceneSettings
from funhouse.graphics import RecordingContext
from funhouse.scene import Scene
from funhouse.vector_utils import Point3d, Vector3d


@pytest.fixture
def scene(bounds, clock):
    return Scene(bounds, SceneSettings(), rng=random.Random(3), clock=clock)


def head_on_pair(scene):
    a = scene.add_sphere(Point3d(0.0, 0.0))
    b = scene.add_sphere(Point3d(0.3, 0.0))
    a.radius = b.radius = 0.2
    a.velocity = Vector3d(0.1, 0.0, 0.0)
    b.velocity = Vector3d(-0.1, 0.0, 0.0)
    return a, b


def test_add_sphere_clamps_and_selects(scene):
    body = scene.add_sphere(Point3d(10.0, 0.0))
    assert body.position.x == pytest.approx(2.0 - 0.15)
    assert scene.selected_sphere == 0
    assert body.settings is scene.settings


def test_step_moves_bodies_by_elapsed_time(scene, clock):
    body = scene.add_sphere(Point3d(0.0, 0.0))
    body.velocity = Vector3d(0.2, 0.0, 0.0)
    clock.advance(0.1)
    scene.step()
    assert body.position.x == pytest.approx(0.2)


def test_step_resolves_pair_once(scene, clock):
    a, b = head_on_pair(scene)
    assert scene.step(clock.now) == 1
    assert scene.last_collision_count == 1
    assert a.velocity.dx == pytest.approx(-0.095)
    assert b.velocity.dx == pytest.approx(0.095)


def test_legacy_step_visits_pairs_from_each_side(scene, clock):
    scene.settings.dedupe_collisions = False
    a, b = head_on_pair(scene)
    # After a's response the pair is separating, so b's visit is a no-op
    assert scene.step(clock.now) == 1
    assert a.velocity.dx == pytest.approx(-0.095)


def test_energy_does_not_grow_over_many_steps(scene, clock):
    rng = random.Random(11)
    for _ in range(6):
        body = scene.add_sphere(Point3d(rng.uniform(-1.5, 1.5), rng.uniform(-1.0, 1.0)))
        body.resize(rng.uniform(0.15, 0.35), scene.bounds)
    start = scene.kinetic_energy()
    for _ in range(200):
        clock.advance(1 / 60)
        scene.step()
        for body in scene.spheres:
            assert scene.bounds.contains(body.position, margin=body.radius - 1e-9)
    assert scene.kinetic_energy() <= start + 1e-12


def test_pause_clocks_prevents_jump(scene, clock):
    body = scene.add_sphere(Point3d(0.0, 0.0))
    body.velocity = Vector3d(0.2, 0.0, 0.0)
    clock.advance(10.0)
    scene.pause_clocks()
    scene.step()
    assert body.position.x == 0.0


def test_sphere_at_prefers_topmost(scene):
    scene.add_sphere(Point3d(0.0, 0.0))
    scene.add_sphere(Point3d(0.1, 0.0))
    assert scene.sphere_at(Point3d(0.05, 0.0)) == 1
    assert scene.sphere_at(Point3d(1.5, 1.0)) is None


def test_control_point_at_picks_nearest_across_curves(scene):
    scene.add_curve([Point3d(0, 0), Point3d(1, 1), Point3d(2, 0)])
    scene.add_curve([Point3d(-1, 0), Point3d(0.1, 0.1), Point3d(-1, -1)])
    assert scene.control_point_at(Point3d(0.08, 0.08)) == (1, 1)
    assert scene.control_point_at(Point3d(1.0, 1.05)) == (0, 1)
    assert scene.control_point_at(Point3d(1.0, -1.0)) is None


def test_move_control_point_invalidates(scene):
    curve = scene.add_curve([Point3d(0, 0), Point3d(1, 1), Point3d(2, 0)])
    curve.compile()
    scene.move_control_point(0, 2, Point3d(2, 1))
    assert not curve.compiled
    assert curve.points[-1].isclose(Point3d(2, 1, 0))


def test_move_and_resize_sphere(scene):
    scene.add_sphere(Point3d(0.0, 0.0))
    scene.resize_sphere(0, 0.5)
    scene.move_sphere(0, Point3d(5.0, 5.0))
    body = scene.spheres[0]
    assert body.radius == 0.5
    assert body.position.isclose(Point3d(1.5, 1.0, 0.0))
    # Out-of-range indices are ignored
    scene.move_sphere(7, Point3d(0, 0))
    scene.resize_sphere(-1, 1.0)


def test_set_bounds_pulls_spheres_inside(scene):
    scene.add_sphere(Point3d(1.8, 1.3))
    scene.set_bounds(SceneBounds(left=-1, right=1, top=1, bottom=-1))
    body = scene.spheres[0]
    assert body.position.isclose(Point3d(0.85, 0.85, 0.0))


def test_set_bounds_shrinks_spheres_wider_than_scene(scene):
    scene.add_sphere(Point3d(0.0, 0.0))
    scene.resize_sphere(0, 1.0)
    scene.set_bounds(SceneBounds(left=-0.5, right=0.5, top=0.25, bottom=-0.25))
    body = scene.spheres[0]
    assert body.radius == pytest.approx(0.25)
    b = scene.bounds
    assert b.left <= body.position.x - body.radius
    assert body.position.x + body.radius <= b.right
    assert b.bottom <= body.position.y - body.radius
    assert body.position.y + body.radius <= b.top


def test_set_smoothness_recompiles_curves(scene):
    curve = scene.add_curve([Point3d(0, 0), Point3d(1, 1), Point3d(2, 0)])
    coarse = len(curve.points)
    scene.set_smoothness(100000.0)
    assert not curve.compiled
    assert len(curve.points) > coarse


def test_remove_and_clear(scene):
    scene.add_sphere(Point3d(0, 0))
    scene.add_curve([Point3d(0, 0), Point3d(1, 1), Point3d(2, 0)])
    scene.remove_sphere(0)
    assert scene.spheres == [] and scene.selected_sphere is None
    scene.remove_sphere(3)
    scene.add_sphere(Point3d(0, 0))
    scene.clear()
    assert scene.spheres == [] and scene.curves == []


def test_replace_contents(scene, clock):
    other = Scene(SceneBounds(left=0, right=1, top=1, bottom=0), SceneSettings(smoothness=10),
                  name="Other", clock=clock)
    other.add_sphere(Point3d(0.5, 0.5))
    scene.add_sphere(Point3d(0, 0))
    scene.replace_contents(other)
    assert scene.name == "Other"
    assert scene.settings.smoothness == 10
    assert len(scene.spheres) == 1
    assert scene.selected_sphere is None


def test_draw_highlights_selected_sphere(scene):
    scene.add_sphere(Point3d(-1, 0))
    scene.add_sphere(Point3d(1, 0))
    scene.add_curve([Point3d(0, 0), Point3d(1, 1), Point3d(2, 0)])
    scene.selected_sphere = 1
    scene.draw_shaded = True
    gc = RecordingContext()
    scene.draw(gc, highlight_color=(9, 9, 9))
    assert len(gc.primitives("sphere")) == 2
    wire = gc.primitives("sphere-wireframe")
    assert len(wire) == 1 and wire[0].color == (9, 9, 9)
    assert wire[0].origin().isclose(Point3d(1, 0, 0))
    assert all(d.lighting for d in gc.primitives("sphere"))
    assert len(gc.primitives("square")) == 3
