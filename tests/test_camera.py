import pytest

from funhouse.camera import Camera2D
from funhouse.data_models import SceneBounds


def test_scene_y_points_up_on_screen():
    cam = Camera2D(pixels_per_unit=100)
    cam.set_viewport_size(800, 600)
    assert cam.world_to_screen((0, 0)) == (400, 300)
    assert cam.world_to_screen((1, 1)) == (500, 200)


def test_screen_to_world_inverts_world_to_screen():
    cam = Camera2D(center=(0.5, -0.25), pixels_per_unit=80)
    cam.set_viewport_size(640, 480)
    wx, wy = cam.screen_to_world(cam.world_to_screen((1.25, 0.75)))
    assert wx == pytest.approx(1.25, abs=1 / 80)
    assert wy == pytest.approx(0.75, abs=1 / 80)


def test_zoom_keeps_pivot_fixed():
    cam = Camera2D(pixels_per_unit=100)
    cam.set_viewport_size(800, 600)
    pivot = (600, 150)
    before = cam.screen_to_world(pivot)
    cam.zoom(1.5, pivot)
    after = cam.screen_to_world(pivot)
    assert after == pytest.approx(before)
    assert cam.ppu == pytest.approx(150)


def test_fit_bounds_shows_whole_scene():
    cam = Camera2D()
    cam.set_viewport_size(800, 600)
    bounds = SceneBounds(left=-2, right=2, top=1.5, bottom=-1.5)
    cam.fit_bounds(bounds)
    left, top = cam.world_to_screen((bounds.left, bounds.top))
    right, bottom = cam.world_to_screen((bounds.right, bounds.bottom))
    assert 0 <= left < right <= 800
    assert 0 <= top < bottom <= 600


def test_requested_fit_waits_for_apply():
    cam = Camera2D(center=(5.0, 5.0), pixels_per_unit=10.0)
    cam.set_viewport_size(800, 600)
    bounds = SceneBounds(left=-1, right=3, top=2, bottom=0)
    assert not cam.apply_pending_fit()

    cam.request_fit(bounds)
    assert cam.center == [5.0, 5.0]
    assert cam.ppu == 10.0

    assert cam.apply_pending_fit()
    assert cam.center == [1.0, 1.0]
    assert not cam.apply_pending_fit()
