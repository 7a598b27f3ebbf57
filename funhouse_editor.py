#!/usr/bin/env python3
"""
Funhouse scene editor entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Shares one Scene between them; all access is guarded by the scene's re-entrant lock.
- Draws the scene through PygameGraphicsContext, a pygame backend for the
  immediate-mode GraphicsContext that spheres and curves program against.

Viewport controls
- Left-click empty space inside the scene: place a sphere; keep dragging to size it.
- Left-drag a sphere: move it. Left-drag a red control point: reshape its curve.
- Wheel over a selected sphere: resize it. Wheel elsewhere: zoom.
- Right/middle-drag or arrow keys: pan. Space: play/pause. Delete: remove selected sphere.

Threading model
- PygameRenderer runs in a background thread and performs input handling, stepping
  physics and drawing. Each of those takes the scene lock for a short critical section.
- The UI class runs in the main thread via Dear PyGui. It reflects scene state on a
  periodic frame callback and calls Scene methods, which lock internally.

Running
1) Install: `pip install -e .`
2) Run: `funhouse-editor` or `python funhouse_editor.py --template funhouse.json`
"""

import argparse
import logging
import math
import os
import threading
import time
from typing import Optional

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from funhouse.camera import Camera2D
from funhouse.constants import (
    BACKGROUND_COLOR,
    BOUNDS_COLOR,
    SAFE_COORD_LIMIT,
    SMOOTHNESS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from funhouse.graphics import Color, Mat4, MatrixStackContext
from funhouse.presets_loader import TEMPLATES_DIR, list_templates, load_scene, load_template, save_scene
from funhouse.scene import Scene
from funhouse.utils import try_float
from funhouse.vector_utils import Point3d, clamp

log = logging.getLogger("funhouse.editor")

# Control points of a newly added curve, relative to the scene centre
NEW_CURVE = ((-0.8, -0.4), (0.0, 0.6), (0.8, -0.4))

ORIGIN = Point3d(0.0, 0.0, 0.0)


# ============================================================
# Pygame graphics backend
# ============================================================

def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def _shade(color: Color, factor: float) -> Color:
    return tuple(int(clamp(c * factor, 0, 255)) for c in color)


class PygameGraphicsContext(MatrixStackContext):
    """
    Orthographic top-down projection of the scene onto a pygame surface.

    z is dropped after transforming; draw order is call order.
    """

    def __init__(self, surface, camera: Camera2D):
        super().__init__()
        self.surface = surface
        self.camera = camera

    def _to_screen(self, matrix: Mat4, local: Point3d):
        p = matrix.apply(local)
        return _safe_point(self.camera.world_to_screen((p.x, p.y)))

    def _radius_px(self, matrix: Mat4) -> int:
        centre = matrix.apply(ORIGIN)
        edge = matrix.apply(Point3d(1.0, 0.0, 0.0))
        return max(1, int(self.camera.length_to_pixels(centre.dist(edge))))

    def draw_primitive(self, primitive: str, matrix: Mat4, color: Color, lighting: bool) -> None:
        if primitive == "sphere":
            self._draw_sphere(matrix, color, lighting)
        elif primitive == "sphere-wireframe":
            self._draw_wireframe(matrix, color)
        elif primitive == "square":
            self._draw_square(matrix, color)
        elif primitive == "path":
            self._draw_path(matrix, color)

    def _draw_sphere(self, matrix, color, lighting):
        c = self._to_screen(matrix, ORIGIN)
        if c is None:
            return
        r = self._radius_px(matrix)
        if not lighting:
            gfxdraw.filled_circle(self.surface, c[0], c[1], r, color)
            gfxdraw.aacircle(self.surface, c[0], c[1], r, color)
            return
        # Crude diffuse falloff: darker rim, brighter spot toward the light (upper left)
        gfxdraw.filled_circle(self.surface, c[0], c[1], r, _shade(color, 0.55))
        steps = 6
        for k in range(1, steps + 1):
            f = k / steps
            rr = max(1, int(r * (1.0 - 0.8 * f)))
            off = int(r * 0.35 * f)
            gfxdraw.filled_circle(self.surface, c[0] - off, c[1] - off, rr, _shade(color, 0.55 + 0.6 * f))
        gfxdraw.aacircle(self.surface, c[0], c[1], r, _shade(color, 0.4))

    def _draw_wireframe(self, matrix, color):
        c = self._to_screen(matrix, ORIGIN)
        if c is None:
            return
        r = self._radius_px(matrix)
        gfxdraw.aacircle(self.surface, c[0], c[1], r, color)
        gfxdraw.aaellipse(self.surface, c[0], c[1], r, max(1, r // 3), color)
        gfxdraw.aaellipse(self.surface, c[0], c[1], max(1, r // 3), r, color)

    def _draw_square(self, matrix, color):
        corners = [self._to_screen(matrix, Point3d(x, y, 0.0))
                   for x, y in ((-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5))]
        if None in corners:
            return
        # Control points must stay grabbable at any zoom
        xs = [p[0] for p in corners]
        ys = [p[1] for p in corners]
        if max(xs) - min(xs) < 6:
            cx, cy = sum(xs) // 4, sum(ys) // 4
            pygame.draw.rect(self.surface, color, pygame.Rect(cx - 3, cy - 3, 7, 7))
            return
        gfxdraw.filled_polygon(self.surface, corners, color)

    def _draw_path(self, matrix, color):
        start = self._to_screen(matrix, ORIGIN)
        end = self._to_screen(matrix, Point3d(0.0, 0.0, 1.0))
        if start is None or end is None:
            return
        width = max(2, self._radius_px(matrix) * 2)
        pygame.draw.line(self.surface, color, start, end, width)


# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: steps the scene, handles picking and dragging, draws.
    """

    def __init__(self, scene: Scene):
        super().__init__(daemon=True)
        self.scene = scene
        self.camera = Camera2D(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.drag_mode: Optional[str] = None  # "sphere" | "size" | "control" | "pan"
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.running = True

    def fit_camera(self):
        """Queue a fit to the scene bounds; the render loop applies it."""
        with self.scene.lock:
            bounds = self.scene.bounds
        self.camera.request_fit(bounds)

    def _world(self, screen) -> Point3d:
        wx, wy = self.camera.screen_to_world(screen)
        return Point3d(wx, wy, 0.0)

    def run(self):
        pygame.init()
        pygame.display.set_caption("Funhouse - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.fit_camera()

        last_time = time.perf_counter()
        while self.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.camera.apply_pending_fit()
            self.handle_events(real_dt)

            with self.scene.lock:
                playing = self.scene.playing
            if playing and self.drag_mode not in ("sphere", "size"):
                self.scene.step(now)
            else:
                # Keep clocks fresh so nothing jumps when play resumes
                self.scene.pause_clocks(now)

            self.draw()
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    with self.scene.lock:
                        self.scene.playing = not self.scene.playing
                elif event.key in (pygame.K_DELETE, pygame.K_BACKSPACE):
                    with self.scene.lock:
                        if self.scene.selected_sphere is not None:
                            self.scene.remove_sphere(self.scene.selected_sphere)

            elif event.type == pygame.MOUSEWHEEL:
                self._on_wheel(event.y)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._on_left_down(pygame.mouse.get_pos())
                elif event.button in (2, 3):
                    self.drag_mode = "pan"
                    self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2, 3):
                    self.drag_mode = None
                    with self.scene.lock:
                        self.scene.selected_control = None

            elif event.type == pygame.MOUSEMOTION:
                self._on_motion(pygame.mouse.get_pos())

    def _on_left_down(self, mouse):
        q = self._world(mouse)
        scene = self.scene
        with scene.lock:
            hit = scene.control_point_at(q)
            if hit is not None:
                scene.selected_control = hit
                self.drag_mode = "control"
                return
            idx = scene.sphere_at(q)
            if idx is not None:
                scene.selected_sphere = idx
                self.drag_mode = "sphere"
                return
            if scene.bounds.contains(q):
                scene.add_sphere(q)
                self.drag_mode = "size"
                log.debug("placed sphere at (%.3f, %.3f)", q.x, q.y)
                return
        self.drag_mode = "pan"
        self.drag_start_screen = mouse

    def _on_motion(self, mouse):
        scene = self.scene
        if self.drag_mode == "control":
            with scene.lock:
                if scene.selected_control is not None:
                    ci, pi = scene.selected_control
                    scene.move_control_point(ci, pi, self._world(mouse))
        elif self.drag_mode == "sphere":
            with scene.lock:
                if scene.selected_sphere is not None:
                    scene.move_sphere(scene.selected_sphere, self._world(mouse))
        elif self.drag_mode == "size":
            with scene.lock:
                idx = scene.selected_sphere
                if idx is not None:
                    centre = scene.spheres[idx].position
                    scene.resize_sphere(idx, math.sqrt(centre.planar_dist2(self._world(mouse))))
        elif self.drag_mode == "pan":
            dx = mouse[0] - self.drag_start_screen[0]
            dy = mouse[1] - self.drag_start_screen[1]
            self.camera.pan_pixels(dx, dy)
            self.drag_start_screen = mouse

    def _on_wheel(self, direction):
        factor = 1.1 if direction > 0 else 1.0 / 1.1
        mouse = pygame.mouse.get_pos()
        q = self._world(mouse)
        with self.scene.lock:
            idx = self.scene.sphere_at(q)
            if idx is not None and idx == self.scene.selected_sphere:
                body = self.scene.spheres[idx]
                self.scene.resize_sphere(idx, body.radius * factor)
                return
        self.camera.zoom(factor, mouse)

    def draw_bounds(self, surf):
        with self.scene.lock:
            b = self.scene.bounds
        tl = _safe_point(self.camera.world_to_screen((b.left, b.top)))
        br = _safe_point(self.camera.world_to_screen((b.right, b.bottom)))
        if tl and br:
            pygame.draw.rect(surf, BOUNDS_COLOR, pygame.Rect(tl[0], tl[1], br[0] - tl[0], br[1] - tl[1]), 1)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        self.draw_bounds(surf)

        gc = PygameGraphicsContext(surf, self.camera)
        self.scene.draw(gc)

        with self.scene.lock:
            playing = self.scene.playing
            n_spheres = len(self.scene.spheres)
        draw_text(surf, "Click: place sphere | Drag: move/size | Red squares: curve controls | "
                        "Wheel: resize/zoom | Space: Pause/Play", 10, 10, (200, 200, 200))
        draw_text(surf, f"Spheres: {n_spheres}  [{'Playing' if playing else 'Paused'}]", 10, 30, (200, 200, 200))

        pygame.display.flip()


_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16) or pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: templates, save, simulation controls, tessellation.
    """
    COLLISION_MODES = ("Once per pair", "Per body (legacy)")

    def __init__(self, scene: Scene, renderer: PygameRenderer):
        self.scene = scene
        self.renderer = renderer
        self.status_msg_id = None
        self.stats_id = None
        self.save_path_id = None
        self._template_map = {}

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_scene)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Funhouse - Controls', width=460, height=520)

        with dpg.window(label="Controls", width=440, height=500, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Template:")
                for fn, display in list_templates():
                    self._template_map[display] = fn
                items = list(self._template_map.keys()) or ["(no templates)"]
                dpg.add_combo(items, default_value=items[0], width=200, tag="template_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_template(dpg.get_value("template_combo")))
            with dpg.group(horizontal=True):
                self.save_path_id = dpg.add_input_text(default_value=os.path.join(TEMPLATES_DIR, "my_scene.json"),
                                                       width=300)
                dpg.add_button(label="Save", callback=self._on_save)

            dpg.add_separator()

            dpg.add_text("Scene")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Add Curve", callback=self._on_add_curve)
                dpg.add_button(label="Remove Last Curve", callback=self._on_remove_curve)
                dpg.add_button(label="Delete Sphere", callback=self._on_delete_sphere)
            dpg.add_button(label="Fit Camera", callback=self.renderer.fit_camera)

            dpg.add_separator()

            dpg.add_text("Simulation Controls")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)
                dpg.add_checkbox(label="Shaded", default_value=False,
                                 callback=lambda s, a, u: self._toggle_shaded(a), tag="shaded_checkbox")
            dpg.add_combo(list(self.COLLISION_MODES), default_value=self.COLLISION_MODES[0], width=200,
                          label="Collisions", callback=lambda s, a, u: self._set_collision_mode(a),
                          tag="collision_mode_combo")
            dpg.add_slider_float(label="Restitution", min_value=0.0, max_value=1.0, default_value=0.95, width=200,
                                 callback=lambda s, a, u: self._set_restitution(a), tag="restitution_slider")

            dpg.add_separator()

            dpg.add_text("Curves")
            dpg.add_input_text(label="Smoothness", default_value=f"{SMOOTHNESS:g}", width=120,
                               on_enter=True, callback=lambda s, a, u: self._set_smoothness(a),
                               tag="smoothness_input")

            dpg.add_separator()
            self.stats_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)
        self._reflect_settings()

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _reflect_settings(self):
        with self.scene.lock:
            settings = self.scene.settings
            shaded = self.scene.draw_shaded
        dpg.set_value("restitution_slider", settings.restitution)
        dpg.set_value("smoothness_input", f"{settings.smoothness:g}")
        dpg.set_value("shaded_checkbox", shaded)
        mode = self.COLLISION_MODES[0] if settings.dedupe_collisions else self.COLLISION_MODES[1]
        dpg.set_value("collision_mode_combo", mode)

    def load_template(self, display: str):
        fn = self._template_map.get(display)
        if fn is None:
            self._set_error("No template selected.")
            return
        loaded = load_template(fn)
        if loaded is None:
            self._set_error(f"Failed to load template '{display}'.")
            return
        self.scene.replace_contents(loaded)
        self.renderer.fit_camera()
        self._reflect_settings()
        self._set_status(f"Loaded template: {display}")

    def _on_save(self):
        path = dpg.get_value(self.save_path_id).strip()
        if not path:
            self._set_error("Enter a file name to save to.")
            return
        try:
            save_scene(self.scene, path)
        except OSError as e:
            self._set_error(f"Save failed: {e}")
            return
        self._set_status(f"Saved to {path}")

    def _on_add_curve(self):
        with self.scene.lock:
            b = self.scene.bounds
            cx = (b.left + b.right) / 2
            cy = (b.bottom + b.top) / 2
            self.scene.add_curve([Point3d(cx + x, cy + y, 0.0) for x, y in NEW_CURVE])
        self._set_status("Added curve.")

    def _on_remove_curve(self):
        with self.scene.lock:
            if not self.scene.curves:
                self._set_error("No curves to remove.")
                return
            self.scene.remove_curve(len(self.scene.curves) - 1)
        self._set_status("Removed curve.")

    def _on_delete_sphere(self):
        with self.scene.lock:
            idx = self.scene.selected_sphere
            if idx is None:
                self._set_error("No sphere selected.")
                return
            self.scene.remove_sphere(idx)
        self._set_status("Deleted selected sphere.")

    def _toggle_play(self):
        with self.scene.lock:
            self.scene.playing = not self.scene.playing
            state = "Playing" if self.scene.playing else "Paused"
        self._set_status(f"Simulation {state}.")

    def _step_once(self):
        # One 60 Hz frame, pausing first so the renderer does not also step
        with self.scene.lock:
            self.scene.playing = False
            now = self.scene.clock()
            self.scene.pause_clocks(now - 1 / 60.0)
            self.scene.step(now)
        self._set_status("Stepped one frame.")

    def _toggle_shaded(self, value):
        with self.scene.lock:
            self.scene.draw_shaded = bool(value)

    def _set_collision_mode(self, mode):
        with self.scene.lock:
            self.scene.settings.dedupe_collisions = (mode == self.COLLISION_MODES[0])
        self._set_status(f"Collisions: {mode}")

    def _set_restitution(self, val):
        val = try_float(val)
        if val is None:
            return
        with self.scene.lock:
            self.scene.settings.restitution = clamp(val, 0.0, 1.0)

    def _set_smoothness(self, text):
        val = try_float(text)
        if val is None or val <= 0:
            self._set_error("Smoothness must be a positive number.")
            return
        self.scene.set_smoothness(val)
        self._set_status(f"Smoothness set to {val:g} (tolerance {1.0 / val:.2e}).")

    def _sync_ui_with_scene(self):
        with self.scene.lock:
            n_points = sum(len(c.points) for c in self.scene.curves)
            text = (f"{self.scene.name}: {len(self.scene.spheres)} spheres, "
                    f"{len(self.scene.curves)} curves ({n_points} points)\n"
                    f"Kinetic energy: {self.scene.kinetic_energy():.3e}  "
                    f"Collisions last frame: {self.scene.last_collision_count}")
        dpg.set_value(self.stats_id, text)
        if not self.renderer.running:
            dpg.stop_dearpygui()
            return
        self._schedule_sync()


# ============================================================
# Default Scene and Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Funhouse sphere and curve scene editor")
    parser.add_argument("scene", nargs="?", help="Path to a scene JSON file")
    parser.add_argument("--template", default="funhouse.json",
                        help="Template in templates/ to start from (default: funhouse.json)")
    parser.add_argument("--smoothness", type=float, default=None,
                        help="Curve smoothness; flatness tolerance is 1/smoothness")
    parser.add_argument("--legacy-collisions", action="store_true",
                        help="Resolve collisions per body instead of once per pair")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def build_scene(args) -> Scene:
    scene = None
    if args.scene:
        scene = load_scene(args.scene)
    if scene is None and args.template:
        scene = load_template(args.template)
    if scene is None:
        log.info("starting with an empty scene")
        scene = Scene(name="Empty scene")
    if args.smoothness is not None:
        scene.set_smoothness(args.smoothness)
    if args.legacy_collisions:
        scene.settings.dedupe_collisions = False
    return scene


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    scene = build_scene(args)
    renderer = PygameRenderer(scene)
    renderer.start()

    UI(scene, renderer)

    try:
        dpg.start_dearpygui()
    finally:
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()


if __name__ == "__main__":
    main()
