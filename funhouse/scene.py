#!/usr/bin/env python3
"""
Scene container shared by the viewport thread and the controls UI.

A Scene owns the bounds, the settings, the placed spheres and the curves. The
viewport thread calls step() and draw() once per frame; UI callbacks and mouse
handlers edit the scene in between. Every public method takes the re-entrant
lock, so callers may also hold `scene.lock` around a group of calls.
"""
import logging
import random
import threading
import time
from typing import Callable, List, Optional, Sequence, Tuple

from .bezier import AdaptiveBezierCurve
from .collisions import handle_collisions, total_kinetic_energy
from .constants import HIGHLIGHT_COLOR, SPHERE_COLOR
from .data_models import SceneBounds, SceneSettings
from .graphics import Color, GraphicsContext
from .physics import PhysicsBody
from .vector_utils import Point3d

log = logging.getLogger("funhouse.scene")


class Scene:
    """
    Spheres and curves inside one scene rectangle.

    Selection state lives here so both threads agree on what is selected:
    selected_sphere is an index into spheres, selected_control a
    (curve index, control point index) pair.
    """

    def __init__(self, bounds: Optional[SceneBounds] = None, settings: Optional[SceneSettings] = None,
                 name: str = "Untitled", rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.lock = threading.RLock()
        self.name = name
        self.bounds = bounds or SceneBounds.default()
        self.settings = settings or SceneSettings()
        self.spheres: List[PhysicsBody] = []
        self.curves: List[AdaptiveBezierCurve] = []
        self.playing = True
        self.draw_shaded = False
        self.selected_sphere: Optional[int] = None
        self.selected_control: Optional[Tuple[int, int]] = None
        self.rng = rng or random.Random()
        self.clock = clock
        self.last_collision_count = 0

    # -----------------------
    # Building the scene
    # -----------------------

    def add_sphere(self, position: Point3d, color: Color = SPHERE_COLOR) -> PhysicsBody:
        with self.lock:
            body = PhysicsBody(color, position, settings=self.settings, rng=self.rng, clock=self.clock)
            body.move_to(position, self.bounds)
            self.spheres.append(body)
            self.selected_sphere = len(self.spheres) - 1
            return body

    def add_curve(self, control_points: Sequence[Point3d]) -> AdaptiveBezierCurve:
        with self.lock:
            curve = AdaptiveBezierCurve(control_points, settings=self.settings)
            self.curves.append(curve)
            return curve

    def remove_sphere(self, index: int) -> None:
        with self.lock:
            if 0 <= index < len(self.spheres):
                del self.spheres[index]
                self.selected_sphere = None

    def remove_curve(self, index: int) -> None:
        with self.lock:
            if 0 <= index < len(self.curves):
                del self.curves[index]
                self.selected_control = None

    def clear(self) -> None:
        with self.lock:
            self.spheres.clear()
            self.curves.clear()
            self.selected_sphere = None
            self.selected_control = None

    def replace_contents(self, other: "Scene") -> None:
        """Adopt another scene's name, bounds, settings, spheres and curves."""
        with self.lock:
            self.name = other.name
            self.bounds = other.bounds
            self.settings = other.settings
            self.spheres = list(other.spheres)
            self.curves = list(other.curves)
            self.selected_sphere = None
            self.selected_control = None
            self.pause_clocks()
            log.debug("switched to scene '%s' (%d spheres, %d curves)", self.name, len(self.spheres), len(self.curves))

    def set_bounds(self, bounds: SceneBounds) -> None:
        """
        Replace the scene rectangle and pull every sphere back inside it.

        Spheres wider than the new rectangle shrink to fit, even below the
        minimum placement scale.
        """
        with self.lock:
            self.bounds = bounds
            limit = min(bounds.width, bounds.height) / 2
            for body in self.spheres:
                if body.radius > limit:
                    body.radius = limit
                body.contain(bounds)

    def set_smoothness(self, smoothness: float) -> None:
        with self.lock:
            self.settings.smoothness = max(1e-6, float(smoothness))
            log.debug("smoothness %g, flatness tolerance %.3g", self.settings.smoothness, self.settings.flatness_tolerance)
            for curve in self.curves:
                curve.update()

    # -----------------------
    # Simulation
    # -----------------------

    def step(self, now: Optional[float] = None) -> int:
        """
        Advance every sphere by its own elapsed time and resolve collisions.

        With settings.dedupe_collisions, all spheres move first and each
        unordered pair is then resolved once against that snapshot. Otherwise
        each sphere steps and resolves against all others in turn.

        Returns the number of collision responses applied.
        """
        with self.lock:
            if now is None:
                now = self.clock()
            if self.settings.dedupe_collisions:
                for body in self.spheres:
                    body.advance(body.elapsed(now), self.bounds)
                hits = handle_collisions(self.spheres, self.settings.restitution)
                if hits:
                    for body in self.spheres:
                        body.contain(self.bounds)
            else:
                hits = sum(body.update_physics(self.bounds, self.spheres, now) for body in self.spheres)
            self.last_collision_count = hits
            return hits

    def pause_clocks(self, now: Optional[float] = None) -> None:
        """Restart every sphere's clock so a resumed scene does not jump."""
        with self.lock:
            if now is None:
                now = self.clock()
            for body in self.spheres:
                body.last_update = now

    def kinetic_energy(self) -> float:
        with self.lock:
            return total_kinetic_energy(self.spheres)

    # -----------------------
    # Picking and editing
    # -----------------------

    def sphere_at(self, query: Point3d) -> Optional[int]:
        """Index of the topmost (last drawn) sphere containing query."""
        with self.lock:
            for i in range(len(self.spheres) - 1, -1, -1):
                if self.spheres[i].includes(query):
                    return i
            return None

    def control_point_at(self, query: Point3d) -> Optional[Tuple[int, int]]:
        """(curve index, point index) of the nearest control point in range."""
        with self.lock:
            best = None
            best_d2 = None
            for ci, curve in enumerate(self.curves):
                which = curve.choose_control_point(query)
                if which is None:
                    continue
                d2 = query.planar_dist2(curve.control_points[which])
                if best_d2 is None or d2 < best_d2:
                    best = (ci, which)
                    best_d2 = d2
            return best

    def move_sphere(self, index: int, position: Point3d) -> None:
        with self.lock:
            if 0 <= index < len(self.spheres):
                self.spheres[index].move_to(position, self.bounds)

    def resize_sphere(self, index: int, scale: float) -> None:
        with self.lock:
            if 0 <= index < len(self.spheres):
                self.spheres[index].resize(scale, self.bounds)

    def move_control_point(self, curve_index: int, point_index: int, position: Point3d) -> None:
        with self.lock:
            if 0 <= curve_index < len(self.curves):
                self.curves[curve_index].set_control_point(point_index, position)

    # -----------------------
    # Rendering
    # -----------------------

    def draw(self, gc: GraphicsContext, highlight_color: Color = HIGHLIGHT_COLOR) -> None:
        with self.lock:
            for i, body in enumerate(self.spheres):
                highlight = highlight_color if i == self.selected_sphere else None
                body.draw(gc, highlight_color=highlight, draw_shaded=self.draw_shaded)
            for curve in self.curves:
                curve.draw(gc)
