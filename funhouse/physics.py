#!/usr/bin/env python3
"""
Sphere physics for the Funhouse scene editor.

Responsibilities
- Hold the placement of one sphere: position, radius, velocity, color.
- Keep the sphere inside the scene rectangle while it is resized or dragged.
- Advance the sphere by wall-clock-scaled Euler integration and bounce it off
  the walls and off other spheres.

Units and conventions
- Positions and radii are scene units. Physics acts on x and y only; z is
  carried along for drawing.
- Velocity is scene units per SceneSettings.time_unit_ms milliseconds (100 ms
  by default), so dt = elapsed_ms / time_unit_ms.
- Mass is radius cubed.

Numerical notes
- dt is not clamped. A stalled frame produces one large step, which the wall
  checks then snap back inside the scene.
- Wall checks are independent, so a body pushed into a corner can have both
  velocity components flipped in the same step.
"""
import math
import random
import time
from typing import Callable, Iterable, Optional

from .collisions import handle_sphere_collision
from .data_models import SceneBounds, SceneSettings
from .graphics import LIGHT0, LIGHTING, Color, GraphicsContext
from .vector_utils import Point3d, Vector3d


class PhysicsBody:
    """
    The placement of a sphere in the scene.

    A new body starts at the minimum radius and moves at the configured speed
    in a random direction. The position is a private copy: callers change it
    through move_to(), never by editing a point they handed in.
    """

    def __init__(self, color: Color, position: Point3d,
                 settings: Optional[SceneSettings] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.perf_counter):
        """
        Args:
            color: RGB tuple used for rendering
            position: Initial centre; copied
            settings: Scene tunables (defaults if omitted)
            rng: Source of the initial heading
            clock: Monotonic clock in seconds
        """
        self.settings = settings or SceneSettings()
        self.color = color
        self.position = Point3d(position.x, position.y, position.z)
        self.radius = self.settings.minimum_placement_scale
        rng = rng or random
        angle = rng.random() * 2 * math.pi
        speed = self.settings.initial_speed
        self.velocity = Vector3d(speed * math.cos(angle), speed * math.sin(angle), 0.0)
        self.clock = clock
        self.last_update = clock()

    def __repr__(self):
        return (f"PhysicsBody(position=({self.position.x:.3f}, {self.position.y:.3f}), "
                f"radius={self.radius:.3f}, velocity=({self.velocity.dx:.3f}, {self.velocity.dy:.3f}))")

    @property
    def mass(self) -> float:
        return self.radius ** 3

    def kinetic_energy(self) -> float:
        return 0.5 * self.mass * (self.velocity.dx ** 2 + self.velocity.dy ** 2)

    # -----------------------
    # Interactive placement
    # -----------------------

    def resize(self, scale: float, bounds: SceneBounds) -> None:
        """Resize the sphere, never below the minimum and never past a wall."""
        scale = max(scale, self.settings.minimum_placement_scale)
        scale = min(scale, bounds.right - self.position.x)
        scale = min(scale, bounds.top - self.position.y)
        scale = min(scale, self.position.x - bounds.left)
        scale = min(scale, self.position.y - bounds.bottom)
        self.radius = scale

    def move_to(self, position: Point3d, bounds: SceneBounds) -> None:
        """Relocate the sphere, keeping it inside the scene at its current radius."""
        x = max(position.x, bounds.left + self.radius)
        y = max(position.y, bounds.bottom + self.radius)
        x = min(x, bounds.right - self.radius)
        y = min(y, bounds.top - self.radius)
        self.position = Point3d(x, y, position.z)

    def contain(self, bounds: SceneBounds) -> None:
        """Pull the sphere back inside bounds without touching its velocity."""
        self.move_to(self.position, bounds)

    def includes(self, query: Point3d) -> bool:
        """True if query lies strictly inside the sphere's footprint."""
        return self.position.planar_dist2(query) < self.radius * self.radius

    # -----------------------
    # Simulation
    # -----------------------

    def elapsed(self, now: Optional[float] = None) -> float:
        """Time units since the last update; resets the update timestamp."""
        if now is None:
            now = self.clock()
        dt = (now - self.last_update) * 1000.0 / self.settings.time_unit_ms
        self.last_update = now
        return dt

    def advance(self, dt: float, bounds: SceneBounds) -> None:
        """
        Integrate position over dt time units and bounce off the walls.

        Args:
            dt: Step in time units (see module notes)
            bounds: Scene rectangle to stay inside
        """
        x = self.position.x + self.velocity.dx * dt
        y = self.position.y + self.velocity.dy * dt
        vx, vy = self.velocity.dx, self.velocity.dy
        e = self.settings.restitution

        if x - self.radius < bounds.left:
            x = bounds.left + self.radius
            vx *= -e
        if x + self.radius > bounds.right:
            x = bounds.right - self.radius
            vx *= -e
        if y - self.radius < bounds.bottom:
            y = bounds.bottom + self.radius
            vy *= -e
        if y + self.radius > bounds.top:
            y = bounds.top - self.radius
            vy *= -e

        self.position = Point3d(x, y, self.position.z)
        self.velocity = Vector3d(vx, vy, self.velocity.dz)

    def update_physics(self, bounds: SceneBounds, bodies: Iterable["PhysicsBody"],
                       now: Optional[float] = None) -> int:
        """
        Step this body and resolve collisions against every other body.

        Each body resolves against all others, so within one tick a pair may be
        visited from both sides. Scene.step() offers a once-per-pair pass.

        Returns the number of collision responses applied.
        """
        self.advance(self.elapsed(now), bounds)
        hits = 0
        for other in bodies:
            if other is not self and self.handle_sphere_collision(other):
                # Separation may push either body through a wall
                other.contain(bounds)
                hits += 1
        if hits:
            self.contain(bounds)
        return hits

    def handle_sphere_collision(self, other: "PhysicsBody") -> bool:
        return handle_sphere_collision(self, other, self.settings.restitution)

    # -----------------------
    # Rendering
    # -----------------------

    def draw(self, gc: GraphicsContext, highlight_color: Optional[Color] = None,
             draw_shaded: bool = False) -> None:
        """Draw the sphere, optionally lit and with a highlight wireframe."""
        gc.push_matrix()
        gc.translate(self.position.x, self.position.y, self.position.z)
        gc.scale(self.radius, self.radius, self.radius)
        if draw_shaded:
            gc.enable(LIGHTING)
            gc.enable(LIGHT0)
        gc.color(self.color)
        gc.begin_end("sphere")
        if draw_shaded:
            gc.disable(LIGHT0)
            gc.disable(LIGHTING)

        if highlight_color is not None:
            gc.color(highlight_color)
            gc.begin_end("sphere-wireframe")

        gc.pop_matrix()
