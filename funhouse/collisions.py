#!/usr/bin/env python3
"""
Collision handling for placed spheres.

Spheres bounce off each other with a damped elastic impulse along the contact
normal and are pushed apart in proportion to their inverse masses, so a
heavier sphere moves less. Mass is radius cubed (uniform density).

The distance test uses the radius difference as a third component,
sqrt(dx^2 + dy^2 + (r1 - r2)^2), and the planar normal is divided by that same
distance. This is kept exactly as the editor has always behaved, since
changing it changes every collision trajectory.

Two ways to run a scene-wide pass:
- handle_collisions: each unordered pair once per tick.
- PhysicsBody.update_physics: each body against every other body, so a pair
  can be visited from both sides in one tick.
"""
import logging
import math
from typing import TYPE_CHECKING, Iterable, Sequence

from .vector_utils import Vector3d

if TYPE_CHECKING:
    from .physics import PhysicsBody

log = logging.getLogger("funhouse.collisions")


def handle_sphere_collision(a: "PhysicsBody", b: "PhysicsBody", restitution: float) -> bool:
    """
    Resolve a collision between two spheres, mutating both.

    Returns True if an impulse was applied.
    """
    dx = a.position.x - b.position.x
    dy = a.position.y - b.position.y
    dz = a.radius - b.radius
    distance = math.sqrt(dx * dx + dy * dy + dz * dz)
    min_dist = a.radius + b.radius

    # Coincident centres with equal radii have no usable normal
    if distance >= min_dist or distance == 0:
        return False

    nx = dx / distance
    ny = dy / distance

    # Relative velocity along the normal
    rvx = a.velocity.dx - b.velocity.dx
    rvy = a.velocity.dy - b.velocity.dy
    vn = rvx * nx + rvy * ny

    if vn >= 0:
        # Already separating
        return False

    _apply_elastic_impulse(a, b, nx, ny, vn, restitution)
    _separate(a, b, nx, ny, min_dist - distance)
    return True


def _apply_elastic_impulse(a: "PhysicsBody", b: "PhysicsBody", nx: float, ny: float, vn: float, e: float) -> None:
    """Apply 1D damped elastic impulse along the collision normal."""
    m1 = a.mass
    m2 = b.mass
    j_imp = -(1.0 + e) * vn / (1.0 / m1 + 1.0 / m2)

    a.velocity = a.velocity + Vector3d(nx, ny, 0.0) * (j_imp / m1)
    b.velocity = b.velocity - Vector3d(nx, ny, 0.0) * (j_imp / m2)


def _separate(a: "PhysicsBody", b: "PhysicsBody", nx: float, ny: float, overlap: float) -> None:
    m1 = a.mass
    m2 = b.mass
    correction = overlap / (m1 + m2)
    a.position = a.position + Vector3d(nx * correction * m2, ny * correction * m2, 0.0)
    b.position = b.position - Vector3d(nx * correction * m1, ny * correction * m1, 0.0)


def handle_collisions(bodies: Sequence["PhysicsBody"], restitution: float) -> int:
    """
    Resolve every unordered pair of bodies once.

    Returns the number of pairs that received an impulse.
    """
    n = len(bodies)
    hits = 0
    for i in range(n):
        for j in range(i + 1, n):
            if handle_sphere_collision(bodies[i], bodies[j], restitution):
                hits += 1
    if hits:
        log.debug("resolved %d sphere collision(s)", hits)
    return hits


def total_kinetic_energy(bodies: Iterable["PhysicsBody"]) -> float:
    return sum(b.kinetic_energy() for b in bodies)
