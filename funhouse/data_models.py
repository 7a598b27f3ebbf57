#!/usr/bin/env python3
"""
Data models for the Funhouse scene editor.

This module defines the scene rectangle and the per-scene settings shared by
physics, tessellation, rendering, and UI.

Units and usage
- All lengths are scene units; the default scene spans 4 x 3 units.
- Velocities are scene units per SceneSettings.time_unit_ms milliseconds.
- A Scene owns one SceneBounds and one SceneSettings; spheres and curves keep
  a reference to the settings they were created with.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict

from .constants import (
    DEFAULT_BOUNDS,
    EPSILON,
    INITIAL_SPEED,
    MAX_CURVE_POINTS,
    MAX_SELECT_DISTANCE,
    MAX_SUBDIVISION_DEPTH,
    MINIMUM_PLACEMENT_SCALE,
    RESTITUTION,
    SMOOTHNESS,
    TIME_UNIT_MS,
)
from .utils import finite_float, parse_bool
from .vector_utils import Point3d, clamp


@dataclass(frozen=True)
class SceneBounds:
    """
    Axis-aligned scene rectangle.

    Fields:
    - left, right: x extent, left < right
    - top, bottom: y extent, bottom < top
    """
    left: float
    right: float
    top: float
    bottom: float

    def __post_init__(self):
        if not self.left < self.right:
            raise ValueError(f"left must be < right, got {self.left} >= {self.right}")
        if not self.bottom < self.top:
            raise ValueError(f"bottom must be < top, got {self.bottom} >= {self.top}")

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    def contains(self, p: Point3d, margin: float = 0.0) -> bool:
        """True if p lies at least `margin` inside every wall."""
        return (self.left + margin <= p.x <= self.right - margin
                and self.bottom + margin <= p.y <= self.top - margin)

    def to_dict(self) -> Dict[str, float]:
        return {"left": self.left, "right": self.right, "top": self.top, "bottom": self.bottom}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneBounds":
        return cls(
            left=finite_float(data["left"]),
            right=finite_float(data["right"]),
            top=finite_float(data["top"]),
            bottom=finite_float(data["bottom"]),
        )

    @classmethod
    def default(cls) -> "SceneBounds":
        return cls.from_dict(DEFAULT_BOUNDS)


@dataclass
class SceneSettings:
    """
    Tunables for one scene.

    Out-of-range values are coerced: non-positive tolerances fall back to
    small floors and restitution is clamped to [0, 1]. NaN, infinities and
    unreadable flags raise ValueError.
    """
    minimum_placement_scale: float = MINIMUM_PLACEMENT_SCALE
    max_select_distance: float = MAX_SELECT_DISTANCE
    smoothness: float = SMOOTHNESS
    epsilon: float = EPSILON
    restitution: float = RESTITUTION
    initial_speed: float = INITIAL_SPEED
    time_unit_ms: float = TIME_UNIT_MS
    max_subdivision_depth: int = MAX_SUBDIVISION_DEPTH
    max_curve_points: int = MAX_CURVE_POINTS
    dedupe_collisions: bool = True

    def __post_init__(self):
        self.minimum_placement_scale = max(1e-6, finite_float(self.minimum_placement_scale))
        self.max_select_distance = max(0.0, finite_float(self.max_select_distance))
        self.smoothness = max(1e-6, finite_float(self.smoothness))
        self.epsilon = max(1e-300, finite_float(self.epsilon))
        self.restitution = clamp(finite_float(self.restitution), 0.0, 1.0)
        self.initial_speed = max(0.0, finite_float(self.initial_speed))
        self.time_unit_ms = max(1e-6, finite_float(self.time_unit_ms))
        self.max_subdivision_depth = max(0, int(finite_float(self.max_subdivision_depth)))
        self.max_curve_points = max(2, int(finite_float(self.max_curve_points)))
        self.dedupe_collisions = parse_bool(self.dedupe_collisions)

    @property
    def flatness_tolerance(self) -> float:
        return 1.0 / self.smoothness

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneSettings":
        """Build settings from a mapping, ignoring keys we do not know."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
