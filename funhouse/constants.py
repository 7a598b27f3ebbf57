#!/usr/bin/env python3
"""
Shared constants for the Funhouse scene editor (scene units unless stated otherwise).

These are defaults only. Each scene carries its own SceneSettings so that two
scenes can run with different tolerances; the values here seed those settings
and the editor's display.
"""

# Placement and picking
MINIMUM_PLACEMENT_SCALE = 0.15  # smallest sphere radius we can place
MAX_SELECT_DISTANCE = 0.2  # distance to select a control point

# Curve tessellation
SMOOTHNESS = 1000.0  # flatness threshold is 1 / SMOOTHNESS
EPSILON = 1e-9  # floor for chord length
MAX_SUBDIVISION_DEPTH = 24  # 2**24 segments is far beyond any sane curve
MAX_CURVE_POINTS = 4096

# Sphere physics
RESTITUTION = 0.95  # fraction of normal velocity kept after a bounce
INITIAL_SPEED = 0.2  # scene units per time unit
TIME_UNIT_MS = 100.0  # velocities are expressed per this many milliseconds

# Default scene rectangle
DEFAULT_BOUNDS = {"left": -2.0, "right": 2.0, "top": 1.5, "bottom": -1.5}

# Draw depths and primitive sizes
CURVE_Z = 1.5
CONTROL_POINT_Z = 1.9
CURVE_THICKNESS = 0.01
CONTROL_POINT_SIZE = 0.02

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (18, 18, 24)
BOUNDS_COLOR = (70, 75, 95)
SPHERE_COLOR = (200, 200, 255)
HIGHLIGHT_COLOR = (255, 255, 0)
POINT_COLOR = (255, 90, 90)
CURVE_COLOR = (120, 220, 255)

# Camera zoom bounds (pixels per scene unit)
DEFAULT_PIXELS_PER_UNIT = 250.0
MIN_PIXELS_PER_UNIT = 10.0
MAX_PIXELS_PER_UNIT = 5000.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
