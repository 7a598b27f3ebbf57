#!/usr/bin/env python3
"""
Quadratic Bezier curves with adaptive tessellation.

Mathematical form:
    B(t) = (1-t)^2 P0 + 2(1-t)t P1 + t^2 P2,   t in [0, 1]

The curve is drawn as a polyline. Segments are split at their parametric
midpoint until the midpoint lies within 1 / smoothness of the chord. For a
quadratic the midpoint is where the curve strays furthest from the chord, so
every emitted segment is within tolerance, except where a chord has zero
length: its cross product vanishes, so a curve whose P0 equals P2 is drawn
as the single chord [P0, P2] whatever P1 is. Chords shorter than epsilon are
measured as epsilon long.

Refinement runs on an explicit stack and is bounded twice over: no segment is
split below max_subdivision_depth, and the polyline never grows past
max_curve_points. Both bounds only ever coarsen the result; the polyline
always starts at P0 and ends at P2.
"""
import logging
import math
from typing import List, Optional, Sequence, Tuple

from .constants import CONTROL_POINT_SIZE, CONTROL_POINT_Z, CURVE_COLOR, CURVE_THICKNESS, CURVE_Z, POINT_COLOR
from .data_models import SceneSettings
from .graphics import Color, GraphicsContext
from .vector_utils import Point3d

log = logging.getLogger("funhouse.bezier")


def chord_deviation(p0: Point3d, p1: Point3d, pm: Point3d, epsilon: float) -> float:
    """Perpendicular distance from pm to the line through p0 and p1."""
    chord = p1 - p0
    length = max(math.hypot(chord.dx, chord.dy), epsilon)
    area = abs(chord.cross2d(pm - p0))
    return area / length


class AdaptiveBezierCurve:
    """
    An editable quadratic Bezier curve.

    The control points are owned by the curve. Editing them through
    set_control_point() or set_control_points() invalidates the tessellation,
    which is rebuilt lazily the next time it is drawn or read.

    Usage:
        curve = AdaptiveBezierCurve([Point3d(0, 0), Point3d(1, 1), Point3d(2, 0)])
        curve.points        # compiles on first access
        curve.set_control_point(1, Point3d(1, 2))
        curve.points        # recompiled
    """

    def __init__(self, control_points: Sequence[Point3d], settings: Optional[SceneSettings] = None,
                 curve_color: Color = CURVE_COLOR, point_color: Color = POINT_COLOR):
        """
        Args:
            control_points: Exactly three points [P0, P1, P2]; copied

        Raises:
            ValueError: If not exactly 3 points provided
        """
        self.settings = settings or SceneSettings()
        self.curve_color = curve_color
        self.point_color = point_color
        self._control_points: Tuple[Point3d, Point3d, Point3d] = self._copy_points(control_points)
        self._points: List[Point3d] = []
        self._parameters: List[float] = []
        self.compiled = False
        self.compile_count = 0

    @staticmethod
    def _copy_points(points: Sequence[Point3d]) -> Tuple[Point3d, Point3d, Point3d]:
        if len(points) != 3:
            raise ValueError(f"Quadratic Bezier requires exactly 3 control points, got {len(points)}")
        return tuple(Point3d(p.x, p.y, p.z) for p in points)

    @property
    def control_points(self) -> Tuple[Point3d, Point3d, Point3d]:
        return self._control_points

    def set_control_point(self, index: int, point: Point3d) -> None:
        cps = list(self._control_points)
        cps[index] = Point3d(point.x, point.y, point.z)
        self._control_points = tuple(cps)
        self.update()

    def set_control_points(self, points: Sequence[Point3d]) -> None:
        self._control_points = self._copy_points(points)
        self.update()

    @property
    def points(self) -> List[Point3d]:
        """The tessellated polyline, compiling first if needed."""
        self.compile()
        return list(self._points)

    @property
    def parameters(self) -> List[float]:
        """Curve parameter t of each tessellated point."""
        self.compile()
        return list(self._parameters)

    def bezier(self, t: float) -> Point3d:
        p0, p1, p2 = self._control_points
        a = (1 - t) * (1 - t)
        b = 2 * (1 - t) * t
        c = t * t
        return Point3d(a * p0.x + b * p1.x + c * p2.x,
                       a * p0.y + b * p1.y + c * p2.y,
                       0.0)

    def subdivide(self, t0: float, t1: float, p0: Point3d, p1: Point3d) -> None:
        """
        Append the polyline for B on (t0, t1] to the tessellation.

        p0 and p1 are B(t0) and B(t1). Points are appended left to right.
        """
        tolerance = self.settings.flatness_tolerance
        epsilon = self.settings.epsilon
        max_depth = self.settings.max_subdivision_depth
        budget = self.settings.max_curve_points
        truncated = False

        stack = [(t0, t1, p0, p1, 0)]
        while stack:
            a, b, pa, pb, depth = stack.pop()
            tm = (a + b) / 2
            pm = self.bezier(tm)
            if chord_deviation(pa, pb, pm, epsilon) > tolerance:
                # Every pending segment still owes one point
                if depth < max_depth and len(self._points) + len(stack) + 2 <= budget:
                    stack.append((tm, b, pm, pb, depth + 1))
                    stack.append((a, tm, pa, pm, depth + 1))
                    continue
                truncated = True
            self._points.append(pb)
            self._parameters.append(b)

        if truncated:
            log.debug("tessellation bounded at %d points (depth %d, budget %d)",
                      len(self._points), max_depth, budget)

    def compile(self) -> None:
        """Rebuild the tessellation if the control points have changed."""
        if self.compiled:
            return
        self._points = []
        self._parameters = []
        p0 = self.bezier(0.0)
        p1 = self.bezier(1.0)
        self._points.append(p0)
        self._parameters.append(0.0)
        self.subdivide(0.0, 1.0, p0, p1)
        self.compiled = True
        self.compile_count += 1
        log.debug("compiled curve into %d points", len(self._points))

    def update(self) -> None:
        """Invalidate the tessellation; it is rebuilt on next use."""
        self.compiled = False

    def choose_control_point(self, query: Point3d) -> Optional[int]:
        """
        Index (0, 1 or 2) of the closest control point to query, or None if
        none lies within max_select_distance.
        """
        which = None
        best = self.settings.max_select_distance ** 2
        for i, cp in enumerate(self._control_points):
            d2 = query.planar_dist2(cp)
            if d2 < best:
                which = i
                best = d2
        return which

    # -----------------------
    # Rendering
    # -----------------------

    def draw_controls(self, gc: GraphicsContext) -> None:
        for cp in self._control_points:
            gc.push_matrix()
            gc.translate(cp.x, cp.y, CONTROL_POINT_Z)
            gc.scale(CONTROL_POINT_SIZE, CONTROL_POINT_SIZE, CONTROL_POINT_SIZE)
            gc.color(self.point_color)
            gc.begin_end("square")
            gc.pop_matrix()

    def draw_curve(self, gc: GraphicsContext) -> None:
        """Draw each polyline segment as a thin path along its heading."""
        pts = self._points
        for i in range(1, len(pts)):
            p0 = pts[i - 1]
            p1 = pts[i]
            seg = p1 - p0
            length = math.hypot(seg.dx, seg.dy)
            angle = math.degrees(math.atan2(seg.dy, seg.dx))

            gc.push_matrix()
            gc.translate(p0.x, p0.y, CURVE_Z)
            gc.rotate(angle, 0.0, 0.0, 1.0)
            gc.rotate(90.0, 0.0, 1.0, 0.0)
            gc.scale(CURVE_THICKNESS, CURVE_THICKNESS, length)
            gc.color(self.curve_color)
            gc.begin_end("path")
            gc.pop_matrix()

    def draw(self, gc: GraphicsContext) -> None:
        self.compile()
        self.draw_curve(gc)
        self.draw_controls(gc)
