#!/usr/bin/env python3
"""
Camera utilities for scene-to-screen transforms.

Scene y grows upward; screen y grows downward. The camera belongs to the
render thread; other threads go through request_fit().
"""
import threading
from typing import Optional, Tuple

from .constants import (
    DEFAULT_PIXELS_PER_UNIT,
    MAX_PIXELS_PER_UNIT,
    MIN_PIXELS_PER_UNIT,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .data_models import SceneBounds
from .vector_utils import clamp


class Camera2D:
    """
    Simple 2D camera that maps scene coordinates to screen pixels.
    """

    def __init__(self, center=(0.0, 0.0), pixels_per_unit=DEFAULT_PIXELS_PER_UNIT):
        self.center = [center[0], center[1]]
        self.ppu = pixels_per_unit
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self._pending_fit: Optional[SceneBounds] = None
        self._fit_lock = threading.Lock()

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        cx, cy = self.center
        px = (pos[0] - cx) * self.ppu + self.viewport_size[0] / 2
        py = (cy - pos[1]) * self.ppu + self.viewport_size[1] / 2
        return (int(round(px)), int(round(py)))

    def screen_to_world(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        cx, cy = self.center
        wx = (screen[0] - self.viewport_size[0] / 2) / self.ppu + cx
        wy = cy - (screen[1] - self.viewport_size[1] / 2) / self.ppu
        return (wx, wy)

    def length_to_pixels(self, length: float) -> float:
        return length * self.ppu

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self.screen_to_world(pivot_screen)
        self.ppu = clamp(self.ppu * factor, MIN_PIXELS_PER_UNIT, MAX_PIXELS_PER_UNIT)
        if pivot_screen is not None and before is not None:
            after = self.screen_to_world(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[1] - after[1])

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels / self.ppu
        self.center[1] += dy_pixels / self.ppu

    def fit_bounds(self, bounds: SceneBounds, margin: float = 1.1) -> None:
        """Centre on bounds and zoom so the whole rectangle is visible."""
        self.center = [(bounds.left + bounds.right) / 2, (bounds.bottom + bounds.top) / 2]
        w, h = self.viewport_size
        ppu_x = max(w, 1) / (bounds.width * margin)
        ppu_y = max(h, 1) / (bounds.height * margin)
        self.ppu = clamp(min(ppu_x, ppu_y), MIN_PIXELS_PER_UNIT, MAX_PIXELS_PER_UNIT)

    def request_fit(self, bounds: SceneBounds) -> None:
        """Ask for fit_bounds(bounds) on the next apply_pending_fit(); safe from any thread."""
        with self._fit_lock:
            self._pending_fit = bounds

    def apply_pending_fit(self) -> bool:
        """Run a requested fit on the calling (render) thread. Returns True if one ran."""
        with self._fit_lock:
            bounds, self._pending_fit = self._pending_fit, None
        if bounds is None:
            return False
        self.fit_bounds(bounds)
        return True
