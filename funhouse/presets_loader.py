#!/usr/bin/env python3
"""
Scene template loading and saving.

Template JSON (templates/*.json):
{
  "name": "Human-friendly template name",
  "bounds": {"left": -2.0, "right": 2.0, "top": 1.5, "bottom": -1.5},   # optional
  "settings": {"smoothness": 1000.0, "restitution": 0.95},             # optional
  "spheres": [
    {
      "position": [0.0, 0.0, 0.0],
      "radius": 0.3,                 # optional, clamped by resize()
      "velocity": [0.1, 0.0],        # optional, random heading if missing
      "color": [255, 80, 80]
    }
  ],
  "curves": [
    {"control_points": [[-1.0, 0.0], [0.0, 1.0], [1.0, 0.0]]}
  ]
}

Malformed sphere or curve entries (including NaN or infinite numbers) are
skipped with a warning, as is a "spheres" or "curves" value that is not a
list. A file that cannot be read or parsed loads as None. Users can drop
their own JSON files into templates/ and they will be listed.
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from .data_models import SceneBounds, SceneSettings
from .scene import Scene
from .utils import coerce_color, finite_float
from .vector_utils import Point3d, Vector3d

log = logging.getLogger("funhouse.presets_loader")

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")


def _read_json(path: str) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.warning("could not read scene %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        log.warning("scene %s is not a JSON object", path)
        return None
    return data


def _entries(data: Dict[str, Any], key: str, scene_name: str) -> list:
    entries = data.get(key, [])
    if not isinstance(entries, list):
        log.warning("ignoring %s in %s: expected a list, got %r", key, scene_name, entries)
        return []
    return entries


def _finite_point(seq) -> Point3d:
    p = Point3d.from_sequence(seq)
    for c in p:
        finite_float(c)
    return p


def list_templates(templates_dir: str = TEMPLATES_DIR) -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for available templates."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(templates_dir):
        return items
    for fn in sorted(os.listdir(templates_dir)):
        if not fn.lower().endswith(".json"):
            continue
        data = _read_json(os.path.join(templates_dir, fn)) or {}
        display = data.get("name") or os.path.splitext(fn)[0]
        items.append((fn, display))
    return items


def scene_from_dict(data: Dict[str, Any], default_name: str = "Untitled") -> Scene:
    """Build a Scene from a template mapping, skipping bad entries."""
    bounds = SceneBounds.default()
    if "bounds" in data:
        try:
            bounds = SceneBounds.from_dict(data["bounds"])
        except (KeyError, TypeError, ValueError) as e:
            log.warning("ignoring bounds in %s: %s", default_name, e)
    settings = SceneSettings()
    if isinstance(data.get("settings"), dict):
        try:
            settings = SceneSettings.from_dict(data["settings"])
        except (TypeError, ValueError) as e:
            log.warning("ignoring settings in %s: %s", default_name, e)

    scene = Scene(bounds, settings, name=data.get("name") or default_name)

    for s in _entries(data, "spheres", scene.name):
        try:
            position = _finite_point(s["position"])
            color = coerce_color(s.get("color", []))
            radius = finite_float(s["radius"]) if "radius" in s else None
            velocity = s.get("velocity")
            if velocity is not None:
                velocity = Vector3d(finite_float(velocity[0]), finite_float(velocity[1]), 0.0)
        except (KeyError, TypeError, ValueError, IndexError) as e:
            log.warning("skipping sphere %r in %s: %s", s, scene.name, e)
            continue
        body = scene.add_sphere(position, color)
        if radius is not None:
            body.resize(radius, scene.bounds)
        if velocity is not None:
            body.velocity = velocity

    for c in _entries(data, "curves", scene.name):
        try:
            points = [_finite_point(p) for p in c["control_points"]]
            scene.add_curve(points)
        except (KeyError, TypeError, ValueError, IndexError) as e:
            log.warning("skipping curve %r in %s: %s", c, scene.name, e)
            continue

    scene.selected_sphere = None
    return scene


def scene_to_dict(scene: Scene) -> Dict[str, Any]:
    with scene.lock:
        return {
            "name": scene.name,
            "bounds": scene.bounds.to_dict(),
            "settings": scene.settings.to_dict(),
            "spheres": [
                {
                    "position": list(b.position),
                    "radius": b.radius,
                    "velocity": [b.velocity.dx, b.velocity.dy],
                    "color": list(b.color),
                }
                for b in scene.spheres
            ],
            "curves": [
                {"control_points": [list(p) for p in c.control_points]}
                for c in scene.curves
            ],
        }


def load_scene(path: str) -> Optional[Scene]:
    data = _read_json(path)
    if data is None:
        return None
    scene = scene_from_dict(data, default_name=os.path.splitext(os.path.basename(path))[0])
    log.info("loaded scene '%s' (%d spheres, %d curves)", scene.name, len(scene.spheres), len(scene.curves))
    return scene


def load_template(file_name: str, templates_dir: str = TEMPLATES_DIR) -> Optional[Scene]:
    """Load a template JSON by file name."""
    return load_scene(os.path.join(templates_dir, file_name))


def save_scene(scene: Scene, path: str) -> None:
    """Write scene as template JSON. OSError propagates to the caller."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=2)
    log.info("saved scene '%s' -> %s", scene.name, path)
