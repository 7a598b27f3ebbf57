#!/usr/bin/env python3
"""
General parsing helpers for the Funhouse scene editor.
"""
import math
from typing import Optional, Sequence, Tuple

from .constants import SPHERE_COLOR


def try_float(val) -> Optional[float]:
    """Finite float from val, or None."""
    try:
        return finite_float(val)
    except (TypeError, ValueError):
        return None


def coerce_color(c: Sequence, default: Tuple[int, int, int] = SPHERE_COLOR) -> Tuple[int, int, int]:
    """RGB tuple clamped to 0..255, or default if c is not three numbers."""
    try:
        r, g, b = int(c[0]), int(c[1]), int(c[2])
    except (TypeError, ValueError, OverflowError, IndexError):
        return default
    return (max(0, min(255, r)), max(0, min(255, g)), max(0, min(255, b)))


def finite_float(val) -> float:
    """float(val), raising ValueError for NaN and the infinities."""
    f = float(val)
    if not math.isfinite(f):
        raise ValueError(f"not a finite number: {val!r}")
    return f


def parse_bool(val) -> bool:
    """Read a flag from JSON or a form: real booleans, numbers, or words like "false"."""
    if isinstance(val, str):
        word = val.strip().lower()
        if word in ("1", "true", "yes", "on"):
            return True
        if word in ("0", "false", "no", "off", ""):
            return False
        raise ValueError(f"not a boolean: {val!r}")
    return bool(val)
