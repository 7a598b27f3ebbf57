import pytest

from funhouse.constants import SPHERE_COLOR
from funhouse.utils import coerce_color, finite_float, try_float


@pytest.mark.parametrize("val, expected", [
    ("1.5", 1.5), (2, 2.0), ("abc", None), (None, None), ("nan", None), ("inf", None),
])
def test_try_float(val, expected):
    assert try_float(val) == expected


def test_coerce_color_clamps_and_falls_back():
    assert coerce_color([-5, 128.7, 999]) == (0, 128, 255)
    assert coerce_color([1, 2]) == SPHERE_COLOR
    assert coerce_color(None, default=(1, 2, 3)) == (1, 2, 3)


def test_finite_float_rejects_nan_and_infinity():
    assert finite_float("2.5") == 2.5
    for bad in (float("nan"), "inf", float("-inf")):
        with pytest.raises(ValueError):
            finite_float(bad)


def test_coerce_color_handles_infinite_channel():
    assert coerce_color([float("inf"), 0, 0]) == SPHERE_COLOR
