import math

import pytest

from placement_designer.geometry import (
    clamp_rect, is_valid_page_size, to_pixels, to_pixels_inverse,
)
from placement_designer.models import PageSize, PixelRect, Rect


def test_to_pixels_scales_by_page_size(page):
    px = to_pixels(Rect(0.1, 0.2, 0.3, 0.4), page)
    assert px.left == pytest.approx(80)
    assert px.top == pytest.approx(200)
    assert px.width == pytest.approx(240)
    assert px.height == pytest.approx(400)


def test_round_trip_is_close(page):
    rect = Rect(0.123, 0.456, 0.25, 0.042)
    back = to_pixels_inverse(to_pixels(rect, page), page)
    assert back.x == pytest.approx(rect.x)
    assert back.y == pytest.approx(rect.y)
    assert back.w == pytest.approx(rect.w)
    assert back.h == pytest.approx(rect.h)


def test_inverse_clamps_every_component(page):
    rect = to_pixels_inverse(PixelRect(-10, 1200, 900, 50), page)
    assert rect == Rect(0.0, 1.0, 1.0, 0.05)


@pytest.mark.parametrize("size", [
    PageSize(0, 1000),
    PageSize(800, 0),
    PageSize(-5, 100),
    PageSize(float("nan"), 100),
    PageSize(100, float("inf")),
])
def test_unusable_page_size_yields_zero_rect(size):
    assert not is_valid_page_size(size)
    assert to_pixels_inverse(PixelRect(10, 10, 10, 10), size) == Rect()


def test_non_finite_pixels_become_zero(page):
    rect = to_pixels_inverse(PixelRect(float("nan"), float("inf"), 80, 100), page)
    assert rect.x == 0.0
    assert rect.y == 0.0
    assert rect.w == pytest.approx(0.1)
    assert not any(math.isnan(v) for v in (rect.x, rect.y, rect.w, rect.h))


def test_clamp_rect():
    assert clamp_rect(Rect(-0.5, 0.5, 1.5, float("nan"))) == Rect(0.0, 0.5, 1.0, 0.0)
