"""Mapping between normalized placement rects and rendered-page pixels.

Placements are stored as fractions of the page so they survive any zoom level
or container width.  Everything that deals with pixels takes the *page_size*
of the page as currently rendered; a gesture captures that size once and keeps
using it until the pointer is released.
"""
import math

from placement_designer.models import PageSize, PixelRect, Rect


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def clamp01(v: float) -> float:
    return clamp(v, 0.0, 1.0)


def _finite(v: float) -> float:
    return v if math.isfinite(v) else 0.0


def is_valid_page_size(page_size: PageSize) -> bool:
    """Return True when both dimensions are finite and strictly positive."""
    w, h = page_size.width, page_size.height
    return math.isfinite(w) and math.isfinite(h) and w > 0 and h > 0


def to_pixels(rect: Rect, page_size: PageSize) -> PixelRect:
    """Scale a normalized *rect* to pixel coordinates on *page_size*."""
    return PixelRect(
        left=rect.x * page_size.width,
        top=rect.y * page_size.height,
        width=rect.w * page_size.width,
        height=rect.h * page_size.height,
    )


def to_pixels_inverse(px: PixelRect, page_size: PageSize) -> Rect:
    """Normalize a pixel rect; every component is clamped to [0, 1].

    A page with a zero (or otherwise unusable) dimension yields the zero rect
    instead of NaN/Infinity.
    """
    if not is_valid_page_size(page_size):
        return Rect()
    w, h = page_size.width, page_size.height
    return Rect(
        x=clamp01(_finite(px.left) / w),
        y=clamp01(_finite(px.top) / h),
        w=clamp01(_finite(px.width) / w),
        h=clamp01(_finite(px.height) / h),
    )


def clamp_rect(rect: Rect) -> Rect:
    """Return a copy of *rect* with every component forced into [0, 1]."""
    return Rect(
        x=clamp01(_finite(rect.x)),
        y=clamp01(_finite(rect.y)),
        w=clamp01(_finite(rect.w)),
        h=clamp01(_finite(rect.h)),
    )
