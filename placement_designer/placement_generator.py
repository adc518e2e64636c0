"""Choose where a newly added field appears on the page.

Operators add many fields in a row, often on long pages scrolled well past the
top.  New boxes therefore spawn inside the part of the page that is on screen:
either a small diagonal step from the previous box (when that box is visible)
or at a padded anchor near the top-left of the visible region.
"""
from typing import List, Optional

from placement_designer.geometry import clamp, to_pixels, to_pixels_inverse
from placement_designer.models import (
    DesignerSettings, FieldDef, PageSize, PixelRect, Placement, Rect, VisibleRegion,
)


def default_size(page_size: PageSize, settings: DesignerSettings) -> tuple:
    """Return the *(width, height)* in pixels of a freshly spawned box."""
    return (
        max(settings.default_width_px, settings.default_width_ratio * page_size.width),
        max(settings.default_height_px, settings.default_height_ratio * page_size.height),
    )


def visible_anchor(page_size: PageSize, visible: Optional[VisibleRegion],
                   settings: DesignerSettings) -> tuple:
    """Padded top-left point of the visible region, kept on the page."""
    pad = settings.spawn_padding_px
    if visible is None:
        return pad, pad
    x = clamp(visible.left + pad, 0.0, max(0.0, page_size.width - pad))
    y = clamp(visible.top + pad, 0.0, max(0.0, page_size.height - pad))
    return x, y


def next_placement_rect(page_placements: List[Placement], page_size: PageSize,
                        visible: Optional[VisibleRegion] = None,
                        settings: Optional[DesignerSettings] = None) -> Rect:
    """Normalized rect for a new placement on the page holding *page_placements*.

    *visible* is the on-screen part of the page in page-local pixels; None
    means the whole page is visible.
    """
    settings = settings or DesignerSettings()
    width, height = default_size(page_size, settings)
    anchor = visible_anchor(page_size, visible, settings)
    max_left = max(0.0, page_size.width - width)
    max_top = max(0.0, page_size.height - height)

    left, top = anchor
    if page_placements:
        last = to_pixels(page_placements[-1].rect, page_size)
        step = settings.spawn_step_px
        cand_left = clamp(last.left + step, 0.0, max_left)
        cand_top = clamp(last.top + step, 0.0, max_top)
        candidate = PixelRect(cand_left, cand_top, width, height)
        if visible is None or (visible.contains(*last.center())
                               and visible.contains(*candidate.center())):
            left, top = cand_left, cand_top

    left = clamp(left, 0.0, max_left)
    top = clamp(top, 0.0, max_top)
    return to_pixels_inverse(PixelRect(left, top, width, height), page_size)


def filter_fields(fields: List[FieldDef], query: str) -> List[FieldDef]:
    """Case-insensitive match of *query* against field key and description."""
    q = query.strip().lower()
    if not q:
        return list(fields)
    return [f for f in fields
            if q in f.key.lower() or q in f.description.lower()]
