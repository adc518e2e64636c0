"""Pointer gesture state machine for moving and resizing placements.

States::

    Idle ──pointer-down on body──────▶ Moving ──────────┐
    Idle ──pointer-down on handle d──▶ Resizing[d] ─────┤
    Idle ◀──────────── pointer-up / pointer-cancel ─────┘

Every pointer-move while a gesture is active converts the candidate pixel rect
to normalized form and writes it to the store straight away, so a cancelled
gesture simply keeps the last committed rect.  The page size is captured once
at pointer-down; a viewport re-measure during the drag does not affect the
gesture.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from placement_designer.geometry import is_valid_page_size, to_pixels, to_pixels_inverse
from placement_designer.models import DesignerSettings, PageSize, PixelRect, Placement, Rect
from placement_designer.placement_store import PlacementStore

logger = logging.getLogger(__name__)

MODE_MOVE = "move"
MODE_RESIZE = "resize"

DIRECTIONS = ("n", "s", "e", "w", "ne", "nw", "se", "sw")


@dataclass
class InteractionSession:
    mode: str                          # MODE_MOVE | MODE_RESIZE
    placement_id: str
    origin: Tuple[float, float]        # pointer position at pointer-down
    start: PixelRect                   # placement rect at pointer-down, in pixels
    rect_at_start: Rect
    page_size: PageSize                # captured once; used for every commit
    direction: Optional[str] = None    # compass direction for MODE_RESIZE
    pointer_id: Optional[int] = None
    snapshot: List[Placement] = field(default_factory=list)


def _finite(v: float) -> float:
    return v if math.isfinite(v) else 0.0


def move_rect(start: PixelRect, dx: float, dy: float) -> PixelRect:
    return PixelRect(start.left + dx, start.top + dy, start.width, start.height)


def resize_rect(start: PixelRect, direction: str, dx: float, dy: float,
                min_width: float, min_height: float) -> PixelRect:
    """Resize *start* by dragging the edge(s) named by *direction*.

    The edge opposite the dragged one stays fixed.  A dimension that would
    fall below its floor is set to the floor and, when the dragged edge is the
    west/north one, the origin is pulled back by the shortfall so the anchored
    east/south edge does not move.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown resize direction: {direction!r}")
    left, top = start.left, start.top
    width, height = start.width, start.height
    has_n, has_s = "n" in direction, "s" in direction
    has_e, has_w = "e" in direction, "w" in direction

    if has_e:
        width = start.width + dx
    if has_s:
        height = start.height + dy
    if has_w:
        width = start.width - dx
        left = start.left + dx
    if has_n:
        height = start.height - dy
        top = start.top + dy

    if width < min_width:
        shortfall = min_width - width
        width = min_width
        if has_w:
            left -= shortfall
    if height < min_height:
        shortfall = min_height - height
        height = min_height
        if has_n:
            top -= shortfall

    return PixelRect(left, top, width, height)


def keep_on_page(rect: PixelRect, direction: str, page_size: PageSize) -> PixelRect:
    """Stop dragged edges at the page border; the opposite edges stay put."""
    left, top, width, height = rect.left, rect.top, rect.width, rect.height
    if "w" in direction and left < 0:
        width += left
        left = 0.0
    if "n" in direction and top < 0:
        height += top
        top = 0.0
    if "e" in direction and left + width > page_size.width:
        width = page_size.width - left
    if "s" in direction and top + height > page_size.height:
        height = page_size.height - top
    return PixelRect(left, top, width, height)


class InteractionController:
    """Drive one gesture at a time against a PlacementStore.

    *page_size* is a callable returning the current rendered page size (the
    viewport's).  *capture* / *release* are called with the pointer id when a
    gesture starts / ends; the host toolkit uses them for pointer capture.
    """

    def __init__(self, store: PlacementStore,
                 page_size: Callable[[], PageSize],
                 settings: Optional[DesignerSettings] = None,
                 capture: Optional[Callable[[Optional[int]], None]] = None,
                 release: Optional[Callable[[Optional[int]], None]] = None):
        self._store = store
        self._page_size = page_size
        self._settings = settings or DesignerSettings()
        self._capture = capture
        self._release = release
        self._session: Optional[InteractionSession] = None

    @property
    def session(self) -> Optional[InteractionSession]:
        return self._session

    @property
    def active(self) -> bool:
        return self._session is not None

    # ── Gesture start ────────────────────────────────────────────────────────

    def pointer_down(self, placement_id: str, x: float, y: float,
                     handle: Optional[str] = None,
                     pointer_id: Optional[int] = None) -> bool:
        """Start a move (*handle* None) or a resize (*handle* a direction).

        Returns False when the pointer-down is ignored: another gesture is
        running, the placement is unknown, or the page has no usable size.
        """
        if self._session is not None:
            return False
        placement = self._store.get(placement_id)
        if placement is None:
            return False
        if handle is not None and handle not in DIRECTIONS:
            raise ValueError(f"Unknown resize direction: {handle!r}")
        self._store.select(placement_id)
        page_size = self._page_size()
        if not is_valid_page_size(page_size):
            return False
        self._session = InteractionSession(
            mode=MODE_MOVE if handle is None else MODE_RESIZE,
            placement_id=placement_id,
            origin=(_finite(x), _finite(y)),
            start=to_pixels(placement.rect, page_size),
            rect_at_start=Rect(placement.rect.x, placement.rect.y,
                               placement.rect.w, placement.rect.h),
            page_size=page_size,
            direction=handle,
            pointer_id=pointer_id,
            snapshot=self._store.snapshot(),
        )
        if self._capture is not None:
            self._capture(pointer_id)
        logger.debug("Gesture start: %s %s on %s",
                     self._session.mode, handle or "", placement_id)
        return True

    # ── Gesture progress ─────────────────────────────────────────────────────

    def candidate(self, x: float, y: float) -> Optional[PixelRect]:
        """Pixel rect the active gesture would produce at pointer *(x, y)*."""
        s = self._session
        if s is None:
            return None
        dx = _finite(_finite(x) - s.origin[0])
        dy = _finite(_finite(y) - s.origin[1])
        if s.mode == MODE_MOVE:
            return move_rect(s.start, dx, dy)
        px = resize_rect(s.start, s.direction, dx, dy,
                         self._settings.min_width_px, self._settings.min_height_px)
        if px == s.start:
            return px
        return keep_on_page(px, s.direction, s.page_size)

    def pointer_move(self, x: float, y: float) -> bool:
        s = self._session
        if s is None:
            return False
        px = self.candidate(x, y)
        if px == s.start:
            rect = Rect(s.rect_at_start.x, s.rect_at_start.y,
                        s.rect_at_start.w, s.rect_at_start.h)
        else:
            rect = to_pixels_inverse(px, s.page_size)
        if s.mode == MODE_MOVE:
            return self._store.move(s.placement_id, rect)
        return self._store.resize(s.placement_id, rect)

    # ── Gesture end ──────────────────────────────────────────────────────────

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        if self._session is None:
            return
        if x is not None and y is not None:
            self.pointer_move(x, y)
        self._finish()

    def pointer_cancel(self) -> None:
        """End the gesture, keeping the last committed rect."""
        if self._session is None:
            return
        logger.debug("Gesture cancelled on %s", self._session.placement_id)
        self._finish()

    def _finish(self) -> None:
        s = self._session
        self._session = None
        if self._release is not None:
            self._release(s.pointer_id)
        placement = self._store.get(s.placement_id)
        if placement is not None and placement.rect != s.rect_at_start:
            self._store.push_undo(s.snapshot)
