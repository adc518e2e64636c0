"""Track the pixel size of the page currently shown in the designer.

The render width follows the hosting container (bounded to a sane range); the
height is whatever the rendered page element actually measures, since pages of
one document may have different intrinsic sizes.  Sizing is observed
continuously: every container resize, page change and render-complete signal
triggers a fresh measurement.
"""
import logging
import math
from typing import Callable, List, Optional, Tuple

from placement_designer.geometry import clamp
from placement_designer.models import DesignerSettings, PageSize

logger = logging.getLogger(__name__)

Measure = Callable[[], Optional[Tuple[float, float]]]


class ViewportSizing:
    def __init__(self, settings: Optional[DesignerSettings] = None,
                 initial: PageSize = PageSize(800, 1000)):
        self._settings = settings or DesignerSettings()
        self._page_size = initial
        self._page_width = clamp(initial.width, self._settings.page_width_min,
                                 self._settings.page_width_max)
        self._page_index = 0
        self._measure: Optional[Measure] = None
        self._size_listeners: List[Callable[[PageSize], None]] = []
        self._width_listeners: List[Callable[[float], None]] = []

    # ── Observers ────────────────────────────────────────────────────────────

    def add_listener(self, callback: Callable[[PageSize], None]) -> None:
        """Call *callback* with the new PageSize whenever it changes."""
        self._size_listeners.append(callback)

    def add_width_listener(self, callback: Callable[[float], None]) -> None:
        """Call *callback* with the new target render width whenever it changes."""
        self._width_listeners.append(callback)

    def set_measure(self, measure: Optional[Measure]) -> None:
        """Install the callable returning the rendered page element's (w, h)."""
        self._measure = measure

    # ── State ────────────────────────────────────────────────────────────────

    @property
    def page_size(self) -> PageSize:
        return self._page_size

    @property
    def page_width(self) -> float:
        """Width the document renderer should draw the page at."""
        return self._page_width

    @property
    def page_index(self) -> int:
        return self._page_index

    # ── Signals from the host ────────────────────────────────────────────────

    def on_container_resize(self, container_width: float) -> None:
        s = self._settings
        width = clamp(container_width - s.container_padding_px,
                      s.page_width_min, s.page_width_max)
        if width != self._page_width:
            self._page_width = width
            logger.debug("Target page width -> %.0f (container %.0f)",
                         width, container_width)
            for cb in list(self._width_listeners):
                cb(width)
        self.remeasure()

    def on_page_change(self, page_index: int) -> None:
        self._page_index = page_index
        self.remeasure()

    def on_render_complete(self, width: Optional[float] = None,
                           height: Optional[float] = None) -> None:
        """The renderer finished drawing a page.

        When the renderer reports the rendered size it is used directly,
        otherwise the page element is measured.
        """
        if width is not None and height is not None:
            self._accept(width, height)
        else:
            self.remeasure()

    def remeasure(self) -> None:
        if self._measure is None:
            return
        measured = self._measure()
        if measured is None:
            return
        self._accept(*measured)

    def _accept(self, width: float, height: float) -> None:
        floor = self._settings.measure_floor_px
        if not (math.isfinite(width) and math.isfinite(height)
                and width >= floor and height >= floor):
            logger.debug("Discarding implausible page measurement %sx%s", width, height)
            return
        new_size = PageSize(float(width), float(height))
        if new_size == self._page_size:
            return
        self._page_size = new_size
        logger.debug("Page size -> %.1fx%.1f", new_size.width, new_size.height)
        for cb in list(self._size_listeners):
            cb(new_size)
