"""Single-slot clipboard for duplicating placements."""
import uuid
from typing import Callable, Optional

from placement_designer.geometry import clamp01
from placement_designer.models import Placement, Rect


def new_placement_id() -> str:
    return str(uuid.uuid4())


class Clipboard:
    def __init__(self):
        self._slot: Optional[Placement] = None

    def copy(self, placement: Placement) -> None:
        """Store a value copy; later edits to *placement* do not leak in."""
        self._slot = placement.clone()

    def has_clipboard(self) -> bool:
        return self._slot is not None

    def clear(self) -> None:
        self._slot = None

    def paste(self, id_generator: Callable[[], str] = new_placement_id,
              offset_x: float = 0.0, offset_y: float = 0.0) -> Optional[Placement]:
        """Return a fresh-id duplicate shifted by the offset, or None if empty.

        x/y are clamped to [0, 1]; width and height are kept as copied.  The
        caller decides which page the duplicate lands on.
        """
        if self._slot is None:
            return None
        pasted = self._slot.clone()
        pasted.id = id_generator()
        r = self._slot.rect
        pasted.rect = Rect(
            x=clamp01(r.x + offset_x),
            y=clamp01(r.y + offset_y),
            w=r.w,
            h=r.h,
        )
        return pasted
