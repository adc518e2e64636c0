"""Ordered, id-keyed collection of placements with selection and undo history."""
import logging
from typing import Callable, Dict, Iterator, List, Optional

from placement_designer.geometry import clamp_rect
from placement_designer.models import ALIGNMENTS, Placement, Rect

logger = logging.getLogger(__name__)

_LINE_HEIGHT_FACTOR = 1.2

Snapshot = List[Placement]


class PlacementStore:
    def __init__(self, placements: Optional[List[Placement]] = None,
                 history_limit: int = 50):
        self._items: List[Placement] = []
        self._index: Dict[str, Placement] = {}
        self._selected_id: Optional[str] = None
        self._history_limit = max(1, history_limit)
        self._undo: List[Snapshot] = []
        self._redo: List[Snapshot] = []
        self._change_listeners: List[Callable[[], None]] = []
        self._selection_listeners: List[Callable[[Optional[str]], None]] = []
        if placements:
            self._load(placements)

    # ── Observers ────────────────────────────────────────────────────────────

    def add_change_listener(self, callback: Callable[[], None]) -> None:
        self._change_listeners.append(callback)

    def add_selection_listener(self, callback: Callable[[Optional[str]], None]) -> None:
        """*callback* receives the selected placement id, or None."""
        self._selection_listeners.append(callback)

    def _changed(self) -> None:
        for cb in list(self._change_listeners):
            cb()

    def _selection_changed(self) -> None:
        for cb in list(self._selection_listeners):
            cb(self._selected_id)

    # ── Queries ──────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Placement]:
        return iter(list(self._items))

    def __contains__(self, placement_id: str) -> bool:
        return placement_id in self._index

    def get(self, placement_id: Optional[str]) -> Optional[Placement]:
        if placement_id is None:
            return None
        return self._index.get(placement_id)

    def placements(self) -> List[Placement]:
        """Return the placements in order (the list is a copy, items are live)."""
        return list(self._items)

    def on_page(self, page_index: int) -> List[Placement]:
        return [p for p in self._items if p.page_index == page_index]

    @property
    def selected_id(self) -> Optional[str]:
        if self._selected_id is not None and self._selected_id not in self._index:
            return None
        return self._selected_id

    @property
    def selected(self) -> Optional[Placement]:
        return self.get(self.selected_id)

    # ── Mutations ────────────────────────────────────────────────────────────

    def add(self, placement: Placement, record: bool = True) -> Placement:
        if placement.id in self._index:
            raise ValueError(f"Duplicate placement id: {placement.id}")
        if record:
            self._record()
        placement.rect = clamp_rect(placement.rect)
        placement.page_index = max(0, int(placement.page_index))
        self._items.append(placement)
        self._index[placement.id] = placement
        logger.debug("Added placement %s (%s) on page %d",
                     placement.id, placement.field_key, placement.page_index)
        self._changed()
        return placement

    def update(self, placement_id: str, label: Optional[str] = None,
               font_size: Optional[float] = None, align: Optional[str] = None,
               multiline: Optional[bool] = None,
               line_height: Optional[float] = None) -> bool:
        """Apply an inspector patch (label/style).  Returns False for unknown ids."""
        p = self._index.get(placement_id)
        if p is None:
            return False
        if align is not None and align not in ALIGNMENTS:
            raise ValueError(f"Invalid align: {align!r}")
        self._record()
        if label is not None:
            p.label = label
        if font_size is not None:
            p.style.font_size = font_size
            if line_height is None:
                p.style.line_height = round(font_size * _LINE_HEIGHT_FACTOR)
        if line_height is not None:
            p.style.line_height = line_height
        if align is not None:
            p.style.align = align
        if multiline is not None:
            p.style.multiline = multiline
        self._changed()
        return True

    def set_rect(self, placement_id: str, rect: Rect) -> bool:
        """Write a new rect without recording an undo step (gesture commits)."""
        p = self._index.get(placement_id)
        if p is None:
            return False
        p.rect = clamp_rect(rect)
        self._changed()
        return True

    def move(self, placement_id: str, rect: Rect) -> bool:
        return self.set_rect(placement_id, rect)

    def resize(self, placement_id: str, rect: Rect) -> bool:
        return self.set_rect(placement_id, rect)

    def delete(self, placement_id: str) -> bool:
        p = self._index.get(placement_id)
        if p is None:
            return False
        self._record()
        self._items.remove(p)
        del self._index[placement_id]
        logger.debug("Deleted placement %s", placement_id)
        self._changed()
        if self._selected_id == placement_id:
            self._selected_id = None
            self._selection_changed()
        return True

    def remove_field(self, field_key: str) -> int:
        """Delete every placement bound to *field_key*; return how many went."""
        doomed = [p.id for p in self._items if p.field_key == field_key]
        if not doomed:
            return 0
        self._record()
        self._items = [p for p in self._items if p.field_key != field_key]
        for pid in doomed:
            del self._index[pid]
        self._changed()
        if self._selected_id in doomed:
            self._selected_id = None
            self._selection_changed()
        return len(doomed)

    def select(self, placement_id: Optional[str]) -> None:
        """Select *placement_id*; unknown ids count as no selection."""
        if placement_id is not None and placement_id not in self._index:
            placement_id = None
        if placement_id == self.selected_id:
            return
        self._selected_id = placement_id
        self._selection_changed()

    def replace_all(self, placements: List[Placement]) -> None:
        """Wholesale replacement (load / server response).  Clears history."""
        self._load(placements)
        self._undo.clear()
        self._redo.clear()
        self._changed()
        if self._selected_id is not None and self._selected_id not in self._index:
            self._selected_id = None
            self._selection_changed()

    def _load(self, placements: List[Placement]) -> None:
        index: Dict[str, Placement] = {}
        for p in placements:
            if p.id in index:
                raise ValueError(f"Duplicate placement id: {p.id}")
            p.rect = clamp_rect(p.rect)
            index[p.id] = p
        self._items = list(placements)
        self._index = index

    # ── Undo / redo ──────────────────────────────────────────────────────────

    def snapshot(self) -> Snapshot:
        return [p.clone() for p in self._items]

    def push_undo(self, snapshot: Snapshot) -> None:
        """Record *snapshot* (taken before a change) as one undo step."""
        self._undo.append(snapshot)
        if len(self._undo) > self._history_limit:
            self._undo.pop(0)
        self._redo.clear()

    def _record(self) -> None:
        self.push_undo(self.snapshot())

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.snapshot())
        self._restore(self._undo.pop())
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.snapshot())
        self._restore(self._redo.pop())
        return True

    def _restore(self, snapshot: Snapshot) -> None:
        self._load([p.clone() for p in snapshot])
        self._changed()
        if self._selected_id is not None and self._selected_id not in self._index:
            self._selected_id = None
            self._selection_changed()
