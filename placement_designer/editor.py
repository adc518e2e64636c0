"""Template editor: the one place every designer action goes through.

Toolbar buttons, the field list, the inspector and the keyboard shortcuts all
call the same methods here, so a paste from the menu and a paste from Ctrl+V
behave identically.  User feedback is delivered through notification
callbacks ``(level, message)``.
"""
import logging
from typing import Callable, List, Optional

from placement_designer.clipboard import Clipboard, new_placement_id
from placement_designer.interaction import InteractionController
from placement_designer.models import (
    DesignerSettings, Placement, PlacementStyle, VisibleRegion,
)
from placement_designer.persistence import PersistenceError, PlacementRepository
from placement_designer.placement_generator import next_placement_rect
from placement_designer.placement_store import PlacementStore
from placement_designer.shortcuts import ShortcutRouter
from placement_designer.viewport import ViewportSizing

logger = logging.getLogger(__name__)

INFO = "info"
SUCCESS = "success"
WARNING = "warning"
ERROR = "error"


class TemplateEditor:
    def __init__(self, template_id: str, repository: PlacementRepository,
                 settings: Optional[DesignerSettings] = None,
                 viewport: Optional[ViewportSizing] = None,
                 id_generator: Callable[[], str] = new_placement_id):
        self.template_id = template_id
        self.settings = settings or DesignerSettings()
        self.viewport = viewport or ViewportSizing(self.settings)
        self.store = PlacementStore(history_limit=self.settings.history_limit)
        self.clipboard = Clipboard()
        self.controller = InteractionController(
            self.store, lambda: self.viewport.page_size, self.settings,
        )
        self.shortcuts = ShortcutRouter(self)
        self._repository = repository
        self._id_generator = id_generator
        self._page_index = 0
        self._notify_listeners: List[Callable[[str, str], None]] = []

    # ── Notifications ────────────────────────────────────────────────────────

    def add_notification_listener(self, callback: Callable[[str, str], None]) -> None:
        self._notify_listeners.append(callback)

    def _notify(self, level: str, message: str) -> None:
        logger.info("[%s] %s", level, message)
        for cb in list(self._notify_listeners):
            cb(level, message)

    # ── Page / selection ─────────────────────────────────────────────────────

    @property
    def page_index(self) -> int:
        return self._page_index

    def set_page(self, page_index: int) -> None:
        """Make *page_index* the active page (bounds are checked by the caller)."""
        self._page_index = max(0, page_index)
        self.controller.pointer_cancel()
        self.viewport.on_page_change(self._page_index)

    @property
    def selected_id(self) -> Optional[str]:
        return self.store.selected_id

    def page_placements(self) -> List[Placement]:
        return self.store.on_page(self._page_index)

    def select(self, placement_id: Optional[str]) -> None:
        self.store.select(placement_id)

    def deselect(self) -> bool:
        if self.store.selected_id is None:
            return False
        self.store.select(None)
        return True

    # ── Placement actions ────────────────────────────────────────────────────

    def add_field(self, field_key: str, visible: Optional[VisibleRegion] = None,
                  label: str = "") -> Placement:
        """Spawn a placement for *field_key* on the active page and select it."""
        rect = next_placement_rect(
            self.page_placements(), self.viewport.page_size, visible, self.settings,
        )
        placement = Placement(
            id=self._id_generator(),
            field_key=field_key,
            page_index=self._page_index,
            rect=rect,
            style=PlacementStyle(),
            label=label,
        )
        self.store.add(placement)
        self.store.select(placement.id)
        return placement

    def copy_selected(self) -> bool:
        selected = self.store.selected
        if selected is None:
            return False
        self.clipboard.copy(selected)
        self._notify(INFO, f"Copied {selected.display_label()}")
        return True

    def paste(self) -> bool:
        """Paste the clipboard onto the active page, shifted by the paste offset."""
        offset = self.settings.paste_offset
        pasted = self.clipboard.paste(self._id_generator, offset, offset)
        if pasted is None:
            self._notify(WARNING, "Nothing to paste: copy a placement first")
            return False
        pasted.page_index = self._page_index
        self.store.add(pasted)
        self.store.select(pasted.id)
        self._notify(SUCCESS, f"Pasted {pasted.display_label()}")
        return True

    def delete_selected(self) -> bool:
        selected = self.store.selected
        if selected is None:
            return False
        self.store.delete(selected.id)
        self._notify(INFO, f"Deleted {selected.display_label()}")
        return True

    def update_selected(self, **patch) -> bool:
        """Inspector edit of the selected placement (label / style keywords)."""
        selected_id = self.store.selected_id
        if selected_id is None:
            return False
        return self.store.update(selected_id, **patch)

    def remove_field(self, field_key: str) -> int:
        """The catalog dropped *field_key*: remove every placement bound to it."""
        return self.store.remove_field(field_key)

    def undo(self) -> bool:
        if self.controller.active:
            return False
        return self.store.undo()

    def redo(self) -> bool:
        if self.controller.active:
            return False
        return self.store.redo()

    # ── Persistence ──────────────────────────────────────────────────────────

    def load(self) -> bool:
        try:
            placements = self._repository.load_placements(self.template_id)
            self.store.replace_all(placements)
        except (PersistenceError, ValueError) as exc:
            logger.error("Load failed for template %s: %s", self.template_id, exc)
            self._notify(ERROR, str(exc))
            return False
        return True

    def save(self) -> bool:
        """Send a snapshot of every placement; adopt the server's copy on success.

        On failure the local placements stay exactly as they were so the user
        can retry.
        """
        snapshot = self.store.snapshot()
        try:
            saved = self._repository.save_placements(self.template_id, snapshot)
            self.store.replace_all(saved)
        except (PersistenceError, ValueError) as exc:
            logger.error("Save failed for template %s: %s", self.template_id, exc)
            self._notify(ERROR, str(exc))
            return False
        self._notify(SUCCESS, f"Saved {len(saved)} placement(s)")
        return True
