"""Center panel: the template page with its placement boxes.

PDF rendering backend
---------------------
Uses **PyMuPDF (fitz)**.  The page is rasterised at the width the viewport
asks for (container width, bounded), so one PDF point does not map to a fixed
number of screen pixels; placement rects are normalized for that reason.
"""
import time
from typing import Dict, Optional, Tuple

import fitz  # pymupdf
from PySide6.QtCore import QEvent, QObject, QPoint, Qt, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import (
    QAbstractSpinBox, QApplication, QComboBox, QHBoxLayout, QLabel, QLineEdit,
    QPlainTextEdit, QPushButton, QScrollArea, QTextEdit, QVBoxLayout, QWidget,
)

from placement_designer import data_store, overlay
from placement_designer.editor import TemplateEditor
from placement_designer.models import VisibleRegion
from placement_designer.shortcuts import (
    KEY_BACKSPACE, KEY_DELETE, KEY_ESCAPE, KeyStroke, ShortcutRouter,
)

_NAMED_KEYS = {
    Qt.Key.Key_Delete.value: KEY_DELETE,
    Qt.Key.Key_Backspace.value: KEY_BACKSPACE,
    Qt.Key.Key_Escape.value: KEY_ESCAPE,
}


def text_input_focused() -> bool:
    """True while keys typed now would edit text (line edits, spin boxes, ...)."""
    fw = QApplication.focusWidget()
    if isinstance(fw, (QLineEdit, QPlainTextEdit, QAbstractSpinBox)):
        return True
    if isinstance(fw, QComboBox):
        return fw.isEditable()
    return isinstance(fw, QTextEdit) and not fw.isReadOnly()


def key_stroke_from_event(event) -> Optional[KeyStroke]:
    """Translate a QKeyEvent into a KeyStroke, or None for keys we never route."""
    key = int(event.key())
    if key in _NAMED_KEYS:
        name = _NAMED_KEYS[key]
    elif Qt.Key.Key_A.value <= key <= Qt.Key.Key_Z.value:
        name = chr(key).lower()
    else:
        return None
    mods = event.modifiers()
    return KeyStroke(
        key=name,
        ctrl=bool(mods & Qt.KeyboardModifier.ControlModifier),
        meta=bool(mods & Qt.KeyboardModifier.MetaModifier),
        shift=bool(mods & Qt.KeyboardModifier.ShiftModifier),
        alt=bool(mods & Qt.KeyboardModifier.AltModifier),
        text_input_focused=text_input_focused(),
    )


class ShortcutFilter(QObject):
    """App-level event filter feeding key presses to the shortcut router.

    Installed while the designer is on screen (see :meth:`install` /
    :meth:`remove`); the router is enabled for exactly that span.
    """

    def __init__(self, router: ShortcutRouter, parent=None):
        super().__init__(parent)
        self._router = router

    def install(self) -> None:
        QApplication.instance().installEventFilter(self)
        self._router.enable()

    def remove(self) -> None:
        self._router.disable()
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self)

    def eventFilter(self, obj, event):
        if event.type() != QEvent.Type.KeyPress:
            return False
        stroke = key_stroke_from_event(event)
        if stroke is None:
            return False
        return self._router.handle(stroke)


class PageCanvas(QLabel):
    """QLabel that emits mouse signals in page-local pixel coordinates."""

    pressed  = Signal(float, float)
    moved    = Signal(float, float)
    released = Signal(float, float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.pressed.emit(pos.x(), pos.y())
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        pos = event.position()
        self.moved.emit(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.released.emit(pos.x(), pos.y())
        super().mouseReleaseEvent(event)


class PageView(QWidget):
    page_changed = Signal(int)

    def __init__(self, editor: TemplateEditor, parent=None):
        super().__init__(parent)
        self._editor = editor
        self._doc: Optional[fitz.Document] = None
        self._raw_pixmap: Optional[QPixmap] = None
        # { page_index: QPixmap } at a single width / dpr
        self._page_cache: Dict[int, QPixmap] = {}
        self._cache_width: float = 0.0
        self._cache_dpr: float = 0.0

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # ── Page navigation ──────────────────────────────────────────────────
        nav = QHBoxLayout()
        nav.setContentsMargins(4, 4, 4, 4)
        self._prev_btn = QPushButton("◀")
        self._prev_btn.setToolTip("Previous page")
        self._prev_btn.setFixedWidth(32)
        self._prev_btn.clicked.connect(self.prev_page)
        nav.addWidget(self._prev_btn)

        self._page_counter = QLabel("Page — / —")
        self._page_counter.setFixedWidth(90)
        self._page_counter.setAlignment(Qt.AlignmentFlag.AlignCenter)
        nav.addWidget(self._page_counter)

        self._next_btn = QPushButton("▶")
        self._next_btn.setToolTip("Next page")
        self._next_btn.setFixedWidth(32)
        self._next_btn.clicked.connect(self.next_page)
        nav.addWidget(self._next_btn)
        nav.addStretch()
        layout.addLayout(nav)

        # ── Scroll area ──────────────────────────────────────────────────────
        self._scroll = QScrollArea()
        self._scroll.setAlignment(Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop)
        self._scroll.setWidgetResizable(False)

        self._canvas = PageCanvas()
        self._canvas.pressed.connect(self._on_pressed)
        self._canvas.moved.connect(self._on_moved)
        self._canvas.released.connect(self._on_released)
        self._scroll.setWidget(self._canvas)
        layout.addWidget(self._scroll, stretch=1)

        # Container width drives the render width.
        self._scroll.viewport().installEventFilter(self)

        viewport = editor.viewport
        viewport.set_measure(self._measure)
        viewport.add_width_listener(lambda _w: self._render_page())
        editor.store.add_change_listener(self._update_display)
        editor.store.add_selection_listener(lambda _id: self._update_display())

        self._show_placeholder()

    # ── Public API ────────────────────────────────────────────────────────────

    def load_pdf(self, pdf_path: Optional[str]) -> bool:
        if self._doc:
            self._doc.close()
            self._doc = None
        self._page_cache.clear()
        self._editor.controller.pointer_cancel()
        if not pdf_path:
            self._show_placeholder()
            return False
        try:
            self._doc = fitz.open(pdf_path)
            if self._doc.page_count == 0:
                raise ValueError("PDF has no pages")
        except (RuntimeError, ValueError, OSError) as exc:
            data_store.dbg(f"Failed to open PDF: {pdf_path}: {exc}")
            if self._doc:
                self._doc.close()
                self._doc = None
            self._show_placeholder(f"Cannot display this PDF.\n({pdf_path})")
            return False
        data_store.dbg(f"PDF loaded: {pdf_path} ({self._doc.page_count} page(s))")
        self.go_to_page(0)
        return True

    def page_count(self) -> int:
        return self._doc.page_count if self._doc else 0

    def go_to_page(self, page_index: int):
        if not self._doc or not 0 <= page_index < self._doc.page_count:
            return
        self._editor.set_page(page_index)
        self._render_page()
        self.page_changed.emit(page_index)

    def prev_page(self):
        self.go_to_page(self._editor.page_index - 1)

    def next_page(self):
        self.go_to_page(self._editor.page_index + 1)

    def visible_region(self) -> VisibleRegion:
        """On-screen part of the page, in page-local pixels."""
        vp = self._scroll.viewport()
        top_left = self._canvas.mapFrom(vp, QPoint(0, 0))
        return VisibleRegion(top_left.x(), top_left.y(), vp.width(), vp.height())

    # ── Sizing ────────────────────────────────────────────────────────────────

    def eventFilter(self, obj, event):
        if obj is self._scroll.viewport() and event.type() == QEvent.Type.Resize:
            self._editor.viewport.on_container_resize(event.size().width())
        return super().eventFilter(obj, event)

    def _measure(self) -> Optional[Tuple[float, float]]:
        if self._raw_pixmap is None:
            return None
        dpr = self._raw_pixmap.devicePixelRatio()
        return self._raw_pixmap.width() / dpr, self._raw_pixmap.height() / dpr

    # ── Rendering ─────────────────────────────────────────────────────────────

    def _show_placeholder(self, message: str = "No template loaded.\nOpen a project."):
        self._raw_pixmap = None
        self._canvas.setPixmap(QPixmap())
        self._canvas.setText(message)
        self._canvas.resize(400, 300)
        self._page_counter.setText("Page — / —")
        self._prev_btn.setEnabled(False)
        self._next_btn.setEnabled(False)

    def _render_page(self):
        if not self._doc:
            return
        idx = self._editor.page_index
        n = self._doc.page_count
        self._page_counter.setText(f"Page {idx + 1} / {n}")
        self._prev_btn.setEnabled(idx > 0)
        self._next_btn.setEnabled(idx < n - 1)

        width = self._editor.viewport.page_width
        dpr = self.devicePixelRatio()
        if self._cache_width != width or self._cache_dpr != dpr:
            self._page_cache.clear()
            self._cache_width = width
            self._cache_dpr = dpr
        t0 = time.perf_counter()
        raw = self._page_cache.get(idx)
        if raw is None:
            page = self._doc[idx]
            zoom = width / page.rect.width
            mat = fitz.Matrix(zoom * dpr, zoom * dpr)
            pix = page.get_pixmap(matrix=mat, alpha=False)
            img = QImage(pix.samples, pix.width, pix.height,
                         pix.stride, QImage.Format.Format_RGB888)
            raw = QPixmap.fromImage(img)
            raw.setDevicePixelRatio(dpr)
            self._page_cache[idx] = raw
        self._raw_pixmap = raw
        w, h = self._measure()
        self._canvas.setText("")
        self._canvas.resize(int(w), int(h))
        data_store.dbg(f"Page {idx + 1} rendered at {w:.0f}x{h:.0f} "
                       f"in {time.perf_counter() - t0:.3f}s")
        self._editor.viewport.on_render_complete(w, h)
        self._update_display()

    def _update_display(self):
        if self._raw_pixmap is None:
            return
        display = overlay.draw_placements(
            self._raw_pixmap, self._editor.page_placements(),
            self._editor.viewport.page_size, self._editor.selected_id,
        )
        self._canvas.setPixmap(display)

    # ── Pointer handling ──────────────────────────────────────────────────────

    def _hit(self, x: float, y: float):
        return overlay.hit_test(
            self._editor.page_placements(), self._editor.viewport.page_size,
            x, y, self._editor.selected_id,
        )

    def _on_pressed(self, x: float, y: float):
        if self._raw_pixmap is None:
            return
        hit = self._hit(x, y)
        if hit is None:
            self._editor.deselect()
            return
        placement_id, handle = hit
        self._editor.controller.pointer_down(placement_id, x, y, handle)

    def _on_moved(self, x: float, y: float):
        controller = self._editor.controller
        if controller.active:
            controller.pointer_move(x, y)
            return
        hit = self._hit(x, y)
        if hit is None:
            self._canvas.unsetCursor()
        else:
            self._canvas.setCursor(overlay.cursor_for(hit[1]))

    def _on_released(self, x: float, y: float):
        self._editor.controller.pointer_up(x, y)
