"""Placement overlay: draw placement boxes on top of the rendered page.

All helpers take the *page_size* of the pixmap as displayed (logical pixels),
the same size the interaction controller converts with, so a box drawn here
lines up with the rect the controller would commit.
"""
from typing import Dict, List, Optional, Tuple

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QFont, QPainter, QPen, QPixmap

from placement_designer.geometry import to_pixels
from placement_designer.models import PageSize, PixelRect, Placement

HANDLE_SIZE = 8             # side length (px) of a resize handle square
_LABEL_FONT_PT = 8

_BLUE = QColor(37, 99, 235)
_FILL = QColor(37, 99, 235, 28)
_SELECTED_FILL = QColor(37, 99, 235, 56)

_CURSORS = {
    "n": Qt.CursorShape.SizeVerCursor, "s": Qt.CursorShape.SizeVerCursor,
    "e": Qt.CursorShape.SizeHorCursor, "w": Qt.CursorShape.SizeHorCursor,
    "nw": Qt.CursorShape.SizeFDiagCursor, "se": Qt.CursorShape.SizeFDiagCursor,
    "ne": Qt.CursorShape.SizeBDiagCursor, "sw": Qt.CursorShape.SizeBDiagCursor,
}


# ── Geometry helpers ─────────────────────────────────────────────────────────

def handle_centers(box: PixelRect) -> Dict[str, Tuple[float, float]]:
    """Center point of each of the 8 resize handles of *box*."""
    cx, cy = box.center()
    return {
        "nw": (box.left, box.top), "n": (cx, box.top), "ne": (box.right, box.top),
        "w": (box.left, cy), "e": (box.right, cy),
        "sw": (box.left, box.bottom), "s": (cx, box.bottom), "se": (box.right, box.bottom),
    }


def hit_test(placements: List[Placement], page_size: PageSize, x: float, y: float,
             selected_id: Optional[str] = None) -> Optional[Tuple[str, Optional[str]]]:
    """Return *(placement_id, handle)* under *(x, y)*, or None.

    Handles are only live on the selected placement and win over bodies.
    Bodies are tested top-most (last drawn) first; *handle* is None for a body
    hit.
    """
    half = HANDLE_SIZE / 2
    if selected_id is not None:
        for p in placements:
            if p.id != selected_id:
                continue
            box = to_pixels(p.rect, page_size)
            for direction, (hx, hy) in handle_centers(box).items():
                if abs(x - hx) <= half and abs(y - hy) <= half:
                    return p.id, direction
    for p in reversed(placements):
        box = to_pixels(p.rect, page_size)
        if box.left <= x <= box.right and box.top <= y <= box.bottom:
            return p.id, None
    return None


def cursor_for(handle: Optional[str]) -> Qt.CursorShape:
    if handle is None:
        return Qt.CursorShape.SizeAllCursor
    return _CURSORS[handle]


# ── Drawing ──────────────────────────────────────────────────────────────────

def draw_placements(pixmap: QPixmap, placements: List[Placement],
                    page_size: PageSize, selected_id: Optional[str] = None) -> QPixmap:
    """Return a *copy* of *pixmap* with every placement box drawn on it."""
    result = pixmap.copy()
    painter = QPainter(result)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    font = QFont()
    font.setPointSize(_LABEL_FONT_PT)
    painter.setFont(font)
    for p in placements:
        _draw_one(painter, p, to_pixels(p.rect, page_size), p.id == selected_id)
    painter.end()
    return result


def _draw_one(painter: QPainter, p: Placement, box: PixelRect, selected: bool):
    rect = QRectF(box.left, box.top, box.width, box.height)
    pen = QPen(_BLUE, 2 if selected else 1,
               Qt.PenStyle.SolidLine if selected else Qt.PenStyle.DashLine)
    painter.setPen(pen)
    painter.setBrush(_SELECTED_FILL if selected else _FILL)
    painter.drawRect(rect)

    painter.setPen(_BLUE)
    align = {
        "left": Qt.AlignmentFlag.AlignLeft,
        "center": Qt.AlignmentFlag.AlignHCenter,
        "right": Qt.AlignmentFlag.AlignRight,
    }.get(p.style.align, Qt.AlignmentFlag.AlignLeft)
    painter.drawText(rect.adjusted(3, 1, -3, -1),
                     align | Qt.AlignmentFlag.AlignVCenter, p.display_label())

    if not selected:
        return
    painter.setPen(QPen(_BLUE, 1))
    painter.setBrush(QColor("white"))
    half = HANDLE_SIZE / 2
    for hx, hy in handle_centers(box).values():
        painter.drawRect(QRectF(hx - half, hy - half, HANDLE_SIZE, HANDLE_SIZE))
