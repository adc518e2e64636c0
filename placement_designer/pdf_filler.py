"""Fill a template PDF by stamping field values into their placements.

Coordinate notes
----------------
Placement rects are fractions of the *visual* page, i.e. PyMuPDF's
rotation-aware ``page.rect``.  ``page.insert_text`` works in the native
(pre-rotation) user space, so every point is mapped through
``page.derotation_matrix`` and the text is rotated by the page rotation so it
reads left-to-right in a viewer.
"""
import datetime
import json
import logging
from typing import Dict, List, Optional, Tuple

import fitz

from placement_designer.geometry import to_pixels
from placement_designer.models import FieldDef, PageSize, Placement

logger = logging.getLogger(__name__)

_FONT_NAME = "helv"
_PADDING_PT = 2.0
_COLOR = (0, 0, 0)


def display_value(value, field_type: str = "text") -> str:
    """Render a field value as the text that goes on the page."""
    if value is None:
        return ""
    if field_type == "boolean":
        return "Yes" if value else "No"
    if field_type == "date":
        if isinstance(value, (datetime.date, datetime.datetime)):
            return value.isoformat()[:10]
        return str(value)
    if field_type in ("object", "array") or isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def wrap_text(font: fitz.Font, text: str, fontsize: float, max_width: float) -> List[str]:
    """Greedy word wrap; words wider than *max_width* are split by character."""
    words = text.split()
    if not words:
        return [""]
    lines: List[str] = []
    current = ""
    for word in words:
        trial = f"{current} {word}" if current else word
        if font.text_length(trial, fontsize=fontsize) <= max_width:
            current = trial
            continue
        if current:
            lines.append(current)
        if font.text_length(word, fontsize=fontsize) > max_width:
            chunk = ""
            for ch in word:
                if font.text_length(chunk + ch, fontsize=fontsize) <= max_width:
                    chunk += ch
                else:
                    if chunk:
                        lines.append(chunk)
                    chunk = ch
            current = chunk
        else:
            current = word
    if current:
        lines.append(current)
    return lines or [""]


def _x_for_align(font: fitz.Font, text: str, fontsize: float,
                 left: float, width: float, align: str) -> float:
    if align == "left":
        return left
    slack = max(0.0, width - font.text_length(text, fontsize=fontsize))
    return left + (slack / 2 if align == "center" else slack)


def _stamp(page: fitz.Page, font: fitz.Font, placement: Placement, text: str) -> None:
    pw, ph = page.rect.width, page.rect.height
    box = to_pixels(placement.rect, PageSize(pw, ph))
    style = placement.style
    fontsize = style.font_size
    text_h = (font.ascender - font.descender) * fontsize
    inner_left = box.left + _PADDING_PT
    inner_w = max(1.0, box.width - _PADDING_PT * 2)
    derot = page.derotation_matrix

    def put(line: str, baseline: float) -> None:
        x = _x_for_align(font, line, fontsize, inner_left, inner_w, style.align)
        page.insert_text(fitz.Point(x, baseline) * derot, line,
                         fontsize=fontsize, fontname=_FONT_NAME,
                         color=_COLOR, rotate=page.rotation)

    if not style.multiline:
        line = " ".join(text.split())
        # vertically centred in the box
        offset = max(_PADDING_PT, (box.height - text_h) / 2)
        put(line, box.bottom - offset)
        return

    baseline = box.top + text_h + _PADDING_PT
    for line in wrap_text(font, text, fontsize, inner_w):
        if baseline > box.bottom - _PADDING_PT:
            break
        put(line, baseline)
        baseline += style.line_height


def fill_template(pdf_path: str, placements: List[Placement], values: Dict[str, object],
                  output_path: str,
                  fields: Optional[List[FieldDef]] = None) -> Tuple[int, int]:
    """Open *pdf_path*, write *values* into the placements, save to *output_path*.

    Placements whose field has no value are left blank.  Placements pointing
    past the last page are skipped.  Returns *(filled, skipped)*.
    """
    types = {f.key: f.type for f in (fields or [])}
    font = fitz.Font(_FONT_NAME)
    filled = skipped = 0
    doc = fitz.open(pdf_path)
    try:
        logger.info("Filling %s: %d placement(s), %d page(s)",
                    pdf_path, len(placements), doc.page_count)
        for p in placements:
            if p.page_index >= doc.page_count:
                logger.warning("Skipping placement %s: page %d out of range",
                               p.id, p.page_index)
                skipped += 1
                continue
            value = values.get(p.field_key)
            if value is None or value == "":
                continue
            text = display_value(value, types.get(p.field_key, "text"))
            _stamp(doc[p.page_index], font, p, text)
            filled += 1
        doc.save(output_path, garbage=0, deflate=True)
    finally:
        doc.close()
    logger.info("Saved %s (filled=%d skipped=%d)", output_path, filled, skipped)
    return filled, skipped
